"""
K-Nearest Neighbors (KNN) Classifier from scratch.

Implements:
- Euclidean, Manhattan and Chebyshev distances
- K-nearest neighbor voting with stable ordering of equal distances
- Distance-weighted voting option (weight = 1 / (d + 1e-4))
- Leave-one-out accuracy

KNN is a non-parametric, instance-based learning algorithm.
"""

import numpy as np
from typing import Any, Callable, Dict, List, Optional, Sequence
from dataclasses import dataclass, field

from .types import Sample, as_feature_vector, check_Xy, samples_to_arrays

WEIGHT_EPSILON = 1e-4


def euclidean_distance(X: np.ndarray, q: np.ndarray) -> np.ndarray:
    """d = sqrt(sum((x_i - q_i)^2)) for every row of X."""
    return np.sqrt(np.sum((X - q) ** 2, axis=1))


def manhattan_distance(X: np.ndarray, q: np.ndarray) -> np.ndarray:
    """d = sum(|x_i - q_i|)."""
    return np.sum(np.abs(X - q), axis=1)


def chebyshev_distance(X: np.ndarray, q: np.ndarray) -> np.ndarray:
    """d = max(|x_i - q_i|)."""
    return np.max(np.abs(X - q), axis=1)


DISTANCE_METRICS: Dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    'euclidean': euclidean_distance,
    'manhattan': manhattan_distance,
    'chebyshev': chebyshev_distance,
}


def get_metric(name: str) -> Callable[[np.ndarray, np.ndarray], np.ndarray]:
    try:
        return DISTANCE_METRICS[name]
    except KeyError:
        raise ValueError(
            f"Unknown metric '{name}'. Expected one of {sorted(DISTANCE_METRICS)}"
        ) from None


@dataclass(frozen=True)
class Neighbor:
    """One of the k nearest training samples."""
    index: int
    distance: float
    label: int


@dataclass(frozen=True)
class KNNResult:
    """Outcome of classifying a single query point."""
    predicted_class: int
    neighbors: List[Neighbor]
    vote_tally: Dict[int, float] = field(default_factory=dict)


def tally_winner(tally: Dict[int, float], default: int = 0) -> int:
    """
    Class with the highest vote total.

    Ties go to the lowest class label; an empty tally yields ``default``.
    """
    if not tally:
        return default
    best = max(tally.values())
    return min(label for label, votes in tally.items() if votes == best)


def _classify(X: np.ndarray, y: np.ndarray, q: np.ndarray, k: int,
              metric: Callable, weighted: bool) -> KNNResult:
    distances = metric(X, q)
    order = np.argsort(distances, kind='stable')[:min(k, len(distances))]

    neighbors = []
    tally: Dict[int, float] = {}
    for idx in order:
        dist = float(distances[idx])
        label = int(y[idx])
        neighbors.append(Neighbor(index=int(idx), distance=dist, label=label))
        weight = 1.0 / (dist + WEIGHT_EPSILON) if weighted else 1.0
        tally[label] = tally.get(label, 0.0) + weight

    return KNNResult(predicted_class=tally_winner(tally),
                     neighbors=neighbors, vote_tally=tally)


class KNeighborsClassifier:
    """
    K-Nearest Neighbors Classifier.

    Classifies samples based on the (optionally distance-weighted) majority
    class among the k nearest training samples. When k exceeds the number
    of training samples, all of them are used.
    """

    def __init__(self,
                 n_neighbors: int = 3,
                 metric: str = 'euclidean',
                 weighted: bool = False):
        """
        Initialize KNN Classifier.

        Args:
            n_neighbors: Number of neighbors to use (k >= 1)
            metric: 'euclidean', 'manhattan' or 'chebyshev'
            weighted: If True, each vote counts 1 / (distance + 1e-4)
        """
        if n_neighbors < 1:
            raise ValueError(f"n_neighbors must be >= 1, got {n_neighbors}")

        self.n_neighbors = int(n_neighbors)
        self.metric = metric
        self.weighted = weighted
        self._metric_fn = get_metric(metric)

        self.X_train: Optional[np.ndarray] = None
        self.y_train: Optional[np.ndarray] = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> 'KNeighborsClassifier':
        """
        Store training data (lazy learning).

        Args:
            X: Training features (n_samples, 2)
            y: Training labels (n_samples,)

        Returns:
            self
        """
        self.X_train, y = check_Xy(X, y)
        self.y_train = y.astype(np.int64)
        return self

    def _check_fitted(self):
        if self.X_train is None:
            raise ValueError("Model not fitted. Call fit() first.")

    def classify(self, query: Any) -> KNNResult:
        """
        Classify one query point.

        Args:
            query: Point, Sample, (x1, x2) tuple or array

        Returns:
            KNNResult with the prediction, neighbors sorted by ascending
            distance, and the per-class vote totals
        """
        self._check_fitted()
        return _classify(self.X_train, self.y_train, as_feature_vector(query),
                         self.n_neighbors, self._metric_fn, self.weighted)

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Predict class labels for every row of X."""
        self._check_fitted()
        X = np.asarray(X, dtype=np.float64).reshape(-1, self.X_train.shape[1])
        return np.array([self.classify(x).predicted_class for x in X], dtype=np.int64)

    def score(self, X: np.ndarray, y: np.ndarray) -> float:
        """Calculate accuracy."""
        X, y = check_Xy(X, y)
        if len(y) == 0:
            return 0.0
        return float(np.mean(self.predict(X) == y))

    def kneighbors(self, query: Any) -> List[Neighbor]:
        """Nearest neighbors of a single query point."""
        return self.classify(query).neighbors

    def leave_one_out_accuracy(self) -> float:
        """
        Leave-one-out accuracy on the training set.

        Each point is classified against every other point (excluded by
        index, so duplicates elsewhere still count). Returns 0 when the
        training set has k or fewer points.
        """
        self._check_fitted()
        n = len(self.X_train)
        if n <= self.n_neighbors:
            return 0.0

        correct = 0
        for i in range(n):
            keep = np.arange(n) != i
            result = _classify(self.X_train[keep], self.y_train[keep], self.X_train[i],
                               self.n_neighbors, self._metric_fn, self.weighted)
            if result.predicted_class == self.y_train[i]:
                correct += 1
        return correct / n


def classify(training_set: Sequence[Sample], query: Any, k: int,
             metric: str = 'euclidean', weighted: bool = False) -> KNNResult:
    """Classify ``query`` against a list of Samples."""
    X, y = samples_to_arrays(training_set)
    return KNeighborsClassifier(k, metric, weighted).fit(X, y).classify(query)


def leave_one_out_accuracy(dataset: Sequence[Sample], k: int,
                           metric: str = 'euclidean', weighted: bool = False) -> float:
    """Leave-one-out accuracy of KNN on a list of Samples."""
    X, y = samples_to_arrays(dataset)
    return KNeighborsClassifier(k, metric, weighted).fit(X, y).leave_one_out_accuracy()
