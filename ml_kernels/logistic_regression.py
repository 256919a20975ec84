"""
Logistic Regression from scratch using batch Gradient Descent.

Binary classifier on two features:

    z = w1*x1 + w2*x2 + b
    p = sigmoid(z)

Loss: mean binary cross-entropy, with a small epsilon inside each log so that
predictions of exactly 0 or 1 stay finite:

    L = -(1/n) * sum(y*log(p + eps) + (1-y)*log(1 - p + eps))

Gradients: dL/dw_j = mean((p - y) * x_j), dL/db = mean(p - y)
"""

import numpy as np
from typing import Optional, Sequence, Tuple
from dataclasses import dataclass

from .activations import sigmoid
from .types import Sample, TrainingHistory, check_Xy, samples_to_arrays

LOG_EPSILON = 1e-15


@dataclass(frozen=True)
class LogisticStep:
    """Snapshot of one gradient descent iteration."""
    step: int
    w1: float
    w2: float
    b: float
    loss: float
    dw1: float
    dw2: float
    db: float

    @property
    def weights(self) -> Tuple[float, float, float]:
        return (self.w1, self.w2, self.b)


def binary_cross_entropy(w1: float, w2: float, b: float,
                         X: np.ndarray, y: np.ndarray) -> float:
    """Mean BCE of the model on (X, y). 0 for an empty dataset."""
    if len(X) == 0:
        return 0.0
    p = sigmoid(w1 * X[:, 0] + w2 * X[:, 1] + b)
    losses = -y * np.log(p + LOG_EPSILON) - (1 - y) * np.log(1 - p + LOG_EPSILON)
    return float(np.mean(losses))


def logistic_gradients(w1: float, w2: float, b: float,
                       X: np.ndarray, y: np.ndarray) -> Tuple[float, float, float]:
    """Mean gradients of the BCE loss."""
    if len(X) == 0:
        return 0.0, 0.0, 0.0
    error = sigmoid(w1 * X[:, 0] + w2 * X[:, 1] + b) - y
    return (float(np.mean(error * X[:, 0])),
            float(np.mean(error * X[:, 1])),
            float(np.mean(error)))


def decision_boundary(w1: float, w2: float, b: float, threshold: float = 0.5,
                      eps: float = 1e-10) -> Optional[Tuple[float, float]]:
    """
    Line where the predicted probability equals ``threshold``.

    Solves w1*x1 + w2*x2 + b = logit(threshold) for x2 = slope*x1 + intercept.

    Returns:
        (slope, intercept), or None when w2 is ~0 (vertical or no boundary)
    """
    if abs(w2) < eps:
        return None
    logit = np.log(threshold / (1.0 - threshold))
    slope = -w1 / w2
    intercept = (logit - b) / w2
    return float(slope), float(intercept)


class LogisticRegressionGD:
    """
    Two-feature logistic regression trained with batch gradient descent.

    Starts from w1 = w2 = b = 0. Like the linear kernel, the history holds
    one entry per iteration recorded before the update plus a final entry
    with zero gradients.
    """

    def __init__(self, learning_rate: float = 0.1, max_iterations: int = 200,
                 threshold: float = 0.5, verbose: int = 0):
        """
        Initialize Logistic Regression.

        Args:
            learning_rate: Step size alpha (> 0)
            max_iterations: Number of gradient descent updates (>= 1)
            threshold: Decision threshold in (0, 1): P >= threshold -> class 1
            verbose: 0=silent, 1=progress every 10% of iterations
        """
        if learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {learning_rate}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        if not 0 < threshold < 1:
            raise ValueError(f"threshold must be in (0, 1), got {threshold}")

        self.learning_rate = learning_rate
        self.max_iterations = int(max_iterations)
        self.threshold = threshold
        self.verbose = verbose

        self.history_: Optional[TrainingHistory] = None
        self.weights: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def fit(self, X: np.ndarray, y: np.ndarray) -> 'LogisticRegressionGD':
        """
        Run gradient descent.

        Args:
            X: Features of shape (n_samples, 2)
            y: Binary labels (0/1) of shape (n_samples,)

        Returns:
            self
        """
        X, y = check_Xy(X, y)
        y = y.astype(np.float64)

        lr = self.learning_rate
        w1, w2, b = 0.0, 0.0, 0.0
        steps = []
        report_every = max(1, self.max_iterations // 10)

        for i in range(self.max_iterations):
            dw1, dw2, db = logistic_gradients(w1, w2, b, X, y)
            loss = binary_cross_entropy(w1, w2, b, X, y)
            steps.append(LogisticStep(step=i, w1=w1, w2=w2, b=b, loss=loss,
                                      dw1=dw1, dw2=dw2, db=db))

            w1 -= lr * dw1
            w2 -= lr * dw2
            b -= lr * db

            if self.verbose >= 1 and (i + 1) % report_every == 0:
                print(f"Iteration {i+1}/{self.max_iterations} - loss: {loss:.6f}")

        steps.append(LogisticStep(step=self.max_iterations, w1=w1, w2=w2, b=b,
                                  loss=binary_cross_entropy(w1, w2, b, X, y),
                                  dw1=0.0, dw2=0.0, db=0.0))

        self.weights = (w1, w2, b)
        self.history_ = TrainingHistory(steps)
        return self

    def _weights_at(self, step: Optional[int]) -> Tuple[float, float, float]:
        if self.history_ is None:
            raise ValueError("Model not fitted. Call fit() first.")
        if step is None:
            return self.weights
        return self.history_[step].weights

    def predict_proba(self, X: np.ndarray, step: Optional[int] = None) -> np.ndarray:
        """
        Probability of class 1.

        Args:
            X: Features of shape (n_samples, 2)
            step: History step whose weights to use (default: final weights)
        """
        w1, w2, b = self._weights_at(step)
        X = np.asarray(X, dtype=np.float64).reshape(-1, 2)
        return sigmoid(w1 * X[:, 0] + w2 * X[:, 1] + b)

    def predict(self, X: np.ndarray, step: Optional[int] = None) -> np.ndarray:
        """Class labels using the decision threshold."""
        return (self.predict_proba(X, step) >= self.threshold).astype(np.int64)

    def score(self, X: np.ndarray, y: np.ndarray, step: Optional[int] = None) -> float:
        """Classification accuracy (0 for an empty dataset)."""
        X, y = check_Xy(X, y)
        if len(y) == 0:
            return 0.0
        return float(np.mean(self.predict(X, step) == y))

    def boundary(self, step: Optional[int] = None) -> Optional[Tuple[float, float]]:
        """Decision boundary line at the given step, None when undefined."""
        w1, w2, b = self._weights_at(step)
        return decision_boundary(w1, w2, b, self.threshold)


def fit_logistic_regression(points: Sequence[Sample], learning_rate: float,
                            max_iterations: int,
                            decision_threshold: float = 0.5) -> TrainingHistory:
    """Train on a list of binary Samples and return the descent history."""
    X, y = samples_to_arrays(points)
    model = LogisticRegressionGD(learning_rate=learning_rate,
                                 max_iterations=max_iterations,
                                 threshold=decision_threshold)
    return model.fit(X, y).history_
