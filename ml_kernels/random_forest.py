"""
Random Forest Classifier from scratch.

Implements:
- Bagging (Bootstrap AGGregatING) with a configurable sample ratio
- Random feature subset per tree
- Ensemble majority voting for predictions
- Out-of-bag (OOB) error estimation
- Gain-weighted feature importance

Random Forest = Bagging + Random Feature Selection + Decision Trees
"""

import numpy as np
from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass

from .decision_tree import (
    CRITERIA,
    TreeNode,
    accumulate_importance,
    build_tree,
    count_nodes,
    predict_node,
)
from .knn import tally_winner
from .types import Sample, as_feature_vector, check_Xy, samples_to_arrays

DEFAULT_FEATURE_NAMES = ('x1', 'x2')


@dataclass(frozen=True)
class ForestTree:
    """One ensemble member and its bookkeeping."""
    tree: TreeNode
    train_indices: np.ndarray   # bootstrap draws, duplicates allowed
    oob_indices: np.ndarray     # indices never drawn, ascending
    features_used: tuple        # feature indices the tree may split on

    @property
    def sample_size(self) -> int:
        return len(self.train_indices)

    @property
    def n_nodes(self) -> int:
        return count_nodes(self.tree)[0]


def round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def _check_ratio(name: str, value: float):
    if not 0 < value <= 1:
        raise ValueError(f"{name} must be in (0, 1], got {value}")


def build_forest(X: np.ndarray, y: np.ndarray,
                 n_trees: int = 7,
                 max_depth: int = 3,
                 bootstrap_ratio: float = 0.7,
                 feature_ratio: float = 1.0,
                 criterion: str = 'gini',
                 min_samples_split: int = 2,
                 random_state: Any = None) -> List[ForestTree]:
    """
    Build a forest of trees from training data.

    Args:
        X: Feature matrix (n_samples, n_features)
        y: Class labels (n_samples,)
        n_trees: Number of trees (>= 1)
        max_depth: Maximum depth of each tree
        bootstrap_ratio: Draws per tree as a fraction of n_samples, in (0, 1]
        feature_ratio: Fraction of features each tree may split on, in (0, 1]
        criterion: 'gini' or 'entropy'
        min_samples_split: Minimum samples to split a node
        random_state: Seed or numpy Generator

    Returns:
        List of ForestTree
    """
    if n_trees < 1:
        raise ValueError(f"n_trees must be >= 1, got {n_trees}")
    if max_depth < 1:
        raise ValueError(f"max_depth must be >= 1, got {max_depth}")
    if min_samples_split < 2:
        raise ValueError(f"min_samples_split must be >= 2, got {min_samples_split}")
    if criterion not in CRITERIA:
        raise ValueError(f"Unknown criterion '{criterion}'. Expected one of {CRITERIA}")
    _check_ratio('bootstrap_ratio', bootstrap_ratio)
    _check_ratio('feature_ratio', feature_ratio)
    n_trees, max_depth, min_samples_split = int(n_trees), int(max_depth), int(min_samples_split)

    n_samples, n_features = X.shape
    rng = np.random.default_rng(random_state)

    sample_size = round_half_up(n_samples * bootstrap_ratio)
    n_selected = max(1, round_half_up(n_features * feature_ratio))

    forest = []
    for _ in range(n_trees):
        # Bootstrap sample
        if n_samples > 0:
            train_indices = rng.integers(0, n_samples, size=sample_size)
        else:
            train_indices = np.zeros(0, dtype=np.int64)
        oob_mask = np.ones(n_samples, dtype=bool)
        oob_mask[train_indices] = False
        oob_indices = np.flatnonzero(oob_mask)

        # Random feature subset
        features_used = np.sort(rng.choice(n_features, size=n_selected, replace=False))

        tree = build_tree(X[train_indices], y[train_indices], max_depth,
                          min_samples_split, criterion, features_used)
        forest.append(ForestTree(tree=tree, train_indices=train_indices,
                                 oob_indices=oob_indices,
                                 features_used=tuple(int(f) for f in features_used)))

    return forest


def _vote(trees: Sequence[ForestTree], x: np.ndarray) -> int:
    votes: Dict[int, float] = {}
    for member in trees:
        pred = predict_node(member.tree, x)
        votes[pred] = votes.get(pred, 0) + 1
    return tally_winner(votes)


def forest_predict(forest: Sequence[ForestTree], point: Any) -> int:
    """Majority vote of every tree; ties go to the lowest class label."""
    return _vote(forest, as_feature_vector(point))


def out_of_bag_error(forest: Sequence[ForestTree], X: Any,
                     y: Optional[np.ndarray] = None) -> float:
    """
    OOB error estimate.

    Each point is voted on only by the trees that never drew it. Points
    without such trees are skipped; if no point has any, the error is 0.

    Args:
        forest: Trees from build_forest
        X: Feature matrix, or the list of Samples the forest was built from
        y: Class labels (omitted when X holds Samples)
    """
    if y is None:
        X, y = samples_to_arrays(X)
    correct = 0
    total = 0
    for i, (x, label) in enumerate(zip(X, y)):
        voters = [member for member in forest if i in member.oob_indices]
        if not voters:
            continue
        if _vote(voters, x) == label:
            correct += 1
        total += 1
    return 1 - correct / total if total > 0 else 0.0


def feature_importance(forest: Sequence[ForestTree],
                       feature_names: Sequence[str] = DEFAULT_FEATURE_NAMES) -> Dict[str, float]:
    """
    Gain-weighted feature importance over the whole forest.

    Sums gain * n_samples of every split node per feature and normalizes by
    the grand total. All zeros when no split ever gained information.
    """
    importances = np.zeros(len(feature_names))
    for member in forest:
        accumulate_importance(member.tree, importances)
    total = np.sum(importances)
    if total > 0:
        importances = importances / total
    return {name: float(value) for name, value in zip(feature_names, importances)}


class RandomForestClassifier:
    """
    Random Forest Classifier.

    Ensemble method combining multiple decision trees trained on:
    1. Bootstrap samples (bagging)
    2. Random subsets of features per tree

    This reduces overfitting and improves generalization.
    """

    def __init__(self,
                 n_estimators: int = 7,
                 max_depth: int = 3,
                 bootstrap_ratio: float = 0.7,
                 feature_ratio: float = 1.0,
                 criterion: str = 'gini',
                 min_samples_split: int = 2,
                 feature_names: Sequence[str] = DEFAULT_FEATURE_NAMES,
                 random_state: Optional[int] = None):
        """
        Initialize Random Forest.

        Args:
            n_estimators: Number of trees in the forest
            max_depth: Maximum depth of each tree
            bootstrap_ratio: Bootstrap sample size as a fraction of the data
            feature_ratio: Fraction of features each tree may use
            criterion: 'gini' or 'entropy'
            min_samples_split: Minimum samples to split a node
            feature_names: Names used as keys of feature_importance()
            random_state: Random seed
        """
        self.n_estimators = int(n_estimators)
        self.max_depth = int(max_depth)
        self.bootstrap_ratio = bootstrap_ratio
        self.feature_ratio = feature_ratio
        self.criterion = criterion
        self.min_samples_split = int(min_samples_split)
        self.feature_names = tuple(feature_names)
        self.random_state = random_state

        self.trees: List[ForestTree] = []
        self.oob_error_: float = 0.0
        self.feature_importances_: Optional[np.ndarray] = None
        self._fitted = False

    def fit(self, X: np.ndarray, y: np.ndarray) -> 'RandomForestClassifier':
        """
        Build the forest and compute OOB error and feature importances.

        Args:
            X: Feature matrix (n_samples, n_features)
            y: Class labels (n_samples,)

        Returns:
            self
        """
        X, y = check_Xy(X, y, n_features=len(self.feature_names))
        y = y.astype(np.int64)

        self.trees = build_forest(X, y, self.n_estimators, self.max_depth,
                                  self.bootstrap_ratio, self.feature_ratio,
                                  self.criterion, self.min_samples_split,
                                  self.random_state)
        self.oob_error_ = out_of_bag_error(self.trees, X, y)
        importance = feature_importance(self.trees, self.feature_names)
        self.feature_importances_ = np.array([importance[name] for name in self.feature_names])
        self._fitted = True
        return self

    def _check_fitted(self):
        if not self._fitted:
            raise ValueError("Model not fitted. Call fit() first.")

    def predict(self, X: np.ndarray) -> np.ndarray:
        """
        Predict class labels using majority voting.

        Args:
            X: Feature matrix

        Returns:
            Predicted class labels
        """
        self._check_fitted()
        X = np.asarray(X, dtype=np.float64).reshape(-1, len(self.feature_names))
        return np.array([_vote(self.trees, x) for x in X], dtype=np.int64)

    def score(self, X: np.ndarray, y: np.ndarray) -> float:
        """Calculate accuracy."""
        y = np.asarray(y).ravel()
        if len(y) == 0:
            return 0.0
        return float(np.mean(self.predict(X) == y))

    def feature_importance(self) -> Dict[str, float]:
        """Feature importances keyed by feature name."""
        self._check_fitted()
        return feature_importance(self.trees, self.feature_names)


def build_forest_from_samples(data: Sequence[Sample], n_trees: int, max_depth: int,
                              bootstrap_ratio: float, feature_ratio: float,
                              random_state: Any = None) -> List[ForestTree]:
    """build_forest for a list of Samples."""
    X, y = samples_to_arrays(data)
    return build_forest(X, y, n_trees, max_depth, bootstrap_ratio, feature_ratio,
                        random_state=random_state)
