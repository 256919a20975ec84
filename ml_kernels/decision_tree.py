"""
Decision Tree Classifier from scratch.

Implements:
- Recursive binary splits on numeric features (CART style)
- Entropy and Information Gain for split selection
- Gini impurity (alternative criterion)
- Pre-pruning with max_depth and min_samples_split
- Optional restriction of the split search to a feature subset (random forest)

Candidate thresholds are the midpoints between consecutive distinct values of
a feature in the node. Samples with value <= threshold go left.
"""

import numpy as np
from typing import Dict, Optional, Sequence, Tuple, Union
from dataclasses import dataclass

from .types import Sample, as_feature_vector, check_Xy, samples_to_arrays

CRITERIA = ('entropy', 'gini')


@dataclass(frozen=True)
class LeafNode:
    """Terminal node predicting its majority class."""
    prediction: int
    n_samples: int
    impurity: float
    class_counts: Dict[int, int]
    depth: int

    @property
    def is_leaf(self) -> bool:
        return True


@dataclass(frozen=True)
class SplitNode:
    """Internal node: x[feature] <= threshold goes left, otherwise right."""
    feature: int
    threshold: float
    impurity: float
    information_gain: float
    n_samples: int
    class_counts: Dict[int, int]
    depth: int
    left: 'TreeNode'
    right: 'TreeNode'

    @property
    def is_leaf(self) -> bool:
        return False


TreeNode = Union[LeafNode, SplitNode]


def entropy(y: np.ndarray) -> float:
    """
    Calculate entropy of a set.

    H(S) = -sum(p_i * log2(p_i))
    """
    if len(y) == 0:
        return 0.0

    _, counts = np.unique(y, return_counts=True)
    probabilities = counts / len(y)
    return float(-np.sum(probabilities * np.log2(probabilities)))


def gini(y: np.ndarray) -> float:
    """
    Calculate Gini impurity.

    G(S) = 1 - sum(p_i^2)
    """
    if len(y) == 0:
        return 0.0

    _, counts = np.unique(y, return_counts=True)
    probabilities = counts / len(y)
    return float(1 - np.sum(probabilities ** 2))


IMPURITY_FUNCTIONS = {'entropy': entropy, 'gini': gini}


def class_counts(y: np.ndarray) -> Dict[int, int]:
    """Count per class label, labels in ascending order."""
    labels, counts = np.unique(y, return_counts=True)
    return {int(label): int(count) for label, count in zip(labels, counts)}


def majority_class(y: np.ndarray) -> int:
    """Most frequent label; ties go to the lowest label, 0 when empty."""
    if len(y) == 0:
        return 0
    labels, counts = np.unique(y, return_counts=True)
    return int(labels[np.argmax(counts)])


def information_gain(y: np.ndarray, y_left: np.ndarray, y_right: np.ndarray,
                     criterion: str = 'entropy') -> float:
    """
    Calculate information gain from a split.

    IG = I(parent) - (|left|/|parent| * I(left) + |right|/|parent| * I(right))
    """
    n = len(y)
    if n == 0:
        return 0.0
    impurity = IMPURITY_FUNCTIONS[criterion]
    weighted = (len(y_left) * impurity(y_left) + len(y_right) * impurity(y_right)) / n
    return impurity(y) - weighted


def find_best_split(X: np.ndarray, y: np.ndarray, parent_impurity: float,
                    criterion: str,
                    features: Sequence[int]) -> Tuple[Optional[int], Optional[float], float]:
    """
    Find the best feature and threshold to split on.

    Features are scanned in the given order and thresholds in ascending
    order; only a strictly better gain replaces the current best.

    Returns:
        Tuple of (best_feature, best_threshold, best_gain)
    """
    impurity = IMPURITY_FUNCTIONS[criterion]
    n_samples = len(y)

    best_gain = -np.inf
    best_feature = None
    best_threshold = None

    for feature in features:
        values = X[:, feature]
        unique_values = np.unique(values)
        thresholds = (unique_values[:-1] + unique_values[1:]) / 2

        for threshold in thresholds:
            left_mask = values <= threshold
            n_left = int(np.sum(left_mask))
            n_right = n_samples - n_left
            if n_left == 0 or n_right == 0:
                continue

            weighted = (n_left * impurity(y[left_mask]) +
                        n_right * impurity(y[~left_mask])) / n_samples
            gain = parent_impurity - weighted

            if gain > best_gain:
                best_gain = gain
                best_feature = int(feature)
                best_threshold = float(threshold)

    return best_feature, best_threshold, float(best_gain)


def build_tree(X: np.ndarray, y: np.ndarray,
               max_depth: int = 3,
               min_samples_split: int = 2,
               criterion: str = 'entropy',
               features: Optional[Sequence[int]] = None,
               depth: int = 0) -> TreeNode:
    """
    Recursively build a decision tree.

    A node becomes a leaf when, in order: depth >= max_depth, it holds fewer
    than min_samples_split samples, it is pure, or no split has positive gain.

    Args:
        X: Feature matrix (n_samples, n_features)
        y: Integer class labels (n_samples,)
        max_depth: Maximum depth (root is depth 0)
        min_samples_split: Minimum samples needed to split a node
        criterion: 'entropy' or 'gini'
        features: Feature indices the split search may use (default: all)
        depth: Depth of this node

    Returns:
        Root TreeNode
    """
    if features is None:
        features = range(X.shape[1])

    impurity = IMPURITY_FUNCTIONS[criterion](y)
    counts = class_counts(y)
    n_samples = len(y)

    def leaf() -> LeafNode:
        return LeafNode(prediction=majority_class(y), n_samples=n_samples,
                        impurity=impurity, class_counts=counts, depth=depth)

    if depth >= max_depth or n_samples < min_samples_split or impurity == 0:
        return leaf()

    feature, threshold, gain = find_best_split(X, y, impurity, criterion, features)
    if feature is None or gain <= 0:
        return leaf()

    left_mask = X[:, feature] <= threshold
    right_mask = ~left_mask

    left = build_tree(X[left_mask], y[left_mask], max_depth, min_samples_split,
                      criterion, features, depth + 1)
    right = build_tree(X[right_mask], y[right_mask], max_depth, min_samples_split,
                       criterion, features, depth + 1)

    return SplitNode(feature=feature, threshold=threshold, impurity=impurity,
                     information_gain=gain, n_samples=n_samples, class_counts=counts,
                     depth=depth, left=left, right=right)


def predict_node(node: TreeNode, x: np.ndarray) -> int:
    """Descend from ``node`` to a leaf and return its prediction."""
    while not node.is_leaf:
        node = node.left if x[node.feature] <= node.threshold else node.right
    return node.prediction


def tree_depth(node: TreeNode) -> int:
    """Number of split levels below ``node`` (0 for a single leaf)."""
    if node.is_leaf:
        return 0
    return 1 + max(tree_depth(node.left), tree_depth(node.right))


def count_nodes(node: TreeNode) -> Tuple[int, int]:
    """Return (total nodes, leaves)."""
    if node.is_leaf:
        return 1, 1
    left_total, left_leaves = count_nodes(node.left)
    right_total, right_leaves = count_nodes(node.right)
    return 1 + left_total + right_total, left_leaves + right_leaves


def accumulate_importance(node: TreeNode, importances: np.ndarray) -> np.ndarray:
    """Add gain * n_samples of every split node to importances[feature]."""
    if not node.is_leaf:
        importances[node.feature] += node.information_gain * node.n_samples
        accumulate_importance(node.left, importances)
        accumulate_importance(node.right, importances)
    return importances


class DecisionTreeClassifier:
    """
    Decision Tree Classifier.

    Uses Information Gain (entropy-based) or Gini impurity
    to select optimal splits.

    Entropy: H(S) = -sum(p_i * log2(p_i))
    Information Gain: IG(S, A) = H(S) - sum(|S_v|/|S| * H(S_v))
    Gini: G(S) = 1 - sum(p_i^2)
    """

    def __init__(self,
                 max_depth: int = 3,
                 min_samples_split: int = 2,
                 criterion: str = 'entropy',
                 features: Optional[Sequence[int]] = None):
        """
        Initialize Decision Tree.

        Args:
            max_depth: Maximum depth of tree (>= 1)
            min_samples_split: Minimum samples to split a node (>= 2)
            criterion: 'entropy' (Information Gain) or 'gini'
            features: Feature indices allowed for splitting (default: all)
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        if min_samples_split < 2:
            raise ValueError(f"min_samples_split must be >= 2, got {min_samples_split}")
        if criterion not in CRITERIA:
            raise ValueError(f"Unknown criterion '{criterion}'. Expected one of {CRITERIA}")

        self.max_depth = int(max_depth)
        self.min_samples_split = int(min_samples_split)
        self.criterion = criterion
        self.features = None if features is None else [int(f) for f in features]

        self.root: Optional[TreeNode] = None
        self.n_features: int = 0
        self.feature_importances_: Optional[np.ndarray] = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> 'DecisionTreeClassifier':
        """
        Build decision tree from training data.

        Args:
            X: Feature matrix (n_samples, n_features)
            y: Class labels (n_samples,)

        Returns:
            self
        """
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(-1, 2)
        X, y = check_Xy(X, y, n_features=X.shape[1])
        y = y.astype(np.int64)

        self.n_features = X.shape[1]
        if self.features is not None and any(not 0 <= f < self.n_features for f in self.features):
            raise ValueError(f"features {self.features} out of range for {self.n_features} features")

        self.root = build_tree(X, y, self.max_depth, self.min_samples_split,
                               self.criterion, self.features)

        importances = accumulate_importance(self.root, np.zeros(self.n_features))
        total = np.sum(importances)
        if total > 0:
            importances /= total
        self.feature_importances_ = importances

        return self

    def _check_fitted(self):
        if self.root is None:
            raise ValueError("Model not fitted. Call fit() first.")

    def predict_one(self, x) -> int:
        """Predict the class of a single point."""
        self._check_fitted()
        return predict_node(self.root, as_feature_vector(x))

    def predict(self, X: np.ndarray) -> np.ndarray:
        """
        Predict class labels.

        Args:
            X: Feature matrix

        Returns:
            Predicted class labels
        """
        self._check_fitted()
        X = np.asarray(X, dtype=np.float64).reshape(-1, self.n_features)
        return np.array([predict_node(self.root, x) for x in X], dtype=np.int64)

    def score(self, X: np.ndarray, y: np.ndarray) -> float:
        """Calculate accuracy."""
        y = np.asarray(y).ravel()
        if len(y) == 0:
            return 0.0
        return float(np.mean(self.predict(X) == y))

    def get_depth(self) -> int:
        """Get the actual depth of the tree."""
        self._check_fitted()
        return tree_depth(self.root)

    def get_n_leaves(self) -> int:
        """Get the number of leaf nodes."""
        self._check_fitted()
        return count_nodes(self.root)[1]

    def get_n_nodes(self) -> int:
        """Get the total number of nodes."""
        self._check_fitted()
        return count_nodes(self.root)[0]


def build(data: Sequence[Sample], max_depth: int = 3, min_samples_split: int = 2,
          criterion: str = 'entropy') -> TreeNode:
    """Build a tree from a list of Samples and return its root."""
    X, y = samples_to_arrays(data)
    return DecisionTreeClassifier(max_depth, min_samples_split, criterion).fit(X, y).root
