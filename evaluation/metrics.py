"""
Evaluation Metrics - Implemented FROM SCRATCH.

This module provides the metrics shown next to every algorithm in the
visualizer, plus the dataset statistics and decision-surface grids the UI
renders behind the scatter plots.

Classification Metrics:
- Confusion Matrix
- Accuracy

Regression Metrics:
- MSE, MAE
- R-squared (R2)

Dataset / Model Inspection:
- Dataset summary (per-feature statistics, class balance)
- Decision surface grid
"""

import numpy as np
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field


# =============================================================================
# CLASSIFICATION METRICS
# =============================================================================

def confusion_matrix(y_true: np.ndarray, y_pred: np.ndarray,
                     n_classes: Optional[int] = None) -> np.ndarray:
    """
    Compute confusion matrix from scratch.

    Parameters
    ----------
    y_true : np.ndarray
        Ground truth labels.
    y_pred : np.ndarray
        Predicted labels.
    n_classes : int, optional
        Number of classes. If None, inferred from data.

    Returns
    -------
    np.ndarray
        Confusion matrix of shape (n_classes, n_classes).
        Row i, column j is the count of samples with true label i
        predicted as label j.

    Example
    -------
    >>> confusion_matrix([0, 0, 1, 1, 2, 2], [0, 1, 1, 1, 2, 0])
    array([[1, 1, 0],
           [0, 2, 0],
           [1, 0, 1]])
    """
    y_true = np.asarray(y_true, dtype=np.int64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.int64).ravel()

    if n_classes is None:
        n_classes = int(max(np.max(y_true, initial=-1), np.max(y_pred, initial=-1))) + 1

    cm = np.zeros((n_classes, n_classes), dtype=np.int64)
    for true_label, pred_label in zip(y_true, y_pred):
        cm[true_label, pred_label] += 1

    return cm


def accuracy_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate classification accuracy.

    Returns
    -------
    float
        correct_predictions / total_predictions, 0.0 for empty input.
    """
    y_true = np.asarray(y_true).ravel()
    y_pred = np.asarray(y_pred).ravel()

    if len(y_true) == 0:
        return 0.0

    return float(np.mean(y_true == y_pred))


# =============================================================================
# REGRESSION METRICS
# =============================================================================

def mean_squared_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate Mean Squared Error (MSE).

    MSE = (1/n) * sum((y_true - y_pred)^2), 0.0 for empty input.
    """
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.float64).ravel()
    if len(y_true) == 0:
        return 0.0
    return float(np.mean((y_true - y_pred) ** 2))


def mean_absolute_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """MAE = (1/n) * sum(|y_true - y_pred|), 0.0 for empty input."""
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.float64).ravel()
    if len(y_true) == 0:
        return 0.0
    return float(np.mean(np.abs(y_true - y_pred)))


def r2_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate R-squared (coefficient of determination).

    Mathematical Definition
    -----------------------
    R2 = 1 - (SS_res / SS_tot)
       = 1 - (sum((y_true - y_pred)^2) / sum((y_true - mean(y_true))^2))

    Defined as 0.0 when SS_tot is 0 (constant targets) or the input is empty.
    """
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.float64).ravel()

    if len(y_true) == 0:
        return 0.0

    ss_res = np.sum((y_true - y_pred) ** 2)
    ss_tot = np.sum((y_true - np.mean(y_true)) ** 2)

    if ss_tot == 0:
        return 0.0

    return float(1 - ss_res / ss_tot)


# =============================================================================
# DATASET SUMMARY
# =============================================================================

@dataclass
class FeatureStats:
    """Summary statistics of one feature."""
    min: float
    max: float
    mean: float
    median: float


@dataclass
class DatasetSummary:
    """What the data explorer shows about a dataset."""
    n_samples: int
    features: Dict[str, FeatureStats] = field(default_factory=dict)
    class_counts: Dict[int, int] = field(default_factory=dict)

    @property
    def n_classes(self) -> int:
        return len(self.class_counts)

    @property
    def balanced(self) -> bool:
        """Largest class is less than 1.5x the smallest."""
        if not self.class_counts:
            return True
        counts = list(self.class_counts.values())
        return max(counts) / min(counts) < 1.5


def dataset_summary(X: np.ndarray, y: Optional[np.ndarray] = None,
                    feature_names: Sequence[str] = ('x1', 'x2')) -> DatasetSummary:
    """
    Per-feature min/max/mean/median and class counts.

    The median is the upper middle value for even-sized data
    (sorted[n // 2]).
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim == 1:
        X = X.reshape(-1, 1)

    summary = DatasetSummary(n_samples=len(X))
    if len(X) == 0:
        return summary

    for j, name in enumerate(feature_names[:X.shape[1]]):
        values = np.sort(X[:, j])
        summary.features[name] = FeatureStats(
            min=float(values[0]),
            max=float(values[-1]),
            mean=float(np.mean(values)),
            median=float(values[len(values) // 2]),
        )

    if y is not None:
        labels, counts = np.unique(np.asarray(y), return_counts=True)
        summary.class_counts = {int(label): int(count) for label, count in zip(labels, counts)}

    return summary


# =============================================================================
# DECISION SURFACE
# =============================================================================

def decision_surface(predict_fn: Callable[[np.ndarray], np.ndarray],
                     x_range: Tuple[float, float],
                     y_range: Tuple[float, float],
                     resolution: int = 40) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Evaluate a model on a regular grid covering the plot area.

    Cell (i, j) is sampled at its lower-left corner:
    x = x_min + (i / resolution) * (x_max - x_min), same for y.

    Parameters
    ----------
    predict_fn : callable
        Maps an (n, 2) array to n predictions (labels or probabilities).
    x_range, y_range : tuple
        (min, max) of each axis.
    resolution : int
        Cells per axis.

    Returns
    -------
    tuple
        (xs, ys, values) with values of shape (resolution, resolution),
        indexed [row=y, col=x].
    """
    if resolution < 1:
        raise ValueError(f"resolution must be >= 1, got {resolution}")

    steps = np.arange(resolution) / resolution
    xs = x_range[0] + steps * (x_range[1] - x_range[0])
    ys = y_range[0] + steps * (y_range[1] - y_range[0])
    grid_x, grid_y = np.meshgrid(xs, ys)
    points = np.column_stack([grid_x.ravel(), grid_y.ravel()])
    values = np.asarray(predict_fn(points)).reshape(resolution, resolution)
    return xs, ys, values


# =============================================================================
# TEXT OUTPUT
# =============================================================================

def print_confusion_matrix(cm: np.ndarray,
                           class_names: Optional[List[str]] = None,
                           title: str = "Confusion Matrix") -> str:
    """
    Create ASCII representation of confusion matrix.

    Returns
    -------
    str
        Formatted string representation.
    """
    n_classes = cm.shape[0]

    if class_names is None:
        class_names = [f"C{i}" for i in range(n_classes)]

    max_val = np.max(cm) if cm.size else 0
    val_width = max(len(str(int(max_val))), 4)
    label_width = max(len(name) for name in class_names) if class_names else 2

    lines = [title, "=" * (label_width + 2 + (val_width + 1) * n_classes + 10)]

    header = " " * (label_width + 2) + "Predicted"
    lines.append(header)

    header2 = " " * (label_width + 2) + " ".join(f"{name:>{val_width}}" for name in class_names)
    lines.append(header2)
    lines.append("-" * len(header2))

    for i, row_name in enumerate(class_names):
        prefix = "Actual " if i == n_classes // 2 else "       "
        row_vals = " ".join(f"{int(cm[i, j]):>{val_width}}" for j in range(n_classes))
        lines.append(f"{prefix}{row_name:>{label_width}} {row_vals}")

    lines.append("=" * len(header2))

    correct = np.trace(cm)
    total = np.sum(cm)
    accuracy = correct / total if total > 0 else 0
    lines.append(f"Accuracy: {accuracy:.4f} ({int(correct)}/{int(total)})")

    return "\n".join(lines)
