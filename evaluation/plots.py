"""
Plotting utilities for the ML kernels (matplotlib).

- Decision surface behind a labelled scatter plot
- Training curve (loss / accuracy per step) from a TrainingHistory
- Regression line over data points
- Confusion matrix heatmap

Every function returns the Figure and saves it when ``save_path`` is given.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .metrics import decision_surface

CLASS_COLORS = ('#06b6d4', '#8b5cf6', '#10b981')


def _padded_range(values: np.ndarray, pad: float = 0.1) -> Tuple[float, float]:
    if len(values) == 0:
        return 0.0, 1.0
    lo, hi = float(np.min(values)), float(np.max(values))
    span = hi - lo if hi > lo else 1.0
    return lo - pad * span, hi + pad * span


def _finish(fig, save_path: Optional[str]):
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    return fig


def plot_decision_surface(predict_fn: Callable[[np.ndarray], np.ndarray],
                          X: np.ndarray, y: np.ndarray,
                          resolution: int = 40,
                          title: str = "Decision Surface",
                          feature_names: Sequence[str] = ('x1', 'x2'),
                          figsize: Tuple[int, int] = (7, 6),
                          save_path: Optional[str] = None) -> Any:
    """
    Plot a classifier's predictions on a grid with the training points on top.

    Parameters
    ----------
    predict_fn : callable
        Maps an (n, 2) array to n class labels.
    X, y : np.ndarray
        Training points and labels.
    resolution : int
        Grid cells per axis.
    """
    X = np.asarray(X, dtype=np.float64).reshape(-1, 2)
    y = np.asarray(y).ravel()

    x_range = _padded_range(X[:, 0])
    y_range = _padded_range(X[:, 1])
    _, _, values = decision_surface(predict_fn, x_range, y_range, resolution)

    fig, ax = plt.subplots(figsize=figsize)
    ax.imshow(values, origin='lower', extent=(*x_range, *y_range), aspect='auto',
              cmap='coolwarm', alpha=0.3, interpolation='nearest')

    for label in np.unique(y):
        mask = y == label
        color = CLASS_COLORS[int(label) % len(CLASS_COLORS)]
        ax.scatter(X[mask, 0], X[mask, 1], c=color, edgecolors='black',
                   label=f"Class {int(label)}")

    ax.set(xlim=x_range, ylim=y_range, title=title,
           xlabel=feature_names[0], ylabel=feature_names[1])
    if len(y):
        ax.legend(loc='best')

    return _finish(fig, save_path)


def plot_training_curve(history, metrics: Sequence[str] = ('loss',),
                        title: str = "Training Curve",
                        current_step: Optional[int] = None,
                        figsize: Tuple[int, int] = (8, 4),
                        save_path: Optional[str] = None) -> Any:
    """
    Plot one or more scalar fields of a TrainingHistory against the step.

    Parameters
    ----------
    history : TrainingHistory
        Any history whose entries have the requested attributes.
    metrics : sequence of str
        Field names, e.g. ('loss', 'accuracy') or ('mse',).
    current_step : int, optional
        Step to highlight with a marker.
    """
    steps = history.values('step')

    fig, ax = plt.subplots(figsize=figsize)
    for name in metrics:
        values = history.values(name)
        ax.plot(steps, values, lw=2, label=name)
        if current_step is not None:
            ax.plot(steps[current_step], values[current_step], 'o', color='black')

    ax.set(title=title, xlabel='Step', ylabel='Value')
    ax.grid(True, alpha=0.3)
    ax.legend(loc='best')

    return _finish(fig, save_path)


def plot_regression_fit(x: np.ndarray, y: np.ndarray, m: float, b: float,
                        show_residuals: bool = True,
                        title: str = "Linear Regression",
                        figsize: Tuple[int, int] = (7, 5),
                        save_path: Optional[str] = None) -> Any:
    """Scatter the points, draw y = m*x + b and optionally the residuals."""
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()

    x_range = _padded_range(x)

    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(x, y, c=CLASS_COLORS[0], edgecolors='black', zorder=3, label='Data')
    ax.plot(x_range, [m * x_range[0] + b, m * x_range[1] + b],
            color='darkorange', lw=2, label=f"y = {m:.3f}x + {b:.3f}")

    if show_residuals:
        for xi, yi in zip(x, y):
            ax.plot([xi, xi], [yi, m * xi + b], color='red', alpha=0.4, lw=1)

    ax.set(title=title, xlabel='x', ylabel='y', xlim=x_range)
    ax.grid(True, alpha=0.3)
    ax.legend(loc='best')

    return _finish(fig, save_path)


def plot_confusion_matrix(cm: np.ndarray,
                          class_names: Optional[List[str]] = None,
                          title: str = "Confusion Matrix",
                          cmap: str = 'Blues',
                          figsize: Tuple[int, int] = (6, 5),
                          save_path: Optional[str] = None) -> Any:
    """Plot confusion matrix as an annotated heatmap."""
    n_classes = cm.shape[0]
    if class_names is None:
        class_names = [f"Class {i}" for i in range(n_classes)]

    fig, ax = plt.subplots(figsize=figsize)
    im = ax.imshow(cm, interpolation='nearest', cmap=cmap)
    ax.figure.colorbar(im, ax=ax)

    ax.set(xticks=np.arange(n_classes),
           yticks=np.arange(n_classes),
           xticklabels=class_names,
           yticklabels=class_names,
           title=title,
           ylabel='True label',
           xlabel='Predicted label')

    thresh = cm.max() / 2. if cm.size else 0
    for i in range(n_classes):
        for j in range(n_classes):
            ax.text(j, i, f"{int(cm[i, j])}", ha="center", va="center",
                    color="white" if cm[i, j] > thresh else "black")

    return _finish(fig, save_path)
