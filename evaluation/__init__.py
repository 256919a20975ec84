"""
Evaluation module for the ML kernels.

Provides the metrics and visualizations shown alongside each algorithm:
- Classification metrics: confusion matrix, accuracy
- Regression metrics: MSE, MAE, R2
- Dataset summary and decision-surface grids
- Plots: decision surface, training curve, regression fit, confusion matrix

Metrics are implemented from scratch using only NumPy; plots use matplotlib.
"""

from .metrics import (
    # Classification metrics
    confusion_matrix,
    accuracy_score,

    # Regression metrics
    mean_squared_error,
    mean_absolute_error,
    r2_score,

    # Dataset / model inspection
    FeatureStats,
    DatasetSummary,
    dataset_summary,
    decision_surface,
    print_confusion_matrix,
)

__all__ = [
    # Classification metrics
    'confusion_matrix',
    'accuracy_score',

    # Regression metrics
    'mean_squared_error',
    'mean_absolute_error',
    'r2_score',

    # Dataset / model inspection
    'FeatureStats',
    'DatasetSummary',
    'dataset_summary',
    'decision_surface',
    'print_confusion_matrix',
]
