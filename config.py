"""
ML Algorithm Visualizer - Global Configuration

This module contains the configuration constants and the default
hyperparameter panels (kind, range, default) for every algorithm.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ml_kernels.activations import SIGMOID_CLIP
from ml_kernels.knn import WEIGHT_EPSILON
from ml_kernels.logistic_regression import LOG_EPSILON

# =============================================================================
# NUMERICS
# =============================================================================
# Re-exported so callers have one place to look them up
SIGMOID_CLAMP = SIGMOID_CLIP  # sigmoid input is clamped to [-500, 500]
LOG_LOSS_EPSILON = LOG_EPSILON  # added inside each log of the logistic loss
KNN_WEIGHT_EPSILON = WEIGHT_EPSILON  # weighted vote = 1 / (d + eps)

# =============================================================================
# DATA / RANDOMNESS
# =============================================================================
DEFAULT_SEED = 42
FEATURE_NAMES = ('x1', 'x2')
CLASS_NAMES = ['Class 0', 'Class 1', 'Class 2']

# =============================================================================
# PLOTTING
# =============================================================================
PLOT_RESOLUTION = 40  # decision surface cells per axis

# =============================================================================
# HYPERPARAMETER KINDS
# =============================================================================
CONTINUOUS = 'continuous'
INTEGER = 'integer'
BOOLEAN = 'boolean'
CATEGORICAL = 'categorical'
KINDS = (CONTINUOUS, INTEGER, BOOLEAN, CATEGORICAL)


@dataclass
class Hyperparameter:
    """
    A tunable value with a declared kind and range/options.

    Continuous parameters are bounded by [min, max] with a slider ``step``.
    Integer parameters are bounded the same way and only take whole values
    (5.0 is stored as 5). Categorical ones choose from ``options`` and
    boolean ones are toggles.
    """
    value: Any
    kind: str = CONTINUOUS
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    options: Tuple[str, ...] = ()
    label: str = ""
    description: str = ""

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown hyperparameter kind '{self.kind}'. Expected one of {KINDS}")
        self.value = self.validate(self.value)

    def validate(self, value: Any) -> Any:
        """Return ``value`` if it fits this parameter, else raise ValueError."""
        if self.kind == BOOLEAN:
            if not isinstance(value, bool):
                raise ValueError(f"{self.label or 'value'} must be a bool, got {value!r}")
            return value

        if self.kind == CATEGORICAL:
            if value not in self.options:
                raise ValueError(
                    f"{self.label or 'value'} must be one of {self.options}, got {value!r}"
                )
            return value

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{self.label or 'value'} must be a number, got {value!r}")
        if self.min is not None and value < self.min:
            raise ValueError(f"{self.label or 'value'} must be >= {self.min}, got {value}")
        if self.max is not None and value > self.max:
            raise ValueError(f"{self.label or 'value'} must be <= {self.max}, got {value}")
        if self.kind == INTEGER:
            if value != int(value):
                raise ValueError(f"{self.label or 'value'} must be a whole number, got {value}")
            return int(value)
        return value

    def set(self, value: Any):
        self.value = self.validate(value)


def continuous(value, min, max, step, label, description=""):
    return field(default_factory=lambda: Hyperparameter(
        value=value, kind=CONTINUOUS, min=min, max=max, step=step,
        label=label, description=description))


def integer(value, min, max, label, description=""):
    return field(default_factory=lambda: Hyperparameter(
        value=value, kind=INTEGER, min=min, max=max, step=1,
        label=label, description=description))


def categorical(value, options, label, description=""):
    return field(default_factory=lambda: Hyperparameter(
        value=value, kind=CATEGORICAL, options=tuple(options),
        label=label, description=description))


def boolean(value, label, description=""):
    return field(default_factory=lambda: Hyperparameter(
        value=value, kind=BOOLEAN, label=label, description=description))


# =============================================================================
# DATACLASSES FOR CONFIGURATION
# =============================================================================
# Field names match the keyword arguments of the corresponding estimator,
# so ``Estimator(**panel.values())`` builds a model from the panel.

class PanelMixin:
    """Shared helpers for hyperparameter panels."""

    def parameters(self) -> Dict[str, Hyperparameter]:
        return {name: value for name, value in vars(self).items()
                if isinstance(value, Hyperparameter)}

    def values(self) -> Dict[str, Any]:
        """Current values keyed by estimator argument name."""
        return {name: param.value for name, param in self.parameters().items()}

    def update(self, **values) -> 'PanelMixin':
        params = self.parameters()
        for name, value in values.items():
            if name not in params:
                raise ValueError(f"Unknown hyperparameter '{name}' for {type(self).__name__}")
            params[name].set(value)
        return self


@dataclass
class LinearRegressionConfig(PanelMixin):
    """Linear regression (gradient descent) panel."""
    learning_rate: Hyperparameter = continuous(
        0.01, 0.001, 0.1, 0.001, "Learning Rate", "Step size of each gradient update")
    max_iterations: Hyperparameter = integer(
        100, 10, 500, "Iterations", "Number of gradient descent steps")


@dataclass
class LogisticRegressionConfig(PanelMixin):
    """Logistic regression panel."""
    learning_rate: Hyperparameter = continuous(
        0.1, 0.01, 1.0, 0.01, "Learning Rate", "Step size of each gradient update")
    max_iterations: Hyperparameter = integer(
        200, 50, 1000, "Iterations", "Number of gradient descent steps")
    threshold: Hyperparameter = continuous(
        0.5, 0.1, 0.9, 0.05, "Decision Threshold", "Probability at which class 1 is predicted")


@dataclass
class KNNConfig(PanelMixin):
    """K-nearest neighbors panel."""
    n_neighbors: Hyperparameter = integer(
        3, 1, 15, "K (Neighbors)", "Number of nearest neighbors that vote")
    metric: Hyperparameter = categorical(
        'euclidean', ('euclidean', 'manhattan', 'chebyshev'), "Distance Metric")
    weighted: Hyperparameter = boolean(
        False, "Distance Weighted", "Closer neighbors get larger votes")


@dataclass
class DecisionTreeConfig(PanelMixin):
    """Decision tree panel."""
    max_depth: Hyperparameter = integer(
        3, 1, 6, "Max Depth", "Maximum depth of the tree")
    min_samples_split: Hyperparameter = integer(
        2, 2, 10, "Min Samples Split", "Minimum samples required to split a node")
    criterion: Hyperparameter = categorical(
        'entropy', ('entropy', 'gini'), "Split Criterion")


@dataclass
class RandomForestConfig(PanelMixin):
    """Random forest panel."""
    n_estimators: Hyperparameter = integer(
        7, 1, 20, "Number of Trees", "Trees in the forest")
    max_depth: Hyperparameter = integer(
        3, 1, 5, "Max Depth", "Maximum depth of each tree")
    bootstrap_ratio: Hyperparameter = continuous(
        0.7, 0.3, 1.0, 0.1, "Sample Ratio", "Bootstrap sample size as a fraction of the data")
    feature_ratio: Hyperparameter = continuous(
        1.0, 0.3, 1.0, 0.1, "Feature Ratio", "Fraction of features each tree may use")


@dataclass
class NeuralNetworkConfig(PanelMixin):
    """Neural network panel."""
    hidden_layers: Hyperparameter = integer(
        2, 1, 6, "Hidden Layers", "Number of hidden layers")
    neurons_per_layer: Hyperparameter = integer(
        8, 3, 20, "Neurons per Layer", "Neurons in each hidden layer")
    learning_rate: Hyperparameter = continuous(
        0.5, 0.01, 2.0, 0.01, "Learning Rate", "Step size of each SGD update")
    activation: Hyperparameter = categorical(
        'sigmoid', ('sigmoid', 'tanh', 'relu'), "Activation")
    epochs: Hyperparameter = integer(
        500, 100, 2000, "Epochs", "Passes over the training data")


def get_default_config():
    """Get default configuration objects."""
    return {
        'linear': LinearRegressionConfig(),
        'logistic': LogisticRegressionConfig(),
        'knn': KNNConfig(),
        'tree': DecisionTreeConfig(),
        'forest': RandomForestConfig(),
        'nn': NeuralNetworkConfig(),
    }
