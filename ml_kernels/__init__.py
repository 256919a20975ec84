"""
ML Kernels - classical machine learning algorithms implemented from scratch.

Small, pure numeric kernels behind the interactive algorithm visualizer. Each
kernel takes a dataset and hyperparameters and returns model state, a fully
materialized training history and metrics; rendering is left to the caller.

Regressors:
- LinearRegressionGD: y = mx + b fitted by batch gradient descent

Classifiers:
- LogisticRegressionGD: 2-feature logistic regression, batch gradient descent
- KNeighborsClassifier: K-nearest neighbors (euclidean/manhattan/chebyshev)
- DecisionTreeClassifier: Binary splits with entropy/gini
- RandomForestClassifier: Bagging + feature sampling + OOB error

Neural Networks:
- NeuralNetwork: Small dense network trained with online SGD

Datasets:
- make_linear, make_blobs, make_clusters, make_quadrants, make_diagonal, make_xor
"""

# Data types
from .types import (
    Sample,
    RegressionPoint,
    Point,
    TrainingHistory,
    samples_to_arrays,
    arrays_to_samples,
    points_to_arrays,
)

# Regressors
from .linear_regression import LinearRegressionGD, LinearStep, fit_linear_regression

# Classifiers
from .logistic_regression import (
    LogisticRegressionGD,
    LogisticStep,
    decision_boundary,
    fit_logistic_regression,
)
from .knn import KNeighborsClassifier, KNNResult, Neighbor, classify, leave_one_out_accuracy
from .decision_tree import (
    DecisionTreeClassifier,
    LeafNode,
    SplitNode,
    build,
    build_tree,
    entropy,
    gini,
    predict_node,
)
from .random_forest import (
    RandomForestClassifier,
    ForestTree,
    build_forest,
    build_forest_from_samples,
    forest_predict,
    out_of_bag_error,
    feature_importance,
)

# Neural Networks
from .neural_network import NeuralNetwork, NetworkParams, EpochRecord, forward, backpropagate, train

# Datasets
from .datasets import (
    make_linear,
    make_blobs,
    make_clusters,
    make_quadrants,
    make_diagonal,
    make_xor,
)

__all__ = [
    # Data types
    'Sample',
    'RegressionPoint',
    'Point',
    'TrainingHistory',
    'samples_to_arrays',
    'arrays_to_samples',
    'points_to_arrays',

    # Regressors
    'LinearRegressionGD',
    'LinearStep',
    'fit_linear_regression',

    # Classifiers
    'LogisticRegressionGD',
    'LogisticStep',
    'decision_boundary',
    'fit_logistic_regression',
    'KNeighborsClassifier',
    'KNNResult',
    'Neighbor',
    'classify',
    'leave_one_out_accuracy',
    'DecisionTreeClassifier',
    'LeafNode',
    'SplitNode',
    'build',
    'build_tree',
    'entropy',
    'gini',
    'predict_node',
    'RandomForestClassifier',
    'ForestTree',
    'build_forest',
    'build_forest_from_samples',
    'forest_predict',
    'out_of_bag_error',
    'feature_importance',

    # Neural Networks
    'NeuralNetwork',
    'NetworkParams',
    'EpochRecord',
    'forward',
    'backpropagate',
    'train',

    # Datasets
    'make_linear',
    'make_blobs',
    'make_clusters',
    'make_quadrants',
    'make_diagonal',
    'make_xor',
]
