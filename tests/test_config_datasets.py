"""
Configuration and Dataset Tests.

Tests for:
- Hyperparameter validation and default panels
- Building estimators from panels
- Synthetic dataset generators
"""

import numpy as np
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from config import BOOLEAN, CATEGORICAL, INTEGER, Hyperparameter, get_default_config
from ml_kernels import (
    DecisionTreeClassifier,
    KNeighborsClassifier,
    LinearRegressionGD,
    LogisticRegressionGD,
    NeuralNetwork,
    RandomForestClassifier,
    make_blobs,
    make_clusters,
    make_diagonal,
    make_linear,
    make_quadrants,
    make_xor,
)

ESTIMATORS = {
    'linear': LinearRegressionGD,
    'logistic': LogisticRegressionGD,
    'knn': KNeighborsClassifier,
    'tree': DecisionTreeClassifier,
    'forest': RandomForestClassifier,
    'nn': NeuralNetwork,
}


def test_default_panels_build_estimators():
    print("=" * 60)
    print("TEST: Default hyperparameter panels")
    print("=" * 60)

    panels = get_default_config()
    assert set(panels) == set(ESTIMATORS)

    for name, panel in panels.items():
        print(f"  {name}: {panel.values()}")
        model = ESTIMATORS[name](**panel.values())
        for arg, value in panel.values().items():
            assert getattr(model, arg) == value


def test_default_values():
    panels = get_default_config()

    assert panels['linear'].values() == {'learning_rate': 0.01, 'max_iterations': 100}
    assert panels['knn'].values() == {'n_neighbors': 3, 'metric': 'euclidean', 'weighted': False}
    assert panels['forest'].bootstrap_ratio.min == 0.3
    assert panels['nn'].epochs.max == 2000
    assert panels['nn'].activation.options == ('sigmoid', 'tanh', 'relu')


def test_panels_are_independent():
    a = get_default_config()['tree']
    b = get_default_config()['tree']
    a.update(max_depth=5)

    assert a.max_depth.value == 5
    assert b.max_depth.value == 3


def test_hyperparameter_validation():
    lr = Hyperparameter(0.1, min=0.01, max=1.0, label="Learning Rate")
    assert lr.validate(0.5) == 0.5
    with pytest.raises(ValueError, match="Learning Rate"):
        lr.validate(2.0)
    with pytest.raises(ValueError):
        lr.validate("fast")
    with pytest.raises(ValueError):
        lr.validate(True)

    flag = Hyperparameter(False, kind=BOOLEAN)
    with pytest.raises(ValueError):
        flag.validate(1)

    choice = Hyperparameter('gini', kind=CATEGORICAL, options=('gini', 'entropy'))
    with pytest.raises(ValueError):
        choice.set('log_loss')
    assert choice.value == 'gini'

    with pytest.raises(ValueError):
        Hyperparameter(0.1, kind='ordinal')
    with pytest.raises(ValueError):
        Hyperparameter(5.0, min=0.0, max=1.0)


def test_panel_update_rejects_unknown_names():
    panel = get_default_config()['knn']
    with pytest.raises(ValueError, match="Unknown hyperparameter"):
        panel.update(k=5)
    with pytest.raises(ValueError):
        panel.update(n_neighbors=50)


def test_count_parameters_take_whole_numbers_only():
    panels = get_default_config()
    counts = {name: [arg for arg, param in panel.parameters().items() if param.kind == INTEGER]
              for name, panel in panels.items()}

    assert counts['forest'] == ['n_estimators', 'max_depth']
    assert counts['nn'] == ['hidden_layers', 'neurons_per_layer', 'epochs']
    assert counts['knn'] == ['n_neighbors']

    for name, panel in panels.items():
        for arg in counts[name]:
            param = panel.parameters()[arg]
            panel.update(**{arg: float(param.min)})
            assert param.value == param.min
            assert type(param.value) is int

            with pytest.raises(ValueError, match="whole number"):
                panel.update(**{arg: param.min + 0.5})
            assert param.value == param.min

        model = ESTIMATORS[name](**panel.values())
        for arg in counts[name]:
            assert type(getattr(model, arg)) is int


def test_forest_from_panel_with_float_tree_count():
    panel = get_default_config()['forest']
    panel.update(n_estimators=5.0, max_depth=2.0)

    X, y = make_diagonal(random_state=0)
    model = RandomForestClassifier(random_state=0, **panel.values()).fit(X, y)

    assert len(model.trees) == 5
    assert model.max_depth == 2


def test_numeric_constants_match_kernels():
    assert config.SIGMOID_CLAMP == 500.0
    assert config.LOG_LOSS_EPSILON == 1e-15
    assert config.KNN_WEIGHT_EPSILON == 1e-4


def test_dataset_shapes():
    x, y = make_linear(random_state=0)
    assert x.shape == (15,) and y.shape == (15,)
    assert np.all((x >= 1) & (x <= 9))

    X, y = make_blobs(random_state=0)
    assert X.shape == (24, 2)
    assert set(y) == {0, 1}

    X, y = make_clusters(random_state=0)
    assert X.shape == (24, 2)
    assert list(np.bincount(y)) == [8, 8, 8]

    X, y = make_quadrants(random_state=0)
    assert X.shape == (40, 2)
    assert np.all((X >= 0) & (X <= 10))
    assert set(y) <= {0, 1, 2}

    X, y = make_diagonal(random_state=0)
    assert X.shape == (100, 2)


def test_xor_labels():
    X, y = make_xor(random_state=1)
    expected = (X[:, 0] > 0.5) != (X[:, 1] > 0.5)
    np.testing.assert_array_equal(y, expected.astype(int))


def test_datasets_are_reproducible():
    a = make_diagonal(random_state=9)
    b = make_diagonal(random_state=9)
    np.testing.assert_array_equal(a[0], b[0])
    np.testing.assert_array_equal(a[1], b[1])
