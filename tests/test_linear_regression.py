"""
Linear Regression Tests.

Tests for:
- MSE / gradient helpers
- Gradient descent convergence and recorded history
- Degenerate datasets (empty, constant targets)
- Hyperparameter validation
"""

import numpy as np
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ml_kernels import LinearRegressionGD, RegressionPoint, fit_linear_regression
from ml_kernels.linear_regression import compute_gradients, compute_mse, r_squared


def test_converges_to_exact_line():
    """Noise-free y = 2x + 3 is recovered."""
    print("=" * 60)
    print("TEST: LinearRegressionGD convergence")
    print("=" * 60)

    x = np.arange(11, dtype=float)
    y = 2 * x + 3

    model = LinearRegressionGD(learning_rate=0.02, max_iterations=5000).fit(x, y)
    print(f"  m={model.m:.5f} b={model.b:.5f}")

    assert abs(model.m - 2) < 1e-2
    assert abs(model.b - 3) < 1e-2
    assert model.score(x, y) > 0.9999
    assert model.coef_ == model.m
    assert model.intercept_ == model.b


def test_history_records_every_step():
    x = np.array([1.0, 2.0, 3.0])
    y = np.array([2.0, 4.0, 6.0])

    model = LinearRegressionGD(learning_rate=0.01, max_iterations=20).fit(x, y)
    history = model.history_

    assert len(history) == 21
    assert [entry.step for entry in history] == list(range(21))

    first = history[0]
    assert first.m == 0.0 and first.b == 0.0
    assert first.mse == pytest.approx(np.mean(y ** 2))
    assert first.dm == pytest.approx((2 / 3) * np.sum(-y * x))
    assert first.db == pytest.approx((2 / 3) * np.sum(-y))

    # Each step's weights are the previous weights minus lr * gradient
    for prev, curr in zip(history, list(history)[1:]):
        assert curr.m == pytest.approx(prev.m - 0.01 * prev.dm)
        assert curr.b == pytest.approx(prev.b - 0.01 * prev.db)

    final = history.final
    assert final.dm == 0.0 and final.db == 0.0
    assert (final.m, final.b) == (model.m, model.b)


def test_mse_non_increasing_for_small_learning_rate():
    x = np.arange(11, dtype=float)
    y = 0.7 * x + 1.5 + np.sin(x)

    model = LinearRegressionGD(learning_rate=0.01, max_iterations=200).fit(x, y)
    mse = model.history_.values('mse')

    assert np.all(np.diff(mse) <= 1e-12)


def test_empty_dataset():
    model = LinearRegressionGD(max_iterations=5).fit([], [])

    assert model.m == 0.0 and model.b == 0.0
    assert len(model.history_) == 6
    for entry in model.history_:
        assert entry.mse == 0.0
        assert entry.dm == 0.0 and entry.db == 0.0


def test_helpers():
    x = np.array([0.0, 1.0, 2.0])
    y = np.array([1.0, 3.0, 5.0])

    assert compute_mse(2.0, 1.0, x, y) == 0.0
    assert compute_gradients(2.0, 1.0, x, y) == (0.0, 0.0)
    assert r_squared(2.0, 1.0, x, y) == pytest.approx(1.0)

    # Constant targets -> R^2 defined as 0
    assert r_squared(0.0, 4.0, x, np.full(3, 4.0)) == 0.0
    assert r_squared(0.0, 0.0, np.array([]), np.array([])) == 0.0


def test_fit_from_points():
    points = [RegressionPoint(float(i), 2.0 * i + 1) for i in range(5)]
    history = fit_linear_regression(points, learning_rate=0.05, max_iterations=50)

    assert len(history) == 51
    assert history.final.mse < history[0].mse


def test_invalid_hyperparameters():
    with pytest.raises(ValueError):
        LinearRegressionGD(learning_rate=0)
    with pytest.raises(ValueError):
        LinearRegressionGD(max_iterations=0)
    with pytest.raises(ValueError):
        LinearRegressionGD().fit([1.0, 2.0], [1.0])


def test_predict_before_fit():
    with pytest.raises(ValueError, match="not fitted"):
        LinearRegressionGD().predict([1.0])
