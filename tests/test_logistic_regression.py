"""
Logistic Regression Tests.

Tests for:
- Sigmoid clamping and finite loss
- Gradient descent on separable blobs
- Decision boundary line
- Threshold semantics (P >= threshold -> class 1)
"""

import numpy as np
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ml_kernels import LogisticRegressionGD, Sample, decision_boundary, fit_logistic_regression
from ml_kernels.activations import sigmoid
from ml_kernels.logistic_regression import binary_cross_entropy


@pytest.fixture
def blobs():
    X0 = np.array([[-2.0, -2.0], [-3.0, -1.0], [-1.0, -3.0], [-2.5, -2.5]])
    X = np.vstack([X0, -X0])
    y = np.array([0, 0, 0, 0, 1, 1, 1, 1])
    return X, y


def test_separable_blobs(blobs):
    """Two blobs around (-2, -2) and (2, 2) are separated perfectly."""
    print("=" * 60)
    print("TEST: LogisticRegressionGD on separable blobs")
    print("=" * 60)

    X, y = blobs
    model = LogisticRegressionGD(learning_rate=0.1, max_iterations=500).fit(X, y)
    loss = model.history_.values('loss')
    print(f"  loss: {loss[0]:.4f} -> {loss[-1]:.4f}")

    assert model.score(X, y) == 1.0
    assert np.all(np.diff(loss) <= 1e-12)
    assert loss[-1] < loss[0]


def test_initial_step(blobs):
    X, y = blobs
    model = LogisticRegressionGD(max_iterations=10).fit(X, y)
    first = model.history_[0]

    assert first.weights == (0.0, 0.0, 0.0)
    assert first.loss == pytest.approx(np.log(2), rel=1e-9)
    assert len(model.history_) == 11
    assert model.history_.final.dw1 == 0.0


def test_sigmoid_is_clamped():
    assert sigmoid(1000.0) == 1.0
    assert sigmoid(-1000.0) == sigmoid(-500.0)
    assert np.isfinite(sigmoid(-1000.0))
    assert sigmoid(0.0) == 0.5


def test_loss_stays_finite_for_extreme_weights(blobs):
    X, y = blobs
    y = y.astype(float)

    assert np.isfinite(binary_cross_entropy(1000.0, 1000.0, 0.0, X, y))
    assert np.isfinite(binary_cross_entropy(-1000.0, -1000.0, 0.0, X, y))


def test_decision_boundary():
    slope, intercept = decision_boundary(1.0, 1.0, 0.0)
    assert slope == pytest.approx(-1.0)
    assert intercept == pytest.approx(0.0)

    slope, intercept = decision_boundary(1.0, 2.0, 0.5, threshold=0.7)
    assert slope == pytest.approx(-0.5)
    assert intercept == pytest.approx((np.log(0.7 / 0.3) - 0.5) / 2.0)

    assert decision_boundary(1.0, 0.0, 0.0) is None
    assert decision_boundary(1.0, 1e-12, 0.0) is None


def test_threshold_is_inclusive(blobs):
    X, y = blobs
    model = LogisticRegressionGD(max_iterations=5).fit(X, y)

    # Step 0 has all-zero weights, so every probability is exactly 0.5
    assert np.all(model.predict_proba(X, step=0) == 0.5)
    assert np.all(model.predict(X, step=0) == 1)
    assert model.boundary(step=0) is None


def test_fit_from_samples():
    points = [Sample(-1.0, -1.0, 0), Sample(-2.0, -1.0, 0),
              Sample(1.0, 1.0, 1), Sample(2.0, 1.0, 1)]
    history = fit_logistic_regression(points, learning_rate=0.5, max_iterations=100,
                                      decision_threshold=0.5)

    assert len(history) == 101
    assert history.final.loss < history[0].loss


def test_empty_dataset():
    model = LogisticRegressionGD(max_iterations=3).fit(np.zeros((0, 2)), [])

    assert model.weights == (0.0, 0.0, 0.0)
    assert all(entry.loss == 0.0 for entry in model.history_)
    assert model.score(np.zeros((0, 2)), []) == 0.0


def test_invalid_hyperparameters():
    with pytest.raises(ValueError):
        LogisticRegressionGD(learning_rate=-0.1)
    with pytest.raises(ValueError):
        LogisticRegressionGD(max_iterations=0)
    with pytest.raises(ValueError):
        LogisticRegressionGD(threshold=1.0)
