"""
Linear Regression from scratch using batch Gradient Descent.

Fits a line y = m*x + b to 1-D data by minimizing Mean Squared Error:

    MSE    = (1/n) * sum((y_i - (m*x_i + b))^2)
    dMSE/dm = (2/n) * sum(error_i * x_i)
    dMSE/db = (2/n) * sum(error_i)          where error = prediction - actual

Every iteration is recorded (before the update) so the whole descent can be
replayed step by step.
"""

import numpy as np
from typing import Optional, Sequence, Tuple
from dataclasses import dataclass

from .types import RegressionPoint, TrainingHistory, points_to_arrays


@dataclass(frozen=True)
class LinearStep:
    """Snapshot of one gradient descent iteration."""
    step: int
    m: float
    b: float
    mse: float
    dm: float
    db: float


def compute_mse(m: float, b: float, x: np.ndarray, y: np.ndarray) -> float:
    """Mean squared error of the line (m, b). 0 for an empty dataset."""
    if len(x) == 0:
        return 0.0
    residuals = y - (m * x + b)
    return float(np.mean(residuals ** 2))


def compute_gradients(m: float, b: float, x: np.ndarray, y: np.ndarray) -> Tuple[float, float]:
    """Gradients of the MSE with respect to m and b."""
    n = len(x)
    if n == 0:
        return 0.0, 0.0
    error = (m * x + b) - y
    dm = (2.0 / n) * float(np.sum(error * x))
    db = (2.0 / n) * float(np.sum(error))
    return dm, db


def r_squared(m: float, b: float, x: np.ndarray, y: np.ndarray) -> float:
    """
    Coefficient of determination of the line (m, b).

    R^2 = 1 - SS_res / SS_tot, defined as 0 when SS_tot is 0
    (constant targets) or the dataset is empty.
    """
    if len(x) == 0:
        return 0.0
    ss_tot = float(np.sum((y - np.mean(y)) ** 2))
    if ss_tot == 0:
        return 0.0
    ss_res = float(np.sum((y - (m * x + b)) ** 2))
    return 1.0 - ss_res / ss_tot


class LinearRegressionGD:
    """
    Simple linear regression trained with batch gradient descent.

    Starts from m = 0, b = 0 and runs exactly ``max_iterations`` updates.
    The history holds max_iterations + 1 entries: one per iteration
    (recorded before that iteration's update) plus the final weights with
    zero gradients.
    """

    def __init__(self, learning_rate: float = 0.01, max_iterations: int = 100,
                 verbose: int = 0):
        """
        Initialize the regressor.

        Args:
            learning_rate: Step size alpha (> 0)
            max_iterations: Number of gradient descent updates (>= 1)
            verbose: 0=silent, 1=progress every 10% of iterations
        """
        if learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {learning_rate}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

        self.learning_rate = learning_rate
        self.max_iterations = int(max_iterations)
        self.verbose = verbose

        self.history_: Optional[TrainingHistory] = None
        self.m: float = 0.0
        self.b: float = 0.0

    def fit(self, x: np.ndarray, y: np.ndarray) -> 'LinearRegressionGD':
        """
        Run gradient descent on (x, y).

        Args:
            x: Inputs of shape (n_samples,)
            y: Targets of shape (n_samples,)

        Returns:
            self
        """
        x = np.asarray(x, dtype=np.float64).ravel()
        y = np.asarray(y, dtype=np.float64).ravel()
        if len(x) != len(y):
            raise ValueError(f"x and y have different lengths: {len(x)} != {len(y)}")

        lr = self.learning_rate
        m, b = 0.0, 0.0
        steps = []
        report_every = max(1, self.max_iterations // 10)

        for i in range(self.max_iterations):
            mse = compute_mse(m, b, x, y)
            dm, db = compute_gradients(m, b, x, y)
            steps.append(LinearStep(step=i, m=m, b=b, mse=mse, dm=dm, db=db))

            m = m - lr * dm
            b = b - lr * db

            if self.verbose >= 1 and (i + 1) % report_every == 0:
                print(f"Iteration {i+1}/{self.max_iterations} - mse: {mse:.6f}")

        steps.append(LinearStep(step=self.max_iterations, m=m, b=b,
                                mse=compute_mse(m, b, x, y), dm=0.0, db=0.0))

        self.m, self.b = m, b
        self.history_ = TrainingHistory(steps)
        return self

    def _check_fitted(self):
        if self.history_ is None:
            raise ValueError("Model not fitted. Call fit() first.")

    def predict(self, x: np.ndarray) -> np.ndarray:
        """Predict targets with the final weights."""
        self._check_fitted()
        x = np.asarray(x, dtype=np.float64)
        return self.m * x + self.b

    def score(self, x: np.ndarray, y: np.ndarray) -> float:
        """Calculate R^2 of the final line."""
        self._check_fitted()
        x = np.asarray(x, dtype=np.float64).ravel()
        y = np.asarray(y, dtype=np.float64).ravel()
        return r_squared(self.m, self.b, x, y)

    def mean_squared_error(self, x: np.ndarray, y: np.ndarray) -> float:
        """Calculate MSE of the final line."""
        self._check_fitted()
        x = np.asarray(x, dtype=np.float64).ravel()
        y = np.asarray(y, dtype=np.float64).ravel()
        return compute_mse(self.m, self.b, x, y)

    @property
    def coef_(self) -> float:
        """Slope m."""
        return self.m

    @property
    def intercept_(self) -> float:
        """Intercept b."""
        return self.b


def fit_linear_regression(points: Sequence[RegressionPoint], learning_rate: float,
                          max_iterations: int) -> TrainingHistory:
    """Train on a list of RegressionPoints and return the descent history."""
    x, y = points_to_arrays(points)
    model = LinearRegressionGD(learning_rate=learning_rate, max_iterations=max_iterations)
    return model.fit(x, y).history_
