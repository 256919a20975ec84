"""
Synthetic dataset generators.

One generator per algorithm page of the visualizer:

- make_linear:    noisy line y = 0.7x + 1.5         (linear regression)
- make_blobs:     two well-separated square blobs   (logistic regression)
- make_clusters:  three jittered clusters            (KNN)
- make_quadrants: axis-aligned regions, 10% noise    (decision tree)
- make_diagonal:  diagonal regions, 10% noise        (random forest)
- make_xor:       XOR pattern on the unit square     (neural network)

All generators take a ``random_state`` and return NumPy arrays.
"""

import numpy as np
from typing import Any, Tuple

LABEL_NOISE = 0.1


def _flip_labels(y: np.ndarray, n_classes: int, rng: np.random.Generator) -> np.ndarray:
    """Replace ~10% of labels with a uniformly random class."""
    y = y.copy()
    for i in range(len(y)):
        if rng.random() < LABEL_NOISE:
            y[i] = rng.integers(0, n_classes)
    return y


def make_linear(n_samples: int = 15, random_state: Any = None) -> Tuple[np.ndarray, np.ndarray]:
    """x ~ U[1, 9], y = 0.7x + 1.5 + U[-1, 1]."""
    rng = np.random.default_rng(random_state)
    x = rng.random(n_samples) * 8 + 1
    y = 0.7 * x + 1.5 + (rng.random(n_samples) - 0.5) * 2
    return x, y


def make_blobs(n_per_class: int = 12, random_state: Any = None) -> Tuple[np.ndarray, np.ndarray]:
    """Class 0 in [1, 4]^2, class 1 in [6, 9]^2."""
    rng = np.random.default_rng(random_state)
    X0 = rng.random((n_per_class, 2)) * 3 + 1
    X1 = rng.random((n_per_class, 2)) * 3 + 6
    X = np.vstack([X0, X1])
    y = np.array([0] * n_per_class + [1] * n_per_class, dtype=np.int64)
    return X, y


CLUSTER_CENTERS = ((2.5, 7.0), (7.0, 7.0), (5.0, 2.5))


def make_clusters(n_per_cluster: int = 8, spread: float = 3.0,
                  random_state: Any = None) -> Tuple[np.ndarray, np.ndarray]:
    """Three classes jittered uniformly (+-spread/2) around fixed centers."""
    rng = np.random.default_rng(random_state)
    X = []
    y = []
    for label, (cx, cy) in enumerate(CLUSTER_CENTERS):
        offsets = (rng.random((n_per_cluster, 2)) - 0.5) * spread
        X.append(np.array([cx, cy]) + offsets)
        y.extend([label] * n_per_cluster)
    return np.vstack(X), np.array(y, dtype=np.int64)


def make_quadrants(n_samples: int = 40, random_state: Any = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Points in [0, 10]^2:
    class 0 when x1 < 5 and x2 < 5, class 1 when x1 >= 5, else class 2.
    """
    rng = np.random.default_rng(random_state)
    X = rng.random((n_samples, 2)) * 10
    y = np.where((X[:, 0] < 5) & (X[:, 1] < 5), 0, np.where(X[:, 0] >= 5, 1, 2))
    return X, _flip_labels(y.astype(np.int64), 3, rng)


def make_diagonal(n_samples: int = 100, random_state: Any = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Points in [0, 10]^2:
    class 0 when x1 + x2 < 8, class 1 when x1 > x2, else class 2.
    """
    rng = np.random.default_rng(random_state)
    X = rng.random((n_samples, 2)) * 10
    y = np.where(X[:, 0] + X[:, 1] < 8, 0, np.where(X[:, 0] > X[:, 1], 1, 2))
    return X, _flip_labels(y.astype(np.int64), 3, rng)


def make_xor(n_samples: int = 60, random_state: Any = None) -> Tuple[np.ndarray, np.ndarray]:
    """x ~ U[0, 1]^2, label 1 when exactly one coordinate exceeds 0.5."""
    rng = np.random.default_rng(random_state)
    X = rng.random((n_samples, 2))
    y = ((X[:, 0] > 0.5) != (X[:, 1] > 0.5)).astype(np.int64)
    return X, y
