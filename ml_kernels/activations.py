"""
Activation functions and their derivatives.

Derivatives are expressed in terms of the already-activated value ``a``
(not the pre-activation ``z``), which is what backpropagation has at hand:

    sigmoid'(a) = a * (1 - a)
    tanh'(a)    = 1 - a^2
    relu'(a)    = 1 if a > 0 else 0
"""

import numpy as np
from typing import Callable, Dict, Tuple

SIGMOID_CLIP = 500.0


def sigmoid(z):
    """Logistic function with the input clamped to [-500, 500]."""
    z = np.clip(z, -SIGMOID_CLIP, SIGMOID_CLIP)
    return 1.0 / (1.0 + np.exp(-z))


def sigmoid_derivative(a):
    return a * (1.0 - a)


def tanh(z):
    return np.tanh(z)


def tanh_derivative(a):
    return 1.0 - a ** 2


def relu(z):
    return np.maximum(0.0, z)


def relu_derivative(a):
    return (np.asarray(a) > 0).astype(np.float64)


ACTIVATIONS: Dict[str, Tuple[Callable, Callable]] = {
    'sigmoid': (sigmoid, sigmoid_derivative),
    'tanh': (tanh, tanh_derivative),
    'relu': (relu, relu_derivative),
}


def get_activation(name: str) -> Tuple[Callable, Callable]:
    """Look up (function, derivative) by name."""
    try:
        return ACTIVATIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown activation '{name}'. Expected one of {sorted(ACTIVATIONS)}"
        ) from None
