"""
Neural Network (Multi-Layer Perceptron) from scratch.

Implements:
- Dense network: Input(2) -> Hidden(n) x L -> Output(1, sigmoid)
- Selectable hidden activation (sigmoid, tanh, ReLU)
- Backpropagation with online (per-sample) gradient descent
- Full per-epoch snapshots of the network for step-by-step replay

Loss is the squared error 0.5 * (a - y)^2 averaged over the epoch, even though
the output is a sigmoid probability.
"""

import numpy as np
from typing import Any, List, Optional, Sequence, Tuple
from dataclasses import dataclass

from .activations import get_activation, sigmoid, sigmoid_derivative
from .types import Sample, TrainingHistory, as_feature_vector, check_Xy, samples_to_arrays

N_INPUTS = 2
N_OUTPUTS = 1
BIAS_INIT_SCALE = 0.05


@dataclass(frozen=True)
class NetworkParams:
    """
    Weights and biases of every layer.

    weights[l] has shape (n_in, n_out) and biases[l] shape (n_out,), so a
    layer computes z = a @ W + b.
    """
    weights: Tuple[np.ndarray, ...]
    biases: Tuple[np.ndarray, ...]

    @property
    def layer_sizes(self) -> List[int]:
        return [self.weights[0].shape[0]] + [w.shape[1] for w in self.weights]

    def copy(self) -> 'NetworkParams':
        """Deep copy, independent of later updates."""
        return NetworkParams(weights=tuple(w.copy() for w in self.weights),
                             biases=tuple(b.copy() for b in self.biases))

    @classmethod
    def zeros(cls, layer_sizes: Sequence[int]) -> 'NetworkParams':
        """All-zero parameters for the given layer sizes."""
        return cls(
            weights=tuple(np.zeros((n_in, n_out))
                          for n_in, n_out in zip(layer_sizes[:-1], layer_sizes[1:])),
            biases=tuple(np.zeros(n_out) for n_out in layer_sizes[1:]),
        )


@dataclass(frozen=True)
class EpochRecord:
    """Snapshot taken after one training epoch."""
    step: int
    loss: float
    accuracy: float
    network: NetworkParams
    activations: Tuple[np.ndarray, ...]   # forward pass of the epoch's last sample
    deltas: Tuple[np.ndarray, ...]        # its per-layer deltas


def build_layer_sizes(hidden_layers: int, neurons_per_layer: int) -> List[int]:
    """[2, n, ..., n, 1] with ``hidden_layers`` hidden layers."""
    return [N_INPUTS] + [neurons_per_layer] * hidden_layers + [N_OUTPUTS]


def init_params(layer_sizes: Sequence[int], random_state: Any = None) -> NetworkParams:
    """
    Variance-scaled uniform initialization.

    W ~ U[-1, 1] * sqrt(2 / (n_in + n_out)),  b ~ U[-0.05, 0.05]
    """
    rng = np.random.default_rng(random_state)
    weights = []
    biases = []
    for n_in, n_out in zip(layer_sizes[:-1], layer_sizes[1:]):
        scale = np.sqrt(2.0 / (n_in + n_out))
        weights.append(rng.uniform(-1.0, 1.0, size=(n_in, n_out)) * scale)
        biases.append(rng.uniform(-BIAS_INIT_SCALE, BIAS_INIT_SCALE, size=n_out))
    return NetworkParams(weights=tuple(weights), biases=tuple(biases))


# =========================================================================
# Forward and backward propagation
# =========================================================================

def forward(params: NetworkParams, x: np.ndarray, activation: str = 'sigmoid') -> List[np.ndarray]:
    """
    Forward propagation of a single sample.

    Returns:
        Activations of every layer, input first; the last entry holds the
        sigmoid output
    """
    fn, _ = get_activation(activation)
    activations = [np.asarray(x, dtype=np.float64)]

    a = activations[0]
    n_layers = len(params.weights)
    for l in range(n_layers):
        z = a @ params.weights[l] + params.biases[l]
        a = sigmoid(z) if l == n_layers - 1 else fn(z)
        activations.append(a)

    return activations


def backpropagate(params: NetworkParams, x: np.ndarray, target: float,
                  activation: str = 'sigmoid'):
    """
    Backward propagation for one sample.

    Output delta = (a - y) * a(1 - a); hidden delta = (W_next @ delta_next)
    * f'(a) with f' taken of the activated value. All deltas use the current
    (pre-update) weights.

    Returns:
        Tuple of (weight_gradients, bias_gradients, activations, deltas, loss)
    """
    _, derivative = get_activation(activation)
    activations = forward(params, x, activation)
    n_layers = len(params.weights)

    output = activations[-1]
    error = output - target
    deltas: List[Optional[np.ndarray]] = [None] * n_layers
    deltas[-1] = error * sigmoid_derivative(output)

    for l in range(n_layers - 2, -1, -1):
        downstream = params.weights[l + 1] @ deltas[l + 1]
        deltas[l] = downstream * derivative(activations[l + 1])

    dW = [np.outer(activations[l], deltas[l]) for l in range(n_layers)]
    db = [deltas[l].copy() for l in range(n_layers)]
    loss = 0.5 * float(error[0]) ** 2

    return dW, db, activations, deltas, loss


class NeuralNetwork:
    """
    Multi-Layer Perceptron for binary classification of 2-D points.

    Architecture:
        Input(2) -> Dense(n, activation) x hidden_layers -> Output(1, sigmoid)

    Training is online SGD: weights are updated after every sample, in the
    given order, without shuffling.
    """

    def __init__(self,
                 hidden_layers: int = 2,
                 neurons_per_layer: int = 8,
                 learning_rate: float = 0.5,
                 activation: str = 'sigmoid',
                 epochs: int = 500,
                 random_state: Any = None,
                 verbose: int = 0):
        """
        Initialize Neural Network.

        Args:
            hidden_layers: Number of hidden layers (>= 1)
            neurons_per_layer: Neurons in each hidden layer (>= 1)
            learning_rate: Learning rate for gradient descent (> 0)
            activation: Hidden layer activation ('sigmoid', 'tanh', 'relu')
            epochs: Number of passes over the data (>= 1)
            random_state: Seed or numpy Generator for weight initialization
            verbose: 0=silent, 1=every 10% of epochs, 2=every epoch
        """
        if hidden_layers < 1:
            raise ValueError(f"hidden_layers must be >= 1, got {hidden_layers}")
        if neurons_per_layer < 1:
            raise ValueError(f"neurons_per_layer must be >= 1, got {neurons_per_layer}")
        if learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {learning_rate}")
        if epochs < 1:
            raise ValueError(f"epochs must be >= 1, got {epochs}")
        get_activation(activation)

        self.hidden_layers = int(hidden_layers)
        self.neurons_per_layer = int(neurons_per_layer)
        self.learning_rate = learning_rate
        self.activation = activation
        self.epochs = int(epochs)
        self.random_state = random_state
        self.verbose = verbose

        self.layer_sizes = build_layer_sizes(self.hidden_layers, self.neurons_per_layer)
        self.params: Optional[NetworkParams] = None
        self.history_: Optional[TrainingHistory] = None

    # =========================================================================
    # Training
    # =========================================================================

    def _train_epoch(self, weights: List[np.ndarray], biases: List[np.ndarray],
                     X: np.ndarray, y: np.ndarray):
        lr = self.learning_rate
        total_loss = 0.0
        last_activations: Tuple[np.ndarray, ...] = ()
        last_deltas: Tuple[np.ndarray, ...] = ()

        for x, target in zip(X, y):
            current = NetworkParams(weights=tuple(weights), biases=tuple(biases))
            dW, db, activations, deltas, loss = backpropagate(current, x, target,
                                                              self.activation)
            for l in range(len(weights)):
                weights[l] = weights[l] - lr * dW[l]
                biases[l] = biases[l] - lr * db[l]

            total_loss += loss
            last_activations = tuple(activations)
            last_deltas = tuple(deltas)

        mean_loss = total_loss / len(X) if len(X) > 0 else 0.0
        return mean_loss, last_activations, last_deltas

    def fit(self, X: np.ndarray, y: np.ndarray) -> 'NeuralNetwork':
        """
        Train the neural network.

        Args:
            X: Training features of shape (n_samples, 2)
            y: Binary labels (0/1) of shape (n_samples,)

        Returns:
            self
        """
        X, y = check_Xy(X, y, n_features=N_INPUTS)
        y = y.astype(np.float64)

        initial = init_params(self.layer_sizes, self.random_state)
        weights = list(initial.weights)
        biases = list(initial.biases)

        records = []
        report_every = max(1, self.epochs // 10)

        for epoch in range(self.epochs):
            loss, activations, deltas = self._train_epoch(weights, biases, X, y)
            snapshot = NetworkParams(weights=tuple(weights), biases=tuple(biases)).copy()
            accuracy = self._accuracy(snapshot, X, y)

            records.append(EpochRecord(step=epoch, loss=loss, accuracy=accuracy,
                                       network=snapshot, activations=activations,
                                       deltas=deltas))

            if self.verbose >= 2 or (self.verbose == 1 and (epoch + 1) % report_every == 0):
                print(f"Epoch {epoch+1}/{self.epochs} - loss: {loss:.4f} - accuracy: {accuracy:.4f}")

        self.params = records[-1].network
        self.history_ = TrainingHistory(records)
        return self

    def _accuracy(self, params: NetworkParams, X: np.ndarray, y: np.ndarray) -> float:
        if len(X) == 0:
            return 0.0
        outputs = np.array([forward(params, x, self.activation)[-1][0] for x in X])
        return float(np.mean((outputs > 0.5).astype(np.float64) == y))

    # =========================================================================
    # Prediction
    # =========================================================================

    def _params_at(self, step: Optional[int]) -> NetworkParams:
        if self.history_ is None:
            raise ValueError("Model not fitted. Call fit() first.")
        return self.params if step is None else self.history_[step].network

    def predict_proba(self, X: np.ndarray, step: Optional[int] = None) -> np.ndarray:
        """
        Output probabilities of class 1.

        Args:
            X: Input features (n_samples, 2)
            step: Epoch snapshot to use (default: trained network)
        """
        params = self._params_at(step)
        X = np.asarray(X, dtype=np.float64).reshape(-1, N_INPUTS)
        return np.array([forward(params, x, self.activation)[-1][0] for x in X])

    def predict(self, X: np.ndarray, step: Optional[int] = None) -> np.ndarray:
        """Class labels: output > 0.5 -> 1."""
        return (self.predict_proba(X, step) > 0.5).astype(np.int64)

    def predict_one(self, point) -> int:
        return int(self.predict(as_feature_vector(point))[0])

    def score(self, X: np.ndarray, y: np.ndarray) -> float:
        """Classification accuracy of the trained network."""
        X, y = check_Xy(X, y, n_features=N_INPUTS)
        return self._accuracy(self._params_at(None), X, y.astype(np.float64))


def train(data: Sequence[Sample], hidden_layer_count: int, neurons_per_hidden_layer: int,
          learning_rate: float, activation: str, epochs: int,
          random_state: Any = None) -> TrainingHistory:
    """Train on a list of binary Samples and return the per-epoch history."""
    X, y = samples_to_arrays(data)
    model = NeuralNetwork(hidden_layer_count, neurons_per_hidden_layer, learning_rate,
                          activation, epochs, random_state)
    return model.fit(X, y).history_
