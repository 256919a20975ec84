"""
Shared data types for the ML kernels.

Implements:
- Sample / RegressionPoint records (immutable)
- Conversion between record sequences and NumPy arrays
- TrainingHistory: fully materialized sequence of per-step snapshots

Kernels work on NumPy arrays internally; the record types exist so callers
can keep a dataset as a list of points and replace it wholesale.
"""

import numpy as np
from typing import Any, Generic, Iterator, List, Sequence, Tuple, TypeVar, Union
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class Sample:
    """Labelled 2-D classification point."""
    x1: float
    x2: float
    label: int = 0

    @property
    def features(self) -> Tuple[float, float]:
        return (self.x1, self.x2)


@dataclass(frozen=True)
class RegressionPoint:
    """Point for simple regression: y is the target."""
    x: float
    y: float


@dataclass(frozen=True)
class Point:
    """Unlabelled query point."""
    x1: float
    x2: float

    @property
    def features(self) -> Tuple[float, float]:
        return (self.x1, self.x2)


ClassificationData = Union[Sequence[Sample], np.ndarray]


def samples_to_arrays(samples: Sequence[Sample]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert a sequence of Samples to (X, y) arrays.

    Returns:
        X of shape (n_samples, 2) as float64 and y of shape (n_samples,) as int64
    """
    X = np.array([[s.x1, s.x2] for s in samples], dtype=np.float64).reshape(-1, 2)
    y = np.array([s.label for s in samples], dtype=np.int64)
    return X, y


def arrays_to_samples(X: np.ndarray, y: np.ndarray) -> List[Sample]:
    """Inverse of samples_to_arrays."""
    X = np.asarray(X, dtype=np.float64)
    return [Sample(float(row[0]), float(row[1]), int(label)) for row, label in zip(X, y)]


def points_to_arrays(points: Sequence[RegressionPoint]) -> Tuple[np.ndarray, np.ndarray]:
    """Convert regression points to 1-D x and y arrays."""
    x = np.array([p.x for p in points], dtype=np.float64)
    y = np.array([p.y for p in points], dtype=np.float64)
    return x, y


def as_feature_vector(point: Any) -> np.ndarray:
    """Accept a Sample, Point, tuple or array and return a float64 vector."""
    if hasattr(point, 'features'):
        return np.array(point.features, dtype=np.float64)
    return np.asarray(point, dtype=np.float64).ravel()


def check_Xy(X: np.ndarray, y: np.ndarray, n_features: int = 2) -> Tuple[np.ndarray, np.ndarray]:
    """Coerce X, y to arrays and check their shapes agree."""
    X = np.asarray(X, dtype=np.float64).reshape(-1, n_features)
    y = np.asarray(y).ravel()
    if len(X) != len(y):
        raise ValueError(f"X and y have different lengths: {len(X)} != {len(y)}")
    return X, y


T = TypeVar('T')


class TrainingHistory(Generic[T]):
    """
    Ordered, immutable sequence of training snapshots.

    Every entry carries a ``step`` attribute and ``history[i].step == i``.
    Entries are built by the training loop that owns them and never
    modified afterwards, so any index can be replayed safely.
    """

    def __init__(self, entries: Sequence[T]):
        self._entries: Tuple[T, ...] = tuple(entries)
        for i, entry in enumerate(self._entries):
            if entry.step != i:
                raise ValueError(f"History entry {i} has step {entry.step}")

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"TrainingHistory(n_steps={len(self)})"

    @property
    def final(self) -> T:
        """Last snapshot (the trained model)."""
        if not self._entries:
            raise IndexError("Empty training history")
        return self._entries[-1]

    def values(self, name: str) -> np.ndarray:
        """Collect one numeric field across all steps, e.g. ``values('loss')``."""
        return np.array([getattr(entry, name) for entry in self._entries], dtype=np.float64)

    def to_records(self) -> List[dict]:
        """Plain dicts of the scalar fields of every step."""
        records = []
        for entry in self._entries:
            record = {}
            for f in fields(entry):
                value = getattr(entry, f.name)
                if isinstance(value, (int, float, np.floating, np.integer)):
                    record[f.name] = value
            records.append(record)
        return records
