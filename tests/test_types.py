"""
Data Type Tests.

Tests for:
- Sample / array conversion
- TrainingHistory indexing and field extraction
"""

import numpy as np
import os
import sys
import pytest
from dataclasses import FrozenInstanceError

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ml_kernels import LinearStep, Point, Sample, TrainingHistory, arrays_to_samples, samples_to_arrays
from ml_kernels.types import as_feature_vector, check_Xy


def test_sample_conversion():
    samples = [Sample(1.0, 2.0, 0), Sample(3.0, 4.0, 1)]
    X, y = samples_to_arrays(samples)

    assert X.shape == (2, 2) and X.dtype == np.float64
    assert list(y) == [0, 1]
    assert arrays_to_samples(X, y) == samples
    assert samples_to_arrays([])[0].shape == (0, 2)


def test_samples_are_immutable():
    sample = Sample(1.0, 2.0, 1)
    with pytest.raises(FrozenInstanceError):
        sample.label = 0


def test_as_feature_vector():
    np.testing.assert_array_equal(as_feature_vector(Point(1.0, 2.0)), [1.0, 2.0])
    np.testing.assert_array_equal(as_feature_vector(Sample(3.0, 4.0, 1)), [3.0, 4.0])
    np.testing.assert_array_equal(as_feature_vector((5, 6)), [5.0, 6.0])


def test_check_Xy_rejects_length_mismatch():
    with pytest.raises(ValueError, match="different lengths"):
        check_Xy([[0.0, 0.0], [1.0, 1.0]], [0])


def test_training_history():
    steps = [LinearStep(step=i, m=float(i), b=0.0, mse=10.0 - i, dm=0.0, db=0.0)
             for i in range(4)]
    history = TrainingHistory(steps)

    assert len(history) == 4
    assert history[2].m == 2.0
    assert history.final is steps[-1]
    np.testing.assert_array_equal(history.values('mse'), [10.0, 9.0, 8.0, 7.0])
    assert history.to_records()[1] == {'step': 1, 'm': 1.0, 'b': 0.0, 'mse': 9.0,
                                       'dm': 0.0, 'db': 0.0}


def test_training_history_requires_consecutive_steps():
    steps = [LinearStep(step=0, m=0, b=0, mse=0, dm=0, db=0),
             LinearStep(step=2, m=0, b=0, mse=0, dm=0, db=0)]
    with pytest.raises(ValueError):
        TrainingHistory(steps)

    with pytest.raises(IndexError):
        TrainingHistory([]).final
