"""
Random Forest Tests.

Tests for:
- Bootstrap sample size and out-of-bag bookkeeping
- Feature subset sampling
- Majority voting and tie rule
- OOB error and feature importance
- Reproducibility with a fixed seed
"""

import numpy as np
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ml_kernels import (
    ForestTree,
    LeafNode,
    RandomForestClassifier,
    Sample,
    build_forest,
    build_forest_from_samples,
    feature_importance,
    forest_predict,
    out_of_bag_error,
)
from ml_kernels.random_forest import round_half_up


def leaf_tree(prediction, oob_indices=()):
    leaf = LeafNode(prediction=prediction, n_samples=1, impurity=0.0,
                    class_counts={prediction: 1}, depth=0)
    return ForestTree(tree=leaf, train_indices=np.array([0]),
                      oob_indices=np.array(oob_indices, dtype=np.int64),
                      features_used=(0, 1))


@pytest.fixture
def clusters():
    rng = np.random.default_rng(3)
    X = np.vstack([rng.random((20, 2)), rng.random((20, 2)) + 5])
    y = np.array([0] * 20 + [1] * 20)
    return X, y


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(3.49) == 3
    assert round_half_up(10.5) == 11


def test_bootstrap_bookkeeping(clusters):
    """Draw counts, OOB sets and feature subsets per tree."""
    print("=" * 60)
    print("TEST: Random forest bootstrap bookkeeping")
    print("=" * 60)

    X, y = clusters
    forest = build_forest(X, y, n_trees=5, bootstrap_ratio=0.45, feature_ratio=0.5,
                          random_state=0)

    assert len(forest) == 5
    for member in forest:
        print(f"  samples={member.sample_size} oob={len(member.oob_indices)} "
              f"features={member.features_used}")
        assert member.sample_size == 18
        drawn = set(member.train_indices.tolist())
        oob = set(member.oob_indices.tolist())
        assert drawn.isdisjoint(oob)
        assert drawn | oob == set(range(len(X)))
        assert list(member.oob_indices) == sorted(member.oob_indices)
        assert len(member.features_used) == 1
        assert member.n_nodes >= 1


def test_feature_subset_sizes(clusters):
    X, y = clusters
    for ratio, expected in ((1.0, 2), (0.5, 1), (0.3, 1)):
        forest = build_forest(X, y, n_trees=3, feature_ratio=ratio, random_state=1)
        for member in forest:
            assert len(member.features_used) == expected
            assert list(member.features_used) == sorted(member.features_used)


def test_reproducible_with_seed(clusters):
    X, y = clusters
    a = build_forest(X, y, n_trees=4, random_state=42)
    b = build_forest(X, y, n_trees=4, random_state=42)

    for ta, tb in zip(a, b):
        np.testing.assert_array_equal(ta.train_indices, tb.train_indices)
        assert ta.features_used == tb.features_used
    for x in X:
        assert forest_predict(a, x) == forest_predict(b, x)


def test_vote_tie_goes_to_lowest_label():
    forest = [leaf_tree(1), leaf_tree(0)]
    assert forest_predict(forest, (0.0, 0.0)) == 0

    forest = [leaf_tree(2), leaf_tree(1), leaf_tree(2)]
    assert forest_predict(forest, Sample(0.0, 0.0)) == 2


def test_out_of_bag_error():
    X = np.zeros((3, 2))
    y = np.array([0, 1, 1])
    forest = [leaf_tree(0, oob_indices=[0, 1]), leaf_tree(1, oob_indices=[2])]

    assert out_of_bag_error(forest, X, y) == pytest.approx(1 / 3)


def test_oob_error_without_voters_is_zero():
    forest = [leaf_tree(0), leaf_tree(1)]
    assert out_of_bag_error(forest, np.zeros((2, 2)), np.array([1, 0])) == 0.0

    # A single point is always drawn, so nothing is out of bag
    model = RandomForestClassifier(n_estimators=3, bootstrap_ratio=1.0,
                                   random_state=0).fit([[1.0, 2.0]], [1])
    assert model.oob_error_ == 0.0
    assert all(len(member.oob_indices) == 0 for member in model.trees)


def test_classifier_on_separated_clusters(clusters):
    X, y = clusters
    model = RandomForestClassifier(n_estimators=7, max_depth=3, random_state=0).fit(X, y)

    assert model.score(X, y) == 1.0
    assert 0.0 <= model.oob_error_ <= 1.0
    importance = model.feature_importance()
    assert set(importance) == {'x1', 'x2'}
    assert sum(importance.values()) == pytest.approx(1.0)
    np.testing.assert_allclose(model.feature_importances_,
                               [importance['x1'], importance['x2']])


def test_feature_importance_all_zero_without_splits():
    forest = [leaf_tree(0), leaf_tree(1)]
    assert feature_importance(forest) == {'x1': 0.0, 'x2': 0.0}


def test_build_from_samples():
    data = [Sample(float(i), 0.0, int(i >= 5)) for i in range(10)]
    forest = build_forest_from_samples(data, n_trees=3, max_depth=2,
                                       bootstrap_ratio=0.7, feature_ratio=1.0,
                                       random_state=7)

    assert len(forest) == 3
    assert all(member.sample_size == 7 for member in forest)


def test_invalid_hyperparameters(clusters):
    X, y = clusters
    with pytest.raises(ValueError):
        build_forest(X, y, n_trees=0)
    with pytest.raises(ValueError):
        build_forest(X, y, bootstrap_ratio=0.0)
    with pytest.raises(ValueError):
        build_forest(X, y, bootstrap_ratio=1.5)
    with pytest.raises(ValueError):
        build_forest(X, y, feature_ratio=0.0)
    with pytest.raises(ValueError, match="not fitted"):
        RandomForestClassifier().predict(X)


def test_out_of_bag_error_from_samples():
    data = [Sample(0.0, 0.0, 0), Sample(0.0, 0.0, 1), Sample(0.0, 0.0, 1)]
    forest = [leaf_tree(0, oob_indices=[0, 1]), leaf_tree(1, oob_indices=[2])]

    assert out_of_bag_error(forest, data) == pytest.approx(1 / 3)
