import itertools
import math

import numpy as np
import pytest

from profoc.misc import (
    diff,
    get_combinations,
    mat2vec,
    pmax,
    pmin,
    set_default,
    threshold_hard,
    threshold_soft,
    vec2mat,
)


def test_pmin_caps_values():
    x = np.array([[1.0, 5.0], [3.0, -2.0]])
    out = pmin(x, 2.5)
    assert out.shape == x.shape
    assert np.all(out <= 2.5)
    np.testing.assert_array_equal(out[x <= 2.5], x[x <= 2.5])


def test_pmax_floors_values_and_keeps_nan():
    x = np.array([1.0, -5.0, np.nan, 3.0])
    out = pmax(x, 0.0)
    assert np.isnan(out[2])
    finite = out[~np.isnan(out)]
    assert np.all(finite >= 0.0)
    np.testing.assert_array_equal(out[[0, 3]], x[[0, 3]])


def test_pmin_does_not_modify_input():
    x = np.array([1.0, 10.0])
    pmin(x, 2.0)
    np.testing.assert_array_equal(x, np.array([1.0, 10.0]))


def test_diff_matches_numpy_for_lag_one():
    x = np.array([1.0, 4.0, 9.0, 16.0, 25.0])
    np.testing.assert_allclose(diff(x, 1, 2), np.diff(x, n=2))


def test_diff_length_with_lag():
    x = np.arange(10.0)
    out = diff(x, 3, 2)
    assert out.size == 10 - 3 * 2
    assert np.all(out == 0.0)


def test_diff_zero_differences_returns_input():
    x = np.array([2.0, 7.0, 1.0])
    np.testing.assert_array_equal(diff(x, 1, 0), x)


def test_diff_lag_too_large_raises():
    with pytest.raises(ValueError):
        diff([1.0, 2.0], 2, 1)


def test_get_combinations_from_vectors():
    a = [1.0, 2.0]
    b = [10.0, 20.0, 30.0]
    grid = get_combinations(a, b)
    assert grid.shape == (6, 2)
    assert [tuple(r) for r in grid] == list(itertools.product(a, b))


def test_get_combinations_chained():
    grid = get_combinations(get_combinations([1.0, 2.0], [3.0]), [4.0, 5.0])
    assert grid.shape == (4, 3)
    assert [tuple(r) for r in grid] == list(itertools.product([1.0, 2.0], [3.0], [4.0, 5.0]))


def test_get_combinations_append_only():
    x = np.array([[1.0, 2.0], [3.0, 4.0]])
    grid = get_combinations(x, [], True, 1)
    assert grid.shape == (2, 3)
    np.testing.assert_array_equal(grid[:, 2], x[:, 1])
    np.testing.assert_array_equal(grid[:, :2], x)


def test_set_default():
    np.testing.assert_array_equal(set_default([], 7.0), np.array([7.0]))
    np.testing.assert_array_equal(set_default([1.0, 2.0], 7.0), np.array([1.0, 2.0]))


def test_threshold_hard():
    assert threshold_hard(0.3, 0.5) == 0.0
    assert threshold_hard(-0.8, 0.5) == -0.8
    assert threshold_hard(0.1, -math.inf) == 0.1


def test_threshold_soft_shrinks_by_threshold():
    for x in (2.0, -2.0, 0.75):
        out = threshold_soft(x, 0.5)
        assert out == pytest.approx(math.copysign(abs(x) - 0.5, x))
    assert threshold_soft(0.3, 0.5) == 0.0
    assert threshold_soft(-0.3, -math.inf) == -0.3


def test_vec2mat_mat2vec_round_trip():
    values = np.arange(12.0)
    m = vec2mat(values, 3, 4)
    assert m.shape == (3, 4)
    np.testing.assert_array_equal(m[0], values[:4])
    np.testing.assert_array_equal(mat2vec(m), values)


def test_vec2mat_too_few_values_raises():
    with pytest.raises(ValueError):
        vec2mat([1.0, 2.0, 3.0], 2, 2)