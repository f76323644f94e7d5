"""Array helpers for parameter grids, thresholding and reshaping."""

from __future__ import annotations

import math

import numpy as np


def pmin(x, bound: float) -> np.ndarray:
    """Element-wise cap of ``x`` at ``bound``; NaN entries are kept."""
    arr = np.array(x, dtype=float)
    return np.where(arr > bound, bound, arr)


def pmax(x, bound: float) -> np.ndarray:
    """Element-wise floor of ``x`` at ``bound``; NaN entries are kept."""
    arr = np.array(x, dtype=float)
    return np.where(arr < bound, bound, arr)


def diff(x, lag: int = 1, differences: int = 1) -> np.ndarray:
    """Lagged differences of a series, applied ``differences`` times."""
    arr = np.array(x, dtype=float).ravel()
    for _ in range(differences):
        if lag >= arr.size:
            raise ValueError("lag must be smaller than the length of the series")
        arr = arr[lag:] - arr[: arr.size - lag]
    return arr


def get_combinations(x, y, append_only: bool = False, append_col: int = 0) -> np.ndarray:
    """Cross every row of ``x`` with every value of ``y``.

    A one-dimensional ``x`` is treated as a single column. With
    ``append_only`` the column ``append_col`` of ``x`` is repeated instead.
    """
    grid = np.array(x, dtype=float)
    if grid.ndim == 1:
        grid = grid[:, np.newaxis]
    if append_only:
        return np.column_stack([grid, grid[:, append_col]])
    values = np.array(y, dtype=float).ravel()
    return np.column_stack(
        [np.repeat(grid, values.size, axis=0), np.tile(values, grid.shape[0])]
    )


def set_default(values, value: float) -> np.ndarray:
    """Return ``values``, or a one-element array of ``value`` if it is empty."""
    arr = np.array(values, dtype=float).ravel()
    if arr.size == 0:
        return np.array([value], dtype=float)
    return arr


def threshold_hard(x: float, threshold: float) -> float:
    """Zero ``x`` unless its magnitude exceeds ``threshold``; ``-inf`` disables."""
    if threshold == -math.inf:
        return x
    return x * float(abs(x) > threshold)


def threshold_soft(x: float, threshold: float) -> float:
    """Shrink ``x`` towards zero by ``threshold``; ``-inf`` disables."""
    if threshold == -math.inf:
        return x
    sign = float((x > 0) - (x < 0))
    return sign * max(abs(x) - threshold, 0.0)


def vec2mat(x, rows: int, cols: int) -> np.ndarray:
    """Fill a ``rows`` by ``cols`` matrix row by row from ``x``."""
    arr = np.array(x, dtype=float).ravel()
    needed = rows * cols
    if arr.size < needed:
        raise ValueError(f"need {needed} values, got {arr.size}")
    return arr[:needed].reshape(rows, cols)


def mat2vec(x) -> np.ndarray:
    """Flatten a matrix row by row."""
    return np.array(x, dtype=float).reshape(-1)