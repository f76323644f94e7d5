"""Finite-difference Hessian of a scalar objective."""

from __future__ import annotations

import math
from itertools import combinations_with_replacement
from typing import Callable

import numpy as np


def numerical_hessian(
    x,
    objective: Callable[[np.ndarray], float],
    step_size: float | None = None,
) -> np.ndarray:
    """Hessian of ``objective`` at ``x`` by central finite differences.

    Diagonal entries use a five-point stencil, off-diagonal entries a
    four-point stencil. The step in each coordinate is the larger of the
    coordinate's magnitude and ``sqrt(step_size) * eps**(1/6)``;
    ``step_size`` defaults to 1e-4.
    """
    x_orig = np.array(x, dtype=float).ravel()
    n_vals = x_orig.size
    base = 1e-4 if step_size is None else float(step_size)
    mach_eps = np.finfo(float).eps
    steps = np.maximum(np.abs(x_orig), math.sqrt(base) * mach_eps ** (1.0 / 6.0))

    def value_at(offsets: dict[int, float]) -> float:
        point = x_orig.copy()
        for index, offset in offsets.items():
            point[index] += offset
        return float(objective(point))

    f_orig = -30.0 * float(objective(x_orig.copy()))
    hessian = np.zeros((n_vals, n_vals))

    for i, j in combinations_with_replacement(range(n_vals), 2):
        h_i, h_j = steps[i], steps[j]
        if i == j:
            total = (
                -value_at({i: 2 * h_i})
                + 16.0 * value_at({i: h_i})
                + f_orig
                + 16.0 * value_at({i: -h_i})
                - value_at({i: -2 * h_i})
            )
            hessian[i, i] = total / (12.0 * h_i * h_i)
        else:
            total = (
                value_at({i: h_i, j: h_j})
                - value_at({i: h_i, j: -h_j})
                - value_at({i: -h_i, j: h_j})
                + value_at({i: -h_i, j: -h_j})
            )
            hessian[i, j] = total / (4.0 * h_i * h_j)
            hessian[j, i] = hessian[i, j]

    return hessian