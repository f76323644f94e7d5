"""Small vector helpers and the result type shared by the optimisers."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class OptimResult:
    """Outcome of an optimisation run."""

    x: np.ndarray
    value: float
    success: bool
    iterations: int
    error: float
    population: np.ndarray | None = None


def unit_vec(j: int, n: int) -> np.ndarray:
    """Vector of length ``n`` with a one at position ``j``."""
    if not 0 <= j < n:
        raise IndexError(f"index {j} out of range for length {n}")
    out = np.zeros(n)
    out[j] = 1.0
    return out


def reset_negative_values(vec_in, vec_out) -> np.ndarray:
    """Copy of ``vec_out`` with entries zeroed where ``vec_in`` is not positive."""
    mask = np.asarray(vec_in, dtype=float) <= 0.0
    out = np.array(vec_out, dtype=float)
    out[mask] = 0.0
    return out


def reset_negative_rows(vec_in, mat_out) -> np.ndarray:
    """Copy of ``mat_out`` with rows zeroed where ``vec_in`` is not positive."""
    mask = np.asarray(vec_in, dtype=float) <= 0.0
    out = np.array(mat_out, dtype=float)
    out[mask, :] = 0.0
    return out