"""Gradient descent with momentum, adaptive and Adam-style update rules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Tuple

import numpy as np

from profoc.optim.util import OptimResult

Objective = Callable[[np.ndarray], Tuple[float, np.ndarray]]


class GDMethod(IntEnum):
    """Update rule used to turn a gradient into a step."""

    BASIC = 0
    MOMENTUM = 1
    NESTEROV = 2
    ADAGRAD = 3
    RMSPROP = 4
    ADADELTA = 5
    ADAM = 6
    NADAM = 7


@dataclass
class GDSettings:
    """Tuning parameters and stopping rules for :func:`gd`."""

    method: GDMethod = GDMethod.BASIC
    step_size: float = 0.1
    step_decay: bool = False
    step_decay_periods: int = 10
    step_decay_value: float = 0.5
    momentum: float = 0.9
    ada_norm_term: float = 1e-8
    ada_rho: float = 0.9
    ada_max: bool = False
    adam_beta_1: float = 0.9
    adam_beta_2: float = 0.999
    clip_grad: bool = False
    clip_max_norm: bool = False
    clip_min_norm: bool = False
    clip_norm_type: float = 2.0
    clip_norm_bound: float = 5.0
    iter_max: int = 2000
    grad_err_tol: float = 1e-8
    rel_sol_change_tol: float = 1e-14

    def __post_init__(self) -> None:
        self.method = GDMethod(self.method)
        if self.step_decay_periods <= 0:
            raise ValueError("step_decay_periods must be positive")


def _gradient(objective: Objective, x: np.ndarray) -> tuple[float, np.ndarray]:
    value, grad = objective(x)
    return float(value), np.array(grad, dtype=float).ravel()


def gd_update(
    x,
    grad_p,
    direction,
    objective: Objective,
    iteration: int,
    settings: GDSettings,
    state: dict | None = None,
) -> np.ndarray:
    """Step to subtract from ``x`` for the current iteration.

    ``state`` is a mutable dictionary carried between iterations; it holds
    the current step size (``"step_size"``) and the first and second moment
    vectors (``"m"`` and ``"v"``). Missing entries are initialised.
    """
    if state is None:
        state = {}
    x = np.array(x, dtype=float).ravel()
    g = np.array(grad_p, dtype=float).ravel()
    d = np.array(direction, dtype=float).ravel()

    step = float(state.setdefault("step_size", settings.step_size))
    m = state.get("m")
    v = state.get("v")
    m = np.zeros_like(x) if m is None else np.array(m, dtype=float)
    v = np.zeros_like(x) if v is None else np.array(v, dtype=float)

    if settings.step_decay and iteration % settings.step_decay_periods == 0:
        step *= settings.step_decay_value
        state["step_size"] = step

    eps = settings.ada_norm_term
    rho = settings.ada_rho
    beta_1 = settings.adam_beta_1
    beta_2 = settings.adam_beta_2
    method = settings.method

    if method is GDMethod.BASIC:
        out = step * g
    elif method is GDMethod.MOMENTUM:
        out = settings.momentum * d + step * g
    elif method is GDMethod.NESTEROV:
        _, nag_grad = _gradient(objective, x - settings.momentum * d)
        out = settings.momentum * d + step * nag_grad
    elif method is GDMethod.ADAGRAD:
        v = v + g**2
        out = step * g / (np.sqrt(v) + eps)
    elif method is GDMethod.RMSPROP:
        v = rho * v + (1.0 - rho) * g**2
        out = step * g / (np.sqrt(v) + eps)
    elif method is GDMethod.ADADELTA:
        if iteration == 1:
            m = m + step
        v = rho * v + (1.0 - rho) * g**2
        out = g * ((np.sqrt(m) + eps) / (np.sqrt(v) + eps))
        m = rho * m + (1.0 - rho) * out**2
    elif method is GDMethod.ADAM:
        m = beta_1 * m + (1.0 - beta_1) * g
        if settings.ada_max:
            v = np.maximum(beta_2 * v, np.abs(g))
            adam_step = step / (1.0 - beta_1**iteration)
            out = adam_step * m / (v + eps)
        else:
            adam_step = step * math.sqrt(1.0 - beta_2**iteration) / (
                1.0 - beta_1**iteration
            )
            v = beta_2 * v + (1.0 - beta_2) * g**2
            out = adam_step * m / (np.sqrt(v) + eps)
    else:  # NADAM
        m = beta_1 * m + (1.0 - beta_1) * g
        bias_1 = 1.0 - beta_1**iteration
        m_hat = m / bias_1
        grad_hat = g / bias_1
        numerator = step * (beta_1 * m_hat + (1.0 - beta_1) * grad_hat)
        if settings.ada_max:
            v = np.maximum(beta_2 * v, np.abs(g))
            out = numerator / (v + eps)
        else:
            v = beta_2 * v + (1.0 - beta_2) * g**2
            v_hat = v / (1.0 - beta_2**iteration)
            out = numerator / (np.sqrt(v_hat) + eps)

    state["m"] = m
    state["v"] = v
    return out


def gradient_clipping(grad, settings: GDSettings) -> np.ndarray:
    """Rescale ``grad`` so that its norm does not exceed the clipping bound."""
    g = np.array(grad, dtype=float).ravel()
    if settings.clip_max_norm:
        norm = float(np.max(np.abs(g)))
    elif settings.clip_min_norm:
        norm = float(np.min(np.abs(g)))
    else:
        norm = float(np.linalg.norm(g, ord=settings.clip_norm_type))

    if norm > settings.clip_norm_bound and math.isfinite(norm):
        g = settings.clip_norm_bound * (g / norm)
    return g


def gd(x0, objective: Objective, settings: GDSettings | None = None) -> OptimResult:
    """Minimise ``objective`` from ``x0`` by gradient descent.

    ``objective`` maps a point to ``(value, gradient)``. Iteration stops when
    the gradient norm falls to ``grad_err_tol``, the relative change of the
    solution to ``rel_sol_change_tol``, or after ``iter_max`` steps.
    """
    settings = settings or GDSettings()
    x = np.array(x0, dtype=float).ravel()
    if not np.all(np.isfinite(x)):
        raise ValueError("non-finite initial value(s)")

    value, grad = _gradient(objective, x)
    grad_err = float(np.linalg.norm(grad))
    if grad_err <= settings.grad_err_tol:
        return OptimResult(x=x, value=value, success=True, iterations=0, error=grad_err)

    d = np.zeros_like(x)
    grad_p = grad
    state: dict = {}
    rel_sol_change = 1.0
    iteration = 0

    while (
        grad_err > settings.grad_err_tol
        and rel_sol_change > settings.rel_sol_change_tol
        and iteration < settings.iter_max
    ):
        iteration += 1
        d_p = gd_update(x, grad_p, d, objective, iteration, settings, state)
        x_p = x - d_p

        _, grad_p = _gradient(objective, x_p)
        if settings.clip_grad:
            grad_p = gradient_clipping(grad_p, settings)

        grad_err = float(np.linalg.norm(grad_p))
        rel_sol_change = float(np.sum(np.abs((x_p - x) / (np.abs(x) + 1e-8))))

        d = d_p
        x = x_p

    value, _ = _gradient(objective, x)
    success = grad_err <= settings.grad_err_tol and iteration <= settings.iter_max
    return OptimResult(
        x=x, value=value, success=success, iterations=iteration, error=grad_err
    )