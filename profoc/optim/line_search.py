"""More-Thuente line search satisfying the strong Wolfe conditions."""

from __future__ import annotations

from typing import Callable, Tuple

import numpy as np

Objective = Callable[[np.ndarray], Tuple[float, np.ndarray]]

_ITER_MAX = 100
_STEP_MIN = 0.0
_STEP_MAX = 10.0
_XTOL = 1e-4
_EXTRAP_DELTA = 4.0

_Point = Tuple[float, float, float]


def _evaluate(objective: Objective, x: np.ndarray) -> tuple[float, np.ndarray]:
    value, grad = objective(x)
    return float(value), np.array(grad, dtype=float).ravel()


def _sup_norm(a: float, b: float, c: float) -> float:
    return max(abs(a), abs(b), abs(c))


def _mt_step(
    best: _Point,
    other: _Point,
    trial: _Point,
    bracket: bool,
    step_min: float,
    step_max: float,
) -> tuple[int, _Point, _Point, float, bool]:
    """Update the interval of uncertainty and propose the next trial step.

    Each point is a ``(step, value, derivative)`` triple. Returns the case
    number, the new best and other end points, the new step and whether the
    minimiser is now bracketed.
    """
    with np.errstate(all="ignore"):
        st_best, f_best, d_best = (np.float64(v) for v in best)
        st_other, f_other, d_other = (np.float64(v) for v in other)
        step, f_step, d_step = (np.float64(v) for v in trial)

        sgnd = d_step * (d_best / abs(d_best))

        if f_step > f_best:
            info, bound = 1, True
            theta = 3 * (f_best - f_step) / (step - st_best) + d_best + d_step
            s = _sup_norm(theta, d_best, d_step)
            gamma = s * np.sqrt((theta / s) ** 2 - (d_best / s) * (d_step / s))
            if step < st_best:
                gamma = -gamma
            p = (gamma - d_best) + theta
            q = ((gamma - d_best) + gamma) + d_step
            r = p / q
            step_c = st_best + r * (step - st_best)
            step_q = st_best + (
                (d_best / ((f_best - f_step) / (step - st_best) + d_best)) / 2.0
            ) * (step - st_best)
            if abs(step_c - st_best) < abs(step_q - st_best):
                step_f = step_c
            else:
                step_f = step_c + (step_q - step_c) / 2
            bracket = True
        elif sgnd < 0.0:
            info, bound = 2, False
            theta = 3 * (f_best - f_step) / (step - st_best) + d_best + d_step
            s = _sup_norm(theta, d_best, d_step)
            gamma = s * np.sqrt((theta / s) ** 2 - (d_best / s) * (d_step / s))
            if step > st_best:
                gamma = -gamma
            p = (gamma - d_step) + theta
            q = ((gamma - d_step) + gamma) + d_best
            r = p / q
            step_c = step + r * (st_best - step)
            step_q = step + (d_step / (d_step - d_best)) * (st_best - step)
            step_f = step_c if abs(step_c - step) > abs(step_q - step) else step_q
            bracket = True
        elif abs(d_step) < abs(d_best):
            info, bound = 3, True
            theta = 3 * (f_best - f_step) / (step - st_best) + d_best + d_step
            s = _sup_norm(theta, d_best, d_step)
            gamma = s * np.sqrt(
                max(0.0, (theta / s) ** 2 - (d_best / s) * (d_step / s))
            )
            if step > st_best:
                gamma = -gamma
            p = (gamma - d_step) + theta
            q = (gamma + (d_best - d_step)) + gamma
            r = p / q
            if r < 0.0 and gamma != 0.0:
                step_c = step + r * (st_best - step)
            elif step > st_best:
                step_c = np.float64(step_max)
            else:
                step_c = np.float64(step_min)
            step_q = step + (d_step / (d_step - d_best)) * (st_best - step)
            if bracket:
                closer = abs(step - step_c) < abs(step - step_q)
                step_f = step_c if closer else step_q
            else:
                farther = abs(step - step_c) > abs(step - step_q)
                step_f = step_c if farther else step_q
        else:
            info, bound = 4, False
            if bracket:
                theta = 3 * (f_step - f_other) / (st_other - step) + d_other + d_step
                s = _sup_norm(theta, d_other, d_step)
                gamma = s * np.sqrt((theta / s) ** 2 - (d_other / s) * (d_step / s))
                if step > st_other:
                    gamma = -gamma
                p = (gamma - d_step) + theta
                q = ((gamma - d_step) + gamma) + d_other
                r = p / q
                step_f = step + r * (st_other - step)
            elif step > st_best:
                step_f = np.float64(step_max)
            else:
                step_f = np.float64(step_min)

        if f_step > f_best:
            st_other, f_other, d_other = step, f_step, d_step
        else:
            if sgnd < 0.0:
                st_other, f_other, d_other = st_best, f_best, d_best
            st_best, f_best, d_best = step, f_step, d_step

        new_step = max(step_min, min(step_max, float(step_f)))
        if bracket and bound:
            target = float(st_best + 0.66 * (st_other - st_best))
            if st_other > st_best:
                new_step = min(target, new_step)
            else:
                new_step = max(target, new_step)

    return (
        info,
        (float(st_best), float(f_best), float(d_best)),
        (float(st_other), float(f_other), float(d_other)),
        float(new_step),
        bracket,
    )


def line_search_mt(
    step: float,
    x,
    direction,
    objective: Objective,
    wolfe_c1: float | None = None,
    wolfe_c2: float | None = None,
) -> tuple[float, np.ndarray, np.ndarray]:
    """Search along ``direction`` from ``x`` for a step meeting the Wolfe conditions.

    ``objective`` maps a point to ``(value, gradient)``. ``wolfe_c1`` is the
    sufficient-decrease tolerance (default 1e-3) and ``wolfe_c2`` the
    curvature tolerance (default 0.9). Returns the step, the point reached and
    the gradient there. If ``direction`` is not a descent direction the initial
    step is returned with ``x`` unchanged.
    """
    c1 = 1e-3 if wolfe_c1 is None else float(wolfe_c1)
    c2 = 0.90 if wolfe_c2 is None else float(wolfe_c2)

    x0 = np.array(x, dtype=float).ravel()
    direc = np.array(direction, dtype=float).ravel()
    step = float(step)

    f_step, grad = _evaluate(objective, x0)
    dgrad_init = float(grad @ direc)
    if dgrad_init >= 0.0:
        return step, x0, grad

    infoc = 1
    bracket = False
    stage_1 = True
    f_init = f_step
    dgrad_test = c1 * dgrad_init
    width = _STEP_MAX - _STEP_MIN
    width_old = 2 * width

    best: _Point = (0.0, f_init, dgrad_init)
    other: _Point = (0.0, f_init, dgrad_init)

    iteration = 0
    while True:
        iteration += 1

        if bracket:
            st_min = min(best[0], other[0])
            st_max = max(best[0], other[0])
        else:
            st_min = best[0]
            st_max = step + _EXTRAP_DELTA * (step - best[0])

        step = min(max(step, _STEP_MIN), _STEP_MAX)

        if (
            (bracket and (step <= st_min or step >= st_max))
            or iteration >= _ITER_MAX - 1
            or infoc == 0
            or (bracket and st_max - st_min <= _XTOL * st_max)
        ):
            step = best[0]

        x_new = x0 + step * direc
        f_step, grad = _evaluate(objective, x_new)
        dgrad = float(grad @ direc)
        armijo_check_val = f_init + step * dgrad_test

        info = 0
        if (bracket and (step <= st_min or step >= st_max)) or infoc == 0:
            info = 6
        if step == _STEP_MAX and f_step <= armijo_check_val and dgrad <= dgrad_test:
            info = 5
        if step == _STEP_MIN and (f_step > armijo_check_val or dgrad >= dgrad_test):
            info = 4
        if iteration >= _ITER_MAX:
            info = 3
        if bracket and st_max - st_min <= _XTOL * st_max:
            info = 2
        if f_step <= armijo_check_val and abs(dgrad) <= c2 * (-dgrad_init):
            info = 1

        if info != 0:
            return step, x_new, grad

        if (
            stage_1
            and f_step <= armijo_check_val
            and dgrad >= min(c1, c2) * dgrad_init
        ):
            stage_1 = False

        if stage_1 and f_step <= best[1] and f_step > armijo_check_val:

            def shifted(point: _Point) -> _Point:
                st, f, d = point
                return st, f - st * dgrad_test, d - dgrad_test

            def unshifted(point: _Point) -> _Point:
                st, f, d = point
                return st, f + st * dgrad_test, d + dgrad_test

            infoc, best_mod, other_mod, step, bracket = _mt_step(
                shifted(best),
                shifted(other),
                shifted((step, f_step, dgrad)),
                bracket,
                st_min,
                st_max,
            )
            best = unshifted(best_mod)
            other = unshifted(other_mod)
        else:
            infoc, best, other, step, bracket = _mt_step(
                best, other, (step, f_step, dgrad), bracket, st_min, st_max
            )

        if bracket:
            if abs(other[0] - best[0]) >= 0.66 * width_old:
                step = best[0] + 0.5 * (other[0] - best[0])
            width_old = width
            width = abs(other[0] - best[0])