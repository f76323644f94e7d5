"""Particle swarm optimisation for derivative-free global minimisation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from profoc.optim.util import OptimResult

Objective = Callable[[np.ndarray], float]


@dataclass
class PSOSettings:
    """Swarm size, inertia and velocity rules, and stopping rules for :func:`pso`.

    ``inertia_method`` 1 moves the inertia weight linearly between
    ``par_w_min`` and ``par_w_max``; any other value multiplies it by
    ``par_w_damp`` every generation. ``velocity_method`` 2 moves the
    cognitive and social coefficients linearly from their initial to their
    final values; any other value keeps ``par_c_cog`` and ``par_c_soc``.
    With ``center_particle`` one extra particle sits at the mean of the
    others. ``initial_lb`` and ``initial_ub`` shape the initial swarm; when
    they do not match the length of the start vector, ``x0 - 0.5`` and
    ``x0 + 0.5`` are used instead.
    """

    center_particle: bool = True
    n_pop: int = 100
    n_gen: int = 1000
    check_freq: int = 10
    inertia_method: int = 1
    par_initial_w: float = 1.0
    par_w_damp: float = 0.99
    par_w_min: float = 0.10
    par_w_max: float = 0.99
    velocity_method: int = 1
    par_c_cog: float = 2.0
    par_c_soc: float = 2.0
    par_initial_c_cog: float = 2.5
    par_final_c_cog: float = 0.5
    par_initial_c_soc: float = 0.5
    par_final_c_soc: float = 2.5
    rel_objfn_change_tol: float = 1e-10
    initial_lb: np.ndarray | None = None
    initial_ub: np.ndarray | None = None
    return_position_mat: bool = False

    def __post_init__(self) -> None:
        if self.n_pop < 1:
            raise ValueError("n_pop must be at least 1")
        if self.check_freq <= 0:
            raise ValueError("check_freq must be positive")
        if self.n_gen < 0:
            raise ValueError("n_gen must not be negative")


def _initial_bound(bound, x0: np.ndarray, shift: float) -> np.ndarray:
    if bound is not None:
        arr = np.array(bound, dtype=float).ravel()
        if arr.size == x0.size:
            return arr
    return x0 + shift


def _score(objective: Objective, point: np.ndarray) -> float:
    value = float(objective(point.copy()))
    return value if math.isfinite(value) else math.inf


def pso(
    x0,
    objective: Objective,
    settings: PSOSettings | None = None,
    rng: np.random.Generator | int | None = None,
) -> OptimResult:
    """Minimise ``objective`` with a particle swarm.

    ``objective`` maps a point to a scalar; non-finite values count as
    ``inf``. Iteration stops once the relative change of the best value
    between checks falls to ``rel_objfn_change_tol`` or after ``n_gen``
    generations.
    """
    settings = settings or PSOSettings()
    rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    start = np.array(x0, dtype=float).ravel()
    n_vals = start.size
    center = settings.center_particle
    n_pop = settings.n_pop + 1 if center else settings.n_pop
    n_gen = settings.n_gen
    tol = settings.rel_objfn_change_tol

    upper = _initial_bound(settings.initial_ub, start, 0.5)
    # The lower bound cancels out of the scaling: the initial draw spans
    # zero to the upper bound in each coordinate.
    lower = _initial_bound(settings.initial_lb, start, -0.5)
    scale = lower + (upper - lower)

    positions = np.empty((n_pop, n_vals))
    drawn = n_pop - 1 if center else n_pop
    positions[:drawn] = scale * rng.random((drawn, n_vals))
    if center:
        positions[-1] = positions[:-1].mean(axis=0)
    values = np.array([_score(objective, row) for row in positions])

    best_values = values.copy()
    best_positions = positions.copy()

    running_min = float(np.min(values))
    check_min = running_min
    best_running = positions[int(np.argmin(values))].copy()

    velocities = np.zeros((n_pop, n_vals))
    par_w = settings.par_initial_w
    c_cog = settings.par_c_cog
    c_soc = settings.par_c_soc

    iteration = 0
    rel_change = 2.0 * tol

    while rel_change > tol and iteration < n_gen:
        iteration += 1
        progress = (iteration + 1) / n_gen

        if settings.inertia_method == 1:
            par_w = settings.par_w_min + (settings.par_w_max - settings.par_w_min) * progress
        else:
            par_w *= settings.par_w_damp

        if settings.velocity_method == 2:
            c_cog = settings.par_initial_c_cog - (
                settings.par_initial_c_cog - settings.par_final_c_cog
            ) * progress
            c_soc = settings.par_initial_c_soc - (
                settings.par_initial_c_soc - settings.par_final_c_soc
            ) * progress

        for i in range(n_pop):
            if center and i == n_pop - 1:
                positions[i] = positions[:-1].mean(axis=0)
            else:
                velocities[i] = (
                    par_w * velocities[i]
                    + c_cog * rng.random(n_vals) * (best_positions[i] - positions[i])
                    + c_soc * rng.random(n_vals) * (best_running - positions[i])
                )
                positions[i] += velocities[i]

            values[i] = _score(objective, positions[i])
            if values[i] < best_values[i]:
                best_values[i] = values[i]
                best_positions[i] = positions[i]

        best_index = int(np.argmin(best_values))
        generation_min = float(best_values[best_index])
        if generation_min < running_min:
            running_min = generation_min
            best_running = best_positions[best_index].copy()

        if iteration % settings.check_freq == 0:
            rel_change = abs(running_min - check_min) / (1.0e-08 + abs(running_min))
            check_min = min(check_min, running_min)

    return OptimResult(
        x=best_running,
        value=float(objective(best_running.copy())),
        success=rel_change <= tol,
        iterations=iteration,
        error=rel_change,
        population=positions.copy() if settings.return_position_mat else None,
    )