"""Differential evolution for derivative-free global minimisation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from profoc.optim.util import OptimResult

Objective = Callable[[np.ndarray], float]


@dataclass
class DESettings:
    """Population size, mutation rule and stopping rules for :func:`de`.

    ``mutation_method`` 1 uses the rand/1 rule; any other value uses best/1.
    ``initial_lb`` and ``initial_ub`` shape the initial population; when they
    do not match the length of the start vector, ``x0 - 0.5`` and
    ``x0 + 0.5`` are used instead.
    """

    n_pop: int = 200
    n_gen: int = 1000
    check_freq: int = 10
    mutation_method: int = 1
    par_F: float = 0.8
    par_CR: float = 0.9
    rel_objfn_change_tol: float = 1e-10
    initial_lb: np.ndarray | None = None
    initial_ub: np.ndarray | None = None
    return_population_mat: bool = False

    def __post_init__(self) -> None:
        if self.n_pop < 4:
            raise ValueError("n_pop must be at least 4")
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


def _distinct_indices(rng: np.random.Generator, n_pop: int, i: int) -> tuple[int, int, int]:
    """Three indices, distinct from each other and from ``i``."""
    chosen: list[int] = []
    excluded = {i}
    while len(chosen) < 3:
        candidate = int(rng.integers(0, n_pop))
        if candidate not in excluded:
            chosen.append(candidate)
            excluded.add(candidate)
    return chosen[0], chosen[1], chosen[2]


def de(
    x0,
    objective: Objective,
    settings: DESettings | None = None,
    rng: np.random.Generator | int | None = None,
) -> OptimResult:
    """Minimise ``objective`` by differential evolution.

    ``objective`` maps a point to a scalar; non-finite values count as
    ``inf``. Iteration stops once the relative change of the best value
    between checks falls to ``rel_objfn_change_tol`` or after ``n_gen + 1``
    generations.
    """
    settings = settings or DESettings()
    rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    start = np.array(x0, dtype=float).ravel()
    n_vals = start.size
    n_pop = settings.n_pop
    tol = settings.rel_objfn_change_tol

    upper = _initial_bound(settings.initial_ub, start, 0.5)
    # The lower bound cancels out of the scaling: the initial draw spans
    # zero to the upper bound in each coordinate.
    lower = _initial_bound(settings.initial_lb, start, -0.5)
    scale = lower + (upper - lower)

    population = scale * rng.random((n_pop, n_vals))
    values = np.array([_score(objective, row) for row in population])

    best_index = int(np.argmin(values))
    running_min = float(values[best_index])
    check_min = running_min
    best_vec = population[best_index].copy()
    best_running = best_vec.copy()

    iteration = 0
    rel_change = 2.0 * tol

    while rel_change > tol and iteration < settings.n_gen + 1:
        iteration += 1
        current = population.copy()

        for i in range(n_pop):
            c_1, c_2, c_3 = _distinct_indices(rng, n_pop, i)
            j = int(rng.integers(0, n_vals))
            crossover = rng.random(n_vals) < settings.par_CR
            crossover[j] = True

            base = current[c_3] if settings.mutation_method == 1 else best_vec
            mutant = base + settings.par_F * (current[c_1] - current[c_2])
            proposal = np.where(crossover, mutant, current[i])

            proposal_value = _score(objective, proposal)
            if proposal_value <= values[i]:
                population[i] = proposal
                values[i] = proposal_value
            else:
                population[i] = current[i]

        best_index = int(np.argmin(values))
        generation_min = float(values[best_index])
        best_vec = population[best_index].copy()

        if generation_min < running_min:
            running_min = generation_min
            best_running = best_vec.copy()

        if iteration % settings.check_freq == 0:
            rel_change = abs(running_min - check_min) / (1.0e-08 + abs(running_min))
            check_min = min(check_min, running_min)

    return OptimResult(
        x=best_running,
        value=float(objective(best_running.copy())),
        success=rel_change <= tol,
        iterations=iteration,
        error=rel_change,
        population=population.copy() if settings.return_population_mat else None,
    )