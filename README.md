# profoc

Scoring losses and array helpers for combining probabilistic forecasts,
together with a small set of numerical optimizers. Everything is built on
numpy.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Losses — `profoc.loss`

- `loss(y, x, pred=0.0, method="quantile", tau=0.5, a=1.0, gradient=True)`
  scores a prediction `x` against an observation `y` with the `"quantile"`,
  `"expectile"` or `"percentage"` loss. With `gradient=True` it returns the
  linearised loss: the derivative of the loss taken at `pred`, multiplied by
  `x`. The parameter `a` generalises the loss by a power transform.
- `loss_grad_wrt_w(expert, pred, truth, tau, loss_function, a, w)` returns the
  gradient of the loss with respect to the weight of one expert.

Any other method name raises `ValueError`. Divisions by zero and overflowing
powers give `inf` or `nan` instead of raising.

## Helpers — `profoc.misc`

- `pmin(x, bound)`, `pmax(x, bound)` — element-wise cap or floor; NaN entries
  are kept.
- `diff(x, lag=1, differences=1)` — lagged differences, applied repeatedly;
  raises `ValueError` if `lag` is not shorter than the series.
- `get_combinations(x, y, append_only=False, append_col=0)` — crosses every
  row of the matrix `x` with every value of `y` (a 1-D `x` is one column);
  with `append_only` it instead repeats column `append_col` of `x`.
- `set_default(values, value)` — `values`, or `[value]` when it is empty.
- `threshold_soft(x, threshold)`, `threshold_hard(x, threshold)` — shrink or
  zero a scalar; a threshold of `-inf` leaves it unchanged.
- `vec2mat(x, rows, cols)`, `mat2vec(x)` — row-major reshaping; `vec2mat`
  raises `ValueError` if `x` holds too few values.

## Optimizers — `profoc.optim`

All optimizers return an `OptimResult` (from `profoc.optim.util`) with the
fields `x`, `value`, `success`, `iterations`, `error` and `population`. They
never modify the start vector.

### Gradient descent — `profoc.optim.gd`

`gd(x0, objective, settings=None)` where `objective(x)` returns
`(value, gradient)`. `GDSettings` chooses the update rule through `GDMethod`
(`BASIC`, `MOMENTUM`, `NESTEROV`, `ADAGRAD`, `RMSPROP`, `ADADELTA`, `ADAM`,
`NADAM`; `ada_max=True` switches Adam/Nadam to AdaMax/NadaMax), step decay,
gradient clipping (`clip_grad`, with max, min or p-norm) and the stopping
rules `iter_max`, `grad_err_tol` and `rel_sol_change_tol`. A non-finite start
raises `ValueError`. The single-step rule `gd_update` and `gradient_clipping`
are available on their own.

```python
import numpy as np
from profoc.optim.gd import gd, GDSettings, GDMethod

def quadratic(x):
    return float(x @ x), 2 * x

result = gd(np.array([3.0, -1.0]), quadratic,
            GDSettings(method=GDMethod.ADAM, step_size=0.1))
print(result.x, result.success)
```

### Differential evolution — `profoc.optim.de`

`de(x0, objective, settings=None, rng=None)` where `objective(x)` returns a
scalar; non-finite values count as `inf`. `DESettings` sets `n_pop` (at least
4), `n_gen`, `check_freq`, `mutation_method` (1 for rand/1, otherwise best/1),
`par_F`, `par_CR`, `rel_objfn_change_tol`, `initial_lb`/`initial_ub` and
`return_population_mat`. The initial population is drawn uniformly between
zero and the initial upper bound in each coordinate. `rng` is a numpy
`Generator` or a seed.

### Particle swarm — `profoc.optim.pso`

`pso(x0, objective, settings=None, rng=None)` with `PSOSettings`: swarm size,
an optional centre particle at the mean of the others, linear or damped
inertia (`inertia_method`), fixed or linearly varying cognitive and social
coefficients (`velocity_method`), `check_freq`, `rel_objfn_change_tol`,
`initial_lb`/`initial_ub` and `return_position_mat`.

```python
import numpy as np
from profoc.optim.de import de, DESettings
from profoc.optim.pso import pso, PSOSettings

def sphere(x):
    return float(np.sum(x ** 2))

print(de(np.array([1.0, -2.0]), sphere, DESettings(), rng=0).x)
print(pso(np.array([1.0, -2.0]), sphere, PSOSettings(), rng=0).x)
```

### Line search — `profoc.optim.line_search`

`line_search_mt(step, x, direction, objective, wolfe_c1=None, wolfe_c2=None)`
runs a Moré–Thuente search for a step meeting the strong Wolfe conditions
(defaults 1e-3 and 0.9, steps limited to [0, 10]). `objective(x)` returns
`(value, gradient)`; the result is `(step, new_x, gradient_at_new_x)`. If
`direction` is not a descent direction the initial step and `x` come back
unchanged.

### Numerical Hessian — `profoc.optim.hessian`

`numerical_hessian(x, objective, step_size=None)` builds a symmetric
finite-difference Hessian of a scalar `objective`: a five-point stencil on the
diagonal and a four-point stencil off it.

### Utilities — `profoc.optim.util`

`OptimResult`, `unit_vec(j, n)`, `reset_negative_values(vec_in, vec_out)` and
`reset_negative_rows(vec_in, mat_out)` (the last two return zeroed copies).

## What this package does not do

It provides the losses, helpers and optimizers only. There is no complete
forecast-combination routine: no batch or online estimation of expert
weights, no spline basis or smoothing matrices and no weight optimisation
step. There is no command-line program.