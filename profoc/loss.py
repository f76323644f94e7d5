"""Scoring losses used to evaluate and combine probabilistic forecasts."""

from __future__ import annotations

import math

_METHODS = ("quantile", "expectile", "percentage")
_UNKNOWN_METHOD = (
    "Choose quantile loss 'quantile' expectiles 'expectile' or as 'percentage' loss."
)


def _sgn(value: float) -> float:
    return float((value > 0) - (value < 0))


def _pow(base: float, exponent: float) -> float:
    """Power with IEEE-style results instead of exceptions."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base >= 0 or not float(exponent).is_integer() or exponent % 2 == 0:
            return math.inf
        return -math.inf
    except ValueError:
        if base == 0.0:
            return math.inf
        return math.nan


def _div(numerator: float, denominator: float) -> float:
    """Division that yields inf or nan on a zero denominator."""
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _check_method(method: str) -> None:
    if method not in _METHODS:
        raise ValueError(_UNKNOWN_METHOD)


def loss(
    y: float,
    x: float,
    pred: float = 0.0,
    method: str = "quantile",
    tau: float = 0.5,
    a: float = 1.0,
    gradient: bool = True,
) -> float:
    """Loss of prediction ``x`` for observation ``y``.

    With ``gradient`` set, returns the linearised loss: the derivative of the
    loss evaluated at ``pred`` multiplied by ``x``.
    """
    _check_method(method)

    if method == "quantile":
        if not gradient:
            return ((y < x) - tau) * (
                _sgn(x) * _pow(abs(x), a) - _sgn(y) * _pow(abs(y), a)
            )
        return ((pred >= y) - tau) * (a * _pow(abs(pred), a - 1)) * x

    if method == "expectile":
        if not gradient:
            return (
                2
                * abs((x >= y) - tau)
                * (
                    _pow(abs(y), a + 1)
                    - _pow(abs(x), a + 1)
                    - (a + 1) * _sgn(x) * _pow(abs(x), a) * (y - x)
                )
            )
        return (
            2
            * abs((pred >= y) - tau)
            * (-a * (a + 1) * (y - pred) * _pow(abs(pred), a - 1))
            * x
        )

    # percentage
    if not gradient:
        return abs(1 - _pow(_div(x, y), a))
    ratio_pow = _pow(_div(pred, y), a)
    numerator = a * (ratio_pow - 1) * ratio_pow
    denominator = pred * abs(1 - ratio_pow)
    return _div(numerator, denominator) * x


def loss_grad_wrt_w(
    expert: float,
    pred: float,
    truth: float,
    tau: float,
    loss_function: str,
    a: float,
    w: float,
) -> float:
    """Gradient of the loss with respect to the weight of one expert."""
    _check_method(loss_function)

    if loss_function == "quantile":
        return a * expert * _pow(abs(pred), a - 1) * ((pred >= truth) - tau)

    if loss_function == "expectile":
        return (
            2
            * abs((pred >= truth) - tau)
            * (
                -a * (a + 1) * expert * (truth - pred) * _pow(abs(pred), a - 1)
                + (a + 1) * expert * _pow(abs(pred), a)
                - (a + 1) * expert * _pow(abs(pred), a)
            )
        )

    ratio = _div(pred, truth)
    nom = a * w * _pow(ratio, a - 1) * (1 - _pow(ratio, a))
    denom = truth * abs(1 - _pow(ratio, a))
    return -_div(nom, denom)