"""Curve sampling, mean squared error and equation text."""
from __future__ import annotations

import math
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..constants import DEFAULT_DOMAIN, SAMPLE_STEPS
from ..core.points import DataPoint
from ..core.settings import RegressionKind
from .models import PolynomialParams, params_from_map

Predict = Callable[[Any], Any]


def sample_domain(
    data: Sequence[DataPoint], kind, force_origin: bool = False
) -> Tuple[float, float]:
    """[min x, max x] of the data, stretched to 0 for pinned-origin fits."""
    if data:
        xs = [p.x for p in data]
        x_min, x_max = min(xs), max(xs)
    else:
        x_min, x_max = DEFAULT_DOMAIN
    if force_origin and RegressionKind(kind).supports_origin:
        x_min, x_max = min(x_min, 0.0), max(x_max, 0.0)
    return float(x_min), float(x_max)


def sample_curve(
    predict: Predict, x_min: float, x_max: float, steps: int = SAMPLE_STEPS
) -> List[DataPoint]:
    """``steps`` equal steps over the domain, keeping finite samples only.

    A zero-width domain yields the single point (x_min, predict(x_min)).
    """
    if x_max - x_min == 0:
        xs = np.array([x_min], dtype=float)
    else:
        xs = np.linspace(x_min, x_max, steps + 1)
    with np.errstate(all="ignore"):
        ys = np.broadcast_to(np.asarray(predict(xs), dtype=float), xs.shape)
    keep = np.isfinite(ys)
    return [DataPoint(float(x), float(y)) for x, y in zip(xs[keep], ys[keep])]


def mean_squared_error(data: Sequence[DataPoint], predict: Predict) -> float:
    """MSE over the original points; non-finite predictions are skipped.

    Empty data gives 0; data with no finite prediction gives inf.
    """
    if not data:
        return 0.0
    arr = np.asarray(data, dtype=float)
    with np.errstate(all="ignore"):
        pred = np.broadcast_to(np.asarray(predict(arr[:, 0]), dtype=float), arr[:, 0].shape)
    keep = np.isfinite(pred)
    if not keep.any():
        return math.inf
    return float(np.mean((arr[keep, 1] - pred[keep]) ** 2))


def format_number(value: Optional[float]) -> str:
    """Scientific notation with two decimals: 2.00e+0, -1.50e-3."""
    if value is None or math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    # -0.0 prints as 0.00e+0
    value = value + 0.0
    mantissa, exp = f"{value:.2e}".split("e")
    return f"{mantissa}e{int(exp):+d}"


def _polynomial_text(params: PolynomialParams) -> str:
    terms = []
    for i, c in enumerate(params.coefficients):
        if i == 0:
            terms.append(format_number(c))
        elif i == 1:
            terms.append(f"{format_number(c)}x")
        else:
            terms.append(f"{format_number(c)}x^{i}")
    return "y = " + " + ".join(terms)


def format_equation(kind, params) -> str:
    """Human-readable equation for predictive kinds; '' otherwise."""
    kind = RegressionKind(kind)
    if params is None:
        return ""
    if isinstance(params, dict):
        params = params_from_map(kind, params)
        if params is None:
            return ""
    f = format_number
    if kind is RegressionKind.LINEAR:
        return f"y = {f(params.m)}x + {f(params.c)}"
    if kind is RegressionKind.POLYNOMIAL:
        return _polynomial_text(params)
    if kind is RegressionKind.EXPONENTIAL:
        return f"y = {f(params.a)} * e^({f(params.b)}x)"
    if kind is RegressionKind.LOGARITHMIC:
        return f"y = {f(params.a)} + {f(params.b)} * ln(x)"
    if kind is RegressionKind.POWER:
        return f"y = {f(params.a)} * x^{f(params.b)}"
    if kind is RegressionKind.SQRT:
        return f"y = {f(params.m)} * sqrt(x) + {f(params.c)}"
    if kind is RegressionKind.SINUSOIDAL:
        return f"y = {f(params.m)} * sin(x) + {f(params.c)}"
    if kind is RegressionKind.NEGATIVE_EXPONENTIAL:
        return f"y = {f(params.a)} - {f(params.b)} * e^(-{f(params.c)}x)"
    return ""


__all__ = [
    "sample_domain",
    "sample_curve",
    "mean_squared_error",
    "format_number",
    "format_equation",
]
