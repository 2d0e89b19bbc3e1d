"""Model library: typed parameters, estimators and predictors per kind.

Each regression kind carries its own frozen parameter struct with a
vectorized ``predict``. Estimators turn raw points into a struct (or None
when the data cannot support the model) and are looked up through
``Registry``. Plain ``{name: value}`` maps only appear at the slider
boundary (``as_dict`` / ``params_from_map``).

Nonlinear models are solved by linearizing transforms; the negative
exponential asymptote is found by a bounded grid search.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import logging
import math
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union
import warnings

import numpy as np

from ..constants import (
    DEFAULT_ORDER,
    DEFAULT_TENSION,
    MANUAL_RANGE_FACTOR,
    MANUAL_RANGE_FLOOR,
    NEG_EXP_CANDIDATES,
    NEG_EXP_OFFSET,
    NEG_EXP_SPAN,
)
from ..core.points import as_points
from ..core.settings import ManualParameter, RegressionKind
from .linalg import (
    ordinary_least_squares,
    ordinary_least_squares_through_origin,
    polynomial_through_origin,
)

logger = logging.getLogger(__name__)

_NAN = float("nan")


class _Params:
    kind: ClassVar[RegressionKind]

    def as_dict(self) -> Dict[str, float]:
        return {k: float(v) for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, values: Mapping[str, float]):
        field_names = [f.name for f in fields(cls)]
        return cls(**{k: float(values.get(k, _NAN)) for k in field_names})

    def predict(self, x):
        with np.errstate(all="ignore"):
            return self._predict(np.asarray(x, dtype=float))

    def _predict(self, x: np.ndarray):
        raise NotImplementedError


@dataclass(frozen=True)
class LinearParams(_Params):
    kind: ClassVar[RegressionKind] = RegressionKind.LINEAR
    m: float
    c: float = 0.0

    @classmethod
    def from_dict(cls, values):
        return cls(float(values.get("m", _NAN)), float(values.get("c") or 0.0))

    def _predict(self, x):
        return self.m * x + self.c


@dataclass(frozen=True)
class PolynomialParams(_Params):
    """Coefficients a0..ak, lowest power first."""

    kind: ClassVar[RegressionKind] = RegressionKind.POLYNOMIAL
    coefficients: Tuple[float, ...]

    @property
    def order(self) -> int:
        return len(self.coefficients) - 1

    def as_dict(self):
        return {f"a{i}": float(c) for i, c in enumerate(self.coefficients)}

    @classmethod
    def from_dict(cls, values):
        coeffs = []
        while f"a{len(coeffs)}" in values:
            coeffs.append(float(values[f"a{len(coeffs)}"]))
        return cls(tuple(coeffs))

    def _predict(self, x):
        return np.polyval(self.coefficients[::-1], x) if self.coefficients else x * 0.0


@dataclass(frozen=True)
class ExponentialParams(_Params):
    kind: ClassVar[RegressionKind] = RegressionKind.EXPONENTIAL
    a: float
    b: float

    def _predict(self, x):
        return self.a * np.exp(self.b * x)


@dataclass(frozen=True)
class LogarithmicParams(_Params):
    kind: ClassVar[RegressionKind] = RegressionKind.LOGARITHMIC
    a: float
    b: float

    def _predict(self, x):
        return self.a + self.b * np.log(x)


@dataclass(frozen=True)
class PowerParams(_Params):
    kind: ClassVar[RegressionKind] = RegressionKind.POWER
    a: float
    b: float

    def _predict(self, x):
        return self.a * np.power(x, self.b)


@dataclass(frozen=True)
class SqrtParams(LinearParams):
    kind: ClassVar[RegressionKind] = RegressionKind.SQRT

    def _predict(self, x):
        return self.m * np.sqrt(x) + self.c


@dataclass(frozen=True)
class SinusoidalParams(LinearParams):
    kind: ClassVar[RegressionKind] = RegressionKind.SINUSOIDAL

    def _predict(self, x):
        return self.m * np.sin(x) + self.c


@dataclass(frozen=True)
class NegativeExponentialParams(_Params):
    """y = a - b * exp(-c * x); b < 0 describes decay toward a floor."""

    kind: ClassVar[RegressionKind] = RegressionKind.NEGATIVE_EXPONENTIAL
    a: float
    b: float
    c: float

    def _predict(self, x):
        return self.a - self.b * np.exp(-self.c * x)


@dataclass(frozen=True)
class SplineParams(_Params):
    kind: ClassVar[RegressionKind] = RegressionKind.SPLINE
    tension: float = DEFAULT_TENSION

    @classmethod
    def from_dict(cls, values):
        return cls(float(values.get("tension", DEFAULT_TENSION)))

    def _predict(self, x):
        raise TypeError("Spline parameters do not define a prediction function")


Params = Union[
    LinearParams,
    PolynomialParams,
    ExponentialParams,
    LogarithmicParams,
    PowerParams,
    SqrtParams,
    SinusoidalParams,
    NegativeExponentialParams,
    SplineParams,
]

PARAM_TYPES = {
    cls.kind: cls
    for cls in (
        LinearParams,
        PolynomialParams,
        ExponentialParams,
        LogarithmicParams,
        PowerParams,
        SqrtParams,
        SinusoidalParams,
        NegativeExponentialParams,
        SplineParams,
    )
}

# Kinds that map x -> y; spline and manual curves interpolate instead
PREDICTIVE_KINDS = frozenset(PARAM_TYPES) - {RegressionKind.SPLINE}

Estimator = Callable[[np.ndarray, np.ndarray, int, bool], Optional[Params]]
Registry: Dict[RegressionKind, Estimator] = {}


def register(kind: RegressionKind):
    def deco(fn: Estimator):
        Registry[kind] = fn
        return fn
    return deco


def _pairs(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return np.column_stack([x, y])


@register(RegressionKind.LINEAR)
def estimate_linear(x, y, order, force_origin):
    if force_origin:
        return LinearParams(ordinary_least_squares_through_origin(_pairs(x, y)), 0.0)
    return LinearParams(*ordinary_least_squares(_pairs(x, y)))


@register(RegressionKind.POLYNOMIAL)
def estimate_polynomial(x, y, order, force_origin):
    order = order or DEFAULT_ORDER
    if force_origin:
        coeffs = np.concatenate([[0.0], polynomial_through_origin(_pairs(x, y), order)])
    else:
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                coeffs = np.polyfit(x, y, deg=order)[::-1]
        except (np.linalg.LinAlgError, ValueError):
            return None
    if not np.all(np.isfinite(coeffs)):
        return None
    return PolynomialParams(tuple(float(c) for c in coeffs))


@register(RegressionKind.EXPONENTIAL)
def estimate_exponential(x, y, order, force_origin):
    mask = y > 0
    if mask.sum() < 2:
        return None
    b, ln_a = ordinary_least_squares(_pairs(x[mask], np.log(y[mask])))
    return ExponentialParams(float(np.exp(ln_a)), b)


@register(RegressionKind.LOGARITHMIC)
def estimate_logarithmic(x, y, order, force_origin):
    mask = x > 0
    if mask.sum() < 2:
        return None
    b, a = ordinary_least_squares(_pairs(np.log(x[mask]), y[mask]))
    return LogarithmicParams(a, b)


@register(RegressionKind.POWER)
def estimate_power(x, y, order, force_origin):
    mask = (x > 0) & (y > 0)
    if mask.sum() < 2:
        return None
    b, ln_a = ordinary_least_squares(_pairs(np.log(x[mask]), np.log(y[mask])))
    return PowerParams(float(np.exp(ln_a)), b)


@register(RegressionKind.SQRT)
def estimate_sqrt(x, y, order, force_origin):
    mask = x >= 0
    pts = _pairs(np.sqrt(x[mask]), y[mask])
    if force_origin:
        if len(pts) < 1:
            return None
        return SqrtParams(ordinary_least_squares_through_origin(pts), 0.0)
    if len(pts) < 2:
        return None
    return SqrtParams(*ordinary_least_squares(pts))


@register(RegressionKind.SINUSOIDAL)
def estimate_sinusoidal(x, y, order, force_origin):
    pts = _pairs(np.sin(x), y)
    if force_origin:
        return SinusoidalParams(ordinary_least_squares_through_origin(pts), 0.0)
    return SinusoidalParams(*ordinary_least_squares(pts))


@register(RegressionKind.SPLINE)
def estimate_spline(x, y, order, force_origin):
    return SplineParams(DEFAULT_TENSION)


def _asymptote_fractions() -> np.ndarray:
    i = np.arange(1, NEG_EXP_CANDIDATES + 1)
    return NEG_EXP_SPAN * i / NEG_EXP_CANDIDATES + NEG_EXP_OFFSET


@register(RegressionKind.NEGATIVE_EXPONENTIAL)
def estimate_negative_exponential(x, y, order, force_origin):
    """Grid search over the asymptote a of y = a - b*exp(-c*x).

    Growth candidates sit above max(y); unless the fit is pinned to the
    origin, decay candidates sit below min(y). For each candidate the
    remaining (b, c) come from a log-linear fit, and candidates compete on
    the residual sum of squares of the untransformed model.
    """
    if len(x) < 3:
        return None
    y_min, y_max = float(y.min()), float(y.max())
    y_range = (y_max - y_min) or 1.0
    offsets = y_range * _asymptote_fractions()

    best: Optional[NegativeExponentialParams] = None
    best_sse = math.inf

    def consider(params: NegativeExponentialParams):
        nonlocal best, best_sse
        sse = float(np.sum((y - params.predict(x)) ** 2))
        if math.isfinite(sse) and sse < best_sse:
            best, best_sse = params, sse

    with np.errstate(all="ignore"):
        for a in y_max + offsets:
            if force_origin:
                # y = a*(1 - exp(-c*x))  ->  ln(1 - y/a) = -c*x
                ratio = 1.0 - y / a
                valid = ratio > 0
                if valid.sum() < 3:
                    continue
                m = ordinary_least_squares_through_origin(
                    _pairs(x[valid], np.log(ratio[valid]))
                )
                consider(NegativeExponentialParams(float(a), float(a), -m))
            else:
                # ln(a - y) = ln(b) - c*x
                gap = a - y
                valid = gap > 0
                if valid.sum() < 3:
                    continue
                m, ln_b = ordinary_least_squares(_pairs(x[valid], np.log(gap[valid])))
                consider(NegativeExponentialParams(float(a), float(np.exp(ln_b)), -m))

        if not force_origin:
            for a in y_min - offsets:
                # y = a + B*exp(-c*x)  ->  ln(y - a) = ln(B) - c*x
                gap = y - a
                valid = gap > 0
                if valid.sum() < 3:
                    continue
                m, ln_b = ordinary_least_squares(_pairs(x[valid], np.log(gap[valid])))
                consider(NegativeExponentialParams(float(a), -float(np.exp(ln_b)), -m))

    return best


def estimate_parameters(
    data: Any,
    kind: Union[RegressionKind, str],
    order: Optional[int] = None,
    force_origin: bool = False,
) -> Optional[Params]:
    """Fit ``kind`` to ``data``; None when no parameters can be computed."""
    kind = RegressionKind(kind)
    estimator = Registry.get(kind)
    points = as_points(data)
    if estimator is None or not points:
        return None
    arr = np.asarray(points, dtype=float)
    with np.errstate(all="ignore"):
        params = estimator(arr[:, 0], arr[:, 1], order, bool(force_origin))
    if params is None:
        logger.debug("No %s parameters for %d points", kind.value, len(points))
    return params


def estimate_parameter_map(data, kind, order=None, force_origin=False) -> Dict[str, float]:
    """Slider-facing form of ``estimate_parameters``; empty on failure."""
    params = estimate_parameters(data, kind, order, force_origin)
    return params.as_dict() if params is not None else {}


def params_from_map(kind, values: Mapping[str, float]) -> Optional[Params]:
    """Rebuild a typed parameter struct from a ``{name: value}`` map."""
    cls = PARAM_TYPES.get(RegressionKind(kind))
    if cls is None or not values:
        return None
    return cls.from_dict(values)


def predict_function(kind, params) -> Optional[Callable[[Any], Any]]:
    """Return ``x -> y`` for predictive kinds, else None.

    ``params`` may be a typed struct or a ``{name: value}`` map.
    """
    kind = RegressionKind(kind)
    if kind not in PREDICTIVE_KINDS or params is None:
        return None
    if isinstance(params, Mapping):
        params = params_from_map(kind, params)
        if params is None:
            return None
    return params.predict


def seed_manual_parameters(params) -> Dict[str, ManualParameter]:
    """Slider bounds around each value: v +/- max(|v|*2, 10)."""
    values = params.as_dict() if isinstance(params, _Params) else dict(params)
    seeded = {}
    for name, v in values.items():
        r = max(abs(v) * MANUAL_RANGE_FACTOR, MANUAL_RANGE_FLOOR)
        seeded[name] = ManualParameter(value=v, min=v - r, max=v + r)
    return seeded


__all__ = [
    "Params",
    "LinearParams",
    "PolynomialParams",
    "ExponentialParams",
    "LogarithmicParams",
    "PowerParams",
    "SqrtParams",
    "SinusoidalParams",
    "NegativeExponentialParams",
    "SplineParams",
    "PARAM_TYPES",
    "PREDICTIVE_KINDS",
    "Registry",
    "register",
    "estimate_parameters",
    "estimate_parameter_map",
    "params_from_map",
    "predict_function",
    "seed_manual_parameters",
]
