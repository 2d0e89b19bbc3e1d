"""Regression orchestration: parameters -> sampled curve -> error & equation."""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..core.points import DataPoint, as_points
from ..core.settings import RegressionKind
from .models import (
    Params,
    SplineParams,
    estimate_parameters,
    params_from_map,
    predict_function,
)
from .sampler import format_equation, mean_squared_error, sample_curve, sample_domain
from .spline import catmull_rom

logger = logging.getLogger(__name__)

NO_DATA = "No data points"
NO_PARAMETERS = "Could not calculate parameters (check data range or validity)"
NO_PREDICTOR = "Could not generate prediction function"
INVALID_VALUES = "Calculation resulted in invalid values (NaN/Infinity)"


@dataclass(frozen=True)
class RegressionResult:
    points: Tuple[DataPoint, ...] = ()
    params: Optional[Params] = None
    mean_squared_error: Optional[float] = None
    equation: str = ""
    success: bool = True
    error_message: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "RegressionResult":
        logger.debug("Regression failed: %s", message)
        return cls(success=False, error_message=message)

    @property
    def parameter_map(self) -> Dict[str, float]:
        return self.params.as_dict() if self.params is not None else {}


def compute_regression(
    data: Any,
    kind,
    order: Optional[int] = None,
    force_origin: bool = False,
    manual_params: Optional[Any] = None,
    manual_points: Optional[Any] = None,
) -> RegressionResult:
    """Fit (or apply ``manual_params``), sample the curve and score it.

    ``manual_params`` may be a typed struct or a ``{name: value}`` map.
    ``manual_points`` only matters for the manual kind and may be a
    ``ControlPoints`` arena or any point sequence.
    """
    kind = RegressionKind(kind)
    points = as_points(data)

    if kind is RegressionKind.NONE:
        return RegressionResult()

    if kind is RegressionKind.MANUAL:
        if hasattr(manual_points, "sorted_points"):
            manual_points = manual_points.sorted_points()
        return RegressionResult(points=tuple(catmull_rom(manual_points or [])))

    if isinstance(manual_params, Mapping):
        manual_params = params_from_map(kind, manual_params) if manual_params else None

    if kind is RegressionKind.SPLINE:
        params = manual_params if isinstance(manual_params, SplineParams) else SplineParams()
        return RegressionResult(
            points=tuple(catmull_rom(points, params.tension)), params=params
        )

    if not points and manual_params is None:
        return RegressionResult.failure(NO_DATA)

    x_min, x_max = sample_domain(points, kind, force_origin)

    params = manual_params
    if params is None:
        params = estimate_parameters(points, kind, order, force_origin)
    if params is None:
        return RegressionResult.failure(NO_PARAMETERS)

    predict = predict_function(kind, params)
    if predict is None:
        return RegressionResult.failure(NO_PREDICTOR)

    curve: List[DataPoint] = sample_curve(predict, x_min, x_max)
    if not curve:
        return RegressionResult.failure(INVALID_VALUES)

    return RegressionResult(
        points=tuple(curve),
        params=params,
        mean_squared_error=mean_squared_error(points, predict),
        equation=format_equation(kind, params),
    )


__all__ = [
    "RegressionResult",
    "compute_regression",
    "NO_DATA",
    "NO_PARAMETERS",
    "NO_PREDICTOR",
    "INVALID_VALUES",
]
