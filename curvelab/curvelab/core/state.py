"""Regression state machine.

Every transition takes the current settings plus the series data and
returns a fresh ``RegressionUpdate``: the new settings, the recomputed
result, and the notification (if any) the UI should show. Nothing is
mutated and nothing is cached between calls.

Structural edits (kind, order, origin) reset manual parameters and force
auto mode. Slider edits and control-point edits recompute silently.
Spline, manual and none kinds never notify.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..analysis.models import estimate_parameters, seed_manual_parameters
from ..analysis.regression import RegressionResult, compute_regression
from ..analysis.sampler import format_number
from ..constants import HIT_RADIUS
from .points import ScreenProjection, as_points
from .settings import ManualParameter, ParameterMode, RegressionKind, RegressionSettings


@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error"
    message: str


@dataclass(frozen=True)
class RegressionUpdate:
    settings: RegressionSettings
    result: RegressionResult
    notification: Optional[Notification] = None


def _notify_for(settings: RegressionSettings, result: RegressionResult, series_name: str):
    kind = settings.kind
    if kind is RegressionKind.NONE or kind.is_interpolation:
        return None
    if result.success:
        return Notification(
            "success",
            f"Approximation found for {series_name}: {result.equation} "
            f"(Error: {format_number(result.mean_squared_error)})",
        )
    return Notification(
        "error", f"Approximation failed for {series_name}: {result.error_message}"
    )


def recompute(
    settings: RegressionSettings,
    data: Any,
    series_name: str = "series",
    notify: bool = True,
) -> RegressionUpdate:
    """Run the engine for ``settings`` without changing them."""
    result = compute_regression(
        as_points(data),
        settings.kind,
        settings.order,
        settings.force_origin,
        settings.manual_values(),
        settings.manual_points,
    )
    note = _notify_for(settings, result, series_name) if notify else None
    return RegressionUpdate(settings, result, note)


def change_structure(
    settings: RegressionSettings,
    data: Any,
    kind=None,
    order: Optional[int] = None,
    force_origin: Optional[bool] = None,
    series_name: str = "series",
) -> RegressionUpdate:
    """Set kind/order/origin; any actual change resets to auto mode.

    Arguments left as None keep their current value, except ``order`` which
    is only kept while the kind stays polynomial.
    """
    new_kind = RegressionKind(kind) if kind is not None else settings.kind
    if order is None and new_kind is settings.kind:
        order = settings.order
    new_origin = settings.force_origin if force_origin is None else bool(force_origin)
    new = settings.evolve(kind=new_kind, order=order, force_origin=new_origin)
    if new.structure() != settings.structure():
        new = new.evolve(mode=ParameterMode.AUTO, parameters=None)
    return recompute(new, data, series_name)


def set_mode(
    settings: RegressionSettings,
    data: Any,
    mode,
    series_name: str = "series",
) -> RegressionUpdate:
    """Switch auto/manual. Manual without sliders seeds them from a fit.

    Going back to auto keeps the sliders so a later switch restores them.
    """
    mode = ParameterMode(mode)
    params = settings.parameters
    if mode is ParameterMode.MANUAL and not params:
        fitted = estimate_parameters(
            as_points(data), settings.kind, settings.order, settings.force_origin
        )
        params = seed_manual_parameters(fitted) if fitted is not None else {}
    return recompute(settings.evolve(mode=mode, parameters=params), data, series_name)


def edit_parameter(
    settings: RegressionSettings,
    data: Any,
    name: str,
    value: Optional[float] = None,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> RegressionUpdate:
    """Change one slider's value or bounds and recompute silently."""
    params: Dict[str, ManualParameter] = dict(settings.parameters or {})
    if name not in params:
        raise KeyError(name)
    old = params[name]
    params[name] = ManualParameter(
        value=old.value if value is None else float(value),
        min=old.min if minimum is None else float(minimum),
        max=old.max if maximum is None else float(maximum),
    )
    return recompute(settings.evolve(parameters=params), data, notify=False)


# --- manual control points ---

def _with_points(settings, data, arena) -> RegressionUpdate:
    return recompute(settings.evolve(manual_points=arena), data, notify=False)


def add_control_point(settings: RegressionSettings, data: Any, point: Any):
    """Insert a point in x order; returns (update, new point id)."""
    arena, pid = settings.manual_points.add(point)
    return _with_points(settings, data, arena), pid


def move_control_point(
    settings: RegressionSettings, data: Any, point_id: int, point: Any
) -> RegressionUpdate:
    """Drag step: the point keeps its id and stored slot."""
    return _with_points(settings, data, settings.manual_points.move(point_id, point))


def remove_control_point(
    settings: RegressionSettings, data: Any, point_id: int
) -> RegressionUpdate:
    return _with_points(settings, data, settings.manual_points.remove(point_id))


def remove_nearest_control_point(
    settings: RegressionSettings,
    data: Any,
    target: Any,
    radius: float = HIT_RADIUS,
    to_screen: Optional[ScreenProjection] = None,
) -> RegressionUpdate:
    """Right-click: drop the closest point within ``radius``, if any."""
    pid = settings.manual_points.nearest(target, radius, to_screen)
    if pid is None:
        return recompute(settings, data, notify=False)
    return remove_control_point(settings, data, pid)


__all__ = [
    "Notification",
    "RegressionUpdate",
    "recompute",
    "change_structure",
    "set_mode",
    "edit_parameter",
    "add_control_point",
    "move_control_point",
    "remove_control_point",
    "remove_nearest_control_point",
]
