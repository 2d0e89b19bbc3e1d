"""Per-series regression configuration."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..constants import DEFAULT_ORDER, DEFAULT_REGRESSION_STYLE, ORIGIN_KINDS
from .points import ControlPoints


class RegressionKind(str, Enum):
    NONE = "none"
    LINEAR = "linear"
    POLYNOMIAL = "polynomial"
    EXPONENTIAL = "exponential"
    LOGARITHMIC = "logarithmic"
    POWER = "power"
    SQRT = "sqrt"
    SINUSOIDAL = "sinusoidal"
    NEGATIVE_EXPONENTIAL = "negativeExponential"
    SPLINE = "spline"
    MANUAL = "manual"

    @property
    def supports_origin(self) -> bool:
        return self.value in ORIGIN_KINDS

    @property
    def is_interpolation(self) -> bool:
        return self in (RegressionKind.SPLINE, RegressionKind.MANUAL)


class ParameterMode(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True)
class ManualParameter:
    value: float
    min: float
    max: float


@dataclass(frozen=True)
class RegressionSettings:
    kind: RegressionKind = RegressionKind.NONE
    order: Optional[int] = None
    force_origin: bool = False
    mode: ParameterMode = ParameterMode.AUTO
    parameters: Optional[Mapping[str, ManualParameter]] = None
    manual_points: ControlPoints = field(default_factory=ControlPoints)
    # presentation, ignored by the engine
    color: str = DEFAULT_REGRESSION_STYLE["color"]
    width: float = DEFAULT_REGRESSION_STYLE["width"]
    line_style: str = DEFAULT_REGRESSION_STYLE["line_style"]

    def __post_init__(self):
        object.__setattr__(self, "kind", RegressionKind(self.kind))
        object.__setattr__(self, "mode", ParameterMode(self.mode))
        if self.order is not None and int(self.order) < 2:
            raise ValueError(f"Polynomial order must be >= 2, got {self.order}")

    @property
    def effective_order(self) -> int:
        return int(self.order) if self.order else DEFAULT_ORDER

    def manual_values(self) -> Optional[Dict[str, float]]:
        """Slider values when manual mode is active, else None."""
        if self.mode is ParameterMode.MANUAL and self.parameters:
            return {k: p.value for k, p in self.parameters.items()}
        return None

    def structure(self):
        """What a fit depends on; order only counts for polynomials."""
        order = self.effective_order if self.kind is RegressionKind.POLYNOMIAL else None
        return (self.kind, order, bool(self.force_origin))

    def evolve(self, **changes) -> "RegressionSettings":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.kind.value,
            "mode": self.mode.value,
            "color": self.color,
            "width": self.width,
            "style": self.line_style,
        }
        if self.order is not None:
            d["order"] = self.order
        if self.force_origin:
            d["forceOrigin"] = True
        if self.parameters is not None:
            d["parameters"] = {k: vars(p) for k, p in self.parameters.items()}
        if self.manual_points:
            d["manualPoints"] = self.manual_points.to_list()
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RegressionSettings":
        params = d.get("parameters")
        return cls(
            kind=RegressionKind(d.get("type", "none")),
            order=d.get("order"),
            force_origin=bool(d.get("forceOrigin", False)),
            mode=ParameterMode(d.get("mode", "auto")),
            parameters=(
                {k: ManualParameter(**v) for k, v in params.items()}
                if params is not None
                else None
            ),
            manual_points=ControlPoints.from_points(d.get("manualPoints") or []),
            color=d.get("color", DEFAULT_REGRESSION_STYLE["color"]),
            width=d.get("width", DEFAULT_REGRESSION_STYLE["width"]),
            line_style=d.get("style", DEFAULT_REGRESSION_STYLE["line_style"]),
        )


__all__ = [
    "RegressionKind",
    "ParameterMode",
    "ManualParameter",
    "RegressionSettings",
]
