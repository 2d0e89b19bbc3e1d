"""Core data layer: points, settings and errors.

``state`` and ``data_model`` depend on ``curvelab.analysis`` and are
imported explicitly.
"""
from .errors import CurveLabError, FreehandFitError  # noqa: F401
from .points import ControlPoints, DataPoint, as_points  # noqa: F401
from .settings import (  # noqa: F401
    ManualParameter,
    ParameterMode,
    RegressionKind,
    RegressionSettings,
)
