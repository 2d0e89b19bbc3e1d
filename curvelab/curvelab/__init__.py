"""CurveLab package root.

Exposes high-level API surface for convenience.
"""
from .core import (  # noqa: F401
    ControlPoints,
    DataPoint,
    ManualParameter,
    ParameterMode,
    RegressionKind,
    RegressionSettings,
)
from .analysis.models import (  # noqa: F401
    estimate_parameters,
    estimate_parameter_map,
    predict_function,
)
from .analysis.regression import RegressionResult, compute_regression  # noqa: F401
from .analysis.sampler import format_equation  # noqa: F401
from .analysis.freehand import fit_freehand_stroke  # noqa: F401
from .core.data_model import SeriesModel  # noqa: F401
from .core import state  # noqa: F401
