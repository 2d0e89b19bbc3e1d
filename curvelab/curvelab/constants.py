"""Central constants & enumerations."""

# UI labels keyed by RegressionKind value
REGRESSION_LABELS = {
    "none": "None",
    "linear": "Linear",
    "polynomial": "Polynomial",
    "exponential": "Exponential",
    "logarithmic": "Logarithmic",
    "power": "Power",
    "sqrt": "Square Root",
    "sinusoidal": "Sinusoidal (Basic)",
    "negativeExponential": "Negative Exponential",
    "spline": "Spline Interpolation",
    "manual": "Manual (Hand Drawn)",
}

# Kinds whose fit can be pinned to (0, 0) and whose domain then reaches 0
ORIGIN_KINDS = ("linear", "polynomial", "sqrt", "sinusoidal")
# Kinds that show the origin toggle in the UI
ORIGIN_TOGGLE_KINDS = ORIGIN_KINDS + ("negativeExponential",)

DEFAULT_ORDER = 2
SAMPLE_STEPS = 100
DEFAULT_DOMAIN = (0.0, 10.0)

SPLINE_SUBSTEPS = 20
DEFAULT_TENSION = 0.5

NEG_EXP_CANDIDATES = 50
NEG_EXP_SPAN = 5.0
NEG_EXP_OFFSET = 0.01

MANUAL_RANGE_FACTOR = 2.0
MANUAL_RANGE_FLOOR = 10.0

BEZIER_STEPS = 20
STROKE_TOLERANCE_DIVISOR = 50.0
MIN_STROKE_TOLERANCE = 1.0
MAX_REPARAMETERIZE = 20
STRAIGHT_TOLERANCE = 1e-9

HIT_RADIUS = 10.0

DEFAULT_REGRESSION_STYLE = {
    "color": "#ff0000",
    "width": 2,
    "line_style": "solid",
}

__all__ = [
    "REGRESSION_LABELS",
    "ORIGIN_KINDS",
    "ORIGIN_TOGGLE_KINDS",
    "DEFAULT_ORDER",
    "SAMPLE_STEPS",
    "DEFAULT_DOMAIN",
    "SPLINE_SUBSTEPS",
    "DEFAULT_TENSION",
    "NEG_EXP_CANDIDATES",
    "NEG_EXP_SPAN",
    "NEG_EXP_OFFSET",
    "MANUAL_RANGE_FACTOR",
    "MANUAL_RANGE_FLOOR",
    "BEZIER_STEPS",
    "STROKE_TOLERANCE_DIVISOR",
    "MIN_STROKE_TOLERANCE",
    "MAX_REPARAMETERIZE",
    "STRAIGHT_TOLERANCE",
    "HIT_RADIUS",
    "DEFAULT_REGRESSION_STYLE",
]
