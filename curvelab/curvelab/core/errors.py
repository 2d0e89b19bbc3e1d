"""Exceptions raised by curvelab."""
from __future__ import annotations


class CurveLabError(ValueError):
    """Base class for errors raised by the regression engine."""
    pass


class FreehandFitError(CurveLabError):
    """Raised inside the Bézier fitter when stroke geometry is unusable."""
    pass


__all__ = ["CurveLabError", "FreehandFitError"]
