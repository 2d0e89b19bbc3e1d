"""Piecewise Bézier approximation of hand-drawn strokes.

Schneider's algorithm ("An Algorithm for Automatically Fitting Digitized
Curves", Graphics Gems, 1990): fit one cubic with fixed end tangents by
least squares, refine the parameterization with Newton-Raphson while the
error is close, otherwise split at the worst point and recurse. Runs that
lie on their chord come back as straight segments, and cubics that are
exactly degree-reducible come back as quadratics.

Errors are squared distances compared against the tolerance, so the
tolerance is in squared data units.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from math import comb
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ..constants import (
    BEZIER_STEPS,
    MAX_REPARAMETERIZE,
    MIN_STROKE_TOLERANCE,
    STRAIGHT_TOLERANCE,
    STROKE_TOLERANCE_DIVISOR,
)
from ..core.errors import FreehandFitError
from ..core.points import DataPoint, as_points

logger = logging.getLogger(__name__)

Control = Tuple[float, float]
Curve = Tuple[Control, ...]


@dataclass(frozen=True)
class BezierFit:
    """Outcome of a stroke fit: curves on success, a reason on failure."""

    curves: Tuple[Curve, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, curves: Sequence[Curve]) -> "BezierFit":
        return cls(tuple(curves))

    @classmethod
    def failure(cls, reason: str) -> "BezierFit":
        return cls((), reason)


def stroke_tolerance(points: Sequence[DataPoint]) -> float:
    """x-extent / 50, never below 1."""
    if not points:
        return MIN_STROKE_TOLERANCE
    xs = [p.x for p in points]
    return max((max(xs) - min(xs)) / STROKE_TOLERANCE_DIVISOR, MIN_STROKE_TOLERANCE)


# --- Bézier evaluation ---

def _bernstein(degree: int, t: np.ndarray) -> np.ndarray:
    t = np.asarray(t, dtype=float)[:, None]
    k = np.arange(degree + 1)
    coef = np.array([comb(degree, i) for i in k], dtype=float)
    return coef * (1 - t) ** (degree - k) * t ** k


def bezier_points(ctrl: np.ndarray, t: np.ndarray) -> np.ndarray:
    ctrl = np.asarray(ctrl, dtype=float)
    return _bernstein(len(ctrl) - 1, t) @ ctrl


def _cubic_d1(ctrl: np.ndarray, t: np.ndarray) -> np.ndarray:
    return 3 * bezier_points(np.diff(ctrl, axis=0), t)


def _cubic_d2(ctrl: np.ndarray, t: np.ndarray) -> np.ndarray:
    return 6 * bezier_points(np.diff(ctrl, n=2, axis=0), t)


def sample_bezier(curve: Sequence[Control], steps: int = BEZIER_STEPS) -> List[DataPoint]:
    """``steps + 1`` evenly spaced samples of a linear/quadratic/cubic segment."""
    if not 2 <= len(curve) <= 4:
        raise ValueError(f"Unsupported Bézier segment with {len(curve)} control points")
    xy = bezier_points(np.asarray(curve, dtype=float), np.linspace(0.0, 1.0, steps + 1))
    return [DataPoint(float(x), float(y)) for x, y in xy]


# --- fitting ---

def _unit(v: np.ndarray) -> np.ndarray:
    n = float(np.hypot(v[0], v[1]))
    if n == 0 or not np.isfinite(n):
        raise FreehandFitError("Degenerate tangent")
    return v / n


def _is_straight(pts: np.ndarray) -> bool:
    chord = pts[-1] - pts[0]
    length = float(np.hypot(chord[0], chord[1]))
    if length == 0:
        return False
    rel = pts - pts[0]
    dev = np.abs(chord[0] * rel[:, 1] - chord[1] * rel[:, 0]) / length
    return float(dev.max()) <= STRAIGHT_TOLERANCE * length


def _reduce(bez: np.ndarray) -> Curve:
    """Emit a quadratic when the cubic is an elevated one."""
    p0, p1, p2, p3 = bez
    q_left = (3 * p1 - p0) / 2
    q_right = (3 * p2 - p3) / 2
    scale = max(float(np.abs(bez).max()), 1.0)
    if float(np.abs(q_left - q_right).max()) <= STRAIGHT_TOLERANCE * scale:
        return _as_curve([p0, q_left, p3])
    return _as_curve(bez)


def _as_curve(ctrl) -> Curve:
    return tuple((float(x), float(y)) for x, y in ctrl)


def _chord_length_parameterize(pts: np.ndarray) -> np.ndarray:
    seg = np.hypot(*np.diff(pts, axis=0).T)
    u = np.concatenate([[0.0], np.cumsum(seg)])
    return u / u[-1]


def _generate_bezier(pts, u, left, right) -> np.ndarray:
    first, last = pts[0], pts[-1]
    b = _bernstein(3, u)
    a0 = left[None, :] * b[:, 1:2]
    a1 = right[None, :] * b[:, 2:3]

    c00 = float(np.sum(a0 * a0))
    c01 = float(np.sum(a0 * a1))
    c11 = float(np.sum(a1 * a1))
    base = np.outer(b[:, 0] + b[:, 1], first) + np.outer(b[:, 2] + b[:, 3], last)
    tmp = pts - base
    x0 = float(np.sum(a0 * tmp))
    x1 = float(np.sum(a1 * tmp))

    det = c00 * c11 - c01 * c01
    alpha_l = (x0 * c11 - x1 * c01) / det if det != 0 else 0.0
    alpha_r = (c00 * x1 - c01 * x0) / det if det != 0 else 0.0

    seg_len = float(np.hypot(*(first - last)))
    eps = 1e-6 * seg_len
    if alpha_l < eps or alpha_r < eps:
        # Wu/Barsky heuristic
        alpha_l = alpha_r = seg_len / 3.0
    return np.array([first, first + left * alpha_l, last + right * alpha_r, last])


def _max_error(pts, bez, u) -> Tuple[float, int]:
    d = np.sum((bezier_points(bez, u) - pts) ** 2, axis=1)
    inner = d[1:-1]
    split = 1 + int(np.argmax(inner))
    return float(inner[split - 1]), split


def _reparameterize(bez, pts, u) -> np.ndarray:
    d = bezier_points(bez, u) - pts
    d1 = _cubic_d1(bez, u)
    d2 = _cubic_d2(bez, u)
    num = np.sum(d * d1, axis=1)
    den = np.sum(d1 * d1 + d * d2, axis=1)
    safe = np.where(den == 0, 1.0, den)
    return np.where(den == 0, u, u - num / safe)


def _fit_cubic(pts: np.ndarray, left, right, tol: float) -> List[Curve]:
    if _is_straight(pts):
        return [_as_curve([pts[0], pts[-1]])]
    if len(pts) == 2:
        dist = float(np.hypot(*(pts[0] - pts[1]))) / 3.0
        return [_as_curve([pts[0], pts[0] + left * dist, pts[1] + right * dist, pts[1]])]

    u = _chord_length_parameterize(pts)
    bez = _generate_bezier(pts, u, left, right)
    err, split = _max_error(pts, bez, u)
    if err == 0 or err < tol:
        return [_reduce(bez)]

    if err < tol * tol:
        prev_err, prev_split = err, split
        for _ in range(MAX_REPARAMETERIZE):
            u = _reparameterize(bez, pts, u)
            bez = _generate_bezier(pts, u, left, right)
            err, split = _max_error(pts, bez, u)
            if err < tol:
                return [_reduce(bez)]
            if split == prev_split and 0.9999 < err / prev_err < 1.0001:
                break
            prev_err, prev_split = err, split

    center = pts[split - 1] - pts[split + 1]
    if not center.any():
        v = pts[split - 1] - pts[split]
        center = np.array([-v[1], v[0]])
    to_center = _unit(center)
    return (
        _fit_cubic(pts[:split + 1], left, to_center, tol)
        + _fit_cubic(pts[split:], -to_center, right, tol)
    )


def _dedupe(pts: np.ndarray) -> np.ndarray:
    if len(pts) < 2:
        return pts
    keep = np.concatenate([[True], np.any(np.diff(pts, axis=0) != 0, axis=1)])
    return pts[keep]


def fit_bezier_curves(points: Any, tolerance: float) -> BezierFit:
    """Fit a polyline with Bézier segments of degree 1 to 3.

    Pathological geometry never raises; it comes back as a failed fit.
    """
    pts = _dedupe(np.asarray(as_points(points), dtype=float).reshape(-1, 2))
    if len(pts) < 2:
        return BezierFit.success(())
    try:
        if not np.all(np.isfinite(pts)):
            raise FreehandFitError("Stroke contains non-finite coordinates")
        with np.errstate(divide="raise", invalid="raise", over="raise"):
            left = _unit(pts[1] - pts[0])
            right = _unit(pts[-2] - pts[-1])
            curves = _fit_cubic(pts, left, right, float(tolerance))
    except (FreehandFitError, FloatingPointError, RecursionError) as exc:
        logger.debug("Bezier fit failed: %s", exc)
        return BezierFit.failure(str(exc) or type(exc).__name__)
    return BezierFit.success(curves)


def fit_freehand_stroke(polyline: Any) -> List[DataPoint]:
    """Fit a drawn stroke and resample it into a plain point series.

    Each segment contributes 21 samples (t = 0..1 in steps of 1/20), in
    segment order. Short strokes and failed fits give an empty list.
    """
    pts = as_points(polyline)
    if len(pts) < 2:
        return []
    fit = fit_bezier_curves(pts, stroke_tolerance(pts))
    if not fit.ok:
        return []
    out: List[DataPoint] = []
    for curve in fit.curves:
        out.extend(sample_bezier(curve))
    return out


__all__ = [
    "BezierFit",
    "stroke_tolerance",
    "bezier_points",
    "sample_bezier",
    "fit_bezier_curves",
    "fit_freehand_stroke",
]
