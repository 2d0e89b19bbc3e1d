"""Catmull-Rom interpolation for spline and manual curves."""
from __future__ import annotations

from typing import Any, List

import numpy as np

from ..constants import DEFAULT_TENSION, SPLINE_SUBSTEPS
from ..core.points import DataPoint, as_points, sorted_by_x


def catmull_rom_basis(u: np.ndarray, tension: float = DEFAULT_TENSION) -> np.ndarray:
    """Blending weights (c0, c1, c2, c3) for each parameter value in ``u``."""
    t = tension
    u = np.asarray(u, dtype=float)
    u2, u3 = u * u, u * u * u
    return np.stack(
        [
            -t * u3 + 2 * t * u2 - t * u,
            (2 - t) * u3 + (t - 3) * u2 + 1,
            (t - 2) * u3 + (3 - 2 * t) * u2 + t * u,
            t * u3 - t * u2,
        ],
        axis=-1,
    )


def catmull_rom(
    points: Any,
    tension: float = DEFAULT_TENSION,
    substeps: int = SPLINE_SUBSTEPS,
) -> List[DataPoint]:
    """Interpolate ``points`` (sorted by x on a copy) with a Catmull-Rom spline.

    First and last points are duplicated as phantom controls so the curve
    starts and ends on them. Every input point appears exactly in the
    output: it is the u=0 sample of its segment, and the last point is
    appended. Fewer than two points give an empty curve.
    """
    pts = sorted_by_x(as_points(points))
    if len(pts) < 2:
        return []
    ctrl = np.asarray([pts[0]] + pts + [pts[-1]], dtype=float)
    weights = catmull_rom_basis(np.arange(substeps) / substeps, tension)

    out: List[DataPoint] = []
    for i in range(len(ctrl) - 3):
        seg = weights @ ctrl[i:i + 4]
        out.extend(DataPoint(float(x), float(y)) for x, y in seg)
    out.append(pts[-1])
    return out


__all__ = ["catmull_rom", "catmull_rom_basis"]
