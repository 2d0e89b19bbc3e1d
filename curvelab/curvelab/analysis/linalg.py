"""Small dense solvers: simple least squares and Gaussian elimination."""
from __future__ import annotations

from typing import Iterable, NamedTuple, Sequence, Tuple

import numpy as np


class LineFit(NamedTuple):
    slope: float
    intercept: float


def _xy(points: Iterable[Sequence[float]]) -> Tuple[np.ndarray, np.ndarray]:
    arr = np.asarray([(p[0], p[1]) for p in points], dtype=float)
    if arr.size == 0:
        return np.empty(0), np.empty(0)
    return arr[:, 0], arr[:, 1]


def ordinary_least_squares(points) -> LineFit:
    """Closed-form y = slope*x + intercept.

    Singular input (no points, or every x equal) gives ``(0, 0)``.
    """
    x, y = _xy(points)
    n = len(x)
    if n == 0:
        return LineFit(0.0, 0.0)
    sx, sy = x.sum(), y.sum()
    sxy, sxx = (x * y).sum(), (x * x).sum()
    denom = n * sxx - sx * sx
    if denom == 0:
        return LineFit(0.0, 0.0)
    slope = (n * sxy - sx * sy) / denom
    return LineFit(float(slope), float((sy - slope * sx) / n))


def ordinary_least_squares_through_origin(points) -> float:
    """Slope minimizing sum((y - m*x)^2); 0 when sum(x^2) is 0."""
    x, y = _xy(points)
    sxx = (x * x).sum()
    if sxx == 0:
        return 0.0
    return float((x * y).sum() / sxx)


def solve_linear_system(A, b) -> np.ndarray:
    """Solve A x = b by Gaussian elimination with partial pivoting.

    A singular system is not detected; the zero pivot propagates NaN or
    inf into the result and callers check ``np.isfinite``.
    """
    M = np.hstack(
        [np.array(A, dtype=float), np.array(b, dtype=float).reshape(-1, 1)]
    )
    n = M.shape[0]
    with np.errstate(all="ignore"):
        for i in range(n):
            pivot = i + int(np.argmax(np.abs(M[i:, i])))
            if pivot != i:
                M[[i, pivot]] = M[[pivot, i]]
            for k in range(i + 1, n):
                factor = M[k, i] / M[i, i]
                M[k, i:] -= factor * M[i, i:]
        x = np.zeros(n)
        for i in range(n - 1, -1, -1):
            x[i] = (M[i, n] - M[i, i + 1:n] @ x[i + 1:]) / M[i, i]
    return x


def _power_sums(x: np.ndarray, y: np.ndarray, max_pow: int, max_ypow: int):
    sum_x = np.array([(x ** k).sum() for k in range(max_pow + 1)])
    sum_xy = np.array([(y * x ** k).sum() for k in range(max_ypow + 1)])
    return sum_x, sum_xy


def polynomial_through_origin(points, order: int) -> np.ndarray:
    """Coefficients a1..a_order of y = a1*x + ... + a_order*x^order.

    Normal equations: (X'X)_ij = sum(x^(i+j)), (X'y)_i = sum(y*x^i) for
    powers 1..order.
    """
    x, y = _xy(points)
    sum_x, sum_xy = _power_sums(x, y, 2 * order, order)
    A = [[sum_x[i + j] for j in range(1, order + 1)] for i in range(1, order + 1)]
    return solve_linear_system(A, sum_xy[1:])


__all__ = [
    "LineFit",
    "ordinary_least_squares",
    "ordinary_least_squares_through_origin",
    "solve_linear_system",
    "polynomial_through_origin",
]
