import numpy as np
import pytest

from curvelab.analysis.linalg import (
    ordinary_least_squares,
    ordinary_least_squares_through_origin,
    polynomial_through_origin,
    solve_linear_system,
)


@pytest.mark.parametrize("m,c", [(2.0, 0.0), (-1.5, 4.0), (0.25, -3.0)])
def test_line_round_trip(m, c):
    xs = [0.0, 1.0, 2.5, 4.0, 7.0]
    fit = ordinary_least_squares([(x, m * x + c) for x in xs])
    assert fit.slope == pytest.approx(m, abs=1e-9)
    assert fit.intercept == pytest.approx(c, abs=1e-9)


def test_degenerate_inputs_give_zero_line():
    assert ordinary_least_squares([]) == (0.0, 0.0)
    assert ordinary_least_squares([(3, 1), (3, 2), (3, 5)]) == (0.0, 0.0)
    assert ordinary_least_squares_through_origin([(0, 1), (0, 2)]) == 0.0


def test_slope_through_origin():
    assert ordinary_least_squares_through_origin([(1, 3), (2, 6), (4, 12)]) == pytest.approx(3.0)


def test_gaussian_elimination_pivots():
    x = solve_linear_system([[0.0, 1.0], [1.0, 0.0]], [2.0, 3.0])
    assert np.allclose(x, [3.0, 2.0])


def test_gaussian_elimination_3x3():
    A = np.array([[2.0, 1.0, -1.0], [-3.0, -1.0, 2.0], [-2.0, 1.0, 2.0]])
    b = np.array([8.0, -11.0, -3.0])
    assert np.allclose(solve_linear_system(A, b), [2.0, 3.0, -1.0])


def test_singular_system_is_not_finite():
    x = solve_linear_system([[1.0, 2.0], [2.0, 4.0]], [1.0, 2.0])
    assert not np.all(np.isfinite(x))


def test_polynomial_through_origin_recovers_coefficients():
    pts = [(x, 3 * x + 2 * x ** 2) for x in range(1, 6)]
    assert np.allclose(polynomial_through_origin(pts, 2), [3.0, 2.0])
