import numpy as np
import pytest

from curvelab.analysis.models import (
    ExponentialParams,
    LinearParams,
    NegativeExponentialParams,
    PolynomialParams,
    SplineParams,
    estimate_parameter_map,
    estimate_parameters,
    params_from_map,
    predict_function,
    seed_manual_parameters,
)


def _points(f, xs):
    return [(float(x), float(f(x))) for x in xs]


def test_linear_example():
    p = estimate_parameters([(1, 2), (2, 4), (3, 6), (4, 8)], "linear")
    assert p == LinearParams(2.0, 0.0)


def test_linear_through_origin_has_zero_intercept():
    p = estimate_parameters([(1, 3), (2, 5), (3, 7)], "linear", force_origin=True)
    assert p.c == 0.0
    assert p.m == pytest.approx(34 / 14)


def test_polynomial_interpolates_k_plus_one_points():
    pts = [(0, 1), (1, 3), (3, 2)]
    p = estimate_parameters(pts, "polynomial", order=2)
    assert isinstance(p, PolynomialParams)
    assert p.order == 2
    for x, y in pts:
        assert p.predict(x) == pytest.approx(y, abs=1e-8)


def test_polynomial_through_origin():
    pts = _points(lambda x: 3 * x + 2 * x ** 2, range(1, 6))
    p = estimate_parameters(pts, "polynomial", order=2, force_origin=True)
    assert p.coefficients == pytest.approx((0.0, 3.0, 2.0))


def test_exponential_and_power_recovery():
    exp = estimate_parameters(_points(lambda x: 2 * np.exp(0.5 * x), np.linspace(0, 4, 20)), "exponential")
    assert exp.a == pytest.approx(2.0)
    assert exp.b == pytest.approx(0.5)
    pw = estimate_parameters(_points(lambda x: 4 * x ** 2.5, np.linspace(1, 10, 20)), "power")
    assert pw.a == pytest.approx(4.0)
    assert pw.b == pytest.approx(2.5)


def test_transforms_filter_invalid_points():
    # the negative y value is dropped before the log transform
    pts = [(0, -1.0)] + _points(lambda x: 2 * np.exp(0.5 * x), [1, 2, 3])
    p = estimate_parameters(pts, "exponential")
    assert p.a == pytest.approx(2.0)


@pytest.mark.parametrize("kind", ["logarithmic", "power"])
def test_non_positive_x_gives_empty_map(kind):
    pts = [(-3, 1), (-2, 2), (0, 3)]
    assert estimate_parameters(pts, kind) is None
    assert estimate_parameter_map(pts, kind) == {}


def test_sqrt_and_sinusoidal():
    sq = estimate_parameters(_points(lambda x: 3 * np.sqrt(x) + 1, [0, 1, 4, 9]), "sqrt")
    assert (sq.m, sq.c) == pytest.approx((3.0, 1.0))
    sq0 = estimate_parameters([(4, 6)], "sqrt", force_origin=True)
    assert (sq0.m, sq0.c) == pytest.approx((3.0, 0.0))
    sn = estimate_parameters(_points(lambda x: 2 * np.sin(x) - 1, np.linspace(0, 6, 15)), "sinusoidal")
    assert (sn.m, sn.c) == pytest.approx((2.0, -1.0))


def test_negative_exponential_growth():
    xs = np.linspace(0, 10, 30)
    ys = 5 - 3 * np.exp(-0.5 * xs)
    p = estimate_parameters(list(zip(xs, ys)), "negativeExponential")
    assert isinstance(p, NegativeExponentialParams)
    assert p.a > ys.max()
    assert p.b > 0
    assert p.c > 0


def test_negative_exponential_decay():
    xs = np.linspace(0, 10, 30)
    ys = 1 + 4 * np.exp(-0.3 * xs)
    p = estimate_parameters(list(zip(xs, ys)), "negativeExponential")
    assert p.a < ys.min()
    assert p.b < 0
    assert p.c > 0


def test_negative_exponential_through_origin():
    xs = np.linspace(0, 8, 20)
    ys = 4 * (1 - np.exp(-0.5 * xs))
    p = estimate_parameters(list(zip(xs, ys)), "negativeExponential", force_origin=True)
    assert p.a == p.b
    assert p.predict(0.0) == pytest.approx(0.0)


def test_negative_exponential_needs_three_points():
    assert estimate_parameters([(0, 1), (1, 2)], "negativeExponential") is None


def test_no_data_and_unfittable_kinds():
    assert estimate_parameters([], "linear") is None
    assert estimate_parameters([(0, 0), (1, 1)], "manual") is None
    assert estimate_parameters([(0, 0), (1, 1)], "none") is None
    assert estimate_parameters([(0, 0)], "spline") == SplineParams(0.5)


def test_predict_function_from_map_and_struct():
    f = predict_function("exponential", {"a": 2.0, "b": 0.0})
    assert f(3.0) == pytest.approx(2.0)
    g = predict_function("polynomial", PolynomialParams((1.0, 0.0, 1.0)))
    assert np.allclose(g(np.array([0.0, 2.0])), [1.0, 5.0])
    assert predict_function("spline", SplineParams()) is None
    assert predict_function("manual", {}) is None


def test_prediction_outside_domain_is_nan():
    f = predict_function("logarithmic", {"a": 0.0, "b": 1.0})
    assert np.isnan(f(-1.0))


def test_params_from_map():
    assert params_from_map("linear", {"m": 2.0}) == LinearParams(2.0, 0.0)
    assert params_from_map("polynomial", {"a0": 1, "a1": 2}).coefficients == (1.0, 2.0)
    assert params_from_map("exponential", {"a": 1, "b": 2}) == ExponentialParams(1.0, 2.0)
    assert params_from_map("linear", {}) is None


def test_seed_manual_parameters():
    seeded = seed_manual_parameters(LinearParams(2.0, 20.0))
    assert (seeded["m"].min, seeded["m"].max) == (-8.0, 12.0)
    assert (seeded["c"].min, seeded["c"].max) == (-20.0, 60.0)


def test_negative_exponential_skips_unusable_candidates():
    from curvelab.analysis.linalg import ordinary_least_squares_through_origin
    from curvelab.constants import NEG_EXP_CANDIDATES, NEG_EXP_OFFSET, NEG_EXP_SPAN

    xs = np.array([1.0, 2.0, 3.0, 4.0])
    ys = np.array([-2.0, -3.0, -4.0, -5.0])
    p = estimate_parameters(list(zip(xs, ys)), "negativeExponential", force_origin=True)
    assert p is not None
    assert p.a > 0 and p.a == p.b

    # candidates below zero make every 1 - y/a negative and are passed over
    steps = np.arange(1, NEG_EXP_CANDIDATES + 1)
    grid = ys.max() + (ys.max() - ys.min()) * (NEG_EXP_SPAN * steps / NEG_EXP_CANDIDATES + NEG_EXP_OFFSET)
    skipped, sses = 0, []
    for a in grid:
        ratio = 1 - ys / a
        valid = ratio > 0
        if valid.sum() < 3:
            skipped += 1
            continue
        m = ordinary_least_squares_through_origin(list(zip(xs[valid], np.log(ratio[valid]))))
        cand = NegativeExponentialParams(float(a), float(a), -m)
        sses.append(float(np.sum((ys - cand.predict(xs)) ** 2)))
    assert skipped > 0 and sses
    best = float(np.sum((ys - p.predict(xs)) ** 2))
    assert best <= min(sses) + 1e-9
