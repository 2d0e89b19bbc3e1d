import pytest

from curvelab.core.points import ControlPoints
from curvelab.core.settings import (
    ManualParameter,
    ParameterMode,
    RegressionKind,
    RegressionSettings,
)


def test_strings_are_coerced_to_enums():
    s = RegressionSettings(kind="negativeExponential", mode="manual")
    assert s.kind is RegressionKind.NEGATIVE_EXPONENTIAL
    assert s.mode is ParameterMode.MANUAL


def test_order_below_two_rejected():
    with pytest.raises(ValueError):
        RegressionSettings(kind="polynomial", order=1)


def test_effective_order_defaults_to_two():
    assert RegressionSettings(kind="polynomial").effective_order == 2
    assert RegressionSettings(kind="polynomial", order=4).effective_order == 4


def test_manual_values_only_in_manual_mode():
    params = {"m": ManualParameter(2.0, -8.0, 12.0)}
    assert RegressionSettings(kind="linear", parameters=params).manual_values() is None
    s = RegressionSettings(kind="linear", mode="manual", parameters=params)
    assert s.manual_values() == {"m": 2.0}


def test_origin_support():
    assert RegressionKind.SQRT.supports_origin
    assert not RegressionKind.EXPONENTIAL.supports_origin
    assert RegressionKind.MANUAL.is_interpolation


def test_dict_round_trip():
    s = RegressionSettings(
        kind="polynomial",
        order=3,
        force_origin=True,
        mode="manual",
        parameters={"a0": ManualParameter(0.0, -10.0, 10.0)},
        manual_points=ControlPoints.from_points([(0, 1), (2, 3)]),
        line_style="dashed",
    )
    d = s.to_dict()
    assert d["type"] == "polynomial"
    assert d["forceOrigin"] is True
    assert d["manualPoints"] == [{"x": 0.0, "y": 1.0}, {"x": 2.0, "y": 3.0}]
    assert RegressionSettings.from_dict(d) == s
