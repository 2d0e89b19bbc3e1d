import pytest

from curvelab.analysis.regression import NO_PARAMETERS
from curvelab.core import state
from curvelab.core.settings import (
    ManualParameter,
    ParameterMode,
    RegressionKind,
    RegressionSettings,
)

LINE = [(1, 2), (2, 4), (3, 6), (4, 8)]


def _manual_linear():
    return RegressionSettings(
        kind="linear",
        mode="manual",
        parameters={"m": ManualParameter(3.0, -7.0, 13.0), "c": ManualParameter(0.0, -10.0, 10.0)},
    )


def test_structural_change_resets_to_auto():
    up = state.change_structure(_manual_linear(), LINE, kind="polynomial", series_name="S1")
    assert up.settings.kind is RegressionKind.POLYNOMIAL
    assert up.settings.mode is ParameterMode.AUTO
    assert up.settings.parameters is None
    assert up.notification.level == "success"
    assert up.notification.message.startswith("Approximation found for S1: y = ")


def test_origin_toggle_is_structural():
    up = state.change_structure(_manual_linear(), LINE, force_origin=True)
    assert up.settings.force_origin
    assert up.settings.parameters is None


def test_unchanged_structure_keeps_parameters():
    up = state.change_structure(_manual_linear(), LINE, kind="linear")
    assert up.settings.mode is ParameterMode.MANUAL
    assert up.result.params.m == 3.0


def test_success_notification_reports_equation_and_error():
    up = state.recompute(RegressionSettings(kind="linear"), LINE, "Series 1")
    assert up.notification.message == (
        "Approximation found for Series 1: y = 2.00e+0x + 0.00e+0 (Error: 0.00e+0)"
    )


def test_failure_notification():
    up = state.change_structure(RegressionSettings(), [(-1, 1), (-2, 2)], kind="logarithmic")
    assert not up.result.success
    assert up.notification.level == "error"
    assert up.notification.message == f"Approximation failed for series: {NO_PARAMETERS}"


@pytest.mark.parametrize("kind", ["spline", "manual", "none"])
def test_interpolation_kinds_never_notify(kind):
    up = state.change_structure(RegressionSettings(kind="linear"), LINE, kind=kind)
    assert up.notification is None


def test_manual_mode_seeds_sliders_from_fit():
    up = state.set_mode(RegressionSettings(kind="linear"), LINE, "manual")
    params = up.settings.parameters
    assert params["m"] == ManualParameter(2.0, -8.0, 12.0)
    assert params["c"] == ManualParameter(0.0, -10.0, 10.0)
    assert up.result.params.m == 2.0


def test_back_to_auto_keeps_sliders():
    up = state.set_mode(_manual_linear(), LINE, "auto")
    assert up.settings.parameters["m"].value == 3.0
    assert up.result.params.m == 2.0
    again = state.set_mode(up.settings, LINE, "manual")
    assert again.result.params.m == 3.0


def test_manual_mode_without_fit_has_no_sliders():
    up = state.set_mode(RegressionSettings(kind="logarithmic"), [(-1, 1)], "manual")
    assert up.settings.parameters == {}
    assert up.settings.manual_values() is None


def test_edit_parameter_is_silent():
    up = state.edit_parameter(_manual_linear(), LINE, "m", value=5.0, maximum=20.0)
    assert up.notification is None
    assert up.settings.parameters["m"] == ManualParameter(5.0, -7.0, 20.0)
    assert up.result.params.m == 5.0
    with pytest.raises(KeyError):
        state.edit_parameter(_manual_linear(), LINE, "q", value=1.0)


def test_control_point_editing():
    s = RegressionSettings(kind="manual")
    up, a = state.add_control_point(s, [], (2, 2))
    up, b = state.add_control_point(up.settings, [], (0, 0))
    assert up.notification is None
    assert up.result.points[0] == (0.0, 0.0)
    assert up.result.points[-1] == (2.0, 2.0)

    up = state.move_control_point(up.settings, [], a, (3, 1))
    assert up.settings.manual_points.ids == (b, a)
    assert up.result.points[-1] == (3.0, 1.0)

    up = state.remove_nearest_control_point(up.settings, [], (0.1, 0.0), radius=1.0)
    assert up.settings.manual_points.ids == (a,)
    assert up.result.points == ()

    same = state.remove_nearest_control_point(up.settings, [], (50, 50), radius=1.0)
    assert same.settings == up.settings

    up = state.remove_control_point(up.settings, [], a)
    assert len(up.settings.manual_points) == 0


def test_default_polynomial_order_is_not_a_structural_change():
    s = RegressionSettings(
        kind="polynomial",
        mode="manual",
        parameters={"a0": ManualParameter(1.0, -9.0, 11.0)},
    )
    up = state.change_structure(s, LINE, order=2)
    assert up.settings.mode is ParameterMode.MANUAL
    assert up.settings.parameters == s.parameters
    reset = state.change_structure(s, LINE, order=3)
    assert reset.settings.parameters is None


def test_order_is_ignored_for_other_kinds():
    up = state.change_structure(_manual_linear(), LINE, order=5)
    assert up.settings.mode is ParameterMode.MANUAL
    assert RegressionSettings(kind="linear", order=4).structure() == RegressionSettings(kind="linear").structure()
