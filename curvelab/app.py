import io

import numpy as np
import pandas as pd
import streamlit as st

from curvelab.charts import make_chart
from curvelab.constants import ORIGIN_TOGGLE_KINDS, REGRESSION_LABELS
from curvelab.core import state
from curvelab.core.data_model import SeriesModel
from curvelab.core.settings import ParameterMode, RegressionKind
from curvelab.utils import frame_from_columns

st.set_page_config(page_title="CurveLab", layout="wide")


def _sample_series():
    x = np.linspace(0.5, 10, 20)
    rng = np.random.default_rng(0)
    y = 3 * (1 - np.exp(-0.4 * x)) + rng.normal(0, 0.05, x.size)
    return SeriesModel.from_points("Series 1", np.column_stack([x, y]))


if "series" not in st.session_state:
    st.session_state["series"] = [_sample_series()]
    st.session_state["editing_id"] = None
    st.session_state["notices"] = []

series_list = st.session_state["series"]


def _notify(update):
    note = getattr(update, "notification", None)
    if note is not None:
        st.session_state["notices"].append(note)


def _parse_points(text: str) -> pd.DataFrame:
    df = pd.read_csv(io.StringIO(text), header=None, names=["x", "y"])
    return frame_from_columns(df, "x", "y")


# --- Sidebar: data ---
with st.sidebar.expander("Data", expanded=True):
    names = [s.name for s in series_list]
    current = st.selectbox("Series", range(len(names)), format_func=names.__getitem__)
    s = series_list[current]
    edited = st.data_editor(
        s.df, num_rows="dynamic", key=f"editor_{s.id}", use_container_width=True
    )
    if not edited.equals(s.df):
        s.set_data(frame_from_columns(edited, "x", "y"))
    if st.button("New empty series"):
        series_list.append(
            SeriesModel.from_points(f"Series {len(series_list) + 1}", [])
        )
        st.rerun()

# --- Sidebar: analysis ---
with st.sidebar.expander("Analysis", expanded=True):
    kinds = list(REGRESSION_LABELS)
    kind = st.selectbox(
        "Approximation",
        kinds,
        index=kinds.index(s.settings.kind.value),
        format_func=REGRESSION_LABELS.get,
        key=f"kind_{s.id}",
    )
    order = s.settings.order
    if kind == RegressionKind.POLYNOMIAL.value:
        order = int(st.number_input(
            "Degree", min_value=2, max_value=10,
            value=s.settings.effective_order, key=f"order_{s.id}",
        ))
    force_origin = s.settings.force_origin
    if kind in ORIGIN_TOGGLE_KINDS:
        force_origin = st.checkbox(
            "Force through origin", value=force_origin, key=f"origin_{s.id}"
        )
    wanted = s.settings.evolve(kind=kind, order=order, force_origin=force_origin)
    if wanted.structure() != s.settings.structure():
        _notify(s.apply(
            state.change_structure, "change_regression",
            kind=kind, order=order, force_origin=force_origin,
        ))

    kind_enum = s.settings.kind
    # widget keys follow the structure so a reset starts from fresh widgets
    skey = f"{s.id}_{kind_enum.value}_{s.settings.order}_{s.settings.force_origin}"
    if kind_enum not in (RegressionKind.NONE, RegressionKind.MANUAL):
        manual = st.toggle(
            "Toggle manual mode",
            value=s.settings.mode is ParameterMode.MANUAL,
            key=f"mode_{skey}",
        )
        mode = ParameterMode.MANUAL if manual else ParameterMode.AUTO
        if mode is not s.settings.mode:
            _notify(s.apply(state.set_mode, "set_mode", mode))

    if s.settings.mode is ParameterMode.MANUAL and s.settings.parameters:
        with s.transaction("Change parameters"):
            for name, p in s.settings.parameters.items():
                c1, c2 = st.columns(2)
                lo = c1.number_input(f"{name} min", value=float(p.min), key=f"{skey}_{name}_min")
                hi = c2.number_input(f"{name} max", value=float(p.max), key=f"{skey}_{name}_max")
                if hi <= lo:
                    hi = lo + 1.0
                val = st.slider(
                    name, min_value=float(lo), max_value=float(hi),
                    value=float(min(max(p.value, lo), hi)),
                    key=f"{skey}_{name}_val",
                )
                if (val, lo, hi) != (p.value, p.min, p.max):
                    s.apply(
                        state.edit_parameter, "edit_parameter", name,
                        value=val, minimum=lo, maximum=hi,
                    )

    if kind_enum is RegressionKind.MANUAL:
        editing = st.session_state["editing_id"] == s.id
        if st.button("Stop Editing Points" if editing else "Edit Points"):
            st.session_state["editing_id"] = None if editing else s.id
            st.rerun()
        if editing:
            c1, c2 = st.columns(2)
            px_ = c1.number_input("x", value=0.0, key=f"cp_x_{s.id}")
            py_ = c2.number_input("y", value=0.0, key=f"cp_y_{s.id}")
            if st.button("Add point"):
                s.apply(state.add_control_point, "add_point", (px_, py_))
            arena = s.settings.manual_points
            for pid, p in arena.entries:
                c1, c2, c3 = st.columns([2, 2, 1])
                nx = c1.number_input("x", value=p.x, key=f"cp_{s.id}_{pid}_x")
                ny = c2.number_input("y", value=p.y, key=f"cp_{s.id}_{pid}_y")
                if (nx, ny) != (p.x, p.y):
                    s.apply(state.move_control_point, "move_point", pid, (nx, ny))
                if c3.button("✕", key=f"cp_{s.id}_{pid}_rm"):
                    s.apply(state.remove_control_point, "remove_point", pid)
                    st.rerun()

# --- Sidebar: freehand ---
with st.sidebar.expander("Draw", expanded=False):
    stroke_text = st.text_area("Stroke points (x,y per line)", key="stroke_text")
    stroke = None
    if stroke_text.strip():
        try:
            stroke = _parse_points(stroke_text)
        except (ValueError, pd.errors.ParserError) as e:
            st.warning(f"Could not read stroke: {e}")
    if stroke is not None and st.button("Save drawn curve"):
        drawn = SeriesModel.from_stroke(stroke)
        if drawn is not None:
            drawn.name = f"Drawn Curve {len(series_list) + 1}"
            series_list.append(drawn)
            st.rerun()

# --- Main area ---
st.title("CurveLab")
for note in st.session_state["notices"]:
    (st.success if note.level == "success" else st.error)(note.message)
st.session_state["notices"] = []

fig = make_chart(
    series_list,
    editing_id=st.session_state["editing_id"],
    stroke=None if stroke is None else stroke.to_numpy().tolist(),
)
st.plotly_chart(fig, use_container_width=True)

with st.expander("Operation log", expanded=False):
    st.json(s.operations)
