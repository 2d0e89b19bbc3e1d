from typing import Iterable, Optional

import plotly.graph_objects as go

from .core.data_model import SeriesModel
from .utils import frame_from_points

DASH = {"solid": "solid", "dashed": "dash", "dotted": "dot"}


def make_chart(
    series: Iterable[SeriesModel],
    editing_id: Optional[str] = None,
    stroke=None,
    title: Optional[str] = None,
):
    """Scatter each series with its rendered regression curve.

    ``editing_id`` overlays that series' control points; ``stroke`` overlays a
    freehand polyline still being drawn.
    """
    fig = go.Figure()
    for s in series:
        fig.add_trace(go.Scatter(
            x=s.df["x"], y=s.df["y"], mode="markers", name=s.name,
        ))
        if s.regression_points:
            curve = frame_from_points(s.regression_points)
            fig.add_trace(go.Scatter(
                x=curve["x"],
                y=curve["y"],
                mode="lines",
                name=f"{s.name} (fit)",
                line=dict(
                    color=s.settings.color,
                    width=s.settings.width,
                    dash=DASH.get(s.settings.line_style, "solid"),
                ),
            ))
        if editing_id == s.id and s.settings.manual_points:
            ctrl = frame_from_points(s.settings.manual_points.points)
            fig.add_trace(go.Scatter(
                x=ctrl["x"],
                y=ctrl["y"],
                mode="markers",
                name=f"{s.name} (control points)",
                marker=dict(size=10, symbol="circle-open"),
            ))
    if stroke:
        drawn = frame_from_points(stroke)
        fig.add_trace(go.Scatter(
            x=drawn["x"], y=drawn["y"], mode="lines", name="Drawing",
            line=dict(dash="dot"),
        ))
    if title:
        fig.update_layout(title=title)
    return fig
