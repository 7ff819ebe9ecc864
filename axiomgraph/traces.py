"""Plotly trace export for computed points.

Curves become line traces with ``None`` gaps at every break (and
``connectgaps=False``) so Plotly never joins across a discontinuity. Equation
intersections and points become marker traces. Inequality regions become a
boundary line plus a trace of vertical strokes, one per sampled x where the
inequality holds.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from .definitions import display_string
from .regions import RegionSamples
from .sampling import CurveSamples
from .workspace import Workspace

__all__ = ["curve_trace", "marker_trace", "region_traces", "workspace_traces", "workspace_figure"]

FILL_OPACITY = 0.25


def _gapped(values) -> List[Optional[float]]:
    return [None if v != v else float(v) for v in values]


def curve_trace(samples: CurveSamples, name: str, **kwargs: Any) -> go.Scatter:
    """Line trace for a sampled curve."""
    xs, ys = samples.with_gaps()
    return go.Scatter(x=_gapped(xs), y=_gapped(ys), mode="lines", name=name, connectgaps=False, **kwargs)


def marker_trace(points: Sequence[Tuple[float, float]], name: str, **kwargs: Any) -> go.Scatter:
    """Marker trace for intersection points or user points."""
    return go.Scatter(
        x=[p[0] for p in points],
        y=[p[1] for p in points],
        mode="markers",
        name=name,
        **kwargs,
    )


def region_traces(region: RegionSamples, name: str) -> Tuple[go.Scatter, go.Scatter]:
    """Boundary line and fill strokes for an inequality region."""
    boundary = curve_trace(region.boundary, name)
    xs: List[Optional[float]] = []
    ys: List[Optional[float]] = []
    for x, lower, upper in region.spans:
        xs.extend((x, x, None))
        ys.extend((lower, upper, None))
    fill = go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        name=f"{name} (region)",
        opacity=FILL_OPACITY,
        connectgaps=False,
        showlegend=False,
    )
    return boundary, fill


def workspace_traces(workspace: Workspace) -> List[go.Scatter]:
    """Traces for every drawable definition in ``workspace``, in order."""
    traces: List[go.Scatter] = []
    for key, result in workspace.all_points().items():
        name = display_string(workspace[key])
        if isinstance(result, CurveSamples):
            traces.append(curve_trace(result, name))
        elif isinstance(result, RegionSamples):
            traces.extend(region_traces(result, name))
        else:
            traces.append(marker_trace(result, name))
    return traces


def workspace_figure(workspace: Workspace) -> go.Figure:
    """Build a ``go.Figure`` with the workspace's traces and view ranges."""
    view = workspace.view
    fig = go.Figure(data=workspace_traces(workspace))
    fig.update_layout(
        xaxis=dict(range=list(view.x_range), zeroline=True, showline=True),
        yaxis=dict(range=list(view.y_range), zeroline=True, showline=True),
        width=view.pixel_width,
    )
    return fig
