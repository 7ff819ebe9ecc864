from __future__ import annotations

import plotly.graph_objects as go

from axiomgraph.evaluator import Evaluator
from axiomgraph.regions import sample_region
from axiomgraph.sampling import sample_curve
from axiomgraph.traces import curve_trace, marker_trace, region_traces, workspace_figure, workspace_traces
from axiomgraph.view import View
from axiomgraph.workspace import Workspace


def test_curve_trace_has_gap_at_break() -> None:
    samples = sample_curve(Evaluator().function("1/x"), -1.0, 1.0, 5)
    trace = curve_trace(samples, "1/x")
    assert isinstance(trace, go.Scatter)
    assert trace.mode == "lines"
    assert trace.connectgaps is False
    assert list(trace.x).count(None) == 1
    assert len(trace.x) == 5


def test_marker_trace() -> None:
    trace = marker_trace([(1.0, 2.0), (3.0, 4.0)], "p")
    assert trace.mode == "markers"
    assert list(trace.x) == [1.0, 3.0]
    assert list(trace.y) == [2.0, 4.0]


def test_region_traces() -> None:
    evaluator = Evaluator()
    region = sample_region(evaluator.function("x"), evaluator.function("0"), "<", -1.0, 1.0)
    boundary, fill = region_traces(region, "(x < 0)")
    assert boundary.name == "(x < 0)"
    assert len(fill.x) == 3 * len(region.spans)
    assert fill.showlegend is False


def test_workspace_figure() -> None:
    ws = Workspace(View((-5, 5), (-3, 3), pixel_width=300))
    ws.add("x^2")
    ws.add("(x^2=4)")
    ws.add("(x>0)")
    ws.add("a=[0:1]")
    traces = workspace_traces(ws)
    assert len(traces) == 4
    assert [t.name for t in traces[:2]] == ["x^2", "(x^2 = 4)"]
    fig = workspace_figure(ws)
    assert tuple(fig.layout.xaxis.range) == (-5.0, 5.0)
    assert tuple(fig.layout.yaxis.range) == (-3.0, 3.0)
    assert len(fig.data) == 4
