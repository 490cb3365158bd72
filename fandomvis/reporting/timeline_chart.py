"""Plotly line chart of monthly work counts per ship."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import plotly.graph_objects as go

from fandomvis.analysis.ship_timeline import TagTimeline
from fandomvis.ships.cooccurrence import golden_color


def timeline_figure(
    timelines: Sequence[TagTimeline],
    *,
    title: str = "Monthly Count of Ship Works",
) -> go.Figure:
    fig = go.Figure()
    for index, timeline in enumerate(timelines):
        fig.add_trace(
            go.Scatter(
                x=[month for month, _ in timeline.points],
                y=[count for _, count in timeline.points],
                mode="lines",
                name=timeline.tag,
                line={"color": golden_color(index)},
            )
        )
    fig.update_layout(
        title=title,
        xaxis_title="Month",
        yaxis_title="Work Count",
        width=1024,
        height=768,
        template="plotly_white",
        legend={"x": 0.01, "y": 0.5, "bordercolor": "black", "borderwidth": 1},
    )
    return fig


def write_timeline_html(timelines: Sequence[TagTimeline], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    timeline_figure(timelines).write_html(str(output_path), include_plotlyjs="cdn")
    return output_path
