from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import plotly.graph_objects as go

from . import config
from .expressions import compile_expression


@dataclass(frozen=True)
class GraphSnapshot:
    curve_lower: str
    curve_upper: str
    x_min: float
    x_max: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "curve_lower": self.curve_lower,
            "curve_upper": self.curve_upper,
            "x_min": self.x_min,
            "x_max": self.x_max,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["GraphSnapshot"]:
        if not isinstance(data, dict):
            return None
        try:
            return cls(
                curve_lower=str(data["curve_lower"]),
                curve_upper=str(data["curve_upper"]),
                x_min=float(data["x_min"]),
                x_max=float(data["x_max"]),
            )
        except (KeyError, TypeError, ValueError):
            return None


def generate_x_samples(x_min: float, x_max: float, step: float) -> List[float]:
    if step <= 0:
        return [x_min]
    count = int(math.floor((x_max - x_min) / step + 1e-9)) + 1
    return [x_min + i * step for i in range(max(count, 0))]


def display_x_grid(snapshot: GraphSnapshot) -> List[float]:
    return generate_x_samples(
        snapshot.x_min,
        snapshot.x_max + config.DISPLAY_X_PADDING,
        config.DISPLAY_STEP,
    )


def sample_curve(expression: str, xs: Sequence[float]) -> List[Optional[float]]:
    curve = compile_expression(expression, config.CURVE_VARIABLES)
    return [curve(x) for x in xs]


def boundary_traces(snapshot: GraphSnapshot) -> List[go.Scatter]:
    xs = display_x_grid(snapshot)
    return [
        go.Scatter(
            x=xs,
            y=sample_curve(snapshot.curve_lower, xs),
            mode="lines",
            name=config.LOWER_SERIES_NAME,
            line=dict(config.LOWER_LINE_STYLE),
            hovertemplate="x=%{x:.2f}<br>yMin=%{y:.4f}<extra></extra>",
        ),
        go.Scatter(
            x=xs,
            y=sample_curve(snapshot.curve_upper, xs),
            mode="lines",
            name=config.UPPER_SERIES_NAME,
            line=dict(config.UPPER_LINE_STYLE),
            hovertemplate="x=%{x:.2f}<br>yMax=%{y:.4f}<extra></extra>",
        ),
    ]


def build_figure(snapshot: Optional[GraphSnapshot], *, uirevision: str = "bounds") -> go.Figure:
    fig = go.Figure(data=boundary_traces(snapshot) if snapshot is not None else [])
    fig.update_layout(
        height=560,
        margin=dict(l=36, r=16, t=48, b=32),
        title=dict(text=config.CHART_TITLE, font=dict(color=config.FIGURE_COLORS["title"], size=16)),
        xaxis=dict(title="x", **config.AXIS_STYLE),
        yaxis=dict(title="y", **config.AXIS_STYLE),
        legend=dict(orientation="h", y=1.02, x=0, font=dict(color=config.FIGURE_COLORS["text"], size=14)),
        showlegend=snapshot is not None,
        uirevision=uirevision,
    )
    return fig
