from __future__ import annotations

import math
from typing import Any, Dict

import altair as alt
import pandas as pd

from core.controller import RenderRequest
from core.metrics_summary import tooltip_content
from core.scales import project_points

alt.data_transformers.disable_max_rows()

HIGHLIGHT_STROKE = "gold"
TEXT_COLOR = "white"

CHART_COLUMNS = [
    "country", "region", "log_gdp_per_capita", "life_expectancy",
    "total_population", "aggregate_score",
]


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def empty_chart(request: RenderRequest) -> alt.Chart:
    area = request.area
    message = request.message or f"No data available for {request.selection.region} in {request.selection.year}"
    return (
        alt.Chart(pd.DataFrame({"message": [message]}))
        .mark_text(fontSize=20, color=TEXT_COLOR, align="center", baseline="middle")
        .encode(text="message:N")
        .properties(width=area.width, height=area.height)
    )


def _chart_frame(request: RenderRequest) -> pd.DataFrame:
    projected = project_points(request.points, request.scales, request.transform)
    frame = projected[CHART_COLUMNS + ["fill", "draw_index"]].copy()
    k = request.transform.scale
    frame["size"] = [math.pi * (r * k) ** 2 for r in projected["r"]]
    tips = [tooltip_content(row) for row in projected[CHART_COLUMNS].to_dict(orient="records")]
    for key in ("gdp", "life_expectancy", "population", "aggregate_score"):
        frame[f"tip_{key}"] = [t[key] for t in tips]
    return frame.reset_index(drop=True)


def _axis_domain(domain) -> list:
    lo, hi = sorted(domain)
    if lo == hi:
        # single value: centre it on a unit-wide axis
        return [lo - 0.5, hi + 0.5]
    return [lo, hi]


def scatter_chart(request: RenderRequest) -> alt.Chart:
    """Bubble chart for a full or reprojected render request.

    Axis domains are the base scales read back through the current pan/zoom
    transform; bubbles are layered in render order.
    """
    area = request.area
    scales = request.scales
    x_scale = request.transform.rescale_x(scales.x)
    y_scale = request.transform.rescale_y(scales.y)
    x_domain = _axis_domain(x_scale.domain)
    y_domain = _axis_domain(y_scale.domain)

    mark_props: Dict[str, Any] = {"opacity": 0.7, "clip": True}
    if request.highlight:
        mark_props.update(stroke=HIGHLIGHT_STROKE, strokeWidth=2)

    return (
        alt.Chart(_chart_frame(request))
        .mark_circle(**mark_props)
        .encode(
            x=alt.X(
                "log_gdp_per_capita:Q",
                title="GDP per capita (log)",
                scale=alt.Scale(domain=x_domain, zero=False, nice=False),
                axis=alt.Axis(grid=False),
            ),
            y=alt.Y(
                "life_expectancy:Q",
                title="Life expectancy (years)",
                scale=alt.Scale(domain=y_domain, zero=False, nice=False),
                axis=alt.Axis(gridOpacity=0.15),
            ),
            size=alt.Size("size:Q", scale=None, legend=None),
            color=alt.Color("fill:N", scale=None, legend=None),
            order=alt.Order("draw_index:Q"),
            tooltip=[
                alt.Tooltip("country:N", title="Country"),
                alt.Tooltip("tip_gdp:N", title="GDP per capita (log)"),
                alt.Tooltip("tip_life_expectancy:N", title="Life expectancy"),
                alt.Tooltip("tip_population:N", title="Total population"),
                alt.Tooltip("tip_aggregate_score:N", title="Aggregate score"),
            ],
        )
        .properties(width=area.right - area.left, height=area.bottom - area.top)
    )


def build_chart(request: RenderRequest) -> alt.Chart:
    if request.kind == "empty" or request.scales is None or request.points.empty:
        return empty_chart(request)
    return scatter_chart(request)
