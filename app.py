import logging
from contextlib import contextmanager
from typing import Dict, Optional

import altair as alt
import streamlit as st
from pydantic import ValidationError

from core.charts import build_chart
from core.controller import RenderRequest, ViewController
from core.data import DataLoadError, load_dashboard_data
from core.filters import ALL_REGIONS, normalize_selection
from core.logging_config import setup_logging
from core.metrics_summary import format_summary
from core.schemas import parse_control

alt.data_transformers.disable_max_rows()
setup_logging()
logger = logging.getLogger("app")

PAN_STEP_PX = 60.0


BASE_CSS = """
<style>
.card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
       box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
.card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
dl.stats {display: grid;grid-template-columns: auto auto;gap: 4px 12px;margin: 0;}
dl.stats dt {color: #6b7280;}
dl.stats dd {margin: 0;font-weight: 600;color: #111827;}
</style>
"""


# ---------- UI / layout helpers ----------
def inject_base_styles():
    # must run on every script rerun
    st.markdown(BASE_CSS, unsafe_allow_html=True)


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_stats(summary: Dict[str, object]):
    formatted = format_summary(summary)
    heading = formatted.pop("heading")
    with card(heading):
        if "message" in formatted:
            st.info(formatted["message"])
            return
        rows = "".join(f"<dt>{label}</dt><dd>{value}</dd>" for label, value in formatted.items())
        st.markdown(f"<dl class='stats'>{rows}</dl>", unsafe_allow_html=True)


def render_tooltip(tooltip: Optional[Dict[str, str]]):
    if not tooltip:
        return
    with card(tooltip["country"] or "Unknown country"):
        st.markdown(
            f"GDP per capita (log): **{tooltip['gdp']}**  \n"
            f"Life expectancy: **{tooltip['life_expectancy']}**  \n"
            f"Total population: **{tooltip['population']}**  \n"
            f"Aggregate score: **{tooltip['aggregate_score']}**"
        )


# ---------- UI setup ----------
st.set_page_config(page_title="Global Health Explorer", layout="wide")
inject_base_styles()
st.title("Wealth and Health of Nations")
st.caption("GDP per capita (log) vs. life expectancy. Bubble area is population, colour is the aggregate health score.")

try:
    data_ctx = load_dashboard_data()
except DataLoadError as exc:
    logger.exception("Dataset load failed")
    st.error(f"Could not load the health dataset: {exc}")
    st.stop()

dataset = data_ctx["dataset"]
years = data_ctx["years"]
regions = data_ctx["regions"]
if not years:
    st.error("The dataset has no rows with a valid 4-digit Year.")
    st.stop()

if st.session_state.get("controller_path") != data_ctx["path"]:
    selection = normalize_selection({}, available_years=years)
    st.session_state["controller"] = ViewController(dataset, selection)
    st.session_state["controller_path"] = data_ctx["path"]
    st.session_state["year_slider"] = selection.year
    st.session_state["region_selector"] = selection.region
    st.session_state["tooltip"] = None

controller: ViewController = st.session_state["controller"]


def send(raw: dict) -> Optional[RenderRequest]:
    try:
        event = parse_control(raw)
    except ValidationError as exc:
        logger.warning("Ignoring invalid control input %s: %s", raw, exc)
        return None
    request = controller.dispatch(event)
    if request.kind == "tooltip":
        st.session_state["tooltip"] = request.tooltip
    elif request.kind in {"full", "empty"}:
        st.session_state["tooltip"] = None
    return request


def on_year_change():
    send({"type": "year", "year": st.session_state["year_slider"]})


def on_region_change():
    send({"type": "region", "region": st.session_state["region_selector"]})


def on_clear_region():
    st.session_state["region_selector"] = ALL_REGIONS
    send({"type": "clear_region"})


def on_pan(dx: float, dy: float):
    send({"type": "gesture", "phase": "start"})
    send({"type": "gesture", "phase": "move", "dx": dx, "dy": dy})
    send({"type": "gesture", "phase": "end"})


def on_inspect():
    label = st.session_state.get("inspect_country")
    countries = list(controller.points["country"]) if not controller.points.empty else []
    if label and label in countries:
        send({"type": "pointer", "action": "enter", "index": countries.index(label)})
    else:
        send({"type": "pointer", "action": "leave"})


# ----- Sidebar: filters -----
with st.sidebar:
    st.markdown("### Filters")
    if len(years) > 1:
        st.slider(
            "Year",
            min_value=years[0],
            max_value=years[-1],
            step=1,
            key="year_slider",
            on_change=on_year_change,
        )
    else:
        st.caption(f"Year: {years[0]}")
    st.selectbox(
        "Region",
        options=[ALL_REGIONS] + regions,
        format_func=lambda r: "All regions" if r == ALL_REGIONS else r,
        key="region_selector",
        on_change=on_region_change,
    )
    st.button("Clear filter", on_click=on_clear_region)

    st.markdown("---")
    st.markdown("### Zoom")
    zoom_cols = st.columns(3)
    zoom_cols[0].button("＋", on_click=send, args=({"type": "zoom", "direction": "in"},), help="Zoom in")
    zoom_cols[1].button("－", on_click=send, args=({"type": "zoom", "direction": "out"},), help="Zoom out")
    zoom_cols[2].button("Reset", on_click=send, args=({"type": "zoom", "direction": "reset"},))
    pan_cols = st.columns(4)
    pan_cols[0].button("←", on_click=on_pan, args=(PAN_STEP_PX, 0.0))
    pan_cols[1].button("→", on_click=on_pan, args=(-PAN_STEP_PX, 0.0))
    pan_cols[2].button("↑", on_click=on_pan, args=(0.0, PAN_STEP_PX))
    pan_cols[3].button("↓", on_click=on_pan, args=(0.0, -PAN_STEP_PX))

request = controller.last_request

chart_col, side_col = st.columns([3, 1])
with chart_col:
    st.altair_chart(build_chart(request), use_container_width=True)
with side_col:
    render_stats(controller.summary)
    if not controller.points.empty:
        st.selectbox(
            "Inspect country",
            options=[""] + list(controller.points["country"]),
            key="inspect_country",
            on_change=on_inspect,
        )
    render_tooltip(st.session_state.get("tooltip"))
