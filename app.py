import streamlit as st
from loguru import logger

from covid_chart.config import DAY_OPTIONS, load_config
from covid_chart.data import DataUnavailableError, load_dataset
from covid_chart.figure import build_figure
from covid_chart.layout import layout_for
from covid_chart.logging_setup import setup_logging
from covid_chart.palette import palette_for
from covid_chart.scene import build_scene, highlight_bar
from covid_chart.state import (
    Phase,
    begin_load,
    fail_load,
    finish_load,
    initial_state,
    needs_fetch,
    resize,
    retry,
    select_days,
    toggle_theme,
)

st.set_page_config(page_title="COVID-19 Daily New Cases", layout="wide")

CONFIG = load_config()


@st.cache_resource
def init_logging() -> str:
    return setup_logging(
        app_name="covid_chart",
        log_dir=CONFIG.log_dir,
        log_level=CONFIG.log_level,
        file_level=CONFIG.file_log_level,
    )


init_logging()
LAYOUT = layout_for(CONFIG)

if "view_state" not in st.session_state:
    st.session_state.view_state = initial_state(CONFIG.default_days, LAYOUT.dimensions())
    st.session_state.dataset = None
    logger.info(f"[app] - session_started - days={CONFIG.default_days} layout={CONFIG.layout}")

st.session_state.view_state = resize(st.session_state.view_state, LAYOUT.dimensions())


def on_select_days(days):
    st.session_state.view_state = select_days(st.session_state.view_state, days)


def on_toggle_theme():
    st.session_state.view_state = toggle_theme(st.session_state.view_state)


def on_retry():
    logger.info("[app] - retry_requested")
    st.session_state.view_state = retry(st.session_state.view_state)


def selected_bar(event):
    """Index of the clicked bar from a plotly_chart selection event, if any."""
    if not event:
        return None
    for point in event.get("selection", {}).get("points", []):
        if point.get("curve_number", 0) != 0:
            continue
        index = point.get("point_index", point.get("point_number"))
        if index is not None:
            return int(index)
    return None


view = st.session_state.view_state
palette = palette_for(view.dark_mode)

st.markdown(
    f"""
    <style>
        .stApp {{ background-color: {palette.background}; color: {palette.text}; }}
        .stApp h1, .stApp h2, .stApp h3, .stApp p {{ color: {palette.text}; }}
    </style>
    """,
    unsafe_allow_html=True,
)

# Header: title and controls
title_col, controls_col = st.columns([3, 2], vertical_alignment="center")
title_col.subheader("COVID-19 Daily New Cases in the US")

button_cols = controls_col.columns(len(DAY_OPTIONS) + 1)
for col, days in zip(button_cols, DAY_OPTIONS):
    col.button(
        f"{days} Days",
        key=f"days_{days}",
        type="primary" if view.days_to_show == days else "secondary",
        on_click=on_select_days,
        args=(days,),
        use_container_width=True,
    )
button_cols[-1].button(
    "☀️" if view.dark_mode else "🌙",
    key="theme_toggle",
    help="Switch to light mode" if view.dark_mode else "Switch to dark mode",
    on_click=on_toggle_theme,
    use_container_width=True,
)

if needs_fetch(view):
    view = begin_load(view)
    st.session_state.view_state = view
    with st.spinner("Loading COVID data..."):
        try:
            dataset = load_dataset(view.days_to_show, url=CONFIG.data_url, timeout=CONFIG.timeout_s)
        except DataUnavailableError as exc:
            logger.error(f"[app] - data_unavailable - {exc}")
            dataset = None
            view = fail_load(view)
        else:
            view = finish_load(view)
    st.session_state.view_state = view
    st.session_state.dataset = dataset

if view.phase is Phase.ERRORED:
    st.error(view.error)
    st.button("Retry", key="retry", on_click=on_retry, type="primary")
    st.stop()

scene = build_scene(st.session_state.dataset, palette, view.dimensions)
if scene is None:
    st.warning("No data available for the selected range.")
    st.stop()

# a new key per successful load drops any selection made on the previous dataset
chart_key = f"chart_{view.loads}"
index = selected_bar(st.session_state.get(chart_key))
if index is not None and index < len(scene.bars):
    scene = highlight_bar(scene, index)

st.plotly_chart(
    build_figure(scene, responsive=LAYOUT.responsive),
    use_container_width=LAYOUT.responsive,
    theme=None,
    key=chart_key,
    on_select="rerun",
    selection_mode="points",
)
