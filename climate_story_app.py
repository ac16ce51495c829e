#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Climate Story Viewer
====================
climate_story_app.py

Architecture:
- Temperature and precipitation tables loaded ONCE (cached per process)
- Selection state lives in session_state and only changes through dispatch()
- Every widget callback builds an intent event; dispatch() reduces it into the
  next state and commits it before the script reruns
- The page then renders everything from on_selection_changed() in one pass

Run with:
    streamlit run climate_story_app.py
"""

import logging
import os
import time
from dataclasses import replace

import streamlit as st
from streamlit_folium import st_folium

from climate_story_config import (
    TEMP_FILE, PRECIP_FILE, LOG_LEVEL, BOUNDARIES_URL, BOUNDARIES_TIMEOUT,
)
from climate_story_constants import (
    EMOJI, SCENARIOS, DEFAULT_REGION, AUTOPLAY_INTERVAL_SECONDS, AUTOPLAY_STEP_YEARS,
    Settings, get_scenario_label,
)
from climate_story_charts import build_chart_scene, play_reveal, render_chart
from climate_story_data_operations import load_datasets, summarise_series
from climate_story_errors import LoadFailure
from climate_story_helpers import configure_logging
from climate_story_maps import (
    REGION_CATALOG, SELECTION_NAME, build_region_markers, create_dot_map, create_geo_map,
    fetch_boundaries, get_map_height, map_widget_key, region_from_folium, region_from_selection,
    region_to_dispatch,
)
from climate_story_narrative import NARRATIVE_STEPS, NarrativeState, new_clock, step_entered, tick_due
from climate_story_state import (
    NarrativeStepEntered, RegionSelected, ScenarioToggled, YearAdvanced,
    default_selection, on_selection_changed, reduce,
)
from climate_story_tab_impact import render_impact_panel
from climate_story_ui_components import scenario_pills, sync_pills

logger = logging.getLogger(__name__)

PILL_NAMESPACE = "scen"


# ============================================================================
# DATA LOADING
# ============================================================================

@st.cache_resource(show_spinner=False)
def get_dataset(temp_path: str, precip_path: str, mtimes: tuple):
    """Load both tables once per process; file changes invalidate via mtimes."""
    return load_datasets(temp_path, precip_path)


@st.cache_data(show_spinner=False)
def get_boundaries(url: str):
    return fetch_boundaries(url, timeout=BOUNDARIES_TIMEOUT)


def _mtime(path: str) -> float:
    return os.path.getmtime(path) if os.path.exists(path) else 0.0


# ============================================================================
# DISPATCH
# ============================================================================

def dispatch(event):
    """Reduce one intent into the committed selection state."""
    old = st.session_state["selection"]
    new = reduce(old, event)
    st.session_state["selection"] = new
    if new != old:
        st.session_state["animate_pending"] = True
    logger.debug("%s -> %s", event, new)


def reset_map_pick():
    """Swap in a fresh map widget so a previously picked region can be clicked again."""
    st.session_state["map_generation"] = st.session_state.get("map_generation", 0) + 1
    st.session_state["map_last_pick"] = None


def on_region_select():
    reset_map_pick()
    dispatch(RegionSelected(st.session_state["region_select"]))


def on_pill_toggle(scenario: str):
    dispatch(ScenarioToggled(scenario))


def on_step_click(index: int, narrow: bool):
    st.session_state["narrative"] = step_entered(NARRATIVE_STEPS, index)
    dispatch(NarrativeStepEntered(NARRATIVE_STEPS[index].scenario, narrow=narrow))


def on_year_slider():
    clock = st.session_state["clock"].manual_set(st.session_state["year_slider"])
    st.session_state["clock"] = clock
    dispatch(YearAdvanced(clock.year))


def on_play_pause():
    clock = st.session_state["clock"]
    if clock.running:
        st.session_state["clock"] = clock.stop()
    else:
        st.session_state["clock"] = clock.start()
        st.session_state["clock_last_tick"] = time.monotonic()
        dispatch(YearAdvanced(clock.year))


def init_session(dataset):
    """Defaults for a fresh session (a reload starts over)."""
    if "selection" not in st.session_state:
        scenarios = [s for s in dataset.scenarios() if s in SCENARIOS] or dataset.scenarios()
        regions = dataset.regions()
        region = DEFAULT_REGION if DEFAULT_REGION in regions else regions[0]
        st.session_state["selection"] = default_selection(scenarios, region)
        st.session_state["narrative"] = NarrativeState()
        y0, y1 = dataset.year_range()
        st.session_state["clock"] = new_clock(y0, y1, AUTOPLAY_STEP_YEARS)
        st.session_state["clock_last_tick"] = 0.0
        st.session_state["map_last_pick"] = None
        st.session_state["map_generation"] = 0
        st.session_state["animate_pending"] = True


# ============================================================================
# SIDEBAR
# ============================================================================

def render_sidebar(settings: Settings) -> Settings:
    st.sidebar.title(f"{EMOJI['gear']} Options")

    with st.sidebar.expander("Display Options", expanded=False):
        animate = st.toggle("Animate lines", value=settings.animate, key="opt_animate",
                            help="Draw each line in from start to end after a change")
        decimate = st.toggle("Thin markers", value=settings.decimate_markers, key="opt_decimate",
                             help="One point marker per 5 years")
        window = st.toggle("Recent period shading", value=settings.show_recent_window, key="opt_window",
                           help=f"Shade from {settings.recent_window_start} to the end of the record")
        narrow = st.toggle("Story narrows charts", value=settings.narrow_on_step, key="opt_narrow",
                           help="Show only the story step's scenario")
        map_style = st.radio("Map", ["dots", "geo"],
                             index=0 if settings.map_style != "geo" else 1,
                             horizontal=True, key="opt_map_style")

    return replace(settings, animate=animate, decimate_markers=decimate,
                   show_recent_window=window, narrow_on_step=narrow, map_style=map_style)


# ============================================================================
# RENDERING
# ============================================================================

def render_charts(result, settings: Settings, allow_animation: bool = True):
    col1, col2 = st.columns(2)
    surfaces = []
    with col1:
        st.markdown(f"**{EMOJI['thermometer']} {settings.temperature.title}**")
        surfaces.append((st.empty(), result.temperature))
    with col2:
        st.markdown(f"**{EMOJI['wave']} {settings.precipitation.title}**")
        surfaces.append((st.empty(), result.precipitation))

    animate = settings.animate and allow_animation and st.session_state.get("animate_pending")
    for surface, config in surfaces:
        if animate:
            play_reveal(surface, build_chart_scene(config))
        else:
            render_chart(surface, config)


def render_region_map(dataset, state, settings: Settings):
    markers = build_region_markers(REGION_CATALOG, dataset.regions(), state.region)
    key = map_widget_key(settings.map_style, st.session_state.get("map_generation", 0))

    if settings.map_style == "geo":
        result = st_folium(
            create_geo_map(markers, get_boundaries(BOUNDARIES_URL)),
            height=get_map_height(),
            use_container_width=True,
            key=key,
            returned_objects=["last_object_clicked_tooltip"],
        )
        picked = region_from_folium(result)
    else:
        event = st.altair_chart(
            create_dot_map(markers),
            width="stretch",
            on_select="rerun",
            selection_mode=SELECTION_NAME,
            key=key,
        )
        picked = region_from_selection(event)

    region = region_to_dispatch(picked, st.session_state.get("map_last_pick"), state.region)
    if picked:
        st.session_state["map_last_pick"] = picked
    if region:
        dispatch(RegionSelected(region))
        st.rerun()


def autoplay_tick(now: float) -> bool:
    """Advance a running clock once per interval; True when the selection moved."""
    clock = st.session_state["clock"]
    if not tick_due(clock, st.session_state.get("clock_last_tick", 0.0), now):
        return False
    clock = clock.tick()
    st.session_state["clock"] = clock
    st.session_state["clock_last_tick"] = now
    dispatch(YearAdvanced(clock.year))
    return True


def render_autoplay():
    clock = st.session_state["clock"]

    # Widgets stay outside the timer fragment; their callbacks must rerun the full page
    st.session_state["year_slider"] = clock.year
    col1, col2 = st.columns([4, 1])
    with col1:
        st.slider(
            f"{EMOJI['calendar']} Show years up to",
            min_value=clock.min_year,
            max_value=clock.max_year,
            step=1,
            key="year_slider",
            on_change=on_year_slider,
        )
    with col2:
        label = f"{EMOJI['pause']} Pause" if clock.running else f"{EMOJI['play']} Play"
        st.button(label, key="play_pause", on_click=on_play_pause, width="stretch")

    @st.fragment(run_every=AUTOPLAY_INTERVAL_SECONDS)
    def autoplay_timer():
        if autoplay_tick(time.monotonic()):
            st.rerun(scope="app")

    autoplay_timer()


def render_explore_tab(dataset, result, settings: Settings):
    state = result.state
    regions = dataset.regions()

    st.session_state["region_select"] = state.region
    col1, col2 = st.columns([2, 3])
    with col1:
        st.selectbox(f"{EMOJI['pin']} Region", regions, key="region_select", on_change=on_region_select)
    with col2:
        st.markdown(f"### {state.region}")

    sync_pills(st.session_state, PILL_NAMESPACE, dataset.scenarios(), state)
    scenario_pills(st, dataset.scenarios(), on_pill_toggle, columns=4, namespace=PILL_NAMESPACE)

    if settings.autoplay:
        render_autoplay()

    render_charts(result, settings)

    with st.expander(f"{EMOJI['map']} Region map", expanded=True):
        render_region_map(dataset, state, settings)


def render_story_tab(result, settings: Settings):
    narrative = st.session_state["narrative"]

    col_story, col_chart = st.columns([2, 3])
    with col_story:
        st.markdown(f"#### {EMOJI['scroll']} Four futures")
        for index, step in enumerate(NARRATIVE_STEPS):
            box = st.container(border=True)
            if narrative.is_active(index):
                box.markdown(f"**{EMOJI['pin']} {step.title}**  \n*{get_scenario_label(step.scenario)}*")
            else:
                box.markdown(f"**{step.title}**  \n*{get_scenario_label(step.scenario)}*")
            box.caption(step.body)
            box.button("Show this scenario", key=f"story_{step.step_id}",
                       on_click=on_step_click, args=(index, settings.narrow_on_step),
                       type="primary" if narrative.is_active(index) else "secondary")

    with col_chart:
        render_charts(result, settings, allow_animation=False)
        render_impact_panel(st, result.summary)


def render_data_tab(result, settings: Settings):
    for config, metric in ((result.temperature, settings.temperature),
                           (result.precipitation, settings.precipitation)):
        st.markdown(f"**{metric.title}**")
        summary = summarise_series(config.series, metric.value_column)
        if summary.empty:
            st.info("No data matches the current selection.")
            continue
        summary.index = [get_scenario_label(s) for s in summary.index]
        st.dataframe(summary, width="stretch")

        csv = config.series.to_csv(index=False)
        st.download_button(
            label=f"{EMOJI['page']} Download as CSV",
            data=csv,
            file_name=f"{metric.key}_{result.state.region.replace(' ', '_')}.csv",
            mime="text/csv",
            key=f"download_{metric.key}",
        )


# ============================================================================
# MAIN APPLICATION
# ============================================================================

def run_story_viewer():
    """Main application entry point."""
    configure_logging(LOG_LEVEL)
    st.set_page_config(page_title="Climate Scenario Story", layout="wide")

    try:
        dataset = get_dataset(TEMP_FILE, PRECIP_FILE, (_mtime(TEMP_FILE), _mtime(PRECIP_FILE)))
    except LoadFailure as e:
        logger.error("Dataset load failed: %s", e)
        st.error(f"{EMOJI['warning']} Could not load climate data.\n\n{e}")
        st.stop()

    init_session(dataset)
    settings = render_sidebar(Settings())

    result = on_selection_changed(st.session_state["selection"], dataset, settings)

    st.title(f"{EMOJI['globe']} Climate Scenario Story")

    tab1, tab2, tab3, tab4 = st.tabs([
        f"{EMOJI['chart']} Explore",
        f"{EMOJI['book']} Story",
        f"{EMOJI['graph']} Impact",
        f"{EMOJI['page']} Data",
    ])

    with tab1:
        render_explore_tab(dataset, result, settings)
    with tab2:
        render_story_tab(result, settings)
    with tab3:
        render_impact_panel(st, result.summary)
    with tab4:
        render_data_tab(result, settings)

    st.session_state["animate_pending"] = False


if __name__ == "__main__":
    run_story_viewer()
