#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Climate Story Constants
=======================

All display constants for the Climate Story viewer: scenario catalogue,
colours, fixed axis ranges and impact normalisation.

The fixed ranges, spans and thresholds are provisional.  Adjust them for
your data rather than deriving them from it.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from climate_story_config import (
    ANIMATE_LINES, AUTOPLAY_ENABLED, DECIMATE_MARKERS, SHOW_RECENT_WINDOW,
    NARROW_ON_STEP, MAP_STYLE, TEMP_VALUE_COLUMN, PRECIP_VALUE_COLUMN,
)

# ============================================================================
# EMOJI CONSTANTS (Unicode escapes - won't corrupt during file edits)
# ============================================================================

EMOJI = {
    "thermometer": "\U0001F321️",
    "chart": "\U0001F4CA",
    "globe": "\U0001F30D",
    "book": "\U0001F4D6",
    "pin": "\U0001F4CD",
    "calendar": "\U0001F4C5",
    "map": "\U0001F5FA️",
    "warning": "⚠️",
    "page": "\U0001F4C4",
    "graph": "\U0001F4C8",
    "wave": "\U0001F30A",
    "scroll": "\U0001F4DC",
    "gear": "⚙️",
    "play": "▶️",
    "pause": "⏸️",
}

# ============================================================================
# SCENARIOS
# ============================================================================

# Canonical order: pills, legend fallbacks and active-set ordering follow it
SCENARIOS = ["ssp126", "ssp245", "ssp370", "ssp585"]

SCENARIO_LABELS = {
    "ssp126": "SSP1-2.6 (low emissions)",
    "ssp245": "SSP2-4.5 (intermediate)",
    "ssp370": "SSP3-7.0 (high, uneven action)",
    "ssp585": "SSP5-8.5 (fossil-fuel intensive)",
}

# Fixed per-scenario colours (category10 order)
SCENARIO_COLOURS = {
    "ssp126": "#1f77b4",
    "ssp245": "#ff7f0e",
    "ssp370": "#2ca02c",
    "ssp585": "#d62728",
}

FALLBACK_PALETTE = [
    "#9467bd", "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
]

DEFAULT_REGION = "Global"

# ============================================================================
# CHART GEOMETRY
# ============================================================================

CHART_WIDTH = 360
CHART_HEIGHT = 260
CHART_MARGIN = {"top": 35, "right": 18, "bottom": 40, "left": 55}

PLACEHOLDER_TEXT = "No data for this selection."

# Recent window shading starts here (clamped to the data)
RECENT_WINDOW_START_YEAR = 2000

# One marker per N years when decimation is on
MARKER_STEP_YEARS = 5

ANIMATION_FRAMES = 12
ANIMATION_FRAME_SECONDS = 0.04

# ============================================================================
# IMPACT PANEL
# ============================================================================

TEMP_FULL_SCALE = 6.0      # deg C ~ full bar
PRECIP_FULL_SCALE = 40.0   # +/- % ~ full bar
WETTER_DRIER_THRESHOLD = 3.0

NO_DATA_TEXT = "No data available for this combination yet."
DASH = "–"

# ============================================================================
# NARRATIVE AND AUTOPLAY
# ============================================================================

AUTOPLAY_STEP_YEARS = 5
AUTOPLAY_INTERVAL_SECONDS = 1.5


# ============================================================================
# METRICS
# ============================================================================

@dataclass(frozen=True)
class Metric:
    """How one of the two measured variables is read, labelled and scaled."""
    key: str
    value_column: str
    title: str
    axis_label: str
    unit: str
    y_domain: Tuple[float, float]
    reference_span: float
    value_format: str = ".2f"


TEMPERATURE = Metric(
    key="temperature",
    value_column=TEMP_VALUE_COLUMN,
    title="Temperature",
    axis_label="Temperature (°C)",
    unit="°C",
    y_domain=(4.0, 30.0),
    reference_span=TEMP_FULL_SCALE,
)

PRECIPITATION = Metric(
    key="precipitation",
    value_column=PRECIP_VALUE_COLUMN,
    title="Precipitation",
    axis_label="Precipitation (mm/day)",
    unit="mm/day",
    y_domain=(1.6, 4.0),
    reference_span=PRECIP_FULL_SCALE,
)


# ============================================================================
# SETTINGS
# ============================================================================

@dataclass(frozen=True)
class Settings:
    """Render pipeline options, defaulting to the module configuration."""
    temperature: Metric = TEMPERATURE
    precipitation: Metric = PRECIPITATION
    animate: bool = ANIMATE_LINES
    autoplay: bool = AUTOPLAY_ENABLED
    decimate_markers: bool = DECIMATE_MARKERS
    show_recent_window: bool = SHOW_RECENT_WINDOW
    recent_window_start: Optional[int] = RECENT_WINDOW_START_YEAR
    narrow_on_step: bool = NARROW_ON_STEP
    map_style: str = MAP_STYLE
    change_threshold: float = WETTER_DRIER_THRESHOLD
    scenario_colours: Dict[str, str] = field(default_factory=lambda: dict(SCENARIO_COLOURS))


def get_scenario_label(scenario: str) -> str:
    """Readable label for a scenario key, falling back to the key itself."""
    return SCENARIO_LABELS.get(scenario, scenario)
