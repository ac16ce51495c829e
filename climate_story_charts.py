# -*- coding: utf-8 -*-
"""
Climate Story Charts
====================

Time-series chart rendering for the temperature and precipitation panels.

Rendering happens in two steps:
- build_chart_scene() turns a filtered series into a ChartScene: domains,
  one line per scenario, markers, legend and the optional recent window.
  Nothing here touches Streamlit, so scenes can be compared directly.
- scene_to_altair() turns the scene into an Altair layer chart, and
  render_chart() writes it into a surface (an st.empty() slot), replacing
  whatever was drawn there before.

The value axis always uses the metric's fixed range so that switching
region or scenario never rescales it.
"""

import math
import time
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, Optional, Tuple

import altair as alt
import pandas as pd

from climate_story_constants import (
    CHART_WIDTH, CHART_HEIGHT, CHART_MARGIN, PLACEHOLDER_TEXT, MARKER_STEP_YEARS,
    RECENT_WINDOW_START_YEAR, SCENARIO_COLOURS, FALLBACK_PALETTE,
    ANIMATION_FRAMES, ANIMATION_FRAME_SECONDS, Metric, get_scenario_label,
)
from climate_story_data_operations import group_by_scenario
from climate_story_helpers import stable_index


def scenario_colour(scenario: str, colours: Optional[Dict[str, str]] = None) -> str:
    """Fixed colour for a scenario; unknown keys get a hash-stable fallback."""
    colours = SCENARIO_COLOURS if colours is None else colours
    if scenario in colours:
        return colours[scenario]
    return FALLBACK_PALETTE[stable_index(scenario, len(FALLBACK_PALETTE))]


# ============================================================================
# SCENE MODEL
# ============================================================================

@dataclass(frozen=True, eq=False)
class ChartConfig:
    target: str
    series: pd.DataFrame
    metric: Metric
    multi: bool = True
    decimate_markers: bool = False
    recent_window_start: Optional[int] = RECENT_WINDOW_START_YEAR
    colours: Dict[str, str] = field(default_factory=lambda: dict(SCENARIO_COLOURS))
    width: int = CHART_WIDTH
    height: int = CHART_HEIGHT
    margin: Dict[str, int] = field(default_factory=lambda: dict(CHART_MARGIN))


@dataclass(frozen=True, eq=False)
class LineSeries:
    scenario: str
    label: str
    colour: str
    points: pd.DataFrame
    markers: pd.DataFrame


@dataclass(frozen=True)
class LegendEntry:
    scenario: str
    label: str
    colour: str


@dataclass(frozen=True, eq=False)
class ChartScene:
    target: str
    y_domain: Tuple[float, float]
    y_label: str
    width: int
    height: int
    margin: Dict[str, int]
    value_format: str = ".2f"
    placeholder: Optional[str] = None
    x_domain: Optional[Tuple[pd.Timestamp, pd.Timestamp]] = None
    lines: Tuple[LineSeries, ...] = ()
    legend: Tuple[LegendEntry, ...] = ()
    window: Optional[Tuple[pd.Timestamp, pd.Timestamp]] = None

    @property
    def is_empty(self) -> bool:
        return self.placeholder is not None

    @property
    def point_count(self) -> int:
        return sum(len(line.markers) for line in self.lines)

    @property
    def colour_map(self) -> Dict[str, str]:
        return {line.scenario: line.colour for line in self.lines}

    def y_pixel(self, value: float) -> float:
        """Vertical pixel for a value; depends only on the fixed domain and geometry."""
        lo, hi = self.y_domain
        bottom = self.height - self.margin["bottom"]
        top = self.margin["top"]
        return bottom + (value - lo) / (hi - lo) * (top - bottom)


def decimate(points: pd.DataFrame, step: int = MARKER_STEP_YEARS) -> pd.DataFrame:
    """One marker per `step` years, counted from the line's first year."""
    if points.empty or step <= 1:
        return points
    first_year = int(points["year"].iloc[0])
    keep = ((points["year"] - first_year) % step == 0) & ~points["year"].duplicated()
    return points[keep].reset_index(drop=True)


def recent_window(x_domain, start_year: Optional[int]):
    """Shaded span from start_year to the domain end, clamped to the domain start."""
    if start_year is None or x_domain is None:
        return None
    start, end = x_domain
    cutoff = pd.Timestamp(year=int(start_year), month=1, day=1)
    if cutoff > end:
        return None
    return max(cutoff, start), end


def build_chart_scene(config: ChartConfig) -> ChartScene:
    """Deterministic scene for one chart surface."""
    metric = config.metric
    base = ChartScene(
        target=config.target,
        y_domain=tuple(float(v) for v in metric.y_domain),
        y_label=metric.axis_label,
        width=config.width,
        height=config.height,
        margin=dict(config.margin),
        value_format=metric.value_format,
    )

    data = config.series
    if data is None or data.empty:
        return replace(base, placeholder=PLACEHOLDER_TEXT)

    x_domain = (pd.Timestamp(data["time"].min()), pd.Timestamp(data["time"].max()))

    groups = group_by_scenario(data)
    if not config.multi:
        first = next(iter(groups))
        groups = {first: groups[first]}

    lines, legend = [], []
    for scenario, rows in groups.items():
        colour = scenario_colour(scenario, config.colours)
        label = get_scenario_label(scenario)
        points = pd.DataFrame({
            "time": rows["time"],
            "year": rows["year"].astype(int),
            "value": rows[metric.value_column].astype(float),
        }).reset_index(drop=True)
        markers = decimate(points) if config.decimate_markers else points
        lines.append(LineSeries(scenario, label, colour, points, markers))
        legend.append(LegendEntry(scenario, label, colour))

    return replace(
        base,
        x_domain=x_domain,
        lines=tuple(lines),
        legend=tuple(legend) if config.multi else (),
        window=recent_window(x_domain, config.recent_window_start),
    )


def reveal_frames(scene: ChartScene, frames: int = ANIMATION_FRAMES) -> Iterator[ChartScene]:
    """Draw-in animation: each line grows from its start; the last frame is the full scene."""
    if scene.is_empty or frames <= 1:
        yield scene
        return

    for k in range(1, frames + 1):
        partial = []
        for line in scene.lines:
            n = max(1, math.ceil(len(line.points) * k / frames))
            points = line.points.iloc[:n]
            last_time = points["time"].iloc[-1]
            markers = line.markers[line.markers["time"] <= last_time]
            partial.append(replace(line, points=points, markers=markers))
        yield replace(scene, lines=tuple(partial))


# ============================================================================
# ALTAIR
# ============================================================================

def _datetime(ts: pd.Timestamp) -> alt.DateTime:
    return alt.DateTime(year=ts.year, month=ts.month, date=ts.day,
                        hours=ts.hour, minutes=ts.minute, seconds=ts.second)


def _long_frame(lines, attr: str) -> pd.DataFrame:
    frames = []
    for line in lines:
        part = getattr(line, attr).copy()
        part["scenario"] = line.scenario
        part["label"] = line.label
        frames.append(part)
    return pd.concat(frames, ignore_index=True)


def scene_to_altair(scene: ChartScene):
    """Altair layer chart for a scene (placeholder text when empty)."""
    if scene.is_empty:
        return alt.Chart(pd.DataFrame({"text": [scene.placeholder]})).mark_text(
            color="#64748b", fontSize=14
        ).encode(
            x=alt.value(scene.width / 2),
            y=alt.value(scene.height / 2),
            text="text:N",
        ).properties(width=scene.width, height=scene.height)

    x_scale = alt.Scale(domain=[_datetime(scene.x_domain[0]), _datetime(scene.x_domain[1])])
    x_encoding = alt.X("time:T", title="Year", scale=x_scale,
                       axis=alt.Axis(format="%Y", tickCount=5))
    y_encoding = alt.Y("value:Q", title=scene.y_label,
                       scale=alt.Scale(domain=list(scene.y_domain), zero=False, nice=False, clamp=True),
                       axis=alt.Axis(tickCount=5))

    # Legend lists only what is drawn, in grouping order
    colour = alt.Color(
        "label:N",
        title="Scenario",
        scale=alt.Scale(domain=[line.label for line in scene.lines],
                        range=[line.colour for line in scene.lines]),
        legend=alt.Legend(orient="bottom", labelLimit=300) if scene.legend else None,
    )

    layers = []

    if scene.window is not None:
        window_df = pd.DataFrame({"start": [scene.window[0]], "end": [scene.window[1]]})
        layers.append(
            alt.Chart(window_df).mark_rect(opacity=0.12, color="#94a3b8").encode(
                x=alt.X("start:T", scale=x_scale),
                x2=alt.X2("end:T"),
                tooltip=alt.value(f"Recent period: {scene.window[0].year}-{scene.window[1].year}")
            )
        )

    layers.append(
        alt.Chart(_long_frame(scene.lines, "points")).mark_line(strokeWidth=2).encode(
            x=x_encoding, y=y_encoding, color=colour, detail="scenario:N"
        )
    )

    layers.append(
        alt.Chart(_long_frame(scene.lines, "markers")).mark_circle(size=30, opacity=1).encode(
            x=x_encoding,
            y=y_encoding,
            color=colour,
            tooltip=[
                alt.Tooltip("label:N", title="Scenario"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("value:Q", title="Value", format=scene.value_format),
            ]
        )
    )

    return alt.layer(*layers).properties(
        width=scene.width,
        height=scene.height
    ).configure_view(
        strokeWidth=0
    )


# ============================================================================
# SURFACES
# ============================================================================

def render_chart(surface, config: ChartConfig) -> ChartScene:
    """
    Draw one chart into a surface, replacing its previous content.

    Args:
        surface: An st.empty() slot (anything with altair_chart())
        config: Chart inputs

    Returns:
        The scene that was drawn
    """
    scene = build_chart_scene(config)
    surface.altair_chart(scene_to_altair(scene), width="stretch")
    return scene


def play_reveal(surface, scene: ChartScene, frames: int = ANIMATION_FRAMES,
                delay: float = ANIMATION_FRAME_SECONDS, sleep=time.sleep) -> ChartScene:
    """Replay the draw-in frames into the same surface; ends on the full scene."""
    for frame in reveal_frames(scene, frames):
        surface.altair_chart(scene_to_altair(frame), width="stretch")
        sleep(delay)
    return scene
