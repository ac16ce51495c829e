# -*- coding: utf-8 -*-
"""
Climate Story Selection State
=============================

Immutable selection state and the reducer that folds UI intents into it.

Every widget callback builds an intent event and hands it to reduce().
The new state is committed to the session before the page re-renders,
so rendering never observes a half-applied change.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence, Tuple, Union

from climate_story_charts import ChartConfig
from climate_story_constants import DEFAULT_REGION, SCENARIOS, Metric, Settings
from climate_story_data_operations import DatasetStore, filter_series
from climate_story_errors import InvalidSelectionAttempt
from climate_story_tab_impact import ImpactSummary, build_impact_summary

logger = logging.getLogger(__name__)


def _canonical(scenarios: Iterable[str], order: Sequence[str] = SCENARIOS) -> Tuple[str, ...]:
    unique = []
    for s in scenarios:
        if s not in unique:
            unique.append(s)
    return tuple(sorted(unique, key=lambda s: (order.index(s) if s in order else len(order), s)))


@dataclass(frozen=True)
class SelectionState:
    region: str = DEFAULT_REGION
    active_scenarios: Tuple[str, ...] = tuple(SCENARIOS)
    focus_scenario: Optional[str] = None
    focus_pinned: bool = False
    year_cutoff: Optional[int] = None

    def __post_init__(self):
        if not self.active_scenarios:
            raise InvalidSelectionAttempt("At least one scenario must stay active")
        object.__setattr__(self, "active_scenarios", _canonical(self.active_scenarios))
        if not self.focus_pinned or self.focus_scenario is None:
            object.__setattr__(self, "focus_scenario", self.active_scenarios[0])

    def is_active(self, scenario: str) -> bool:
        return scenario in self.active_scenarios


def default_selection(scenarios: Sequence[str] = SCENARIOS, region: str = DEFAULT_REGION) -> SelectionState:
    return SelectionState(region=region, active_scenarios=tuple(scenarios))


# ============================================================================
# INTENT EVENTS
# ============================================================================

@dataclass(frozen=True)
class RegionSelected:
    region: str


@dataclass(frozen=True)
class ScenarioToggled:
    scenario: str


@dataclass(frozen=True)
class NarrativeStepEntered:
    scenario: str
    narrow: bool = True


@dataclass(frozen=True)
class YearAdvanced:
    year: Optional[int]


SelectionEvent = Union[RegionSelected, ScenarioToggled, NarrativeStepEntered, YearAdvanced]


# ============================================================================
# REDUCER
# ============================================================================

def toggle_scenario(state: SelectionState, scenario: str) -> SelectionState:
    """Flip one scenario; turning off the last active one forces it back on."""
    if state.is_active(scenario):
        remaining = tuple(s for s in state.active_scenarios if s != scenario)
    else:
        remaining = state.active_scenarios + (scenario,)

    try:
        return replace(state, active_scenarios=remaining, focus_pinned=False)
    except InvalidSelectionAttempt:
        logger.debug("Rejected deselecting last active scenario %s", scenario)
        return replace(state, active_scenarios=(scenario,), focus_pinned=False)


def reduce(state: SelectionState, event: SelectionEvent) -> SelectionState:
    """Fold one intent event into the next selection state."""
    if isinstance(event, RegionSelected):
        return replace(state, region=event.region)

    if isinstance(event, ScenarioToggled):
        return toggle_scenario(state, event.scenario)

    if isinstance(event, NarrativeStepEntered):
        active = (event.scenario,) if event.narrow else state.active_scenarios
        return replace(state, active_scenarios=active,
                       focus_scenario=event.scenario, focus_pinned=True)

    if isinstance(event, YearAdvanced):
        return replace(state, year_cutoff=event.year)

    raise TypeError(f"Unknown selection event: {event!r}")


# ============================================================================
# UPDATE ENTRY POINT
# ============================================================================

@dataclass(frozen=True, eq=False)
class RenderResult:
    state: SelectionState
    temperature: ChartConfig
    precipitation: ChartConfig
    summary: ImpactSummary


def chart_config(target: str, dataset: DatasetStore, metric: Metric, state: SelectionState,
                 settings: Settings, multi: bool = True) -> ChartConfig:
    series = filter_series(dataset.frame(metric), state.region, state.active_scenarios, state.year_cutoff)
    return ChartConfig(
        target=target,
        series=series,
        metric=metric,
        multi=multi,
        decimate_markers=settings.decimate_markers,
        recent_window_start=settings.recent_window_start if settings.show_recent_window else None,
        colours=settings.scenario_colours,
    )


def on_selection_changed(state: SelectionState, dataset: DatasetStore,
                         settings: Settings = Settings()) -> RenderResult:
    """Everything the page draws for a committed selection."""
    return RenderResult(
        state=state,
        temperature=chart_config("temp-chart", dataset, settings.temperature, state, settings),
        precipitation=chart_config("precip-chart", dataset, settings.precipitation, state, settings),
        summary=build_impact_summary(dataset, state, settings),
    )
