# -*- coding: utf-8 -*-
"""
Climate Story Narrative
=======================

Story steps and the year autoplay clock.

Each narrative step features one scenario.  Entering a step (by
clicking it) makes it the only active step and pins the chart
focus on its scenario.  The autoplay clock moves a year cutoff forward
in fixed steps and loops back to the first year.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence

from climate_story_constants import AUTOPLAY_INTERVAL_SECONDS, AUTOPLAY_STEP_YEARS


@dataclass(frozen=True)
class NarrativeStep:
    step_id: str
    scenario: str
    title: str
    body: str


NARRATIVE_STEPS = [
    NarrativeStep(
        "step-low", "ssp126", "A low-emissions world",
        "Rapid cuts in emissions keep warming modest.  Temperatures still rise "
        "through mid-century, then level off."
    ),
    NarrativeStep(
        "step-intermediate", "ssp245", "The middle road",
        "Emissions hover near today's levels until mid-century before slowly "
        "falling.  Warming continues steadily through 2100."
    ),
    NarrativeStep(
        "step-high", "ssp370", "Uneven action",
        "Regional rivalry slows cooperation.  Emissions keep climbing and most "
        "regions warm markedly by the end of the century."
    ),
    NarrativeStep(
        "step-very-high", "ssp585", "Fossil-fuelled growth",
        "The most fossil-intensive pathway.  Warming accelerates and rainfall "
        "patterns shift the furthest from today."
    ),
]


@dataclass(frozen=True)
class NarrativeState:
    """active_step is None while no step has been entered."""
    active_step: Optional[int] = None

    def is_active(self, index: int) -> bool:
        return self.active_step == index


def step_entered(steps: Sequence[NarrativeStep], index: int) -> NarrativeState:
    if not 0 <= index < len(steps):
        raise IndexError(f"No narrative step {index}")
    return NarrativeState(active_step=index)


# ============================================================================
# AUTOPLAY
# ============================================================================

def next_year(cutoff: int, step: int, min_year: int, max_year: int) -> int:
    """Advance the cutoff by `step`; past max_year it wraps to min_year."""
    advanced = cutoff + step
    if advanced > max_year:
        return min_year
    return advanced


@dataclass(frozen=True)
class AutoplayClock:
    min_year: int
    max_year: int
    year: int
    step: int = AUTOPLAY_STEP_YEARS
    running: bool = False

    def start(self) -> "AutoplayClock":
        if self.running:
            return self
        return replace(self, running=True)

    def stop(self) -> "AutoplayClock":
        if not self.running:
            return self
        return replace(self, running=False)

    def tick(self) -> "AutoplayClock":
        if not self.running:
            return self
        return replace(self, year=next_year(self.year, self.step, self.min_year, self.max_year))

    def manual_set(self, year: int) -> "AutoplayClock":
        """A slider move always overrides autoplay."""
        year = max(self.min_year, min(int(year), self.max_year))
        return replace(self, year=year, running=False)


def new_clock(min_year: int, max_year: int, step: int = AUTOPLAY_STEP_YEARS) -> AutoplayClock:
    return AutoplayClock(min_year=min_year, max_year=max_year, year=max_year, step=step)


def tick_due(clock: AutoplayClock, last_tick: float, now: float,
             interval: float = AUTOPLAY_INTERVAL_SECONDS) -> bool:
    """
    Whether a timer wake-up should advance the clock.

    The timer fires on a fixed schedule whether or not the clock runs;
    wake-ups closer than about one interval to the last tick are ignored
    so a rerun never advances twice.
    """
    return clock.running and now - last_tick >= interval * 0.9
