"""Impact snapshot tests."""

import pytest

from climate_story_constants import DASH, NO_DATA_TEXT, Settings
from climate_story_state import NarrativeStepEntered, SelectionState, default_selection, reduce
from climate_story_tab_impact import (
    build_impact_summary,
    format_bar,
    format_signed_percent,
    render_impact_panel,
)


def test_summary_for_focus_scenario(dataset):
    state = reduce(default_selection(), NarrativeStepEntered("ssp585"))
    summary = build_impact_summary(dataset, state)

    # Global ssp585: 14.0 -> 18.4 deg C, 2.8 -> 3.13 mm/day
    assert summary.has_data
    assert summary.temp_delta_text == "4.4"
    assert summary.precip_delta_text == "+12"
    assert summary.classification == "wetter"
    assert summary.temp_bar == pytest.approx(4.4 / 6)
    assert summary.precip_bar == pytest.approx(summary.precip_delta.percent_delta / 40)
    assert "warms by about 4.4°C between 1990 and 2100" in summary.temp_text
    assert "making this region wetter" in summary.precip_text


def test_summary_drier_region(dataset):
    state = SelectionState(region="Europe", active_scenarios=("ssp585",))
    summary = build_impact_summary(dataset, state)

    # 2.2 -> 1.76 mm/day is -20 %
    assert summary.precip_delta_text == "-20"
    assert summary.classification == "drier"
    assert summary.precip_bar == pytest.approx(0.5)


def test_summary_similar_region(dataset):
    state = SelectionState(region="Europe", active_scenarios=("ssp126",))
    summary = build_impact_summary(dataset, state)

    assert summary.precip_delta_text == "+0"
    assert summary.classification == "fairly similar on average"


def test_summary_ignores_year_cutoff(dataset):
    state = SelectionState(active_scenarios=("ssp585",), year_cutoff=2000)
    summary = build_impact_summary(dataset, state)

    assert summary.temp_delta.end_year == 2100


def test_summary_placeholder_for_absent_pair(dataset):
    state = SelectionState(region="Europe", active_scenarios=("ssp370",))
    summary = build_impact_summary(dataset, state)

    assert not summary.has_data
    assert summary.temp_delta_text == DASH
    assert summary.precip_delta_text == DASH
    assert summary.scenario_label == DASH
    assert summary.temp_text == NO_DATA_TEXT
    assert summary.precip_text == ""
    assert summary.temp_bar == summary.precip_bar == 0.0


def test_custom_threshold(dataset):
    state = SelectionState(active_scenarios=("ssp585",))
    summary = build_impact_summary(dataset, state, Settings(change_threshold=50.0))

    assert summary.classification == "fairly similar on average"


@pytest.mark.parametrize("percent,expected", [(12.4, "+12"), (0.0, "+0"), (-7.6, "-8")])
def test_format_signed_percent(percent, expected):
    assert format_signed_percent(percent) == expected


def test_format_bar_clamps_width():
    assert "width:100.0%" in format_bar(1.7, "#000")
    assert "width:0.0%" in format_bar(-0.2, "#000")


def test_render_impact_panel(dataset, fake_st):
    summary = build_impact_summary(dataset, default_selection())
    render_impact_panel(fake_st, summary)

    metrics = [args for name, args, _ in fake_st.calls if name == "metric"]
    assert [value for _, value in metrics] == [summary.temp_delta_text, summary.precip_delta_text]
    assert summary.temp_text in fake_st.texts("markdown")


def test_render_placeholder_panel_skips_empty_text(dataset, fake_st):
    state = SelectionState(region="Europe", active_scenarios=("ssp245",))
    render_impact_panel(fake_st, build_impact_summary(dataset, state))

    assert NO_DATA_TEXT in fake_st.texts("markdown")
    assert "" not in fake_st.texts("markdown")
