"""Scenario pill tests."""

from climate_story_state import ScenarioToggled, default_selection, reduce
from climate_story_ui_components import pill_key, scenario_pills, sync_pills

OPTIONS = ["ssp126", "ssp245", "ssp370", "ssp585"]


def test_pill_keys_are_unique_and_stable():
    keys = [pill_key("scen", OPTIONS, opt) for opt in OPTIONS]

    assert len(set(keys)) == 4
    assert keys == [pill_key("scen", list(reversed(OPTIONS)), opt) for opt in OPTIONS]


def test_sync_pills_reflects_forced_on_scenario():
    state = default_selection()
    for scenario in OPTIONS:
        state = reduce(state, ScenarioToggled(scenario))

    session = {}
    sync_pills(session, "scen", OPTIONS, state)

    assert session[pill_key("scen", OPTIONS, "ssp585")] is True
    assert [session[pill_key("scen", OPTIONS, s)] for s in OPTIONS[:3]] == [False, False, False]


def test_scenario_pills_draw_one_toggle_each(fake_st):
    toggled = []
    scenario_pills(fake_st, OPTIONS, toggled.append)

    toggles = [(args, kwargs) for name, args, kwargs in fake_st.calls if name == "toggle"]
    assert [args[0] for args, _ in toggles][0] == "SSP1-2.6 (low emissions)"
    assert [kwargs["args"] for _, kwargs in toggles] == [(s,) for s in OPTIONS]

    toggles[2][1]["on_change"](*toggles[2][1]["args"])
    assert toggled == ["ssp370"]
