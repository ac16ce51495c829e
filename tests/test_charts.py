"""
Chart Renderer Tests

Scene building (domains, lines, legend, markers, recent window),
surface replacement, fixed value-axis mapping and the draw-in frames.
"""

import pandas as pd
import pytest

from climate_story_charts import (
    ChartConfig,
    build_chart_scene,
    play_reveal,
    render_chart,
    reveal_frames,
    scenario_colour,
    scene_to_altair,
)
from climate_story_constants import PLACEHOLDER_TEXT, PRECIPITATION, SCENARIO_COLOURS, TEMPERATURE
from climate_story_data_operations import filter_series


def temp_config(dataset, region="Global", scenarios=("ssp126", "ssp585"), **kwargs):
    series = filter_series(dataset.temperature, region, scenarios)
    return ChartConfig(target="temp-chart", series=series, metric=TEMPERATURE, **kwargs)


def test_scene_has_one_line_per_scenario(dataset):
    scene = build_chart_scene(temp_config(dataset))

    assert [line.scenario for line in scene.lines] == ["ssp126", "ssp585"]
    assert scene.point_count == 10
    assert scene.x_domain == (pd.Timestamp("1990-01-01"), pd.Timestamp("2100-01-01"))
    assert scene.y_domain == (4.0, 30.0)
    assert scene.y_label == "Temperature (°C)"


def test_legend_lists_only_present_scenarios(dataset):
    config = temp_config(dataset, region="Europe", scenarios=("ssp126", "ssp245", "ssp370", "ssp585"))
    scene = build_chart_scene(config)

    assert [entry.scenario for entry in scene.legend] == ["ssp126", "ssp585"]
    assert scene.legend[0].label == "SSP1-2.6 (low emissions)"


def test_colours_are_stable_across_selections(dataset):
    both = build_chart_scene(temp_config(dataset, scenarios=("ssp126", "ssp585")))
    only_high = build_chart_scene(temp_config(dataset, scenarios=("ssp585",)))

    assert both.colour_map["ssp585"] == only_high.colour_map["ssp585"] == SCENARIO_COLOURS["ssp585"]


def test_unknown_scenario_colour_is_deterministic():
    assert scenario_colour("ssp119") == scenario_colour("ssp119")
    assert scenario_colour("ssp119") not in SCENARIO_COLOURS.values()


def test_empty_series_gives_placeholder(dataset, fake_surface):
    config = temp_config(dataset, region="Europe", scenarios=("ssp370",))
    scene = render_chart(fake_surface, config)

    assert scene.is_empty
    assert scene.placeholder == PLACEHOLDER_TEXT
    assert scene.lines == ()
    assert scene.point_count == 0
    assert fake_surface.draws == 1
    spec = fake_surface.content.to_dict()
    assert spec["mark"]["type"] == "text"


def test_render_twice_is_equivalent(dataset, fake_surface):
    config = temp_config(dataset)

    first = render_chart(fake_surface, config)
    second = render_chart(fake_surface, config)

    assert first.point_count == second.point_count
    assert first.x_domain == second.x_domain
    assert first.colour_map == second.colour_map
    assert fake_surface.draws == 2
    assert fake_surface.content.to_dict() == scene_to_altair(second).to_dict()


def test_charts_fill_container_width(dataset, fake_surface):
    render_chart(fake_surface, temp_config(dataset))

    assert fake_surface.kwargs == {"width": "stretch"}


def test_value_axis_position_independent_of_selection(dataset):
    global_scene = build_chart_scene(temp_config(dataset, region="Global", scenarios=("ssp585",)))
    europe_scene = build_chart_scene(temp_config(dataset, region="Europe", scenarios=("ssp126",)))

    for value in (4.0, 12.5, 30.0):
        assert global_scene.y_pixel(value) == europe_scene.y_pixel(value)

    assert global_scene.y_pixel(4.0) == 260 - 40
    assert global_scene.y_pixel(30.0) == 35


def test_altair_value_scale_uses_fixed_domain(dataset):
    scene = build_chart_scene(temp_config(dataset, recent_window_start=None))
    spec = scene_to_altair(scene).to_dict()

    y = spec["layer"][0]["encoding"]["y"]
    assert y["scale"]["domain"] == [4.0, 30.0]
    assert y["scale"]["zero"] is False
    assert spec["layer"][0]["encoding"]["x"]["axis"]["format"] == "%Y"


def test_single_scenario_mode_draws_first_group_without_legend(dataset):
    scene = build_chart_scene(temp_config(dataset, multi=False))

    assert [line.scenario for line in scene.lines] == ["ssp126"]
    assert scene.legend == ()


def test_marker_decimation_every_five_years():
    series = pd.DataFrame({
        "time": pd.to_datetime([f"{y}-01-01" for y in range(2000, 2021)]),
        "year": list(range(2000, 2021)),
        "scenario": "ssp245",
        "region": "Global",
        "pr_day": [2.0] * 21,
    })
    config = ChartConfig(target="precip-chart", series=series, metric=PRECIPITATION, decimate_markers=True)
    scene = build_chart_scene(config)

    line = scene.lines[0]
    assert len(line.points) == 21
    assert line.markers["year"].tolist() == [2000, 2005, 2010, 2015, 2020]


def test_recent_window_clamped_to_domain(dataset):
    scene = build_chart_scene(temp_config(dataset, recent_window_start=2000))
    assert scene.window == (pd.Timestamp("2000-01-01"), pd.Timestamp("2100-01-01"))

    early = build_chart_scene(temp_config(dataset, recent_window_start=1900))
    assert early.window == (pd.Timestamp("1990-01-01"), pd.Timestamp("2100-01-01"))

    late = build_chart_scene(temp_config(dataset, recent_window_start=2200))
    assert late.window is None


def test_reveal_frames_grow_to_full_scene(dataset):
    scene = build_chart_scene(temp_config(dataset))
    frames = list(reveal_frames(scene, frames=5))

    assert len(frames) == 5
    counts = [frame.point_count for frame in frames]
    assert counts == sorted(counts)
    assert counts[0] < scene.point_count
    assert counts[-1] == scene.point_count
    assert all(frame.x_domain == scene.x_domain for frame in frames)


def test_play_reveal_redraws_same_surface(dataset, fake_surface):
    scene = build_chart_scene(temp_config(dataset))
    pauses = []

    play_reveal(fake_surface, scene, frames=4, delay=0.01, sleep=pauses.append)

    assert fake_surface.draws == 4
    assert pauses == [0.01] * 4


def test_reveal_of_placeholder_is_single_frame(dataset):
    scene = build_chart_scene(temp_config(dataset, region="Europe", scenarios=("ssp370",)))
    assert len(list(reveal_frames(scene, frames=6))) == 1


@pytest.mark.parametrize("metric", [TEMPERATURE, PRECIPITATION])
def test_tooltip_formats_values_to_two_decimals(dataset, metric):
    series = filter_series(dataset.frame(metric), "Global", ["ssp245"])
    scene = build_chart_scene(ChartConfig(target="t", series=series, metric=metric, recent_window_start=None))
    spec = scene_to_altair(scene).to_dict()

    tooltips = spec["layer"][1]["encoding"]["tooltip"]
    value_tip = [t for t in tooltips if t["field"] == "value"][0]
    assert value_tip["format"] == ".2f"
