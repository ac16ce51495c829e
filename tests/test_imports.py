"""Every module imports cleanly with the declared dependencies installed."""

import importlib

import pytest

MODULES = [
    "climate_story_config",
    "climate_story_constants",
    "climate_story_errors",
    "climate_story_helpers",
    "climate_story_data_operations",
    "climate_story_charts",
    "climate_story_maps",
    "climate_story_narrative",
    "climate_story_tab_impact",
    "climate_story_state",
    "climate_story_ui_components",
    "climate_story_app",
]


@pytest.mark.parametrize("name", MODULES)
def test_module_imports(name):
    assert importlib.import_module(name) is not None


def test_app_entry_point_is_callable():
    app = importlib.import_module("climate_story_app")
    assert callable(app.run_story_viewer)
