"""
Climate Story Configuration
Technical settings, file paths, data schema and feature flags.
"""

import os

# ============================================================================
# APPLICATION SETTINGS
# ============================================================================

LOG_LEVEL = os.environ.get("CLIMATE_STORY_LOG_LEVEL", "INFO")

# ============================================================================
# FILE PATHS
# ============================================================================

BASE_DIR = os.path.dirname(os.path.abspath(__file__)) if "__file__" in globals() else os.getcwd()
DATA_DIR = os.environ.get("CLIMATE_STORY_DATA_DIR", os.path.join(BASE_DIR, "data"))

TEMP_FILE = os.path.join(DATA_DIR, "temp_df.csv")
PRECIP_FILE = os.path.join(DATA_DIR, "precip_df.csv")

# Optional world boundaries for the geographic map (fetched once, may fail)
BOUNDARIES_URL = os.environ.get(
    "CLIMATE_STORY_BOUNDARIES_URL",
    "https://raw.githubusercontent.com/johan/world.geo.json/master/countries.geo.json"
)
BOUNDARIES_TIMEOUT = 10

# ============================================================================
# DATA SCHEMA
# ============================================================================

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

REQUIRED_COLUMNS = {
    "time": str,
    "scenario": str,
    "region": str,
}

TEMP_VALUE_COLUMN = "tas_C"
PRECIP_VALUE_COLUMN = "pr_day"

# ============================================================================
# FEATURE FLAGS
# ============================================================================

ANIMATE_LINES = True
AUTOPLAY_ENABLED = True
DECIMATE_MARKERS = False
SHOW_RECENT_WINDOW = True

# Narrow the charts to the step's scenario when a story step is entered
NARROW_ON_STEP = True

# "dots" = simple coordinate dot map, "geo" = folium map
MAP_STYLE = os.environ.get("CLIMATE_STORY_MAP_STYLE", "dots")
