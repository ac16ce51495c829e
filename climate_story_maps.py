# -*- coding: utf-8 -*-
"""
Climate Story Maps Module
=========================

Region picker drawn either as a simple coordinate dot map (Altair) or as a
geographic map (Folium via streamlit-folium).

Features:
- One marker per catalogued region that exists in the loaded data
- Selected region drawn in the active style and enlarged
- Markers rebuilt on every render so the highlight follows the selection
- Optional country boundaries fetched once from a third-party GeoJSON file
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import altair as alt
import folium
import pandas as pd
import requests

logger = logging.getLogger(__name__)

# Map height in pixels
MAP_HEIGHT = 400
DOT_MAP_WIDTH = 800

MARKER_RADIUS = 8
ACTIVE_MARKER_RADIUS = 12

ACTIVE_COLOUR = "#d62728"
INACTIVE_COLOUR = "#64748b"

SELECTION_NAME = "region_pick"


@dataclass(frozen=True)
class RegionPosition:
    name: str
    x: float
    y: float
    lat: float
    lon: float


REGION_CATALOG = [
    RegionPosition("Global", 400, 200, 0.0, 0.0),
    RegionPosition("North America", 240, 155, 45.0, -100.0),
    RegionPosition("South America", 290, 275, -15.0, -60.0),
    RegionPosition("Europe", 415, 140, 50.0, 10.0),
    RegionPosition("Africa", 435, 235, 5.0, 20.0),
    RegionPosition("East Asia", 540, 185, 35.0, 110.0),
    RegionPosition("South Asia", 510, 245, 22.0, 80.0),
    RegionPosition("Oceania", 620, 305, -25.0, 135.0),
]


@dataclass(frozen=True)
class RegionMarker:
    name: str
    x: float
    y: float
    lat: float
    lon: float
    active: bool
    radius: int


def build_region_markers(
        catalog: Iterable[RegionPosition],
        regions_present: Optional[Iterable[str]],
        selected: str
) -> List[RegionMarker]:
    """
    Markers for the catalogued regions found in the data.

    Args:
        catalog: Known region positions
        regions_present: Regions in the loaded dataset (None keeps the whole catalog)
        selected: Currently selected region

    Returns:
        List of markers in catalog order, the selected one active and enlarged
    """
    present = None if regions_present is None else set(regions_present)
    markers = []
    for pos in catalog:
        if present is not None and pos.name not in present:
            continue
        active = pos.name == selected
        markers.append(RegionMarker(
            name=pos.name, x=pos.x, y=pos.y, lat=pos.lat, lon=pos.lon,
            active=active,
            radius=ACTIVE_MARKER_RADIUS if active else MARKER_RADIUS,
        ))
    return markers


# ============================================================================
# DOT MAP (Altair)
# ============================================================================

def create_dot_map(markers: List[RegionMarker]):
    """Clickable dot map; the point selection is named SELECTION_NAME."""
    df = pd.DataFrame([{
        "name": m.name, "x": m.x, "y": m.y,
        "size": m.radius ** 2 * 3,
        "state": "active" if m.active else "inactive",
    } for m in markers])

    pick = alt.selection_point(name=SELECTION_NAME, fields=["name"], on="click")

    x = alt.X("x:Q", axis=None, scale=alt.Scale(domain=[0, DOT_MAP_WIDTH]))
    y = alt.Y("y:Q", axis=None, scale=alt.Scale(domain=[MAP_HEIGHT, 0]))

    dots = alt.Chart(df).mark_circle(opacity=0.9, stroke="white", strokeWidth=1.5).encode(
        x=x,
        y=y,
        size=alt.Size("size:Q", legend=None, scale=None),
        color=alt.Color(
            "state:N",
            scale=alt.Scale(domain=["active", "inactive"], range=[ACTIVE_COLOUR, INACTIVE_COLOUR]),
            legend=None,
        ),
        tooltip=[alt.Tooltip("name:N", title="Region")],
    ).add_params(pick)

    labels = alt.Chart(df).mark_text(align="left", dx=11, dy=3, fontSize=11).encode(
        x=x, y=y, text="name:N"
    )

    return alt.layer(dots, labels).properties(
        width=DOT_MAP_WIDTH,
        height=MAP_HEIGHT
    ).configure_view(
        strokeWidth=0
    )


def region_from_selection(event) -> Optional[str]:
    """Region clicked on the dot map, from st.altair_chart(on_select=...) output."""
    if not event:
        return None
    try:
        points = event["selection"][SELECTION_NAME]
    except (KeyError, TypeError):
        return None
    if isinstance(points, dict):
        names = points.get("name") or []
        return names[0] if names else None
    for point in points or []:
        name = point.get("name")
        if name:
            return name
    return None


# ============================================================================
# GEOGRAPHIC MAP (Folium)
# ============================================================================

def fetch_boundaries(url: str, timeout: float = 10) -> Optional[dict]:
    """Download a GeoJSON boundary file.  Failures are logged and skipped."""
    if not url:
        return None
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Boundary file unavailable (%s): %s", url, e)
        return None


def create_geo_map(markers: List[RegionMarker], boundaries: Optional[dict] = None):
    """Folium map with one circle marker per region; the tooltip carries the region name."""
    m = folium.Map(
        location=(20.0, 10.0),
        zoom_start=2,
        tiles="OpenStreetMap",
        control_scale=True
    )

    if boundaries:
        folium.GeoJson(
            boundaries,
            name="Boundaries",
            style_function=lambda _: {"color": "#94a3b8", "weight": 0.5, "fillOpacity": 0.05},
        ).add_to(m)

    for marker in markers:
        colour = ACTIVE_COLOUR if marker.active else INACTIVE_COLOUR
        folium.CircleMarker(
            location=(marker.lat, marker.lon),
            radius=marker.radius,
            tooltip=marker.name,
            color=colour,
            fill=True,
            fillColor=colour,
            fillOpacity=0.8 if marker.active else 0.5,
            weight=3 if marker.active else 1,
        ).add_to(m)

    return m


def region_from_folium(result) -> Optional[str]:
    """Region clicked on the folium map, from the st_folium return value."""
    if not result:
        return None
    return result.get("last_object_clicked_tooltip") or None


def get_map_height() -> int:
    """Return the standard map height in pixels."""
    return MAP_HEIGHT


def map_widget_key(style: str, generation: int) -> str:
    """Widget key for the map; a new generation starts with no selection."""
    return f"{style}_map_{generation}"


def region_to_dispatch(picked: Optional[str], last_pick: Optional[str], current: str) -> Optional[str]:
    """
    Region a map result should switch to, if any.

    Map selections persist across reruns, so only a pick that differs from
    the last one handled counts, and only when it changes the region.
    """
    if not picked or picked == last_pick or picked == current:
        return None
    return picked
