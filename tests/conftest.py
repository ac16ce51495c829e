# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from climate_story_data_operations import DatasetStore, ensure_schema


YEARS = [2100, 1990, 2050, 2000, 2010]

# (region, scenario) -> (start value, increase per year)
TEMP_SERIES = {
    ("Global", "ssp126"): (14.0, 0.01),
    ("Global", "ssp245"): (14.0, 0.02),
    ("Global", "ssp370"): (14.0, 0.03),
    ("Global", "ssp585"): (14.0, 0.04),
    ("Europe", "ssp126"): (9.0, 0.01),
    ("Europe", "ssp585"): (9.0, 0.05),
}

PRECIP_SERIES = {
    ("Global", "ssp126"): (2.8, 0.0005),
    ("Global", "ssp245"): (2.8, 0.001),
    ("Global", "ssp370"): (2.8, -0.002),
    ("Global", "ssp585"): (2.8, 0.003),
    ("Europe", "ssp126"): (2.2, 0.0),
    ("Europe", "ssp585"): (2.2, -0.004),
}


def raw_rows(series, value_column):
    rows = []
    for year in YEARS:
        for (region, scenario), (start, slope) in series.items():
            rows.append({
                "time": f"{year}-01-01 00:00:00",
                "scenario": scenario,
                "region": region,
                value_column: round(start + slope * (year - 1990), 6),
            })
    return pd.DataFrame(rows)


@pytest.fixture
def temp_raw():
    return raw_rows(TEMP_SERIES, "tas_C")


@pytest.fixture
def precip_raw():
    return raw_rows(PRECIP_SERIES, "pr_day")


@pytest.fixture
def dataset(temp_raw, precip_raw):
    return DatasetStore(
        temperature=ensure_schema(temp_raw, "tas_C"),
        precipitation=ensure_schema(precip_raw, "pr_day"),
    )


@pytest.fixture
def csv_files(tmp_path, temp_raw, precip_raw):
    temp_path = tmp_path / "temp_df.csv"
    precip_path = tmp_path / "precip_df.csv"
    temp_raw.to_csv(temp_path, index=False)
    precip_raw.to_csv(precip_path, index=False)
    return temp_path, precip_path


def make_series(points, value_column):
    """Single-scenario series from (year, value) pairs."""
    return pd.DataFrame({
        "time": pd.to_datetime([f"{y}-01-01" for y, _ in points]),
        "year": [y for y, _ in points],
        "scenario": "ssp245",
        "region": "Global",
        value_column: [v for _, v in points],
    })


class FakeSurface:
    """Stands in for an st.empty() slot: each draw replaces the last."""

    def __init__(self):
        self.content = None
        self.draws = 0
        self.kwargs = {}

    def altair_chart(self, chart, **kwargs):
        self.content = chart
        self.kwargs = kwargs
        self.draws += 1


class FakeStreamlit:
    """Records Streamlit calls made by display-only render functions."""

    def __init__(self):
        self.calls = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def columns(self, spec):
        n = spec if isinstance(spec, int) else len(spec)
        return [self for _ in range(n)]

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
        return record

    def texts(self, name):
        return [args[0] for call, args, _ in self.calls if call == name and args]


@pytest.fixture
def fake_surface():
    return FakeSurface()


@pytest.fixture
def fake_st():
    return FakeStreamlit()


@pytest.fixture
def series_factory():
    return make_series
