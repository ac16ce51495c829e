#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Climate Story Data Operations
=============================

Data loading, filtering and aggregation for the scenario story viewer.

Both tables are loaded ONCE at startup and never modified afterwards.
Every function here returns new frames; callers may hold on to results
without affecting the store.

Sections:
  1. Data Loading & Schema
  2. Filtering
  3. Aggregation
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from climate_story_config import (
    REQUIRED_COLUMNS, TIME_FORMAT, TEMP_VALUE_COLUMN, PRECIP_VALUE_COLUMN,
)
from climate_story_constants import SCENARIOS, WETTER_DRIER_THRESHOLD, Metric
from climate_story_errors import InsufficientData, LoadFailure

logger = logging.getLogger(__name__)


# ============================================================================
# SECTION 1: DATA LOADING & SCHEMA
# ============================================================================

@dataclass(frozen=True)
class DatasetStore:
    """The two observation tables, populated once and read-only thereafter."""
    temperature: pd.DataFrame
    precipitation: pd.DataFrame

    def frame(self, metric: Metric) -> pd.DataFrame:
        if metric.value_column == PRECIP_VALUE_COLUMN:
            return self.precipitation
        return self.temperature

    def regions(self) -> List[str]:
        return sorted(self.temperature["region"].dropna().unique())

    def scenarios(self) -> List[str]:
        """Scenarios present in either table, in canonical order first."""
        present = set(self.temperature["scenario"].unique()) | set(self.precipitation["scenario"].unique())
        known = [s for s in SCENARIOS if s in present]
        return known + sorted(present - set(known))

    def year_range(self) -> Tuple[int, int]:
        years = pd.concat([self.temperature["year"], self.precipitation["year"]])
        if years.empty:
            return 0, 0
        return int(years.min()), int(years.max())


def _parse_time(column: pd.Series) -> pd.Series:
    if pd.api.types.is_datetime64_any_dtype(column):
        return column
    return pd.to_datetime(column.astype(str).str.strip(), format=TIME_FORMAT)


def read_table(path) -> pd.DataFrame:
    """Read a raw observation table (.csv, or .parquet via pyarrow)."""
    path = Path(path)
    if path.suffix.lower() == ".parquet":
        return pd.read_parquet(path, engine="pyarrow")
    return pd.read_csv(path, dtype={col: str for col in REQUIRED_COLUMNS})


def ensure_schema(df: pd.DataFrame, value_column: str, path="<memory>") -> pd.DataFrame:
    """
    Validate and normalise one observation table.

    Args:
        df: Raw table with time, scenario, region and the value column
        value_column: Name of the measurement column (tas_C or pr_day)
        path: Source path, used in error messages

    Returns:
        DataFrame with columns time, year, scenario, region, <value_column>

    Raises:
        LoadFailure: Missing columns, no rows, malformed timestamps or non-numeric values
    """
    expected = list(REQUIRED_COLUMNS) + [value_column]
    missing = [col for col in expected if col not in df.columns]
    if missing:
        raise LoadFailure(path, f"missing columns {missing}; available: {list(df.columns)}")
    if df.empty:
        raise LoadFailure(path, "no rows")

    df = df[expected].copy()

    for col, dtype in REQUIRED_COLUMNS.items():
        if col != "time" and dtype == str:
            df[col] = df[col].astype(str).str.strip()

    try:
        df["time"] = _parse_time(df["time"])
    except (ValueError, TypeError) as e:
        raise LoadFailure(path, f"malformed timestamp (expected {TIME_FORMAT}): {e}") from e

    df[value_column] = pd.to_numeric(df[value_column], errors="coerce")

    nan_issues = {col: int(df[col].isna().sum()) for col in expected if df[col].isna().any()}
    if nan_issues:
        details = ", ".join(f"{col}: {count} missing" for col, count in nan_issues.items())
        raise LoadFailure(path, f"DATA QUALITY ERROR ({details}) in {len(df)} rows")

    df["year"] = df["time"].dt.year.astype(int)

    return df[["time", "year", "scenario", "region", value_column]]


def load_observations(path, value_column: str) -> pd.DataFrame:
    """Load and validate a single observation file."""
    if not os.path.isfile(path):
        raise LoadFailure(path, "file not found")
    try:
        raw = read_table(path)
    except LoadFailure:
        raise
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise LoadFailure(path, e) from e

    df = ensure_schema(raw, value_column, path)
    logger.info("Loaded %d rows from %s", len(df), path)
    return df


def load_datasets(temp_path, precip_path) -> DatasetStore:
    """
    Load both observation tables concurrently and join before returning.

    Raises:
        LoadFailure: If either file fails; the first failure is raised
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        temp_future = pool.submit(load_observations, temp_path, TEMP_VALUE_COLUMN)
        precip_future = pool.submit(load_observations, precip_path, PRECIP_VALUE_COLUMN)
        temperature = temp_future.result()
        precipitation = precip_future.result()

    return DatasetStore(temperature=temperature, precipitation=precipitation)


# ============================================================================
# SECTION 2: FILTERING
# ============================================================================

def filter_series(
        df: pd.DataFrame,
        region: str,
        scenarios: Iterable[str],
        year_cutoff: Optional[int] = None
) -> pd.DataFrame:
    """
    Rows for one region and a set of scenarios, ascending by time.

    An empty result is a valid "no data for this selection" state.
    """
    mask = (df["region"] == region) & df["scenario"].isin(list(scenarios))
    if year_cutoff is not None:
        mask &= df["year"] <= year_cutoff

    return df[mask].sort_values("time", kind="mergesort").reset_index(drop=True)


def group_by_scenario(series: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """Split rows per scenario, keys in first-seen order (drives legend and colour order)."""
    return {
        scenario: series[series["scenario"] == scenario].reset_index(drop=True)
        for scenario in series["scenario"].unique()
    }


# ============================================================================
# SECTION 3: AGGREGATION
# ============================================================================

@dataclass(frozen=True)
class ImpactDelta:
    start_year: int
    end_year: int
    start_value: float
    end_value: float
    absolute_delta: float
    percent_delta: float


def compute_delta(series: pd.DataFrame, value_column: str) -> ImpactDelta:
    """
    Change between the first and last observation of a single-scenario series.

    Percent change is defined as 0 when the first value is 0.

    Raises:
        InsufficientData: If the series is empty
    """
    if series.empty:
        raise InsufficientData(f"No observations for {value_column}")

    sort_cols = ["year", "time"] if "time" in series.columns else ["year"]
    ordered = series.sort_values(sort_cols, kind="mergesort")

    first = float(ordered[value_column].iloc[0])
    last = float(ordered[value_column].iloc[-1])

    absolute = last - first
    percent = 0.0 if first == 0 else (absolute / first) * 100

    return ImpactDelta(
        start_year=int(ordered["year"].iloc[0]),
        end_year=int(ordered["year"].iloc[-1]),
        start_value=first,
        end_value=last,
        absolute_delta=absolute,
        percent_delta=percent,
    )


def classify_change(percent_delta: float, threshold: float = WETTER_DRIER_THRESHOLD) -> str:
    if percent_delta > threshold:
        return "wetter"
    if percent_delta < -threshold:
        return "drier"
    return "fairly similar on average"


def bar_fraction(delta: float, reference_span: float) -> float:
    """Fixed-scale bar fill in [0, 1]."""
    if reference_span <= 0:
        return 0.0
    return float(np.clip(abs(delta) / reference_span, 0.0, 1.0))


def summarise_series(series: pd.DataFrame, value_column: str) -> pd.DataFrame:
    """Per-scenario mean, min, max and change, rounded for display."""
    if series.empty:
        return pd.DataFrame(columns=["Mean", "Min", "Max", "Change"])

    return series.groupby("scenario", sort=False)[value_column].agg([
        ("Mean", "mean"),
        ("Min", "min"),
        ("Max", "max"),
        ("Change", lambda x: x.iloc[-1] - x.iloc[0])
    ]).round(2)
