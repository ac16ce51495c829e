# -*- coding: utf-8 -*-
"""
Climate Story Impact Tab
========================

Impact snapshot for the focus scenario: warming and precipitation change
between the first and last year of the record, a wetter/drier reading and
fixed-scale bars so lengths compare across regions and scenarios.

DISPLAY ONLY - the numbers come from climate_story_data_operations.
"""

from dataclasses import dataclass
from typing import Optional

from climate_story_constants import (
    EMOJI, DASH, NO_DATA_TEXT, Settings, get_scenario_label,
)
from climate_story_data_operations import (
    DatasetStore, ImpactDelta, bar_fraction, classify_change, compute_delta, filter_series,
)


@dataclass(frozen=True)
class ImpactSummary:
    region: str
    scenario: Optional[str]
    scenario_label: str
    temp_delta_text: str
    precip_delta_text: str
    temp_text: str
    precip_text: str
    temp_bar: float = 0.0
    precip_bar: float = 0.0
    classification: Optional[str] = None
    temp_delta: Optional[ImpactDelta] = None
    precip_delta: Optional[ImpactDelta] = None

    @property
    def has_data(self) -> bool:
        return self.temp_delta is not None and self.precip_delta is not None


def placeholder_summary(region: str, scenario: Optional[str]) -> ImpactSummary:
    return ImpactSummary(
        region=region,
        scenario=scenario,
        scenario_label=DASH,
        temp_delta_text=DASH,
        precip_delta_text=DASH,
        temp_text=NO_DATA_TEXT,
        precip_text="",
    )


def format_signed_percent(percent: float) -> str:
    return f"{'+' if percent >= 0 else ''}{percent:.0f}"


def build_impact_summary(dataset: DatasetStore, state, settings: Settings = Settings()) -> ImpactSummary:
    """
    Impact summary for the selection's region and focus scenario.

    The year cutoff is ignored: the snapshot always spans the full record.
    An absent region/scenario pair gives the placeholder summary.
    """
    region = state.region
    scenario = state.focus_scenario
    temp_metric = settings.temperature
    precip_metric = settings.precipitation

    temp_series = filter_series(dataset.temperature, region, [scenario])
    precip_series = filter_series(dataset.precipitation, region, [scenario])

    if temp_series.empty or precip_series.empty:
        return placeholder_summary(region, scenario)

    temp = compute_delta(temp_series, temp_metric.value_column)
    precip = compute_delta(precip_series, precip_metric.value_column)

    label = get_scenario_label(scenario)
    temp_rounded = f"{temp.absolute_delta:.1f}"
    precip_rounded = f"{precip.percent_delta:.0f}"
    classification = classify_change(precip.percent_delta, settings.change_threshold)

    return ImpactSummary(
        region=region,
        scenario=scenario,
        scenario_label=label,
        temp_delta_text=temp_rounded,
        precip_delta_text=format_signed_percent(precip.percent_delta),
        temp_text=(
            f"{label} in {region} warms by about {temp_rounded}°C between "
            f"{temp.start_year} and {temp.end_year}."
        ),
        precip_text=(
            f"Average daily precipitation changes by roughly {precip_rounded}% over the same "
            f"period, making this region {classification}."
        ),
        temp_bar=bar_fraction(temp.absolute_delta, temp_metric.reference_span),
        precip_bar=bar_fraction(precip.percent_delta, precip_metric.reference_span),
        classification=classification,
        temp_delta=temp,
        precip_delta=precip,
    )


def format_bar(fraction: float, colour: str) -> str:
    """Proportional bar as HTML."""
    width = max(0.0, min(fraction, 1.0)) * 100
    return f"""
    <div style="background:#e2e8f0;border-radius:6px;height:10px;width:100%;margin:4px 0 12px 0;">
        <div style="background:{colour};border-radius:6px;height:10px;width:{width:.1f}%;"></div>
    </div>
    """


def render_impact_panel(st, summary: ImpactSummary):
    """Render the impact snapshot into a Streamlit container."""
    st.subheader(f"{EMOJI['graph']} Impact snapshot")
    st.caption(f"{EMOJI['pin']} {summary.region} | {EMOJI['globe']} {summary.scenario_label}")

    col1, col2 = st.columns(2)
    with col1:
        st.metric(f"{EMOJI['thermometer']} Warming (°C)", summary.temp_delta_text)
        st.markdown(format_bar(summary.temp_bar, "#E74C3C"), unsafe_allow_html=True)
    with col2:
        st.metric(f"{EMOJI['wave']} Precipitation change (%)", summary.precip_delta_text)
        st.markdown(format_bar(summary.precip_bar, "#3498DB"), unsafe_allow_html=True)

    st.markdown(summary.temp_text)
    if summary.precip_text:
        st.markdown(summary.precip_text)
