"""
===========================================================================
visualization.py — Chart Data Builder
===========================================================================

PURPOSE:
    Decide whether a prompt gets a chart, and if so which one.
    The numbers are fixed demo figures, not real measurements.

RULES (first match wins):
    "temperature" in dataTypes → line chart of monthly temperatures
    "rainfall"    in dataTypes → bar chart of monthly rainfall
    otherwise                  → no chart (None)

    Temperature is checked FIRST, so ["temperature", "rainfall"] gets the
    temperature line chart.

USED BY:
    responses.py (analyze_prompt)
===========================================================================
"""

from typing import Optional

from schemas import ChartDescriptor, ChartSeries, ExtractedParameters

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

MONTHLY_TEMPERATURE_F = [52, 54, 57, 60, 63, 66, 67, 68, 69, 65, 58, 53]
MONTHLY_RAINFALL_IN = [4.5, 3.8, 3.2, 1.5, 0.7, 0.2, 0.1, 0.2, 0.4, 1.8, 3.1, 4.2]


def build_visualization(params: ExtractedParameters) -> Optional[ChartDescriptor]:
    """Return the chart for these parameters, or None when there isn't one."""
    data_types = params.data_types or []

    if "temperature" in data_types:
        return ChartDescriptor(
            type="line",
            labels=list(MONTH_LABELS),
            series=[ChartSeries(
                label="Average Temperature (°F)",
                values=list(MONTHLY_TEMPERATURE_F),
                border_color="rgb(16, 163, 127)",
                background_color="rgba(16, 163, 127, 0.1)"
            )]
        )

    if "rainfall" in data_types:
        return ChartDescriptor(
            type="bar",
            labels=list(MONTH_LABELS),
            series=[ChartSeries(
                label="Rainfall (inches)",
                values=list(MONTHLY_RAINFALL_IN),
                background_color="rgba(16, 163, 127, 0.8)"
            )]
        )

    return None
