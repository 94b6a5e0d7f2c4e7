from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

SERIES_TITLES = {"totalCases": "Total Cases", "totalDeaths": "Total Deaths"}
SERIES_COLORS = ["rgb(75, 192, 192)", "rgb(255, 99, 132)"]


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def totals_trend_chart(points: pd.DataFrame) -> alt.Chart:
    """Daily line chart of global total cases and deaths; `points` has date/totalCases/totalDeaths."""
    long_df = points.melt(
        id_vars="date", value_vars=list(SERIES_TITLES), var_name="metric", value_name="count"
    )
    long_df["metric"] = long_df["metric"].map(SERIES_TITLES)
    hover = alt.selection_point(fields=["metric"], on="mouseover", empty=True)
    return (
        alt.Chart(long_df)
        .mark_line(point=False)
        .encode(
            x=alt.X("date:T", title=None, axis=alt.Axis(format="%m/%d/%Y", grid=False)),
            y=alt.Y("count:Q", title="Count", axis=alt.Axis(format="~s", gridDash=[4, 4])),
            color=alt.Color(
                "metric:N",
                title=None,
                scale=alt.Scale(domain=list(SERIES_TITLES.values()), range=SERIES_COLORS),
            ),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.2)),
            tooltip=[
                alt.Tooltip("date:T", title="Date", format="%m/%d/%Y"),
                alt.Tooltip("metric:N", title="Metric"),
                alt.Tooltip("count:Q", title="Count", format=","),
            ],
        )
        .add_params(hover)
        .properties(width=1200, height=400)
    )
