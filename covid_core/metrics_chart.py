from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from covid_core.charts import to_vega_spec, totals_trend_chart
from covid_core.filters import FilterState
from covid_core.view import chart_series


def compute_chart(filters: FilterState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    series = chart_series(ctx.get("time_series", ()), filters.start_date, filters.end_date)
    points = [{**point.to_record(), "date": day.isoformat()} for day, point in series]
    if not points:
        return {"filters": filters.to_dict(), "points": [], "charts": {}}

    df = pd.DataFrame(points)
    df["date"] = pd.to_datetime(df["date"])
    return {
        "filters": filters.to_dict(),
        "points": points,
        "charts": {"totals_trend": to_vega_spec(totals_trend_chart(df))},
    }
