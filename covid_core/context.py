from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Optional, Sequence

from covid_core.aggregations import (
    compute_country_totals,
    compute_daily_stats,
    compute_time_series,
    merge_records,
)
from covid_core.config import settings
from covid_core.data import RawRecord, fetch_records, parse_records
from covid_core.filters import FilterState, normalize_filters
from covid_core.view import date_bounds, filter_rows, sort_rows, unique_countries


logger = logging.getLogger(__name__)


def build_dashboard_data(records: Sequence[RawRecord]) -> Dict[str, object]:
    """Build the lookup tables from `records`, then merge them into rows once."""
    country_totals = compute_country_totals(records)
    daily_stats = compute_daily_stats(records)
    time_series = compute_time_series(records)
    rows = merge_records(records, country_totals, daily_stats)

    bounds = date_bounds(r.date_rep for r in records)
    countries = unique_countries(rows)
    logger.info(
        "Loaded %d records (%d countries, %d dates)", len(records), len(countries), len(time_series)
    )
    return {
        "records": tuple(records),
        "rows": rows,
        "time_series": tuple(time_series),
        "countries": countries,
        "date_bounds": bounds,
    }


# ---------------- Public API ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(url: str) -> Dict[str, object]:
    return build_dashboard_data(parse_records(fetch_records(url)))


def load_dashboard_data(url: Optional[str] = None) -> Dict[str, object]:
    return _load_dashboard_data_cached(url or settings.data_url)


def prepare_context(filters: dict | FilterState, data_ctx: Dict[str, object]) -> Dict[str, object]:
    rows = data_ctx.get("rows", ())
    bounds = data_ctx.get("date_bounds") or (None, None)
    filt = filters if isinstance(filters, FilterState) else normalize_filters(filters, date_bounds=bounds)

    filtered_rows = sort_rows(filter_rows(rows, filt), filt.sort_column, filt.sort_direction)
    return {
        "filters": filt,
        "rows": rows,
        "filtered_rows": filtered_rows,
        "time_series": data_ctx.get("time_series", ()),
        "countries": data_ctx.get("countries", []),
        "date_bounds": bounds,
    }
