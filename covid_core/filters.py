from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

from covid_core.config import settings
from covid_core.data import parse_record_date


logger = logging.getLogger(__name__)

# Sortable/filterable column identifiers, in table order.
COLUMNS = [
    "cases",
    "deaths",
    "totalCases",
    "totalDeaths",
    "casesPer1000",
    "deathsPer1000",
    "averageCases",
    "averageDeaths",
    "maxCases",
    "maxDeaths",
]

# Column identifier -> ObservationRow attribute.
COLUMN_ATTRS = {
    "country": "country",
    "date": "date",
    "cases": "cases",
    "deaths": "deaths",
    "totalCases": "total_cases",
    "totalDeaths": "total_deaths",
    "casesPer1000": "cases_per_1000",
    "deathsPer1000": "deaths_per_1000",
    "averageCases": "average_cases",
    "averageDeaths": "average_deaths",
    "maxCases": "max_cases",
    "maxDeaths": "max_deaths",
}

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class FilterState:
    selected_country: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    selected_column: Optional[str] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    sort_column: Optional[str] = None
    sort_direction: str = "asc"
    current_page: int = 1
    items_per_page: int = field(default_factory=lambda: settings.items_per_page)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for key in ("start_date", "end_date"):
            if out[key] is not None:
                out[key] = out[key].isoformat()
        return out


def default_filters() -> FilterState:
    return FilterState()


def _as_date(value: object) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        return parse_record_date(s)


def _as_float(value: object, name: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric %s=%r", name, value)
        return None


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default


def normalize_filters(raw: dict, *, date_bounds: Optional[Tuple[Optional[date], Optional[date]]] = None) -> FilterState:
    """Build a FilterState from loosely typed UI input.

    Missing start/end dates fall back to `date_bounds` (the dataset's first and
    last day), which is how the date pickers are seeded on load.
    """
    lo, hi = date_bounds or (None, None)

    selected_country = str(raw.get("selected_country") or "")

    start_date = _as_date(raw.get("start_date")) or lo
    end_date = _as_date(raw.get("end_date")) or hi

    selected_column = raw.get("selected_column") or None
    if selected_column is not None and selected_column not in COLUMNS:
        logger.warning("Ignoring unknown filter column %r", selected_column)
        selected_column = None

    min_value = _as_float(raw.get("min_value"), "min_value")
    max_value = _as_float(raw.get("max_value"), "max_value")

    sort_column = raw.get("sort_column") or None
    sort_direction = str(raw.get("sort_direction") or "asc").lower()
    if sort_direction not in SORT_DIRECTIONS:
        sort_direction = "asc"

    items_per_page = max(1, _as_int(raw.get("items_per_page"), settings.items_per_page))
    if items_per_page > settings.large_page_warning:
        logger.warning("Large number of items per page (%d) may cause performance issues", items_per_page)
    current_page = max(1, _as_int(raw.get("current_page"), 1))

    return FilterState(
        selected_country=selected_country,
        start_date=start_date,
        end_date=end_date,
        selected_column=selected_column,
        min_value=min_value,
        max_value=max_value,
        sort_column=sort_column,
        sort_direction=sort_direction,
        current_page=current_page,
        items_per_page=items_per_page,
    )


# ---------------- State transitions ----------------
def reset_filters(state: FilterState) -> FilterState:
    """Clear country and column filters; the date range and sort are kept."""
    return replace(
        state,
        selected_country="",
        selected_column=None,
        min_value=None,
        max_value=None,
        items_per_page=settings.items_per_page,
        current_page=1,
    )


def toggle_sort(state: FilterState, column: str) -> FilterState:
    if state.sort_column == column:
        direction = "desc" if state.sort_direction == "asc" else "asc"
        return replace(state, sort_direction=direction)
    return replace(state, sort_column=column, sort_direction="asc")


def with_filters(state: FilterState, **changes: Any) -> FilterState:
    """Apply filter changes and go back to the first page."""
    return replace(state, current_page=1, **changes)


def go_to_page(state: FilterState, page: int) -> FilterState:
    return replace(state, current_page=max(1, int(page)))
