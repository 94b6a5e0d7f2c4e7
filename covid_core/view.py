"""
View model
==========

Turns the merged observation rows plus a FilterState into exactly what the
table shows:

1) filter  -> country, date range and column-range clauses, AND-ed
2) sort    -> stable sort on one column, asc/desc
3) paginate -> 1-indexed page slice plus the page-number buttons

Also derives the country options, the column options and the date-sorted
series the chart needs. Everything here is pure: inputs are never mutated.
"""

from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass
from datetime import date
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from covid_core.aggregations import ObservationRow, TimeSeriesPoint
from covid_core.config import settings
from covid_core.data import as_number, parse_float_prefix, parse_record_date
from covid_core.filters import COLUMN_ATTRS, COLUMNS, FilterState

NUMERIC_SORT_COLUMNS = frozenset(
    {
        "totalCases",
        "totalDeaths",
        "casesPer1000",
        "deathsPer1000",
        "averageCases",
        "averageDeaths",
        "maxCases",
        "maxDeaths",
    }
)


@dataclass(frozen=True)
class PageButton:
    label: str
    page: int
    button_type: str  # "current" | "normal" | "ellipsis" | "double-arrow"


def row_value(row: ObservationRow, column: Optional[str]) -> Any:
    attr = COLUMN_ATTRS.get(column or "")
    return getattr(row, attr, None) if attr else None


# ---------------- Filter ----------------
def matches_filters(row: ObservationRow, filters: FilterState) -> bool:
    if filters.selected_country and row.country.strip().casefold() != filters.selected_country.casefold():
        return False

    row_date = parse_record_date(row.date)
    if row_date is None:
        return False
    if filters.start_date is not None and row_date < filters.start_date:
        return False
    if filters.end_date is not None and row_date > filters.end_date:
        return False

    if filters.selected_column:
        value = row_value(row, filters.selected_column)
        if value is None:
            return False
        # nan never satisfies a bound
        number = as_number(value)
        if filters.min_value is not None and not number >= filters.min_value:
            return False
        if filters.max_value is not None and not number <= filters.max_value:
            return False
    return True


def filter_rows(rows: Iterable[ObservationRow], filters: FilterState) -> List[ObservationRow]:
    return [row for row in rows if matches_filters(row, filters)]


# ---------------- Sort ----------------
def _sort_value(row: ObservationRow, column: str) -> Any:
    value = row_value(row, column)
    if column == "country":
        return value or ""
    if column in NUMERIC_SORT_COLUMNS:
        number = as_number(value)
        if math.isnan(number):
            number = parse_float_prefix(value)
            return 0.0 if math.isnan(number) else number
        return number
    return str(value) if value else ""


def collation_key(value: str) -> Tuple[str, str]:
    """Accent- and case-insensitive primary key, raw string as tie-break."""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), value


def _locale_compare(a: str, b: str) -> int:
    key_a, key_b = collation_key(a), collation_key(b)
    return (key_a > key_b) - (key_a < key_b)


def compare_values(a: Any, b: Any) -> int:
    """Numeric comparison, or locale string comparison when either side is not a number."""
    num_a, num_b = as_number(a), as_number(b)
    if math.isnan(num_a) or math.isnan(num_b):
        return _locale_compare(str(a), str(b))
    return (num_a > num_b) - (num_a < num_b)


def sort_rows(rows: Sequence[ObservationRow], column: Optional[str], direction: str = "asc") -> List[ObservationRow]:
    if not column:
        return list(rows)
    values = [_sort_value(row, column) for row in rows]
    sign = -1 if direction == "desc" else 1
    order = sorted(range(len(values)), key=cmp_to_key(lambda i, j: sign * compare_values(values[i], values[j])))
    return [rows[i] for i in order]


# ---------------- Paginate ----------------
def total_pages(row_count: int, items_per_page: int) -> int:
    if items_per_page <= 0:
        return 0
    return math.ceil(row_count / items_per_page)


def paginate(rows: Sequence[ObservationRow], current_page: int, items_per_page: int) -> List[ObservationRow]:
    return list(rows[(current_page - 1) * items_per_page : current_page * items_per_page])


def page_buttons(current_page: int, pages: int, max_page_buttons: Optional[int] = None) -> List[PageButton]:
    """Page-number window centred on `current_page` with first/last jumps and ellipses."""
    max_buttons = max_page_buttons or settings.max_page_buttons
    half = max_buttons // 2

    start = current_page - half
    end = current_page + half
    if start <= 0:
        start = 1
        end = min(max_buttons, pages)
    if end > pages:
        end = pages
        start = max(1, pages - max_buttons + 1)

    buttons: List[PageButton] = []
    if start > 1:
        buttons.append(PageButton(label="<<", page=1, button_type="double-arrow"))
        if start > 2:
            buttons.append(PageButton(label="...", page=start - 1, button_type="ellipsis"))

    for i in range(start, end + 1):
        buttons.append(PageButton(label=str(i), page=i, button_type="current" if i == current_page else "normal"))

    if end < pages:
        if end < pages - 1:
            buttons.append(PageButton(label="...", page=end + 1, button_type="ellipsis"))
        buttons.append(PageButton(label=">>", page=pages, button_type="double-arrow"))
    return buttons


# ---------------- Options / chart ----------------
def unique_countries(rows: Iterable[ObservationRow]) -> List[Dict[str, str]]:
    countries = dict.fromkeys(row.country for row in rows)
    return [{"value": c, "label": c} for c in countries]


def column_options() -> List[Dict[str, str]]:
    return [{"value": c, "label": c} for c in COLUMNS]


def date_bounds(dates: Iterable[str]) -> Tuple[Optional[date], Optional[date]]:
    parsed = [d for d in (parse_record_date(s) for s in dates) if d is not None]
    if not parsed:
        return None, None
    return min(parsed), max(parsed)


def chart_series(
    points: Iterable[TimeSeriesPoint],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Tuple[date, TimeSeriesPoint]]:
    """Parse, range-filter and date-sort time series points (aggregation order is first-seen)."""
    dated = []
    for point in points:
        day = parse_record_date(point.date)
        if day is None:
            continue
        if start_date is not None and day < start_date:
            continue
        if end_date is not None and day > end_date:
            continue
        dated.append((day, point))
    dated.sort(key=lambda item: item[0])
    return dated
