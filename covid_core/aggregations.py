from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from covid_core.data import RawRecord, format_fixed
from covid_core.rates import calculate_per_1000


FRAME_COLUMNS = ["country", "date", "cases", "deaths"]

# Table precision differs between the stored per-1000 rates and the daily stats.
RATE_DIGITS = 5
DAILY_DIGITS = 4


@dataclass(frozen=True)
class CountryTotals:
    total_cases: int
    total_deaths: int


@dataclass(frozen=True)
class DailyStats:
    average_cases: str
    average_deaths: str
    max_cases: str
    max_deaths: str


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: str
    total_cases: int
    total_deaths: int

    def to_record(self) -> Dict[str, Any]:
        return {"date": self.date, "totalCases": self.total_cases, "totalDeaths": self.total_deaths}


@dataclass(frozen=True)
class ObservationRow:
    """One displayed table row: a record plus its rates, country totals and daily stats."""

    country: str
    cases: int
    deaths: int
    date: str
    cases_per_1000: str
    deaths_per_1000: str
    total_cases: Optional[int] = None
    total_deaths: Optional[int] = None
    average_cases: Optional[str] = None
    average_deaths: Optional[str] = None
    max_cases: Optional[str] = None
    max_deaths: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "cases": self.cases,
            "deaths": self.deaths,
            "date": self.date,
            "casesPer1000": self.cases_per_1000,
            "deathsPer1000": self.deaths_per_1000,
            "totalCases": self.total_cases,
            "totalDeaths": self.total_deaths,
            "averageCases": self.average_cases,
            "averageDeaths": self.average_deaths,
            "maxCases": self.max_cases,
            "maxDeaths": self.max_deaths,
        }


def records_frame(records: Sequence[RawRecord]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(
        {
            "country": [r.country for r in records],
            "date": [r.date_rep for r in records],
            "cases": [r.cases for r in records],
            "deaths": [r.deaths for r in records],
        }
    )


def compute_country_totals(records: Sequence[RawRecord]) -> Dict[str, CountryTotals]:
    """Sum cases/deaths per exact country string (not a running sum)."""
    df = records_frame(records)
    if df.empty:
        return {}
    sums = df.groupby("country", sort=False)[["cases", "deaths"]].sum()
    return {
        str(row.Index): CountryTotals(total_cases=int(row.cases), total_deaths=int(row.deaths))
        for row in sums.itertuples()
    }


def compute_daily_stats(records: Sequence[RawRecord]) -> Dict[str, DailyStats]:
    """Cross-country mean and max per raw date string, formatted to 4 decimals."""
    df = records_frame(records)
    if df.empty:
        return {}
    stats = df.groupby("date", sort=False).agg(
        average_cases=("cases", "mean"),
        average_deaths=("deaths", "mean"),
        max_cases=("cases", "max"),
        max_deaths=("deaths", "max"),
    )
    return {
        str(row.Index): DailyStats(
            average_cases=format_fixed(row.average_cases, DAILY_DIGITS),
            average_deaths=format_fixed(row.average_deaths, DAILY_DIGITS),
            max_cases=format_fixed(row.max_cases, DAILY_DIGITS),
            max_deaths=format_fixed(row.max_deaths, DAILY_DIGITS),
        )
        for row in stats.itertuples()
    }


def compute_time_series(records: Sequence[RawRecord]) -> List[TimeSeriesPoint]:
    """Global cases/deaths per date, in order of first appearance (not date order)."""
    df = records_frame(records)
    if df.empty:
        return []
    sums = df.groupby("date", sort=False)[["cases", "deaths"]].sum()
    return [
        TimeSeriesPoint(date=str(row.Index), total_cases=int(row.cases), total_deaths=int(row.deaths))
        for row in sums.itertuples()
    ]


def merge_records(
    records: Sequence[RawRecord],
    country_totals: Mapping[str, CountryTotals],
    daily_stats: Mapping[str, DailyStats],
) -> Tuple[ObservationRow, ...]:
    rows: List[ObservationRow] = []
    for record in records:
        totals = country_totals.get(record.country)
        stats = daily_stats.get(record.date_rep)
        rows.append(
            ObservationRow(
                country=record.country,
                cases=record.cases,
                deaths=record.deaths,
                date=record.date_rep,
                cases_per_1000=format_fixed(calculate_per_1000(record).numeric_value, RATE_DIGITS),
                deaths_per_1000=format_fixed(calculate_per_1000(record, for_deaths=True).numeric_value, RATE_DIGITS),
                total_cases=totals.total_cases if totals else None,
                total_deaths=totals.total_deaths if totals else None,
                average_cases=stats.average_cases if stats else None,
                average_deaths=stats.average_deaths if stats else None,
                max_cases=stats.max_cases if stats else None,
                max_deaths=stats.max_deaths if stats else None,
            )
        )
    return tuple(rows)
