from covid_core.aggregations import (
    compute_country_totals,
    compute_daily_stats,
    compute_time_series,
    merge_records,
)
from covid_core.data import parse_records


def _records(*rows):
    return parse_records(
        {"countriesAndTerritories": c, "dateRep": d, "cases": cases, "deaths": deaths, "popData2019": 1_000_000}
        for c, d, cases, deaths in rows
    )


def test_daily_average_and_max():
    records = _records(("A", "01/01/2020", 10, 1), ("B", "01/01/2020", 20, 4))
    stats = compute_daily_stats(records)["01/01/2020"]
    assert stats.average_cases == "15.0000"
    assert stats.max_cases == "20.0000"
    assert stats.average_deaths == "2.5000"
    assert stats.max_deaths == "4.0000"


def test_daily_groups_by_exact_date_string():
    records = _records(("A", "05/03/2020", 10, 0), ("B", "5/3/2020", 20, 0))
    stats = compute_daily_stats(records)
    assert set(stats) == {"05/03/2020", "5/3/2020"}
    assert stats["5/3/2020"].average_cases == "20.0000"


def test_country_totals_broadcast_to_every_row():
    records = _records(("X", "01/01/2020", 1, 0), ("X", "02/01/2020", 2, 1), ("X", "03/01/2020", 3, 0), ("Y", "01/01/2020", 9, 9))
    totals = compute_country_totals(records)
    assert totals["X"].total_cases == 6
    assert totals["X"].total_deaths == 1

    rows = merge_records(records, totals, compute_daily_stats(records))
    assert [r.total_cases for r in rows if r.country == "X"] == [6, 6, 6]
    assert [r.total_cases for r in rows if r.country == "Y"] == [9]


def test_country_grouping_is_exact():
    records = _records(("Spain", "01/01/2020", 1, 0), ("spain ", "01/01/2020", 2, 0))
    assert set(compute_country_totals(records)) == {"Spain", "spain "}


def test_time_series_is_global_and_first_seen_ordered():
    records = _records(
        ("A", "02/01/2020", 5, 1),
        ("A", "01/01/2020", 3, 0),
        ("B", "02/01/2020", 7, 2),
        ("B", "not a date", 1, 0),
    )
    points = compute_time_series(records)
    assert [p.date for p in points] == ["02/01/2020", "01/01/2020", "not a date"]
    assert (points[0].total_cases, points[0].total_deaths) == (12, 3)
    assert points[0].to_record() == {"date": "02/01/2020", "totalCases": 12, "totalDeaths": 3}


def test_merge_uses_five_digit_rates():
    records = parse_records(
        [
            {"country": "A", "dateRep": "01/01/2020", "cases": 1, "deaths": 0, "popData2019": 2_000_000},
            {"country": "B", "dateRep": "01/01/2020", "cases": 3, "deaths": 1, "popData2019": 0},
        ]
    )
    rows = merge_records(records, compute_country_totals(records), compute_daily_stats(records))
    assert rows[0].cases_per_1000 == "0.00050"
    assert rows[0].deaths_per_1000 == "0.00000"
    # zero population keeps the non-finite placeholder
    assert rows[1].cases_per_1000 == "0.00010"
    assert rows[0].average_cases == rows[1].average_cases == "2.0000"
    assert rows[0].max_deaths == "1.0000"


def test_merge_missing_lookups_stay_unset():
    records = _records(("A", "01/01/2020", 1, 0))
    row = merge_records(records, {}, {})[0]
    assert row.total_cases is None
    assert row.average_cases is None
    assert row.to_record()["totalCases"] is None


def test_empty_input():
    assert compute_country_totals([]) == {}
    assert compute_daily_stats([]) == {}
    assert compute_time_series([]) == []
    assert merge_records([], {}, {}) == ()
