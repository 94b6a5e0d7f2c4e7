"""Shared fixtures: a small ECDC-shaped payload and the data context built from it."""

import pytest

from covid_core.context import build_dashboard_data
from covid_core.data import parse_records


@pytest.fixture
def raw_records() -> list[dict]:
    """Three countries over three days, in the upstream (newest first) order."""
    return [
        {"dateRep": "03/01/2020", "cases": 30, "deaths": 3, "countriesAndTerritories": "Spain", "popData2019": 1_000_000},
        {"dateRep": "02/01/2020", "cases": 20, "deaths": 2, "countriesAndTerritories": "Spain", "popData2019": 1_000_000},
        {"dateRep": "01/01/2020", "cases": 10, "deaths": 1, "countriesAndTerritories": "Spain", "popData2019": 1_000_000},
        {"dateRep": "03/01/2020", "cases": 6, "deaths": 0, "countriesAndTerritories": "Albania", "popData2019": 2_000_000},
        {"dateRep": "02/01/2020", "cases": 4, "deaths": 0, "countriesAndTerritories": "Albania", "popData2019": 2_000_000},
        {"dateRep": "01/01/2020", "cases": 0, "deaths": 0, "countriesAndTerritories": "Albania", "popData2019": 2_000_000},
        {"dateRep": "03/01/2020", "cases": 1, "deaths": 1, "countriesAndTerritories": "Chile", "popData2019": None},
    ]


@pytest.fixture
def records(raw_records):
    return parse_records(raw_records)


@pytest.fixture
def data_ctx(records) -> dict:
    return build_dashboard_data(records)
