from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import numpy as np

from covid_core.data import format_fixed

# Below this a rate is shown as "<0.0001"; also the placeholder for non-finite rates.
RATE_FLOOR = 0.0001

_FIELD_ALIASES = {
    "cases": ("cases",),
    "deaths": ("deaths",),
    "population": ("pop_data_2019", "popData2019"),
}


@dataclass(frozen=True)
class RateResult:
    numeric_value: float
    display_value: str


ZERO_RATE = RateResult(numeric_value=0, display_value="0")


def _field(record: Any, name: str) -> Optional[Any]:
    for attr in _FIELD_ALIASES[name]:
        if isinstance(record, Mapping):
            if attr in record:
                return record[attr]
        elif hasattr(record, attr):
            return getattr(record, attr)
    return None


def calculate_per_1000(record: Any, for_deaths: bool = False) -> RateResult:
    """Cases (or deaths) per 1000 inhabitants of `record`.

    Absent record, a zero count or an unknown population give 0 / "0". A zero
    population gives the non-finite placeholder 0.0001 / "0"; rates under
    0.0001 display as "<0.0001", everything else with 4 decimals.
    """
    if record is None:
        return ZERO_RATE
    count = _field(record, "deaths" if for_deaths else "cases")
    population = _field(record, "population")
    if count is None or population is None:
        return ZERO_RATE

    # float() rejects lists and dicts outright
    try:
        count_value = np.float64(float(count))
        population_value = np.float64(float(population))
    except (TypeError, ValueError, OverflowError):
        count_value = population_value = np.float64(np.nan)
    if count_value == 0:
        return ZERO_RATE

    with np.errstate(divide="ignore", invalid="ignore"):
        per_1000 = count_value / (population_value / 1000)

    if not np.isfinite(per_1000):
        return RateResult(numeric_value=RATE_FLOOR, display_value="0")
    value = float(per_1000)
    if value < RATE_FLOOR:
        return RateResult(numeric_value=value, display_value="<0.0001")
    return RateResult(numeric_value=value, display_value=format_fixed(value, 4))
