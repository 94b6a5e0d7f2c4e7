from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Any, Iterable, List, Optional

import requests
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from covid_core.config import settings


logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class RawRecord(BaseModel):
    """One country/day observation as published in the ECDC case distribution."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    country: str = Field(validation_alias=AliasChoices("country", "countriesAndTerritories"))
    date_rep: str = Field(default="", validation_alias=AliasChoices("date_rep", "dateRep"))
    cases: int = 0
    deaths: int = 0
    pop_data_2019: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("pop_data_2019", "popData2019")
    )

    @field_validator("cases", "deaths", mode="before")
    @classmethod
    def _missing_count_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class RecordsEnvelope(BaseModel):
    records: List[Any] = Field(default_factory=list)


# ---------------- Fetch ----------------
def fetch_records(url: Optional[str] = None, timeout: Optional[float] = None) -> List[Any]:
    """GET the JSON envelope and return its raw `records` list ([] on failure)."""
    url = url or settings.data_url
    try:
        response = requests.get(url, timeout=timeout or settings.request_timeout)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError):
        logger.exception("Error fetching data from %s", url)
        return []

    try:
        envelope = RecordsEnvelope.model_validate(payload)
    except ValidationError:
        logger.exception("Unexpected payload shape from %s", url)
        return []
    return envelope.records


def parse_records(raw: Iterable[Any]) -> List[RawRecord]:
    records: List[RawRecord] = []
    dropped = 0
    for item in raw:
        try:
            records.append(RawRecord.model_validate(item))
        except ValidationError:
            dropped += 1
    if dropped:
        logger.warning("Dropped %d invalid records out of %d", dropped, dropped + len(records))
    return records


# ---------------- Number / date helpers ----------------
def format_fixed(value: object, digits: int) -> str:
    """Fixed-point string with `digits` decimals, rounding half up (e.g. 15 -> '15.0000')."""
    number = float(value)  # type: ignore[arg-type]
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    q = Decimal(10) ** -digits
    return str(Decimal(str(number)).quantize(q, rounding=ROUND_HALF_UP))


def as_number(value: object) -> float:
    """Numeric coercion with browser semantics: blank -> 0, junk -> nan."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).strip()
    if not s:
        return 0.0
    if not re.fullmatch(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", s):
        return math.nan
    return float(s)


def parse_float_prefix(value: object) -> float:
    """Parse the leading number of a string ('12abc' -> 12.0), nan when there is none."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return math.nan
    return float(match.group(0))


@lru_cache(maxsize=4096)
def parse_record_date(value: str) -> Optional[date]:
    """Parse a day/month/year `dateRep` string; None when it is not a calendar date."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError):
        return None
