"""
Data Cleaning Utilities.

Turns loosely-typed tabular rows (CSV dictionaries, DataFrame rows) into
validated Record objects:
- Required field checks (country, year, sex, age)
- Year range filtering
- Numeric coercion with zero fallback
- Rate derivation from counts and population
"""

import logging
import math
from typing import Any, Iterable, Mapping

import pandas as pd

from mortality_insights.config import MAX_YEAR, MIN_YEAR
from mortality_insights.core.numerics import safe_divide
from mortality_insights.core.records import UNKNOWN_GENERATION, Record
from mortality_insights.exceptions import RecordValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("country", "year", "sex", "age")

RATE_BASE = 100_000


def _is_missing(value: Any) -> bool:
    """True for None, NaN and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _to_number(value: Any) -> float | None:
    """Parse a finite float, or None if the value is not numeric."""
    if _is_missing(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_count(value: Any) -> int:
    """Non-negative integer, falling back to 0."""
    number = _to_number(value)
    if number is None or number < 0:
        return 0
    return int(number)


def coerce_amount(value: Any) -> float:
    """Non-negative float, falling back to 0.0."""
    number = _to_number(value)
    if number is None or number < 0:
        return 0.0
    return number


def coerce_year(value: Any) -> int | None:
    number = _to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def derive_rate(suicides_no: int, population: int) -> float:
    """Suicides per 100,000 population; 0 when population is 0."""
    return safe_divide(suicides_no * RATE_BASE, population, default=0.0)


def _has_required_fields(row: Mapping[str, Any]) -> bool:
    return all(not _is_missing(row.get(name)) for name in REQUIRED_FIELDS)


def _build_record(
    row: Mapping[str, Any], index: int, min_year: int, max_year: int
) -> Record | None:
    year = coerce_year(row.get("year"))
    if year is None or not min_year <= year <= max_year:
        return None

    suicides_no = coerce_count(row.get("suicides_no"))
    population = coerce_count(row.get("population"))

    rate = _to_number(row.get("suicides_per_100k"))
    if rate is None or rate < 0:
        rate = derive_rate(suicides_no, population)

    generation = row.get("generation")
    record_id = row.get("id")

    return Record(
        country=str(row["country"]).strip(),
        year=year,
        sex=str(row["sex"]).strip(),
        age=str(row["age"]).strip(),
        suicides_no=suicides_no,
        population=population,
        suicides_per_100k=rate,
        gdp_per_capita=coerce_amount(row.get("gdp_per_capita")),
        generation=UNKNOWN_GENERATION if _is_missing(generation) else str(generation).strip(),
        id=f"record-{index}" if _is_missing(record_id) else str(record_id).strip(),
    )


def clean_records(
    rows: Iterable[Mapping[str, Any]] | pd.DataFrame,
    min_year: int = MIN_YEAR,
    max_year: int = MAX_YEAR,
) -> list[Record]:
    """
    Validate and normalise raw rows into records.

    Rows missing country, year, sex or age, or whose year falls outside
    min_year..max_year, are dropped without raising. An empty list is a
    valid result.

    The window can only be narrowed: bounds are clamped to
    MIN_YEAR..MAX_YEAR so every kept row is a valid Record.

    Args:
        rows: Iterable of mappings (e.g. csv.DictReader output) or a DataFrame.
        min_year: First year kept.
        max_year: Last year kept.

    Returns:
        List of Record objects in input order.
    """
    if isinstance(rows, pd.DataFrame):
        rows = rows.to_dict(orient="records")

    min_year = max(min_year, MIN_YEAR)
    max_year = min(max_year, MAX_YEAR)

    records: list[Record] = []
    dropped = 0

    for row in rows:
        if not isinstance(row, Mapping) or not _has_required_fields(row):
            dropped += 1
            continue
        try:
            record = _build_record(row, len(records), min_year, max_year)
        except RecordValidationError as e:
            logger.debug("Dropping row: %s", e)
            record = None
        if record is None:
            dropped += 1
            continue
        records.append(record)

    if dropped:
        logger.debug("Dropped %d of %d rows during cleaning", dropped, dropped + len(records))

    return records
