"""
Record data model.

A Record is one observation: a country, a year and a demographic slice
(sex, age band, generation) with its suicide count, population, rate per
100,000 and GDP per capita. Records validate themselves on construction
and are immutable afterwards.
"""

import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Iterable

import pandas as pd

from mortality_insights.config import MAX_YEAR, MIN_YEAR
from mortality_insights.exceptions import RecordValidationError

UNKNOWN_GENERATION = "Unknown"


@dataclass(frozen=True)
class Record:
    """A single validated mortality observation."""
    country: str
    year: int
    sex: str
    age: str
    suicides_no: int
    population: int
    suicides_per_100k: float
    gdp_per_capita: float
    generation: str = UNKNOWN_GENERATION
    id: str = ""

    def __post_init__(self) -> None:
        for name in ("country", "sex", "age"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise RecordValidationError(f"{name} must be a non-empty string")

        if not isinstance(self.year, int) or isinstance(self.year, bool):
            raise RecordValidationError(f"year must be an integer, got {self.year!r}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise RecordValidationError(f"year {self.year} outside {MIN_YEAR}-{MAX_YEAR}")

        for name in ("suicides_no", "population"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise RecordValidationError(f"{name} must be a non-negative integer")

        for name in ("suicides_per_100k", "gdp_per_capita"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise RecordValidationError(f"{name} must be numeric")
            if math.isnan(value) or math.isinf(value) or value < 0:
                raise RecordValidationError(f"{name} must be a finite non-negative number")

        if not isinstance(self.generation, str):
            raise RecordValidationError("generation must be a string")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


RECORD_COLUMNS = [f.name for f in fields(Record)]


def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """
    Convert records to a DataFrame with one column per Record field.

    Row order follows the input order.
    """
    rows = [r.to_dict() for r in records]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)
