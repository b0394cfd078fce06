"""
Statistical Analysis Module.

Provides statistical analysis capabilities:
- Descriptive statistics
- Pearson correlation with strength banding
- Fixed-pair correlation analysis of a record set
"""

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
import pandas as pd

from mortality_insights.core.numerics import round2, safe_divide
from mortality_insights.core.records import Record

logger = logging.getLogger(__name__)


@dataclass
class Statistics:
    """Descriptive statistics for a series of values."""
    mean: float
    median: float
    std_dev: float
    min: float
    max: float
    total: float

    def to_dict(self) -> dict[str, float]:
        return {
            "mean": self.mean,
            "median": self.median,
            "std_dev": self.std_dev,
            "min": self.min,
            "max": self.max,
            "total": self.total,
        }


@dataclass
class CorrelationResult:
    """Result of correlation analysis."""
    variable1: str
    variable2: str
    coefficient: float

    @property
    def strength(self) -> str:
        return correlation_strength(self.coefficient)

    def to_dict(self) -> dict[str, Any]:
        return {
            "variable1": self.variable1,
            "variable2": self.variable2,
            "coefficient": self.coefficient,
            "strength": self.strength,
        }


def compute_statistics(values: Sequence[float] | np.ndarray | pd.Series) -> Statistics:
    """
    Calculate descriptive statistics.

    The standard deviation is the population form (divides by N). Mean,
    median and standard deviation are rounded to 2 decimals; min, max and
    total are returned unrounded.

    Args:
        values: Numeric values.

    Returns:
        Statistics object; all zeros for an empty input.
    """
    arr = np.asarray(values, dtype=float)

    if arr.size == 0:
        return Statistics(mean=0.0, median=0.0, std_dev=0.0, min=0.0, max=0.0, total=0.0)

    return Statistics(
        mean=round2(np.mean(arr)),
        median=round2(np.median(arr)),
        std_dev=round2(np.std(arr)),
        min=float(np.min(arr)),
        max=float(np.max(arr)),
        total=float(np.sum(arr)),
    )


def pearson(
    x: Sequence[float] | np.ndarray | pd.Series,
    y: Sequence[float] | np.ndarray | pd.Series,
) -> float:
    """
    Pearson correlation coefficient.

    Returns 0 when the series differ in length, are empty, or either
    series has no variance.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if x.size != y.size or x.size == 0:
        return 0.0

    # Constant series: no correlation
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    denominator = float(np.sqrt(np.sum(dx * dx) * np.sum(dy * dy)))
    r = safe_divide(float(np.sum(dx * dy)), denominator, default=0.0)

    return float(np.clip(r, -1.0, 1.0))


def correlation_strength(coefficient: float) -> str:
    r = abs(coefficient)
    if r >= 0.7:
        return "Strong"
    elif r >= 0.4:
        return "Moderate"
    elif r >= 0.2:
        return "Weak"
    else:
        return "Very Weak"


def correlate(
    x: Sequence[float] | np.ndarray | pd.Series,
    y: Sequence[float] | np.ndarray | pd.Series,
    variable1: str = "x",
    variable2: str = "y",
) -> CorrelationResult:
    """
    Correlate two arbitrary series.

    Args:
        x: First variable.
        y: Second variable.
        variable1: Label for x.
        variable2: Label for y.

    Returns:
        CorrelationResult with the coefficient rounded to 3 decimals.
    """
    return CorrelationResult(
        variable1=variable1,
        variable2=variable2,
        coefficient=round(pearson(x, y), 3),
    )


def analyze_correlations(records: Sequence[Record]) -> list[CorrelationResult]:
    """Correlate suicide rate with GDP per capita and with population."""
    rates = [r.suicides_per_100k for r in records]
    gdp = [r.gdp_per_capita for r in records]
    population = [r.population for r in records]

    results = [
        correlate(rates, gdp, "Suicide Rate", "GDP per Capita"),
        correlate(rates, population, "Suicide Rate", "Population"),
    ]
    logger.debug(
        "Correlations over %d records: %s",
        len(records),
        ", ".join(f"{c.variable2}={c.coefficient}" for c in results),
    )
    return results


def correlations_frame(results: Sequence[CorrelationResult]) -> pd.DataFrame:
    """Tabulate correlation results."""
    return pd.DataFrame([c.to_dict() for c in results])
