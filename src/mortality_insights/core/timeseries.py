"""
Time Series Forecasting Module.

Short-horizon forecasts of the yearly mean suicide rate:
- Differenced AR(1) projection with widening confidence bands
- Least-squares linear trend extrapolation (fallback for short history)
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

import numpy as np
import pandas as pd

from mortality_insights.config import settings
from mortality_insights.core.aggregation import yearly_mean_rates
from mortality_insights.core.numerics import round2, safe_divide
from mortality_insights.core.records import Record

logger = logging.getLogger(__name__)

# Distinct years needed before the AR(1) model is used
MIN_AR_YEARS = 3


class ForecastMethod(str, Enum):
    """Available forecasting methods."""
    AUTOREGRESSIVE = "autoregressive"
    LINEAR = "linear"


@dataclass
class ForecastPoint:
    """Forecast for one future year with a 95% confidence band."""
    year: int
    predicted: float
    confidence_low: float
    confidence_high: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "predicted": self.predicted,
            "confidence_low": self.confidence_low,
            "confidence_high": self.confidence_high,
        }


def _point(year: int, predicted: float, margin: float) -> ForecastPoint:
    """Floor at 0 and round to 2 decimals."""
    return ForecastPoint(
        year=year,
        predicted=round2(max(0.0, predicted)),
        confidence_low=round2(max(0.0, predicted - margin)),
        confidence_high=round2(max(0.0, predicted + margin)),
    )


def linear_trend(years: Sequence[float], rates: Sequence[float]) -> tuple[float, float]:
    """
    Least-squares slope and intercept of rate on year.

    The slope is 0 when all years are equal.
    """
    x = np.asarray(years, dtype=float)
    y = np.asarray(rates, dtype=float)
    x_mean = x.mean()
    y_mean = y.mean()
    slope = safe_divide(float(np.sum((x - x_mean) * (y - y_mean))), float(np.sum((x - x_mean) ** 2)))
    return slope, y_mean - slope * x_mean


def estimate_ar1(series: Sequence[float]) -> float:
    """
    Zero-intercept AR(1) coefficient: sum(d_t * d_t-1) / sum(d_t-1 ** 2).

    Returns 0 for fewer than two values or a zero denominator.
    """
    d = np.asarray(series, dtype=float)
    if d.size < 2:
        return 0.0
    return safe_divide(float(np.sum(d[1:] * d[:-1])), float(np.sum(d[:-1] ** 2)))


def forecast_linear(
    years: Sequence[int],
    rates: Sequence[float],
    years_ahead: int,
    z: float | None = None,
) -> list[ForecastPoint]:
    """
    Extrapolate the least-squares trend line.

    The margin is z * std_error * sqrt(1 + 1/N) for every horizon, where
    std_error is the root mean squared residual.
    """
    if len(years) == 0 or years_ahead <= 0:
        return []
    z = z if z is not None else settings.confidence_z

    slope, intercept = linear_trend(years, rates)
    x = np.asarray(years, dtype=float)
    residuals = np.asarray(rates, dtype=float) - (slope * x + intercept)
    std_error = math.sqrt(float(np.mean(residuals ** 2)))
    margin = z * std_error * math.sqrt(1 + 1 / len(years))

    last_year = int(max(years))
    return [
        _point(last_year + i, slope * (last_year + i) + intercept, margin)
        for i in range(1, years_ahead + 1)
    ]


def forecast_autoregressive(
    years: Sequence[int],
    rates: Sequence[float],
    years_ahead: int,
    z: float | None = None,
) -> list[ForecastPoint]:
    """
    Project the differenced series with AR(1) and integrate back.

    Each projected difference is phi times the previous one and is added
    to the running level, starting from the last observed rate. The margin
    at horizon i is z * residual_std * sqrt(i). Falls back to the linear
    trend with fewer than three years.
    """
    if len(years) < MIN_AR_YEARS:
        logger.warning(
            "Only %d years of history, using linear trend instead of AR(1)", len(years)
        )
        return forecast_linear(years, rates, years_ahead, z)
    if years_ahead <= 0:
        return []
    z = z if z is not None else settings.confidence_z

    diffs = np.diff(np.asarray(rates, dtype=float))
    phi = estimate_ar1(diffs)

    residuals = diffs[1:] - phi * diffs[:-1]
    residual_std = math.sqrt(float(np.mean(residuals ** 2)))

    last_year = int(max(years))
    level = float(rates[-1])
    current_diff = float(diffs[-1])

    points = []
    for i in range(1, years_ahead + 1):
        current_diff = phi * current_diff
        level += current_diff
        margin = z * residual_std * math.sqrt(i)
        points.append(_point(last_year + i, level, margin))

    logger.debug("AR(1) phi=%.4f, residual std=%.4f over %d years", phi, residual_std, len(years))
    return points


def forecast(
    records: Sequence[Record],
    years_ahead: int | None = None,
    method: ForecastMethod | str = ForecastMethod.AUTOREGRESSIVE,
    z: float | None = None,
) -> list[ForecastPoint]:
    """
    Forecast the yearly mean suicide rate.

    Args:
        records: Record set.
        years_ahead: Horizon in years (settings.forecast_horizon if None).
        method: 'autoregressive' or 'linear'.
        z: Critical value for the confidence band (settings.confidence_z if None).

    Returns:
        One ForecastPoint per future year; empty if there is no history.
    """
    horizon = years_ahead if years_ahead is not None else settings.forecast_horizon
    if horizon < 0:
        raise ValueError(f"years_ahead must be non-negative, got {horizon}")
    method = ForecastMethod(method)

    years, rates = yearly_mean_rates(records)
    if len(years) == 0 or horizon == 0:
        return []

    if method == ForecastMethod.LINEAR:
        return forecast_linear(years, rates, horizon, z)
    return forecast_autoregressive(years, rates, horizon, z)


def forecast_frame(points: Sequence[ForecastPoint]) -> pd.DataFrame:
    """Tabulate forecast points."""
    return pd.DataFrame([p.to_dict() for p in points])
