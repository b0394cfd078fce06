"""
Aggregation Layer.

Grouping utilities shared by the analysis engines:
- Per-country rates and rankings
- Generation cohort summaries
- Year-over-year trends, optionally broken down by region
- Shares of total suicides by sex, age band or country
- Per-country clustering features and yearly mean rates
"""

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
import pandas as pd

from mortality_insights.config import get_region, settings
from mortality_insights.core.numerics import safe_divide
from mortality_insights.core.records import Record, records_to_frame

RATE = "suicides_per_100k"

CLUSTER_FEATURES = ["avg_rate", "avg_gdp_thousands", "trend"]

BREAKDOWN_FIELDS = ("sex", "age", "country")


@dataclass
class CountryRate:
    """Average rate and totals for one country."""
    country: str
    avg_rate: float
    total_suicides: int
    years: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "country": self.country,
            "avg_rate": self.avg_rate,
            "total_suicides": self.total_suicides,
            "years": self.years,
        }


@dataclass
class TopCountries:
    """Highest and lowest countries by average rate."""
    highest: list[CountryRate]
    lowest: list[CountryRate]

    def to_dict(self) -> dict[str, Any]:
        return {
            "highest": [c.to_dict() for c in self.highest],
            "lowest": [c.to_dict() for c in self.lowest],
        }


@dataclass
class GenerationStats:
    """Summary for one generation cohort."""
    generation: str
    avg_rate: float
    total_suicides: int
    count: int
    countries: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "avg_rate": self.avg_rate,
            "total_suicides": self.total_suicides,
            "count": self.count,
            "countries": self.countries,
        }


@dataclass
class YearTrend:
    """Mean rate for one year, with an optional per-region breakdown."""
    year: int
    global_rate: float
    by_region: dict[str, float] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "global_rate": self.global_rate,
            "by_region": self.by_region,
        }


@dataclass
class Share:
    """Suicide count of one group and its percentage of the total."""
    label: str
    total_suicides: int
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "total_suicides": self.total_suicides,
            "percentage": self.percentage,
        }


def country_rates(records: Sequence[Record]) -> list[CountryRate]:
    """
    Aggregate records per country.

    Countries appear in order of first occurrence.
    """
    df = records_to_frame(records)
    if df.empty:
        return []

    grouped = df.groupby("country", sort=False).agg(
        avg_rate=(RATE, "mean"),
        total_suicides=("suicides_no", "sum"),
        years=("year", "nunique"),
    )

    return [
        CountryRate(
            country=str(country),
            avg_rate=float(row.avg_rate),
            total_suicides=int(row.total_suicides),
            years=int(row.years),
        )
        for country, row in grouped.iterrows()
    ]


def top_countries(records: Sequence[Record], top_n: int | None = None) -> TopCountries:
    """
    Rank countries by average rate.

    Args:
        records: Record set.
        top_n: Number of countries on each side (settings.top_n if None).

    Returns:
        TopCountries; `highest` descending, `lowest` ascending.
    """
    n = top_n if top_n is not None else settings.top_n
    if n < 1:
        raise ValueError("top_n must be at least 1")

    ranked = sorted(country_rates(records), key=lambda c: c.avg_rate, reverse=True)

    return TopCountries(
        highest=ranked[:n],
        lowest=list(reversed(ranked[-n:])),
    )


def generation_stats(records: Sequence[Record]) -> list[GenerationStats]:
    """Summarise each generation cohort, highest average rate first."""
    df = records_to_frame(records)
    if df.empty:
        return []

    grouped = df.groupby("generation", sort=False).agg(
        avg_rate=(RATE, "mean"),
        total_suicides=("suicides_no", "sum"),
        count=(RATE, "size"),
        countries=("country", "nunique"),
    )
    grouped = grouped.sort_values("avg_rate", ascending=False, kind="mergesort")

    return [
        GenerationStats(
            generation=str(generation),
            avg_rate=float(row.avg_rate),
            total_suicides=int(row.total_suicides),
            count=int(row["count"]),
            countries=int(row.countries),
        )
        for generation, row in grouped.iterrows()
    ]


def year_trends(records: Sequence[Record], include_regions: bool = False) -> list[YearTrend]:
    """
    Mean rate per year, ascending by year.

    Args:
        records: Record set.
        include_regions: Also compute the mean rate per region for each year.

    Returns:
        List of YearTrend objects.
    """
    df = records_to_frame(records)
    if df.empty:
        return []

    global_rates = df.groupby("year")[RATE].mean().sort_index()

    regional: dict[int, dict[str, float]] = {}
    if include_regions:
        df["region"] = df["country"].map(lambda c: get_region(c).value)
        by_region = df.groupby(["year", "region"], sort=False)[RATE].mean()
        for (year, region), rate in by_region.items():
            regional.setdefault(int(year), {})[str(region)] = float(rate)

    return [
        YearTrend(
            year=int(year),
            global_rate=float(rate),
            by_region=regional.get(int(year), {}) if include_regions else None,
        )
        for year, rate in global_rates.items()
    ]


def breakdown(
    records: Sequence[Record],
    by: str,
    top_n: int | None = None,
) -> list[Share]:
    """
    Split total suicides by sex, age band or country.

    Args:
        records: Record set.
        by: Grouping field, one of "sex", "age" or "country".
        top_n: Keep only the largest groups (all if None).

    Returns:
        Shares sorted by total descending; ties keep first-occurrence order.
        Percentages are 0 when the overall total is 0.
    """
    if by not in BREAKDOWN_FIELDS:
        raise ValueError(f"by must be one of {BREAKDOWN_FIELDS}, got {by!r}")
    if top_n is not None and top_n < 1:
        raise ValueError("top_n must be at least 1")

    df = records_to_frame(records)
    if df.empty:
        return []

    totals = df.groupby(by, sort=False)["suicides_no"].sum()
    totals = totals.sort_values(ascending=False, kind="mergesort")
    if top_n is not None:
        totals = totals.head(top_n)

    overall = int(df["suicides_no"].sum())

    return [
        Share(
            label=str(label),
            total_suicides=int(count),
            percentage=safe_divide(int(count) * 100, overall),
        )
        for label, count in totals.items()
    ]


def yearly_mean_rates(records: Sequence[Record]) -> tuple[list[int], list[float]]:
    """Distinct years ascending with the mean rate of each."""
    trends = year_trends(records)
    return [t.year for t in trends], [t.global_rate for t in trends]


def country_features(records: Sequence[Record]) -> tuple[list[str], np.ndarray]:
    """
    Build per-country clustering features.

    Each country gets [average rate, average GDP / 1000, trend], where the
    trend is (last rate - first rate) / observation count taken in record
    order, and 0 for a country with a single observation.

    Returns:
        Tuple of (country names in first-occurrence order, n x 3 array).
    """
    df = records_to_frame(records)
    if df.empty:
        return [], np.empty((0, len(CLUSTER_FEATURES)))

    grouped = df.groupby("country", sort=False).agg(
        avg_rate=(RATE, "mean"),
        avg_gdp=("gdp_per_capita", "mean"),
        first_rate=(RATE, "first"),
        last_rate=(RATE, "last"),
        n=(RATE, "size"),
    )

    trend = np.where(
        grouped["n"] > 1,
        (grouped["last_rate"] - grouped["first_rate"]) / grouped["n"],
        0.0,
    )
    features = np.column_stack([
        grouped["avg_rate"].to_numpy(dtype=float),
        grouped["avg_gdp"].to_numpy(dtype=float) / 1000,
        trend.astype(float),
    ])

    return [str(c) for c in grouped.index], features


def to_dataframe(items: Sequence[Any]) -> pd.DataFrame:
    """Tabulate any list of aggregate dataclasses exposing to_dict()."""
    return pd.DataFrame([item.to_dict() for item in items])
