"""
Summary report combining every analysis into one structure.
"""

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from mortality_insights.core.aggregation import (
    CountryRate,
    GenerationStats,
    generation_stats,
    top_countries,
    year_trends,
)
from mortality_insights.core.clustering import kmeans
from mortality_insights.core.numerics import safe_divide
from mortality_insights.core.records import Record
from mortality_insights.core.statistics import (
    CorrelationResult,
    Statistics,
    analyze_correlations,
    compute_statistics,
)
from mortality_insights.exceptions import InsufficientDataError

logger = logging.getLogger(__name__)

SUMMARY_TOP_N = 5


@dataclass
class SummaryReport:
    """Key findings for a record set."""
    record_count: int
    country_count: int
    first_year: int
    last_year: int
    total_suicides: int
    rate_statistics: Statistics
    highest_countries: list[CountryRate]
    lowest_countries: list[CountryRate]
    highest_risk_generation: GenerationStats | None
    generation_rate_spread: float
    trend_direction: str
    trend_percent: float
    gdp_correlation: CorrelationResult
    cluster_count: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_count": self.record_count,
            "country_count": self.country_count,
            "first_year": self.first_year,
            "last_year": self.last_year,
            "total_suicides": self.total_suicides,
            "rate_statistics": self.rate_statistics.to_dict(),
            "highest_countries": [c.to_dict() for c in self.highest_countries],
            "lowest_countries": [c.to_dict() for c in self.lowest_countries],
            "highest_risk_generation": (
                self.highest_risk_generation.to_dict() if self.highest_risk_generation else None
            ),
            "generation_rate_spread": self.generation_rate_spread,
            "trend_direction": self.trend_direction,
            "trend_percent": self.trend_percent,
            "gdp_correlation": self.gdp_correlation.to_dict(),
            "cluster_count": self.cluster_count,
        }


def _trend(first_rate: float, last_rate: float) -> tuple[str, float]:
    if last_rate > first_rate:
        direction = "increasing"
    elif last_rate < first_rate:
        direction = "decreasing"
    else:
        direction = "stable"
    percent = abs(safe_divide(last_rate - first_rate, first_rate) * 100)
    return direction, round(percent, 2)


def build_summary(
    records: Sequence[Record],
    k: int | None = None,
    rng: np.random.Generator | None = None,
) -> SummaryReport | None:
    """
    Summarise a record set.

    Args:
        records: Record set.
        k: Cluster count for the clustering insight (settings.default_clusters if None).
        rng: Random generator passed to k-means.

    Returns:
        SummaryReport, or None for an empty record set.
    """
    if not records:
        return None

    top = top_countries(records, SUMMARY_TOP_N)
    generations = generation_stats(records)
    trends = year_trends(records)
    correlations = analyze_correlations(records)

    direction, percent = _trend(trends[0].global_rate, trends[-1].global_rate)

    spread = 0.0
    if generations:
        rates = [g.avg_rate for g in generations]
        spread = max(rates) - min(rates)

    try:
        cluster_count = kmeans(records, k, rng=rng).effective_clusters
    except InsufficientDataError as e:
        logger.info("Skipping clustering in summary: %s", e)
        cluster_count = None

    gdp_correlation = next(c for c in correlations if c.variable2 == "GDP per Capita")

    return SummaryReport(
        record_count=len(records),
        country_count=len({r.country for r in records}),
        first_year=min(r.year for r in records),
        last_year=max(r.year for r in records),
        total_suicides=sum(r.suicides_no for r in records),
        rate_statistics=compute_statistics([r.suicides_per_100k for r in records]),
        highest_countries=top.highest,
        lowest_countries=top.lowest,
        highest_risk_generation=generations[0] if generations else None,
        generation_rate_spread=spread,
        trend_direction=direction,
        trend_percent=percent,
        gdp_correlation=gdp_correlation,
        cluster_count=cluster_count,
    )
