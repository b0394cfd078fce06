"""
Core analysis module for Mortality Insights.

Provides:
- Record model and data cleaning
- Descriptive statistics and correlation
- Aggregation by country, generation and year
- Multiple linear regression
- Country clustering
- Time series forecasting
- Summary reporting
"""

from mortality_insights.core.aggregation import (
    CountryRate,
    GenerationStats,
    Share,
    TopCountries,
    YearTrend,
    breakdown,
    country_features,
    country_rates,
    generation_stats,
    top_countries,
    year_trends,
    yearly_mean_rates,
)
from mortality_insights.core.clustering import (
    ClusterResult,
    CountryClusterer,
    kmeans,
)
from mortality_insights.core.records import Record, records_to_frame
from mortality_insights.core.regression import (
    RegressionModel,
    fit_linear_model,
)
from mortality_insights.core.report import SummaryReport, build_summary
from mortality_insights.core.statistics import (
    CorrelationResult,
    Statistics,
    analyze_correlations,
    compute_statistics,
    correlate,
    correlation_strength,
    pearson,
)
from mortality_insights.core.timeseries import (
    ForecastMethod,
    ForecastPoint,
    forecast,
    forecast_autoregressive,
    forecast_linear,
)
from mortality_insights.core.validation import clean_records

__all__ = [
    # Records
    "Record",
    "records_to_frame",
    "clean_records",
    # Statistics
    "Statistics",
    "CorrelationResult",
    "compute_statistics",
    "pearson",
    "correlate",
    "correlation_strength",
    "analyze_correlations",
    # Aggregation
    "CountryRate",
    "TopCountries",
    "GenerationStats",
    "YearTrend",
    "Share",
    "country_rates",
    "top_countries",
    "generation_stats",
    "year_trends",
    "breakdown",
    "yearly_mean_rates",
    "country_features",
    # Regression
    "RegressionModel",
    "fit_linear_model",
    # Clustering
    "ClusterResult",
    "CountryClusterer",
    "kmeans",
    # Time Series
    "ForecastMethod",
    "ForecastPoint",
    "forecast",
    "forecast_autoregressive",
    "forecast_linear",
    # Report
    "SummaryReport",
    "build_summary",
]
