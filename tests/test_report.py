"""
Tests for the summary report and configuration.
"""

import numpy as np
import pytest

from mortality_insights.config import MAX_YEAR, MIN_YEAR, Settings, settings
from mortality_insights.core.report import build_summary


class TestBuildSummary:
    def test_empty(self):
        assert build_summary([]) is None

    def test_overview(self, mixed_records):
        report = build_summary(mixed_records, rng=np.random.default_rng(0))
        assert report.record_count == 7
        assert report.country_count == 4
        assert (report.first_year, report.last_year) == (2000, 2002)
        assert report.total_suicides == 692
        assert report.rate_statistics.max == 30.0

    def test_findings(self, mixed_records):
        report = build_summary(mixed_records, rng=np.random.default_rng(0))
        assert report.highest_countries[0].country == "Japan"
        assert report.lowest_countries[0].country == "Brazil"
        assert report.highest_risk_generation.generation == "Generation X"
        assert report.generation_rate_spread == pytest.approx(12.0)
        # 16.0 in 2000 to 20.0 in 2002
        assert report.trend_direction == "increasing"
        assert report.trend_percent == 25.0
        assert report.gdp_correlation.variable2 == "GDP per Capita"
        assert 1 <= report.cluster_count <= 3

    def test_cluster_count_defaults_to_settings(self, mixed_records, monkeypatch):
        monkeypatch.setattr(settings, "default_clusters", 1)
        report = build_summary(mixed_records, rng=np.random.default_rng(0))
        assert report.cluster_count == 1

    def test_to_dict(self, mixed_records):
        data = build_summary(mixed_records, rng=np.random.default_rng(0)).to_dict()
        assert data["highest_risk_generation"]["generation"] == "Generation X"
        assert data["rate_statistics"]["max"] == 30.0


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.default_clusters == 3
        assert s.max_iterations == 100
        assert s.confidence_z == 1.96

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MORTALITY_MAX_ITERATIONS", "7")
        monkeypatch.setenv("MORTALITY_FORECAST_HORIZON", "2")
        s = Settings(_env_file=None)
        assert s.max_iterations == 7
        assert s.forecast_horizon == 2

    def test_year_bounds_are_fixed(self, monkeypatch):
        monkeypatch.setenv("MORTALITY_MAX_YEAR", "2040")
        s = Settings(_env_file=None)
        assert not hasattr(s, "max_year")
        assert (MIN_YEAR, MAX_YEAR) == (1985, 2025)
