"""
Shared fixtures: record factories and small synthetic datasets.
"""

import pytest

from mortality_insights.core.records import Record


def make_record(
    country="Testland",
    year=2000,
    sex="male",
    age="15-24 years",
    suicides_no=10,
    population=100_000,
    suicides_per_100k=10.0,
    gdp_per_capita=20_000.0,
    generation="Generation X",
    id="",
):
    """Build a valid Record, overriding only what a test cares about."""
    return Record(
        country=country,
        year=year,
        sex=sex,
        age=age,
        suicides_no=suicides_no,
        population=population,
        suicides_per_100k=suicides_per_100k,
        gdp_per_capita=gdp_per_capita,
        generation=generation,
        id=id,
    )


def yearly_series(rates, start_year=1990, country="Testland"):
    """One record per year with the given rates."""
    return [
        make_record(country=country, year=start_year + i, suicides_per_100k=rate)
        for i, rate in enumerate(rates)
    ]


@pytest.fixture
def two_group_records():
    """
    Two well-separated country groups.

    Group A: low rate (about 5), high GDP (about 50k).
    Group B: high rate (about 40), low GDP (about 10k).
    """
    records = []
    for i, (rate, gdp) in enumerate([(5.0, 50_000), (5.5, 51_000), (4.5, 49_500), (5.2, 50_500)]):
        for year in (2000, 2001):
            records.append(make_record(
                country=f"A{i}", year=year, suicides_per_100k=rate, gdp_per_capita=gdp,
            ))
    for i, (rate, gdp) in enumerate([(40.0, 10_000), (41.0, 10_500), (39.5, 9_800), (40.5, 10_200)]):
        for year in (2000, 2001):
            records.append(make_record(
                country=f"B{i}", year=year, suicides_per_100k=rate, gdp_per_capita=gdp,
            ))
    return records


@pytest.fixture
def mixed_records():
    """A small multi-country, multi-generation dataset."""
    rows = [
        ("United States", 2000, "male", "15-24 years", 120, 1_000_000, 12.0, 45_000.0, "Millennials"),
        ("United States", 2001, "female", "25-34 years", 40, 1_000_000, 4.0, 46_000.0, "Generation X"),
        ("Japan", 2000, "male", "35-54 years", 300, 1_000_000, 30.0, 38_000.0, "Generation X"),
        ("Japan", 2001, "female", "55-74 years", 150, 1_000_000, 15.0, 39_000.0, "Boomers"),
        ("Brazil", 2000, "male", "75+ years", 60, 1_000_000, 6.0, 9_000.0, "Silent"),
        ("Brazil", 2001, "female", "15-24 years", 20, 1_000_000, 2.0, 9_500.0, "Millennials"),
        ("Iceland", 2002, "male", "25-34 years", 2, 10_000, 20.0, 52_000.0, "Generation X"),
    ]
    return [
        make_record(
            country=c, year=y, sex=s, age=a, suicides_no=n, population=p,
            suicides_per_100k=rate, gdp_per_capita=gdp, generation=g,
        )
        for c, y, s, a, n, p, rate, gdp, g in rows
    ]
