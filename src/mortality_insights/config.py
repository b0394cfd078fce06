"""
Configuration settings and constants for Mortality Insights.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Engine defaults, overridable through MORTALITY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MORTALITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Clustering
    default_clusters: int = Field(default=3, ge=1)
    max_iterations: int = Field(default=100, ge=1)

    # Forecasting
    forecast_horizon: int = Field(default=5, ge=0)
    confidence_z: float = Field(default=1.96, gt=0)

    # Rankings
    top_n: int = Field(default=10, ge=1)


settings = Settings()


# =============================================================================
# RECORD BOUNDS
# =============================================================================

# Fixed by the data model, not configurable
MIN_YEAR = 1985
MAX_YEAR = 2025


# =============================================================================
# ENUMS
# =============================================================================


class Region(str, Enum):
    """Broad regions used for the year-trend breakdown."""

    NORTH_AMERICA = "North America"
    EUROPE = "Europe"
    ASIA = "Asia"
    OCEANIA = "Oceania"
    SOUTH_AMERICA = "South America"
    OTHER = "Other"


# =============================================================================
# REGION MAPPING
# =============================================================================

# Lower-case substrings matched against the country name, checked in order
REGION_KEYWORDS: dict[Region, tuple[str, ...]] = {
    Region.NORTH_AMERICA: ("united states", "canada", "mexico"),
    Region.EUROPE: (
        "united kingdom",
        "france",
        "germany",
        "italy",
        "spain",
        "poland",
        "russia",
    ),
    Region.ASIA: ("china", "japan", "south korea", "india", "thailand"),
    Region.OCEANIA: ("australia", "new zealand"),
    Region.SOUTH_AMERICA: ("brazil", "argentina", "chile"),
}


def get_region(country: str) -> Region:
    """Map a country name to its broad region, or Region.OTHER."""
    name = country.lower()
    for region, keywords in REGION_KEYWORDS.items():
        if any(keyword in name for keyword in keywords):
            return region
    return Region.OTHER


# =============================================================================
# REGRESSION PREDICTORS
# =============================================================================

# Predictor name -> substring searched for in the record's age label
AGE_BANDS: dict[str, str] = {
    "age_15_24": "15-24",
    "age_25_34": "25-34",
    "age_35_54": "35-54",
    "age_55_74": "55-74",
    "age_75_plus": "75+",
}

AVAILABLE_PREDICTORS: dict[str, str] = {
    "gdp_per_capita": "GDP per capita",
    "year": "Year",
    "population": "Population (log)",
    "sex_male": "Male",
    "age_15_24": "Age 15-24",
    "age_25_34": "Age 25-34",
    "age_35_54": "Age 35-54",
    "age_55_74": "Age 55-74",
    "age_75_plus": "Age 75+",
}
