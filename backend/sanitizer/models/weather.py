"""Weather models for per-destination forecast enrichment."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from .common import Geo


class ForecastSource(str, Enum):
    """Which data path produced a forecast summary."""

    forecast = "forecast"
    seasonal_ai = "seasonal-ai"


class FallbackReason(str, Enum):
    """Why a destination did not get a live forecast summary."""

    beyond_horizon = "beyond_horizon"
    past_range = "past_range"
    provider_error = "provider_error"
    empty_forecast = "empty_forecast"
    seasonal_failed = "seasonal_failed"
    geocode_not_found = "geocode_not_found"


class DateRange(BaseModel):
    """UTC calendar range, end exclusive."""

    start_date: date = Field(description="First day of the range")
    end_date: date = Field(description="Day after the last day of the range")

    @model_validator(mode="after")
    def _check_order(self) -> DateRange:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days

    def contains(self, day: date) -> bool:
        return self.start_date <= day < self.end_date


class DailyForecast(BaseModel):
    """One day of provider forecast data."""

    forecast_date: date = Field(description="Forecast day (UTC)")
    temp_min_c: float = Field(description="Minimum temperature in Celsius")
    temp_max_c: float = Field(description="Maximum temperature in Celsius")
    conditions: str = Field(default="Unknown", description="Condition label")
    description: str = Field(default="", description="Detailed description")
    precipitation_pct: float = Field(
        default=0.0, ge=0.0, le=100.0, description="Chance of precipitation (0-100)"
    )
    humidity_pct: float | None = Field(default=None, description="Relative humidity")
    wind_kmh: float | None = Field(default=None, description="Wind speed in km/h")
    icon: str | None = Field(default=None, description="Provider icon code")
    recommendations: list[str] = Field(
        default_factory=list, description="Activity advice for the day"
    )


class ForecastSummary(BaseModel):
    """Aggregated weather for one destination across the trip."""

    min_temp: float = Field(description="Lowest minimum temperature")
    max_temp: float = Field(description="Highest maximum temperature")
    avg_min: float = Field(description="Average daily minimum")
    avg_max: float = Field(description="Average daily maximum")
    conditions: str = Field(description="Dominant condition label")
    avg_precipitation: float = Field(description="Average chance of precipitation")
    recommendations: list[str] = Field(
        default_factory=list, description="Derived activity recommendations"
    )
    icon: str | None = Field(default=None, description="Representative icon code")
    unit: str = Field(default="C", description="Temperature unit")
    estimated: bool = Field(description="True for seasonal estimates")
    source: ForecastSource = Field(description="Data path that produced the summary")


class SeasonalSummary(BaseModel):
    """Climatological estimate returned by a seasonal estimator."""

    min_temp: float
    max_temp: float
    avg_min: float
    avg_max: float
    conditions: str = "Unknown"
    avg_precipitation: float = 0.0
    recommendations: list[str] = Field(default_factory=list)
    unit: str = "C"


class ForecastEntry(BaseModel):
    """Weather result for one destination; date_range is always present."""

    location: str = Field(description="Destination name")
    coordinates: Geo | None = Field(default=None, description="Resolved coordinates")
    date_range: DateRange = Field(description="Requested UTC range")
    forecast_summary: ForecastSummary | None = Field(
        default=None, description="Summary, or None when no data was available"
    )
    fallback_reason: FallbackReason | None = Field(
        default=None, description="Why the live forecast path was not used"
    )
