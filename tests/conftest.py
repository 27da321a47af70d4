"""Pytest configuration and fixtures for testing."""

from datetime import date, timedelta

import pytest

from backend.sanitizer.config import Settings
from backend.sanitizer.metrics import MetricsClient
from backend.sanitizer.models import (
    DailyForecast,
    DateRange,
    GenerationRequest,
    Geo,
    SeasonalSummary,
)
from backend.sanitizer.weather import ForecastProviderError, SeasonalEstimateError

TODAY = date(2025, 6, 1)


@pytest.fixture
def settings() -> Settings:
    """Settings with test keys and a short sandbox bound."""
    return Settings(
        openweather_api_key="test-openweather-key",
        openai_api_key="dummy-openai-api-key-for-tests",
        sandbox_timeout_s=1.0,
        weather_max_workers=5,
    )


@pytest.fixture
def metrics() -> MetricsClient:
    """Create a fresh metrics client."""
    return MetricsClient()


@pytest.fixture
def make_request():
    """Factory for generation requests with sensible defaults."""

    def _make(**overrides) -> GenerationRequest:
        fields = {
            "source": "Delhi",
            "destinations": ["Shimla"],
            "start_date": TODAY + timedelta(days=3),
            "duration": 3,
        }
        fields.update(overrides)
        return GenerationRequest(**fields)

    return _make


class FakeGeocoder:
    """Geocoder backed by a dict; names mapped to an exception raise it."""

    def __init__(self, known: dict):
        self.known = known
        self.calls: list[str] = []

    def resolve(self, name: str) -> Geo | None:
        self.calls.append(name)
        result = self.known.get(name)
        if isinstance(result, Exception):
            raise result
        return result


class FakeForecastProvider:
    """Forecast provider returning one synthetic day per date in range."""

    def __init__(self, horizon_days: int = 14, fail: bool = False, empty: bool = False):
        self.horizon_days = horizon_days
        self.fail = fail
        self.empty = empty
        self.calls: list[tuple[Geo, DateRange]] = []

    def get_forecast(self, coords: Geo, date_range: DateRange) -> list[DailyForecast]:
        self.calls.append((coords, date_range))
        if self.fail:
            raise ForecastProviderError("provider down")
        if self.empty:
            return []
        return [
            DailyForecast(
                forecast_date=date_range.start_date + timedelta(days=i),
                temp_min_c=10 + i,
                temp_max_c=20 + i,
                conditions="Clear" if i % 2 == 0 else "Clouds",
                precipitation_pct=10 * i,
                icon=f"0{i + 1}d",
                recommendations=["Comfortable weather for sightseeing"],
            )
            for i in range(date_range.days)
        ]


class FakeSeasonalEstimator:
    """Seasonal estimator returning a fixed summary, or failing."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, Geo | None, DateRange]] = []

    def estimate(self, destination, coords, date_range) -> SeasonalSummary:
        self.calls.append((destination, coords, date_range))
        if self.fail:
            raise SeasonalEstimateError("estimator unavailable")
        return SeasonalSummary(
            min_temp=2,
            max_temp=14,
            avg_min=4,
            avg_max=11,
            conditions="snow",
            avg_precipitation=35,
            recommendations=["Pack thermal layers"],
        )


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder(
        {
            "Shimla": Geo(lat=31.1048, lon=77.1734),
            "Manali": Geo(lat=32.2432, lon=77.1892),
            "Kyoto": Geo(lat=35.0116, lon=135.7681),
        }
    )


@pytest.fixture
def forecast_provider() -> FakeForecastProvider:
    return FakeForecastProvider(horizon_days=14)


@pytest.fixture
def seasonal() -> FakeSeasonalEstimator:
    return FakeSeasonalEstimator()
