"""Tests for per-destination weather aggregation."""

from datetime import date, timedelta

import pytest

from backend.sanitizer.models import (
    DailyForecast,
    FallbackReason,
    ForecastSource,
    Geo,
)
from backend.sanitizer.weather import (
    ForecastConnectionError,
    WeatherAggregator,
    compute_date_range,
    summarize_daily,
)

TODAY = date(2025, 6, 1)
SHIMLA = Geo(lat=31.1048, lon=77.1734)


@pytest.fixture
def aggregator(geocoder, forecast_provider, seasonal, settings, metrics) -> WeatherAggregator:
    return WeatherAggregator(
        geocoder=geocoder,
        forecast_provider=forecast_provider,
        seasonal_estimator=seasonal,
        settings=settings,
        metrics=metrics,
        today=lambda: TODAY,
    )


def test_compute_date_range_is_end_exclusive():
    date_range = compute_date_range(TODAY, 7)

    assert date_range.start_date == TODAY
    assert date_range.end_date == TODAY + timedelta(days=7)
    assert date_range.days == 7


def test_in_horizon_start_uses_live_forecast(aggregator, seasonal):
    start = TODAY + timedelta(days=2)

    entry = aggregator.aggregate("Shimla", SHIMLA, start, 7)

    assert entry.forecast_summary.source is ForecastSource.forecast
    assert entry.forecast_summary.estimated is False
    assert entry.date_range.end_date == start + timedelta(days=7)
    assert entry.fallback_reason is None
    assert seasonal.calls == []


def test_beyond_horizon_start_uses_seasonal_estimate(aggregator, forecast_provider):
    start = TODAY + timedelta(days=120)

    entry = aggregator.aggregate("Shimla", SHIMLA, start, 7)

    assert entry.forecast_summary.source is ForecastSource.seasonal_ai
    assert entry.forecast_summary.estimated is True
    assert entry.forecast_summary.icon is None
    assert entry.date_range.end_date == start + timedelta(days=7)
    assert entry.fallback_reason is FallbackReason.beyond_horizon
    assert forecast_provider.calls == []


def test_past_start_uses_seasonal_estimate(aggregator):
    entry = aggregator.aggregate("Shimla", SHIMLA, TODAY - timedelta(days=3), 2)

    assert entry.forecast_summary.source is ForecastSource.seasonal_ai
    assert entry.fallback_reason is FallbackReason.past_range


def test_provider_error_falls_back_to_seasonal(aggregator, forecast_provider, metrics):
    forecast_provider.fail = True

    entry = aggregator.aggregate("Shimla", SHIMLA, TODAY, 3)

    assert entry.forecast_summary.source is ForecastSource.seasonal_ai
    assert entry.fallback_reason is FallbackReason.provider_error
    assert metrics.weather_fallbacks["provider_error"] == 1
    assert metrics.weather_sources["seasonal-ai"] == 1


def test_empty_forecast_falls_back_to_seasonal(aggregator, forecast_provider):
    forecast_provider.empty = True

    entry = aggregator.aggregate("Shimla", SHIMLA, TODAY, 3)

    assert entry.forecast_summary.estimated is True
    assert entry.fallback_reason is FallbackReason.empty_forecast


def test_seasonal_failure_yields_null_summary(aggregator, seasonal):
    seasonal.fail = True

    entry = aggregator.aggregate("Shimla", SHIMLA, TODAY + timedelta(days=60), 3)

    assert entry.forecast_summary is None
    assert entry.fallback_reason is FallbackReason.seasonal_failed
    assert entry.date_range.days == 3


def test_unresolved_coordinates_yield_null_summary(aggregator, forecast_provider):
    entry = aggregator.aggregate("Atlantis", None, TODAY, 4)

    assert entry.forecast_summary is None
    assert entry.fallback_reason is FallbackReason.geocode_not_found
    assert entry.date_range == compute_date_range(TODAY, 4)
    assert forecast_provider.calls == []


def test_geocode_failure_is_isolated_to_its_destination(aggregator, geocoder):
    geocoder.known["Manali"] = ForecastConnectionError("geocoder unreachable")
    start = TODAY + timedelta(days=1)

    entries = aggregator.aggregate_all(["Shimla", "Atlantis", "Manali", "Kyoto"], start, 3)

    assert [e.location for e in entries] == ["Shimla", "Atlantis", "Manali", "Kyoto"]
    assert entries[0].forecast_summary.source is ForecastSource.forecast
    assert entries[1].forecast_summary is None
    assert entries[2].forecast_summary is None
    assert entries[3].forecast_summary.source is ForecastSource.forecast
    assert all(e.date_range == compute_date_range(start, 3) for e in entries)


def test_aggregate_all_defaults_start_to_today(aggregator):
    entries = aggregator.aggregate_all(["Shimla"], None, 2)

    assert entries[0].date_range.start_date == TODAY


def test_summarize_daily():
    days = [
        DailyForecast(
            forecast_date=TODAY,
            temp_min_c=10,
            temp_max_c=21,
            conditions="Clouds",
            precipitation_pct=20,
            icon="03d",
            recommendations=["Good weather for most activities"],
        ),
        DailyForecast(
            forecast_date=TODAY + timedelta(days=1),
            temp_min_c=7,
            temp_max_c=18,
            conditions="Rain",
            precipitation_pct=80,
            icon="10d",
            recommendations=["High chance of rain - pack an umbrella"],
        ),
        DailyForecast(
            forecast_date=TODAY + timedelta(days=2),
            temp_min_c=9,
            temp_max_c=20,
            conditions="clouds",
            precipitation_pct=30,
            recommendations=["Good weather for most activities"],
        ),
    ]

    summary = summarize_daily(days)

    assert summary.min_temp == 7
    assert summary.max_temp == 21
    assert summary.avg_min == 9
    assert summary.avg_max == 20
    assert summary.conditions == "clouds"
    assert summary.avg_precipitation == 43
    assert summary.recommendations == [
        "Good weather for most activities",
        "High chance of rain - pack an umbrella",
    ]
    assert summary.icon == "03d"
    assert summary.unit == "C"
