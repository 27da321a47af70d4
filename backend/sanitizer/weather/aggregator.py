"""Per-destination weather aggregation with seasonal fallback."""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, date, datetime, timedelta

from backend.sanitizer.config import Settings, get_settings
from backend.sanitizer.metrics.core import record_weather_lookup
from backend.sanitizer.metrics.registry import MetricsClient
from backend.sanitizer.models.common import Geo
from backend.sanitizer.models.weather import (
    DailyForecast,
    DateRange,
    FallbackReason,
    ForecastEntry,
    ForecastSource,
    ForecastSummary,
    SeasonalSummary,
)

from .providers import (
    ForecastProvider,
    ForecastProviderError,
    Geocoder,
    SeasonalEstimateError,
    SeasonalEstimator,
)

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(UTC).date()


def compute_date_range(start_date: date, duration_days: int) -> DateRange:
    """UTC calendar range ``[start_date, start_date + duration_days)``."""
    return DateRange(
        start_date=start_date, end_date=start_date + timedelta(days=duration_days)
    )


def summarize_daily(
    days: list[DailyForecast], max_recommendations: int = 5
) -> ForecastSummary:
    """Aggregate daily forecasts into one live ForecastSummary.

    Conditions are the most frequent lower-cased label, ties going to the
    label seen first. Recommendations keep first-seen order without repeats.
    """
    if not days:
        raise ValueError("cannot summarize an empty forecast")

    mins = [d.temp_min_c for d in days]
    maxs = [d.temp_max_c for d in days]
    conditions = Counter((d.conditions or "Unknown").lower() for d in days)

    recommendations: list[str] = []
    for day in days:
        for line in day.recommendations:
            line = str(line).strip()
            if line and line not in recommendations:
                recommendations.append(line)

    return ForecastSummary(
        min_temp=min(mins),
        max_temp=max(maxs),
        avg_min=round(sum(mins) / len(mins)),
        avg_max=round(sum(maxs) / len(maxs)),
        conditions=conditions.most_common(1)[0][0],
        avg_precipitation=round(sum(d.precipitation_pct for d in days) / len(days)),
        recommendations=recommendations[:max_recommendations],
        icon=days[0].icon,
        unit="C",
        estimated=False,
        source=ForecastSource.forecast,
    )


def seasonal_to_summary(seasonal: SeasonalSummary) -> ForecastSummary:
    return ForecastSummary(
        min_temp=seasonal.min_temp,
        max_temp=seasonal.max_temp,
        avg_min=seasonal.avg_min,
        avg_max=seasonal.avg_max,
        conditions=seasonal.conditions,
        avg_precipitation=seasonal.avg_precipitation,
        recommendations=seasonal.recommendations,
        icon=None,
        unit=seasonal.unit,
        estimated=True,
        source=ForecastSource.seasonal_ai,
    )


class WeatherAggregator:
    """Builds a ForecastEntry per destination.

    Within the forecast provider's horizon the live forecast is summarized;
    otherwise, or when the provider fails or returns nothing for the range,
    the seasonal estimator is asked instead. Every entry carries the same
    computed date range whichever path produced it.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        forecast_provider: ForecastProvider,
        seasonal_estimator: SeasonalEstimator,
        settings: Settings | None = None,
        metrics: MetricsClient | None = None,
        today: Callable[[], date] = utc_today,
    ):
        self.geocoder = geocoder
        self.forecast_provider = forecast_provider
        self.seasonal_estimator = seasonal_estimator
        self.settings = settings or get_settings()
        self.metrics = metrics
        self.today = today

    def in_horizon(self, date_range: DateRange) -> FallbackReason | None:
        """None when the range starts inside the provider horizon, else the reason."""
        days_ahead = (date_range.start_date - self.today()).days
        if days_ahead < 0:
            return FallbackReason.past_range
        if days_ahead >= self.forecast_provider.horizon_days:
            return FallbackReason.beyond_horizon
        return None

    def aggregate(
        self,
        destination: str,
        coords: Geo | None,
        start_date: date,
        duration_days: int,
    ) -> ForecastEntry:
        """Weather for one destination over the trip. Never raises."""
        start_time = time.time()
        date_range = compute_date_range(start_date, duration_days)
        entry = ForecastEntry(location=destination, coordinates=coords, date_range=date_range)

        if coords is None:
            entry.fallback_reason = FallbackReason.geocode_not_found
            self._record(entry, start_time)
            return entry

        reason = self.in_horizon(date_range)
        if reason is None:
            try:
                days = self.forecast_provider.get_forecast(coords, date_range)
                days = [d for d in days if date_range.contains(d.forecast_date)]
                if days:
                    entry.forecast_summary = summarize_daily(
                        days, self.settings.max_recommendations
                    )
                    self._record(entry, start_time)
                    return entry
                reason = FallbackReason.empty_forecast
            except ForecastProviderError as e:
                logger.warning("Forecast provider failed for %s: %s", destination, e)
                reason = FallbackReason.provider_error

        entry.fallback_reason = reason
        try:
            seasonal = self.seasonal_estimator.estimate(destination, coords, date_range)
            entry.forecast_summary = seasonal_to_summary(seasonal)
        except SeasonalEstimateError as e:
            logger.warning("Seasonal estimate failed for %s: %s", destination, e)
            entry.fallback_reason = FallbackReason.seasonal_failed

        self._record(entry, start_time)
        return entry

    def lookup(self, destination: str, start_date: date, duration_days: int) -> ForecastEntry:
        """Geocode ``destination`` and aggregate its weather. Never raises."""
        try:
            coords = self.geocoder.resolve(destination)
        except ForecastProviderError as e:
            logger.warning("Geocoding failed for %s: %s", destination, e)
            coords = None
        if coords is None:
            logger.warning("Could not get coordinates for %s", destination)
        return self.aggregate(destination, coords, start_date, duration_days)

    def aggregate_all(
        self,
        destinations: list[str],
        start_date: date | None,
        duration_days: int,
    ) -> list[ForecastEntry]:
        """Weather for every destination, in input order.

        Destinations run in parallel and independently. An unexpected failure
        for one destination yields a null-summary entry for it only.
        """
        if not destinations:
            return []
        start_date = start_date or self.today()
        workers = max(1, min(len(destinations), self.settings.weather_max_workers))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="weather") as pool:
            futures = [
                pool.submit(self.lookup, destination, start_date, duration_days)
                for destination in destinations
            ]
            entries = []
            for destination, future in zip(destinations, futures):
                try:
                    entries.append(future.result())
                except Exception as e:
                    logger.warning("Weather lookup crashed for %s: %s", destination, e)
                    entries.append(
                        ForecastEntry(
                            location=destination,
                            date_range=compute_date_range(start_date, duration_days),
                            fallback_reason=FallbackReason.provider_error,
                        )
                    )
        return entries

    def _record(self, entry: ForecastEntry, start_time: float) -> None:
        summary = entry.forecast_summary
        source = summary.source if summary else None
        record_weather_lookup(
            destination=entry.location,
            source=source,
            ok=summary is not None,
            fallback_reason=entry.fallback_reason,
            latency_ms=int((time.time() - start_time) * 1000),
        )
        if self.metrics:
            self.metrics.inc_weather_source(source.value if source else "none")
            if entry.fallback_reason:
                self.metrics.inc_weather_fallback(entry.fallback_reason.value)
