"""OpenWeatherMap geocoding and 5 day / 3 hour forecast adapters."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import UTC, date, datetime
from typing import Any

import httpx

from backend.sanitizer.config import Settings, get_settings
from backend.sanitizer.models.common import Geo
from backend.sanitizer.models.weather import DailyForecast, DateRange

from .providers import ForecastProviderError, fetch_json
from .recommendations import daily_recommendations

logger = logging.getLogger(__name__)

MIDDAY_HOURS = range(11, 14)


class OpenWeatherGeocoder:
    """Direct geocoding via ``/geo/1.0/direct``."""

    def __init__(
        self, settings: Settings | None = None, client: httpx.Client | None = None
    ):
        self.settings = settings or get_settings()
        self._client = client or httpx.Client()

    def resolve(self, name: str) -> Geo | None:
        data = fetch_json(
            self._client,
            f"{self.settings.openweather_base_url.rstrip('/')}/geo/1.0/direct",
            {"q": name, "limit": 1, "appid": self.settings.openweather_api_key},
            self.settings.geocode_timeout_s,
        )
        if not isinstance(data, list) or not data:
            logger.info("Geocoder found no match for %s", name)
            return None
        try:
            return Geo(lat=float(data[0]["lat"]), lon=float(data[0]["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ForecastProviderError(f"Malformed geocoding result for {name}: {e}") from e

    def close(self) -> None:
        self._client.close()


def _entry_day(entry: dict[str, Any]) -> date:
    return datetime.fromtimestamp(entry["dt"], tz=UTC).date()


def _summarize_day(day: date, entries: list[dict[str, Any]]) -> DailyForecast:
    """Collapse one UTC day of 3-hourly entries into a DailyForecast."""
    temps = [e["main"]["temp"] for e in entries]
    midday = next(
        (
            e
            for e in entries
            if datetime.fromtimestamp(e["dt"], tz=UTC).hour in MIDDAY_HOURS
        ),
        entries[0],
    )
    weather = (midday.get("weather") or [{}])[0]
    precipitation = sum(e.get("pop") or 0 for e in entries) / len(entries) * 100
    humidity = sum(e["main"].get("humidity") or 0 for e in entries) / len(entries)
    wind_ms = sum((e.get("wind") or {}).get("speed") or 0 for e in entries) / len(entries)
    conditions = weather.get("main") or "Unknown"

    return DailyForecast(
        forecast_date=day,
        temp_min_c=round(min(temps)),
        temp_max_c=round(max(temps)),
        conditions=conditions,
        description=weather.get("description") or "Weather data unavailable",
        precipitation_pct=round(precipitation),
        humidity_pct=round(humidity),
        wind_kmh=round(wind_ms * 3.6, 1),
        icon=weather.get("icon") or "01d",
        recommendations=daily_recommendations(
            midday["main"]["temp"], (midday.get("pop") or 0) * 100, conditions
        ),
    )


class OpenWeatherForecastProvider:
    """Daily forecasts built from the ``/data/2.5/forecast`` 3-hourly feed."""

    def __init__(
        self, settings: Settings | None = None, client: httpx.Client | None = None
    ):
        self.settings = settings or get_settings()
        self.horizon_days = self.settings.openweather_horizon_days
        self._client = client or httpx.Client()

    def get_forecast(self, coords: Geo, date_range: DateRange) -> list[DailyForecast]:
        data = fetch_json(
            self._client,
            f"{self.settings.openweather_base_url.rstrip('/')}/data/2.5/forecast",
            {
                "lat": coords.lat,
                "lon": coords.lon,
                "units": "metric",
                "appid": self.settings.openweather_api_key,
            },
            self.settings.forecast_timeout_s,
        )

        by_day: dict[date, list[dict[str, Any]]] = defaultdict(list)
        try:
            for entry in data.get("list", []):
                by_day[_entry_day(entry)].append(entry)
            return [
                _summarize_day(day, by_day[day])
                for day in sorted(by_day)
                if date_range.contains(day)
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ForecastProviderError(f"Malformed forecast payload: {e}") from e

    def close(self) -> None:
        self._client.close()
