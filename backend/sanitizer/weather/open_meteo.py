"""Open-Meteo daily forecast adapter (no API key, 16 day horizon)."""

from __future__ import annotations

import logging
from datetime import date, timedelta

import httpx

from backend.sanitizer.config import Settings, get_settings
from backend.sanitizer.models.common import Geo
from backend.sanitizer.models.weather import DailyForecast, DateRange

from .providers import ForecastProviderError, fetch_json
from .recommendations import daily_recommendations

logger = logging.getLogger(__name__)

# WMO weather interpretation codes
WMO_DESCRIPTIONS: dict[int, str] = {
    0: "Clear",
    1: "Mainly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing Rime Fog",
    51: "Light Drizzle",
    53: "Moderate Drizzle",
    55: "Dense Drizzle",
    56: "Freezing Drizzle",
    57: "Heavy Freezing Drizzle",
    61: "Slight Rain",
    63: "Moderate Rain",
    65: "Heavy Rain",
    66: "Freezing Rain",
    67: "Heavy Freezing Rain",
    71: "Slight Snow",
    73: "Moderate Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Slight Showers",
    81: "Moderate Showers",
    82: "Violent Showers",
    85: "Slight Snow Showers",
    86: "Heavy Snow Showers",
    95: "Thunderstorms",
    96: "Thunderstorms with Hail",
    99: "Heavy Thunderstorms with Hail",
}

_DAILY_FIELDS = (
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_probability_max",
    "wind_speed_10m_max",
    "weather_code",
)


def wmo_condition(code: int | None) -> str:
    """Condition group for a WMO code, using OpenWeatherMap's group names."""
    if code is None:
        return "Unknown"
    if code <= 1:
        return "Clear"
    if code <= 3:
        return "Clouds"
    if code in (45, 48):
        return "Fog"
    if 51 <= code <= 57:
        return "Drizzle"
    if 61 <= code <= 67 or 80 <= code <= 82:
        return "Rain"
    if 71 <= code <= 77 or code in (85, 86):
        return "Snow"
    if code >= 95:
        return "Thunderstorm"
    return "Unknown"


def _at(values: list | None, i: int, default=None):
    if not values or i >= len(values) or values[i] is None:
        return default
    return values[i]


class OpenMeteoForecastProvider:
    """Daily forecasts from ``/v1/forecast``."""

    def __init__(
        self, settings: Settings | None = None, client: httpx.Client | None = None
    ):
        self.settings = settings or get_settings()
        self.horizon_days = self.settings.open_meteo_horizon_days
        self._client = client or httpx.Client()

    def get_forecast(self, coords: Geo, date_range: DateRange) -> list[DailyForecast]:
        # Open-Meteo end_date is inclusive
        last_day = max(date_range.start_date, date_range.end_date - timedelta(days=1))
        data = fetch_json(
            self._client,
            f"{self.settings.open_meteo_base_url.rstrip('/')}/v1/forecast",
            {
                "latitude": coords.lat,
                "longitude": coords.lon,
                "daily": ",".join(_DAILY_FIELDS),
                "timezone": "UTC",
                "start_date": date_range.start_date.isoformat(),
                "end_date": last_day.isoformat(),
            },
            self.settings.forecast_timeout_s,
        )

        try:
            daily = data.get("daily") or {}
            days = daily.get("time") or []
            forecasts = []
            for i, day_str in enumerate(days):
                day = date.fromisoformat(day_str)
                if not date_range.contains(day):
                    continue
                t_max = _at(daily.get("temperature_2m_max"), i)
                t_min = _at(daily.get("temperature_2m_min"), i)
                if t_max is None or t_min is None:
                    logger.debug("Skipping Open-Meteo day %s without temperatures", day)
                    continue
                code = _at(daily.get("weather_code"), i)
                conditions = wmo_condition(code)
                precipitation = _at(daily.get("precipitation_probability_max"), i, 0)
                forecasts.append(
                    DailyForecast(
                        forecast_date=day,
                        temp_min_c=round(t_min),
                        temp_max_c=round(t_max),
                        conditions=conditions,
                        description=WMO_DESCRIPTIONS.get(code, "Unknown"),
                        precipitation_pct=precipitation,
                        wind_kmh=_at(daily.get("wind_speed_10m_max"), i),
                        recommendations=daily_recommendations(
                            (t_min + t_max) / 2, precipitation, conditions
                        ),
                    )
                )
            return forecasts
        except (AttributeError, TypeError, ValueError) as e:
            raise ForecastProviderError(f"Malformed Open-Meteo payload: {e}") from e

    def close(self) -> None:
        self._client.close()
