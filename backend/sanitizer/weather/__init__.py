"""Weather enrichment: providers, seasonal fallback and per-destination aggregation."""

from .aggregator import (
    WeatherAggregator,
    compute_date_range,
    seasonal_to_summary,
    summarize_daily,
)
from .locations import extract_city_name, weather_locations
from .open_meteo import OpenMeteoForecastProvider, wmo_condition
from .openweather import OpenWeatherForecastProvider, OpenWeatherGeocoder
from .providers import (
    ForecastConnectionError,
    ForecastProvider,
    ForecastProviderError,
    ForecastTimeoutError,
    Geocoder,
    SeasonalEstimateError,
    SeasonalEstimator,
)
from .recommendations import daily_recommendations
from .seasonal import OpenAISeasonalEstimator, summary_from_reply

__all__ = [
    "ForecastConnectionError",
    "ForecastProvider",
    "ForecastProviderError",
    "ForecastTimeoutError",
    "Geocoder",
    "OpenAISeasonalEstimator",
    "OpenMeteoForecastProvider",
    "OpenWeatherForecastProvider",
    "OpenWeatherGeocoder",
    "SeasonalEstimateError",
    "SeasonalEstimator",
    "WeatherAggregator",
    "compute_date_range",
    "daily_recommendations",
    "extract_city_name",
    "seasonal_to_summary",
    "summarize_daily",
    "weather_locations",
]
