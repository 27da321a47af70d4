"""Collaborator protocols and errors for weather enrichment."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from backend.sanitizer.models.common import Geo
from backend.sanitizer.models.weather import DailyForecast, DateRange, SeasonalSummary


class ForecastProviderError(Exception):
    """Base exception for geocoding and forecast provider failures."""
    pass


class ForecastConnectionError(ForecastProviderError):
    """Raised when unable to reach a weather provider."""
    pass


class ForecastTimeoutError(ForecastProviderError):
    """Raised when a weather provider request times out."""
    pass


class SeasonalEstimateError(Exception):
    """Raised when a seasonal estimate cannot be produced."""
    pass


def fetch_json(
    client: httpx.Client, url: str, params: dict[str, Any], timeout: float
) -> Any:
    """GET ``url`` and decode JSON, mapping transport failures to provider errors."""
    try:
        response = client.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except httpx.TimeoutException as e:
        raise ForecastTimeoutError(f"Weather provider request timed out: {e}") from e
    except httpx.ConnectError as e:
        raise ForecastConnectionError(f"Unable to connect to weather provider: {e}") from e
    except httpx.HTTPStatusError as e:
        raise ForecastProviderError(
            f"Weather provider returned error {e.response.status_code}: {e.response.text}"
        ) from e
    except (httpx.HTTPError, ValueError) as e:
        raise ForecastProviderError(f"Unexpected weather provider error: {e}") from e


class Geocoder(Protocol):
    """Resolves a destination name to coordinates."""

    def resolve(self, name: str) -> Geo | None:
        """Return coordinates, or None when the name is unknown.

        Raises:
            ForecastProviderError: On transport or provider failures
        """
        ...


class ForecastProvider(Protocol):
    """Live daily forecasts with a limited future horizon."""

    horizon_days: int

    def get_forecast(self, coords: Geo, date_range: DateRange) -> list[DailyForecast]:
        """Daily forecasts inside ``date_range``; may be empty.

        Raises:
            ForecastProviderError: On transport or provider failures
        """
        ...


class SeasonalEstimator(Protocol):
    """Climatological estimate used when no live forecast is available."""

    def estimate(
        self, destination: str, coords: Geo | None, date_range: DateRange
    ) -> SeasonalSummary:
        """Typical weather for the destination over the range.

        Raises:
            SeasonalEstimateError: When no estimate could be produced
        """
        ...
