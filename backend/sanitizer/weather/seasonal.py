"""Seasonal weather estimates from an OpenAI chat model."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from openai import OpenAI, OpenAIError

from backend.sanitizer.config import (
    MissingOpenAIKeyError,
    Settings,
    get_openai_api_key,
    get_settings,
)
from backend.sanitizer.models.common import Geo
from backend.sanitizer.models.weather import DateRange, SeasonalSummary
from backend.sanitizer.parsing.response_parser import ParseError, ResponseParser

from .providers import SeasonalEstimateError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional travel climatology assistant who provides "
    "short, factual summaries."
)

USER_PROMPT = """You are a concise climatology assistant. For the location "{location}"{coords}, provide a compact JSON summary of the typical weather between {start} and {end} (inclusive). The JSON must include the following keys:
- minTemp: number (typical minimum temperature in °C)
- maxTemp: number (typical maximum temperature in °C)
- avgMin: number (average minimum in °C)
- avgMax: number (average maximum in °C)
- conditions: short string (e.g., "clear", "clouds", "rain")
- avgPrecipitation: number (0-100 percent chance)
- recommendations: array of short strings (packing/activity tips)
Return only valid JSON object. Be concise."""


def _number(data: dict[str, Any], *keys: str, default: float | None = None) -> float:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    if default is None:
        raise SeasonalEstimateError(f"Seasonal estimate is missing {keys[0]}")
    return default


def summary_from_reply(data: Any, max_recommendations: int = 5) -> SeasonalSummary:
    """Build a SeasonalSummary from the model's JSON reply, tolerating key drift."""
    if not isinstance(data, dict):
        raise SeasonalEstimateError("Seasonal estimate is not a JSON object")

    min_temp = _number(data, "minTemp", "min")
    max_temp = _number(data, "maxTemp", "max")
    recommendations = data.get("recommendations")
    if isinstance(recommendations, list):
        recommendations = [str(r) for r in recommendations][:max_recommendations]
    elif recommendations:
        recommendations = [str(recommendations)]
    else:
        recommendations = []

    return SeasonalSummary(
        min_temp=min_temp,
        max_temp=max_temp,
        avg_min=_number(data, "avgMin", "avg_min", default=round(min_temp)),
        avg_max=_number(data, "avgMax", "avg_max", default=round(max_temp)),
        conditions=str(data.get("conditions") or data.get("condition") or "Unknown"),
        avg_precipitation=round(
            _number(data, "avgPrecipitation", "avg_precipitation", "precipitation", default=0)
        ),
        recommendations=recommendations,
        unit=str(data.get("unit") or "C"),
    )


class OpenAISeasonalEstimator:
    """Asks a chat model for a typical-weather summary of a place and period."""

    def __init__(self, settings: Settings | None = None, client: Any | None = None):
        self.settings = settings or get_settings()
        self._client = client
        self._parser = ResponseParser(settings=self.settings)

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = OpenAI(
                api_key=get_openai_api_key(self.settings),
                timeout=self.settings.seasonal_timeout_s,
            )
        return self._client

    def estimate(
        self, destination: str, coords: Geo | None, date_range: DateRange
    ) -> SeasonalSummary:
        coords_hint = f" ({coords.lat:.4f}, {coords.lon:.4f})" if coords else ""
        last_day = max(date_range.start_date, date_range.end_date - timedelta(days=1))
        prompt = USER_PROMPT.format(
            location=destination,
            coords=coords_hint,
            start=date_range.start_date.isoformat(),
            end=last_day.isoformat(),
        )

        try:
            response = self._get_client().chat.completions.create(
                model=self.settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.0,
                max_tokens=self.settings.seasonal_max_tokens,
                response_format={"type": "json_object"},
            )
        except MissingOpenAIKeyError as e:
            raise SeasonalEstimateError(str(e)) from e
        except OpenAIError as e:
            raise SeasonalEstimateError(f"Seasonal estimate request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise SeasonalEstimateError("Seasonal estimate reply was empty")

        try:
            parsed = self._parser.parse(content)
        except ParseError as e:
            raise SeasonalEstimateError(f"Seasonal estimate was not JSON: {e.reason}") from e

        summary = summary_from_reply(parsed.value, self.settings.max_recommendations)
        logger.info("Seasonal estimate generated for %s", destination)
        return summary
