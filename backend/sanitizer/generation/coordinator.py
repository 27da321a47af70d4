"""Orchestration of one generation attempt, from raw model text to a normalized itinerary."""

from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from backend.sanitizer.config import Settings, get_settings
from backend.sanitizer.metrics.core import record_generation
from backend.sanitizer.metrics.registry import MetricsClient
from backend.sanitizer.models.call_log import AICallLogEntry
from backend.sanitizer.models.common import CallStatus, compute_response_digest
from backend.sanitizer.models.itinerary import ParsedItinerary, ParseResult
from backend.sanitizer.models.request import GenerationRequest, RawModelResponse
from backend.sanitizer.models.weather import ForecastEntry
from backend.sanitizer.normalization.structure import StructureError, structure_itinerary
from backend.sanitizer.normalization.walker import normalize_costs, rollup_budget
from backend.sanitizer.parsing.response_parser import ParseError, ResponseParser
from backend.sanitizer.weather.aggregator import WeatherAggregator
from backend.sanitizer.weather.locations import weather_locations

from .errors import GenerationError, GenerationErrorKind
from .pricing import calculate_cost

logger = logging.getLogger(__name__)


class GenerationOutcome(BaseModel):
    """Result of ``GenerationCoordinator.run``: an itinerary or an error, plus the audit entry."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    itinerary: ParsedItinerary | None = Field(default=None)
    error: GenerationError | None = Field(default=None)
    call_log: AICallLogEntry

    @property
    def ok(self) -> bool:
        return self.error is None


class GenerationCoordinator:
    """Turns one RawModelResponse into a fully normalized ParsedItinerary.

    Parsing, structuring, cost normalization and weather enrichment run in
    that order. A parse or structure failure stops the pipeline with a
    GenerationError; cost and weather problems degrade to zeros and null
    summaries instead.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        weather: WeatherAggregator | None = None,
        parser: ResponseParser | None = None,
        metrics: MetricsClient | None = None,
    ):
        self.settings = settings or get_settings()
        self.weather = weather
        self.metrics = metrics
        self.parser = parser or ResponseParser(settings=self.settings, metrics=metrics)

    def process(
        self, request: GenerationRequest, raw_response: RawModelResponse
    ) -> ParsedItinerary:
        """Run the pipeline.

        Raises:
            GenerationError: unparseable, invalid_structure or empty_response
        """
        return self._process(request, raw_response, {})

    def run(
        self, request: GenerationRequest, raw_response: RawModelResponse
    ) -> GenerationOutcome:
        """Run the pipeline and build the audit log entry. Never raises GenerationError."""
        start_time = time.time()
        trace: dict[str, Any] = {}
        itinerary: ParsedItinerary | None = None
        error: GenerationError | None = None

        try:
            itinerary = self._process(request, raw_response, trace)
        except GenerationError as e:
            error = e
            logger.warning("Itinerary generation failed: %s", e)

        status = self._status(request, itinerary)
        parse_result: ParseResult | None = trace.get("parse")
        processing_ms = int((time.time() - start_time) * 1000)

        record_generation(
            status=status.value,
            parse_tier=parse_result.tier if parse_result else None,
            error_kind=error.kind.value if error else None,
            latency_ms=processing_ms,
        )
        if self.metrics:
            self.metrics.inc_generation(status.value)

        call_log = self._build_call_log(
            request, raw_response, itinerary, parse_result, error, status, processing_ms
        )
        return GenerationOutcome(itinerary=itinerary, error=error, call_log=call_log)

    def _process(
        self,
        request: GenerationRequest,
        raw_response: RawModelResponse,
        trace: dict[str, Any],
    ) -> ParsedItinerary:
        text = raw_response.text or ""
        if not text.strip():
            raise GenerationError(
                GenerationErrorKind.empty_response, "No response text from model"
            )

        try:
            parse_result = self.parser.parse(text)
        except ParseError as e:
            raise GenerationError(
                GenerationErrorKind.unparseable,
                f"Invalid JSON response from model: {e.reason}",
                text_length=e.text_length,
                tiers_tried=e.tiers_tried,
            ) from e
        trace["parse"] = parse_result

        try:
            data = structure_itinerary(parse_result.value, request)
        except StructureError as e:
            raise GenerationError(
                GenerationErrorKind.invalid_structure,
                str(e),
                text_length=len(text),
                tiers_tried=[parse_result.tier],
            ) from e

        normalize_costs(data, metrics=self.metrics)
        budget_breakdown, total = rollup_budget(data)

        return ParsedItinerary(
            data=data,
            was_repaired=parse_result.was_repaired,
            parse_tier=parse_result.tier,
            weather_forecast=self._weather(request),
            budget_breakdown=budget_breakdown,
            total_estimated_cost=total,
        )

    def _weather(self, request: GenerationRequest) -> list[ForecastEntry] | None:
        if not request.include_weather_reference:
            logger.info("Skipping weather enrichment per request preference")
            return None
        if self.weather is None:
            logger.warning("Weather requested but no weather aggregator is configured")
            return None

        locations = weather_locations(request)
        if not locations:
            logger.warning("No valid locations found in request for weather data")
            return None
        return self.weather.aggregate_all(locations, request.start_date, request.duration)

    @staticmethod
    def _status(
        request: GenerationRequest, itinerary: ParsedItinerary | None
    ) -> CallStatus:
        if itinerary is None:
            return CallStatus.failed
        if request.include_weather_reference and itinerary.weather_forecast is not None:
            if any(e.forecast_summary is None for e in itinerary.weather_forecast):
                return CallStatus.partial
        return CallStatus.success

    def _build_call_log(
        self,
        request: GenerationRequest,
        raw_response: RawModelResponse,
        itinerary: ParsedItinerary | None,
        parse_result: ParseResult | None,
        error: GenerationError | None,
        status: CallStatus,
        processing_ms: int,
    ) -> AICallLogEntry:
        if itinerary is not None:
            parsed_response: Any = itinerary.data
        elif parse_result is not None:
            parsed_response = parse_result.value
        else:
            parsed_response = raw_response.text

        repaired = parse_result.repaired_text if parse_result else None
        if repaired is not None:
            repaired = repaired[: self.settings.repaired_excerpt_chars]

        return AICallLogEntry(
            model_name=raw_response.model_name,
            parameters=request.model_dump(mode="json", by_alias=True),
            raw_response=raw_response.text,
            parsed_response=parsed_response,
            was_repaired=parse_result.was_repaired if parse_result else False,
            repaired_response=repaired,
            parse_tier=parse_result.tier if parse_result else None,
            token_usage=raw_response.token_usage,
            cost_usd=(
                calculate_cost(raw_response.token_usage, self.settings)
                if raw_response.token_usage
                else None
            ),
            status=status,
            error_message=str(error) if error else None,
            response_time_ms=raw_response.response_time_ms + processing_ms,
            response_digest=(
                compute_response_digest(raw_response.text) if raw_response.text else None
            ),
        )
