"""Convenient imports for all model types."""

# Common types and enums
from .common import (
    BudgetTier,
    CallStatus,
    DietType,
    Geo,
    ParseTier,
    compute_response_digest,
)

# Call log
from .call_log import AICallLogEntry

# Itinerary models
from .itinerary import BudgetBreakdown, ParsedItinerary, ParseResult

# Request models
from .request import GenerationRequest, RawModelResponse, TokenUsage

# Weather models
from .weather import (
    DailyForecast,
    DateRange,
    FallbackReason,
    ForecastEntry,
    ForecastSource,
    ForecastSummary,
    SeasonalSummary,
)

__all__ = [
    # Common
    "BudgetTier",
    "CallStatus",
    "DietType",
    "Geo",
    "ParseTier",
    "compute_response_digest",
    # Call log
    "AICallLogEntry",
    # Itinerary
    "BudgetBreakdown",
    "ParsedItinerary",
    "ParseResult",
    # Request
    "GenerationRequest",
    "RawModelResponse",
    "TokenUsage",
    # Weather
    "DailyForecast",
    "DateRange",
    "FallbackReason",
    "ForecastEntry",
    "ForecastSource",
    "ForecastSummary",
    "SeasonalSummary",
]
