"""Metrics façade for parse, weather and generation tracking."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backend.sanitizer.models.common import ParseTier
    from backend.sanitizer.models.weather import FallbackReason, ForecastSource

logger = logging.getLogger(__name__)


def record_parse(
    tier: "ParseTier | None",
    was_repaired: bool,
    ok: bool,
    text_length: int,
    latency_ms: int,
) -> None:
    """Record metrics for a response parse.

    Emitted as a structured log record; a log handler or exporter decides
    where it goes.

    Args:
        tier: Tier that succeeded, None if every tier failed.
        was_repaired: Whether a tier beyond strict was needed.
        ok: Whether the parse succeeded.
        text_length: Length of the raw text.
        latency_ms: Parse latency in milliseconds.
    """
    logger.info(
        "response_parse_metric",
        extra={
            "tier": tier.value if tier is not None else None,
            "was_repaired": was_repaired,
            "ok": ok,
            "text_length": text_length,
            "latency_ms": latency_ms,
        },
    )


def record_weather_lookup(
    destination: str,
    source: "ForecastSource | None",
    ok: bool,
    fallback_reason: "FallbackReason | None",
    latency_ms: int,
) -> None:
    """Record metrics for one destination's weather aggregation."""
    logger.info(
        "weather_lookup_metric",
        extra={
            "destination": destination,
            "source": source.value if source is not None else None,
            "ok": ok,
            "fallback_reason": fallback_reason.value if fallback_reason else None,
            "latency_ms": latency_ms,
        },
    )


def record_generation(
    status: str,
    parse_tier: "ParseTier | None",
    error_kind: str | None,
    latency_ms: int,
) -> None:
    """Record metrics for a whole generation attempt."""
    logger.info(
        "generation_metric",
        extra={
            "status": status,
            "parse_tier": parse_tier.value if parse_tier is not None else None,
            "error_kind": error_kind,
            "latency_ms": latency_ms,
        },
    )
