"""Metrics for response parsing, cost normalization and weather enrichment."""

from .core import record_generation, record_parse, record_weather_lookup
from .registry import MetricsClient

__all__ = [
    "MetricsClient",
    "record_generation",
    "record_parse",
    "record_weather_lookup",
]
