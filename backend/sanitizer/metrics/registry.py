"""In-process metrics registry for response sanitization."""

import threading
from collections import defaultdict


class MetricsClient:
    """
    Simple in-process metrics client for parse, cost and weather tracking.

    Stores metrics in memory for testing and internal monitoring.
    Weather lookups may record from worker threads, so updates are locked.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

        # Successful parses: tier -> count
        self.parse_tiers: dict[str, int] = defaultdict(int)

        # Parses that exhausted every tier
        self.parse_failures: int = 0

        # Parse latency observations in milliseconds
        self.parse_latencies: list[int] = []

        # Cost strings that resolved to the zero default
        self.cost_defaults: int = 0

        # Weather summaries: source -> count ("none" when no summary)
        self.weather_sources: dict[str, int] = defaultdict(int)

        # Fallback reasons: reason -> count
        self.weather_fallbacks: dict[str, int] = defaultdict(int)

        # Generation outcomes: status -> count
        self.generation_outcomes: dict[str, int] = defaultdict(int)

    def inc_parse_tier(self, tier: str) -> None:
        """Increment success counter for a parse tier."""
        with self._lock:
            self.parse_tiers[tier] += 1

    def inc_parse_failure(self) -> None:
        """Increment counter for parses that failed every tier."""
        with self._lock:
            self.parse_failures += 1

    def observe_parse_latency(self, latency_ms: int) -> None:
        """Record a parse latency observation."""
        with self._lock:
            self.parse_latencies.append(latency_ms)

    def inc_cost_default(self, count: int = 1) -> None:
        """Increment counter for cost values that defaulted to zero."""
        with self._lock:
            self.cost_defaults += count

    def inc_weather_source(self, source: str) -> None:
        """Increment counter for the data path of a weather summary."""
        with self._lock:
            self.weather_sources[source] += 1

    def inc_weather_fallback(self, reason: str) -> None:
        """Increment counter for a weather fallback reason."""
        with self._lock:
            self.weather_fallbacks[reason] += 1

    def inc_generation(self, status: str) -> None:
        """Increment counter for a generation outcome."""
        with self._lock:
            self.generation_outcomes[status] += 1

    def get_repair_rate(self) -> float:
        """Fraction of successful parses that needed a tier beyond strict."""
        total = sum(self.parse_tiers.values())
        if total == 0:
            return 0.0
        repaired = total - self.parse_tiers.get("strict", 0)
        return repaired / total

    def get_parse_latency_stats(self) -> dict[str, float]:
        """Get parse latency statistics."""
        latencies = self.parse_latencies
        if not latencies:
            return {"count": 0, "min": 0, "max": 0, "avg": 0}

        return {
            "count": len(latencies),
            "min": min(latencies),
            "max": max(latencies),
            "avg": sum(latencies) / len(latencies),
        }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self.parse_tiers.clear()
            self.parse_failures = 0
            self.parse_latencies.clear()
            self.cost_defaults = 0
            self.weather_sources.clear()
            self.weather_fallbacks.clear()
            self.generation_outcomes.clear()
