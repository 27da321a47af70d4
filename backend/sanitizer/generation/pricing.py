"""Estimated USD cost of a model call from its token usage."""

from backend.sanitizer.config import Settings, get_settings
from backend.sanitizer.models.request import TokenUsage


def calculate_cost(usage: TokenUsage | None, settings: Settings | None = None) -> float:
    """Price a call at the configured per-1K-token rates.

    Returns 0.0 when the provider reported no usage.
    """
    if usage is None:
        return 0.0
    settings = settings or get_settings()
    prompt_cost = usage.prompt_tokens / 1000 * settings.prompt_cost_per_1k_usd
    completion_cost = usage.completion_tokens / 1000 * settings.completion_cost_per_1k_usd
    return round(prompt_cost + completion_cost, 6)
