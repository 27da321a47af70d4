"""AI call audit log entry handed to the persistence collaborator."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .common import CallStatus, ParseTier
from .request import TokenUsage


class AICallLogEntry(BaseModel):
    """Everything the core knows about one generation attempt."""

    model_name: str = Field(description="Model that produced the response")
    parameters: dict[str, Any] = Field(description="Serialized generation request")
    raw_response: str | None = Field(default=None, description="Raw model text")
    parsed_response: Any = Field(
        default=None, description="Parsed object, or the raw text when unparseable"
    )
    was_repaired: bool = Field(default=False, description="Parse needed repair")
    repaired_response: str | None = Field(
        default=None, description="Truncated structurally repaired text"
    )
    parse_tier: ParseTier | None = Field(default=None, description="Successful tier")
    token_usage: TokenUsage | None = Field(default=None, description="Token usage")
    cost_usd: float | None = Field(default=None, description="Estimated call cost")
    status: CallStatus = Field(description="success, failed or partial")
    error_message: str | None = Field(default=None, description="Failure reason")
    response_time_ms: int = Field(description="Model latency plus processing time")
    response_digest: str | None = Field(
        default=None, description="SHA256 of the raw response"
    )
