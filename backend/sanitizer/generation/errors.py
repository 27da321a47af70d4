"""Typed errors for a generation attempt."""

from __future__ import annotations

from enum import Enum

from backend.sanitizer.models.common import ParseTier


class GenerationErrorKind(str, Enum):
    """Why a generation attempt produced no itinerary."""

    unparseable = "unparseable"
    invalid_structure = "invalid_structure"
    empty_response = "empty_response"


class GenerationError(Exception):
    """Raised when a model response cannot become a ParsedItinerary.

    Fatal for the current attempt. Retrying is left to the caller.
    """

    def __init__(
        self,
        kind: GenerationErrorKind,
        message: str,
        text_length: int = 0,
        tiers_tried: list[ParseTier] | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.text_length = text_length
        self.tiers_tried = list(tiers_tried or [])

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"
