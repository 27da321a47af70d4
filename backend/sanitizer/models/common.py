"""Common data types and enums used across the library."""

from __future__ import annotations

import hashlib
import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Geo(BaseModel):
    """Geographic coordinates in WGS84 decimal degrees."""

    lat: float = Field(description="Latitude in decimal degrees")
    lon: float = Field(description="Longitude in decimal degrees")


class ParseTier(str, Enum):
    """Recovery strategy that produced a parsed model response."""

    strict = "strict"
    lenient = "lenient"
    substring = "substring"
    sandbox_eval = "sandbox_eval"
    structural_repair = "structural_repair"


class BudgetTier(str, Enum):
    """Trip budget levels."""

    budget = "budget"
    moderate = "moderate"
    luxury = "luxury"


class DietType(str, Enum):
    """Dietary preference for restaurant recommendations."""

    veg = "veg"
    non_veg = "non-veg"
    both = "both"


class CallStatus(str, Enum):
    """Outcome recorded on an AI call log entry."""

    success = "success"
    failed = "failed"
    partial = "partial"


def compute_response_digest(data: Any) -> str:
    """
    Compute SHA256 digest of response data for deduplication.

    Args:
        data: Any JSON-serializable data, or raw text

    Returns:
        Hex string digest of the data
    """
    if isinstance(data, str):
        payload = data
    else:
        payload = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()
