"""Destination-name cleanup for weather lookups."""

from __future__ import annotations

import re

from backend.sanitizer.models.request import GenerationRequest

_STREET_ADDRESS_RE = re.compile(
    r"\d+\s+[A-Za-z\s]+(?:Road|Rd|Street|St|Avenue|Ave|Mawatha|Lane|Drive|Dr)[,\s]*",
    re.IGNORECASE,
)
_POSTAL_CODE_RE = re.compile(r"\d{5,}")
_TO_JOIN_RE = re.compile(r"\s+to\s+", re.IGNORECASE)
_AIRPORT_CODE_RE = re.compile(r"\b[A-Z]{3}\b")
_NOISE_WORDS_RE = re.compile(
    r"\b(Station|Fort|Center|Central|Market|area|Near|City|downtown|old town)\b",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")

MIN_CITY_LENGTH = 3


def extract_city_name(location: str | None) -> str | None:
    """Reduce a free-form place string to a geocodable city name.

    >>> extract_city_name("12 Galle Road, Colombo, Sri Lanka")
    'Colombo'

    Returns:
        The cleaned name, or None if fewer than three characters remain
    """
    if not location or not isinstance(location, str):
        return None

    cleaned = _STREET_ADDRESS_RE.sub("", location)
    cleaned = _POSTAL_CODE_RE.sub("", cleaned)
    cleaned = _TO_JOIN_RE.sub(" ", cleaned)
    cleaned = _AIRPORT_CODE_RE.sub("", cleaned)
    cleaned = _NOISE_WORDS_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned.strip())

    if "," in cleaned:
        parts = [p.strip() for p in cleaned.split(",") if p.strip()]
        if not parts:
            return None
        # "City, Country" -> City
        cleaned = parts[-2] if len(parts) > 1 else parts[-1]

    if len(cleaned) < MIN_CITY_LENGTH:
        return None
    return cleaned


def weather_locations(request: GenerationRequest) -> list[str]:
    """Unique cleaned destination names, in request order.

    The origin city is not included; weather is attached for where the
    traveler is going. A destination that cleans down to nothing (``"NYC"``)
    is looked up under its name as given, so every destination gets an entry.
    """
    locations: list[str] = []
    for destination in request.destinations:
        city = extract_city_name(destination) or destination.strip()
        if city and city not in locations:
            locations.append(city)
    return locations
