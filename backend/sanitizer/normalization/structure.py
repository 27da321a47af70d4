"""Shape normalization of a parsed itinerary.

The model is asked for a fixed layout but drifts: sections arrive as
JSON strings, activities use synonyms for their keys, and list items are
sometimes bare strings. ``structure_itinerary`` settles all of that before
cost normalization runs, so downstream code can rely on the layout.
"""

from __future__ import annotations

import logging
from typing import Any

from backend.sanitizer.models.common import DietType
from backend.sanitizer.models.request import GenerationRequest
from backend.sanitizer.parsing.coerce import coerce_list, parse_fragment

from .walker import DAILY_COST_CATEGORIES

logger = logging.getLogger(__name__)


class StructureError(ValueError):
    """Raised when a parsed value cannot be shaped into an itinerary."""


DAY_SLOTS = ("morning", "afternoon", "evening")

_VEG_MARKERS = ("veg", "vegetarian", "vegan")
_NON_VEG_MARKERS = ("non-veg", "meat", "seafood")


def _first(source: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Value of the first key present with a truthy value."""
    for key in keys:
        value = source.get(key)
        if value not in (None, ""):
            return value
    return default


def _as_object(item: Any) -> dict[str, Any] | None:
    """Return ``item`` as a dict, re-parsing JSON strings; None otherwise."""
    if isinstance(item, dict):
        return item
    if isinstance(item, str):
        parsed = parse_fragment(item)
        if isinstance(parsed, list) and parsed and isinstance(parsed[0], dict):
            return parsed[0]
        if isinstance(parsed, dict):
            return parsed
    return None


def day_number(value: Any, index: int) -> int:
    """1-based day number from the model's ``day`` value, else the position."""
    if isinstance(value, bool):
        return index + 1
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and value > 0:
        return value
    return index + 1


def normalize_activity(activity: Any) -> dict[str, Any]:
    """Resolve key synonyms of one activity."""
    if not isinstance(activity, dict):
        activity = {"title": str(activity)} if activity else {}
    booking = activity.get("bookingRequired")
    return {
        "time": _first(activity, "time", "Time", default="TBD"),
        "title": _first(activity, "title", "name", "activity", default="Activity"),
        "description": _first(activity, "description", "details", default=""),
        "estimatedCost": _first(activity, "estimatedCost", "cost", default=0),
        "duration": _first(activity, "duration", default="N/A"),
        "location": _first(activity, "location", "address", default=""),
        "insiderTip": _first(activity, "insiderTip", "tip", default=""),
        "bestTimeToVisit": _first(activity, "bestTimeToVisit", "bestTime", default=""),
        "bookingRequired": booking if isinstance(booking, bool) else None,
    }


def _structure_day(day: Any, index: int) -> dict[str, Any]:
    day = _as_object(day) or {}
    structured: dict[str, Any] = {"day": day_number(day.get("day"), index)}
    for slot in DAY_SLOTS:
        structured[slot] = [normalize_activity(a) for a in coerce_list(day.get(slot))]
    structured["totalEstimatedCost"] = day.get("totalEstimatedCost", 0)
    structured["notes"] = day.get("notes") or ""
    return structured


def _structure_location(item: dict[str, Any]) -> dict[str, Any]:
    location = item.get("location")
    if isinstance(location, dict):
        return {
            "address": location.get("address") or item.get("address") or "",
            "area": location.get("area") or item.get("area") or "",
            "coordinates": location.get("coordinates"),
        }
    return {
        "address": location or item.get("address") or "",
        "area": item.get("area") or "",
        "coordinates": None,
    }


def _structure_accommodation(item: Any) -> dict[str, Any]:
    acc = _as_object(item)
    if acc is None:
        return {"name": str(item), "type": "Hotel", "priceRange": "", "amenities": []}
    amenities = acc.get("amenities")
    if isinstance(amenities, list):
        amenities = [str(a) for a in amenities]
    elif isinstance(amenities, str):
        amenities = [amenities]
    else:
        amenities = []
    structured = dict(acc)
    structured.update(
        {
            "name": _first(acc, "name", "title", default="Accommodation"),
            "type": acc.get("type") or "Hotel",
            "priceRange": _first(acc, "priceRange", "price", default=""),
            "location": _structure_location(acc),
            "amenities": amenities,
        }
    )
    structured.pop("price", None)
    return structured


def _structure_transport_tip(item: Any) -> dict[str, Any]:
    if isinstance(item, str) or not isinstance(item, dict):
        return {
            "type": "general",
            "description": str(item),
            "estimatedCost": 0,
            "insiderTip": "",
            "bookingInfo": "",
        }
    return {
        "type": _first(item, "type", "mode", default="general"),
        "description": _first(item, "description", "details", default=""),
        "estimatedCost": item.get("estimatedCost", 0),
        "insiderTip": _first(item, "insiderTip", "insider", "tip", default=""),
        "bookingInfo": _first(item, "bookingInfo", "booking", default=""),
    }


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    return [value] if value else []


def _structure_restaurant(item: Any) -> dict[str, Any]:
    rest = _as_object(item)
    if rest is None:
        return {"name": str(item), "dietaryOptions": ["vegetarian", "non-vegetarian"]}
    cuisine = rest.get("cuisine")
    if isinstance(cuisine, list):
        cuisine = ", ".join(str(c) for c in cuisine if c not in (None, ""))
    elif cuisine is not None and not isinstance(cuisine, str):
        cuisine = str(cuisine)
    structured = dict(rest)
    structured.update(
        {
            "name": _first(rest, "name", "title", default="Restaurant"),
            "cuisine": cuisine or "Various",
            "priceRange": _first(rest, "priceRange", "price", default=""),
            "mealType": _as_list(rest.get("mealType")),
            "dietaryOptions": _as_list(rest.get("dietaryOptions"))
            or ["vegetarian", "non-vegetarian"],
            "location": _structure_location(rest),
            "reservationNeeded": bool(rest.get("reservationNeeded", False)),
            "localFavorite": bool(rest.get("localFavorite", False)),
        }
    )
    structured.pop("price", None)
    return structured


def matches_diet(restaurant: dict[str, Any], diet_type: DietType) -> bool:
    """Whether a restaurant's dietary options suit the requested diet."""
    if diet_type is DietType.both:
        return True
    options = [str(o).lower() for o in restaurant.get("dietaryOptions") or []]
    if diet_type is DietType.veg:
        return any(
            marker in option and "non-veg" not in option
            for option in options
            for marker in _VEG_MARKERS
        )
    return any(marker in option for option in options for marker in _NON_VEG_MARKERS)


def _structure_daily_cost(item: Any, index: int) -> dict[str, Any]:
    entry = _as_object(item) or {}
    structured: dict[str, Any] = {"day": day_number(entry.get("day"), index)}
    for field in DAILY_COST_CATEGORIES:
        structured[field] = entry.get(field) or 0
    structured["totalDayCost"] = entry.get("totalDayCost") or 0
    return structured


def structure_itinerary(data: Any, request: GenerationRequest) -> dict[str, Any]:
    """Settle the layout of a parsed itinerary.

    Args:
        data: Value produced by the response parser
        request: The generation request, for duration and preference flags

    Returns:
        A new dict with every section in its canonical shape

    Raises:
        StructureError: If the value is not an object or has no usable
            ``dayPlans`` list
    """
    if not isinstance(data, dict):
        raise StructureError(
            f"Parsed response is a {type(data).__name__}, expected an object",
        )

    day_plans = coerce_list(data.get("dayPlans"))
    if not day_plans:
        raise StructureError("Invalid day plans structure")
    if len(day_plans) != request.duration:
        logger.warning(
            "Expected %d day plans, got %d; keeping the model's plan",
            request.duration,
            len(day_plans),
        )

    accommodations = [
        _structure_accommodation(a) for a in coerce_list(data.get("accommodationSuggestions"))
    ]
    restaurants = [
        r
        for r in (
            _structure_restaurant(r)
            for r in coerce_list(data.get("restaurantRecommendations"))
        )
        if matches_diet(r, request.diet_type)
    ]
    if not request.include_accommodation_reference:
        accommodations = []
    if not request.include_restaurant_reference:
        restaurants = []

    daily_costs = [
        _structure_daily_cost(d, i) for i, d in enumerate(coerce_list(data.get("dailyCostBreakdown")))
    ]
    general_tips = data.get("generalTips")
    packing_list = data.get("packingList")

    structured = dict(data)
    structured.update(
        {
            "currency": data.get("currency"),
            "currencySymbol": data.get("currencySymbol"),
            "dayPlans": [_structure_day(d, i) for i, d in enumerate(day_plans)],
            "accommodationSuggestions": accommodations,
            "transportationTips": [
                _structure_transport_tip(t) for t in coerce_list(data.get("transportationTips"))
            ],
            "restaurantRecommendations": restaurants,
            "generalTips": general_tips if isinstance(general_tips, list) else [],
            "packingList": packing_list if isinstance(packing_list, list) else None,
            "dailyCostBreakdown": daily_costs or None,
            "totalEstimatedCost": data.get("totalEstimatedCost", 0),
        }
    )
    # Weather is attached by the aggregator, never taken from the model.
    structured.pop("weatherForecast", None)
    return structured
