"""Cost normalization and itinerary shape structuring."""

from .cost import to_number
from .structure import StructureError, matches_diet, normalize_activity, structure_itinerary
from .walker import (
    COST_FIELD_NAMES,
    DAILY_COST_CATEGORIES,
    is_cost_field,
    normalize_costs,
    rollup_budget,
)

__all__ = [
    "COST_FIELD_NAMES",
    "DAILY_COST_CATEGORIES",
    "StructureError",
    "is_cost_field",
    "matches_diet",
    "normalize_activity",
    "normalize_costs",
    "rollup_budget",
    "structure_itinerary",
    "to_number",
]
