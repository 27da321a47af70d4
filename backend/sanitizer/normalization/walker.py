"""Cost-field normalization over a parsed itinerary and budget roll-up."""

from __future__ import annotations

import re
from typing import Any

from backend.sanitizer.metrics.registry import MetricsClient
from backend.sanitizer.models.itinerary import BudgetBreakdown

from .cost import to_number

# Fields that hold money but do not end in "Cost"
COST_FIELD_NAMES = frozenset(
    {
        "amount",
        "entryFee",
        "fare",
        "price",
        "pricePerNight",
        "ticketPrice",
    }
)
_COST_SUFFIX_RE = re.compile(r"cost$", re.IGNORECASE)

# dailyCostBreakdown field -> BudgetBreakdown alias
DAILY_COST_CATEGORIES = {
    "flightCost": "totalFlightCost",
    "accommodationCost": "totalAccommodationCost",
    "foodCost": "totalFoodCost",
    "sightseeingCost": "totalSightseeingCost",
    "localTransportCost": "totalLocalTransportCost",
    "shoppingCost": "totalShoppingCost",
    "miscellaneousCost": "totalMiscellaneousCost",
}


def is_cost_field(name: str) -> bool:
    """Whether a key names a cost-bearing field."""
    return name in COST_FIELD_NAMES or bool(_COST_SUFFIX_RE.search(name))


def normalize_costs(node: Any, metrics: MetricsClient | None = None) -> int:
    """Replace every cost-bearing scalar under ``node`` in place.

    Containers under a cost-named key (e.g. ``{"entryFee": {"amount": ...}}``)
    are walked rather than replaced.

    Returns:
        Number of non-empty cost strings that fell back to 0
    """
    defaulted = 0
    if isinstance(node, dict):
        for key, value in node.items():
            if isinstance(value, (dict, list)):
                defaulted += normalize_costs(value, metrics=None)
            elif is_cost_field(str(key)):
                number = to_number(value)
                if number == 0 and isinstance(value, str) and value.strip():
                    defaulted += 1
                node[key] = number
    elif isinstance(node, list):
        for item in node:
            defaulted += normalize_costs(item, metrics=None)

    if metrics and defaulted:
        metrics.inc_cost_default(defaulted)
    return defaulted


def rollup_budget(data: dict[str, Any]) -> tuple[BudgetBreakdown | None, float]:
    """Sum the daily cost breakdown and settle the trip total.

    Day plans whose ``day`` matches a breakdown entry take that entry's
    ``totalDayCost``. The trip total is the category sum when non-zero,
    otherwise the model's own ``totalEstimatedCost``. Results are written
    back onto ``data``.

    Returns:
        (breakdown or None when there is no daily breakdown, trip total)
    """
    daily = data.get("dailyCostBreakdown") or []
    breakdown: BudgetBreakdown | None = None
    calculated_total = 0.0

    if isinstance(daily, list) and daily:
        totals = {alias: 0.0 for alias in DAILY_COST_CATEGORIES.values()}
        daily = [entry for entry in daily if isinstance(entry, dict)]
        for entry in daily:
            for field, alias in DAILY_COST_CATEGORIES.items():
                totals[alias] += to_number(entry.get(field, 0))
        breakdown = BudgetBreakdown(**totals)
        calculated_total = breakdown.total

        # Only scalar day numbers can be matched across the two sections
        day_totals = {
            entry["day"]: entry.get("totalDayCost", 0)
            for entry in daily
            if isinstance(entry.get("day"), (int, str))
        }
        for day_plan in data.get("dayPlans") or []:
            if not isinstance(day_plan, dict):
                continue
            day = day_plan.get("day")
            if isinstance(day, (int, str)) and day in day_totals:
                day_plan["totalEstimatedCost"] = to_number(day_totals[day])

        data["budgetBreakdown"] = breakdown.model_dump(by_alias=True)

    total = calculated_total or float(to_number(data.get("totalEstimatedCost", 0)))
    data["totalEstimatedCost"] = total
    return breakdown, total
