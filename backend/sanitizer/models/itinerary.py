"""Parsed itinerary models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .common import ParseTier
from .weather import ForecastEntry


class ParseResult(BaseModel):
    """Outcome of a successful response parse."""

    value: Any = Field(description="Parsed value (usually a dict)")
    tier: ParseTier = Field(description="Tier that produced the value")
    was_repaired: bool = Field(description="True for any tier other than strict")
    repaired_text: str | None = Field(
        default=None, description="Text fed to the final parse after structural repair"
    )


class BudgetBreakdown(BaseModel):
    """Per-category totals rolled up from the daily cost breakdown."""

    total_flight_cost: float = Field(default=0.0, alias="totalFlightCost")
    total_accommodation_cost: float = Field(default=0.0, alias="totalAccommodationCost")
    total_food_cost: float = Field(default=0.0, alias="totalFoodCost")
    total_sightseeing_cost: float = Field(default=0.0, alias="totalSightseeingCost")
    total_local_transport_cost: float = Field(
        default=0.0, alias="totalLocalTransportCost"
    )
    total_shopping_cost: float = Field(default=0.0, alias="totalShoppingCost")
    total_miscellaneous_cost: float = Field(
        default=0.0, alias="totalMiscellaneousCost"
    )

    model_config = {"populate_by_name": True}

    @property
    def total(self) -> float:
        return (
            self.total_flight_cost
            + self.total_accommodation_cost
            + self.total_food_cost
            + self.total_sightseeing_cost
            + self.total_local_transport_cost
            + self.total_shopping_cost
            + self.total_miscellaneous_cost
        )


class ParsedItinerary(BaseModel):
    """Fully normalized itinerary handed to the persistence layer."""

    data: dict[str, Any] = Field(description="Normalized itinerary object graph")
    was_repaired: bool = Field(description="Parse needed a tier beyond strict")
    parse_tier: ParseTier = Field(description="Tier that produced the parse")
    weather_forecast: list[ForecastEntry] | None = Field(
        default=None, description="Per-destination weather, None when skipped"
    )
    budget_breakdown: BudgetBreakdown | None = Field(
        default=None, description="Roll-up of dailyCostBreakdown, if present"
    )
    total_estimated_cost: float = Field(
        default=0.0, description="Canonical trip total"
    )

    @property
    def day_plans(self) -> list[dict[str, Any]]:
        return self.data.get("dayPlans", [])

    @property
    def currency(self) -> str | None:
        return self.data.get("currency")
