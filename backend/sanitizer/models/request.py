"""Generation request and raw model response models."""

from __future__ import annotations

from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import BudgetTier, DietType


class GenerationRequest(BaseModel):
    """Parameters of a single itinerary generation, read-only once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(description="Origin city")
    destinations: list[str] = Field(
        min_length=1, max_length=5, description="Destination names"
    )
    travel_mode: str = Field(
        default="mixed", alias="travelMode", description="air, rail, car, bus, mixed"
    )
    start_date: date | None = Field(
        default=None, alias="startDate", description="First day of the trip"
    )
    duration: int = Field(ge=1, description="Trip length in days")
    budget: BudgetTier = Field(default=BudgetTier.moderate, description="Budget tier")
    interests: list[str] = Field(default_factory=list, description="Traveler interests")
    travel_style: str = Field(
        default="solo", alias="travelStyle", description="solo, couple, family, group"
    )
    adults: int = Field(default=1, ge=0, description="Adult travelers")
    children: int = Field(default=0, ge=0, description="Child travelers")
    number_of_rooms: int = Field(
        default=1, ge=1, alias="numberOfRooms", description="Rooms to book"
    )
    diet_type: DietType = Field(
        default=DietType.both, alias="dietType", description="Dietary preference"
    )
    include_weather_reference: bool = Field(
        default=True,
        alias="includeWeatherReference",
        description="Attach weather forecasts per destination",
    )
    include_accommodation_reference: bool = Field(
        default=True,
        alias="includeAccommodationReference",
        description="Keep accommodation suggestions",
    )
    include_restaurant_reference: bool = Field(
        default=True,
        alias="includeRestaurantReference",
        description="Keep restaurant recommendations",
    )

    @field_validator("destinations", mode="after")
    @classmethod
    def _strip_destinations(cls, value: list[str]) -> list[str]:
        cleaned = [d.strip() for d in value if d and d.strip()]
        if not cleaned:
            raise ValueError("at least one non-blank destination is required")
        return cleaned

    @property
    def end_date(self) -> date | None:
        """Exclusive end of the trip, start_date + duration days."""
        if self.start_date is None:
            return None
        return self.start_date + timedelta(days=self.duration)

    @property
    def total_people(self) -> int:
        return self.adults + self.children


class TokenUsage(BaseModel):
    """Token accounting reported by the model provider."""

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class RawModelResponse(BaseModel):
    """Opaque model text plus call metadata."""

    text: str = Field(description="Raw text returned by the model")
    model_name: str = Field(default="unknown", description="Model identifier")
    token_usage: TokenUsage | None = Field(default=None, description="Token usage")
    response_time_ms: int = Field(default=0, ge=0, description="Model latency")
