"""Tests for the generation coordinator."""

import json
from datetime import date, timedelta

import pytest

from backend.sanitizer.generation import (
    GenerationCoordinator,
    GenerationError,
    GenerationErrorKind,
)
from backend.sanitizer.models import (
    CallStatus,
    ForecastSource,
    ParseTier,
    RawModelResponse,
    TokenUsage,
    compute_response_digest,
)
from backend.sanitizer.weather import WeatherAggregator

TODAY = date(2025, 6, 1)

ITINERARY = {
    "currency": "INR",
    "currencySymbol": "₹",
    "dayPlans": [
        {
            "day": 1,
            "morning": [{"title": "Ridge walk", "estimatedCost": "Free"}],
            "afternoon": [{"title": "Toy train", "estimatedCost": "₹ 200 + ₹ 300 = ₹ 500"}],
            "evening": [],
        },
        {
            "day": 2,
            "morning": [{"title": "Kufri", "cost": "₹ 1,200"}],
        },
    ],
    "dailyCostBreakdown": [
        {"day": 1, "foodCost": "₹ 800", "sightseeingCost": "₹ 500", "totalDayCost": "₹ 1,300"},
        {"day": 2, "foodCost": "₹ 900", "sightseeingCost": "₹ 1,200", "totalDayCost": "₹ 2,100"},
    ],
    "totalEstimatedCost": "about ₹ 3,000",
}


@pytest.fixture
def aggregator(geocoder, forecast_provider, seasonal, settings) -> WeatherAggregator:
    return WeatherAggregator(
        geocoder=geocoder,
        forecast_provider=forecast_provider,
        seasonal_estimator=seasonal,
        settings=settings,
        today=lambda: TODAY,
    )


@pytest.fixture
def coordinator(settings, aggregator, metrics) -> GenerationCoordinator:
    return GenerationCoordinator(settings=settings, weather=aggregator, metrics=metrics)


@pytest.fixture
def request_(make_request):
    return make_request(
        destinations=["Shimla", "Atlantis"],
        start_date=TODAY + timedelta(days=2),
        duration=2,
    )


def _raw(text: str) -> RawModelResponse:
    return RawModelResponse(
        text=text,
        model_name="gpt-4o",
        token_usage=TokenUsage(prompt_tokens=1000, completion_tokens=2000, total_tokens=3000),
        response_time_ms=1500,
    )


def _truncated() -> str:
    """The itinerary cut off inside its final string value."""
    text = json.dumps(ITINERARY)
    return text[: text.index('"about') + 4]


def test_process_normalizes_costs_and_rolls_up_budget(coordinator, request_):
    itinerary = coordinator.process(request_, _raw(json.dumps(ITINERARY)))

    assert itinerary.parse_tier is ParseTier.strict
    assert itinerary.was_repaired is False
    day1, day2 = itinerary.day_plans
    assert day1["morning"][0]["estimatedCost"] == 0
    assert day1["afternoon"][0]["estimatedCost"] == 500
    assert day2["morning"][0]["estimatedCost"] == 1200
    assert day1["totalEstimatedCost"] == 1300
    assert day2["totalEstimatedCost"] == 2100
    assert itinerary.budget_breakdown.total_food_cost == 1700
    assert itinerary.total_estimated_cost == 3400
    assert itinerary.currency == "INR"


def test_process_attaches_weather_per_destination(coordinator, request_):
    itinerary = coordinator.process(request_, _raw(json.dumps(ITINERARY)))

    shimla, atlantis = itinerary.weather_forecast
    assert shimla.location == "Shimla"
    assert shimla.forecast_summary.source is ForecastSource.forecast
    assert atlantis.forecast_summary is None
    assert atlantis.date_range == shimla.date_range


def test_process_skips_weather_when_not_requested(coordinator, make_request, geocoder):
    request = make_request(duration=2, include_weather_reference=False)

    itinerary = coordinator.process(request, _raw(json.dumps(ITINERARY)))

    assert itinerary.weather_forecast is None
    assert geocoder.calls == []


def test_process_reports_repaired_parse(coordinator, request_):
    truncated = _truncated()

    itinerary = coordinator.process(request_, _raw(truncated))

    assert itinerary.parse_tier is ParseTier.structural_repair
    assert itinerary.was_repaired is True


@pytest.mark.parametrize(
    "text,kind",
    [
        ("", GenerationErrorKind.empty_response),
        ("   \n", GenerationErrorKind.empty_response),
        ("Sorry, I can't plan that trip.", GenerationErrorKind.unparseable),
        ('{"currency": "INR"}', GenerationErrorKind.invalid_structure),
        ("[1, 2, 3]", GenerationErrorKind.invalid_structure),
    ],
)
def test_process_raises_typed_errors(coordinator, request_, text, kind):
    with pytest.raises(GenerationError) as exc_info:
        coordinator.process(request_, _raw(text))

    assert exc_info.value.kind is kind


def test_unparseable_error_carries_parse_context(coordinator, request_):
    text = "Sorry, I can't plan that trip."

    with pytest.raises(GenerationError) as exc_info:
        coordinator.process(request_, _raw(text))

    assert exc_info.value.text_length == len(text)
    assert exc_info.value.tiers_tried == list(ParseTier)


def test_run_builds_call_log_for_partial_success(coordinator, request_, metrics):
    text = json.dumps(ITINERARY)

    outcome = coordinator.run(request_, _raw(text))

    assert outcome.ok
    log = outcome.call_log
    assert log.status is CallStatus.partial
    assert log.model_name == "gpt-4o"
    assert log.parse_tier is ParseTier.strict
    assert log.parsed_response["totalEstimatedCost"] == 3400
    assert log.cost_usd == pytest.approx(0.15)
    assert log.response_time_ms >= 1500
    assert log.response_digest == compute_response_digest(text)
    assert log.parameters["destinations"] == ["Shimla", "Atlantis"]
    assert log.parameters["includeWeatherReference"] is True
    assert metrics.generation_outcomes["partial"] == 1


def test_run_reports_success_when_every_destination_has_weather(coordinator, make_request):
    request = make_request(start_date=TODAY + timedelta(days=1), duration=2)

    outcome = coordinator.run(request, _raw(json.dumps(ITINERARY)))

    assert outcome.call_log.status is CallStatus.success
    assert outcome.call_log.error_message is None


def test_run_never_raises_and_logs_failure(coordinator, request_, metrics):
    text = "Sorry, I can't plan that trip."

    outcome = coordinator.run(request_, _raw(text))

    assert not outcome.ok
    assert outcome.itinerary is None
    assert outcome.error.kind is GenerationErrorKind.unparseable
    assert outcome.call_log.status is CallStatus.failed
    assert outcome.call_log.parsed_response == text
    assert outcome.call_log.error_message.startswith("unparseable:")
    assert metrics.generation_outcomes["failed"] == 1


def test_run_keeps_parsed_value_for_invalid_structure(coordinator, request_):
    outcome = coordinator.run(request_, _raw('{currency: "INR"}'))

    assert outcome.error.kind is GenerationErrorKind.invalid_structure
    assert outcome.call_log.parsed_response == {"currency": "INR"}
    assert outcome.call_log.parse_tier is ParseTier.lenient
    assert outcome.call_log.was_repaired is True


def test_run_truncates_repaired_text(settings, request_, aggregator):
    settings.repaired_excerpt_chars = 20
    coordinator = GenerationCoordinator(settings=settings, weather=aggregator)

    outcome = coordinator.run(request_, _raw(_truncated()))

    assert outcome.call_log.parse_tier is ParseTier.structural_repair
    assert len(outcome.call_log.repaired_response) == 20


MESSY_ITINERARIES = [
    {
        "dayPlans": [{"day": 1, "morning": []}],
        "restaurantRecommendations": [{"name": "Cafe", "cuisine": ["Indian", None]}],
    },
    {
        "dayPlans": [{"day": [1], "morning": []}],
        "dailyCostBreakdown": [{"day": 1, "foodCost": 5}],
    },
    {
        "dayPlans": [None, "x", 5],
        "dailyCostBreakdown": "garbage",
    },
    {
        "dayPlans": [
            {
                "day": {"n": 1},
                "morning": [{"title": {"en": "Walk"}, "estimatedCost": {"amount": "₹ 100"}}],
                "afternoon": [None, 7],
            }
        ],
        "dailyCostBreakdown": [None, {"day": None, "foodCost": [1, 2]}],
    },
    {
        "dayPlans": [{"day": 1}],
        "accommodationSuggestions": [{"amenities": [None, 1], "location": ["a"]}, None],
        "transportationTips": [None, 5, {"mode": ["bus"]}],
        "restaurantRecommendations": [{"cuisine": 5, "dietaryOptions": [None]}, 3],
        "totalEstimatedCost": {"amount": 5},
    },
]


@pytest.mark.parametrize("data", MESSY_ITINERARIES)
def test_run_returns_outcome_for_messy_sections(coordinator, make_request, data):
    request = make_request(duration=1, include_weather_reference=False)

    outcome = coordinator.run(request, _raw(json.dumps(data)))

    assert outcome.ok
    assert outcome.call_log.status is CallStatus.success
    assert isinstance(outcome.itinerary.total_estimated_cost, float)
    assert all(isinstance(day["day"], int) for day in outcome.itinerary.data["dayPlans"])
