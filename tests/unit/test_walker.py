"""Tests for the cost-field walk and budget roll-up."""

from backend.sanitizer.normalization import is_cost_field, normalize_costs, rollup_budget


def test_is_cost_field():
    assert is_cost_field("estimatedCost")
    assert is_cost_field("totalDayCost")
    assert is_cost_field("COST")
    assert is_cost_field("pricePerNight")
    assert not is_cost_field("priceRange")
    assert not is_cost_field("costNotes")


def test_normalize_costs_replaces_nested_cost_fields(metrics):
    data = {
        "totalEstimatedCost": "₹ 800 + ₹ 6,000 = ₹ 6,800",
        "priceRange": "₹2,000-₹4,000",
        "dayPlans": [
            {
                "morning": [
                    {"title": "Ridge walk", "estimatedCost": "Free"},
                    {"title": "Toy train", "estimatedCost": "₹ 500 per person"},
                ],
                "totalEstimatedCost": 700,
            }
        ],
        "entryFee": {"amount": "$12.50"},
    }

    defaulted = normalize_costs(data, metrics=metrics)

    assert data["totalEstimatedCost"] == 6800
    assert data["priceRange"] == "₹2,000-₹4,000"
    assert data["dayPlans"][0]["morning"][0]["estimatedCost"] == 0
    assert data["dayPlans"][0]["morning"][1]["estimatedCost"] == 500
    assert data["dayPlans"][0]["totalEstimatedCost"] == 700
    assert data["entryFee"] == {"amount": 12.5}
    assert defaulted == 1
    assert metrics.cost_defaults == 1


def test_rollup_budget_sums_categories_and_syncs_days():
    data = {
        "dayPlans": [{"day": 1, "totalEstimatedCost": 0}, {"day": 2, "totalEstimatedCost": 0}],
        "dailyCostBreakdown": [
            {"day": 1, "foodCost": 500, "accommodationCost": 3000, "totalDayCost": 3500},
            {"day": 2, "foodCost": 700, "sightseeingCost": 300, "totalDayCost": 1000},
        ],
        "totalEstimatedCost": 99,
    }

    breakdown, total = rollup_budget(data)

    assert breakdown.total_food_cost == 1200
    assert breakdown.total_accommodation_cost == 3000
    assert breakdown.total_sightseeing_cost == 300
    assert total == 4500
    assert data["totalEstimatedCost"] == 4500
    assert data["budgetBreakdown"]["totalFoodCost"] == 1200
    assert [d["totalEstimatedCost"] for d in data["dayPlans"]] == [3500, 1000]


def test_rollup_budget_without_breakdown_keeps_model_total():
    data = {"dayPlans": [], "totalEstimatedCost": "₹ 12,000"}

    breakdown, total = rollup_budget(data)

    assert breakdown is None
    assert total == 12000
    assert "budgetBreakdown" not in data


def test_rollup_budget_skips_unmatchable_days():
    data = {
        "dayPlans": [{"day": [1], "totalEstimatedCost": 7}, "not a day"],
        "dailyCostBreakdown": [
            {"day": {"n": 1}, "foodCost": 5, "totalDayCost": 5},
            {"day": 1, "foodCost": 10, "totalDayCost": 10},
            None,
        ],
    }

    breakdown, total = rollup_budget(data)

    assert breakdown.total_food_cost == 15
    assert total == 15
    assert data["dayPlans"][0]["totalEstimatedCost"] == 7
