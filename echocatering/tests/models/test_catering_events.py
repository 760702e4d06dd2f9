from datetime import datetime

import pytest

from echocatering.models.models.catering_events import (
    CateringEventBase,
    DrinkSale,
    FinalizeEventRequest,
    FlatFeeConfig,
    build_event_from_pos,
    duration_between,
    to_number,
)


def make_event(**overrides) -> CateringEventBase:
    data = {"name": "Garden Wedding", "date": datetime(2024, 7, 6), "guest_count": 100}
    data.update(overrides)
    return CateringEventBase(**data)


def test_consumption_sales_sum_drink_revenue():
    event = make_event(
        drink_sales=[
            DrinkSale(name="Margarita", category="cocktails", quantity=40, unit_price=12),
            DrinkSale(name="Lager", category="beer", quantity=30, unit_price=7),
        ],
        total_tips=90,
        labor_cost=300,
        travel_cost=50,
        accommodation_cost=400,
    )
    event.recalculate()

    assert event.drink_sales[0].revenue == 480
    assert event.total_sales == 690
    assert event.total_revenue == 780
    # accommodation is tracked but not part of total cost
    assert event.total_cost == 350
    assert event.net_income == 430
    assert event.total_profit == 430
    assert event.total_loss == 0


def test_flat_fee_bills_base_rate_and_extra_hours():
    event = make_event(
        payment_model="flat_fee",
        duration_hours=4,
        flat_fee_config=FlatFeeConfig(
            base_rate=30, base_hours=2, additional_drinks_per_hour=1, price_per_extra_drink=5
        ),
    )
    event.recalculate()

    # 100 guests * $30 + (100 guests * 1 drink * 2 extra hours) * $5
    assert event.total_sales == 4000


def test_hybrid_bills_only_drinks_beyond_coverage():
    config = FlatFeeConfig(
        base_rate=20,
        base_hours=2,
        drinks_per_guest_per_hour=1,
        additional_drinks_per_hour=1,
        price_per_extra_drink=8,
    )
    event = make_event(
        payment_model="hybrid",
        guest_count=10,
        duration_hours=3,
        flat_fee_config=config,
        drink_sales=[DrinkSale(name="Spritz", quantity=45, unit_price=10)],
    )
    event.recalculate()

    # covered: 10*1*2 + 10*1*1 = 30 drinks, 15 over
    assert event.total_sales == 10 * 20 + 15 * 8


def test_hybrid_with_no_overage():
    event = make_event(
        payment_model="hybrid",
        guest_count=10,
        duration_hours=2,
        flat_fee_config=FlatFeeConfig(base_rate=20, price_per_extra_drink=8),
        drink_sales=[DrinkSale(name="Spritz", quantity=5, unit_price=10)],
    )
    event.recalculate()
    assert event.total_sales == 200


def test_loss_when_costs_exceed_revenue():
    event = make_event(
        labor_cost=500, drink_sales=[DrinkSale(name="x", quantity=10, unit_price=10)]
    )
    event.recalculate()
    assert event.net_income == -400
    assert event.total_profit == 0
    assert event.total_loss == 400


def test_unknown_drink_category_becomes_other():
    assert DrinkSale(name="Kombucha", category="Ferments").category == "other"
    assert DrinkSale(name="IPA", category="BEER").category == "beer"


def test_blank_event_name_rejected():
    with pytest.raises(ValueError):
        make_event(name="   ")


@pytest.mark.parametrize(
    "value, integer, expected",
    [
        ("12.5", False, 12.5),
        ("12.9", True, 12),
        (None, False, 0),
        ("abc", False, 0),
        ("nan", False, 0),
    ],
)
def test_to_number(value, integer, expected):
    assert to_number(value, integer=integer) == expected


def test_duration_between():
    assert duration_between("18:00", "22:30") == 4.5
    assert duration_between("22:00", "18:00") == 0
    assert duration_between(None, "18:00") == 0
    assert duration_between("six", "ten") == 0


def test_build_event_from_pos_with_summary():
    request = FinalizeEventRequest(
        event_id="pos_42",
        setup_data={
            "event_name": "Rooftop Launch",
            "event_date": "2024-08-10",
            "start_time": "18:00",
            "end_time": "22:00",
            "patron_count": "80",
            "accommodation_cost": "150",
            "transportation_costs": "60",
            "permit_cost": "25",
            "liability_insurance_cost": "40",
            "labor": [{"title": "Bartender", "rate": "30", "hours": "5"}],
            "glassware_sent": {"rox": 50, "tmbl": 0},
            "glassware_returned": {"rox": 47},
            "ice_sent": 6,
            "ice_returned": 1,
            "inventory": {
                "cocktails": [{"name": "Mezcal", "sent": 4, "returned": 1.5}],
                "beer": [{"name": "", "sent": 2}],
            },
        },
        summary={
            "total_revenue": 1200,
            "total_tips": 180,
            "taxes": 96,
            "category_breakdown": {"cocktails": {"count": 60, "revenue": 720}},
            "timeline_breakdown": [
                {
                    "interval_start": "2024-08-10T18:00:00",
                    "interval_end": "2024-08-10T18:30:00",
                    "items": [{"name": "Margarita", "category": "cocktails", "quantity": 12}],
                }
            ],
        },
        cogs_data={"total": 210},
    )

    data = build_event_from_pos(request)

    assert data["name"] == "Rooftop Launch"
    assert data["date"] == datetime(2024, 8, 10)
    assert data["duration_hours"] == 4
    assert data["guest_count"] == 80
    assert data["labor_cost"] == 150
    assert data["status"] == "completed"
    assert data["pos_event_id"] == "pos_42"
    assert [row.type for row in data["glassware"]] == ["ROX"]
    assert data["glassware"][0].broken == 3
    assert data["ice_blocks_brought"] == 6
    assert len(data["bottles_prepped"]) == 1
    assert data["bottles_prepped"][0].units_used == 2.5
    assert data["total_revenue"] == 1380
    assert data["drink_sales"][0].unit_price == 12
    assert data["timeline"][0].items[0].quantity == 12

    event = CateringEventBase.model_validate(data)
    event.recalculate()
    assert event.total_sales == 720
    assert event.total_cost == 60 + 25 + 40 + 150 + 96 + 210


def test_build_event_from_pos_without_summary_is_draft():
    data = build_event_from_pos(FinalizeEventRequest(setup_data={"event_name": "Setup only"}))
    assert data["status"] == "draft"
    assert "drink_sales" not in data
    assert "pos_event_id" not in data
