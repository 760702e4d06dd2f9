import pytest

from echocatering.models.models.catering_events import CateringEventBeanie
from echocatering.tests.conftest import beanie_setup

pytestmark = pytest.mark.usefixtures("unauthenticated_mode")

EVENT = {
    "name": "Garden Wedding",
    "date": "2024-07-06T00:00:00",
    "guest_count": 100,
    "drink_sales": [
        {"name": "Margarita", "category": "cocktails", "quantity": 40, "unit_price": 12}
    ],
    "labor_cost": 200,
}

FINALIZE = {
    "event_id": "pos_42",
    "setup_data": {"event_name": "Rooftop Launch", "event_date": "2024-08-10", "patron_count": 80},
    "summary": {
        "total_revenue": 900,
        "total_tips": 100,
        "category_breakdown": {"cocktails": {"count": 75, "revenue": 900}},
    },
}


class TestCateringEventRoutes:
    @beanie_setup([CateringEventBeanie])
    async def test_create_recalculates(self, async_client):
        response = await async_client.post("/api/v1/catering-events", json=EVENT)

        assert response.status_code == 201
        event = response.json()["event"]
        assert event["total_sales"] == 480
        assert event["net_income"] == 280

    @beanie_setup([CateringEventBeanie])
    async def test_update_merges_and_recalculates(self, async_client):
        await async_client.post("/api/v1/catering-events", json=EVENT)
        event = await CateringEventBeanie.find_one({"name": "Garden Wedding"})

        response = await async_client.put(
            f"/api/v1/catering-events/{event.id}", json={"labor_cost": 500, "venue": "Vizcaya"}
        )

        assert response.status_code == 200
        updated = await CateringEventBeanie.get(event.id)
        assert updated.venue == "Vizcaya"
        assert updated.guest_count == 100
        assert updated.net_income == -20

    @beanie_setup([CateringEventBeanie])
    async def test_update_rejects_blank_name(self, async_client):
        await async_client.post("/api/v1/catering-events", json=EVENT)
        event = await CateringEventBeanie.find_one({"name": "Garden Wedding"})

        response = await async_client.put(
            f"/api/v1/catering-events/{event.id}", json={"name": "  "}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid update"

    @beanie_setup([CateringEventBeanie])
    async def test_list_filters_and_paginates(self, async_client):
        await async_client.post("/api/v1/catering-events", json=EVENT)
        await async_client.post(
            "/api/v1/catering-events", json={**EVENT, "name": "Gala", "status": "completed"}
        )

        body = (
            await async_client.get("/api/v1/catering-events", params={"status": "completed"})
        ).json()

        assert body["total"] == 1
        assert body["pages"] == 1
        assert body["events"][0]["name"] == "Gala"

    @beanie_setup([CateringEventBeanie])
    async def test_finalize_upserts_by_pos_event(self, async_client):
        first = await async_client.post("/api/v1/catering-events/finalize", json=FINALIZE)
        assert first.status_code == 200
        assert first.json()["success"] is True

        again = {**FINALIZE, "setup_data": {**FINALIZE["setup_data"], "patron_count": 95}}
        await async_client.post("/api/v1/catering-events/finalize", json=again)

        events = await CateringEventBeanie.find({"pos_event_id": "pos_42"}).to_list()
        assert len(events) == 1
        assert events[0].guest_count == 95
        assert events[0].status == "completed"
        assert events[0].total_sales == 900
        assert events[0].total_revenue == 1000

    @beanie_setup([CateringEventBeanie])
    async def test_recalculate_and_delete(self, async_client):
        await async_client.post("/api/v1/catering-events", json=EVENT)
        event = await CateringEventBeanie.find_one({"name": "Garden Wedding"})

        recalculated = await async_client.post(f"/api/v1/catering-events/{event.id}/recalculate")
        deleted = await async_client.delete(f"/api/v1/catering-events/{event.id}")
        missing = await async_client.get(f"/api/v1/catering-events/{event.id}")

        assert recalculated.json()["event"]["total_sales"] == 480
        assert deleted.json() == {"message": "Event deleted successfully"}
        assert missing.status_code == 404
