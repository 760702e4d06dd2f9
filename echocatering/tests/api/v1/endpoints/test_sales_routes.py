from datetime import timedelta

import pytest

from echocatering.models.models.base import utcnow
from echocatering.models.models.sales import SaleBeanie, SaleItem
from echocatering.tests.conftest import beanie_setup

pytestmark = pytest.mark.usefixtures("unauthenticated_mode")


async def seed_sales() -> list[SaleBeanie]:
    now = utcnow()
    sales = [
        SaleBeanie(
            stripe_payment_intent_id="pi_1",
            subtotal_cents=2400,
            tip_cents=300,
            total_cents=2700,
            items=[SaleItem(name="Margarita", category="cocktails", quantity=2, unit_price=1200)],
            status="succeeded",
            event_id="evt_1",
            event_name="Garden Wedding",
            created_at=now - timedelta(hours=1),
        ),
        SaleBeanie(
            stripe_payment_intent_id="pi_2",
            subtotal_cents=700,
            total_cents=700,
            items=[SaleItem(name="Lager", category="beer", quantity=1, unit_price=700)],
            status="succeeded",
            created_at=now - timedelta(hours=2),
        ),
        SaleBeanie(
            stripe_payment_intent_id="pi_3",
            subtotal_cents=900,
            total_cents=900,
            status="pending",
            created_at=now,
        ),
    ]
    for sale in sales:
        await sale.insert()
    return sales


class TestSalesRoutes:
    @beanie_setup([SaleBeanie])
    async def test_list_sales_paginates_and_sorts(self, async_client):
        await seed_sales()

        response = await async_client.get("/api/v1/sales", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        assert [sale["stripe_payment_intent_id"] for sale in body["sales"]] == ["pi_3", "pi_1"]

    @beanie_setup([SaleBeanie])
    async def test_list_sales_filters_by_status(self, async_client):
        await seed_sales()

        response = await async_client.get(
            "/api/v1/sales", params={"status": "pending", "sort_order": "asc"}
        )

        assert [sale["status"] for sale in response.json()["sales"]] == ["pending"]

    @beanie_setup([SaleBeanie])
    async def test_summary_defaults_to_last_30_days(self, async_client):
        await seed_sales()

        response = await async_client.get("/api/v1/sales/summary")

        assert response.status_code == 200
        body = response.json()
        assert body["total_sales"] == 34.0
        assert body["total_tips"] == 3.0
        assert body["transaction_count"] == 2
        assert body["items_sold"] == 2
        assert "start_date" in body and "end_date" in body

    @beanie_setup([SaleBeanie])
    async def test_breakdowns(self, async_client):
        await seed_sales()

        categories = (await async_client.get("/api/v1/sales/by-category")).json()["categories"]
        top = (await async_client.get("/api/v1/sales/top-items", params={"limit": 1})).json()
        events = (await async_client.get("/api/v1/sales/events")).json()["events"]
        daily = (await async_client.get("/api/v1/sales/daily")).json()["daily"]

        assert categories[0] == {"category": "cocktails", "quantity": 2, "revenue": 24.0}
        assert [item["name"] for item in top["items"]] == ["Margarita"]
        assert [event["event_id"] for event in events] == ["evt_1"]
        assert sum(row["transactions"] for row in daily) == 2

    @beanie_setup([SaleBeanie])
    async def test_hourly_has_24_rows(self, async_client):
        response = await async_client.get("/api/v1/sales/hourly")
        assert len(response.json()["hourly"]) == 24

    @beanie_setup([SaleBeanie])
    async def test_get_sale_and_404(self, async_client):
        sales = await seed_sales()

        found = await async_client.get(f"/api/v1/sales/{sales[0].id}")
        missing = await async_client.get("/api/v1/sales/65f000000000000000000000")

        assert found.status_code == 200
        assert found.json()["sale"]["total"] == 27.0
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Sale not found"
