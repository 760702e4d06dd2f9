from datetime import datetime, timedelta
from typing import Literal

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException, Query

from echocatering.api.v1.endpoints.user_endpoints.auth import get_current_user
from echocatering.api.v1.endpoints.utils import page_count
from echocatering.api.v1.errors import api_failure
from echocatering.models.models.base import to_naive_utc, utcnow
from echocatering.models.models.sales import (
    SaleBeanie,
    SaleStatus,
    daily_sales,
    sales_by_event,
)

# All sales routes require authentication
sales_endpoint_router = APIRouter(dependencies=[Depends(get_current_user)])

DEFAULT_WINDOW_DAYS = 30
EVENTS_WINDOW_DAYS = 90


def resolve_window(
    start_date: datetime | None, end_date: datetime | None, days: int = DEFAULT_WINDOW_DAYS
) -> tuple[datetime, datetime]:
    """Default to the last ``days`` days ending now."""
    end = to_naive_utc(end_date) if end_date else utcnow()
    start = to_naive_utc(start_date) if start_date else utcnow() - timedelta(days=days)
    return start, end


def window_payload(start: datetime, end: datetime) -> dict:
    return {"start_date": start.isoformat(), "end_date": end.isoformat()}


@sales_endpoint_router.get("")
async def list_sales(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=500),
    status: SaleStatus | None = None,
    event_id: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    sort_by: Literal["created_at", "completed_at", "total_cents", "status"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
):
    query: dict = {}
    if status:
        query["status"] = status
    if event_id:
        query["event_id"] = event_id
    if start_date or end_date:
        query["created_at"] = {}
        if start_date:
            query["created_at"]["$gte"] = to_naive_utc(start_date)
        if end_date:
            query["created_at"]["$lte"] = to_naive_utc(end_date)

    sort_key = f"+{sort_by}" if sort_order == "asc" else f"-{sort_by}"

    with api_failure("Failed to fetch sales"):
        sales = (
            await SaleBeanie.find(query)
            .sort(sort_key)
            .skip((page - 1) * limit)
            .limit(limit)
            .to_list()
        )
        total = await SaleBeanie.find(query).count()

    return {
        "sales": sales,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": page_count(total, limit),
        },
    }


@sales_endpoint_router.get("/summary")
async def get_sales_summary(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    event_id: str | None = None,
):
    start, end = resolve_window(start_date, end_date)
    with api_failure("Failed to fetch summary"):
        summary = await SaleBeanie.get_summary(start, end, event_id)
    return {**summary.model_dump(), **window_payload(start, end)}


@sales_endpoint_router.get("/by-category")
async def get_sales_by_category(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    event_id: str | None = None,
):
    start, end = resolve_window(start_date, end_date)
    with api_failure("Failed to fetch category breakdown"):
        categories = await SaleBeanie.get_sales_by_category(start, end, event_id)
    return {"categories": categories, **window_payload(start, end)}


@sales_endpoint_router.get("/top-items")
async def get_top_items(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = Query(default=10, ge=1, le=100),
    event_id: str | None = None,
):
    start, end = resolve_window(start_date, end_date)
    with api_failure("Failed to fetch top items"):
        items = await SaleBeanie.get_top_items(start, end, limit=limit, event_id=event_id)
    return {"items": items, **window_payload(start, end)}


@sales_endpoint_router.get("/hourly")
async def get_hourly_sales(date: datetime | None = None, event_id: str | None = None):
    target = to_naive_utc(date) if date else utcnow()
    with api_failure("Failed to fetch hourly breakdown"):
        hourly = await SaleBeanie.get_hourly_sales(target, event_id)
    return {"date": target.strftime("%Y-%m-%d"), "hourly": hourly}


@sales_endpoint_router.get("/daily")
async def get_daily_sales(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    event_id: str | None = None,
):
    start, end = resolve_window(start_date, end_date)
    with api_failure("Failed to fetch daily breakdown"):
        sales = await SaleBeanie.find_succeeded(start, end, event_id)
    return {"daily": daily_sales(sales), **window_payload(start, end)}


@sales_endpoint_router.get("/events")
async def get_sales_by_event(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
):
    start, end = resolve_window(start_date, end_date, days=EVENTS_WINDOW_DAYS)
    with api_failure("Failed to fetch event breakdown"):
        sales = await SaleBeanie.find_succeeded(start, end)
    return {"events": sales_by_event(sales), **window_payload(start, end)}


@sales_endpoint_router.get("/{sale_id}")
async def get_sale(sale_id: PydanticObjectId):
    with api_failure("Failed to fetch sale"):
        sale = await SaleBeanie.get(sale_id)
    if sale is None:
        raise HTTPException(status_code=404, detail="Sale not found")
    return {"sale": sale}
