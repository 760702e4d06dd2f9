from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Literal

import pymongo
from beanie import Document, Indexed
from pydantic import BaseModel, Field, computed_field
from pymongo import IndexModel

from echocatering.models.models.base import TimestampedModel, cents_to_dollars

SaleStatus = Literal["pending", "succeeded", "failed", "refunded", "partially_refunded"]
PaymentMethod = Literal["card_present", "card", "cash", "other"]


class SaleItem(BaseModel):
    name: str
    category: str = "uncategorized"
    quantity: int = Field(default=1, ge=1)
    unit_price: int = Field(default=0, ge=0, description="Unit price in cents")
    modifier: str | None = None
    modifier_price_adjustment: int = 0

    @property
    def revenue_cents(self) -> int:
        return self.unit_price * self.quantity


class SaleBase(TimestampedModel):
    # Stripe identifiers
    stripe_payment_intent_id: str
    stripe_charge_id: str | None = None

    # POS event / tab association
    event_id: str | None = None
    event_name: str | None = None
    tab_id: str | None = None
    tab_name: str | None = None

    items: list[SaleItem] = Field(default_factory=list)

    # Money, in cents
    subtotal_cents: int = Field(ge=0)
    tip_cents: int = Field(default=0, ge=0)
    tax_cents: int = Field(default=0, ge=0)
    total_cents: int = Field(ge=0)

    payment_method: PaymentMethod = "card_present"
    card_brand: str | None = None
    card_last4: str | None = None

    status: SaleStatus = "pending"

    refunded_cents: int = Field(default=0, ge=0)
    refund_reason: str | None = None

    receipt_url: str | None = None
    currency: str = "usd"
    reader_id: str | None = None
    location_id: str | None = None
    completed_at: datetime | None = None

    @computed_field
    @property
    def subtotal(self) -> float:
        return cents_to_dollars(self.subtotal_cents)

    @computed_field
    @property
    def tip(self) -> float:
        return cents_to_dollars(self.tip_cents)

    @computed_field
    @property
    def tax(self) -> float:
        return cents_to_dollars(self.tax_cents)

    @computed_field
    @property
    def total(self) -> float:
        return cents_to_dollars(self.total_cents)

    @computed_field
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def apply_refund(self, amount_cents: int, reason: str | None = None) -> SaleStatus:
        """Record a refund and move the sale to refunded / partially_refunded."""
        self.refunded_cents += amount_cents
        self.status = refund_status(self.total_cents, self.refunded_cents)
        self.refund_reason = reason
        self.touch()
        return self.status


class SaleBeanie(SaleBase, Document):
    stripe_payment_intent_id: Indexed(str, unique=True)  # type: ignore[valid-type]

    class Settings:
        name = "sales"
        indexes = [
            IndexModel([("created_at", pymongo.DESCENDING)]),
            IndexModel([("status", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]),
            IndexModel([("event_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]),
        ]

    @staticmethod
    def succeeded_query(start: datetime, end: datetime, event_id: str | None = None) -> dict:
        query: dict = {"status": "succeeded", "created_at": {"$gte": start, "$lte": end}}
        if event_id:
            query["event_id"] = event_id
        return query

    @classmethod
    async def find_succeeded(
        cls, start: datetime, end: datetime, event_id: str | None = None
    ) -> list["SaleBeanie"]:
        return await cls.find(cls.succeeded_query(start, end, event_id)).to_list()

    @classmethod
    async def get_summary(
        cls, start: datetime, end: datetime, event_id: str | None = None
    ) -> "SalesSummary":
        return summarize_sales(await cls.find_succeeded(start, end, event_id))

    @classmethod
    async def get_sales_by_category(
        cls, start: datetime, end: datetime, event_id: str | None = None
    ) -> list["CategorySales"]:
        return sales_by_category(await cls.find_succeeded(start, end, event_id))

    @classmethod
    async def get_top_items(
        cls, start: datetime, end: datetime, limit: int = 10, event_id: str | None = None
    ) -> list["ItemSales"]:
        return top_items(await cls.find_succeeded(start, end, event_id), limit=limit)

    @classmethod
    async def get_hourly_sales(
        cls, date: datetime, event_id: str | None = None
    ) -> list["HourlySales"]:
        start = date.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1) - timedelta(microseconds=1)
        return hourly_sales(await cls.find_succeeded(start, end, event_id))


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


class SalesSummary(BaseModel):
    total_sales: float = 0
    total_tips: float = 0
    total_tax: float = 0
    transaction_count: int = 0
    items_sold: int = 0


class CategorySales(BaseModel):
    category: str
    quantity: int
    revenue: float


class ItemSales(BaseModel):
    name: str
    category: str
    quantity: int
    revenue: float


class HourlySales(BaseModel):
    hour: int
    sales: float = 0
    transactions: int = 0


class DailySales(BaseModel):
    date: str
    sales: float
    tips: float
    transactions: int


class EventSales(BaseModel):
    event_id: str
    event_name: str | None
    sales: float
    tips: float
    transactions: int
    first_sale: datetime
    last_sale: datetime


def refund_status(total_cents: int, refunded_cents: int) -> SaleStatus:
    return "refunded" if refunded_cents >= total_cents else "partially_refunded"


def summarize_sales(sales: Iterable[SaleBase]) -> SalesSummary:
    """Totals in dollars over the given sales; ``items_sold`` counts line items."""
    total = tips = tax = count = items = 0
    for sale in sales:
        total += sale.total_cents
        tips += sale.tip_cents
        tax += sale.tax_cents
        count += 1
        items += len(sale.items)

    return SalesSummary(
        total_sales=cents_to_dollars(total),
        total_tips=cents_to_dollars(tips),
        total_tax=cents_to_dollars(tax),
        transaction_count=count,
        items_sold=items,
    )


def sales_by_category(sales: Iterable[SaleBase]) -> list[CategorySales]:
    quantities: dict[str, int] = defaultdict(int)
    revenue: dict[str, int] = defaultdict(int)
    for sale in sales:
        for item in sale.items:
            quantities[item.category] += item.quantity
            revenue[item.category] += item.revenue_cents

    rows = [
        CategorySales(
            category=cat, quantity=quantities[cat], revenue=cents_to_dollars(revenue[cat])
        )
        for cat in quantities
    ]
    return sorted(rows, key=lambda row: row.revenue, reverse=True)


def top_items(sales: Iterable[SaleBase], limit: int = 10) -> list[ItemSales]:
    categories: dict[str, str] = {}
    quantities: dict[str, int] = defaultdict(int)
    revenue: dict[str, int] = defaultdict(int)
    for sale in sales:
        for item in sale.items:
            categories.setdefault(item.name, item.category)
            quantities[item.name] += item.quantity
            revenue[item.name] += item.revenue_cents

    rows = [
        ItemSales(
            name=name,
            category=categories[name],
            quantity=quantities[name],
            revenue=cents_to_dollars(revenue[name]),
        )
        for name in quantities
    ]
    return sorted(rows, key=lambda row: row.quantity, reverse=True)[:limit]


def hourly_sales(sales: Iterable[SaleBase]) -> list[HourlySales]:
    """24 rows, one per hour of ``created_at``, zero-filled."""
    hours = [HourlySales(hour=hour) for hour in range(24)]
    cents = [0] * 24
    for sale in sales:
        hour = sale.created_at.hour
        cents[hour] += sale.total_cents
        hours[hour].transactions += 1
    for hour, row in enumerate(hours):
        row.sales = cents_to_dollars(cents[hour])
    return hours


def daily_sales(sales: Iterable[SaleBase]) -> list[DailySales]:
    totals: dict[str, list[int]] = {}
    for sale in sales:
        day = sale.created_at.strftime("%Y-%m-%d")
        row = totals.setdefault(day, [0, 0, 0])
        row[0] += sale.total_cents
        row[1] += sale.tip_cents
        row[2] += 1

    return [
        DailySales(
            date=day,
            sales=cents_to_dollars(total),
            tips=cents_to_dollars(tips),
            transactions=count,
        )
        for day, (total, tips, count) in sorted(totals.items())
    ]


def sales_by_event(sales: Iterable[SaleBase]) -> list[EventSales]:
    events: dict[str, EventSales] = {}
    cents: dict[str, list[int]] = {}
    for sale in sales:
        if not sale.event_id:
            continue
        row = events.get(sale.event_id)
        if row is None:
            row = events[sale.event_id] = EventSales(
                event_id=sale.event_id,
                event_name=sale.event_name,
                sales=0,
                tips=0,
                transactions=0,
                first_sale=sale.created_at,
                last_sale=sale.created_at,
            )
            cents[sale.event_id] = [0, 0]
        cents[sale.event_id][0] += sale.total_cents
        cents[sale.event_id][1] += sale.tip_cents
        row.transactions += 1
        row.first_sale = min(row.first_sale, sale.created_at)
        row.last_sale = max(row.last_sale, sale.created_at)

    for event_id, row in events.items():
        row.sales = cents_to_dollars(cents[event_id][0])
        row.tips = cents_to_dollars(cents[event_id][1])

    return sorted(events.values(), key=lambda row: row.first_sale, reverse=True)
