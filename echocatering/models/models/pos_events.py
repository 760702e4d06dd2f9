from datetime import datetime, timedelta
from typing import Literal

import pymongo
from beanie import Document
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo import IndexModel

from echocatering.models.models.base import TimestampedModel, to_naive_utc, utcnow

PosEventStatus = Literal["active", "ended", "cancelled"]
TabStatus = Literal["open", "closed", "voided"]

TIMELINE_INTERVAL_MINUTES = 15


class PosItem(BaseModel):
    menu_item_id: str | None = None
    name: str
    category: str = "other"
    base_price: float = 0
    modifier: str | None = None
    modifier_price_adjustment: float = 0
    final_price: float = 0
    added_at: datetime = Field(default_factory=utcnow)
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return self.final_price * self.quantity


class PosTab(BaseModel):
    local_id: str
    name: str
    items: list[PosItem] = Field(default_factory=list)
    status: TabStatus = "closed"
    subtotal: float = 0
    item_count: int = 0
    tip_amount: float = 0
    created_at: datetime = Field(default_factory=utcnow)
    closed_at: datetime | None = None


class CategoryTotals(BaseModel):
    count: int = 0
    revenue: float = 0


class TimelineInterval(BaseModel):
    interval_start: datetime
    interval_end: datetime
    item_count: int = 0
    revenue: float = 0


class PosEventSummary(BaseModel):
    total_revenue: float = 0
    total_tips: float = 0
    total_items: int = 0
    total_tabs: int = 0
    category_breakdown: dict[str, CategoryTotals] = Field(default_factory=dict)
    timeline_breakdown: list[TimelineInterval] = Field(default_factory=list)


def interval_start(moment: datetime) -> datetime:
    """Floor ``moment`` to its 15-minute timeline bucket."""
    minute = moment.minute - moment.minute % TIMELINE_INTERVAL_MINUTES
    return moment.replace(minute=minute, second=0, microsecond=0)


class PosEventBase(TimestampedModel):
    name: str = Field(min_length=1)
    date: datetime = Field(default_factory=utcnow)
    status: PosEventStatus = "active"
    tabs: list[PosTab] = Field(default_factory=list)
    summary: PosEventSummary = Field(default_factory=PosEventSummary)
    started_at: datetime = Field(default_factory=utcnow)
    ended_at: datetime | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Event name cannot be empty")
        return value

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    def calculate_summary(self) -> PosEventSummary:
        """Totals per event, per category and per 15-minute interval."""
        summary = PosEventSummary(total_tabs=len(self.tabs))
        timeline: dict[datetime, TimelineInterval] = {}

        for tab in self.tabs:
            summary.total_tips += tab.tip_amount
            for item in tab.items:
                summary.total_items += item.quantity
                summary.total_revenue += item.line_total

                totals = summary.category_breakdown.setdefault(
                    item.category or "other", CategoryTotals()
                )
                totals.count += item.quantity
                totals.revenue += item.line_total

                start = interval_start(item.added_at)
                bucket = timeline.setdefault(
                    start,
                    TimelineInterval(
                        interval_start=start,
                        interval_end=start + timedelta(minutes=TIMELINE_INTERVAL_MINUTES),
                    ),
                )
                bucket.item_count += item.quantity
                bucket.revenue += item.line_total

        summary.timeline_breakdown = [timeline[start] for start in sorted(timeline)]
        self.summary = summary
        return summary

    def end(self, tabs: list[PosTab]) -> None:
        self.tabs = tabs
        self.status = "ended"
        self.ended_at = utcnow()
        self.calculate_summary()
        self.touch()


class PosEventBeanie(PosEventBase, Document):
    class Settings:
        name = "pos_events"
        indexes = [
            IndexModel([("date", pymongo.DESCENDING)]),
            IndexModel([("status", pymongo.ASCENDING)]),
            IndexModel([("tabs.local_id", pymongo.ASCENDING)]),
        ]


# ---------------------------------------------------------------------------
# Local POS state, as sent by the register
# ---------------------------------------------------------------------------


class LocalItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    name: str
    category: str = "other"
    price: float = 0
    base_price: float | None = None
    modifier: str | None = None
    modifier_price_adjustment: float = 0
    added_at: datetime | None = None
    quantity: int = 1


class LocalTab(BaseModel):
    id: str
    name: str
    items: list[LocalItem] = Field(default_factory=list)
    tip_amount: float = 0
    created_at: datetime | None = None


class PosEventCreate(BaseModel):
    name: str | None = None
    date: datetime | None = None


class PosSyncRequest(BaseModel):
    tabs: list[LocalTab] = Field(default_factory=list)


def tab_from_local(tab: LocalTab, closed: bool = False) -> PosTab:
    now = utcnow()
    items = [
        PosItem(
            menu_item_id=item.id,
            name=item.name,
            category=item.category,
            base_price=item.base_price or item.price,
            modifier=item.modifier,
            modifier_price_adjustment=item.modifier_price_adjustment,
            final_price=item.price,
            added_at=to_naive_utc(item.added_at) if item.added_at else now,
            quantity=item.quantity or 1,
        )
        for item in tab.items
    ]
    return PosTab(
        local_id=tab.id,
        name=tab.name,
        items=items,
        status="closed" if closed else "open",
        subtotal=sum(item.final_price for item in items),
        item_count=len(items),
        tip_amount=tab.tip_amount,
        created_at=to_naive_utc(tab.created_at) if tab.created_at else now,
        closed_at=now if closed else None,
    )
