from datetime import datetime
from typing import Any, Literal

import pymongo
from beanie import Document
from pydantic import BaseModel, Field, field_validator
from pymongo import IndexModel

from echocatering.models.logging import logger
from echocatering.models.models.base import TimestampedModel, to_naive_utc, utcnow

PaymentModel = Literal["consumption", "flat_fee", "hybrid"]
EventStatus = Literal["draft", "active", "completed", "cancelled"]
DrinkCategory = Literal["cocktails", "mocktails", "beer", "wine", "spirits", "other"]

INVENTORY_CATEGORIES = ("cocktails", "mocktails", "beer", "wine")


class InventoryItem(BaseModel):
    name: str
    category: str = "spirits"
    units_prepared: float = 0
    units_returned: float = 0
    units_used: float = 0


class Glassware(BaseModel):
    type: Literal["ROX", "TMBL"]
    sent: int = 0
    returned_clean: int = 0
    returned_dirty: int = 0
    broken: int = 0


class DrinkSale(BaseModel):
    name: str
    category: DrinkCategory = "other"
    quantity: float = Field(default=0, ge=0)
    unit_price: float = Field(default=0, ge=0)
    revenue: float = 0

    @field_validator("category", mode="before")
    @classmethod
    def unknown_category_is_other(cls, value):
        if isinstance(value, str) and value.lower() in DrinkCategory.__args__:
            return value.lower()
        return "other"


class TimelineItem(BaseModel):
    name: str | None = None
    category: str | None = None
    quantity: float = 0


class TimelineEntry(BaseModel):
    interval_start: datetime
    interval_end: datetime
    items: list[TimelineItem] = Field(default_factory=list)


class LaborDetail(BaseModel):
    title: str = ""
    rate: float = 0
    hours: float = 0
    total: float = 0


class SpillageItem(BaseModel):
    name: str | None = None
    category: str | None = None
    quantity: float = 0
    cost_per_unit: float = 0
    total_cost: float = 0


class FlatFeeConfig(BaseModel):
    base_rate: float = 0  # $ per guest for the base block
    base_hours: float = 2
    drinks_per_guest_per_hour: float = 2.5
    additional_drinks_per_hour: float = 1
    price_per_extra_drink: float = 0

    def covered_drinks(self, guest_count: float, duration_hours: float) -> tuple[float, float]:
        """Return (base block drinks, drinks covered by hours past the base block)."""
        base = guest_count * self.drinks_per_guest_per_hour * self.base_hours
        extra_hours = max(0, duration_hours - self.base_hours)
        extra = guest_count * self.additional_drinks_per_hour * extra_hours
        return base, extra


class CateringEventBase(TimestampedModel):
    name: str = Field(min_length=1)
    date: datetime
    start_time: str = ""
    end_time: str = ""
    venue: str = ""
    client_name: str = ""
    notes: str = ""

    guest_count: int = Field(default=0, ge=0)
    duration_hours: float = Field(default=0, ge=0)

    payment_model: PaymentModel = "consumption"
    flat_fee_config: FlatFeeConfig = Field(default_factory=FlatFeeConfig)

    # Financials, in dollars
    total_sales: float = 0
    total_tips: float = 0
    total_cost: float = 0
    accommodation_cost: float = 0
    travel_cost: float = 0
    permit_cost: float = 0
    insurance_cost: float = 0
    labor_cost: float = 0
    spillage_cost: float = 0
    taxes_cost: float = 0
    cogs_cost: float = 0
    total_revenue: float = 0
    total_profit: float = 0
    total_loss: float = 0
    net_income: float = 0

    labor_details: list[LaborDetail] = Field(default_factory=list)
    spillage_items: list[SpillageItem] = Field(default_factory=list)
    drink_sales: list[DrinkSale] = Field(default_factory=list)

    bottles_prepped: list[InventoryItem] = Field(default_factory=list)
    glassware: list[Glassware] = Field(default_factory=list)
    ice_blocks_brought: int = 0
    ice_blocks_returned: int = 0

    timeline: list[TimelineEntry] = Field(default_factory=list)

    pos_event_id: str | None = None
    status: EventStatus = "draft"
    event_number: int | None = None

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

    def recalculate(self) -> None:
        """
        Derive sales, revenue, cost and profit/loss from the stored inputs.

        - consumption: sum of drink sale revenue
        - flat_fee: per-guest base rate plus drinks covered by extra hours
        - hybrid: per-guest base rate plus drinks sold beyond the covered amount
        """
        drink_revenue = 0.0
        for sale in self.drink_sales:
            sale.revenue = sale.quantity * sale.unit_price
            drink_revenue += sale.revenue

        cfg = self.flat_fee_config
        if self.payment_model == "consumption":
            self.total_sales = drink_revenue
        elif self.payment_model == "flat_fee":
            _, extra_drinks = cfg.covered_drinks(self.guest_count, self.duration_hours)
            self.total_sales = (
                self.guest_count * cfg.base_rate + extra_drinks * cfg.price_per_extra_drink
            )
        elif self.payment_model == "hybrid":
            base, extra = cfg.covered_drinks(self.guest_count, self.duration_hours)
            drinks_sold = sum(sale.quantity for sale in self.drink_sales)
            overage = max(0, drinks_sold - (base + extra))
            self.total_sales = (
                self.guest_count * cfg.base_rate + overage * cfg.price_per_extra_drink
            )

        self.total_revenue = self.total_sales + self.total_tips
        self.total_cost = (
            self.travel_cost
            + self.permit_cost
            + self.insurance_cost
            + self.labor_cost
            + self.spillage_cost
            + self.taxes_cost
            + self.cogs_cost
        )
        self.net_income = self.total_revenue - self.total_cost
        self.total_profit = max(0, self.net_income)
        self.total_loss = max(0, -self.net_income)
        self.touch()


class CateringEventBeanie(CateringEventBase, Document):
    class Settings:
        name = "catering_events"
        indexes = [
            IndexModel([("date", pymongo.DESCENDING)]),
            IndexModel([("status", pymongo.ASCENDING)]),
            IndexModel([("event_number", pymongo.ASCENDING)]),
        ]


class CateringEventUpdate(BaseModel):
    """Partial update payload; only fields that were sent are applied."""

    name: str | None = None
    date: datetime | None = None
    start_time: str | None = None
    end_time: str | None = None
    venue: str | None = None
    client_name: str | None = None
    notes: str | None = None
    guest_count: int | None = Field(default=None, ge=0)
    duration_hours: float | None = Field(default=None, ge=0)
    payment_model: PaymentModel | None = None
    flat_fee_config: FlatFeeConfig | None = None
    total_tips: float | None = None
    accommodation_cost: float | None = None
    travel_cost: float | None = None
    permit_cost: float | None = None
    insurance_cost: float | None = None
    labor_cost: float | None = None
    spillage_cost: float | None = None
    taxes_cost: float | None = None
    cogs_cost: float | None = None
    labor_details: list[LaborDetail] | None = None
    spillage_items: list[SpillageItem] | None = None
    drink_sales: list[DrinkSale] | None = None
    bottles_prepped: list[InventoryItem] | None = None
    glassware: list[Glassware] | None = None
    ice_blocks_brought: int | None = None
    ice_blocks_returned: int | None = None
    timeline: list[TimelineEntry] | None = None
    status: EventStatus | None = None
    event_number: int | None = None


# ---------------------------------------------------------------------------
# POS finalization
# ---------------------------------------------------------------------------


class FinalizeEventRequest(BaseModel):
    """Setup data and post-event summary sent by the POS when an event closes."""

    event_id: str | None = None
    setup_data: dict[str, Any] = Field(default_factory=dict)
    summary: dict[str, Any] | None = None
    spillage_data: dict[str, Any] | None = None
    cogs_data: dict[str, Any] | None = None


def to_number(value: Any, integer: bool = False) -> float:
    """Lenient numeric parsing for POS form values; anything unparsable is 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(number) if integer else number


def duration_between(start_time: str | None, end_time: str | None) -> float:
    """Hours between two ``HH:MM`` strings, never negative."""
    if not start_time or not end_time:
        return 0
    try:
        start_h, start_m = (int(part) for part in start_time.split(":")[:2])
        end_h, end_m = (int(part) for part in end_time.split(":")[:2])
    except ValueError:
        logger.warning(f"Unparsable event times: {start_time!r} - {end_time!r}")
        return 0
    return max(0, ((end_h * 60 + end_m) - (start_h * 60 + start_m)) / 60)


def _glassware_row(kind: str, sent_data: dict, returned_data: dict) -> Glassware | None:
    key = kind.lower()
    sent = to_number(sent_data.get(key), integer=True)
    returned = to_number(returned_data.get(key), integer=True)
    if sent <= 0 and returned <= 0:
        return None
    return Glassware(
        type=kind,
        sent=sent,
        returned_clean=returned,
        returned_dirty=0,
        broken=max(0, sent - returned),
    )


def build_event_from_pos(request: FinalizeEventRequest) -> dict[str, Any]:
    """Translate a POS finalize payload into catering event fields."""
    setup = request.setup_data
    summary = request.summary
    spillage = request.spillage_data or {}
    cogs = request.cogs_data or {}

    labor_details = []
    for entry in setup.get("labor") or []:
        rate = to_number(entry.get("rate"))
        hours = to_number(entry.get("hours"))
        labor_details.append(
            LaborDetail(title=entry.get("title") or "", rate=rate, hours=hours, total=rate * hours)
        )

    event_date = setup.get("event_date")
    data: dict[str, Any] = {
        "name": setup.get("event_name") or "Unnamed Event",
        "date": datetime.fromisoformat(event_date) if event_date else utcnow(),
        "start_time": setup.get("start_time") or "",
        "end_time": setup.get("end_time") or "",
        "duration_hours": duration_between(setup.get("start_time"), setup.get("end_time")),
        "guest_count": to_number(setup.get("patron_count"), integer=True),
        "accommodation_cost": to_number(setup.get("accommodation_cost")),
        "travel_cost": to_number(setup.get("transportation_costs")),
        "permit_cost": to_number(setup.get("permit_cost")),
        "insurance_cost": to_number(setup.get("liability_insurance_cost")),
        "labor_cost": sum(row.total for row in labor_details),
        "labor_details": labor_details,
        "spillage_cost": to_number(spillage.get("total")),
        "spillage_items": [SpillageItem(**item) for item in spillage.get("items") or []],
        "taxes_cost": to_number((summary or {}).get("taxes")),
        "cogs_cost": to_number(cogs.get("total")),
        "status": "completed" if summary else "draft",
    }

    sent = setup.get("glassware_sent") or {}
    returned = setup.get("glassware_returned") or {}
    if sent or returned:
        data["glassware"] = [
            row
            for row in (_glassware_row(kind, sent, returned) for kind in ("ROX", "TMBL"))
            if row is not None
        ]

    ice_sent = to_number(setup.get("ice_sent"), integer=True)
    ice_returned = to_number(setup.get("ice_returned"), integer=True)
    if ice_sent > 0 or ice_returned > 0:
        data["ice_blocks_brought"] = ice_sent
        data["ice_blocks_returned"] = ice_returned

    inventory = setup.get("inventory") or {}
    bottles = []
    for category in INVENTORY_CATEGORIES:
        for item in inventory.get(category) or []:
            if not item.get("name"):
                continue
            prepared = to_number(item.get("sent"))
            units_returned = to_number(item.get("returned"))
            bottles.append(
                InventoryItem(
                    name=item["name"],
                    category=category,
                    units_prepared=prepared,
                    units_returned=units_returned,
                    units_used=max(0, prepared - units_returned),
                )
            )
    data["bottles_prepped"] = bottles

    if summary:
        revenue = to_number(summary.get("total_revenue"))
        tips = to_number(summary.get("total_tips"))
        data["total_sales"] = revenue
        data["total_tips"] = tips
        data["total_revenue"] = revenue + tips

        breakdown = summary.get("category_breakdown") or {}
        data["drink_sales"] = [
            DrinkSale(
                name=category,
                category=category,
                quantity=to_number(row.get("count")),
                unit_price=(
                    to_number(row.get("revenue")) / to_number(row.get("count"))
                    if to_number(row.get("count")) > 0
                    else 0
                ),
                revenue=to_number(row.get("revenue")),
            )
            for category, row in breakdown.items()
        ]

        timeline = summary.get("timeline_breakdown") or []
        data["timeline"] = [
            TimelineEntry(
                interval_start=interval["interval_start"],
                interval_end=interval.get("interval_end") or interval["interval_start"],
                items=interval.get("items") or [],
            )
            for interval in timeline
        ]

    if request.event_id:
        data["pos_event_id"] = request.event_id

    return data
