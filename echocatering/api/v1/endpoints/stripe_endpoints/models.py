from pydantic import BaseModel, Field

from echocatering.api.v1.services.stripe_terminal import POS_SOURCE
from echocatering.models.models.sales import SaleItem


class PaymentItem(BaseModel):
    name: str
    category: str = "uncategorized"
    quantity: int = Field(default=1, ge=1)
    price: int = Field(default=0, ge=0, description="Unit price in cents")
    modifier: str | None = None
    modifier_price_adjustment: int = 0

    def to_sale_item(self) -> SaleItem:
        return SaleItem(
            name=self.name,
            category=self.category or "uncategorized",
            quantity=self.quantity,
            unit_price=self.price,
            modifier=self.modifier,
            modifier_price_adjustment=self.modifier_price_adjustment,
        )


class PaymentIntentRequest(BaseModel):
    amount: int = Field(gt=0, description="Total in cents, tip included")
    currency: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
    tab_id: str | None = None
    tab_name: str | None = None
    event_id: str | None = None
    event_name: str | None = None
    items: list[PaymentItem] = Field(default_factory=list)
    tip_amount: int = Field(default=0, ge=0)

    def stripe_metadata(self) -> dict[str, str]:
        """Metadata attached to the intent so the sale can be traced from Stripe."""
        return {
            "source": POS_SOURCE,
            "tab_id": self.tab_id or "",
            "tab_name": self.tab_name or "",
            "event_id": self.event_id or "",
            "event_name": self.event_name or "",
            "tip_amount": str(self.tip_amount),
            "item_count": str(len(self.items)),
            **self.metadata,
        }


class PaymentIntentAction(BaseModel):
    payment_intent_id: str
    amount_to_capture: int | None = Field(default=None, gt=0)


class RegisterReaderRequest(BaseModel):
    label: str | None = None
    registration_code: str


class RefundRequest(BaseModel):
    payment_intent_id: str
    amount: int | None = Field(default=None, gt=0)
    reason: str | None = None
