"""
Stripe Terminal wrapper.

The stripe SDK is synchronous, so every call is pushed to the threadpool to
keep the event loop free. The API key is passed per call instead of being
set on the module.
"""

from typing import Any

import stripe
from fastapi.concurrency import run_in_threadpool

from echocatering.api.v1.configs.config import settings
from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.configs.settings_models import StripeConfig

POS_SOURCE = "echo_catering_pos"


def card_details(charge: Any) -> dict[str, str | None]:
    """Brand, last4 and reader id of a card_present charge (all optional)."""
    details = getattr(charge, "payment_method_details", None)
    card = getattr(details, "card_present", None)
    return {
        "brand": getattr(card, "brand", None),
        "last4": getattr(card, "last4", None),
        "reader": getattr(card, "reader", None),
    }


class StripeTerminalService:
    def __init__(self, config: StripeConfig | None = None):
        self.config = config or settings.stripe

    @property
    def location_id(self) -> str | None:
        return self.config.location_id

    async def _call(self, func, *args, **kwargs):
        return await run_in_threadpool(func, *args, api_key=self.config.secret_key, **kwargs)

    async def create_connection_token(self):
        params = {"location": self.location_id} if self.location_id else {}
        return await self._call(stripe.terminal.ConnectionToken.create, **params)

    async def create_payment_intent(
        self, amount: int, currency: str, metadata: dict[str, str]
    ) -> stripe.PaymentIntent:
        logger.info(f"Creating payment intent: {amount} {currency}")
        return await self._call(
            stripe.PaymentIntent.create,
            amount=amount,
            currency=currency,
            payment_method_types=["card_present"],
            capture_method="automatic",
            metadata=metadata,
        )

    async def capture_payment_intent(
        self, payment_intent_id: str, amount_to_capture: int | None = None
    ) -> stripe.PaymentIntent:
        params = {"amount_to_capture": amount_to_capture} if amount_to_capture else {}
        return await self._call(stripe.PaymentIntent.capture, payment_intent_id, **params)

    async def retrieve_payment_intent(
        self, payment_intent_id: str, expand_charge: bool = False
    ) -> stripe.PaymentIntent:
        params = {"expand": ["latest_charge"]} if expand_charge else {}
        return await self._call(stripe.PaymentIntent.retrieve, payment_intent_id, **params)

    async def cancel_payment_intent(self, payment_intent_id: str) -> stripe.PaymentIntent:
        return await self._call(stripe.PaymentIntent.cancel, payment_intent_id)

    async def retrieve_charge(self, charge_id: str) -> stripe.Charge:
        return await self._call(stripe.Charge.retrieve, charge_id)

    async def list_readers(self, limit: int = 10) -> list:
        readers = await self._call(stripe.terminal.Reader.list, limit=limit)
        return list(readers.data)

    async def register_reader(self, label: str | None, registration_code: str):
        params = {"registration_code": registration_code, "location": self.location_id}
        if label:
            params["label"] = label
        return await self._call(stripe.terminal.Reader.create, **params)

    async def list_locations(self, limit: int = 10) -> list:
        locations = await self._call(stripe.terminal.Location.list, limit=limit)
        return list(locations.data)

    async def retrieve_location(self, location_id: str):
        return await self._call(stripe.terminal.Location.retrieve, location_id)

    async def create_refund(
        self, payment_intent_id: str, amount: int | None = None, reason: str | None = None
    ) -> stripe.Refund:
        params: dict[str, Any] = {"payment_intent": payment_intent_id}
        if amount:
            params["amount"] = amount
        if reason:
            params["reason"] = reason
        return await self._call(stripe.Refund.create, **params)


def get_stripe_service() -> StripeTerminalService:
    """FastAPI dependency, overridden in tests."""
    return StripeTerminalService()
