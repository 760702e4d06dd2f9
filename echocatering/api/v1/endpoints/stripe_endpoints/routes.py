from typing import Annotated, Any

from fastapi import APIRouter, Depends

from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.stripe_endpoints.models import (
    PaymentIntentAction,
    PaymentIntentRequest,
    RefundRequest,
    RegisterReaderRequest,
)
from echocatering.api.v1.errors import APIError, api_failure
from echocatering.api.v1.services.stripe_terminal import (
    StripeTerminalService,
    card_details,
    get_stripe_service,
)
from echocatering.models.models.base import utcnow
from echocatering.models.models.sales import SaleBeanie

stripe_endpoint_router = APIRouter()

StripeService = Annotated[StripeTerminalService, Depends(get_stripe_service)]


def reader_payload(reader: Any) -> dict[str, Any]:
    return {
        "id": reader.id,
        "label": getattr(reader, "label", None),
        "status": getattr(reader, "status", None),
        "device_type": getattr(reader, "device_type", None),
        "serial_number": getattr(reader, "serial_number", None),
        "location": getattr(reader, "location", None),
    }


def location_payload(location: Any) -> dict[str, Any]:
    address = getattr(location, "address", None)
    return {
        "id": location.id,
        "display_name": getattr(location, "display_name", None),
        "address": address.to_dict() if hasattr(address, "to_dict") else address,
    }


async def mark_sale_succeeded(payment_intent_id: str, charge: Any) -> SaleBeanie | None:
    """Copy charge details onto the sale recorded for ``payment_intent_id``."""
    sale = await SaleBeanie.find_one({"stripe_payment_intent_id": payment_intent_id})
    if sale is None:
        logger.warning(f"No sale recorded for payment intent {payment_intent_id}")
        return None

    card = card_details(charge)
    sale.status = "succeeded"
    sale.stripe_charge_id = getattr(charge, "id", None)
    sale.receipt_url = getattr(charge, "receipt_url", None)
    sale.card_brand = card["brand"]
    sale.card_last4 = card["last4"]
    sale.reader_id = card["reader"] or sale.reader_id
    sale.completed_at = utcnow()
    sale.touch()
    await sale.save()
    return sale


@stripe_endpoint_router.post("/connection-token")
async def create_connection_token(service: StripeService):
    with api_failure("Failed to create connection token"):
        token = await service.create_connection_token()
    return {"secret": token.secret, "location": service.location_id}


@stripe_endpoint_router.post("/payment-intent")
async def create_payment_intent(request: PaymentIntentRequest, service: StripeService):
    currency = request.currency or service.config.currency
    with api_failure("Failed to create payment intent"):
        intent = await service.create_payment_intent(
            request.amount, currency, request.stripe_metadata()
        )

    # A failed sale record must not fail the payment itself
    try:
        await SaleBeanie(
            stripe_payment_intent_id=intent.id,
            event_id=request.event_id,
            event_name=request.event_name,
            tab_id=request.tab_id,
            tab_name=request.tab_name,
            items=[item.to_sale_item() for item in request.items],
            subtotal_cents=max(0, request.amount - request.tip_amount),
            tip_cents=request.tip_amount,
            total_cents=request.amount,
            currency=currency,
            status="pending",
        ).insert()
        logger.info(f"Created pending sale for payment intent {intent.id}")
    except Exception as e:
        logger.error(f"Error creating sale record for {intent.id}: {e}")

    return {"client_secret": intent.client_secret, "payment_intent_id": intent.id}


@stripe_endpoint_router.post("/capture-payment")
async def capture_payment(request: PaymentIntentAction, service: StripeService):
    with api_failure("Failed to capture payment"):
        intent = await service.capture_payment_intent(
            request.payment_intent_id, request.amount_to_capture
        )
        charge = (
            await service.retrieve_charge(intent.latest_charge) if intent.latest_charge else None
        )

    try:
        await mark_sale_succeeded(request.payment_intent_id, charge)
    except Exception as e:
        logger.error(f"Error updating sale record for {request.payment_intent_id}: {e}")

    return {
        "status": intent.status,
        "charge_id": getattr(charge, "id", None),
        "receipt_url": getattr(charge, "receipt_url", None),
    }


@stripe_endpoint_router.post("/confirm-payment")
async def confirm_payment(request: PaymentIntentAction, service: StripeService):
    with api_failure("Failed to confirm payment"):
        intent = await service.retrieve_payment_intent(
            request.payment_intent_id, expand_charge=True
        )
        if intent.status != "succeeded":
            raise APIError(400, "Payment not succeeded", status=intent.status)

        charge = intent.latest_charge
        sale = await mark_sale_succeeded(request.payment_intent_id, charge)

    logger.info(f"Payment confirmed: {request.payment_intent_id}")
    return {
        "success": True,
        "status": intent.status,
        "charge_id": getattr(charge, "id", None),
        "receipt_url": getattr(charge, "receipt_url", None),
        "sale_id": str(sale.id) if sale else None,
    }


@stripe_endpoint_router.post("/cancel-payment")
async def cancel_payment(request: PaymentIntentAction, service: StripeService):
    with api_failure("Failed to cancel payment"):
        intent = await service.cancel_payment_intent(request.payment_intent_id)
        sale = await SaleBeanie.find_one(
            {"stripe_payment_intent_id": request.payment_intent_id}
        )
        if sale is not None:
            sale.status = "failed"
            sale.touch()
            await sale.save()

    return {"success": True, "status": intent.status}


@stripe_endpoint_router.get("/readers")
async def list_readers(service: StripeService):
    with api_failure("Failed to fetch readers"):
        readers = await service.list_readers()
    logger.debug(f"Found {len(readers)} readers")
    return {"readers": [reader_payload(reader) for reader in readers]}


@stripe_endpoint_router.post("/register-reader")
async def register_reader(request: RegisterReaderRequest, service: StripeService):
    if not service.location_id:
        raise APIError(
            400,
            "Location not configured",
            "STRIPE_LOCATION_ID must be set in environment variables",
        )

    with api_failure("Failed to register reader"):
        reader = await service.register_reader(request.label, request.registration_code)

    logger.info(f"Reader registered: {reader.id}")
    return {
        "reader_id": reader.id,
        "label": reader.label,
        "status": reader.status,
        "location": reader.location,
    }


@stripe_endpoint_router.get("/locations")
async def list_locations(service: StripeService):
    with api_failure("Failed to list locations"):
        locations = await service.list_locations()
    return {
        "count": len(locations),
        "configured_id": service.location_id,
        "locations": [location_payload(location) for location in locations],
    }


@stripe_endpoint_router.get("/location")
async def get_location(service: StripeService):
    if not service.location_id:
        return {
            "configured": False,
            "message": "No location configured. Set STRIPE_LOCATION_ID in environment.",
        }

    with api_failure("Failed to fetch location"):
        location = await service.retrieve_location(service.location_id)
    payload = location_payload(location)
    return {
        "configured": True,
        "location_id": payload["id"],
        "display_name": payload["display_name"],
        "address": payload["address"],
    }


@stripe_endpoint_router.post("/refund")
async def create_refund(request: RefundRequest, service: StripeService):
    with api_failure("Failed to create refund"):
        refund = await service.create_refund(
            request.payment_intent_id, request.amount, request.reason
        )
        sale = await SaleBeanie.find_one(
            {"stripe_payment_intent_id": request.payment_intent_id}
        )
        if sale is not None:
            sale.apply_refund(refund.amount, request.reason)
            await sale.save()

    logger.info(f"Refund created: {refund.id}")
    return {
        "success": True,
        "refund_id": refund.id,
        "amount": refund.amount,
        "status": refund.status,
    }
