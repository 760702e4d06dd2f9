from fastapi import APIRouter

from echocatering.api.v1.endpoints.catering_events_endpoints.routes import (
    catering_events_endpoint_router,
)
from echocatering.api.v1.endpoints.cocktails_endpoints.routes import cocktails_endpoint_router
from echocatering.api.v1.endpoints.content_endpoints.routes import content_endpoint_router
from echocatering.api.v1.endpoints.gallery_endpoints.routes import gallery_endpoint_router
from echocatering.api.v1.endpoints.media_endpoints.routes import media_endpoint_router
from echocatering.api.v1.endpoints.pos_events_endpoints.routes import pos_events_endpoint_router
from echocatering.api.v1.endpoints.sales_endpoints.routes import sales_endpoint_router
from echocatering.api.v1.endpoints.stripe_endpoints.routes import stripe_endpoint_router
from echocatering.api.v1.endpoints.user_endpoints.routes import auth_endpoint_router

router = APIRouter()


router.include_router(
    sales_endpoint_router,
    prefix="/sales",
    tags=["Sales"],
)
router.include_router(
    stripe_endpoint_router,
    prefix="/stripe",
    tags=["Stripe Terminal"],
)
router.include_router(
    catering_events_endpoint_router,
    prefix="/catering-events",
    tags=["Catering Events"],
)
router.include_router(
    cocktails_endpoint_router,
    prefix="/cocktails",
    tags=["Cocktails"],
)
router.include_router(
    content_endpoint_router,
    prefix="/content",
    tags=["Content"],
)
router.include_router(
    media_endpoint_router,
    prefix="/media",
    tags=["Media"],
)
router.include_router(
    gallery_endpoint_router,
    prefix="/gallery",
    tags=["Gallery"],
)
router.include_router(
    pos_events_endpoint_router,
    prefix="/pos-events",
    tags=["POS Events"],
)
router.include_router(
    auth_endpoint_router,
    prefix="/auth",
    tags=["Auth"],
)
