from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException, Query

from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.user_endpoints.auth import get_current_user
from echocatering.api.v1.endpoints.utils import apply_update, page_count
from echocatering.api.v1.errors import api_failure
from echocatering.models.models.catering_events import (
    CateringEventBase,
    CateringEventBeanie,
    CateringEventUpdate,
    EventStatus,
    FinalizeEventRequest,
    build_event_from_pos,
)

catering_events_endpoint_router = APIRouter()


async def _get_event_or_404(event_id: PydanticObjectId) -> CateringEventBeanie:
    event = await CateringEventBeanie.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@catering_events_endpoint_router.get("", dependencies=[Depends(get_current_user)])
async def list_events(
    status: EventStatus | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    page: int = Query(default=1, ge=1),
):
    query = {"status": status} if status else {}
    with api_failure("Failed to fetch events"):
        events = (
            await CateringEventBeanie.find(query)
            .sort("-date")
            .skip((page - 1) * limit)
            .limit(limit)
            .to_list()
        )
        total = await CateringEventBeanie.find(query).count()
    return {"events": events, "total": total, "page": page, "pages": page_count(total, limit)}


@catering_events_endpoint_router.post("/finalize")
async def finalize_event(request: FinalizeEventRequest):
    """
    Create or update the catering event for a POS event once it closes.
    An existing event linked to the same POS event id is updated in place.
    """
    with api_failure("Failed to finalize event"):
        data = build_event_from_pos(request)

        event = None
        if request.event_id:
            event = await CateringEventBeanie.find_one({"pos_event_id": request.event_id})

        if event is not None:
            apply_update(event, CateringEventBase, data)
            event.recalculate()
            await event.save()
            logger.info(f"Updated catering event {event.id} from POS event {request.event_id}")
        else:
            event = CateringEventBeanie.model_validate(data)
            event.recalculate()
            await event.insert()
            logger.info(f"Created catering event {event.id}")

    return {"success": True, "event": event}


@catering_events_endpoint_router.get("/{event_id}", dependencies=[Depends(get_current_user)])
async def get_event(event_id: PydanticObjectId):
    with api_failure("Failed to fetch event"):
        event = await _get_event_or_404(event_id)
    return {"event": event}


@catering_events_endpoint_router.post(
    "", status_code=201, dependencies=[Depends(get_current_user)]
)
async def create_event(payload: CateringEventBase):
    with api_failure("Failed to create event", status_code=400):
        event = CateringEventBeanie.model_validate(payload.model_dump())
        event.recalculate()
        await event.insert()
    return {"event": event}


@catering_events_endpoint_router.put("/{event_id}", dependencies=[Depends(get_current_user)])
async def update_event(event_id: PydanticObjectId, payload: CateringEventUpdate):
    with api_failure("Failed to update event", status_code=400):
        event = await _get_event_or_404(event_id)
        apply_update(event, CateringEventBase, payload.model_dump(exclude_unset=True))
        event.recalculate()
        await event.save()
    return {"event": event}


@catering_events_endpoint_router.delete("/{event_id}", dependencies=[Depends(get_current_user)])
async def delete_event(event_id: PydanticObjectId):
    with api_failure("Failed to delete event"):
        event = await _get_event_or_404(event_id)
        await event.delete()
    return {"message": "Event deleted successfully"}


@catering_events_endpoint_router.post(
    "/{event_id}/recalculate", dependencies=[Depends(get_current_user)]
)
async def recalculate_event(event_id: PydanticObjectId):
    with api_failure("Failed to recalculate"):
        event = await _get_event_or_404(event_id)
        event.recalculate()
        await event.save()
    return {"event": event}
