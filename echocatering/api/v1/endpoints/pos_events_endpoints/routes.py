from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException, Query

from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.user_endpoints.auth import get_current_user
from echocatering.api.v1.errors import APIError, api_failure
from echocatering.models.models.base import utcnow
from echocatering.models.models.pos_events import (
    PosEventBeanie,
    PosEventCreate,
    PosEventStatus,
    PosSyncRequest,
    tab_from_local,
)

pos_events_endpoint_router = APIRouter(dependencies=[Depends(get_current_user)])


async def _get_event_or_404(event_id: PydanticObjectId) -> PosEventBeanie:
    event = await PosEventBeanie.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _require_active(event: PosEventBeanie, error: str) -> None:
    if event.status != "active":
        raise APIError(400, error, f"Event {event.id} is {event.status}")


@pos_events_endpoint_router.post("", status_code=201)
async def create_event(payload: PosEventCreate):
    """Open a POS event. Only one event may be active at a time."""
    with api_failure("Failed to create event"):
        active = await PosEventBeanie.find_one({"status": "active"})
        if active is not None:
            raise APIError(
                400,
                "An active event already exists",
                "End it before starting a new one.",
                active_event={
                    "id": str(active.id),
                    "name": active.name,
                    "started_at": active.started_at.isoformat(),
                },
            )

        now = utcnow()
        event = PosEventBeanie(
            name=payload.name or f"Event {now:%m/%d/%Y}",
            date=payload.date or now,
            started_at=now,
        )
        await event.insert()
    logger.info(f"Opened POS event {event.name} ({event.id})")
    return event


@pos_events_endpoint_router.get("")
async def list_events(
    status: PosEventStatus | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    skip: int = Query(default=0, ge=0),
):
    query = {"status": status} if status else {}
    with api_failure("Failed to list events"):
        events = (
            await PosEventBeanie.find(query)
            .sort("-date", "-created_at")
            .skip(skip)
            .limit(limit)
            .to_list()
        )
        total = await PosEventBeanie.find(query).count()
    return {"events": events, "total": total, "limit": limit, "skip": skip}


@pos_events_endpoint_router.get("/active")
async def get_active_event():
    with api_failure("Failed to get active event"):
        event = await PosEventBeanie.find_one({"status": "active"})
    return {"active": event is not None, "event": event}


@pos_events_endpoint_router.get("/{event_id}")
async def get_event(event_id: PydanticObjectId):
    with api_failure("Failed to get event"):
        event = await _get_event_or_404(event_id)
    return event


@pos_events_endpoint_router.put("/{event_id}/sync")
async def sync_event(event_id: PydanticObjectId, payload: PosSyncRequest):
    """Replace the stored tabs with the register's local state."""
    with api_failure("Failed to sync event"):
        event = await _get_event_or_404(event_id)
        _require_active(event, "Cannot sync to a non-active event")
        event.tabs = [tab_from_local(tab) for tab in payload.tabs]
        event.touch()
        await event.save()

    logger.debug(f"Synced {len(event.tabs)} tabs to POS event {event.id}")
    return {
        "message": "Sync successful",
        "tab_count": len(event.tabs),
        "total_items": sum(tab.item_count for tab in event.tabs),
    }


@pos_events_endpoint_router.put("/{event_id}/end")
async def end_event(event_id: PydanticObjectId, payload: PosSyncRequest):
    """Store the final tabs, close them and compute the event summary."""
    with api_failure("Failed to end event"):
        event = await _get_event_or_404(event_id)
        _require_active(event, "Event is not active")
        event.end([tab_from_local(tab, closed=True) for tab in payload.tabs])
        await event.save()

    logger.info(
        f"Ended POS event {event.id}: {event.summary.total_items} items, "
        f"${event.summary.total_revenue:.2f} revenue"
    )
    return {"message": "Event ended successfully", "event": event}


@pos_events_endpoint_router.get("/{event_id}/summary")
async def get_event_summary(event_id: PydanticObjectId):
    with api_failure("Failed to get event summary"):
        event = await _get_event_or_404(event_id)
        if not event.summary.total_items:
            event.calculate_summary()
            await event.save()
    return event.summary


@pos_events_endpoint_router.delete("/{event_id}")
async def delete_event(event_id: PydanticObjectId):
    with api_failure("Failed to delete event"):
        event = await _get_event_or_404(event_id)
        await event.delete()
    logger.info(f"Deleted POS event {event_id}")
    return {"message": "Event deleted successfully"}
