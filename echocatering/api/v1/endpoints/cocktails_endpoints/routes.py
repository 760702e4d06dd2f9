from collections import defaultdict

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException

from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.user_endpoints.auth import require_editor
from echocatering.api.v1.endpoints.utils import apply_update
from echocatering.api.v1.errors import APIError, api_failure
from echocatering.models.models.cocktails import (
    CocktailBase,
    CocktailBeanie,
    CocktailCategory,
    CocktailReorder,
    CocktailStatus,
    CocktailUpdate,
    summarize_categories,
)

cocktails_endpoint_router = APIRouter()

MENU_SORT = ("+category", "+order", "+name")


async def _get_cocktail_or_404(cocktail_id: PydanticObjectId) -> CocktailBeanie:
    cocktail = await CocktailBeanie.get(cocktail_id)
    if cocktail is None:
        raise HTTPException(status_code=404, detail="Cocktail not found")
    return cocktail


@cocktails_endpoint_router.get("")
async def list_cocktails(
    category: CocktailCategory | None = None,
    status: CocktailStatus | None = None,
    is_active: bool | None = None,
    featured: bool | None = None,
    include_archived: bool = False,
):
    """Menu listing. Archived items are hidden unless asked for."""
    query: dict = {}
    if category:
        query["category"] = category
    if status:
        query["status"] = status
    elif not include_archived:
        query["status"] = {"$ne": "archived"}
    if is_active is not None:
        query["is_active"] = is_active
    if featured is not None:
        query["featured"] = featured

    with api_failure("Failed to fetch cocktails"):
        cocktails = await CocktailBeanie.find(query).sort(*MENU_SORT).to_list()
    return cocktails


@cocktails_endpoint_router.get("/categories")
async def list_categories():
    with api_failure("Failed to fetch categories"):
        cocktails = await CocktailBeanie.find_all().to_list()
    return summarize_categories(cocktails)


@cocktails_endpoint_router.get("/archived", dependencies=[Depends(require_editor)])
async def list_archived():
    with api_failure("Failed to fetch archived cocktails"):
        cocktails = (
            await CocktailBeanie.find({"status": "archived"}).sort("-updated_at").to_list()
        )

    grouped: dict[str, list[CocktailBeanie]] = defaultdict(list)
    for cocktail in cocktails:
        grouped[cocktail.category].append(cocktail)
    return dict(grouped)


@cocktails_endpoint_router.put("/reorder", dependencies=[Depends(require_editor)])
async def reorder_cocktails(payload: CocktailReorder):
    """Set ``order`` to the position of each id in ``cocktail_ids``."""
    with api_failure("Failed to reorder cocktails"):
        ordered = []
        for cocktail_id in payload.cocktail_ids:
            cocktail = await CocktailBeanie.get(cocktail_id)
            if cocktail is None or cocktail.category != payload.category:
                raise APIError(
                    400, "Invalid reorder", f"{cocktail_id} is not a {payload.category} item"
                )
            ordered.append(cocktail)

        # every id is checked before the first write
        for index, cocktail in enumerate(ordered):
            cocktail.order = index
            cocktail.touch()
            await cocktail.save()

        cocktails = (
            await CocktailBeanie.find({"category": payload.category}).sort("+order").to_list()
        )
    logger.info(f"Reordered {len(payload.cocktail_ids)} {payload.category} items")
    return cocktails


@cocktails_endpoint_router.get("/{cocktail_id}")
async def get_cocktail(cocktail_id: PydanticObjectId):
    with api_failure("Failed to fetch cocktail"):
        cocktail = await _get_cocktail_or_404(cocktail_id)
    return cocktail


@cocktails_endpoint_router.post("", status_code=201, dependencies=[Depends(require_editor)])
async def create_cocktail(payload: CocktailBase):
    """
    Create a menu item. When ``item_number`` is already taken the existing item
    is updated with the payload instead.
    """
    with api_failure("Failed to create cocktail", status_code=400):
        data = payload.model_dump(
            exclude={"created_at", "updated_at", *CocktailBase.model_computed_fields}
        )
        if payload.item_number is not None:
            existing = await CocktailBeanie.find_one({"item_number": payload.item_number})
            if existing is not None:
                apply_update(existing, CocktailBase, data)
                await existing.save()
                logger.info(f"Updated cocktail {existing.id} for item {payload.item_number}")
                return existing

        cocktail = CocktailBeanie.model_validate(data)
        await cocktail.insert()
        logger.info(f"Created cocktail {cocktail.id} ({cocktail.name})")
    return cocktail


@cocktails_endpoint_router.put("/{cocktail_id}", dependencies=[Depends(require_editor)])
async def update_cocktail(cocktail_id: PydanticObjectId, payload: CocktailUpdate):
    with api_failure("Failed to update cocktail", status_code=400):
        cocktail = await _get_cocktail_or_404(cocktail_id)
        apply_update(cocktail, CocktailBase, payload.model_dump(exclude_unset=True))
        await cocktail.save()
    return cocktail


@cocktails_endpoint_router.delete("/{cocktail_id}", dependencies=[Depends(require_editor)])
async def delete_cocktail(cocktail_id: PydanticObjectId):
    with api_failure("Failed to delete cocktail"):
        cocktail = await _get_cocktail_or_404(cocktail_id)
        await cocktail.delete()
    logger.info(f"Deleted cocktail {cocktail_id}")
    return {"message": "Cocktail deleted successfully"}


@cocktails_endpoint_router.post(
    "/{cocktail_id}/archive", dependencies=[Depends(require_editor)]
)
async def archive_cocktail(cocktail_id: PydanticObjectId):
    with api_failure("Failed to archive cocktail"):
        cocktail = await _get_cocktail_or_404(cocktail_id)
        cocktail.archive()
        await cocktail.save()
    return {"message": "Cocktail archived", "cocktail": cocktail}


@cocktails_endpoint_router.post(
    "/{cocktail_id}/restore", dependencies=[Depends(require_editor)]
)
async def restore_cocktail(cocktail_id: PydanticObjectId):
    with api_failure("Failed to restore cocktail"):
        cocktail = await _get_cocktail_or_404(cocktail_id)
        cocktail.restore()
        await cocktail.save()
    return {"message": "Cocktail restored", "cocktail": cocktail}


@cocktails_endpoint_router.put("/{cocktail_id}/toggle", dependencies=[Depends(require_editor)])
async def toggle_cocktail(cocktail_id: PydanticObjectId):
    with api_failure("Failed to toggle cocktail"):
        cocktail = await _get_cocktail_or_404(cocktail_id)
        cocktail.toggle()
        await cocktail.save()
    return cocktail
