from typing import Annotated

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException, Query

from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.user_endpoints.auth import require_editor
from echocatering.api.v1.endpoints.utils import apply_update
from echocatering.api.v1.errors import APIError, api_failure
from echocatering.api.v1.services.cloudinary_client import (
    CloudinaryClient,
    CloudinaryError,
    get_cloudinary_client,
)
from echocatering.models.models.gallery import (
    GalleryBase,
    GalleryBeanie,
    GalleryCategory,
    GalleryReorder,
    GalleryUpdate,
    distinct_tags,
    summarize_gallery,
)

gallery_endpoint_router = APIRouter()

Cloudinary = Annotated[CloudinaryClient, Depends(get_cloudinary_client)]

GALLERY_SORT = ("+category", "+order", "-created_at")


async def _get_image_or_404(image_id: PydanticObjectId) -> GalleryBeanie:
    image = await GalleryBeanie.get(image_id)
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return image


async def delete_remote_asset(client: CloudinaryClient, image: GalleryBeanie) -> bool | None:
    """
    Best-effort removal of the image's Cloudinary asset.

    Returns None when the image has no asset, otherwise whether the call went through.
    """
    public_id = image.cloudinary_public_id.strip()
    if not public_id:
        return None
    try:
        await client.delete_resource(public_id, resource_type=image.resource_type)
    except CloudinaryError as e:
        logger.warning(f"Cloudinary delete failed for {public_id}: {e.message}")
        return False
    return True


@gallery_endpoint_router.get("")
async def list_images(
    category: GalleryCategory | None = None,
    active: bool | None = None,
    featured: bool | None = None,
    tags: str | None = Query(default=None, description="Comma-separated, any tag matches"),
):
    query: dict = {}
    if category:
        query["category"] = category
    if active is not None:
        query["is_active"] = active
    if featured is not None:
        query["featured"] = featured
    if tags:
        query["tags"] = {"$in": [tag.strip() for tag in tags.split(",") if tag.strip()]}

    with api_failure("Failed to fetch gallery"):
        images = await GalleryBeanie.find(query).sort(*GALLERY_SORT).to_list()
    return images


@gallery_endpoint_router.get("/categories")
async def list_categories():
    with api_failure("Failed to fetch gallery categories"):
        images = await GalleryBeanie.find_all().to_list()
    return summarize_gallery(images)


@gallery_endpoint_router.get("/tags")
async def list_tags():
    with api_failure("Failed to fetch gallery tags"):
        images = await GalleryBeanie.find_all().to_list()
    return distinct_tags(images)


@gallery_endpoint_router.delete("/purge", dependencies=[Depends(require_editor)])
async def purge_gallery(client: Cloudinary, confirm: bool = False):
    """
    Delete every gallery document and, best effort, its Cloudinary asset.
    Refused unless ``confirm=true`` is passed.
    """
    if not confirm:
        raise APIError(
            400,
            "Confirmation required",
            "Re-run with ?confirm=true to purge the gallery.",
        )

    with api_failure("Failed to purge gallery"):
        images = await GalleryBeanie.find_all().to_list()
        outcomes = [await delete_remote_asset(client, image) for image in images]
        await GalleryBeanie.find_all().delete()

    attempted = [outcome for outcome in outcomes if outcome is not None]
    logger.warning(f"Purged {len(images)} gallery documents")
    return {
        "success": True,
        "deleted_documents": len(images),
        "attempted_cloudinary_deletes": len(attempted),
        "cloudinary_deleted": sum(attempted),
        "cloudinary_failed": len(attempted) - sum(attempted),
    }


@gallery_endpoint_router.put("/reorder", dependencies=[Depends(require_editor)])
async def reorder_images(payload: GalleryReorder):
    with api_failure("Failed to reorder gallery"):
        images = []
        for image_id in payload.image_ids:
            image = await GalleryBeanie.get(image_id)
            if image is None or image.category != payload.category:
                raise APIError(400, "Invalid reorder", f"{image_id} is not in {payload.category}")
            images.append(image)

        for index, image in enumerate(images):
            image.order = index
            image.touch()
            await image.save()

        ordered = await GalleryBeanie.find({"category": payload.category}).sort("+order").to_list()
    return ordered


@gallery_endpoint_router.get("/{image_id}")
async def get_image(image_id: PydanticObjectId):
    with api_failure("Failed to fetch image"):
        image = await _get_image_or_404(image_id)
    return image


@gallery_endpoint_router.post("", status_code=201, dependencies=[Depends(require_editor)])
async def create_image(payload: GalleryBase):
    """Register an image. It is placed last within its category."""
    with api_failure("Failed to create image", status_code=400):
        if await GalleryBeanie.find_one({"filename": payload.filename}) is not None:
            raise APIError(400, "Image with this filename already exists", payload.filename)
        if payload.photo_number is not None:
            taken = await GalleryBeanie.find_one({"photo_number": payload.photo_number})
            if taken is not None:
                raise APIError(400, "Photo number already in use", str(payload.photo_number))

        last = (
            await GalleryBeanie.find({"category": payload.category})
            .sort("-order")
            .limit(1)
            .to_list()
        )
        data = payload.model_dump(
            exclude={"created_at", "updated_at", *GalleryBase.model_computed_fields}
        )
        data["order"] = last[0].order + 1 if last else 0

        image = GalleryBeanie.model_validate(data)
        await image.insert()
    logger.info(f"Created gallery image {image.id} ({image.filename})")
    return image


@gallery_endpoint_router.put("/{image_id}", dependencies=[Depends(require_editor)])
async def update_image(image_id: PydanticObjectId, payload: GalleryUpdate):
    with api_failure("Failed to update image", status_code=400):
        image = await _get_image_or_404(image_id)
        apply_update(image, GalleryBase, payload.model_dump(exclude_unset=True))
        await image.save()
    return image


@gallery_endpoint_router.delete("/{image_id}", dependencies=[Depends(require_editor)])
async def delete_image(image_id: PydanticObjectId, client: Cloudinary):
    with api_failure("Failed to delete image"):
        image = await _get_image_or_404(image_id)
        await delete_remote_asset(client, image)
        await image.delete()
    return {"message": "Image deleted successfully"}


@gallery_endpoint_router.put("/{image_id}/toggle", dependencies=[Depends(require_editor)])
async def toggle_image(image_id: PydanticObjectId):
    with api_failure("Failed to toggle image"):
        image = await _get_image_or_404(image_id)
        image.is_active = not image.is_active
        image.touch()
        await image.save()
    return image


@gallery_endpoint_router.put("/{image_id}/feature", dependencies=[Depends(require_editor)])
async def feature_image(image_id: PydanticObjectId):
    with api_failure("Failed to feature image"):
        image = await _get_image_or_404(image_id)
        image.featured = not image.featured
        image.touch()
        await image.save()
    return image
