from typing import Annotated

from fastapi import APIRouter, Depends, Query

from echocatering.api.cache import TTLCache, get_cache
from echocatering.api.v1.configs.config import settings
from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.media_endpoints.models import (
    GalleryLayoutResponse,
    LogoPayload,
    MediaItem,
)
from echocatering.api.v1.errors import APIError
from echocatering.api.v1.services.cloudinary_client import (
    CloudinaryClient,
    CloudinaryError,
    get_cloudinary_client,
)
from echocatering.gallery import Viewport, compose_grid, grid_metrics, unique_images

media_endpoint_router = APIRouter()

Cloudinary = Annotated[CloudinaryClient, Depends(get_cloudinary_client)]
Cache = Annotated[TTLCache, Depends(get_cache)]

GALLERY_CACHE_KEY = "gallery"
LOGO_CACHE_KEY = "logo"


def _upstream_failure(message: str, error: CloudinaryError) -> APIError:
    logger.error(f"{message}: {error.message}")
    return APIError(502, error.to_dict(), message=message)


async def fetch_gallery(client: CloudinaryClient) -> list[MediaItem]:
    """Images and videos under the gallery folder, newest first."""
    items: list[MediaItem] = []
    for resource_type in ("image", "video"):
        resources = await client.list_by_prefix(
            settings.media.gallery_prefix,
            resource_type=resource_type,
            max_results=settings.media.max_results,
        )
        items.extend(
            MediaItem.from_resource(resource, resource_type)
            for resource in resources
            if resource.get("secure_url")
        )
    return sorted(items, key=lambda item: item.created_at or "", reverse=True)


async def fetch_logo(client: CloudinaryClient) -> LogoPayload:
    resources = await client.list_by_prefix(settings.media.logo_prefix, max_results=50)
    resources = [resource for resource in resources if resource.get("secure_url")]
    if not resources:
        return LogoPayload(content="", public_id="")
    newest = max(resources, key=lambda resource: resource.get("created_at") or "")
    return LogoPayload(
        content=newest["secure_url"],
        public_id=newest.get("public_id", ""),
        created_at=newest.get("created_at"),
    )


@media_endpoint_router.get("/gallery")
async def get_gallery(client: Cloudinary, cache: Cache) -> list[MediaItem]:
    try:
        return await cache.get_or_set(GALLERY_CACHE_KEY, lambda: fetch_gallery(client))
    except CloudinaryError as e:
        raise _upstream_failure("Cloudinary gallery listing failed", e) from e


@media_endpoint_router.get("/gallery/layout")
async def get_gallery_layout(
    client: Cloudinary,
    cache: Cache,
    viewport: Viewport = Viewport.DESKTOP,
    viewport_width: int | None = Query(default=None, ge=1),
    viewport_height: int | None = Query(default=None, ge=1),
) -> GalleryLayoutResponse:
    """
    Compose the gallery grid over the cached listing. Videos are skipped.
    Cell metrics are included when the browser viewport size is given.
    """
    try:
        items = await cache.get_or_set(GALLERY_CACHE_KEY, lambda: fetch_gallery(client))
    except CloudinaryError as e:
        raise _upstream_failure("Cloudinary gallery listing failed", e) from e

    images = [item.model_dump() for item in items if item.resource_type == "image"]
    layout = compose_grid(images, viewport)

    metrics = None
    if viewport_width and viewport_height:
        metrics = grid_metrics(viewport, viewport_width, viewport_height)

    return GalleryLayoutResponse.from_layout(
        layout, image_count=len(unique_images(layout)), metrics=metrics
    )


@media_endpoint_router.get("/logo")
async def get_logo(client: Cloudinary, cache: Cache) -> LogoPayload:
    try:
        return await cache.get_or_set(LOGO_CACHE_KEY, lambda: fetch_logo(client))
    except CloudinaryError as e:
        raise _upstream_failure("Cloudinary logo lookup failed", e) from e


@media_endpoint_router.get("/ping")
async def ping_cloudinary(client: Cloudinary):
    try:
        result = await client.ping()
    except CloudinaryError as e:
        raise APIError(
            502,
            e.to_dict(),
            message="Cloudinary ping failed",
            ok=False,
            cloudinary=client.config_summary(),
        ) from e
    return {"ok": True, "cloudinary": client.config_summary(), "result": result}
