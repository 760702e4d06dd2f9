from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException

from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.user_endpoints.auth import require_editor
from echocatering.api.v1.endpoints.utils import apply_update
from echocatering.api.v1.errors import APIError, api_failure
from echocatering.models.models.content import (
    ContentBase,
    ContentBeanie,
    ContentPage,
    ContentReorder,
    ContentType,
    ContentUpdate,
    summarize_pages,
)

content_endpoint_router = APIRouter()


async def _get_content_or_404(content_id: PydanticObjectId) -> ContentBeanie:
    content = await ContentBeanie.get(content_id)
    if content is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return content


@content_endpoint_router.get("")
async def list_content(
    page: ContentPage | None = None,
    section: str | None = None,
    type: ContentType | None = None,
    is_active: bool | None = None,
):
    query: dict = {}
    if page:
        query["page"] = page
    if section:
        query["section"] = section
    if type:
        query["type"] = type
    if is_active is not None:
        query["is_active"] = is_active

    with api_failure("Failed to fetch content"):
        items = await ContentBeanie.find(query).sort("+page", "+order", "+section").to_list()
    return items


@content_endpoint_router.get("/pages")
async def list_pages():
    with api_failure("Failed to fetch pages"):
        items = await ContentBeanie.find_all().to_list()
    return summarize_pages(items)


@content_endpoint_router.get("/sections/{page}")
async def list_sections(page: ContentPage):
    with api_failure("Failed to fetch sections"):
        items = await ContentBeanie.find({"page": page}).sort("+order").to_list()
    return sorted({item.section for item in items})


@content_endpoint_router.get("/page/{page}")
async def get_page_content(page: ContentPage):
    """Active blocks of one page, in display order."""
    with api_failure("Failed to fetch page content"):
        items = (
            await ContentBeanie.find({"page": page, "is_active": True})
            .sort("+order", "+section")
            .to_list()
        )
    return items


@content_endpoint_router.put("/reorder", dependencies=[Depends(require_editor)])
async def reorder_content(payload: ContentReorder):
    with api_failure("Failed to reorder content"):
        blocks = []
        for content_id in payload.content_ids:
            content = await ContentBeanie.get(content_id)
            if content is None or content.page != payload.page:
                raise APIError(400, "Invalid reorder", f"{content_id} is not on {payload.page}")
            blocks.append(content)

        for index, content in enumerate(blocks):
            content.order = index
            content.touch()
            await content.save()

        items = await ContentBeanie.find({"page": payload.page}).sort("+order").to_list()
    return items


@content_endpoint_router.get("/{content_id}")
async def get_content(content_id: PydanticObjectId):
    with api_failure("Failed to fetch content"):
        content = await _get_content_or_404(content_id)
    return content


@content_endpoint_router.post("", status_code=201, dependencies=[Depends(require_editor)])
async def create_content(payload: ContentBase):
    """
    Create a content block. A page holds at most one block per section and
    type; without an explicit ``order`` the block goes last on its page.
    """
    with api_failure("Failed to create content", status_code=400):
        duplicate = await ContentBeanie.find_one(
            {"page": payload.page, "section": payload.section, "type": payload.type}
        )
        if duplicate is not None:
            raise APIError(
                400,
                "Content already exists",
                f"{payload.page}/{payload.section} already has a {payload.type} block",
            )

        data = payload.model_dump(exclude={"created_at", "updated_at"})
        if "order" not in payload.model_fields_set:
            last = (
                await ContentBeanie.find({"page": payload.page}).sort("-order").limit(1).to_list()
            )
            data["order"] = last[0].order + 1 if last else 0

        content = ContentBeanie.model_validate(data)
        await content.insert()
    logger.info(f"Created content {content.page}/{content.section} ({content.type})")
    return content


@content_endpoint_router.put("/{content_id}", dependencies=[Depends(require_editor)])
async def update_content(content_id: PydanticObjectId, payload: ContentUpdate):
    with api_failure("Failed to update content", status_code=400):
        content = await _get_content_or_404(content_id)
        apply_update(content, ContentBase, payload.model_dump(exclude_unset=True))
        await content.save()
    return content


@content_endpoint_router.delete("/{content_id}", dependencies=[Depends(require_editor)])
async def delete_content(content_id: PydanticObjectId):
    with api_failure("Failed to delete content"):
        content = await _get_content_or_404(content_id)
        await content.delete()
    return {"message": "Content deleted successfully"}


@content_endpoint_router.put("/{content_id}/toggle", dependencies=[Depends(require_editor)])
async def toggle_content(content_id: PydanticObjectId):
    with api_failure("Failed to toggle content"):
        content = await _get_content_or_404(content_id)
        content.is_active = not content.is_active
        content.touch()
        await content.save()
    return content
