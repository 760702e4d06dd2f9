from typing import Literal

import pymongo
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pymongo import IndexModel

from echocatering.models.models.base import TimestampedModel, sanitize_text

ContentPage = Literal[
    "home", "echo-originals", "echo-classics", "spirits", "event-gallery", "about", "global"
]
ContentType = Literal["text", "html", "image", "video", "info-box", "hero", "footer", "logo"]
ContentPosition = Literal["left", "right", "center", "top", "bottom"]


class ContentStyles(BaseModel):
    background_color: str | None = None
    text_color: str | None = None
    font_size: str | None = None
    font_weight: str | None = None
    padding: str | None = None
    margin: str | None = None
    border_radius: str | None = None
    border: str | None = None
    box_shadow: str | None = None


class ContentBase(TimestampedModel):
    page: ContentPage
    section: str = Field(min_length=1, max_length=100)
    type: ContentType = "text"
    title: str | None = Field(default=None, max_length=200)
    alt_text: str | None = Field(default=None, max_length=200)
    content: str | None = None
    position: ContentPosition = "center"
    order: int = 0
    is_active: bool = True
    metadata: dict[str, str] | None = None
    styles: ContentStyles | None = None

    @field_validator("section", "title", "alt_text")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str | None, info: ValidationInfo) -> str | None:
        # html blocks carry markup on purpose; only the length is enforced
        if info.data.get("type") == "html":
            if value is not None and len(value) > 10000:
                raise ValueError("Text must be at most 10000 characters.")
            return value
        return sanitize_text(value, max_length=10000)


class ContentBeanie(ContentBase, Document):
    class Settings:
        name = "content"
        validate_on_save = True
        indexes = [
            IndexModel([("page", pymongo.ASCENDING), ("order", pymongo.ASCENDING)]),
            IndexModel([("is_active", pymongo.ASCENDING)]),
            IndexModel([("type", pymongo.ASCENDING)]),
            IndexModel(
                [
                    ("page", pymongo.ASCENDING),
                    ("section", pymongo.ASCENDING),
                    ("type", pymongo.ASCENDING),
                ],
                unique=True,
            ),
        ]


class ContentUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    alt_text: str | None = Field(default=None, max_length=200)
    content: str | None = Field(default=None, max_length=10000)
    position: ContentPosition | None = None
    order: int | None = None
    is_active: bool | None = None
    metadata: dict[str, str] | None = None
    styles: ContentStyles | None = None


class ContentReorder(BaseModel):
    page: ContentPage
    content_ids: list[PydanticObjectId]


class PageSummary(BaseModel):
    page: str
    count: int
    active_count: int
    section_count: int


def summarize_pages(items: list[ContentBase]) -> list[PageSummary]:
    pages: dict[str, dict] = {}
    for item in items:
        row = pages.setdefault(item.page, {"count": 0, "active_count": 0, "sections": set()})
        row["count"] += 1
        row["active_count"] += int(item.is_active)
        row["sections"].add(item.section)

    return [
        PageSummary(
            page=page,
            count=row["count"],
            active_count=row["active_count"],
            section_count=len(row["sections"]),
        )
        for page, row in sorted(pages.items())
    ]
