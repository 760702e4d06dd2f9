from pathlib import PurePosixPath
from typing import Literal

import pymongo
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field, computed_field, field_validator
from pymongo import IndexModel

from echocatering.models.models.base import TimestampedModel, sanitize_text
from echocatering.models.models.cocktails import remote_url

GalleryCategory = Literal["hero", "gallery", "footer", "events", "food", "cocktails"]

LOCAL_GALLERY_PREFIX = "/gallery"
THUMBNAIL_TRANSFORMATION = "c_fill,w_200,h_200,q_auto,f_auto"


class Dimensions(BaseModel):
    width: int | None = None
    height: int | None = None


def thumbnail_url(cloudinary_url: str | None) -> str | None:
    """200x200 fill crop of a Cloudinary delivery URL, None for other hosts."""
    url = remote_url(cloudinary_url)
    if url is None or "/upload/" not in url:
        return None
    return url.replace("/upload/", f"/upload/{THUMBNAIL_TRANSFORMATION}/", 1)


class GalleryBase(TimestampedModel):
    filename: str = Field(min_length=1)
    original_name: str = Field(min_length=1)
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    alt_text: str | None = Field(default=None, max_length=200)
    category: GalleryCategory = "gallery"
    tags: list[str] = Field(default_factory=list)
    photo_number: int | None = None
    order: int = 0
    is_active: bool = True
    featured: bool = False

    file_size: int | None = None
    mime_type: str | None = None
    dimensions: Dimensions | None = None

    cloudinary_url: str = ""
    cloudinary_public_id: str = ""

    @field_validator("filename", "original_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("File name cannot be empty")
        return value

    @field_validator("title", "description", "alt_text")
    @classmethod
    def validate_text(cls, value: str | None) -> str | None:
        return sanitize_text(value.strip(), max_length=500) if value is not None else None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, value: list[str]) -> list[str]:
        tags = [tag.strip() for tag in value if tag and tag.strip()]
        for tag in tags:
            if len(tag) > 50:
                raise ValueError("Tags must be at most 50 characters.")
        return tags

    @computed_field
    @property
    def image_path(self) -> str:
        return remote_url(self.cloudinary_url) or f"{LOCAL_GALLERY_PREFIX}/{self.filename}"

    @computed_field
    @property
    def thumbnail_path(self) -> str:
        stem = PurePosixPath(self.filename).stem
        return (
            thumbnail_url(self.cloudinary_url)
            or f"{LOCAL_GALLERY_PREFIX}/thumbnails/{stem}_thumb.jpg"
        )

    @property
    def resource_type(self) -> str:
        return "video" if (self.mime_type or "").startswith("video") else "image"


class GalleryBeanie(GalleryBase, Document):
    class Settings:
        name = "gallery"
        validate_on_save = True
        indexes = [
            IndexModel([("category", pymongo.ASCENDING), ("order", pymongo.ASCENDING)]),
            IndexModel([("is_active", pymongo.ASCENDING)]),
            IndexModel([("featured", pymongo.ASCENDING)]),
            IndexModel([("tags", pymongo.ASCENDING)]),
            IndexModel([("photo_number", pymongo.ASCENDING)]),
            IndexModel([("filename", pymongo.ASCENDING)]),
        ]


class GalleryUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    alt_text: str | None = Field(default=None, max_length=200)
    category: GalleryCategory | None = None
    tags: list[str] | None = None
    photo_number: int | None = None
    is_active: bool | None = None
    featured: bool | None = None
    dimensions: Dimensions | None = None
    cloudinary_url: str | None = None
    cloudinary_public_id: str | None = None


class GalleryReorder(BaseModel):
    category: GalleryCategory
    image_ids: list[PydanticObjectId]


class GalleryCategorySummary(BaseModel):
    category: str
    count: int
    active_count: int
    featured_count: int


def summarize_gallery(images: list[GalleryBase]) -> list[GalleryCategorySummary]:
    rows: dict[str, GalleryCategorySummary] = {}
    for image in images:
        row = rows.setdefault(
            image.category,
            GalleryCategorySummary(
                category=image.category, count=0, active_count=0, featured_count=0
            ),
        )
        row.count += 1
        row.active_count += int(image.is_active)
        row.featured_count += int(image.featured)
    return [rows[category] for category in sorted(rows)]


def distinct_tags(images: list[GalleryBase]) -> list[str]:
    return sorted({tag for image in images for tag in image.tags})
