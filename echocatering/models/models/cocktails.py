from datetime import datetime
from typing import Any, Literal

import pymongo
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field, computed_field, field_validator
from pymongo import IndexModel

from echocatering.models.models.base import TimestampedModel, sanitize_text, utcnow

CocktailCategory = Literal["cocktails", "mocktails", "beer", "wine", "spirits", "premix"]
CocktailStatus = Literal["active", "archived"]

CATEGORIES: tuple[str, ...] = CocktailCategory.__args__
LOCAL_MEDIA_PREFIX = "/menu-items"


def remote_url(url: str | None) -> str | None:
    """Return ``url`` when it is a usable http(s) URL, else None."""
    if url and url.strip() and url.startswith(("http://", "https://")):
        return url
    return None


def local_media_url(filename: str | None) -> str:
    return f"{LOCAL_MEDIA_PREFIX}/{filename}" if filename else ""


def icon_filename(video_file: str | None) -> str:
    return video_file.replace(".mp4", "_icon.mp4") if video_file else ""


class CocktailBase(TimestampedModel):
    item_number: int | None = None
    item_id: str | None = None
    name: str = Field(min_length=1, max_length=100)

    # Media file names
    video_file: str = ""
    stage1_file: str = ""
    stage2_file: str = ""
    background_file: str = ""
    map_snapshot_file: str = ""
    filter_params: dict[str, Any] = Field(default_factory=dict)

    # Cloudinary-hosted media
    cloudinary_video_url: str = ""
    cloudinary_video_public_id: str = ""
    cloudinary_icon_url: str = ""
    cloudinary_icon_public_id: str = ""
    cloudinary_map_snapshot_url: str = ""
    cloudinary_map_snapshot_public_id: str = ""

    # Menu copy
    concept: str = ""
    ingredients: str = ""
    global_ingredients: str = ""
    garnish: str = ""
    narrative: str = ""
    regions: list[str] = Field(default_factory=list)

    category: CocktailCategory = "cocktails"
    status: CocktailStatus = "active"
    archived_at: datetime | None = None
    order: int = 0
    is_active: bool = True
    featured: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be empty")
        return sanitize_text(value, max_length=100)

    @field_validator("concept", "ingredients", "narrative")
    @classmethod
    def validate_long_text(cls, value: str) -> str:
        return sanitize_text(value, max_length=1000)

    @field_validator("global_ingredients", "garnish")
    @classmethod
    def validate_short_text(cls, value: str) -> str:
        return sanitize_text(value, max_length=500)

    @computed_field
    @property
    def video_url(self) -> str:
        return remote_url(self.cloudinary_video_url) or local_media_url(self.video_file)

    @computed_field
    @property
    def icon_video_url(self) -> str:
        return remote_url(self.cloudinary_icon_url) or local_media_url(
            icon_filename(self.video_file)
        )

    @computed_field
    @property
    def map_snapshot_url(self) -> str:
        return remote_url(self.cloudinary_map_snapshot_url) or local_media_url(
            self.map_snapshot_file
        )

    def archive(self) -> None:
        self.status = "archived"
        self.is_active = False
        self.archived_at = utcnow()
        self.touch()

    def restore(self) -> None:
        self.status = "active"
        self.is_active = True
        self.archived_at = None
        self.touch()

    def toggle(self) -> None:
        if self.is_active:
            self.archive()
        else:
            self.restore()


class CocktailBeanie(CocktailBase, Document):
    class Settings:
        name = "cocktails"
        validate_on_save = True
        indexes = [
            IndexModel([("category", pymongo.ASCENDING), ("order", pymongo.ASCENDING)]),
            IndexModel([("is_active", pymongo.ASCENDING)]),
            IndexModel([("status", pymongo.ASCENDING)]),
            IndexModel([("item_number", pymongo.ASCENDING)]),
            IndexModel([("item_id", pymongo.ASCENDING)]),
        ]


class CocktailUpdate(BaseModel):
    item_number: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=100)
    video_file: str | None = None
    stage1_file: str | None = None
    stage2_file: str | None = None
    background_file: str | None = None
    map_snapshot_file: str | None = None
    filter_params: dict[str, Any] | None = None
    cloudinary_video_url: str | None = None
    cloudinary_video_public_id: str | None = None
    cloudinary_icon_url: str | None = None
    cloudinary_icon_public_id: str | None = None
    cloudinary_map_snapshot_url: str | None = None
    cloudinary_map_snapshot_public_id: str | None = None
    concept: str | None = None
    ingredients: str | None = None
    global_ingredients: str | None = None
    garnish: str | None = None
    narrative: str | None = None
    regions: list[str] | None = None
    category: CocktailCategory | None = None
    order: int | None = None
    is_active: bool | None = None
    featured: bool | None = None


class CocktailReorder(BaseModel):
    category: CocktailCategory
    cocktail_ids: list[PydanticObjectId]


class CategorySummary(BaseModel):
    category: str
    count: int
    active_count: int
    archived_count: int


def summarize_categories(cocktails: list[CocktailBase]) -> list[CategorySummary]:
    rows: dict[str, CategorySummary] = {}
    for cocktail in cocktails:
        row = rows.setdefault(
            cocktail.category,
            CategorySummary(category=cocktail.category, count=0, active_count=0, archived_count=0),
        )
        row.count += 1
        row.active_count += int(cocktail.is_active)
        row.archived_count += int(cocktail.status == "archived")
    return [rows[category] for category in sorted(rows)]
