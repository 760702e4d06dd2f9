import html
from datetime import datetime, timezone

import bleach
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Naive UTC timestamp, the form MongoDB hands datetimes back in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def cents_to_dollars(cents: int | float) -> float:
    return cents / 100


def sanitize_text(value: str | None, max_length: int) -> str | None:
    """
    Validate free text coming from the admin panel.

    The text is run through bleach with no allowed tags; if stripping changed
    anything beyond entity escaping, the input carried markup and is rejected.
    """
    if value is None:
        return None

    value = value.replace("\r\n", "\n")
    stripped = html.unescape(bleach.clean(value, tags=[], attributes={}, strip=True))
    if stripped != value:
        raise ValueError("Text contains disallowed HTML content.")

    if len(value) > max_length:
        raise ValueError(f"Text must be at most {max_length} characters.")

    return value


class TimestampedModel(BaseModel):
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self) -> None:
        self.updated_at = utcnow()
