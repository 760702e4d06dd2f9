from typing import Any

from beanie import Document
from pydantic import BaseModel, ValidationError

from echocatering.api.v1.errors import APIError


def apply_update(document: Document, base: type[BaseModel], changes: dict[str, Any]) -> Document:
    """
    Validate ``changes`` against the full model and copy them onto ``document``.

    Raises APIError(400) when the merged document would be invalid.
    """
    changes = {field: value for field, value in changes.items() if field in base.model_fields}
    current = document.model_dump(exclude={"id", "revision_id"})
    try:
        merged = base.model_validate({**current, **changes})
    except ValidationError as e:
        raise APIError(400, "Invalid update", "; ".join(err["msg"] for err in e.errors()))

    for field in changes:
        setattr(document, field, getattr(merged, field))
    if hasattr(document, "touch"):
        document.touch()
    return document


def page_count(total: int, limit: int) -> int:
    return -(-total // limit)
