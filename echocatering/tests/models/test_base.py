from datetime import datetime, timedelta, timezone

import pytest

from echocatering.models.models.base import (
    TimestampedModel,
    sanitize_text,
    to_naive_utc,
    utcnow,
)


def test_sanitize_text_accepts_plain_text():
    assert sanitize_text("Mezcal, lime & agave", max_length=100) == "Mezcal, lime & agave"


def test_sanitize_text_normalizes_line_endings():
    assert sanitize_text("line one\r\nline two", max_length=100) == "line one\nline two"


def test_sanitize_text_none_passes_through():
    assert sanitize_text(None, max_length=10) is None


def test_sanitize_text_rejects_markup():
    with pytest.raises(ValueError, match="disallowed HTML"):
        sanitize_text("<script>alert(1)</script>", max_length=100)


def test_sanitize_text_rejects_too_long():
    with pytest.raises(ValueError, match="at most 5 characters"):
        sanitize_text("abcdef", max_length=5)


def test_to_naive_utc_converts_aware_datetimes():
    aware = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=-4)))
    assert to_naive_utc(aware) == datetime(2024, 5, 1, 18, 0)


def test_to_naive_utc_keeps_naive_datetimes():
    naive = datetime(2024, 5, 1, 14, 0)
    assert to_naive_utc(naive) is naive


def test_touch_moves_updated_at_forward():
    model = TimestampedModel(updated_at=datetime(2000, 1, 1))
    model.touch()
    assert model.updated_at > datetime(2000, 1, 1)
    assert utcnow().tzinfo is None

