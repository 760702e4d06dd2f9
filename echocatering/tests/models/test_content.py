import pytest
from pydantic import ValidationError

from echocatering.models.models.content import ContentBase, summarize_pages


def test_html_blocks_keep_markup():
    block = ContentBase(page="home", section="intro", type="html", content="<p>Hello</p>")
    assert block.content == "<p>Hello</p>"


def test_text_blocks_reject_markup():
    with pytest.raises(ValidationError):
        ContentBase(page="home", section="intro", type="text", content="<p>Hello</p>")


def test_content_length_limit_applies_to_html():
    with pytest.raises(ValidationError):
        ContentBase(page="home", section="intro", type="html", content="x" * 10001)


def test_section_is_required_and_stripped():
    assert ContentBase(page="about", section=" story ").section == "story"
    with pytest.raises(ValidationError):
        ContentBase(page="about", section="")


def test_unknown_page_rejected():
    with pytest.raises(ValidationError):
        ContentBase(page="blog", section="intro")


def test_summarize_pages():
    items = [
        ContentBase(page="home", section="hero", type="hero"),
        ContentBase(page="home", section="hero", type="image", is_active=False),
        ContentBase(page="home", section="intro"),
        ContentBase(page="about", section="story"),
    ]
    rows = summarize_pages(items)
    assert [row.page for row in rows] == ["about", "home"]
    assert rows[1].count == 3
    assert rows[1].active_count == 2
    assert rows[1].section_count == 2
