from unittest.mock import MagicMock

import pytest

from echocatering.gallery.composer import ImageReference, compose_grid, unique_images
from echocatering.gallery.lightbox import Lightbox
from echocatering.gallery.templates import Viewport


@pytest.fixture
def lightbox():
    layout = compose_grid(["a.jpg", "b.jpg", "c.jpg"], Viewport.DESKTOP)
    return Lightbox(unique_images(layout))


class TestNavigation:
    def test_open_by_index_and_source(self, lightbox):
        assert lightbox.open(1).src == "b.jpg"
        assert lightbox.open("c.jpg").src == "c.jpg"
        assert lightbox.open(ImageReference(src="a.jpg")).src == "a.jpg"
        assert lightbox.index == 0

    def test_open_unknown_image(self, lightbox):
        with pytest.raises(ValueError):
            lightbox.open("missing.jpg")
        with pytest.raises(IndexError):
            lightbox.open(3)
        assert not lightbox.is_open

    def test_steps_stop_at_boundaries(self, lightbox):
        lightbox.open(0)
        assert not lightbox.previous()
        assert lightbox.next()
        assert lightbox.next()
        assert lightbox.current.src == "c.jpg"
        assert not lightbox.next()
        assert lightbox.index == 2

    def test_steps_are_noops_when_closed(self, lightbox):
        assert not lightbox.next()
        assert not lightbox.previous()
        assert lightbox.current is None

    def test_close(self, lightbox):
        lightbox.open(1)
        lightbox.close()
        assert not lightbox.is_open
        assert lightbox.current is None

    def test_keyboard(self, lightbox):
        assert not lightbox.handle_key("ArrowRight")
        lightbox.open(0)
        assert lightbox.handle_key("ArrowRight")
        assert lightbox.handle_key("ArrowLeft")
        assert lightbox.handle_key("Escape")
        assert not lightbox.is_open


class TestOrientation:
    def test_mobile_unlocks_and_restores_portrait(self):
        orientation = MagicMock()
        lightbox = Lightbox(["a.jpg", "b.jpg"], Viewport.MOBILE, orientation=orientation)

        lightbox.open(0)
        lightbox.next()
        orientation.unlock.assert_called_once()
        orientation.lock_portrait.assert_not_called()

        lightbox.close()
        orientation.lock_portrait.assert_called_once()

    def test_desktop_leaves_orientation_alone(self):
        orientation = MagicMock()
        lightbox = Lightbox(["a.jpg"], Viewport.DESKTOP, orientation=orientation)
        lightbox.open(0)
        lightbox.close()
        orientation.unlock.assert_not_called()
        orientation.lock_portrait.assert_not_called()

    def test_orientation_failure_does_not_break_viewer(self):
        orientation = MagicMock()
        orientation.unlock.side_effect = RuntimeError("not supported")
        lightbox = Lightbox(["a.jpg"], Viewport.MOBILE, orientation=orientation)

        assert lightbox.open(0).src == "a.jpg"
        assert lightbox.is_open
