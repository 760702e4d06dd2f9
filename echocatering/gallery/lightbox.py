"""Lightbox viewer over the de-duplicated gallery image list."""

from collections.abc import Iterable
from typing import Any, Protocol

from echocatering.gallery.composer import ImageReference
from echocatering.gallery.templates import Viewport
from echocatering.models.logging import logger


class OrientationController(Protocol):
    """Device screen-orientation lock, used by the mobile viewer."""

    def unlock(self) -> None: ...

    def lock_portrait(self) -> None: ...


class Lightbox:
    def __init__(
        self,
        images: Iterable[Any],
        viewport: Viewport | str = Viewport.DESKTOP,
        orientation: OrientationController | None = None,
    ):
        self.images = [ImageReference.coerce(image) for image in images]
        self.viewport = Viewport(viewport)
        self.orientation = orientation
        self.index: int | None = None

    @property
    def is_open(self) -> bool:
        return self.index is not None

    @property
    def current(self) -> ImageReference | None:
        if self.index is None:
            return None
        return self.images[self.index]

    @property
    def can_previous(self) -> bool:
        return self.index is not None and self.index > 0

    @property
    def can_next(self) -> bool:
        return self.index is not None and self.index < len(self.images) - 1

    def index_of(self, target: ImageReference | str) -> int:
        src = target.src if isinstance(target, ImageReference) else target
        for index, image in enumerate(self.images):
            if image.src == src:
                return index
        raise ValueError(f"Image not in gallery: {src}")

    def open(self, target: int | str | ImageReference) -> ImageReference:
        """Open on an index or on an image (by reference or source)."""
        if isinstance(target, int):
            if not 0 <= target < len(self.images):
                raise IndexError(f"Image index out of range: {target}")
            index = target
        else:
            index = self.index_of(target)

        was_open = self.is_open
        self.index = index
        if not was_open and self.viewport == Viewport.MOBILE:
            self._set_orientation(unlock=True)
        return self.images[index]

    def next(self) -> bool:
        if not self.can_next:
            return False
        self.index += 1  # type: ignore[operator]
        return True

    def previous(self) -> bool:
        if not self.can_previous:
            return False
        self.index -= 1  # type: ignore[operator]
        return True

    def close(self) -> None:
        if not self.is_open:
            return
        self.index = None
        if self.viewport == Viewport.MOBILE:
            self._set_orientation(unlock=False)

    def handle_key(self, key: str) -> bool:
        if not self.is_open:
            return False
        if key == "ArrowRight":
            return self.next()
        if key == "ArrowLeft":
            return self.previous()
        if key == "Escape":
            self.close()
            return True
        return False

    def _set_orientation(self, unlock: bool) -> None:
        if self.orientation is None:
            return
        try:
            if unlock:
                self.orientation.unlock()
            else:
                self.orientation.lock_portrait()
        except Exception as e:
            # Not every device supports orientation locking
            logger.warning(f"Screen orientation change failed: {e}")
