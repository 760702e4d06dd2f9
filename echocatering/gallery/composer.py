"""
Grid layout composer for the event gallery.

Maps a flat, ordered list of image references onto the fixed tile templates
defined in :mod:`echocatering.gallery.templates`. The result is a list of
tiles with explicit 1-based CSS grid placement.

Desktop sequences are laid out side by side (9 columns x 4 rows each), mobile
sequences are stacked (5 columns x 4 rows each). Sequences are appended until
there is at least one slot per image; slot ``k`` shows image ``k mod N``.
"""

import math
from collections.abc import Iterable
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from echocatering.gallery.templates import (
    BAND_ROWS,
    SEQUENCE_ROWS,
    SEQUENCE_WIDTH,
    SHAPES,
    TileShape,
    Viewport,
    slot_count,
    template_for,
)
from echocatering.models.logging import logger


class ImageReference(BaseModel):
    """Opaque image identifier plus optional metadata."""

    src: str = Field(min_length=1)
    public_id: str | None = None
    width: int | None = None
    height: int | None = None
    format: str | None = None
    resource_type: str | None = None
    created_at: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def coerce(cls, value: Any) -> "ImageReference":
        """Build a reference from a URL string, a listing dict or a reference."""
        if isinstance(value, ImageReference):
            return value
        if isinstance(value, str):
            return cls(src=value)
        if isinstance(value, dict):
            src = value.get("src") or value.get("url") or value.get("imagePath")
            if not src and value.get("filename"):
                src = f"/gallery/{value['filename']}"
            return cls(
                src=src or "",
                public_id=value.get("publicId") or value.get("public_id"),
                width=value.get("width"),
                height=value.get("height"),
                format=value.get("format"),
                resource_type=value.get("resourceType") or value.get("resource_type"),
                created_at=value.get("createdAt") or value.get("created_at"),
            )
        raise TypeError(f"Unsupported image reference: {value!r}")

    @property
    def aspect_ratio(self) -> float | None:
        if self.width and self.height:
            return self.width / self.height
        return None


class Tile(BaseModel):
    shape: TileShape
    column: int
    row: int
    col_span: int
    row_span: int
    sequence_index: int
    slot_index: int
    image: ImageReference

    model_config = ConfigDict(frozen=True)

    @property
    def grid_column(self) -> str:
        return f"{self.column} / span {self.col_span}"

    @property
    def grid_row(self) -> str:
        return f"{self.row} / span {self.row_span}"

    @property
    def key(self) -> str:
        return f"grid-{self.sequence_index}-{self.slot_index}"

    def cells(self) -> list[tuple[int, int]]:
        """All (column, row) cells covered by the tile."""
        return [
            (col, row)
            for row in range(self.row, self.row + self.row_span)
            for col in range(self.column, self.column + self.col_span)
        ]


class GridLayout(BaseModel):
    viewport: Viewport
    tiles: tuple[Tile, ...] = ()
    columns: int = 0
    rows: int = 0
    sequence_count: int = 0
    sequence_width: int

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.tiles


class GridMetrics(BaseModel):
    cell_size: int
    gap: int

    model_config = ConfigDict(frozen=True)

    def content_width(self, columns: int) -> int:
        """Pixel width of ``columns`` cells and the gaps between them."""
        if columns <= 0:
            return 0
        return columns * self.cell_size + (columns - 1) * self.gap

    def content_height(self, rows: int) -> int:
        if rows <= 0:
            return 0
        return rows * self.cell_size + (rows - 1) * self.gap


def sequences_needed(image_count: int, viewport: Viewport) -> int:
    """Number of sequences required to give every image at least one slot."""
    if image_count <= 0:
        return 0
    sequences = 0
    slots = 0
    while slots < image_count:
        slots += slot_count(template_for(viewport, sequences))
        sequences += 1
    return sequences


def _sequence_origin(viewport: Viewport, sequence_index: int) -> tuple[int, int]:
    """Top-left (column, row) grid line of a sequence."""
    if viewport == Viewport.DESKTOP:
        return sequence_index * SEQUENCE_WIDTH[viewport] + 1, 1
    return 1, sequence_index * SEQUENCE_ROWS + 1


@lru_cache(maxsize=32)
def _compose(images: tuple[ImageReference, ...], viewport: Viewport) -> GridLayout:
    width = SEQUENCE_WIDTH[viewport]
    if not images:
        return GridLayout(viewport=viewport, sequence_width=width)

    sequence_count = sequences_needed(len(images), viewport)
    shapes = SHAPES[viewport]
    tiles: list[Tile] = []
    slot = 0

    for sequence_index in range(sequence_count):
        origin_col, origin_row = _sequence_origin(viewport, sequence_index)
        for band_index, band in enumerate(template_for(viewport, sequence_index)):
            column = origin_col
            row = origin_row + band_index * BAND_ROWS
            for span in band:
                tiles.append(
                    Tile(
                        shape=shapes[span],
                        column=column,
                        row=row,
                        col_span=span,
                        row_span=BAND_ROWS,
                        sequence_index=sequence_index,
                        slot_index=slot,
                        image=images[slot % len(images)],
                    )
                )
                column += span
                slot += 1

    if viewport == Viewport.DESKTOP:
        columns, rows = sequence_count * width, SEQUENCE_ROWS
    else:
        columns, rows = width, sequence_count * SEQUENCE_ROWS

    logger.debug(
        f"Composed {viewport.value} grid: {len(images)} images, "
        f"{sequence_count} sequences, {len(tiles)} tiles"
    )
    return GridLayout(
        viewport=viewport,
        tiles=tuple(tiles),
        columns=columns,
        rows=rows,
        sequence_count=sequence_count,
        sequence_width=width,
    )


def compose_grid(
    images: Iterable[Any], viewport: Viewport | str = Viewport.DESKTOP
) -> GridLayout:
    """
    Compose the gallery grid for a list of images.

    Args:
        images: Image references, URL strings or media listing dicts.
        viewport: ``desktop`` or ``mobile``.

    Returns:
        GridLayout: tiles with explicit grid placement. Empty when there are no
        images. Results are memoized on the image tuple and viewport.
    """
    refs = tuple(ImageReference.coerce(image) for image in images)
    return _compose(refs, Viewport(viewport))


def unique_images(layout: GridLayout) -> list[ImageReference]:
    """De-duplicated images in slot order, as browsed by the lightbox."""
    seen: set[str] = set()
    result = []
    for tile in layout.tiles:
        if tile.image.src not in seen:
            seen.add(tile.image.src)
            result.append(tile.image)
    return result


def grid_metrics(
    viewport: Viewport | str, viewport_width: int, viewport_height: int
) -> GridMetrics:
    """
    Cell size and gap for a browser viewport.

    Desktop fits four rows into 97% of the viewport height minus 120px of
    padding, clamped to 60-200px, with a gap of 10% (at least 4px). Mobile fits
    exactly five cells across the width minus 32px of padding, with 4px gaps.
    """
    viewport = Viewport(viewport)
    if viewport == Viewport.MOBILE:
        gap = 4
        cell_size = max(1, math.floor((viewport_width - 32 - 4 * gap) / 5))
        return GridMetrics(cell_size=cell_size, gap=gap)

    available_height = viewport_height * 0.97 - 120
    row_height = (available_height - 48) / SEQUENCE_ROWS
    cell_size = max(60, min(200, math.floor(row_height)))
    gap = max(4, math.floor(cell_size * 0.1))
    return GridMetrics(cell_size=cell_size, gap=gap)
