"""
Tile templates for the event gallery grid.

A sequence is a fixed block of grid cells split into a top band and a bottom
band, each two rows tall. A template lists the column spans of the tiles in
each band, left to right. Every band of a template fills the full sequence
width, so sequences tile the grid without gaps or overlaps.
"""

from enum import Enum


class Viewport(str, Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"


class TileShape(str, Enum):
    WIDE = "wide"
    SQUARE = "square"
    NARROW = "narrow"
    FULL = "full"


# ---------------------------------------------------------------------------
# Grid geometry
# ---------------------------------------------------------------------------

BAND_ROWS = 2
SEQUENCE_ROWS = 2 * BAND_ROWS

SEQUENCE_WIDTH: dict[Viewport, int] = {
    Viewport.DESKTOP: 9,
    Viewport.MOBILE: 5,
}

# column span -> shape, per viewport
SHAPES: dict[Viewport, dict[int, TileShape]] = {
    Viewport.DESKTOP: {
        4: TileShape.WIDE,
        2: TileShape.SQUARE,
        3: TileShape.NARROW,
    },
    Viewport.MOBILE: {
        3: TileShape.NARROW,
        2: TileShape.SQUARE,
        5: TileShape.FULL,
    },
}

# ---------------------------------------------------------------------------
# Templates: (top band spans, bottom band spans)
# ---------------------------------------------------------------------------

Template = tuple[tuple[int, ...], tuple[int, ...]]

DESKTOP_TEMPLATES: tuple[Template, ...] = (
    ((4, 2, 3), (2, 3, 2, 2)),
    ((4, 3, 2), (3, 2, 4)),
    ((3, 3, 3), (2, 3, 4)),
    ((4, 3, 2), (3, 3, 3)),
    ((3, 2, 4), (4, 3, 2)),
)

MOBILE_TEMPLATES: tuple[Template, ...] = (
    ((3, 2), (5,)),
    ((2, 3), (5,)),
)

TEMPLATES: dict[Viewport, tuple[Template, ...]] = {
    Viewport.DESKTOP: DESKTOP_TEMPLATES,
    Viewport.MOBILE: MOBILE_TEMPLATES,
}


def template_for(viewport: Viewport, sequence_index: int) -> Template:
    """Return the template used by the sequence at ``sequence_index``."""
    templates = TEMPLATES[viewport]
    return templates[sequence_index % len(templates)]


def slot_count(template: Template) -> int:
    top, bottom = template
    return len(top) + len(bottom)
