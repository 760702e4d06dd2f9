from echocatering.gallery.composer import (
    GridLayout,
    GridMetrics,
    ImageReference,
    Tile,
    compose_grid,
    grid_metrics,
    unique_images,
)
from echocatering.gallery.lightbox import Lightbox, OrientationController
from echocatering.gallery.navigator import NavigatorState, ScrollNavigator
from echocatering.gallery.templates import TileShape, Viewport

__all__ = [
    "GridLayout",
    "GridMetrics",
    "ImageReference",
    "Lightbox",
    "NavigatorState",
    "OrientationController",
    "ScrollNavigator",
    "Tile",
    "TileShape",
    "Viewport",
    "compose_grid",
    "grid_metrics",
    "unique_images",
]
