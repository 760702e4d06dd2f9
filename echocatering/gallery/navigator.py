"""
Paged horizontal scroll navigation for the desktop event gallery.

The navigator tracks a signed pixel offset into the grid (0 at the left edge,
negative when scrolled right) and moves it one sequence at a time with a
fixed-duration cubic ease-out transition. Commands issued while a transition
is running are ignored, not queued.
"""

import asyncio
import math
import time
from collections.abc import Callable
from enum import Enum

from echocatering.gallery.composer import GridLayout, GridMetrics
from echocatering.gallery.templates import SEQUENCE_WIDTH, Viewport
from echocatering.models.logging import logger

DEFAULT_DURATION = 0.6
FRAME_INTERVAL = 1 / 60

NEXT_KEYS = ("ArrowRight",)
PREVIOUS_KEYS = ("ArrowLeft",)


class NavigatorState(str, Enum):
    IDLE = "idle"
    ANIMATING = "animating"


def ease_out_cubic(progress: float) -> float:
    return 1 - (1 - progress) ** 3


class ScrollNavigator:
    """State machine for gallery paging.

    Args:
        total_columns: Grid column count of the composed layout.
        cell_size: Column width in pixels.
        gap: Gap between columns in pixels.
        viewport_width: Visible width of the gallery container.
        viewport: Desktop or mobile. Mobile ignores keyboard paging.
        step_columns: Columns moved per command, one sequence by default.
        duration: Transition length in seconds.
        clock: Monotonic time source in seconds.
        on_navigate: Called with the target offset when a transition starts.
    """

    def __init__(
        self,
        total_columns: int,
        cell_size: float,
        gap: float,
        viewport_width: float,
        viewport: Viewport = Viewport.DESKTOP,
        step_columns: int | None = None,
        duration: float = DEFAULT_DURATION,
        clock: Callable[[], float] = time.monotonic,
        on_navigate: Callable[[float], None] | None = None,
    ):
        if cell_size <= 0:
            raise ValueError("cell_size must be > 0")
        if gap < 0:
            raise ValueError("gap must be >= 0")

        self.viewport = Viewport(viewport)
        self.total_columns = max(0, total_columns)
        self.cell_size = cell_size
        self.gap = gap
        self.viewport_width = viewport_width
        self.step_columns = step_columns or SEQUENCE_WIDTH[Viewport.DESKTOP]
        self.duration = duration
        self.clock = clock
        self.on_navigate = on_navigate

        self.position = 0.0
        self.state = NavigatorState.IDLE
        self.has_navigated_forward = False

        self._from = 0.0
        self._target = 0.0
        self._started_at = 0.0

    @classmethod
    def for_layout(
        cls, layout: GridLayout, metrics: GridMetrics, viewport_width: float, **kwargs
    ) -> "ScrollNavigator":
        return cls(
            total_columns=layout.columns,
            cell_size=metrics.cell_size,
            gap=metrics.gap,
            viewport_width=viewport_width,
            viewport=layout.viewport,
            step_columns=layout.sequence_width,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def pitch(self) -> float:
        """Distance between the left edges of two adjacent columns."""
        return self.cell_size + self.gap

    @property
    def total_width(self) -> float:
        if self.total_columns == 0:
            return 0.0
        return self.total_columns * self.cell_size + (self.total_columns - 1) * self.gap

    @property
    def min_position(self) -> float:
        """Most negative offset: right edge of the content on the viewport edge."""
        return -max(0.0, self.total_width - self.viewport_width)

    @property
    def is_animating(self) -> bool:
        return self.state == NavigatorState.ANIMATING

    @property
    def at_start(self) -> bool:
        return self.position >= 0

    @property
    def at_end(self) -> bool:
        return self.position <= self.min_position

    @property
    def target(self) -> float:
        return self._target if self.is_animating else self.position

    def clamp(self, position: float) -> float:
        return max(self.min_position, min(0.0, position))

    def _columns_within(self, distance: float) -> int:
        if distance <= 0:
            return 0
        # round() first so float noise does not add a column
        return math.ceil(round(distance / self.pitch, 6))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def next(self) -> bool:
        """Advance one sequence, or the remaining columns when fewer remain."""
        if self.is_animating:
            return False

        remaining = self._columns_within(self.position - self.min_position)
        step = min(self.step_columns, remaining)
        target = self.clamp(self.position - step * self.pitch)
        if not self._begin(target):
            return False

        self.has_navigated_forward = True
        return True

    def previous(self) -> bool:
        """Move back one sequence; only available after a successful next()."""
        if self.is_animating or not self.has_navigated_forward:
            return False

        remaining = self._columns_within(-self.position)
        step = min(self.step_columns, remaining)
        target = self.clamp(self.position + step * self.pitch)
        return self._begin(target)

    def handle_key(self, key: str) -> bool:
        """Keyboard paging, desktop only."""
        if self.viewport != Viewport.DESKTOP:
            return False
        if key in NEXT_KEYS:
            return self.next()
        if key in PREVIOUS_KEYS:
            return self.previous()
        return False

    def _begin(self, target: float) -> bool:
        if target == self.position:
            return False

        self._from = self.position
        self._target = target
        self._started_at = self.clock()
        self.state = NavigatorState.ANIMATING
        logger.debug(f"Gallery scroll {self._from:.1f} -> {target:.1f}")

        if self.on_navigate:
            self.on_navigate(target)
        return True

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------

    def tick(self, now: float | None = None) -> float:
        """Advance the transition to ``now`` and return the current offset."""
        if not self.is_animating:
            return self.position

        if now is None:
            now = self.clock()
        elapsed = now - self._started_at
        progress = 1.0 if self.duration <= 0 else min(max(elapsed / self.duration, 0.0), 1.0)

        if progress >= 1.0:
            self.position = self._target
            self.state = NavigatorState.IDLE
        else:
            self.position = self._from + (self._target - self._from) * ease_out_cubic(progress)
        return self.position

    async def animate(self, frame_interval: float = FRAME_INTERVAL) -> float:
        """Drive the running transition once per frame until it settles."""
        while self.is_animating:
            await asyncio.sleep(frame_interval)
            self.tick()
        return self.position

    def resize(
        self, viewport_width: float, cell_size: float | None = None, gap: float | None = None
    ):
        """Apply new container metrics and re-clamp the offset."""
        self.viewport_width = viewport_width
        if cell_size is not None:
            self.cell_size = cell_size
        if gap is not None:
            self.gap = gap
        if not self.is_animating:
            self.position = self.clamp(self.position)
