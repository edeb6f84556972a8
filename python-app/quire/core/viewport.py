"""
Viewport state for a single open document.

Pure state transitions: no I/O and no side effects beyond the viewport's own
fields. Out-of-range requests are ignored or clamped, never rejected.
"""

from typing import Tuple

from .constants import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ZOOM_STEP


def clamp_zoom(zoom: float) -> float:
    """Forces a zoom factor into the supported range."""
    return max(MIN_ZOOM, min(zoom, MAX_ZOOM))


class Viewport:
    """Tracks the current page, zoom factor and pan offset of a document."""

    def __init__(self, page_count: int) -> None:
        self._page_count = page_count
        self.current_page: int = 0
        self.zoom: float = DEFAULT_ZOOM
        self.pan_x: float = 0.0
        self.pan_y: float = 0.0

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def pan_position(self) -> Tuple[float, float]:
        return (self.pan_x, self.pan_y)

    @property
    def zoom_percent(self) -> int:
        """Zoom as a whole percentage, for display."""
        return round(self.zoom * 100)

    @property
    def can_go_next(self) -> bool:
        return self.current_page + 1 < self._page_count

    @property
    def can_go_previous(self) -> bool:
        return self.current_page > 0

    def _move_to(self, page: int) -> None:
        self.current_page = page
        self.pan_x = 0.0
        self.pan_y = 0.0

    def set_page(self, page: int) -> None:
        """Jumps to a page. Indices outside the document are ignored."""
        if 0 <= page < self._page_count:
            self._move_to(page)

    def next_page(self) -> bool:
        """
        Advances one page.

        Returns:
            True if the page changed, False at the last page.
        """
        if not self.can_go_next:
            return False
        self._move_to(self.current_page + 1)
        return True

    def previous_page(self) -> bool:
        """
        Goes back one page.

        Returns:
            True if the page changed, False at the first page.
        """
        if not self.can_go_previous:
            return False
        self._move_to(self.current_page - 1)
        return True

    def zoom_in(self) -> None:
        self.zoom = clamp_zoom(self.zoom + ZOOM_STEP)

    def zoom_out(self) -> None:
        self.zoom = clamp_zoom(self.zoom - ZOOM_STEP)

    def set_zoom(self, zoom: float) -> None:
        self.zoom = clamp_zoom(zoom)

    def reset_zoom(self) -> None:
        """Restores the default zoom and recenters the page."""
        self.zoom = DEFAULT_ZOOM
        self.pan_x = 0.0
        self.pan_y = 0.0

    def pan(self, dx: float, dy: float) -> None:
        # Unbounded: keeping the page on screen is the view's job.
        self.pan_x += dx
        self.pan_y += dy

    def __repr__(self) -> str:
        return (
            f"Viewport(page={self.current_page}/{self._page_count}, "
            f"zoom={self.zoom:.2f}, pan=({self.pan_x:.1f}, {self.pan_y:.1f}))"
        )
