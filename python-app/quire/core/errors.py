"""
Error types raised by the document core.

Out-of-range page or tab indices and out-of-range zoom values are not errors
anywhere in the core; only opening and rendering can fail.
"""


class QuireError(Exception):
    """Base class for all viewer errors."""


class OpenFailed(QuireError):
    """A document could not be opened (bad path, corrupt or unsupported file)."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not open {path}: {reason}")
        self.path = path
        self.reason = reason


class RenderFailed(QuireError):
    """The renderer could not rasterize one page at one zoom level."""

    def __init__(self, page_index: int, zoom: float, reason: str) -> None:
        super().__init__(
            f"Could not render page {page_index + 1} at {zoom:.2f}x: {reason}"
        )
        self.page_index = page_index
        self.zoom = zoom
        self.reason = reason
