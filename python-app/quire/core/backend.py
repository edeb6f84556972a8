"""
Rendering backend interfaces.

This module defines the boundary between the viewer core and whatever library
actually rasterizes documents. The core only ever talks to these abstract
classes, so any backend (or a fake one in tests) can be plugged in.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .constants import PixelFormat


@dataclass(frozen=True)
class PageBuffer:
    """
    Represents the output of a page rendering operation.

    Attributes:
        width: The width of the rendered image in pixels.
        height: The height of the rendered image in pixels.
        data: The raw pixel data, row by row.
        stride: Bytes per row. Zero means tightly packed rows.
        format: The pixel layout of ``data``.
    """

    width: int
    height: int
    data: bytes
    stride: int = 0
    format: PixelFormat = PixelFormat.RGB888

    @property
    def bytes_per_line(self) -> int:
        return self.stride or self.width * self.format.bytes_per_pixel


class Renderer(ABC):
    """
    Rasterizes pages of one open document.

    Implementations must be idempotent: rendering the same page at the same
    zoom twice yields visually identical output.
    """

    @abstractmethod
    def render(self, page_index: int, zoom: float) -> PageBuffer:
        """
        Renders a specific page to a pixel buffer.

        Args:
            page_index: Zero-based index of the page.
            zoom: Scale factor (1.0 renders at the document's natural size).

        Returns:
            The rendered pixel buffer.

        Raises:
            Exception: Any backend error; callers wrap it in RenderFailed.
        """

    def close(self) -> None:
        """Releases native resources held by the renderer."""


class Document(Renderer):
    """A loaded document: a renderer that also knows its page count."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """The total number of pages in the document."""


class DocumentSource(ABC):
    """The entry point of a backend: turns file paths into documents."""

    @abstractmethod
    def open(self, path: str) -> Document:
        """
        Loads a document from the file system.

        Args:
            path: Path to the document file.

        Returns:
            The loaded document.

        Raises:
            Exception: Any backend error; callers wrap it in OpenFailed.
        """
