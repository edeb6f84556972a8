"""
Document Session.

Pairs one open document with its viewport and render cache. All render
requests for the document go through the cache.
"""

import logging
import os
from typing import Optional

from .backend import Document, DocumentSource
from .cache import PageImage, RenderCache
from .constants import CACHE_CAPACITY, UNTITLED, EvictionPolicy
from .errors import OpenFailed, RenderFailed
from .viewport import Viewport

logger = logging.getLogger(__name__)


def _load(path: str, source: DocumentSource) -> Document:
    """Opens a document, converting every backend failure into OpenFailed."""
    try:
        document = source.open(path)
    except OpenFailed:
        raise
    except Exception as e:
        raise OpenFailed(path, str(e)) from e

    if document.page_count <= 0:
        document.close()
        raise OpenFailed(path, "document has no pages")
    return document


class DocumentSession:
    """
    One open document: its metadata, viewport, cache and renderer.

    Sessions are normally created with :meth:`open`, which blocks on file
    I/O; the GUI runs it on a :class:`~quire.ui.workers.DocumentLoader`.
    """

    def __init__(
        self,
        path: str,
        document: Document,
        cache_capacity: int = CACHE_CAPACITY,
        eviction: EvictionPolicy = EvictionPolicy.FIFO,
    ) -> None:
        self.path = path
        self.renderer: Document = document
        self.page_count: int = document.page_count
        self.viewport = Viewport(self.page_count)
        self.cache = RenderCache(cache_capacity, eviction)

    @classmethod
    def open(
        cls,
        path: str,
        source: DocumentSource,
        cache_capacity: int = CACHE_CAPACITY,
        eviction: EvictionPolicy = EvictionPolicy.FIFO,
    ) -> "DocumentSession":
        """
        Loads a document and wraps it in a fresh session.

        Args:
            path: Path to the document file.
            source: The backend used to load it.
            cache_capacity: Maximum number of cached page images.
            eviction: Which cached image to drop first when full.

        Returns:
            A session on page 0 at the default zoom with an empty cache.

        Raises:
            OpenFailed: The file is missing, unreadable, corrupt or empty.
        """
        document = _load(path, source)
        logger.info("Opened %s (%d pages)", path, document.page_count)
        return cls(path, document, cache_capacity, eviction)

    def display_name(self) -> str:
        name = os.path.basename(os.path.normpath(self.path)) if self.path else ""
        return name or UNTITLED

    def rendered_page(self) -> Optional[PageImage]:
        """
        Returns the image for the current page and zoom.

        Returns:
            The page image, or None if the renderer failed. The failure is
            logged and the caller shows a placeholder instead.
        """
        page = self.viewport.current_page
        try:
            return self.cache.get_or_render(page, self.viewport.zoom, self.renderer)
        except RenderFailed as e:
            logger.error("%s: %s", self.display_name(), e)
            return None

    def reload(self, source: DocumentSource) -> None:
        """
        Re-opens the document from disk and drops every cached image.

        The current page and zoom survive if the page still exists.

        Raises:
            OpenFailed: The file can no longer be opened; the session is left
                as it was.
        """
        document = _load(self.path, source)
        old_viewport = self.viewport

        self.renderer.close()
        self.renderer = document
        self.page_count = document.page_count
        self.cache.invalidate_all()

        self.viewport = Viewport(self.page_count)
        if old_viewport.current_page < self.page_count:
            self.viewport.set_page(old_viewport.current_page)
            self.viewport.set_zoom(old_viewport.zoom)
        logger.info("Reloaded %s (%d pages)", self.path, self.page_count)

    def close(self) -> None:
        """Releases the cache and the backend document."""
        self.cache.invalidate_all()
        self.renderer.close()

    def __repr__(self) -> str:
        return f"DocumentSession({self.display_name()!r}, {self.viewport!r})"
