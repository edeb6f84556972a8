"""
Background Workers for the viewer.

Opening a document and rasterizing a page are the only slow operations. Both
run on their own QThread and report back through signals, which Qt delivers
on the GUI thread. Workers only touch the backend; the cache and the tab
manager are updated by the receiving slots.
"""

import logging
from typing import Optional

from PySide6.QtCore import QThread, Signal

from ..core.backend import DocumentSource, Renderer
from ..core.constants import CACHE_CAPACITY, EvictionPolicy
from ..core.errors import OpenFailed
from ..core.session import DocumentSession

logger = logging.getLogger(__name__)


class DocumentLoader(QThread):
    """Opens one document into a new DocumentSession."""

    loaded = Signal(object)
    failed = Signal(str, str)

    def __init__(
        self,
        path: str,
        source: DocumentSource,
        cache_capacity: int = CACHE_CAPACITY,
        eviction: EvictionPolicy = EvictionPolicy.FIFO,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.path = path
        self.source = source
        self.cache_capacity = cache_capacity
        self.eviction = eviction
        self.session: Optional[DocumentSession] = None

    def run(self) -> None:
        try:
            session = DocumentSession.open(
                self.path, self.source, self.cache_capacity, self.eviction
            )
        except OpenFailed as e:
            logger.warning("%s", e)
            self.failed.emit(self.path, e.reason)
            return
        self.session = session
        self.loaded.emit(session)


class PageRenderer(QThread):
    """Rasterizes one page at one zoom level."""

    rendered = Signal(int, float, object)
    failed = Signal(int, float, str)

    def __init__(
        self, renderer: Renderer, page_index: int, zoom: float, parent=None
    ) -> None:
        super().__init__(parent)
        self.renderer = renderer
        self.page_index = page_index
        self.zoom = zoom

    def run(self) -> None:
        try:
            buffer = self.renderer.render(self.page_index, self.zoom)
        except Exception as e:
            logger.warning(
                "Render error page %d at %.2fx: %s", self.page_index + 1, self.zoom, e
            )
            self.failed.emit(self.page_index, self.zoom, str(e))
            return
        self.rendered.emit(self.page_index, self.zoom, buffer)
