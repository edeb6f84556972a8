"""
PyMuPDF backend.

Renders documents through **PyMuPDF (fitz)**, which wraps the MuPDF C
library. Besides PDF, MuPDF opens XPS, EPUB, CBZ and single images, all of
which are paginated and go through the same code path.

MuPDF must not be entered from two threads at once, even for different
documents, so every call into it (open, render, close) holds one
module-wide lock. Loader and render workers therefore queue up here.
"""

import logging
import threading

import fitz  # pymupdf

from ..core.backend import Document, DocumentSource, PageBuffer
from ..core.constants import PixelFormat

logger = logging.getLogger(__name__)

_MUPDF_LOCK = threading.RLock()


class FitzDocument(Document):
    """A document loaded by MuPDF."""

    def __init__(self, doc: "fitz.Document") -> None:
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def render(self, page_index: int, zoom: float) -> PageBuffer:
        with _MUPDF_LOCK:
            if not 0 <= page_index < self._doc.page_count:
                raise IndexError(f"page index {page_index} out of range")
            page = self._doc[page_index]
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
            logger.debug(
                "Rasterized page %d at %.2fx -> %dx%d",
                page_index + 1,
                zoom,
                pix.width,
                pix.height,
            )
            return PageBuffer(
                width=pix.width,
                height=pix.height,
                data=bytes(pix.samples),
                stride=pix.stride,
                format=PixelFormat.RGB888,
            )

    def close(self) -> None:
        with _MUPDF_LOCK:
            if not self._doc.is_closed:
                self._doc.close()


class FitzDocumentSource(DocumentSource):
    """Opens documents from disk with MuPDF."""

    def open(self, path: str) -> FitzDocument:
        with _MUPDF_LOCK:
            doc = fitz.open(path)
            if doc.needs_pass:
                doc.close()
                raise ValueError("document is password protected")
        return FitzDocument(doc)
