import os
import threading
from typing import Dict, List, Optional, Set, Tuple

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from quire.core.backend import Document, DocumentSource, PageBuffer  # noqa: E402


class FakeDocument(Document):
    """Deterministic renderer: a 2x3 buffer whose bytes encode page and zoom.

    With a ``gate`` every render blocks until the event is set, which keeps
    background renders in flight for as long as a test needs.
    """

    def __init__(self, page_count: int = 5, gate: Optional[threading.Event] = None) -> None:
        self._page_count = page_count
        self.gate = gate
        self.calls: List[Tuple[int, float]] = []
        self.failing_pages: Set[int] = set()
        self.closed = False

    @property
    def page_count(self) -> int:
        return self._page_count

    def render(self, page_index: int, zoom: float) -> PageBuffer:
        if self.gate is not None:
            self.gate.wait(5)
        self.calls.append((page_index, zoom))
        if page_index in self.failing_pages:
            raise RuntimeError(f"page {page_index} is corrupt")
        marker = bytes([page_index % 256, round(zoom * 100) % 256])
        return PageBuffer(width=2, height=3, data=marker * 9)

    def close(self) -> None:
        self.closed = True


class FakeSource(DocumentSource):
    """Maps paths to page counts; unknown paths fail like a missing file."""

    def __init__(
        self,
        page_counts: Dict[str, int],
        render_gate: Optional[threading.Event] = None,
        open_gate: Optional[threading.Event] = None,
    ) -> None:
        self.page_counts = dict(page_counts)
        self.render_gate = render_gate
        self.open_gate = open_gate
        self.opened: List[FakeDocument] = []

    def open(self, path: str) -> FakeDocument:
        if self.open_gate is not None:
            self.open_gate.wait(5)
        if path not in self.page_counts:
            raise FileNotFoundError(f"no such file: '{path}'")
        doc = FakeDocument(self.page_counts[path], self.render_gate)
        self.opened.append(doc)
        return doc


PAGE_COUNTS = {
    "/docs/report.pdf": 5,
    "/docs/slides.pdf": 12,
    "/docs/notes.pdf": 1,
    "/docs/empty.pdf": 0,
}


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture()
def renderer() -> FakeDocument:
    return FakeDocument()


@pytest.fixture()
def source() -> FakeSource:
    return FakeSource(PAGE_COUNTS)
