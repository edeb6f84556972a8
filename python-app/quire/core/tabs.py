"""
Tab Manager.

Keeps the ordered list of open document sessions and routes navigation and
zoom commands to the active one. Every command is a silent no-op when no tab
is open, and out-of-range tab indices are ignored.
"""

import logging
from typing import Iterator, List, Optional

from .backend import DocumentSource
from .cache import PageImage
from .constants import CACHE_CAPACITY, EvictionPolicy
from .session import DocumentSession

logger = logging.getLogger(__name__)


class TabManager:
    """Ordered collection of DocumentSessions with one active tab."""

    def __init__(
        self,
        cache_capacity: int = CACHE_CAPACITY,
        eviction: EvictionPolicy = EvictionPolicy.FIFO,
    ) -> None:
        self.sessions: List[DocumentSession] = []
        self.active_index: Optional[int] = None
        self.cache_capacity = cache_capacity
        self.eviction = eviction

    def __len__(self) -> int:
        return len(self.sessions)

    def __iter__(self) -> Iterator[DocumentSession]:
        return iter(self.sessions)

    def __getitem__(self, index: int) -> DocumentSession:
        return self.sessions[index]

    @property
    def active(self) -> Optional[DocumentSession]:
        if self.active_index is None:
            return None
        return self.sessions[self.active_index]

    def open_new(self, path: str, source: DocumentSource) -> DocumentSession:
        """
        Opens a document in a new tab and makes it active.

        Raises:
            OpenFailed: Nothing is added and the active tab is unchanged.
        """
        session = DocumentSession.open(
            path, source, self.cache_capacity, self.eviction
        )
        self.add(session)
        return session

    def add(self, session: DocumentSession) -> int:
        """
        Appends an already opened session and makes it active.

        Returns:
            The index of the new tab.
        """
        self.sessions.append(session)
        self.active_index = len(self.sessions) - 1
        return self.active_index

    def close(self, index: int) -> None:
        """
        Closes a tab.

        Tabs left of the active one shift the active index down so the same
        document stays active. Closing the active tab activates its right
        neighbour, or the new last tab if it was the rightmost.
        """
        if not 0 <= index < len(self.sessions):
            return

        session = self.sessions.pop(index)
        session.close()
        logger.debug("Closed tab %d (%s)", index, session.display_name())

        if not self.sessions:
            self.active_index = None
            return
        if index < self.active_index:
            self.active_index -= 1
        if self.active_index >= len(self.sessions):
            self.active_index = len(self.sessions) - 1

    def close_all(self) -> None:
        for session in self.sessions:
            session.close()
        self.sessions.clear()
        self.active_index = None

    def select(self, index: int) -> None:
        if 0 <= index < len(self.sessions):
            self.active_index = index

    def set_page(self, page: int) -> bool:
        session = self.active
        if session is None:
            return False
        session.viewport.set_page(page)
        return True

    def next_page(self) -> bool:
        session = self.active
        return session is not None and session.viewport.next_page()

    def previous_page(self) -> bool:
        session = self.active
        return session is not None and session.viewport.previous_page()

    def zoom_in(self) -> bool:
        session = self.active
        if session is None:
            return False
        session.viewport.zoom_in()
        return True

    def zoom_out(self) -> bool:
        session = self.active
        if session is None:
            return False
        session.viewport.zoom_out()
        return True

    def set_zoom(self, zoom: float) -> bool:
        session = self.active
        if session is None:
            return False
        session.viewport.set_zoom(zoom)
        return True

    def reset_zoom(self) -> bool:
        session = self.active
        if session is None:
            return False
        session.viewport.reset_zoom()
        return True

    def pan(self, dx: float, dy: float) -> bool:
        session = self.active
        if session is None:
            return False
        session.viewport.pan(dx, dy)
        return True

    def rendered_page(self) -> Optional[PageImage]:
        session = self.active
        if session is None:
            return None
        return session.rendered_page()
