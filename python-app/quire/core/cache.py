"""
Bounded cache of rendered page images.

Entries are keyed by ``(page_index, zoom_bucket)`` where the bucket is the
zoom factor rounded to a whole percentage. Zoom factors that round to the
same percentage therefore share one slot and reuse the same image; this is
an accepted precision trade-off, not an accident.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .backend import PageBuffer, Renderer
from .constants import CACHE_CAPACITY, EvictionPolicy
from .errors import RenderFailed

logger = logging.getLogger(__name__)

CacheKey = Tuple[int, int]


def zoom_bucket(zoom: float) -> int:
    """Quantizes a zoom factor to an integer percentage."""
    return round(zoom * 100)


@dataclass(frozen=True)
class PageImage:
    """
    A rendered page handed out by the cache.

    The pixel bytes are immutable, so one instance can be shared between the
    cache and any number of views. Evicting the entry only drops the cache's
    reference; handles already given out keep working.
    """

    page_index: int
    zoom_bucket: int
    buffer: PageBuffer

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height


class RenderCache:
    """Maps (page, zoom bucket) to rendered images, holding at most ``capacity``."""

    def __init__(
        self,
        capacity: int = CACHE_CAPACITY,
        policy: EvictionPolicy = EvictionPolicy.FIFO,
    ) -> None:
        if capacity < 1:
            raise ValueError("cache capacity must be at least 1")
        self.capacity = capacity
        self.policy = policy
        self._store: "OrderedDict[CacheKey, PageImage]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def keys(self) -> List[CacheKey]:
        """Cached keys, next eviction candidate first."""
        return list(self._store)

    def lookup(self, page_index: int, zoom: float) -> Optional[PageImage]:
        key = (page_index, zoom_bucket(zoom))
        image = self._store.get(key)
        if image is None:
            return None
        if self.policy is EvictionPolicy.LRU:
            self._store.move_to_end(key, last=True)
        logger.debug("Cache hit for page %d at %d%%", key[0], key[1])
        return image

    def insert(self, page_index: int, zoom: float, buffer: PageBuffer) -> PageImage:
        """
        Stores a freshly rendered buffer and enforces the capacity bound.

        Args:
            page_index: Zero-based index of the rendered page.
            zoom: The zoom factor the buffer was rendered at.
            buffer: The renderer's output.

        Returns:
            The handle now held by the cache.
        """
        key = (page_index, zoom_bucket(zoom))
        image = PageImage(page_index, key[1], buffer)
        # Re-inserting an existing key makes it the youngest entry.
        self._store.pop(key, None)
        self._store[key] = image
        self._evict()
        return image

    def get_or_render(
        self, page_index: int, zoom: float, renderer: Renderer
    ) -> PageImage:
        """
        Returns the cached image for a page, rendering it on a miss.

        Raises:
            RenderFailed: The renderer raised; nothing is cached.
        """
        image = self.lookup(page_index, zoom)
        if image is not None:
            return image

        logger.debug("Cache miss for page %d at %d%%", page_index, zoom_bucket(zoom))
        try:
            buffer = renderer.render(page_index, zoom)
        except RenderFailed:
            raise
        except Exception as e:
            raise RenderFailed(page_index, zoom, str(e)) from e
        return self.insert(page_index, zoom, buffer)

    def invalidate_all(self) -> None:
        """Drops every entry, e.g. after the document changed on disk."""
        if self._store:
            logger.debug("Invalidating %d cached pages", len(self._store))
        self._store.clear()

    def _evict(self) -> None:
        while len(self._store) > self.capacity:
            (page_index, bucket), _ = self._store.popitem(last=False)
            logger.debug("Evicted page %d at %d%%", page_index, bucket)
