"""
Application Constants and Enumerations.

This module defines shared constant values and Enum classes used throughout
the application, specifically for zoom limits and the page image cache.
"""

from enum import Enum

MIN_ZOOM: float = 0.25
MAX_ZOOM: float = 4.0
ZOOM_STEP: float = 0.25
DEFAULT_ZOOM: float = 1.0

CACHE_CAPACITY: int = 10
RECENT_FILES_LIMIT: int = 10

UNTITLED: str = "Untitled"


class EvictionPolicy(Enum):
    """
    Defines which entry the render cache drops under capacity pressure.

    Attributes:
        FIFO ("fifo"): The longest-resident entry goes first, regardless of
                       how recently it was read.
        LRU ("lru"): A cache hit refreshes the entry, so the least recently
                     used entry goes first.
    """

    FIFO = "fifo"
    LRU = "lru"


class PixelFormat(Enum):
    """
    Layout of the raw bytes in a rendered page buffer.

    Attributes:
        RGB888: Three bytes per pixel, no alpha channel.
        RGBA8888: Four bytes per pixel, straight alpha.
    """

    RGB888 = 3
    RGBA8888 = 4

    @property
    def bytes_per_pixel(self) -> int:
        return self.value
