"""
Persistent viewer settings.

Settings live in the platform's native store through ``QSettings``. Values
that are missing or malformed fall back to their defaults instead of raising.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from PySide6.QtCore import QSettings

from .constants import CACHE_CAPACITY, RECENT_FILES_LIMIT, EvictionPolicy

logger = logging.getLogger(__name__)

ORGANIZATION = "Quire"
APPLICATION = "Viewer"


@dataclass
class ViewerSettings:
    """User-tunable viewer options."""

    cache_capacity: int = CACHE_CAPACITY
    eviction: EvictionPolicy = EvictionPolicy.FIFO
    dark_mode: bool = True
    last_directory: str = ""
    recent_files: List[str] = field(default_factory=list)

    def remember_file(self, path: str) -> None:
        """
        Records an opened file.

        Moves the path to the front of the recent list and caps the list
        length.
        """
        if not path:
            return
        if path in self.recent_files:
            self.recent_files.remove(path)
        self.recent_files.insert(0, path)
        del self.recent_files[RECENT_FILES_LIMIT:]


def default_store() -> QSettings:
    return QSettings(ORGANIZATION, APPLICATION)


def load_settings(store: Optional[QSettings] = None) -> ViewerSettings:
    """
    Reads settings from a QSettings store.

    Args:
        store: The store to read. Defaults to the application's native store.

    Returns:
        The loaded settings.
    """
    store = store if store is not None else default_store()
    settings = ViewerSettings()

    try:
        capacity = int(store.value("cacheCapacity", CACHE_CAPACITY))
    except (TypeError, ValueError):
        capacity = CACHE_CAPACITY
    if capacity < 1:
        logger.warning("Ignoring invalid cache capacity %r", capacity)
        capacity = CACHE_CAPACITY
    settings.cache_capacity = capacity

    raw_policy = store.value("eviction", EvictionPolicy.FIFO.value, type=str)
    try:
        settings.eviction = EvictionPolicy(raw_policy)
    except ValueError:
        logger.warning("Ignoring unknown eviction policy %r", raw_policy)

    settings.dark_mode = store.value("darkMode", True, type=bool)
    settings.last_directory = store.value("lastDirectory", "", type=str)

    recent = store.value("recentFiles", [])
    if isinstance(recent, str):
        recent = [recent]
    settings.recent_files = [str(p) for p in (recent or [])][:RECENT_FILES_LIMIT]
    return settings


def save_settings(settings: ViewerSettings, store: Optional[QSettings] = None) -> None:
    """Writes settings to a QSettings store and flushes it."""
    store = store if store is not None else default_store()
    store.setValue("cacheCapacity", settings.cache_capacity)
    store.setValue("eviction", settings.eviction.value)
    store.setValue("darkMode", settings.dark_mode)
    store.setValue("lastDirectory", settings.last_directory)
    store.setValue("recentFiles", list(settings.recent_files))
    store.sync()
