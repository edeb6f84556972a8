"""
Core Package.

The document core: viewport state, the page image cache, document sessions,
the tab manager and the backend interfaces they depend on. Nothing here
touches widgets.
"""

from .backend import Document, DocumentSource, PageBuffer, Renderer
from .cache import PageImage, RenderCache, zoom_bucket
from .constants import EvictionPolicy, PixelFormat
from .errors import OpenFailed, QuireError, RenderFailed
from .session import DocumentSession
from .tabs import TabManager
from .viewport import Viewport

__all__ = [
    "Document",
    "DocumentSession",
    "DocumentSource",
    "EvictionPolicy",
    "OpenFailed",
    "PageBuffer",
    "PageImage",
    "PixelFormat",
    "QuireError",
    "RenderCache",
    "RenderFailed",
    "Renderer",
    "TabManager",
    "Viewport",
    "zoom_bucket",
]
