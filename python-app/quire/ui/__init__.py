"""
UI Package Initialization.

Qt widgets and background workers that sit on top of the document core.
"""

from .widgets import PageView
from .workers import DocumentLoader, PageRenderer

__all__ = ["DocumentLoader", "PageRenderer", "PageView"]
