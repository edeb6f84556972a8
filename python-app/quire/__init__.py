"""
Quire: a tabbed document viewer.

The document core (viewport, render cache, sessions, tabs) lives in
``quire.core``; ``quire.app`` is the PySide6 application around it.
"""

__version__ = "0.1.0"
