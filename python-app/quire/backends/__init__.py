"""
Rendering backends.

Concrete implementations of the document source and renderer interfaces.
"""

from .fitz_backend import FitzDocument, FitzDocumentSource

__all__ = ["FitzDocument", "FitzDocumentSource"]
