"""
Models package for mdnotes

Contains data structures and type definitions for the export pipeline and
the document store.
"""

from .state import ExportState, pipeline
from .formats import ExportFormat
from .extraction import ExtractedDiagrams
from .records import Base, Collection, Document

__all__ = [
    "ExportState",
    "pipeline",
    "ExportFormat",
    "ExtractedDiagrams",
    "Base",
    "Collection",
    "Document",
]
