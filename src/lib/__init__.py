"""
mdnotes - Markdown notes with HTML and PDF export

Document store plus a markdown export pipeline.
"""

__version__ = "1.0.0"

from .diagrams import diagrams_extract
from .title import title_resolve
from .compositor import Compositor, document_compose
from .pdf import PdfRenderer, pdf_available
from .exporter import html_export, markdown_export, markdown_exportAsync
from .store import Database
from .commands import Commands
from .log import LOG, state_connectToLogger

__all__ = [
    "diagrams_extract",
    "title_resolve",
    "Compositor",
    "document_compose",
    "PdfRenderer",
    "pdf_available",
    "html_export",
    "markdown_export",
    "markdown_exportAsync",
    "Database",
    "Commands",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
