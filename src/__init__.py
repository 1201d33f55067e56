"""
mdnotes - Markdown notes with HTML and PDF export

Collections of markdown documents in a local store, exported to styled
HTML or to PDF through a headless browser.
"""

__version__ = "1.0.0"

from .lib import (
    Commands,
    Database,
    PdfRenderer,
    html_export,
    markdown_export,
    markdown_exportAsync,
    pdf_available,
    LOG,
    state_connectToLogger,
)
from .models import ExportFormat

__all__ = [
    "Commands",
    "Database",
    "PdfRenderer",
    "ExportFormat",
    "html_export",
    "markdown_export",
    "markdown_exportAsync",
    "pdf_available",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
