"""
Error types for mdnotes

Every failure carries a message that can be shown to the user as-is.
Underlying library exceptions are chained with `raise ... from`.
"""


class ExportError(Exception):
    """Base class for failures of a single export call"""
    pass


class FormatUnsupported(ExportError):
    """Raised when an export-format token names no supported format"""
    pass


class ParseFailure(ExportError):
    """Raised when markdown cannot be parsed into the document model"""
    pass


class GenerationFailure(ExportError):
    """Raised when the document model cannot be rendered to HTML"""
    pass


class RenderError(ExportError):
    """Base class for PDF rendering failures"""
    pass


class RenderEngineUnavailable(RenderError):
    """Raised when no Chromium-family browser can be found on the host"""
    pass


class RenderFailure(RenderError):
    """
    Raised when the browser fails after it was located

    Attributes:
        stage: Render stage that failed (e.g., "launching browser")
    """

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"PDF rendering failed while {stage}: {message}")


class IOFailure(ExportError):
    """Raised when exported bytes cannot be written to the destination"""
    pass


class StoreError(Exception):
    """Base class for persistent store failures"""
    pass


class RecordNotFound(StoreError):
    """Raised when an update or child insert targets a missing record"""
    pass


class CommandError(Exception):
    """Raised by the command surface; str() is the user-facing message"""
    pass
