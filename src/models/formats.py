"""
Export format model

Closed set of output formats the export pipeline can produce.
"""

from enum import Enum

from ..lib.errors import FormatUnsupported


class ExportFormat(Enum):
    """
    Supported export formats

    Every dispatch site handles each member explicitly; adding a member
    means visiting each of them.
    """
    HTML = "html"
    PDF = "pdf"

    @classmethod
    def format_fromToken(cls, token: str) -> "ExportFormat":
        """
        Parse a format from a case-insensitive token

        Args:
            token: Format name as supplied by the caller (e.g., "PDF", "html")

        Returns:
            Matching ExportFormat member

        Raises:
            FormatUnsupported: If the token names no supported format

        Example:
            >>> ExportFormat.format_fromToken("Html")
            <ExportFormat.HTML: 'html'>
        """
        normalized = token.lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise FormatUnsupported(
            f"Unsupported format: {token}. Supported: {cls.supported_describe()}"
        )

    @classmethod
    def supported_describe(cls) -> str:
        """Comma-separated list of supported format tokens"""
        return ", ".join(member.value for member in cls)

    @property
    def extension(self) -> str:
        """File extension for this format (informational only)"""
        return self.value
