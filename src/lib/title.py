"""
Document title resolution from markdown source
"""

from ..config import appsettings
from .diagrams import lines_split


HEADING_PREFIX = "# "


def title_resolve(source: str) -> str:
    """
    Resolve a document title from the first level-1 heading

    Only the first line whose stripped form starts with "# " counts; "## "
    and deeper headings never match. Falls back to the configured default
    title ("Document").

    Args:
        source: Raw markdown text

    Returns:
        Heading text without the marker, stripped
    """
    for line in lines_split(source):
        stripped = line.strip()
        if stripped.startswith(HEADING_PREFIX):
            return stripped[len(HEADING_PREFIX):].strip()
    return appsettings.default_title
