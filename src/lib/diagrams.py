"""
Diagram block extraction for markdown sources

Fenced diagram blocks (```mermaid ... ```) must reach the browser exactly as
written, but the markdown renderer would wrap them in <pre><code> and escape
them. Before parsing, each closed diagram fence is replaced with a single
placeholder line; the template compositor restores them afterwards.

Example:
    >>> extracted = diagrams_extract("# T\\n```mermaid\\ngraph TD; A-->B;\\n```\\n")
    >>> extracted.content
    '# T\\nMERMAID_PLACEHOLDER_0_END\\n'
    >>> extracted.diagrams
    ['graph TD; A-->B;']
"""

from typing import List

from ..config import appsettings
from ..models.extraction import ExtractedDiagrams
from .log import LOG


FENCE_CLOSE = "```"


def lines_split(source: str) -> List[str]:
    r"""
    Split markdown into lines on "\n" only

    A trailing "\r" is removed from each line (CRLF input). Other line
    separators (form feed, U+0085, U+2028, lone "\r") stay inside the
    line. The empty piece after a final newline is not a line.
    """
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def diagrams_extract(source: str) -> ExtractedDiagrams:
    """
    Replace diagram fences in markdown with numbered placeholder lines

    Single pass, top to bottom, no nesting. Lines outside a diagram fence
    are copied with a trailing newline. Lines inside are buffered; when the
    plain closing fence arrives the buffer is stored at the next index and
    one placeholder line is emitted in its place.

    An unterminated diagram fence is dropped: its lines never reach the
    output and no placeholder is emitted for it.

    Args:
        source: Raw markdown text

    Returns:
        ExtractedDiagrams with processed markdown and diagram sources
    """
    fence_open = appsettings.fenceOpen_get()

    output: List[str] = []
    diagrams: List[str] = []
    block: List[str] = []
    capturing = False

    for line in lines_split(source):
        stripped = line.strip()

        if not capturing:
            if stripped == fence_open:
                capturing = True
                block = []
                continue
            output.append(line + "\n")
            continue

        if stripped == FENCE_CLOSE:
            index = len(diagrams)
            diagrams.append("\n".join(block))
            output.append(appsettings.placeHolder_make(index) + "\n")
            LOG(f"Extracted diagram {index} ({len(block)} lines)", level=3)
            capturing = False
            block = []
        else:
            block.append(line)

    if capturing:
        LOG(f"Dropping unterminated diagram block ({len(block)} lines)", level=2)

    LOG(f"Extracted {len(diagrams)} diagram block(s)", level=2)
    return ExtractedDiagrams(content="".join(output), diagrams=diagrams)
