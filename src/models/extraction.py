"""
Diagram extraction data models

Type-safe structures for the diagram extractor's return values.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ExtractedDiagrams:
    """
    Result of pulling diagram fences out of raw markdown

    Returned by diagrams_extract() after replacing each closed diagram fence
    with a placeholder line.

    Attributes:
        content: Markdown with each diagram block replaced by a single
                 placeholder line (e.g., "MERMAID_PLACEHOLDER_0_END")
        diagrams: Raw diagram sources in source order, indexed to match
                  placeholders (MERMAID_PLACEHOLDER_0_END → diagrams[0])

    Example:
        Input: "# Title\\n```mermaid\\ngraph TD; A-->B;\\n```\\n"
        Result: ExtractedDiagrams(
            content="# Title\\nMERMAID_PLACEHOLDER_0_END\\n",
            diagrams=["graph TD; A-->B;"]
        )
    """
    content: str
    diagrams: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of extracted diagrams"""
        return len(self.diagrams)
