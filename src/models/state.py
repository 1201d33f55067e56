"""
Export state model and pipeline helper

Defines ExportState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from typing import Any, Optional, TypeVar, List, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .formats import ExportFormat


ES = TypeVar("ES", bound="ExportState")


@dataclass
class ExportState:
    """
    Central state container for the export pipeline (state bus pattern).

    This dataclass carries all export state through the functional pipeline,
    with each stage adding new fields as the export progresses.

    Pipeline stages and their state additions:
        - Initial: source, exportFormat, verbosity
        - diagrams_stage: processedSource, diagrams
        - markdown_stage: tokens
        - html_stage: bodyHtml
        - title_stage: title
        - compose_stage: documentHtml, output (HTML exports)
        - pdf_stage: output (PDF exports)

    Attributes:
        source: Raw markdown text as stored in the document
        exportFormat: Target ExportFormat
        verbosity: Logging verbosity level (1-3)
        processedSource: Markdown with diagram fences replaced by placeholders
        diagrams: Raw diagram sources, list index matches placeholder index
        tokens: markdown-it token stream (the document model)
        bodyHtml: HTML fragment rendered from the token stream
        title: Resolved document title
        documentHtml: Complete composed HTML document
        output: Final exported bytes
    """

    source: str = field(default="")
    exportFormat: Optional["ExportFormat"] = field(default=None)
    verbosity: int = field(default=1)

    processedSource: str = field(default="")
    diagrams: List[str] = field(default_factory=list)
    tokens: Optional[List[Any]] = field(default=None)  # List[markdown_it.token.Token] at runtime
    bodyHtml: str = field(default="")
    title: str = field(default="")
    documentHtml: str = field(default="")
    output: Optional[bytes] = field(default=None)

    def copy(self: ES) -> ES:
        """
        Creates a shallow copy of the ExportState instance.

        Returns:
            A new ExportState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ExportState, *stages: Callable[[ExportState], ExportState]
) -> ExportState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ExportState) -> ExportState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ExportState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ExportState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            diagrams_stage,
            markdown_stage,
            html_stage,
            title_stage,
            compose_stage,
        )

    This is equivalent to:
        compose_stage(title_stage(html_stage(markdown_stage(diagrams_stage(initial_state)))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
