"""
Export dispatcher: markdown -> HTML -> optional PDF

The markdown-to-HTML path is a functional pipeline over ExportState:

    diagrams_stage -> markdown_stage -> html_stage -> title_stage -> compose_stage

PDF exports run the full HTML path first and feed the composed document to
the PDF renderer; there is no direct markdown-to-PDF path, so a PDF shows
exactly what the HTML export would.
"""

import asyncio
from typing import Optional

from ..config import appsettings
from ..models.formats import ExportFormat
from ..models.state import ExportState, pipeline
from .compositor import Compositor
from .diagrams import diagrams_extract
from .errors import ExportError
from .log import LOG, state_connectToLogger
from .pdf import PdfRenderer
from .renderer import markdown_parse, html_generate
from .title import title_resolve


def diagrams_stage(inputstate: ExportState) -> ExportState:
    """
    Pull diagram fences out of the source.

    Returns:
        ExportState with added fields:
            - processedSource: markdown with placeholder lines
            - diagrams: raw diagram sources
    """
    state = inputstate.copy()
    extracted = diagrams_extract(state.source)
    state.processedSource = extracted.content
    state.diagrams = extracted.diagrams
    return state


def markdown_stage(inputstate: ExportState) -> ExportState:
    """
    Parse processed markdown into the token stream.

    Returns:
        ExportState with added field:
            - tokens: markdown-it token stream

    Raises:
        ParseFailure: If the markdown cannot be parsed
    """
    state = inputstate.copy()
    state.tokens = markdown_parse(state.processedSource)
    return state


def html_stage(inputstate: ExportState) -> ExportState:
    """
    Render the token stream to an HTML fragment.

    Returns:
        ExportState with added field:
            - bodyHtml: rendered HTML fragment

    Raises:
        GenerationFailure: If the tokens cannot be rendered
    """
    state = inputstate.copy()
    state.bodyHtml = html_generate(state.tokens or [])
    return state


def title_stage(inputstate: ExportState) -> ExportState:
    """
    Resolve the document title from the original source.

    Returns:
        ExportState with added field:
            - title: first level-1 heading or the default title
    """
    state = inputstate.copy()
    state.title = title_resolve(state.source)
    LOG(f"Title: {state.title}", level=2)
    return state


def compose_stage(inputstate: ExportState) -> ExportState:
    """
    Compose the complete HTML document.

    Returns:
        ExportState with added fields:
            - documentHtml: composed HTML document
            - output: UTF-8 bytes of the document
    """
    state = inputstate.copy()
    state.documentHtml = Compositor().document_compose(state.title, state.bodyHtml, state.diagrams)
    state.output = state.documentHtml.encode("utf-8")
    return state


def state_create(source: str, export_format: ExportFormat, verbosity: Optional[int] = None) -> ExportState:
    """Initial pipeline state, connected to the logger"""
    state = ExportState(
        source=source,
        exportFormat=export_format,
        verbosity=appsettings.verbosity if verbosity is None else verbosity,
    )
    state_connectToLogger(state)
    return state


def htmlState_build(state: ExportState) -> ExportState:
    """Run the markdown-to-HTML pipeline"""
    return pipeline(
        state,
        diagrams_stage,
        markdown_stage,
        html_stage,
        title_stage,
        compose_stage,
    )


def html_export(source: str, verbosity: Optional[int] = None) -> str:
    """
    Export markdown to a composed HTML document string

    Args:
        source: Raw markdown text
        verbosity: Logging verbosity for this export

    Returns:
        Complete, self-contained HTML document
    """
    state = htmlState_build(state_create(source, ExportFormat.HTML, verbosity))
    return state.documentHtml


async def markdown_exportAsync(
    source: str,
    export_format: ExportFormat,
    renderer: Optional[PdfRenderer] = None,
    verbosity: Optional[int] = None,
) -> bytes:
    """
    Export markdown to the requested format

    Args:
        source: Raw markdown text
        export_format: Target format
        renderer: PDF renderer (a default one is created for PDF exports)
        verbosity: Logging verbosity for this export

    Returns:
        Exported bytes

    Raises:
        ParseFailure, GenerationFailure: HTML path failures
        RenderEngineUnavailable, RenderFailure: PDF path failures
    """
    state = state_create(source, export_format, verbosity)
    LOG(f"Exporting {len(source)} characters as {export_format.value}", level=1)

    state = htmlState_build(state)

    if export_format is ExportFormat.HTML:
        output = state.output or b""
    elif export_format is ExportFormat.PDF:
        renderer = renderer or PdfRenderer()
        output = await renderer.pdf_render(state.documentHtml)
    else:
        raise ExportError(f"No exporter for format: {export_format}")

    LOG(f"Export complete: {len(output)} bytes", level=1)
    return output


def markdown_export(
    source: str,
    export_format: ExportFormat,
    renderer: Optional[PdfRenderer] = None,
    verbosity: Optional[int] = None,
) -> bytes:
    """
    Synchronous export; runs an event loop only for PDF output

    Must not be called from inside a running event loop when exporting
    PDF; use markdown_exportAsync() there.
    """
    if export_format is ExportFormat.HTML:
        state = htmlState_build(state_create(source, export_format, verbosity))
        return state.output or b""
    return asyncio.run(markdown_exportAsync(source, export_format, renderer, verbosity))
