"""
End-to-end export tests

Tests the full pipeline: markdown source -> diagram extraction -> markdown-it
-> composed HTML document -> optional PDF.

The real-browser PDF tests run only when a Chromium-family browser is
installed on the test host.
"""

import asyncio
import io

import pytest

from mdnotes.config import appsettings
from mdnotes.lib.exporter import (
    html_export,
    htmlState_build,
    markdown_export,
    markdown_exportAsync,
    state_create,
)
from mdnotes.lib.pdf import PdfRenderer, pdf_available
from mdnotes.models import ExportFormat


SAMPLE = "# Title\n\nSome text.\n\n```mermaid\ngraph TD; A-->B;\n```\n"
PLAIN = "# Plain\n\nA paragraph.\n\n- one\n- two\n\n```python\nx = 1\n```\n"


class RecordingRenderer:
    """Stands in for PdfRenderer; remembers the document it was given"""

    def __init__(self):
        self.documents = []

    async def pdf_render(self, html_document):
        self.documents.append(html_document)
        return b"%PDF-recorded"


class TestHtmlExport:
    """Markdown to a complete HTML document"""

    def test_sample_document(self):
        """Title, diagram container and raw diagram source all present"""
        document = html_export(SAMPLE, verbosity=0)

        assert "<title>Title</title>" in document
        assert '<div class="mermaid">' in document
        assert "graph TD; A-->B;" in document
        assert appsettings.placeholder_prefix not in document
        assert "<p>Some text.</p>" in document

    def test_html_bytes_are_utf8_document(self):
        """Byte output is the UTF-8 encoding of the composed document"""
        output = markdown_export(SAMPLE, ExportFormat.HTML, verbosity=0)
        assert output == html_export(SAMPLE, verbosity=0).encode("utf-8")

    def test_empty_source(self):
        """Empty markdown still yields a complete document"""
        document = html_export("", verbosity=0)
        assert "<title>Document</title>" in document
        assert "<main" in document
        assert appsettings.placeholder_prefix not in document

    def test_default_title_without_heading(self):
        """Documents without a level-1 heading use the default title"""
        document = html_export("## Only a subheading\n\ntext\n", verbosity=0)
        assert f"<title>{appsettings.default_title}</title>" in document

    def test_unicode_content(self):
        """Non-ASCII text survives the round trip to bytes"""
        output = markdown_export("# Café ☕\n\nnaïve\n", ExportFormat.HTML, verbosity=0)
        text = output.decode("utf-8")
        assert "<title>Café ☕</title>" in text
        assert "naïve" in text

    def test_many_diagrams(self):
        """Eleven diagrams all restored, none left as placeholders"""
        source = "".join(f"```mermaid\ngraph N{i}\n```\n\n" for i in range(11))
        document = html_export(source, verbosity=0)

        assert document.count('<div class="mermaid">') == 11
        assert appsettings.placeholder_prefix not in document
        for i in range(11):
            assert f"graph N{i}\n" in document

    def test_code_and_diagram_together(self):
        """Highlighted code and diagrams coexist"""
        source = "```python\nx = 1\n```\n\n```mermaid\ngraph LR\n```\n"
        document = html_export(source, verbosity=0)
        assert 'class="highlight"' in document
        assert '<div class="mermaid">\ngraph LR\n</div>' in document

    def test_unterminated_diagram_dropped(self):
        """An unclosed diagram fence does not fail the export"""
        document = html_export("# T\n\nkept\n\n```mermaid\ngraph TD\n", verbosity=0)
        assert "kept" in document
        assert "graph TD" not in document

    def test_pipeline_state(self):
        """Each stage fills its fields on the state bus"""
        state = htmlState_build(state_create(SAMPLE, ExportFormat.HTML, verbosity=0))

        assert state.diagrams == ["graph TD; A-->B;"]
        assert appsettings.placeHolder_make(0) in state.processedSource
        assert state.tokens
        assert appsettings.placeHolder_make(0) in state.bodyHtml
        assert state.title == "Title"
        assert state.output == state.documentHtml.encode("utf-8")


class TestPdfDispatch:
    """PDF exports are rendered from the HTML export"""

    def test_pdf_uses_composed_html(self):
        """The renderer receives exactly the HTML export"""
        renderer = RecordingRenderer()
        output = markdown_export(SAMPLE, ExportFormat.PDF, renderer=renderer, verbosity=0)

        assert output == b"%PDF-recorded"
        assert renderer.documents == [html_export(SAMPLE, verbosity=0)]

    def test_async_export(self):
        """The async entry point dispatches both formats"""
        renderer = RecordingRenderer()
        html_bytes = asyncio.run(markdown_exportAsync(SAMPLE, ExportFormat.HTML, renderer, verbosity=0))
        pdf_bytes = asyncio.run(markdown_exportAsync(SAMPLE, ExportFormat.PDF, renderer, verbosity=0))

        assert html_bytes.startswith(b"<!DOCTYPE html>")
        assert pdf_bytes == b"%PDF-recorded"
        assert len(renderer.documents) == 1

    def test_concurrent_exports(self):
        """Concurrent exports keep their outputs separate"""
        sources = [f"# Doc {i}\n\nbody {i}\n" for i in range(4)]

        async def export_all():
            renderer = RecordingRenderer()
            results = await asyncio.gather(
                *(markdown_exportAsync(s, ExportFormat.HTML, renderer, verbosity=0) for s in sources)
            )
            return results

        results = asyncio.run(export_all())
        for i, output in enumerate(results):
            assert f"<title>Doc {i}</title>".encode() in output


@pytest.mark.skipif(not pdf_available(), reason="no Chromium-family browser installed")
class TestRealPdf:
    """Real headless-browser rendering"""

    def test_pdf_document(self, monkeypatch):
        """Output is an A4 PDF with at least one page"""
        monkeypatch.setattr(appsettings, "mermaid_enabled", False)
        pypdf = pytest.importorskip("pypdf")
        output = markdown_export(PLAIN, ExportFormat.PDF, PdfRenderer(settle_delay=0.5), verbosity=0)

        assert output.startswith(b"%PDF-")
        reader = pypdf.PdfReader(io.BytesIO(output))
        assert len(reader.pages) >= 1

        box = reader.pages[0].mediabox
        assert float(box.width) == pytest.approx(595.44, abs=1.0)
        assert float(box.height) == pytest.approx(841.68, abs=1.0)

    def test_repeat_exports_same_geometry(self, monkeypatch):
        """Exporting the same diagram-free document twice gives the same geometry"""
        monkeypatch.setattr(appsettings, "mermaid_enabled", False)
        pypdf = pytest.importorskip("pypdf")
        renderer = PdfRenderer(settle_delay=0.5)
        first = markdown_export(PLAIN, ExportFormat.PDF, renderer, verbosity=0)
        second = markdown_export(PLAIN, ExportFormat.PDF, renderer, verbosity=0)

        first_pages = pypdf.PdfReader(io.BytesIO(first)).pages
        second_pages = pypdf.PdfReader(io.BytesIO(second)).pages

        assert len(first_pages) == len(second_pages)
        for a, b in zip(first_pages, second_pages):
            assert float(a.mediabox.width) == pytest.approx(float(b.mediabox.width))
            assert float(a.mediabox.height) == pytest.approx(float(b.mediabox.height))
