"""
Markdown parsing and HTML generation tests

Tests the markdown-it document model boundary: structure survives parsing,
fenced code is highlighted, and diagram placeholders pass through
unescaped so they can be matched exactly afterwards.
"""

import pytest

from mdnotes.config import appsettings
from mdnotes.lib.errors import GenerationFailure, ParseFailure
from mdnotes.lib.renderer import (
    codeblock_highlight,
    highlightCSS_generate,
    html_generate,
    markdown_parse,
)


def render(source: str) -> str:
    return html_generate(markdown_parse(source))


class TestDocumentModel:
    """Markdown constructs appear as tokens"""

    def test_heading_and_paragraph(self):
        """Headings and paragraphs open their own tokens"""
        types = [token.type for token in markdown_parse("# Title\n\nText\n")]
        assert "heading_open" in types
        assert "paragraph_open" in types

    def test_lists_tables_and_code(self):
        """Lists, tables and fences are parsed"""
        source = (
            "- a\n- b\n\n"
            "| x | y |\n|---|---|\n| 1 | 2 |\n\n"
            "```python\nx = 1\n```\n"
        )
        types = {token.type for token in markdown_parse(source)}
        assert "bullet_list_open" in types
        assert "table_open" in types
        assert "fence" in types

    def test_parse_failure_wrapped(self, monkeypatch):
        """Parser exceptions surface as ParseFailure"""
        from markdown_it import MarkdownIt

        def broken_parse(self, src, env=None):
            raise ValueError("boom")

        monkeypatch.setattr(MarkdownIt, "parse", broken_parse)
        with pytest.raises(ParseFailure, match="Failed to parse markdown: boom"):
            markdown_parse("text")

    def test_generation_failure_wrapped(self):
        """Renderer exceptions surface as GenerationFailure"""
        with pytest.raises(GenerationFailure, match="Failed to generate HTML"):
            html_generate([object()])  # type: ignore[list-item]


class TestHtmlGeneration:
    """Token stream renders to HTML fragments"""

    def test_basic_markup(self):
        """Headings, emphasis and lists render"""
        html = render("# Title\n\nSome *emphasis* here.\n\n1. one\n2. two\n")
        assert "<h1>Title</h1>" in html
        assert "<em>emphasis</em>" in html
        assert "<ol>" in html

    def test_table(self):
        """Pipe tables render as <table>"""
        html = render("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_strikethrough(self):
        """~~text~~ renders as <s>"""
        assert "<s>gone</s>" in render("~~gone~~\n")

    def test_task_list(self):
        """Task list items render checkboxes"""
        html = render("- [x] done\n- [ ] todo\n")
        assert 'type="checkbox"' in html

    def test_code_fence_highlighted(self):
        """Fenced code goes through Pygments"""
        html = render("```python\ndef foo():\n    pass\n```\n")
        assert 'class="highlight"' in html
        assert "language-python" in html
        assert "foo" in html

    def test_unknown_language_plain(self):
        """Unknown fence languages fall back to plain text"""
        html = codeblock_highlight("a < b\n", "nosuchlanguage")
        assert 'class="highlight"' in html
        assert "a &lt; b" in html

    def test_fence_without_language(self):
        """Fences without info string are escaped plain text"""
        html = codeblock_highlight("<tag>\n", "")
        assert "&lt;tag&gt;" in html
        assert "language-" not in html


class TestPlaceholderPassthrough:
    """Diagram placeholders survive parsing and rendering unchanged"""

    @pytest.mark.parametrize("index", [0, 7, 12, 105])
    def test_placeholder_line(self, index):
        """A placeholder line renders verbatim inside a paragraph"""
        placeholder = appsettings.placeHolder_make(index)
        html = render(f"Intro\n\n{placeholder}\n\nOutro\n")
        assert f"<p>{placeholder}</p>" in html

    def test_placeholder_inside_paragraph(self):
        """A placeholder joined to a paragraph is still an exact substring"""
        placeholder = appsettings.placeHolder_make(3)
        html = render(f"Some text\n{placeholder}\n")
        assert placeholder in html


class TestHighlightCss:
    """Pygments style rules for the inline stylesheet"""

    def test_known_style(self):
        """Rules are scoped to the highlight class"""
        css = highlightCSS_generate("monokai")
        assert ".highlight" in css

    def test_unknown_style_falls_back(self):
        """Unknown styles produce default rules instead of failing"""
        css = highlightCSS_generate("no-such-style")
        assert ".highlight" in css
