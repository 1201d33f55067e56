"""
Markdown document model and HTML generation

Two stages at the markdown-it-py library boundary:
1. markdown_parse(): markdown text -> token stream (the document model)
2. html_generate(): token stream -> HTML fragment

Fenced code blocks are syntax-highlighted with Pygments using CSS classes,
so the composed document can switch palettes with the viewer's colour
scheme. Diagram placeholders are plain text and pass through both stages
untouched.
"""

import html
from typing import Any, Dict, List, Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.util import ClassNotFound

from .errors import ParseFailure, GenerationFailure
from .log import LOG


HIGHLIGHT_CLASS = "highlight"


def codeblock_highlight(code: str, info: str) -> str:
    """
    Highlight a fenced code block with Pygments

    Args:
        code: Raw code inside the fence
        info: Fence info string (first word is the language)

    Returns:
        HTML for the block; unknown languages fall back to plain text
    """
    language = info.strip().split()[0] if info.strip() else ""

    lexer: Lexer
    try:
        lexer = get_lexer_by_name(language) if language else TextLexer()
    except ClassNotFound:
        LOG(f"No lexer for '{language}', using plain text", level=3)
        lexer = TextLexer()

    formatter = HtmlFormatter(cssclass=HIGHLIGHT_CLASS)
    highlighted = highlight(code, lexer, formatter)

    if language:
        return f'<div class="codeblock language-{html.escape(language)}">{highlighted}</div>\n'
    return f'<div class="codeblock">{highlighted}</div>\n'


def markdownParser_build() -> MarkdownIt:
    """
    Build a configured markdown-it instance

    CommonMark plus tables, strikethrough, task lists and footnotes. A
    fresh instance per export keeps calls free of shared mutable state.
    """
    md = (
        MarkdownIt("commonmark", {"html": True})
        .enable("table")
        .enable("strikethrough")
    )
    md.use(tasklists_plugin)
    md.use(footnote_plugin)

    def fence_rule(tokens: List[Token], idx: int, options: Any, env: Dict) -> str:
        token = tokens[idx]
        return codeblock_highlight(token.content, token.info)

    md.renderer.rules["fence"] = fence_rule
    return md


def markdown_parse(source: str, md: Optional[MarkdownIt] = None) -> List[Token]:
    """
    Parse markdown into the token stream document model

    Args:
        source: Markdown text (diagram fences already replaced)
        md: Parser instance; a new one is built when omitted

    Returns:
        Flat list of markdown-it tokens

    Raises:
        ParseFailure: If markdown-it cannot interpret the source
    """
    md = md or markdownParser_build()
    try:
        tokens = md.parse(source, {})
    except Exception as e:
        raise ParseFailure(f"Failed to parse markdown: {e}") from e
    LOG(f"Parsed {len(tokens)} tokens", level=2)
    return tokens


def html_generate(tokens: List[Token], md: Optional[MarkdownIt] = None) -> str:
    """
    Render the token stream to an HTML fragment

    Args:
        tokens: Token stream from markdown_parse()
        md: Parser instance whose renderer and options are used

    Returns:
        HTML fragment (no <html>/<body> wrapper)

    Raises:
        GenerationFailure: If the renderer cannot serialize the tokens
    """
    md = md or markdownParser_build()
    try:
        body = md.renderer.render(tokens, md.options, {})
    except Exception as e:
        raise GenerationFailure(f"Failed to generate HTML: {e}") from e
    LOG(f"Generated {len(body)} characters of HTML", level=2)
    return body


def highlightCSS_generate(style: str) -> str:
    """
    Pygments CSS rules for highlighted code blocks

    Args:
        style: Pygments style name (e.g., "default", "monokai")

    Returns:
        CSS text; unknown styles fall back to Pygments' default
    """
    selector = f".{HIGHLIGHT_CLASS}"
    try:
        formatter = HtmlFormatter(style=style)
    except ClassNotFound:
        LOG(f"Unknown Pygments style '{style}', using default", level=1)
        formatter = HtmlFormatter()
    return formatter.get_style_defs(selector)
