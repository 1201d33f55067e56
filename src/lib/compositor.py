"""
Compositor for exported HTML documents

Wraps a rendered HTML fragment in the document template: inlines the
stylesheet (light and dark variants), embeds the mermaid runtime, restores
diagram placeholders and substitutes the title and content.
"""

import re
from pathlib import Path
from typing import List, Optional

from ..config import appsettings
from .errors import GenerationFailure
from .log import LOG
from .renderer import highlightCSS_generate


TITLE_MARKER = "{{TITLE}}"
CONTENT_MARKER = "{{CONTENT}}"
STYLE_MARKER = "{{STYLE}}"
DIAGRAM_SCRIPT_MARKER = "{{DIAGRAM_SCRIPT}}"
MERMAID_URL_MARKER = "{{MERMAID_URL}}"


class Compositor:
    """
    Composes complete, self-contained HTML documents

    Responsibilities:
    - Load the document template and stylesheet from assets
    - Inline Pygments rules for both colour schemes
    - Embed the client-side diagram script when enabled
    - Restore diagram placeholders as diagram containers
    - Substitute title and body content
    """

    def __init__(self, assets_dir: Optional[str] = None, mermaid_enabled: Optional[bool] = None) -> None:
        """
        Initialize compositor

        Args:
            assets_dir: Directory containing html/ and css/ templates.
                        Defaults to the package assets/ dir
            mermaid_enabled: Embed the mermaid script. Defaults to
                             MDNOTES_MERMAID_ENABLED
        """
        if assets_dir:
            self.assets_dir = Path(assets_dir)
        else:
            self.assets_dir = Path(__file__).parent.parent / "assets"

        if mermaid_enabled is None:
            mermaid_enabled = appsettings.mermaid_enabled
        self.mermaid_enabled = mermaid_enabled

    def template_load(self, relpath: str) -> str:
        """
        Load a template file relative to the assets directory

        Raises:
            GenerationFailure: If the template is missing or unreadable
        """
        template_path = self.assets_dir / relpath
        try:
            return template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise GenerationFailure(f"Failed to load template {template_path}: {e}") from e

    def style_build(self) -> str:
        """
        Build the inline stylesheet

        Base CSS from assets/css/document.css, then Pygments rules for the
        light palette and, under a dark colour-scheme media query, for the
        dark palette.
        """
        base_css = self.template_load('css/document.css')
        light_css = highlightCSS_generate(appsettings.pygments_style_light)
        dark_css = highlightCSS_generate(appsettings.pygments_style_dark)

        return (
            f"{base_css}\n"
            f"{light_css}\n"
            f"@media (prefers-color-scheme: dark) {{\n{dark_css}\n}}\n"
        )

    def diagramScript_build(self) -> str:
        """Mermaid script reference and initializer, or empty when disabled"""
        if not self.mermaid_enabled:
            return ""
        snippet = self.template_load('html/mermaid.html')
        return snippet.replace(MERMAID_URL_MARKER, appsettings.mermaid_script_url)

    def shell_build(self) -> str:
        """
        Document template with static parts filled in

        Only {{TITLE}} and {{CONTENT}} remain for per-document substitution.
        """
        template = self.template_load('html/document.html')
        template = template.replace(STYLE_MARKER, self.style_build())
        template = template.replace(DIAGRAM_SCRIPT_MARKER, self.diagramScript_build())
        return template

    def diagrams_restore(self, body_html: str, diagrams: List[str]) -> str:
        """
        Replace diagram placeholders with diagram containers

        Placeholders are processed in ascending index order. A placeholder
        standing alone in a paragraph is replaced together with its <p>
        wrapper; any other occurrence is replaced in place.

        Args:
            body_html: Rendered HTML fragment containing placeholders
            diagrams: Raw diagram sources, list index = placeholder index

        Returns:
            HTML fragment with every extracted diagram restored
        """
        for index, diagram in enumerate(diagrams):
            placeholder = appsettings.placeHolder_make(index)
            container = f'<div class="mermaid">\n{diagram.strip()}\n</div>'

            wrapped = re.compile(r'<p>\s*' + re.escape(placeholder) + r'\s*</p>')
            body_html = wrapped.sub(lambda _match: container, body_html)
            body_html = body_html.replace(placeholder, container)

            LOG(f"Restored diagram {index}", level=3)

        return body_html

    def document_compose(self, title: str, body_html: str, diagrams: List[str]) -> str:
        """
        Compose the complete HTML document

        Order matters:
        1. Restore diagrams into the body
        2. Substitute {{TITLE}} (not escaped; the title comes from the
           user's own document)
        3. Substitute {{CONTENT}}

        Args:
            title: Resolved document title
            body_html: Rendered HTML fragment
            diagrams: Extracted diagram sources

        Returns:
            Complete HTML document string
        """
        body_html = self.diagrams_restore(body_html, diagrams)

        document = self.shell_build()
        document = document.replace(TITLE_MARKER, title)
        document = document.replace(CONTENT_MARKER, body_html)

        LOG(f"Composed document '{title}' ({len(document)} characters)", level=2)
        return document


def document_compose(title: str, body_html: str, diagrams: List[str]) -> str:
    """Compose a document with the default compositor"""
    return Compositor().document_compose(title, body_html, diagrams)
