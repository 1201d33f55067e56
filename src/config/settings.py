"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDNOTES_ prefix (e.g., MDNOTES_SETTLE_DELAY_SECONDS=2.5).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDNOTES_ prefix.

    Examples:
        MDNOTES_DATA_DIR=/srv/notes
        MDNOTES_BROWSER_EXECUTABLE=/usr/bin/chromium
        MDNOTES_MERMAID_ENABLED=false
    """

    model_config = SettingsConfigDict(
        env_prefix="MDNOTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Diagram extraction
    placeholder_prefix: str = Field(
        default="MERMAID_PLACEHOLDER_",
        description="Prefix for diagram placeholders (plain word characters so markdown leaves them alone)",
    )

    placeholder_suffix: str = Field(
        default="_END",
        description="Suffix for diagram placeholders (keeps index 1 from matching inside index 10)",
    )

    diagram_language: str = Field(
        default="mermaid",
        description="Fence language tag marking a diagram block",
    )

    # Template composition
    mermaid_enabled: bool = Field(
        default=True,
        description="Embed the client-side mermaid script in composed documents",
    )

    mermaid_script_url: str = Field(
        default="https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js",
        description="Remote mermaid bundle referenced by composed documents",
    )

    default_title: str = Field(
        default="Document",
        description="Title used when the markdown has no level-1 heading",
    )

    pygments_style_light: str = Field(
        default="default",
        description="Pygments style for code blocks under a light colour scheme",
    )

    pygments_style_dark: str = Field(
        default="monokai",
        description="Pygments style for code blocks under a dark colour scheme",
    )

    # Storage
    data_dir: Path = Field(
        default=Path.home() / ".local" / "share" / "mdnotes",
        description="Application data directory holding the database",
    )

    database_name: str = Field(
        default="markdown-ui.db",
        description="SQLite database file name inside data_dir",
    )

    # PDF rendering
    browser_executable: Optional[str] = Field(
        default=None,
        description="Explicit Chromium-family executable; searched on PATH when unset",
    )

    settle_delay_seconds: float = Field(
        default=1.0,
        description="Fixed wait after content injection so client-side diagrams can render",
    )

    viewport_width: int = Field(default=1280, description="Browser viewport width in pixels")
    viewport_height: int = Field(default=1024, description="Browser viewport height in pixels")

    page_width: str = Field(default="8.27in", description="PDF page width (A4)")
    page_height: str = Field(default="11.69in", description="PDF page height (A4)")
    page_margin: str = Field(default="0.5in", description="Uniform PDF page margin")

    # Output
    verbosity: int = Field(
        default=1,
        description="Default logging verbosity for export pipelines (1-3)",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate a placeholder string for the diagram at given index.

        Args:
            index: Zero-based index of the extracted diagram

        Returns:
            Placeholder string (e.g., "MERMAID_PLACEHOLDER_0_END")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            'MERMAID_PLACEHOLDER_0_END'
        """
        return f"{self.placeholder_prefix}{index}{self.placeholder_suffix}"

    def fenceOpen_get(self) -> str:
        """Opening fence line that starts a diagram block (e.g., ```mermaid)"""
        return f"```{self.diagram_language}"

    def databasePath_get(self) -> Path:
        """Full path of the SQLite database file"""
        return Path(self.data_dir) / self.database_name


# Singleton instance - import this in your code
appsettings = AppSettings()
