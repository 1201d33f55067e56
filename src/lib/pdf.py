"""
PDF rendering through a headless Chromium-family browser

Each render launches its own browser through Playwright, injects the
composed HTML as page content, waits a fixed settling delay for client-side
diagram rendering, and prints an A4 PDF. The browser and the Playwright
driver (whose connection task drains the browser's event stream) are torn
down on every exit path.

Stages:
    idle -> launching browser -> creating page -> loading content
         -> settling -> printing -> closed

Usage:
    renderer = PdfRenderer()
    pdf_bytes = await renderer.pdf_render(html_document)

Limitations:
    The settling delay is a blind wait, not a "diagrams done" signal.
    Large or slow diagrams can still be cut off.
"""

import asyncio
import os
import shutil
import sys
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator, List, Optional

from playwright.async_api import async_playwright, Browser, Page
from playwright.sync_api import sync_playwright

from ..config import appsettings
from .errors import RenderError, RenderEngineUnavailable, RenderFailure
from .log import LOG


ENGINE_UNAVAILABLE_MESSAGE = (
    "No Chromium-family browser found. Install Google Chrome or Chromium "
    "(or run: python -m playwright install chromium), or set "
    "MDNOTES_BROWSER_EXECUTABLE to its path."
)

# Executable names searched on PATH, in order of preference
BROWSER_CANDIDATES: List[str] = [
    "google-chrome",
    "google-chrome-stable",
    "chromium",
    "chromium-browser",
    "chrome",
    "microsoft-edge",
    "brave-browser",
]

# Well-known install locations not usually on PATH
BROWSER_PATHS_DARWIN: List[str] = [
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
    "/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge",
]

BROWSER_PATHS_WINDOWS: List[str] = [
    r"C:\Program Files\Google\Chrome\Application\chrome.exe",
    r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
    r"C:\Program Files (x86)\Microsoft\Edge\Application\msedge.exe",
]

LAUNCH_ARGS: List[str] = [
    "--disable-gpu",
    "--no-first-run",
    "--no-default-browser-check",
    "--hide-scrollbars",
    "--mute-audio",
]


class RenderStage(Enum):
    """Render lifecycle stages, named for error messages"""
    IDLE = "idle"
    LAUNCHING = "launching browser"
    PAGE_CREATING = "creating page"
    CONTENT_LOADING = "loading content"
    SETTLING = "settling"
    PRINTING = "printing"
    CLOSED = "closed"


class RenderProgress:
    """
    Stage tracker for a single render call

    One instance per pdf_render() call, so concurrent renders on a shared
    PdfRenderer never report each other's stage.
    """

    def __init__(self) -> None:
        self.stage = RenderStage.IDLE

    def stage_enter(self, stage: RenderStage) -> None:
        """Record a stage transition"""
        self.stage = stage
        LOG(f"PDF render: {stage.value}", level=2)


def systemBrowser_find() -> Optional[str]:
    """
    Find a Chromium-family browser installed on the host

    Returns:
        Executable path, or None if none is installed
    """
    for name in BROWSER_CANDIDATES:
        found = shutil.which(name)
        if found:
            return found

    if sys.platform == "darwin":
        known = BROWSER_PATHS_DARWIN
    elif sys.platform.startswith("win"):
        known = BROWSER_PATHS_WINDOWS
    else:
        known = []

    for path in known:
        if os.path.exists(path):
            return path
    return None


def managedBrowser_find() -> Optional[str]:
    """
    Path to Playwright's own Chromium download, if installed

    Uses the sync API, so it must not be called from a running event loop;
    async code reads `playwright.chromium.executable_path` instead.
    """
    try:
        with sync_playwright() as playwright:
            path = playwright.chromium.executable_path
    except Exception as e:
        LOG(f"Playwright browser lookup failed: {e}", level=2)
        return None
    if path and os.path.exists(path):
        return path
    return None


def engine_locate(managed_path: Optional[str] = None) -> Optional[str]:
    """
    Locate a browser engine for PDF rendering

    Precedence: MDNOTES_BROWSER_EXECUTABLE > browser on the host >
    Playwright's managed Chromium.

    Args:
        managed_path: Playwright-managed executable path, when the caller
                      already has a Playwright instance

    Returns:
        Executable path, or None if no engine is available
    """
    configured = appsettings.browser_executable
    if configured:
        if os.path.exists(configured):
            return configured
        LOG(f"Configured browser not found: {configured}", level=1)

    found = systemBrowser_find()
    if found:
        return found

    if managed_path and os.path.exists(managed_path):
        return managed_path
    return None


def pdf_available() -> bool:
    """
    Pre-flight check: can a PDF export be attempted on this host?

    Backed by the same discovery the renderer uses before launching.
    """
    return bool(engine_locate() or managedBrowser_find())


class PdfRenderer:
    """
    Renders composed HTML documents to PDF bytes

    One fully isolated browser per render; nothing is pooled or reused,
    so concurrent renders are safe but each pays the launch cost.
    """

    def __init__(
        self,
        executable: Optional[str] = None,
        settle_delay: Optional[float] = None,
    ) -> None:
        """
        Initialize renderer

        Args:
            executable: Browser executable; located automatically when None
            settle_delay: Seconds to wait after content injection.
                          Defaults to MDNOTES_SETTLE_DELAY_SECONDS
        """
        self.executable = executable
        self.settle_delay = (
            appsettings.settle_delay_seconds if settle_delay is None else settle_delay
        )

    @asynccontextmanager
    async def browser_session(self, progress: RenderProgress) -> AsyncIterator[Browser]:
        """
        Scoped browser: Playwright driver and browser acquired together

        The browser is closed and the driver stopped on success, on
        failure at any stage, and on cancellation.

        Raises:
            RenderEngineUnavailable: If no browser engine can be located
        """
        progress.stage_enter(RenderStage.LAUNCHING)
        async with async_playwright() as playwright:
            executable = self.executable or engine_locate(playwright.chromium.executable_path)
            if not executable:
                raise RenderEngineUnavailable(ENGINE_UNAVAILABLE_MESSAGE)

            LOG(f"Launching {executable}", level=2)
            browser = await playwright.chromium.launch(
                executable_path=executable,
                headless=True,
                args=LAUNCH_ARGS,
            )
            try:
                yield browser
            finally:
                await browser.close()
                progress.stage_enter(RenderStage.CLOSED)

    def events_drain(self, page: Page) -> None:
        """Forward page console output and script errors to the log"""
        page.on("console", lambda message: LOG(f"console.{message.type}: {message.text}", level=3))
        page.on("pageerror", lambda error: LOG(f"Page script error: {error}", level=2))

    async def page_print(self, browser: Browser, html_document: str, progress: RenderProgress) -> bytes:
        """Page stages: create, inject content, settle, print"""
        progress.stage_enter(RenderStage.PAGE_CREATING)
        page = await browser.new_page(
            viewport={
                "width": appsettings.viewport_width,
                "height": appsettings.viewport_height,
            }
        )
        self.events_drain(page)

        progress.stage_enter(RenderStage.CONTENT_LOADING)
        await page.set_content(html_document)

        progress.stage_enter(RenderStage.SETTLING)
        await asyncio.sleep(self.settle_delay)

        progress.stage_enter(RenderStage.PRINTING)
        margin = appsettings.page_margin
        return await page.pdf(
            width=appsettings.page_width,
            height=appsettings.page_height,
            margin={"top": margin, "right": margin, "bottom": margin, "left": margin},
            print_background=True,
        )

    async def pdf_render(self, html_document: str, progress: Optional[RenderProgress] = None) -> bytes:
        """
        Render a composed HTML document to PDF

        Args:
            html_document: Complete HTML document string
            progress: Stage tracker for this call; a new one when omitted

        Returns:
            PDF bytes (A4, half-inch margins, backgrounds printed)

        Raises:
            RenderEngineUnavailable: No browser engine on the host
            RenderFailure: Any later stage failed; names the stage
        """
        progress = progress or RenderProgress()
        try:
            async with self.browser_session(progress) as browser:
                try:
                    pdf_bytes = await self.page_print(browser, html_document, progress)
                except Exception as e:
                    # Wrap before teardown moves the stage to "closed"
                    raise RenderFailure(progress.stage.value, str(e)) from e
        except RenderError:
            raise
        except Exception as e:
            raise RenderFailure(progress.stage.value, str(e)) from e

        LOG(f"Rendered PDF ({len(pdf_bytes)} bytes)", level=2)
        return pdf_bytes


