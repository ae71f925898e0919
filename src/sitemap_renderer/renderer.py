"""Headless browser page renderer using Playwright."""

import logging
from typing import Optional, Tuple, Union
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)
from .config import (
    DEFAULT_PAGE_TIMEOUT,
    DEFAULT_USER_AGENT,
    DEFAULT_WAIT_UNTIL,
    PLAYWRIGHT_CONFIG,
)
from .converter import html_to_markdown, normalize_text
from .errors import RenderError
from .types import OutputFormat

logger = logging.getLogger(__name__)


class PageRenderer:
    """
    Renders sitemap pages with a single reusable Chromium page.

    The browser, context and page are created once by ``start()`` and
    shared by every URL; pages are visited strictly one after another.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_PAGE_TIMEOUT,
        wait_until: str = DEFAULT_WAIT_UNTIL,
        headless: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        pdf_format: str = PLAYWRIGHT_CONFIG["pdf_format"],
        print_background: bool = PLAYWRIGHT_CONFIG["print_background"],
    ):
        self.timeout = timeout
        self.wait_until = wait_until
        self.headless = headless
        self.user_agent = user_agent
        self.pdf_format = pdf_format
        self.print_background = print_background

        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.last_status: int = 0

    async def start(self) -> None:
        """Launch Chromium and open the shared page."""
        if self.page:
            return

        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                args=PLAYWRIGHT_CONFIG["launch_args"]
            )
            self.context = await self.browser.new_context(
                user_agent=self.user_agent,
                viewport=PLAYWRIGHT_CONFIG["viewport"],
            )
            self.page = await self.context.new_page()
            logger.info("Playwright browser initialized")
        except Exception as e:
            logger.error(f"Failed to initialize Playwright: {e}")
            await self.stop()
            raise

    async def stop(self) -> None:
        """Close page, context, browser and Playwright in that order."""
        for name in ("page", "context", "browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                await resource.close()
            except PlaywrightError as e:
                logger.debug(f"Error closing {name}: {e}")
            setattr(self, name, None)

        if self.playwright:
            await self.playwright.stop()
            self.playwright = None
            logger.info("Playwright browser closed")

    async def navigate(self, url: str) -> int:
        """
        Load a URL in the shared page.

        Returns:
            HTTP status code of the main document

        Raises:
            RenderError: On timeout, navigation failure or HTTP status >= 400
        """
        if not self.page:
            await self.start()

        self.last_status = 0
        try:
            response = await self.page.goto(
                url,
                wait_until=self.wait_until,
                timeout=self.timeout
            )
        except PlaywrightTimeoutError as e:
            raise RenderError(f"Timeout loading {url}") from e
        except PlaywrightError as e:
            raise RenderError(f"Failed to load {url}: {e.message}") from e

        if response is None:
            raise RenderError(f"No response received for {url}")

        self.last_status = response.status
        if response.status >= 400:
            raise RenderError(f"HTTP {response.status} for {url}")

        return response.status

    async def _page_title(self) -> Optional[str]:
        try:
            title = await self.page.title()
        except PlaywrightError:
            return None
        return title.strip() or None

    async def render_pdf(self, url: str) -> bytes:
        """Navigate to URL and print it to PDF."""
        await self.navigate(url)
        try:
            return await self.page.pdf(
                format=self.pdf_format,
                print_background=self.print_background
            )
        except PlaywrightError as e:
            raise RenderError(f"Failed to print {url} to PDF: {e.message}") from e

    async def extract_text(self, url: str) -> str:
        """Navigate to URL and return the visible body text."""
        await self.navigate(url)
        try:
            text = await self.page.inner_text("body", timeout=self.timeout)
        except PlaywrightError as e:
            raise RenderError(f"Failed to extract text from {url}: {e.message}") from e
        return normalize_text(text)

    async def extract_markdown(self, url: str) -> str:
        """Navigate to URL and convert the rendered DOM to Markdown."""
        await self.navigate(url)
        try:
            html = await self.page.content()
        except PlaywrightError as e:
            raise RenderError(f"Failed to read content of {url}: {e.message}") from e
        return html_to_markdown(html, base_url=self.page.url or url)

    async def render(
        self,
        url: str,
        output_format: OutputFormat
    ) -> Tuple[Union[bytes, str], Optional[str], int]:
        """
        Render URL in the requested output format.

        Returns:
            Tuple of (content, page_title, status_code)
        """
        if output_format is OutputFormat.PDF:
            content = await self.render_pdf(url)
        elif output_format is OutputFormat.TXT:
            content = await self.extract_text(url)
        elif output_format is OutputFormat.MD:
            content = await self.extract_markdown(url)
        else:
            raise ValueError(f"Unsupported output format: {output_format}")

        title = await self._page_title()
        return content, title, self.last_status

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
