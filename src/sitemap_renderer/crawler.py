"""Pipeline orchestrator: sitemap -> headless browser -> single output document."""

import logging
import signal
import time
from datetime import datetime
from typing import List, Optional
import aiohttp
from tqdm import tqdm
from .config import matches_filters
from .errors import NoContentError, RenderError
from .renderer import PageRenderer
from .sitemap import SitemapParser, create_sitemap_session
from .types import PageResult, RenderConfig, RenderStatistics
from .utils import RateLimiter, format_duration, format_number
from .writers import OutputWriter, create_writer

logger = logging.getLogger(__name__)


class SitemapRenderer:
    """Crawls every URL of a sitemap in order and writes one consolidated document."""

    def __init__(self, config: RenderConfig):
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None
        self.sitemap_parser: Optional[SitemapParser] = None
        self.renderer: Optional[PageRenderer] = None
        self.writer: Optional[OutputWriter] = None
        self.rate_limiter = RateLimiter(config.crawl_delay)
        self.statistics = RenderStatistics()
        self._shutdown_requested = False
        self._previous_handlers = {}

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, finishing current page and writing output...")
            self._shutdown_requested = True

        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                self._previous_handlers[signum] = signal.signal(signum, signal_handler)
            except ValueError:
                # Not running in the main thread
                logger.debug("Signal handlers not installed outside main thread")
                return

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    async def initialize(self) -> None:
        """Initialize all pipeline components."""
        logger.info("Initializing renderer components...")

        self.session = await create_sitemap_session(
            timeout=self.config.request_timeout,
            user_agent=self.config.user_agent
        )
        self.sitemap_parser = SitemapParser(self.session)

        self.renderer = PageRenderer(
            timeout=self.config.page_timeout,
            wait_until=self.config.wait_until,
            headless=self.config.headless,
            user_agent=self.config.user_agent,
            pdf_format=self.config.pdf_format,
            print_background=self.config.print_background
        )

        self.writer = create_writer(self.config.output_format)
        self._setup_signal_handlers()

        logger.info("Renderer initialization completed")

    async def run(self) -> RenderStatistics:
        """
        Main render process.

        Returns:
            RenderStatistics with the output path and per-page counts

        Raises:
            SitemapError: If the sitemap cannot be fetched or parsed
            NoContentError: If no page could be rendered
        """
        self.statistics.start_time = datetime.now()

        try:
            urls = await self._load_urls()
            if not urls:
                raise NoContentError(f"No URLs to render from {self.config.sitemap_url}")

            await self.renderer.start()
            await self._render_loop(urls)

            if self.writer.is_empty:
                raise NoContentError("Nothing could be rendered from the sitemap URLs")

            output_path = self.writer.write(self.config.output_path)
            self.statistics.output_path = str(output_path)
            logger.info(f"{self.config.output_format.name} creation complete: {output_path}")

        finally:
            self.statistics.end_time = datetime.now()

        return self.statistics

    async def _load_urls(self) -> List[str]:
        """Fetch the sitemap and apply include/exclude filters and the page limit."""
        logger.info(f"Fetching sitemap: {self.config.sitemap_url}")
        urls = await self.sitemap_parser.get_urls(self.config.sitemap_url)
        self.statistics.total_urls_found = len(urls)

        selected = [
            url for url in urls
            if matches_filters(url, self.config.include_patterns, self.config.exclude_patterns)
        ]
        if self.config.max_pages > 0:
            selected = selected[:self.config.max_pages]

        self.statistics.filtered_urls = len(urls) - len(selected)
        if self.statistics.filtered_urls:
            logger.info(
                f"Selected {format_number(len(selected))} of "
                f"{format_number(len(urls))} URLs after filters"
            )

        return selected

    async def _render_loop(self, urls: List[str]) -> None:
        """Visit each URL sequentially with the shared browser page."""
        total = len(urls)

        with tqdm(total=total, desc=f"Rendering {self.config.output_format.value}", unit="page") as pbar:
            for index, url in enumerate(urls, 1):
                if self._shutdown_requested:
                    logger.info(f"Shutdown requested, stopping after {index - 1}/{total} pages")
                    break

                await self.rate_limiter.wait()
                logger.info(f"Processing {index}/{total}: {url}")

                result = await self._render_page(url, index)
                self._record_result(result)
                pbar.update(1)

    async def _render_page(self, url: str, index: int) -> PageResult:
        """Render a single URL; failures are captured on the result."""
        start_time = time.time()

        try:
            content, title, status_code = await self.renderer.render(
                url, self.config.output_format
            )
            return PageResult(
                url=url,
                index=index,
                content=content,
                title=title,
                status_code=status_code,
                render_time=time.time() - start_time
            )

        except RenderError as e:
            logger.warning(f"Skipping {url}: {e}")
            error = str(e)
        except Exception as e:
            logger.error(f"Unexpected error rendering {url}: {e}")
            error = str(e)

        return PageResult(
            url=url,
            index=index,
            status_code=self.renderer.last_status,
            error=error,
            render_time=time.time() - start_time
        )

    def _record_result(self, result: PageResult) -> None:
        self.statistics.pages_attempted += 1

        if result.ok and self.writer.add(result):
            self.statistics.pages_rendered += 1
            logger.debug(f"Rendered {result.url} in {result.render_time:.2f}s")
            return

        if not result.ok and not result.error:
            logger.warning(f"Skipping {result.url}: page produced no content")

        self.statistics.pages_failed += 1
        self.statistics.failed_urls.append(result.url)

    async def cleanup(self) -> None:
        """Clean up resources."""
        logger.info("Cleaning up renderer resources...")
        self._restore_signal_handlers()

        try:
            if self.renderer:
                await self.renderer.stop()
        except Exception as e:
            logger.error(f"Error closing browser: {e}")

        try:
            if self.session:
                await self.session.close()
        except Exception as e:
            logger.error(f"Error closing HTTP session: {e}")

    def print_statistics(self) -> None:
        """Print render statistics."""
        print("\n" + "=" * 60)
        print("RENDER STATISTICS")
        print("=" * 60)

        print(f"URLs in sitemap: {format_number(self.statistics.total_urls_found)}")
        print(f"URLs filtered out: {format_number(self.statistics.filtered_urls)}")
        print(f"Pages attempted: {format_number(self.statistics.pages_attempted)}")
        print(f"Pages rendered: {format_number(self.statistics.pages_rendered)}")
        print(f"Pages failed: {format_number(self.statistics.pages_failed)}")
        print(f"Success rate: {self.statistics.success_rate:.1f}%")

        if self.statistics.start_time and self.statistics.end_time:
            duration = format_duration(self.statistics.duration_seconds)
            print(f"\nRender duration: {duration}")

        print("=" * 60)


async def run_renderer(config: RenderConfig) -> RenderStatistics:
    """
    Run the complete sitemap render process.

    Args:
        config: Render configuration

    Returns:
        RenderStatistics with results
    """
    renderer = SitemapRenderer(config)

    try:
        await renderer.initialize()
        statistics = await renderer.run()
        renderer.print_statistics()
        return statistics

    finally:
        await renderer.cleanup()
