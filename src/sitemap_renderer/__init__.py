"""
Sitemap Renderer

Turns a website's sitemap into one consolidated document by visiting every
listed URL in a headless browser.

Key Features:
- Fetches sitemap.xml (and nested sitemap indexes) with aiohttp and lxml
- Renders each page with a single reusable Playwright Chromium page
- Writes merged PDF (with per-URL bookmarks), plain text or Markdown
- Include/exclude URL filters, page limit and polite delay between pages
- Failed pages are logged and skipped without aborting the run
"""

__version__ = "1.0.0"

from .types import OutputFormat, RenderConfig, PageResult, RenderStatistics
from .errors import SitemapRendererError, SitemapError, RenderError, NoContentError
from .crawler import SitemapRenderer, run_renderer
from .config import get_config_from_env

__all__ = [
    "OutputFormat",
    "RenderConfig",
    "PageResult",
    "RenderStatistics",
    "SitemapRendererError",
    "SitemapError",
    "RenderError",
    "NoContentError",
    "SitemapRenderer",
    "run_renderer",
    "get_config_from_env"
]
