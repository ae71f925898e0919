"""Configuration and constants for the sitemap renderer."""

import os
from typing import Iterable, List, Optional
from .types import RenderConfig, OutputFormat

# Output configuration
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_OUTPUT_FORMAT = OutputFormat.PDF

# Timing configuration
DEFAULT_PAGE_TIMEOUT = 30000  # milliseconds, Playwright navigation
DEFAULT_REQUEST_TIMEOUT = 30  # seconds, sitemap download
DEFAULT_CRAWL_DELAY = 0.0  # seconds between pages
DEFAULT_MAX_PAGES = 0  # 0 = no limit

# Sitemap index recursion limit
MAX_SITEMAP_DEPTH = 3

# Browser navigation events accepted by page.goto()
WAIT_UNTIL_EVENTS = ("load", "domcontentloaded", "networkidle", "commit")
DEFAULT_WAIT_UNTIL = "networkidle"

# HTTP configuration
DEFAULT_USER_AGENT = "Sitemap-Renderer/1.0 (+https://github.com/sitemap-renderer)"
DEFAULT_HEADERS = {
    "Accept": "application/xml,text/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}

# Playwright configuration
PLAYWRIGHT_CONFIG = {
    "viewport": {"width": 1280, "height": 1024},
    "pdf_format": "A4",
    "print_background": True,
    "launch_args": [
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    ],
}

# Elements removed before HTML is converted to Markdown
STRIP_TAGS = ["script", "style", "noscript", "template", "svg", "canvas", "iframe"]

# Section separators for the concatenated outputs
TEXT_SEPARATOR = "=" * 80
MARKDOWN_SEPARATOR = "---"


def _parse_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def get_config_from_env(
    sitemap_url: str,
    output_name: str,
    output_format: OutputFormat = DEFAULT_OUTPUT_FORMAT,
) -> RenderConfig:
    """Create configuration from environment variables with defaults."""
    return RenderConfig(
        sitemap_url=sitemap_url,
        output_name=output_name,
        output_format=output_format,
        output_dir=os.getenv("SITEMAP_RENDERER_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
        page_timeout=int(os.getenv("SITEMAP_RENDERER_TIMEOUT", DEFAULT_PAGE_TIMEOUT)),
        request_timeout=int(
            os.getenv("SITEMAP_RENDERER_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
        ),
        wait_until=os.getenv("SITEMAP_RENDERER_WAIT_UNTIL", DEFAULT_WAIT_UNTIL),
        crawl_delay=float(os.getenv("SITEMAP_RENDERER_CRAWL_DELAY", DEFAULT_CRAWL_DELAY)),
        max_pages=int(os.getenv("SITEMAP_RENDERER_MAX_PAGES", DEFAULT_MAX_PAGES)),
        include_patterns=_parse_csv(os.getenv("SITEMAP_RENDERER_INCLUDE")),
        exclude_patterns=_parse_csv(os.getenv("SITEMAP_RENDERER_EXCLUDE")),
        headless=os.getenv("SITEMAP_RENDERER_HEADLESS", "true").lower() == "true",
        user_agent=os.getenv("SITEMAP_RENDERER_USER_AGENT", DEFAULT_USER_AGENT),
        pdf_format=PLAYWRIGHT_CONFIG["pdf_format"],
        print_background=PLAYWRIGHT_CONFIG["print_background"],
    )


def validate_config(config: RenderConfig) -> None:
    """Validate configuration parameters."""
    if not config.sitemap_url.startswith(("http://", "https://")):
        raise ValueError(f"Invalid sitemap URL: {config.sitemap_url}")

    if not config.output_name or not config.output_name.strip():
        raise ValueError("Output name must not be empty")

    if "/" in config.output_name or "\\" in config.output_name:
        raise ValueError(f"Output name must not contain path separators: {config.output_name}")

    if config.page_timeout < 1:
        raise ValueError("Page timeout must be at least 1 millisecond")

    if config.request_timeout < 1:
        raise ValueError("Request timeout must be at least 1 second")

    if config.crawl_delay < 0:
        raise ValueError("Crawl delay cannot be negative")

    if config.max_pages < 0:
        raise ValueError("Page limit cannot be negative")

    if config.wait_until not in WAIT_UNTIL_EVENTS:
        raise ValueError(
            f"Invalid wait event '{config.wait_until}', "
            f"expected one of: {', '.join(WAIT_UNTIL_EVENTS)}"
        )


def matches_filters(
    url: str,
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> bool:
    """Check URL against include/exclude substring filters."""
    include = list(include)
    if include and not any(pattern in url for pattern in include):
        return False
    return not any(pattern in url for pattern in exclude)
