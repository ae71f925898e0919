"""Sitemap fetching and parsing using aiohttp and lxml."""

import asyncio
import gzip
import logging
from typing import List, Optional, Set, Tuple
import aiohttp
from lxml import etree
from .config import DEFAULT_HEADERS, DEFAULT_USER_AGENT, MAX_SITEMAP_DEPTH
from .errors import SitemapError
from .utils import deduplicate_urls, format_number, is_valid_url, retry_async

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


def _local_name(element) -> Optional[str]:
    """Return tag name without namespace, or None for comments and PIs."""
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _child_locs(root, entry_name: str) -> List[str]:
    """Collect <loc> text of every <entry_name> child of root."""
    locs = []
    for entry in root:
        if _local_name(entry) != entry_name:
            continue
        for child in entry:
            if _local_name(child) == "loc":
                text = (child.text or "").strip()
                if text:
                    locs.append(text)
                break
    return locs


def parse_sitemap(xml_content: bytes) -> Tuple[List[str], List[str]]:
    """
    Parse sitemap XML.

    Args:
        xml_content: Raw sitemap document (urlset or sitemapindex)

    Returns:
        Tuple of (page_urls, child_sitemap_urls) in document order

    Raises:
        SitemapError: If the document is not valid sitemap XML
    """
    if xml_content[:2] == GZIP_MAGIC:
        try:
            xml_content = gzip.decompress(xml_content)
        except (OSError, EOFError) as e:
            raise SitemapError(f"Invalid gzip sitemap: {e}") from e

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        root = etree.fromstring(xml_content, parser=parser)
    except etree.XMLSyntaxError as e:
        raise SitemapError(f"Invalid sitemap XML: {e}") from e

    root_name = _local_name(root)
    if root_name == "urlset":
        return _child_locs(root, "url"), []
    if root_name == "sitemapindex":
        return [], _child_locs(root, "sitemap")

    raise SitemapError(f"Unexpected sitemap root element: <{root_name}>")


async def create_sitemap_session(
    timeout: int = 30,
    user_agent: str = DEFAULT_USER_AGENT
) -> aiohttp.ClientSession:
    """Create aiohttp session for sitemap downloads."""
    timeout_config = aiohttp.ClientTimeout(
        total=timeout,
        connect=10,
        sock_read=timeout
    )

    headers = DEFAULT_HEADERS.copy()
    if user_agent:
        headers["User-Agent"] = user_agent

    return aiohttp.ClientSession(
        timeout=timeout_config,
        headers=headers,
        raise_for_status=False  # Handle status codes manually
    )


class SitemapParser:
    """Downloads a sitemap and flattens it into an ordered list of page URLs."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        max_depth: int = MAX_SITEMAP_DEPTH,
        max_retries: int = 2
    ):
        self.session = session
        self.max_depth = max_depth
        self.max_retries = max_retries

    async def fetch_sitemap(self, url: str) -> bytes:
        """
        Download a sitemap document.

        Raises:
            SitemapError: On network failure after retries or a non-200 status
        """
        try:
            status, content = await retry_async(
                lambda: self._make_request(url),
                max_retries=self.max_retries,
                delay=1.0,
                exceptions=(aiohttp.ClientError, asyncio.TimeoutError)
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SitemapError(f"Failed to fetch sitemap {url}: {e}") from e

        if status != 200:
            raise SitemapError(f"Failed to fetch sitemap {url}: HTTP {status}")

        return content

    async def _make_request(self, url: str) -> Tuple[int, bytes]:
        async with self.session.get(url, allow_redirects=True) as response:
            content = await response.read()
            return response.status, content

    async def get_urls(self, sitemap_url: str) -> List[str]:
        """
        Resolve a sitemap (or sitemap index) to a flat list of page URLs.

        Failures on the root sitemap propagate; failures on nested
        sitemaps are logged and skipped.
        """
        visited: Set[str] = set()
        urls = await self._collect(sitemap_url, depth=0, visited=visited)
        urls = deduplicate_urls(urls)

        invalid = [url for url in urls if not is_valid_url(url)]
        if invalid:
            logger.warning(f"Ignoring {len(invalid)} non-HTTP sitemap entries, e.g. {invalid[0]}")
            urls = [url for url in urls if is_valid_url(url)]

        logger.info(f"Found {format_number(len(urls))} URLs in sitemap {sitemap_url}")
        return urls

    async def _collect(self, sitemap_url: str, depth: int, visited: Set[str]) -> List[str]:
        visited.add(sitemap_url)

        content = await self.fetch_sitemap(sitemap_url)
        page_urls, child_sitemaps = parse_sitemap(content)

        if child_sitemaps:
            logger.debug(f"Sitemap index {sitemap_url} lists {len(child_sitemaps)} sitemaps")

        for child_url in child_sitemaps:
            if child_url in visited:
                logger.debug(f"Skipping already visited sitemap: {child_url}")
                continue

            if depth + 1 > self.max_depth:
                logger.warning(f"Sitemap nesting too deep, skipping {child_url}")
                continue

            try:
                page_urls.extend(await self._collect(child_url, depth + 1, visited))
            except SitemapError as e:
                logger.warning(f"Skipping nested sitemap: {e}")

        return page_urls
