"""HTML cleanup and conversion helpers for text and Markdown output."""

import re
import html2text
from bs4 import BeautifulSoup
from .config import STRIP_TAGS

_BLANK_LINES_RE = re.compile(r"\n{3,}")


def clean_html(html: str) -> BeautifulSoup:
    """Parse HTML and drop elements that carry no readable content."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(STRIP_TAGS):
        tag.decompose()
    return soup


def _create_converter(base_url: str) -> html2text.HTML2Text:
    converter = html2text.HTML2Text(baseurl=base_url)
    converter.ignore_links = False
    converter.ignore_images = False
    converter.ignore_emphasis = False
    converter.body_width = 0  # Don't wrap lines
    converter.unicode_snob = True
    return converter


def normalize_text(text: str) -> str:
    """Strip trailing whitespace per line and collapse runs of blank lines."""
    lines = [line.rstrip() for line in text.splitlines()]
    text = "\n".join(lines).strip()
    return _BLANK_LINES_RE.sub("\n\n", text)


def html_to_markdown(html: str, base_url: str = "") -> str:
    """
    Convert rendered page HTML to Markdown.

    Relative links and images are resolved against ``base_url``.
    """
    soup = clean_html(html)
    body = soup.body or soup
    markdown = _create_converter(base_url).handle(str(body))
    return normalize_text(markdown)
