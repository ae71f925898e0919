"""Tests for HTML cleanup and Markdown conversion."""

from sitemap_renderer.converter import clean_html, html_to_markdown, normalize_text


SAMPLE_HTML = """
<html>
    <head>
        <title> Getting Started </title>
        <style>body { color: red; }</style>
    </head>
    <body>
        <script>console.log("tracking");</script>
        <h1>Welcome</h1>
        <p>Read the <a href="/docs/install">install guide</a> first.</p>
        <ul>
            <li>Fast</li>
            <li>Simple</li>
        </ul>
        <noscript>Enable JavaScript</noscript>
    </body>
</html>
"""


def test_clean_html_removes_non_content_tags():
    """Test scripts, styles and noscript blocks are dropped."""
    soup = clean_html(SAMPLE_HTML)

    assert soup.find("script") is None
    assert soup.find("style") is None
    assert soup.find("noscript") is None
    assert soup.find("h1").get_text() == "Welcome"


def test_html_to_markdown_structure():
    """Test headings, lists and links survive conversion."""
    markdown = html_to_markdown(SAMPLE_HTML, base_url="https://example.com/start")

    assert "# Welcome" in markdown
    assert "Fast" in markdown and "Simple" in markdown
    assert "console.log" not in markdown
    assert "Enable JavaScript" not in markdown


def test_html_to_markdown_resolves_relative_links():
    """Test relative hrefs are made absolute against the page URL."""
    markdown = html_to_markdown(SAMPLE_HTML, base_url="https://example.com/start")

    assert "[install guide](https://example.com/docs/install)" in markdown


def test_html_to_markdown_does_not_wrap_lines():
    """Test long paragraphs stay on one line."""
    long_text = " ".join(["word"] * 100)
    markdown = html_to_markdown(f"<p>{long_text}</p>")

    assert long_text in markdown


def test_normalize_text():
    """Test trailing whitespace and blank line runs are collapsed."""
    text = "  Title   \n\n\n\n\nBody line   \n\n\n"

    assert normalize_text(text) == "Title\n\nBody line"
