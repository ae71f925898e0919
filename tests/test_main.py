"""Tests for the command line interface."""

from unittest.mock import AsyncMock, patch
import pytest
from click.testing import CliRunner
from sitemap_renderer.errors import NoContentError, SitemapError
from sitemap_renderer.main import build_config, main
from sitemap_renderer.types import OutputFormat, RenderStatistics


SITEMAP_URL = "https://example.com/sitemap.xml"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def statistics(tmp_path):
    output = tmp_path / "docs.pdf"
    output.write_bytes(b"%PDF")
    return RenderStatistics(
        total_urls_found=2,
        pages_attempted=2,
        pages_rendered=2,
        output_path=str(output),
    )


def test_missing_arguments_is_usage_error(runner):
    """Test running without sitemap URL and output name fails with usage."""
    result = runner.invoke(main, [])

    assert result.exit_code == 2
    assert "Usage" in result.output


def test_invalid_format_is_rejected(runner):
    """Test only pdf, txt and md are accepted."""
    result = runner.invoke(main, [SITEMAP_URL, "docs", "docx"])

    assert result.exit_code == 2
    assert "docx" in result.output


def test_invalid_url_exits_with_error(runner):
    """Test configuration validation errors exit with status 1."""
    with patch("sitemap_renderer.main.run_renderer", new=AsyncMock()) as run:
        result = runner.invoke(main, ["not-a-url", "docs"])

    assert result.exit_code == 1
    run.assert_not_awaited()


def test_default_format_is_pdf(runner, statistics):
    """Test the format argument defaults to pdf."""
    with patch("sitemap_renderer.main.run_renderer", new=AsyncMock(return_value=statistics)) as run:
        result = runner.invoke(main, [SITEMAP_URL, "docs"])

    assert result.exit_code == 0, result.output
    config = run.await_args.args[0]
    assert config.output_format is OutputFormat.PDF
    assert config.output_name == "docs"
    assert "SITEMAP RENDER SUMMARY" in result.output


def test_options_are_applied(runner, statistics, tmp_path):
    """Test CLI options reach the render configuration."""
    with patch("sitemap_renderer.main.run_renderer", new=AsyncMock(return_value=statistics)) as run:
        result = runner.invoke(main, [
            SITEMAP_URL, "docs", "md",
            "--output-dir", str(tmp_path),
            "--timeout", "10000",
            "--wait-until", "load",
            "--delay", "0.25",
            "--limit", "5",
            "--include", "/docs/",
            "--exclude", "/old/",
            "--headed",
        ])

    assert result.exit_code == 0, result.output
    config = run.await_args.args[0]
    assert config.output_format is OutputFormat.MD
    assert config.output_dir == str(tmp_path)
    assert config.page_timeout == 10000
    assert config.wait_until == "load"
    assert config.crawl_delay == 0.25
    assert config.max_pages == 5
    assert config.include_patterns == ["/docs/"]
    assert config.exclude_patterns == ["/old/"]
    assert config.headless is False


@pytest.mark.parametrize("error", [SitemapError("HTTP 404"), NoContentError("nothing")])
def test_render_failures_exit_with_error(runner, error):
    """Test sitemap and empty-output failures exit with status 1."""
    with patch("sitemap_renderer.main.run_renderer", new=AsyncMock(side_effect=error)):
        result = runner.invoke(main, [SITEMAP_URL, "docs", "txt"])

    assert result.exit_code == 1


def test_keyboard_interrupt_exit_code(runner):
    """Test interruption exits with the SIGINT status."""
    with patch("sitemap_renderer.main.run_renderer", new=AsyncMock(side_effect=KeyboardInterrupt)):
        result = runner.invoke(main, [SITEMAP_URL, "docs"])

    assert result.exit_code == 130


def test_build_config_keeps_env_values_when_options_missing(monkeypatch):
    """Test unset options fall back to environment configuration."""
    monkeypatch.setenv("SITEMAP_RENDERER_OUTPUT_DIR", "from-env")

    config = build_config(SITEMAP_URL, "docs", "txt")

    assert config.output_dir == "from-env"
    assert config.output_format is OutputFormat.TXT
