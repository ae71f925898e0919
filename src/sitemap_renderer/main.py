"""Main CLI entry point for the sitemap renderer."""

import asyncio
import logging
import sys
from typing import Optional, Tuple
import click
from .config import WAIT_UNTIL_EVENTS, get_config_from_env, validate_config
from .crawler import run_renderer
from .errors import SitemapRendererError
from .types import OutputFormat, RenderConfig, RenderStatistics
from .utils import format_duration, format_number, get_file_size_mb, setup_logging

FORMAT_CHOICES = [fmt.value for fmt in OutputFormat]


def build_config(
    sitemap_url: str,
    output_name: str,
    output_format: str,
    output_dir: Optional[str] = None,
    timeout: Optional[int] = None,
    request_timeout: Optional[int] = None,
    wait_until: Optional[str] = None,
    delay: Optional[float] = None,
    limit: Optional[int] = None,
    include: Tuple[str, ...] = (),
    exclude: Tuple[str, ...] = (),
    headed: bool = False,
    user_agent: Optional[str] = None,
) -> RenderConfig:
    """Layer command line options over the environment configuration."""
    config = get_config_from_env(sitemap_url, output_name, OutputFormat(output_format))

    if output_dir is not None:
        config.output_dir = output_dir
    if timeout is not None:
        config.page_timeout = timeout
    if request_timeout is not None:
        config.request_timeout = request_timeout
    if wait_until is not None:
        config.wait_until = wait_until
    if delay is not None:
        config.crawl_delay = delay
    if limit is not None:
        config.max_pages = limit
    if include:
        config.include_patterns = list(include)
    if exclude:
        config.exclude_patterns = list(exclude)
    if headed:
        config.headless = False
    if user_agent:
        config.user_agent = user_agent

    return config


@click.command()
@click.argument('sitemap_url')
@click.argument('output_name')
@click.argument(
    'output_format',
    metavar='[FORMAT]',
    required=False,
    default=OutputFormat.PDF.value,
    type=click.Choice(FORMAT_CHOICES)
)
@click.option(
    '--output-dir',
    help='Directory for the output file  [default: output]',
    type=click.Path(file_okay=False)
)
@click.option(
    '--timeout',
    type=int,
    help='Page load timeout in milliseconds  [default: 30000]'
)
@click.option(
    '--request-timeout',
    type=int,
    help='Sitemap download timeout in seconds  [default: 30]'
)
@click.option(
    '--wait-until',
    type=click.Choice(WAIT_UNTIL_EVENTS),
    help='Browser event that marks a page as loaded  [default: networkidle]'
)
@click.option(
    '--delay',
    type=float,
    help='Delay between pages in seconds  [default: 0]'
)
@click.option(
    '--limit',
    type=int,
    help='Maximum number of pages to render (0 = no limit)'
)
@click.option(
    '--include',
    multiple=True,
    help='Only render URLs containing this substring (repeatable)'
)
@click.option(
    '--exclude',
    multiple=True,
    help='Skip URLs containing this substring (repeatable)'
)
@click.option(
    '--headed',
    is_flag=True,
    help='Show the browser window instead of running headless'
)
@click.option(
    '--user-agent',
    help='User agent for sitemap requests and the browser'
)
@click.option(
    '--log-level',
    default='INFO',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
    help='Logging level',
    show_default=True
)
@click.option(
    '--log-file',
    help='Log file path (optional)',
    type=click.Path(dir_okay=False)
)
def main(
    sitemap_url: str,
    output_name: str,
    output_format: str,
    output_dir: Optional[str],
    timeout: Optional[int],
    request_timeout: Optional[int],
    wait_until: Optional[str],
    delay: Optional[float],
    limit: Optional[int],
    include: Tuple[str, ...],
    exclude: Tuple[str, ...],
    headed: bool,
    user_agent: Optional[str],
    log_level: str,
    log_file: Optional[str]
) -> None:
    """
    Render every page listed in SITEMAP_URL into one document.

    The document is written to OUTPUT_DIR/OUTPUT_NAME.FORMAT, where FORMAT is
    one of pdf, txt or md (default: pdf).
    """
    setup_logging(log_level, log_file)
    logger = logging.getLogger(__name__)

    try:
        config = build_config(
            sitemap_url,
            output_name,
            output_format,
            output_dir=output_dir,
            timeout=timeout,
            request_timeout=request_timeout,
            wait_until=wait_until,
            delay=delay,
            limit=limit,
            include=include,
            exclude=exclude,
            headed=headed,
            user_agent=user_agent
        )
        validate_config(config)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    print_config(config)

    try:
        logger.info("Starting sitemap rendering...")
        statistics = asyncio.run(run_renderer(config))
        print_final_summary(statistics)

    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        sys.exit(130)  # Standard exit code for SIGINT

    except SitemapRendererError as e:
        logger.error(f"Rendering failed: {e}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Fatal error: {e}")
        if log_level == 'DEBUG':
            import traceback
            traceback.print_exc()
        sys.exit(1)


def print_config(config: RenderConfig) -> None:
    """Print current configuration."""
    click.echo("\nConfiguration:")
    click.echo(f"  Sitemap URL: {config.sitemap_url}")
    click.echo(f"  Output file: {config.output_path}")
    click.echo(f"  Format: {config.output_format.value}")
    click.echo(f"  Page timeout: {config.page_timeout}ms (wait until {config.wait_until})")
    click.echo(f"  Delay between pages: {config.crawl_delay}s")
    if config.max_pages:
        click.echo(f"  Page limit: {config.max_pages}")
    if config.include_patterns:
        click.echo(f"  Include: {', '.join(config.include_patterns)}")
    if config.exclude_patterns:
        click.echo(f"  Exclude: {', '.join(config.exclude_patterns)}")
    click.echo(f"  Browser: {'headless' if config.headless else 'headed'}")
    click.echo()


def print_final_summary(statistics: RenderStatistics) -> None:
    """Print final summary of the render run."""
    click.echo("\n" + "=" * 70)
    click.echo("SITEMAP RENDER SUMMARY")
    click.echo("=" * 70)

    click.echo(f"Pages rendered: {format_number(statistics.pages_rendered)}"
               f"/{format_number(statistics.pages_attempted)}")

    if statistics.failed_urls:
        click.echo(f"Skipped pages ({len(statistics.failed_urls)}):")
        for url in statistics.failed_urls:
            click.echo(f"  • {url}")

    if statistics.start_time and statistics.end_time:
        click.echo(f"Total duration: {format_duration(statistics.duration_seconds)}")

    if statistics.output_path:
        size_mb = get_file_size_mb(statistics.output_path)
        click.echo(f"\nOutput: {statistics.output_path} ({size_mb:.2f} MB)")

    click.echo("=" * 70)


if __name__ == '__main__':
    main()
