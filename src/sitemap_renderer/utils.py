"""Utility functions for the sitemap renderer."""

import asyncio
import logging
import os
from typing import Any, Awaitable, Callable, List, Optional, Set
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def is_valid_url(url: str) -> bool:
    """Check if URL is valid and uses HTTP/HTTPS scheme."""
    try:
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)
    except ValueError:
        return False


def deduplicate_urls(urls: List[str]) -> List[str]:
    """Remove duplicate URLs while preserving first-seen order."""
    seen: Set[str] = set()
    result = []

    for url in urls:
        if url not in seen:
            seen.add(url)
            result.append(url)

    return result


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Set up logging configuration."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("playwright").setLevel(logging.WARNING)
    logging.getLogger("pypdf").setLevel(logging.ERROR)


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human-readable string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"


def format_number(number: int) -> str:
    """Format number with thousands separators."""
    return f"{number:,}"


class RateLimiter:
    """Simple rate limiter for spacing out page loads."""

    def __init__(self, delay: float):
        self.delay = delay
        self.last_request_time: Optional[float] = None

    async def wait(self) -> None:
        """Wait if necessary to respect rate limit."""
        loop = asyncio.get_running_loop()

        if self.last_request_time is not None and self.delay > 0:
            time_since_last = loop.time() - self.last_request_time
            if time_since_last < self.delay:
                await asyncio.sleep(self.delay - time_since_last)

        self.last_request_time = loop.time()


def create_directory_if_not_exists(directory: str) -> None:
    """Create directory if it doesn't exist."""
    if directory:
        os.makedirs(directory, exist_ok=True)


def get_file_size_mb(file_path: str) -> float:
    """Get file size in megabytes."""
    try:
        size_bytes = os.path.getsize(file_path)
        return size_bytes / (1024 * 1024)
    except OSError:
        return 0.0


async def retry_async(
    func: Callable[[], Awaitable[Any]],
    max_retries: int = 3,
    delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple = (Exception,)
) -> Any:
    """Retry an async function with exponential backoff."""
    last_exception = None

    for attempt in range(max_retries + 1):
        try:
            return await func()
        except exceptions as e:
            last_exception = e
            if attempt == max_retries:
                break

            wait_time = delay * (backoff_factor ** attempt)
            logger.debug(f"Attempt {attempt + 1} failed, retrying in {wait_time:.1f}s: {e}")
            await asyncio.sleep(wait_time)

    raise last_exception
