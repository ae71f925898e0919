"""Tests for utility helpers."""

import time
from unittest.mock import AsyncMock
import pytest
from sitemap_renderer.utils import (
    RateLimiter,
    deduplicate_urls,
    format_duration,
    format_number,
    is_valid_url,
    retry_async,
)


def test_deduplicate_urls_preserves_order():
    """Test exact duplicates are dropped and first occurrence order kept."""
    urls = [
        "https://example.com/b",
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/a/",  # Distinct URL, not normalized away
    ]

    assert deduplicate_urls(urls) == [
        "https://example.com/b",
        "https://example.com/a",
        "https://example.com/a/",
    ]


def test_is_valid_url():
    assert is_valid_url("https://example.com/page") is True
    assert is_valid_url("http://example.com") is True
    assert is_valid_url("ftp://example.com") is False
    assert is_valid_url("invalid-url") is False


def test_formatting_helpers():
    assert format_duration(12.34) == "12.3s"
    assert format_duration(90) == "1.5m"
    assert format_duration(7200) == "2.0h"
    assert format_number(1234567) == "1,234,567"


@pytest.mark.asyncio
async def test_rate_limiting():
    """Test consecutive waits are spaced by the configured delay."""
    rate_limiter = RateLimiter(0.1)

    # First request should be immediate
    start_time = time.monotonic()
    await rate_limiter.wait()
    assert time.monotonic() - start_time < 0.05

    await rate_limiter.wait()
    assert time.monotonic() - start_time >= 0.09


@pytest.mark.asyncio
async def test_rate_limiter_without_delay():
    """Test a zero delay never sleeps."""
    rate_limiter = RateLimiter(0)

    start_time = time.monotonic()
    for _ in range(5):
        await rate_limiter.wait()

    assert time.monotonic() - start_time < 0.05


@pytest.mark.asyncio
async def test_retry_async_eventually_succeeds():
    """Test a flaky call is retried until it succeeds."""
    func = AsyncMock(side_effect=[ConnectionError("flaky"), "ok"])

    result = await retry_async(func, max_retries=2, delay=0.01, exceptions=(ConnectionError,))

    assert result == "ok"
    assert func.await_count == 2


@pytest.mark.asyncio
async def test_retry_async_reraises_last_error():
    """Test the last exception is raised once retries run out."""
    func = AsyncMock(side_effect=ConnectionError("down"))

    with pytest.raises(ConnectionError, match="down"):
        await retry_async(func, max_retries=1, delay=0.01, exceptions=(ConnectionError,))

    assert func.await_count == 2
