"""Type definitions for the sitemap renderer."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


class OutputFormat(Enum):
    """Supported output document formats."""
    PDF = "pdf"
    TXT = "txt"
    MD = "md"

    @property
    def extension(self) -> str:
        return self.value


@dataclass
class RenderConfig:
    """Configuration for a single sitemap render run."""
    sitemap_url: str
    output_name: str
    output_format: OutputFormat = OutputFormat.PDF
    output_dir: str = "output"
    page_timeout: int = 30000  # milliseconds
    request_timeout: int = 30  # seconds
    wait_until: str = "networkidle"
    crawl_delay: float = 0.0
    max_pages: int = 0
    include_patterns: List[str] = field(default_factory=list)
    exclude_patterns: List[str] = field(default_factory=list)
    headless: bool = True
    user_agent: str = "Sitemap-Renderer/1.0"
    pdf_format: str = "A4"
    print_background: bool = True

    @property
    def output_path(self) -> Path:
        """Final document path: ``<output_dir>/<output_name>.<ext>``."""
        return Path(self.output_dir) / f"{self.output_name}.{self.output_format.extension}"


@dataclass
class PageResult:
    """Result of rendering a single sitemap URL."""
    url: str
    index: int
    content: Optional[Union[bytes, str]] = None
    title: Optional[str] = None
    status_code: int = 0
    error: Optional[str] = None
    render_time: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.content)


@dataclass
class RenderStatistics:
    """Statistics about a render run."""
    total_urls_found: int = 0
    filtered_urls: int = 0
    pages_attempted: int = 0
    pages_rendered: int = 0
    pages_failed: int = 0
    output_path: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    failed_urls: List[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Calculate run duration in seconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.pages_attempted == 0:
            return 0.0
        return (self.pages_rendered / self.pages_attempted) * 100
