"""Output handlers that assemble rendered pages into a single document."""

import io
import logging
from pathlib import Path
from typing import List, Union
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from .config import MARKDOWN_SEPARATOR, TEXT_SEPARATOR
from .types import OutputFormat, PageResult
from .utils import create_directory_if_not_exists, format_number, get_file_size_mb

logger = logging.getLogger(__name__)


class OutputWriter:
    """Base class for accumulating page results and writing one output file."""

    output_format: OutputFormat

    def __init__(self):
        self.sources: List[str] = []

    @property
    def is_empty(self) -> bool:
        return not self.sources

    @property
    def page_count(self) -> int:
        """Number of source pages accepted so far."""
        return len(self.sources)

    def add(self, result: PageResult) -> bool:
        """
        Append a rendered page.

        Returns:
            True if the page was accepted, False if it was skipped
        """
        if not result.ok:
            return False
        if self._append(result):
            self.sources.append(result.url)
            return True
        return False

    def _append(self, result: PageResult) -> bool:
        raise NotImplementedError

    def _serialize(self) -> Union[bytes, str]:
        raise NotImplementedError

    def write(self, path: Union[str, Path]) -> Path:
        """Write accumulated content to path, creating parent directories."""
        path = Path(path)
        create_directory_if_not_exists(str(path.parent))

        data = self._serialize()
        if isinstance(data, bytes):
            path.write_bytes(data)
        else:
            path.write_text(data, encoding="utf-8")

        logger.info(
            f"Wrote {format_number(self.page_count)} pages to {path} "
            f"({get_file_size_mb(str(path)):.2f} MB)"
        )
        return path


class PdfOutputWriter(OutputWriter):
    """Merges per-page PDFs into one document with a bookmark per URL."""

    output_format = OutputFormat.PDF

    def __init__(self):
        super().__init__()
        self.writer = PdfWriter()

    @property
    def total_pdf_pages(self) -> int:
        return len(self.writer.pages)

    def _append(self, result: PageResult) -> bool:
        try:
            reader = PdfReader(io.BytesIO(result.content))
            pages = list(reader.pages)
        except (PdfReadError, ValueError, OSError) as e:
            logger.warning(f"Could not read PDF for {result.url}: {e}")
            return False

        if not pages:
            logger.warning(f"Rendered PDF for {result.url} has no pages")
            return False

        first_page = len(self.writer.pages)
        try:
            for page in pages:
                self.writer.add_page(page)
            self.writer.add_outline_item(result.title or result.url, first_page)
        except Exception as e:
            logger.warning(f"Could not merge PDF for {result.url}: {e}")
            return False

        return True

    def _serialize(self) -> bytes:
        buffer = io.BytesIO()
        self.writer.write(buffer)
        return buffer.getvalue()


class TextOutputWriter(OutputWriter):
    """Concatenates plain text of every page, separated by a rule line."""

    output_format = OutputFormat.TXT

    def __init__(self):
        super().__init__()
        self.sections: List[str] = []

    def _append(self, result: PageResult) -> bool:
        self.sections.append(f"URL: {result.url}\n\n{result.content.strip()}")
        return True

    def _serialize(self) -> str:
        return f"\n\n{TEXT_SEPARATOR}\n\n".join(self.sections) + "\n"


class MarkdownOutputWriter(OutputWriter):
    """Concatenates Markdown of every page under a heading per source URL."""

    output_format = OutputFormat.MD

    def __init__(self):
        super().__init__()
        self.sections: List[str] = []

    def _append(self, result: PageResult) -> bool:
        heading = result.title or result.url
        self.sections.append(
            f"# {heading}\n\n_Source: {result.url}_\n\n{result.content.strip()}"
        )
        return True

    def _serialize(self) -> str:
        return f"\n\n{MARKDOWN_SEPARATOR}\n\n".join(self.sections) + "\n"


WRITERS = {
    OutputFormat.PDF: PdfOutputWriter,
    OutputFormat.TXT: TextOutputWriter,
    OutputFormat.MD: MarkdownOutputWriter,
}


def create_writer(output_format: OutputFormat) -> OutputWriter:
    """Create the output handler for a format."""
    try:
        return WRITERS[output_format]()
    except KeyError:
        raise ValueError(f"Unsupported output format: {output_format}") from None
