"""Main formatting orchestrator."""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from nofmt.config import DEFAULT_FORMATTER
from nofmt.core.merger import reconcile
from nofmt.formatting.segmenter import BlockSegmenter
from nofmt.log import get_logger
from nofmt.runner.client import FormatterClient

logger = get_logger(__name__)


@dataclass
class FormatResult:
    """Outcome of formatting one source.

    Attributes:
        path: File that was formatted, None for standard input
        source: Bytes as read
        output: Bytes after reconciliation
    """

    path: Optional[Path]
    source: bytes
    output: bytes

    @property
    def changed(self) -> bool:
        """Whether formatting changed anything."""
        return self.source != self.output


class SourceFormatter:
    """Orchestrates the nofmt pipeline for one source at a time.

    Pipeline:
    1. Read the whole source
    2. Segment it into formatted/unformatted blocks
    3. Run the external formatter on the unmodified source
    4. Segment the formatter output the same way
    5. Take formatted blocks from the output and unformatted blocks
       from the source

    Instances hold no per-file state and can be shared between threads.
    """

    def __init__(
        self,
        command: str = DEFAULT_FORMATTER,
        max_retries: int = 3,
    ) -> None:
        """Initialize the formatter.

        Args:
            command: Formatter template, e.g. "gofmt %f"
            max_retries: Launch attempts for the formatter process
        """
        self.command = command or DEFAULT_FORMATTER
        self.client = FormatterClient(command=self.command, max_retries=max_retries)
        self.segmenter = BlockSegmenter()

    def format_bytes(self, source: bytes, path: Optional[Path] = None) -> FormatResult:
        """Format source bytes.

        Args:
            source: The source as read
            path: File the formatter should read; None streams `source`
                to the formatter's standard input

        Returns:
            FormatResult with the reconciled output

        Raises:
            FormatterError: If the formatter fails
            BlockMismatchError: If the output's blocks do not line up
        """
        original = self.segmenter.parse(source)
        formatted = self.client.run(source, path)
        processed = self.segmenter.parse(formatted)
        output = reconcile(original, processed)
        logger.debug("%s: %d block(s)", path or "<stdin>", len(processed))
        return FormatResult(path=path, source=source, output=output)

    def format_file(self, path: Path) -> FormatResult:
        """Format a file on disk without modifying it.

        Raises:
            OSError: If the file cannot be read
        """
        source = Path(path).read_bytes()
        return self.format_bytes(source, Path(path))

    def format_stream(self, stream: BinaryIO) -> FormatResult:
        """Format everything readable from a binary stream."""
        return self.format_bytes(stream.read(), None)
