"""Exceptions raised while formatting a single file."""

from typing import Optional


class NofmtError(Exception):
    """Base class for nofmt errors."""

    pass


class FormatterError(NofmtError):
    """Error running the external formatter."""

    pass


class FormatterInvocationError(FormatterError):
    """The formatter could not be launched, failed silently, or its
    standard input could not be written."""

    pass


class FormattingFailedError(FormatterError):
    """The formatter wrote to standard error.

    Attributes:
        diagnostic: Everything the formatter wrote to standard error
    """

    def __init__(self, message: str, diagnostic: bytes = b"") -> None:
        super().__init__(message)
        self.diagnostic = diagnostic


class BlockMismatchError(NofmtError):
    """Formatted output does not segment like the original source.

    Either the lexer misread a comment/string boundary or the formatter
    rewrote one in a way that changes the block layout.
    """

    def __init__(
        self,
        original: list[bool],
        processed: list[bool],
        message: Optional[str] = None,
    ) -> None:
        self.original = original
        self.processed = processed
        if message is None:
            if len(original) != len(processed):
                message = f"block mismatch: {len(original)} != {len(processed)}"
            else:
                message = "block mismatch: formatted/unformatted sequence differs"
        super().__init__(message)


class DiffError(NofmtError):
    """The diff program failed."""

    pass
