"""Subprocess client for the external formatter."""

import shlex
import subprocess
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import IO, Optional, Union

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from nofmt.config import DEFAULT_FORMATTER
from nofmt.errors import FormatterInvocationError, FormattingFailedError
from nofmt.log import get_logger
from nofmt.runner.command import build_command

logger = get_logger(__name__)


def _feed(pipe: IO[bytes], data: bytes) -> None:
    """Write all of `data` to a pipe, then close it."""
    with pipe:
        pipe.write(data)


class FormatterClient:
    """Run a formatter program and capture its output.

    The formatter receives the file path (see `build_command`) or, when
    there is no path, the source on standard input. Anything written to
    standard error counts as a failure, whatever the exit status.
    """

    def __init__(
        self,
        command: str = DEFAULT_FORMATTER,
        max_retries: int = 3,
    ) -> None:
        """Initialize the client.

        Args:
            command: Formatter template, e.g. "gofmt %f"
            max_retries: Launch attempts when the system is out of
                process slots (EAGAIN)
        """
        self.command = command or DEFAULT_FORMATTER
        self.max_retries = max_retries

    def _launch(self, argv: list[str], use_stdin: bool) -> subprocess.Popen:
        """Start the formatter, retrying transient fork failures."""
        popen = retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(BlockingIOError),
            reraise=True,
        )(subprocess.Popen)
        try:
            return popen(
                argv,
                stdin=subprocess.PIPE if use_stdin else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise FormatterInvocationError(f"{argv[0]}: {e.strerror or e}") from e

    def run(self, source: bytes, path: Optional[Union[str, Path]] = None) -> bytes:
        """Format `source` and return the formatter's standard output.

        Args:
            source: Source bytes, streamed to standard input when `path`
                is None
            path: File the formatter should read, or None

        Returns:
            The candidate formatted text

        Raises:
            FormatterInvocationError: Launch failure, non-zero exit, or
                standard input could not be written
            FormattingFailedError: The formatter wrote to standard error
        """
        argv = build_command(self.command, path)
        if not argv:
            raise FormatterInvocationError("empty formatter command")
        cmdline = shlex.join(argv)
        use_stdin = path is None
        logger.debug("running %s", cmdline)

        proc = self._launch(argv, use_stdin)

        # Feed stdin and drain stderr in the background so neither pipe
        # can fill up while stdout is being read.
        with ThreadPoolExecutor(max_workers=2) as pool:
            writer = pool.submit(_feed, proc.stdin, source) if use_stdin else None
            drain = pool.submit(proc.stderr.read)
            stdout = proc.stdout.read()
            stderr = drain.result()
            returncode = proc.wait()
            write_error = writer.exception() if writer else None

        proc.stdout.close()
        proc.stderr.close()

        if stderr:
            status = f" (exit status {returncode})" if returncode else ""
            raise FormattingFailedError(
                f"{cmdline}: returned error{status}",
                diagnostic=stderr,
            )
        if returncode != 0:
            raise FormatterInvocationError(f"{cmdline}: exit status {returncode}")
        if write_error is not None:
            raise FormatterInvocationError(
                f"{cmdline}: writing standard input: {write_error}"
            ) from write_error

        return stdout
