"""Command-line interface for nofmt."""

import sys
import threading
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from nofmt import __version__
from nofmt.config import get_settings
from nofmt.core.transformer import FormatResult, SourceFormatter
from nofmt.diffing import render_diff
from nofmt.discovery import walk
from nofmt.errors import DiffError, FormattingFailedError
from nofmt.log import configure_logging
from nofmt.pool import Outcome, run_pool
from nofmt.runner.command import with_error_flag

app = typer.Typer(
    name="nofmt",
    help="Run gofmt (or another formatter) but leave // go:nofmt regions untouched.",
    add_completion=False,
)
err_console = Console(stderr=True, highlight=False)

STDIN_LABEL = "<stdin>"


class Mode(str, Enum):
    PRINT = "print"
    DIFF = "diff"
    LIST = "list"
    WRITE = "write"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"nofmt v{__version__}")
        raise typer.Exit()


def select_mode(diff: bool, list_files: bool, write: bool) -> Mode:
    """Pick the output mode; at most one of -d, -l, -w may be given."""
    chosen = [
        mode
        for mode, flag in ((Mode.DIFF, diff), (Mode.LIST, list_files), (Mode.WRITE, write))
        if flag
    ]
    if len(chosen) > 1:
        raise typer.BadParameter(
            "only one of -d, -l and -w may be used",
            param_hint="'-d' / '-l' / '-w'",
        )
    return chosen[0] if chosen else Mode.PRINT


class Reporter:
    """Emits results in the selected mode and counts failures.

    Safe to call from the discovery thread and from worker threads.
    """

    def __init__(
        self,
        mode: Mode,
        diff_program: Optional[str] = None,
        verbose: bool = False,
    ) -> None:
        self.mode = mode
        self.diff_program = diff_program
        self.verbose = verbose
        self.succeeded = 0
        self.failed = 0
        self._lock = threading.RLock()

    def error(self, label: str, message: str, diagnostic: bytes = b"") -> None:
        """Report a failure for one file."""
        with self._lock:
            self.failed += 1
            err_console.print(f"[red]{escape(label)}:[/red] {escape(message)}", soft_wrap=True)
            if diagnostic:
                typer.echo(diagnostic, err=True, nl=False)

    def walk_error(self, path: Path, message: str) -> None:
        self.error(str(path), message)

    def outcome(self, outcome: Outcome[Optional[Path], FormatResult]) -> None:
        """Handle one finished file."""
        label = str(outcome.item) if outcome.item is not None else STDIN_LABEL
        if not outcome.ok:
            error = outcome.error
            diagnostic = error.diagnostic if isinstance(error, FormattingFailedError) else b""
            self.error(label, str(error), diagnostic)
            return

        with self._lock:
            if self.emit(label, outcome.result):
                self.succeeded += 1

    def emit(self, label: str, result: FormatResult) -> bool:
        """Write out one result. Returns True on success."""
        if self.mode is Mode.DIFF:
            try:
                data = render_diff(result.source, result.output, label, self.diff_program)
            except DiffError as e:
                self.error(label, f"diff failed: {e}")
                return False
            typer.echo(data, nl=False)
            return True

        if self.mode is Mode.LIST:
            if result.changed:
                typer.echo(label)
            return True

        if self.mode is Mode.WRITE:
            if not result.changed:
                return True
            try:
                # Writing in place keeps the file's permissions
                result.path.write_bytes(result.output)
            except OSError as e:
                self.error(label, f"rewrite failed: {e}")
                return False
            if self.verbose:
                err_console.print(f"[green]Rewrote:[/green] {escape(label)}")
            return True

        typer.echo(result.output, nl=False)
        return True


def process_source(formatter: SourceFormatter, path: Optional[Path]) -> FormatResult:
    """Format one file, or standard input when `path` is None."""
    if path is None:
        return formatter.format_stream(sys.stdin.buffer)
    return formatter.format_file(path)


@app.command()
def main(
    paths: Optional[list[Path]] = typer.Argument(
        None,
        help="Files or folders to format (default: standard input)",
        show_default=False,
    ),
    diff: bool = typer.Option(
        False,
        "--diff",
        "-d",
        help="Show differences instead of the formatted source",
    ),
    diff_program: Optional[str] = typer.Option(
        None,
        "--diff-program",
        "-D",
        help="Diff program to use with -d, e.g. 'diff -u' (default: built-in)",
    ),
    errors: bool = typer.Option(
        False,
        "--errors",
        "-e",
        help="Pass -e to the formatter program",
    ),
    formatter: Optional[str] = typer.Option(
        None,
        "--formatter",
        "-F",
        help="Formatter 'program args'; the file name is appended unless %f is used "
        "(default: gofmt %f)",
    ),
    list_files: bool = typer.Option(
        False,
        "--list",
        "-l",
        help="List files whose formatting differs from nofmt's",
    ),
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Write results back to the files instead of standard output",
    ),
    jobs: Optional[int] = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of files formatted in parallel",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Format Go source, keeping regions between // go:nofmt and // go:fmt as written.

    Examples:

        nofmt main.go

        nofmt -w ./pkg

        nofmt -l

        nofmt -d -D 'diff -u' main.go

        cat main.go | nofmt -F goimports
    """
    settings = get_settings()
    configure_logging(verbose, err_console)

    mode = select_mode(diff, list_files, write)
    files = list(paths or [])

    if mode is Mode.WRITE and not files:
        raise typer.BadParameter("can not rewrite <stdin>", param_hint="'-w'")
    if mode is Mode.LIST and not files:
        files = [Path(".")]

    command = formatter or settings.formatter
    if errors:
        command = with_error_flag(command)

    source_formatter = SourceFormatter(command=command, max_retries=settings.max_retries)
    reporter = Reporter(
        mode,
        diff_program=diff_program or settings.diff_program,
        verbose=verbose,
    )

    if not files:
        # Standard input mode
        try:
            result = process_source(source_formatter, None)
        except Exception as e:
            reporter.outcome(Outcome(item=None, error=e))
        else:
            reporter.outcome(Outcome(item=None, result=result))
        raise typer.Exit(0 if reporter.failed == 0 else 1)

    sources = walk(files, suffix=settings.source_suffix, on_error=reporter.walk_error)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
        disable=not verbose or mode is Mode.PRINT,
    ) as progress:
        task = progress.add_task("Formatting files...", total=None)

        def on_outcome(outcome: Outcome[Optional[Path], FormatResult]) -> None:
            reporter.outcome(outcome)
            progress.advance(task)

        run_pool(
            sources,
            lambda path: process_source(source_formatter, path),
            jobs=jobs or settings.jobs,
            queue_size=settings.queue_size,
            on_outcome=on_outcome,
        )

    if verbose:
        err_console.print(
            f"[bold]Complete:[/bold] {reporter.succeeded} succeeded, {reporter.failed} failed"
        )
    raise typer.Exit(0 if reporter.failed == 0 else 1)


if __name__ == "__main__":
    app()
