"""Render the difference between a source and its formatted version."""

import difflib
import io
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from nofmt.errors import DiffError

NO_NEWLINE = b"\\ No newline at end of file\n"


def render_diff(
    original: bytes,
    formatted: bytes,
    filename: str,
    program: Optional[str] = None,
) -> bytes:
    """Render a diff between two versions of a file.

    Args:
        original: Source as read
        formatted: Source after formatting
        filename: Name used in the diff headers
        program: External diff command (e.g. "diff -u"); None renders a
            unified diff in-process

    Returns:
        The diff, empty when both sides are identical

    Raises:
        DiffError: If the external program is blank or fails
    """
    if program:
        return _run_diff_program(program, original, formatted, filename)
    return unified_diff(original, formatted, filename)


def unified_diff(original: bytes, formatted: bytes, filename: str) -> bytes:
    """Unified diff with `<filename>.orig` and `<filename>` headers."""
    lines = difflib.diff_bytes(
        difflib.unified_diff,
        list(io.BytesIO(original)),
        list(io.BytesIO(formatted)),
        fromfile=f"{filename}.orig".encode(),
        tofile=filename.encode(),
    )
    out = io.BytesIO()
    for line in lines:
        out.write(line)
        if not line.endswith(b"\n"):
            out.write(b"\n" + NO_NEWLINE)
    return out.getvalue()


def _run_diff_program(
    program: str,
    original: bytes,
    formatted: bytes,
    filename: str,
) -> bytes:
    """Run an external diff program over two temporary files."""
    args = shlex.split(program)
    if not args:
        raise DiffError("empty diff program")
    name = Path(filename).name or "stdin"

    with tempfile.TemporaryDirectory(prefix="nofmt-") as tmp:
        before = Path(tmp) / f"{name}.orig"
        after = Path(tmp) / name
        before.write_bytes(original)
        after.write_bytes(formatted)

        try:
            proc = subprocess.run(
                [*args, str(before), str(after)],
                capture_output=True,
            )
        except OSError as e:
            raise DiffError(f"{args[0]}: {e.strerror or e}") from e

    # diff exits 1 when the inputs differ
    if proc.returncode not in (0, 1):
        detail = proc.stderr.decode(errors="replace").strip()
        raise DiffError(f"{program}: exit status {proc.returncode}: {detail}")
    return proc.stdout
