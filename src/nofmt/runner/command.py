"""Build the formatter command line."""

import shlex
from pathlib import Path
from typing import Optional, Union

from nofmt.config import DEFAULT_FORMATTER

# Replaced by the file path; empty when reading standard input
PLACEHOLDER = "%f"


def build_command(
    template: str,
    path: Optional[Union[str, Path]] = None,
) -> list[str]:
    """Turn a formatter template into an argument list.

    Examples of templates: "gofmt %f", "gofmt", "goimports",
    "myfmttool -f %f -pretty".

    Args:
        template: Program and arguments, split with shell-like rules
        path: File being formatted, or None for standard input

    Returns:
        Argument list ready for subprocess
    """
    template = template.strip() or DEFAULT_FORMATTER
    args = shlex.split(template)
    file_arg = "" if path is None else str(path)

    if PLACEHOLDER in template:
        args = [arg.replace(PLACEHOLDER, file_arg) for arg in args]
        # A bare %f disappears in stdin mode
        args = [arg for arg in args if arg]
    elif path is not None:
        args.append(file_arg)

    return args


def with_error_flag(template: str) -> str:
    """Insert `-e` right after the program name.

    "gofmt %f" becomes "gofmt -e %f"; "myfmt" becomes "myfmt -e".
    """
    args = shlex.split(template.strip() or DEFAULT_FORMATTER)
    args.insert(1, "-e")
    return shlex.join(args)
