"""Find the source files named on the command line."""

from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

ErrorCallback = Callable[[Path, str], None]


def find_sources(folder: Path, suffix: str = ".go") -> Iterator[Path]:
    """Yield non-empty regular files under `folder` with `suffix`."""
    for path in sorted(folder.rglob(f"*{suffix}")):
        if path.is_file() and path.stat().st_size > 0:
            yield path


def walk(
    paths: Iterable[Union[str, Path]],
    suffix: str = ".go",
    on_error: Optional[ErrorCallback] = None,
) -> Iterator[Path]:
    """Expand files and directories into the files to format.

    Files named explicitly are yielded whatever their extension;
    directories are searched recursively for `suffix` files. Missing
    paths and special files are reported through `on_error` and
    skipped.
    """
    for entry in paths:
        if not str(entry):
            continue
        path = Path(entry)

        if not path.exists():
            if on_error:
                on_error(path, "no such file or directory")
            continue
        if path.is_file():
            yield path
            continue
        if path.is_dir():
            yield from find_sources(path, suffix)
            continue
        if on_error:
            on_error(path, "unsupported file type")
