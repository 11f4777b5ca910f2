"""Pytest fixtures for nofmt tests."""

import shlex
import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from nofmt import config


# Go source with every kind of region: a raw string and a block comment
# hiding pragmas, a duplicated go:fmt, and two unformatted blocks.
GO_SOURCE = b'''package main

import "fmt"

func main() {
fmt.Println("hello \\"world\\"")
fmt.Println(`hello world\\
\t\t// go:nofmt
`)

// go:fmt

// this is a comment
/* this is a comment
\t// go:nofmt

\t*/
// go:nofmt
type foo struct {
\ta  int
\tbb string
}

// go:fmt
// go:fmt
type baz struct {
\ta  int
\tbb string
}
// go:nofmt

fmt.Println(&foo{})
fmt.Println(&baz{})
}
'''

# Stand-in formatter: collapses runs of whitespace and drops indentation.
NORMALIZE_SCRIPT = """
import sys
if len(sys.argv) > 1:
    with open(sys.argv[1], "rb") as fp:
        src = fp.read()
else:
    src = sys.stdin.buffer.read()
out = b"".join(b" ".join(line.split()) + b"\\n" for line in src.splitlines())
sys.stdout.buffer.write(out)
"""


@pytest.fixture
def go_source() -> bytes:
    """Go source mixing formatted and unformatted regions."""
    return GO_SOURCE


@pytest.fixture
def make_formatter(tmp_path: Path) -> Callable[..., str]:
    """Write a Python script and return a formatter template running it.

    The template ends with %f unless `placeholder=False`.
    """

    def _make(body: str, name: str = "fmt_script.py", placeholder: bool = True) -> str:
        script = tmp_path / name
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        command = shlex.join([sys.executable, str(script)])
        return f"{command} %f" if placeholder else command

    return _make


@pytest.fixture
def normalizing_formatter(make_formatter) -> str:
    """Formatter template that normalizes whitespace on every line."""
    return make_formatter(NORMALIZE_SCRIPT, name="normalize.py")


@pytest.fixture
def failing_formatter(make_formatter) -> str:
    """Formatter template that reports a syntax error and exits 2."""
    return make_formatter(
        """
        import sys
        sys.stderr.write("1:1: expected 'package', found 'EOF'\\n")
        sys.exit(2)
        """,
        name="failing.py",
    )


@pytest.fixture
def tmp_go_file(tmp_path: Path, go_source: bytes) -> Path:
    """Create a temporary Go file."""
    file_path = tmp_path / "main.go"
    file_path.write_bytes(go_source)
    return file_path


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch):
    """Give every test fresh settings untouched by the environment."""
    for name in (
        "NOFMT_FORMATTER",
        "NOFMT_DIFF_PROGRAM",
        "NOFMT_JOBS",
        "NOFMT_QUEUE_SIZE",
        "NOFMT_SUFFIX",
        "NOFMT_MAX_RETRIES",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_settings", None)
    yield
