"""Lexing and segmentation of source files into formatting blocks."""

from nofmt.formatting.ir import (
    Block,
    Document,
    LexContext,
    LexMode,
    Signal,
)
from nofmt.formatting.lexer import PragmaLexer, scan_line
from nofmt.formatting.segmenter import BlockSegmenter, segment

__all__ = [
    "Block",
    "Document",
    "LexContext",
    "LexMode",
    "Signal",
    "PragmaLexer",
    "scan_line",
    "BlockSegmenter",
    "segment",
]
