"""Intermediate Representation for segmented source files.

This module defines the data structures shared by the lexer, the
segmenter and the reconciler. A source file is held as a Document: an
ordered list of Blocks, each tagged as eligible for formatting or not.
"""

from dataclasses import dataclass, field
from enum import Enum, auto


# =============================================================================
# Lexer state
# =============================================================================

class LexContext(Enum):
    """Context carried from the end of one line to the start of the next."""

    PLAIN = auto()
    BLOCK_COMMENT = auto()  # Inside /* ... */
    RAW_STRING = auto()  # Inside `...`


class Signal(Enum):
    """Pragma outcome for a single line."""

    NONE = auto()
    FORMAT_ON = auto()  # // go:fmt
    FORMAT_OFF = auto()  # // go:nofmt


class LexMode(Enum):
    """Per-character scanner modes.

    The scanner switches between modes based on the character it sees:
    - INDENT: Only whitespace so far on this line
    - CODE: Ordinary code has been seen
    - LEAD_SLASH: A slash as the first token of the line
    - SLASH: A slash after code
    - LINE_COMMENT: `//` after code (terminal)
    - LEAD_LINE_COMMENT: `//` as the first token of the line (terminal)
    - BLOCK_COMMENT: Inside /* ... */
    - STAR: A `*` inside a block comment, may close it
    - RAW_STRING: Inside `...`
    - QUOTE: Inside "..."
    - TICK: Inside '...'
    - QUOTE_END / TICK_END: Candidate closing delimiter, needs escape check
    """

    INDENT = auto()
    CODE = auto()
    LEAD_SLASH = auto()
    SLASH = auto()
    LINE_COMMENT = auto()
    LEAD_LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    STAR = auto()
    RAW_STRING = auto()
    QUOTE = auto()
    TICK = auto()
    QUOTE_END = auto()
    TICK_END = auto()


# =============================================================================
# Blocks
# =============================================================================

@dataclass
class Block:
    """A contiguous run of lines sharing one formatting tag.

    Attributes:
        formatted: Whether the external formatter's output is used for
            this block
        lines: Raw lines including their terminators
    """

    formatted: bool = True
    lines: list[bytes] = field(default_factory=list)

    def append(self, line: bytes) -> None:
        """Append a raw line to this block."""
        self.lines.append(line)

    def to_bytes(self) -> bytes:
        return b"".join(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


@dataclass
class Document:
    """An ordered list of blocks covering a whole source file.

    Attributes:
        blocks: Blocks in file order; adjacent blocks alternate tags
    """

    blocks: list[Block] = field(default_factory=list)

    @property
    def tags(self) -> list[bool]:
        """The formatting tag of every block, in order."""
        return [block.formatted for block in self.blocks]

    def add_block(self, block: Block) -> None:
        """Add a block to the document."""
        self.blocks.append(block)

    def to_bytes(self) -> bytes:
        """Reassemble the original bytes."""
        return b"".join(block.to_bytes() for block in self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self):
        return iter(self.blocks)
