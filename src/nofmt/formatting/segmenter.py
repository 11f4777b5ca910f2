"""Split a source file into alternating formatted/unformatted blocks."""

import io
from typing import Iterable, Iterator

from nofmt.formatting.ir import Block, Document, Signal
from nofmt.formatting.lexer import PragmaLexer
from nofmt.log import get_logger

logger = get_logger(__name__)


def iter_lines(data: bytes) -> Iterator[bytes]:
    """Yield raw lines split on newline only, keeping terminators.

    A final line without a terminator is yielded as well.
    """
    return iter(io.BytesIO(data))


def decode_line(line: bytes) -> str:
    """Decode a raw line for scanning without ever failing."""
    return line.decode("utf-8", errors="surrogateescape")


class BlockSegmenter:
    """Drive the pragma lexer over a whole file and collect blocks.

    Rules:
    - `go:nofmt` inside a formatted block: the pragma line closes the
      current block, following lines go to a new unformatted block
    - `go:fmt` inside an unformatted block: a new formatted block starts
      with the pragma line
    - A pragma matching the current block's tag is an ordinary line
    """

    def parse(self, data: bytes) -> Document:
        """Segment raw source bytes into a Document.

        Args:
            data: The full source file

        Returns:
            Document whose blocks concatenate back to `data`
        """
        return self.parse_lines(iter_lines(data))

    def parse_lines(self, lines: Iterable[bytes]) -> Document:
        """Segment an iterable of raw lines into a Document."""
        lexer = PragmaLexer()
        current = Block(formatted=True)
        doc = Document(blocks=[current])

        for line in lines:
            signal = lexer.feed(decode_line(line))

            if signal is Signal.FORMAT_OFF and current.formatted:
                current.append(line)
                current = Block(formatted=False)
                doc.add_block(current)
                continue

            if signal is Signal.FORMAT_ON and not current.formatted:
                current = Block(formatted=True)
                doc.add_block(current)

            current.append(line)

        logger.debug("segmented into %d block(s): %s", len(doc), doc.tags)
        return doc


def segment(data: bytes) -> Document:
    """Segment raw source bytes into a Document."""
    return BlockSegmenter().parse(data)
