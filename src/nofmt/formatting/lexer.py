"""Line scanner that tracks comment/string context and spots pragmas.

Each line is scanned once, left to right, by looking up the next mode
from the current mode and character. Only a `//` comment that is the
first token on its line can carry a pragma:

    // go:nofmt    switch to an unformatted block
    // go:fmt      switch back to a formatted block

Block comments and raw strings may span lines; the context they leave
open is returned so the caller can feed it into the next line.
"""

from nofmt.formatting.ir import LexContext, LexMode, Signal


PRAGMA_FORMAT_OFF = "go:nofmt"
PRAGMA_FORMAT_ON = "go:fmt"

PRAGMAS: dict[str, Signal] = {
    PRAGMA_FORMAT_OFF: Signal.FORMAT_OFF,
    PRAGMA_FORMAT_ON: Signal.FORMAT_ON,
}

# Characters that start something interesting in ordinary code
_CODE: dict[str, LexMode] = {
    "/": LexMode.SLASH,
    "`": LexMode.RAW_STRING,
    '"': LexMode.QUOTE,
    "'": LexMode.TICK,
}

# mode -> (character transitions, fallback mode)
# A slash that does not start a comment falls back to the code
# transitions, so the following character is never lost.
TRANSITIONS: dict[LexMode, tuple[dict[str, LexMode], LexMode]] = {
    LexMode.CODE: (_CODE, LexMode.CODE),
    LexMode.INDENT: (
        {**_CODE, " ": LexMode.INDENT, "\t": LexMode.INDENT, "/": LexMode.LEAD_SLASH},
        LexMode.CODE,
    ),
    LexMode.LEAD_SLASH: (
        {**_CODE, "/": LexMode.LEAD_LINE_COMMENT, "*": LexMode.BLOCK_COMMENT},
        LexMode.CODE,
    ),
    LexMode.SLASH: (
        {**_CODE, "/": LexMode.LINE_COMMENT, "*": LexMode.BLOCK_COMMENT},
        LexMode.CODE,
    ),
    LexMode.BLOCK_COMMENT: ({"*": LexMode.STAR}, LexMode.BLOCK_COMMENT),
    LexMode.STAR: ({"*": LexMode.STAR, "/": LexMode.CODE}, LexMode.BLOCK_COMMENT),
    LexMode.RAW_STRING: ({"`": LexMode.CODE}, LexMode.RAW_STRING),
    LexMode.QUOTE: ({'"': LexMode.QUOTE_END}, LexMode.QUOTE),
    LexMode.TICK: ({"'": LexMode.TICK_END}, LexMode.TICK),
}

_START_MODE = {
    LexContext.PLAIN: LexMode.INDENT,
    LexContext.BLOCK_COMMENT: LexMode.BLOCK_COMMENT,
    LexContext.RAW_STRING: LexMode.RAW_STRING,
}

_END_CONTEXT = {
    LexMode.BLOCK_COMMENT: LexContext.BLOCK_COMMENT,
    LexMode.STAR: LexContext.BLOCK_COMMENT,
    LexMode.RAW_STRING: LexContext.RAW_STRING,
}

# Candidate closing delimiter -> literal mode to stay in when escaped
_LITERAL_END = {
    LexMode.QUOTE_END: LexMode.QUOTE,
    LexMode.TICK_END: LexMode.TICK,
}


def next_mode(mode: LexMode, char: str) -> LexMode:
    """Look up the mode that follows `mode` on reading `char`."""
    found, fallback = TRANSITIONS[mode]
    return found.get(char, fallback)


def is_escaped(line: str, pos: int) -> bool:
    """Check whether the character at `pos` is escaped by backslashes.

    Counts the run of consecutive backslashes immediately before `pos`;
    an odd count means the character is escaped.
    """
    count = 0
    i = pos - 1
    while i >= 0 and line[i] == "\\":
        count += 1
        i -= 1
    return count % 2 == 1


def pragma_signal(comment: str) -> Signal:
    """Map the text of a whole-line comment to its pragma signal."""
    return PRAGMAS.get(comment.strip(), Signal.NONE)


def scan_line(
    line: str,
    context: LexContext = LexContext.PLAIN,
) -> tuple[LexContext, Signal]:
    """Scan one line of source.

    Args:
        line: The line text, with or without its terminator
        context: Context left open by the previous line

    Returns:
        Tuple of (context for the next line, pragma signal)
    """
    mode = _START_MODE[context]

    for pos, char in enumerate(line):
        mode = next_mode(mode, char)

        if mode is LexMode.LEAD_LINE_COMMENT:
            return LexContext.PLAIN, pragma_signal(line[pos + 1 :])
        if mode is LexMode.LINE_COMMENT:
            return LexContext.PLAIN, Signal.NONE

        if mode in _LITERAL_END:
            # Inside a quote: a backslash-escaped delimiter does not close it
            mode = _LITERAL_END[mode] if is_escaped(line, pos) else LexMode.CODE

    return _END_CONTEXT.get(mode, LexContext.PLAIN), Signal.NONE


class PragmaLexer:
    """Stateful wrapper that threads the context from line to line."""

    def __init__(self, context: LexContext = LexContext.PLAIN) -> None:
        self.context = context

    def feed(self, line: str) -> Signal:
        """Scan the next line and return its pragma signal."""
        self.context, signal = scan_line(line, self.context)
        return signal

    def reset(self) -> None:
        """Forget any open comment or raw string."""
        self.context = LexContext.PLAIN
