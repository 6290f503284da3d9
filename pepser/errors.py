# pepser/errors.py
"""Failure model shared by every parser.

A `ParseError` records where a parser gave up (`offset`, counted from the
start of the span that parser was handed), which kind of matcher gave up
(`source`), and a human readable `reason`. Combinators that consume a
prefix before delegating re-raise inner failures through `shifted()`, so
the error reaching the top-level caller carries an offset absolute to the
original input.
"""

from __future__ import annotations
from enum import Enum
from typing import Tuple

MAX_EXCERPT_LEN = 10
"""Upper bound on the slice of actual input quoted in a failure reason."""


class ErrorSource(Enum):
    LITERAL_MISMATCH = "literal mismatch"
    PREDICATE_EXHAUSTED = "predicate exhausted"
    LOOKAHEAD_EXHAUSTED = "lookahead exhausted"
    NESTING_TOO_DEEP = "nesting too deep"
    TRAILING_INPUT = "trailing input"

    def __str__(self) -> str:
        return self.value


FATAL_SOURCES = frozenset({ErrorSource.NESTING_TOO_DEEP})


class ParseError(SyntaxError):
    """Raised by a parser that cannot match at the current position."""

    def __init__(self, offset: int, source: ErrorSource, reason: str) -> None:
        super().__init__(f"{reason} (at offset {offset}, {source})")
        self.offset = offset
        self.source = source
        self.reason = reason

    @property
    def fatal(self) -> bool:
        """Fatal failures pass through choice, repetition and optional parsers."""
        return self.source in FATAL_SOURCES

    def shifted(self, consumed: int) -> "ParseError":
        """Same failure, re-based past `consumed` units of already matched input."""
        if consumed == 0:
            return self
        return ParseError(self.offset + consumed, self.source, self.reason)

    def __repr__(self) -> str:
        return f"ParseError(offset={self.offset}, source={self.source.name}, reason={self.reason!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.offset, self.source, self.reason) == (other.offset, other.source, other.reason)

    __hash__ = SyntaxError.__hash__

    def __reduce__(self):
        return type(self), (self.offset, self.source, self.reason)


def excerpt(text: str) -> str:
    return text[:MAX_EXCERPT_LEN]


# ---- Rendering for callers ----

def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """[start, end) of the line containing `pos`."""
    start = src.rfind("\n", 0, pos)
    start = 0 if start < 0 else start + 1
    end = src.find("\n", pos)
    end = len(src) if end < 0 else end
    return start, end


def line_col(src: str, pos: int) -> Tuple[int, int]:
    """1-based line and column of absolute offset `pos`."""
    pos = max(0, min(pos, len(src)))
    start, _ = _line_bounds(src, pos)
    return src.count("\n", 0, pos) + 1, (pos - start) + 1


def caret_snippet(src: str, pos: int) -> str:
    start, end = _line_bounds(src, pos)
    line = src[start:end]
    caret = " " * (pos - start) + "^"
    return f"{line}\n{caret}"


def format_error(src: str, err: ParseError) -> str:
    """Render `err` against the text it was raised for, with a caret under the spot."""
    pos = max(0, min(err.offset, len(src)))
    line, col = line_col(src, pos)
    return f"Parse error at {line}:{col} ({err.source}): {err.reason}\n" + caret_snippet(src, pos)
