# pepser/primitives.py
"""Leaf matchers working directly on a `TextSpan`.

- `sequence(lit)`      : exact literal text
- `take_while(pred)`   : longest non-empty run of characters satisfying `pred`
- `none_of / any_of / not_char` : `take_while` over a character set
- `ws()`               : optional run of Unicode whitespace
- `char_class(pat)`    : single-character predicate from a `regex` class
"""

from __future__ import annotations
from typing import Callable
import regex as re

from .combinators import FnParser, Opt, ParseResult, Parser
from .errors import ErrorSource, ParseError, excerpt
from .span import TextSpan

CharPredicate = Callable[[str], bool]


def char_class(pattern: str) -> CharPredicate:
    """Predicate true for a single character matching `pattern` (e.g. r"\\p{White_Space}")."""
    rx = re.compile(pattern)
    def pred(ch: str) -> bool:
        return rx.fullmatch(ch) is not None
    pred.__name__ = f"char_class({pattern})"
    return pred

# Unicode White_Space property; ASCII digits only
is_whitespace: CharPredicate = char_class(r"\p{White_Space}")
is_digit: CharPredicate = char_class(r"[0-9]")


def sequence(literal: str) -> Parser:
    """Match `literal` exactly; the output is the matched slice of the input."""
    if not literal:
        raise ValueError("sequence() needs a non-empty literal")

    def match(input: TextSpan) -> ParseResult:
        if len(input) == 0:
            raise ParseError(0, ErrorSource.LITERAL_MISMATCH,
                             f"expected '{literal}' but input is empty")
        for pos, (got, want) in enumerate(zip(input, literal)):
            if got != want:
                rest = input.drop_first(pos).diagnostic_text()
                raise ParseError(pos, ErrorSource.LITERAL_MISMATCH,
                                 f"could not parse sequence '{excerpt(rest)}', expected '{literal}'")
        if len(input) < len(literal):
            raise ParseError(len(input), ErrorSource.LITERAL_MISMATCH,
                             f"unexpected end of input, expected '{literal}'")
        matched, rest = input.split_at(len(literal))
        return rest, matched

    return FnParser(match, name=f"sequence({literal!r})")


def take_while(predicate: CharPredicate) -> Parser:
    """Longest non-empty prefix whose characters all satisfy `predicate`."""

    def match(input: TextSpan) -> ParseResult:
        if len(input) == 0:
            raise ParseError(0, ErrorSource.PREDICATE_EXHAUSTED, "empty sequence")
        pos = 0
        for ch in input:
            if not predicate(ch):
                break
            pos += 1
        if pos == 0:
            raise ParseError(0, ErrorSource.PREDICATE_EXHAUSTED,
                             f"could not parse for char {input.char_at(0)!r}")
        matched, rest = input.split_at(pos)
        return rest, matched

    return FnParser(match, name=f"take_while({getattr(predicate, '__name__', predicate)!r})")


def none_of(chars: str) -> Parser:
    return take_while(lambda c: c not in chars)


def any_of(chars: str) -> Parser:
    return take_while(lambda c: c in chars)


def not_char(ch: str) -> Parser:
    return take_while(lambda c: c != ch)


def digits() -> Parser:
    return take_while(is_digit)


def ws() -> Parser:
    """Skip leading whitespace. Always succeeds; output is the skipped span or None."""
    return Opt(take_while(is_whitespace))
