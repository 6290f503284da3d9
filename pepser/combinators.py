# pepser/combinators.py
"""Parser capability and the combinators built on it.

Every parser answers one call, `parse(input)`, with either the pair
`(remaining, output)` or a raised `ParseError`. Plain functions with the
same shape are accepted anywhere a parser is expected (`as_parser`), which
is how grammars close recursive loops: the recursive edge is just a named
function referenced by the combinators around it.

Combinator objects hold their sub-parsers and nothing else. They are built
once and may be reused across calls and threads.
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional, Tuple, Union

from .errors import ErrorSource, ParseError
from .span import Input

ParseResult = Tuple[Input, Any]
ParserFn = Callable[[Input], ParseResult]
ParserLike = Union["Parser", ParserFn]


def _consumed(before: Input, after: Input) -> int:
    return len(before) - len(after)


class Parser:
    """Base class of every combinator."""

    def parse(self, input: Input) -> ParseResult:
        raise NotImplementedError

    def __call__(self, input: Input) -> ParseResult:
        return self.parse(input)

    # ---- fluent builders ----
    def and_(self, other: ParserLike) -> "And":
        return And(self, other)

    def or_(self, other: ParserLike) -> "Or":
        return Or(self, other)

    def map(self, f: Callable[[Any], Any]) -> "Map":
        return Map(self, f)

    def many(self) -> "Many":
        return Many(self)

    __add__ = and_
    __or__ = or_
    __rshift__ = map


class FnParser(Parser):
    """Adapter giving a plain `input -> (remaining, output)` callable the Parser API."""

    def __init__(self, fn: ParserFn, name: Optional[str] = None):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", repr(fn))

    def parse(self, input: Input) -> ParseResult:
        return self.fn(input)

    def __repr__(self) -> str:
        return f"FnParser({self.name})"


def as_parser(p: ParserLike) -> Parser:
    if isinstance(p, Parser):
        return p
    if callable(p):
        return FnParser(p)
    raise TypeError(f"expected a Parser or a callable, got {type(p).__name__}")


class And(Parser):
    def __init__(self, first: ParserLike, second: ParserLike):
        self.first = as_parser(first)
        self.second = as_parser(second)

    def parse(self, input: Input) -> ParseResult:
        rest, a = self.first.parse(input)
        try:
            rest, b = self.second.parse(rest)
        except ParseError as e:
            raise e.shifted(_consumed(input, rest)) from None
        return rest, (a, b)


class Or(Parser):
    """Ordered choice. Only the last alternative's failure is reported."""

    def __init__(self, *alternatives: ParserLike):
        if not alternatives:
            raise ValueError("Or needs at least one alternative")
        self.alternatives: Tuple[Parser, ...] = tuple(as_parser(p) for p in alternatives)

    def or_(self, other: ParserLike) -> "Or":
        return Or(*self.alternatives, other)

    __or__ = or_

    def parse(self, input: Input) -> ParseResult:
        *head, last = self.alternatives
        for alt in head:
            try:
                return alt.parse(input)
            except ParseError as e:
                if e.fatal:
                    raise
                continue
        return last.parse(input)


class Map(Parser):
    def __init__(self, parser: ParserLike, f: Callable[[Any], Any]):
        self.parser = as_parser(parser)
        self.f = f

    def parse(self, input: Input) -> ParseResult:
        rest, out = self.parser.parse(input)
        return rest, self.f(out)


class Many(Parser):
    """Zero or more. Stops on exhausted input, failure, or a zero-width match."""

    def __init__(self, parser: ParserLike):
        self.parser = as_parser(parser)

    def parse(self, input: Input) -> ParseResult:
        items: List[Any] = []
        cur = input
        while len(cur) > 0:
            try:
                rest, out = self.parser.parse(cur)
            except ParseError as e:
                if e.fatal:
                    raise e.shifted(_consumed(input, cur)) from None
                break
            if len(rest) == len(cur):
                break
            items.append(out)
            cur = rest
        return cur, items


class SepBy(Parser):
    """Zero or more `parser` separated by `separator`.

    An empty match is allowed. A matched separator stays consumed even when
    no element follows it, so `1,2,]` leaves `]`.
    """

    def __init__(self, parser: ParserLike, separator: ParserLike):
        self.parser = as_parser(parser)
        self.separator = as_parser(separator)

    def parse(self, input: Input) -> ParseResult:
        items: List[Any] = []
        cur = input
        while True:
            start = cur
            try:
                cur, out = self.parser.parse(cur)
            except ParseError as e:
                if e.fatal:
                    raise e.shifted(_consumed(input, cur)) from None
                return cur, items
            items.append(out)
            try:
                cur, _ = self.separator.parse(cur)
            except ParseError as e:
                if e.fatal:
                    raise e.shifted(_consumed(input, cur)) from None
                return cur, items
            # element and separator both zero-width: no progress possible
            if len(cur) == len(start):
                return cur, items


class Wrapped(Parser):
    def __init__(self, left: ParserLike, parser: ParserLike, right: ParserLike):
        self.left = as_parser(left)
        self.parser = as_parser(parser)
        self.right = as_parser(right)

    def parse(self, input: Input) -> ParseResult:
        cur, _ = self.left.parse(input)
        try:
            cur, out = self.parser.parse(cur)
            cur, _ = self.right.parse(cur)
        except ParseError as e:
            raise e.shifted(_consumed(input, cur)) from None
        return cur, out


class Discard(Parser):
    def __init__(self, discard: ParserLike, parser: ParserLike):
        self.discard = as_parser(discard)
        self.parser = as_parser(parser)

    def parse(self, input: Input) -> ParseResult:
        cur, _ = self.discard.parse(input)
        try:
            return self.parser.parse(cur)
        except ParseError as e:
            raise e.shifted(_consumed(input, cur)) from None


class DropUntil(Parser):
    """Skip ahead one unit at a time until `until` matches.

    Each offset re-runs `until` from scratch, so the cost is quadratic in
    the distance skipped. Keep it to short lookaheads.
    """

    def __init__(self, until: ParserLike):
        self.until = as_parser(until)

    def parse(self, input: Input) -> ParseResult:
        offset = 0
        while offset < len(input):
            try:
                return self.until.parse(input.drop_first(offset))
            except ParseError as e:
                if e.fatal:
                    raise e.shifted(offset) from None
                offset += 1
        raise ParseError(0, ErrorSource.LOOKAHEAD_EXHAUSTED, "could not find any match for drop until")


class Opt(Parser):
    def __init__(self, parser: ParserLike):
        self.parser = as_parser(parser)

    def parse(self, input: Input) -> ParseResult:
        try:
            return self.parser.parse(input)
        except ParseError as e:
            if e.fatal:
                raise
            return input, None


class ParseIf(Parser):
    """Run `parser` only when `condition` matches first; otherwise yield None."""

    def __init__(self, condition: ParserLike, parser: ParserLike):
        self.condition = as_parser(condition)
        self.parser = as_parser(parser)

    def parse(self, input: Input) -> ParseResult:
        try:
            cur, _ = self.condition.parse(input)
        except ParseError as e:
            if e.fatal:
                raise
            return input, None
        try:
            return self.parser.parse(cur)
        except ParseError as e:
            raise e.shifted(_consumed(input, cur)) from None


class Value(Parser):
    def __init__(self, value: Any, parser: ParserLike):
        self.value = value
        self.parser = as_parser(parser)

    def parse(self, input: Input) -> ParseResult:
        rest, _ = self.parser.parse(input)
        return rest, self.value


class Lazy(Parser):
    """Forward reference resolved on first use, for grammars defined out of order."""

    def __init__(self, factory: Callable[[], ParserLike]):
        self.factory = factory
        self._parser: Optional[Parser] = None

    def parse(self, input: Input) -> ParseResult:
        if self._parser is None:
            self._parser = as_parser(self.factory())
        return self._parser.parse(input)


# ---- free-function spellings ----

def and_(first: ParserLike, second: ParserLike) -> And:
    return And(first, second)

def or_(first: ParserLike, second: ParserLike) -> Or:
    return Or(first, second)

def choice(*alternatives: ParserLike) -> Or:
    return Or(*alternatives)

def map_(parser: ParserLike, f: Callable[[Any], Any]) -> Map:
    return Map(parser, f)

def many(parser: ParserLike) -> Many:
    return Many(parser)

def sep_by(parser: ParserLike, separator: ParserLike) -> SepBy:
    return SepBy(parser, separator)

def wrapped(left: ParserLike, parser: ParserLike, right: ParserLike) -> Wrapped:
    return Wrapped(left, parser, right)

def discard(d: ParserLike, parser: ParserLike) -> Discard:
    return Discard(d, parser)

def drop_until(until: ParserLike) -> DropUntil:
    return DropUntil(until)

def opt(parser: ParserLike) -> Opt:
    return Opt(parser)

def parse_if(condition: ParserLike, parser: ParserLike) -> ParseIf:
    return ParseIf(condition, parser)

def value(v: Any, parser: ParserLike) -> Value:
    return Value(v, parser)

def lazy(factory: Callable[[], ParserLike]) -> Lazy:
    return Lazy(factory)
