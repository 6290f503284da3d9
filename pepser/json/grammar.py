# pepser/json/grammar.py
"""JSON grammar assembled from pepser combinators.

    value   := ws (null | boolean | string | array | object | number)
    array   := "[" ws (value ("," value)*)? ws "]"
    object  := "{" (pair ("," pair)*)? ws "}"
    pair    := ws string ws ":" value ws
    string  := '"' (plain-run | escape)* '"'
    number  := "-"? ("0" | digits) ("." digits)? (("e"|"E") ("+"|"-")? digits)?

Strings understand the escapes in `ESCAPES` only; `\\u` sequences are not
decoded. Numbers are always decoded to a float.

The grammar is recursive at exactly one edge: arrays and pairs call back
into `JsonGrammar.value`, which also counts nesting so that hostile input
fails with NESTING_TOO_DEEP instead of exhausting the Python stack. The
count lives in a context variable, so one grammar can serve any number of
threads or tasks at once.
"""

from __future__ import annotations
from contextvars import ContextVar
from functools import lru_cache
from typing import Optional, Tuple, Union

from ..combinators import (
    Parser, choice, discard, drop_until, many, opt, parse_if, sep_by, value, wrapped,
)
from ..errors import ErrorSource, ParseError, excerpt
from ..primitives import digits, none_of, sequence, ws
from ..span import TextSpan
from .value import Array, Boolean, JsonValue, Null, Number, Object, String

DEFAULT_MAX_DEPTH = 64

ESCAPES = {
    "\\\\": "\\",
    "\\\"": "\"",
    "\\n": "\n",
    "\\t": "\t",
    "\\r": "\r",
    "\\/": "/",
    "\\f": "\f",
    "\\b": "\b",
}


def decode_number(sign: int, integral: str, fraction: Optional[str], exponent: str = "0") -> float:
    """sign * (integral.fraction) * 10**exponent, rounded once to a double.

    Out-of-range magnitudes saturate to +/-inf or 0.0 like any double.
    """
    literal = f"{integral}.{fraction or '0'}e{exponent}"
    return float(literal) if sign > 0 else -float(literal)


def _punct(ch: str) -> Parser:
    return discard(ws(), sequence(ch))


class JsonGrammar:
    """The JSON productions, built once and shareable across threads."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth
        self._depth: ContextVar[int] = ContextVar(f"pepser_json_depth_{id(self)}", default=0)

        self.null = sequence("null").map(lambda _: Null())
        self.boolean = (sequence("true") | sequence("false")).map(lambda s: Boolean(str(s) == "true"))

        escaped = choice(*(value(ch, sequence(lit)) for lit, ch in ESCAPES.items()))
        self.string = wrapped(
            sequence('"'),
            many(none_of('"\\').map(str) | escaped).map("".join),
            sequence('"'),
        )

        sign = opt(sequence("-")).map(lambda m: 1 if m is None else -1)
        integral = (sequence("0") | digits()).map(str)
        fraction = parse_if(sequence("."), digits().map(str))
        exp_sign = opt(value(-1, sequence("-")) | value(1, sequence("+"))).map(lambda s: s or 1)
        exponent = opt(
            discard(sequence("e") | sequence("E"), exp_sign + digits())
            .map(lambda p: ("-" if p[0] < 0 else "") + str(p[1]))
        ).map(lambda e: e or "0")
        self.number = (sign + integral + fraction + exponent).map(
            lambda p: Number(decode_number(p[0][0][0], p[0][0][1], p[0][1], p[1]))
        )

        self.array = wrapped(
            sequence("["),
            wrapped(ws(), sep_by(self.value, _punct(",")), ws()),
            sequence("]"),
        ).map(Array)

        pair = wrapped(ws(), self.string + discard(_punct(":"), self.value), ws())
        self.object = wrapped(
            sequence("{"),
            sep_by(pair, sequence(",")),
            _punct("}"),
        ).map(Object.from_pairs)

        self._value = discard(ws(), choice(
            self.null,
            self.boolean,
            self.string.map(String),
            self.array,
            self.object,
            self.number,
        ))
        self.container = discard(ws(), self.array | self.object)

    def value(self, input: TextSpan) -> Tuple[TextSpan, JsonValue]:
        depth = self._depth.get()
        if depth >= self.max_depth:
            raise ParseError(0, ErrorSource.NESTING_TOO_DEEP,
                             f"nesting deeper than {self.max_depth} levels")
        token = self._depth.set(depth + 1)
        try:
            return self._value.parse(input)
        finally:
            self._depth.reset(token)


Source = Union[str, TextSpan]


@lru_cache(maxsize=16)
def shared_grammar(max_depth: int = DEFAULT_MAX_DEPTH) -> JsonGrammar:
    """Shared grammar for `max_depth`, built on first use."""
    return JsonGrammar(max_depth)


def json_value(source: Source, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[TextSpan, JsonValue]:
    """Parse one value from the front of `source`; returns (remaining, value)."""
    return shared_grammar(max_depth).value(TextSpan.of(source))


def parse_json(text: Source, *, max_depth: int = DEFAULT_MAX_DEPTH) -> JsonValue:
    """Parse a complete JSON document. Only whitespace may follow the value."""
    span = TextSpan.of(text)
    rest, val = json_value(span, max_depth=max_depth)
    rest, _ = ws().parse(rest)
    if len(rest) > 0:
        raise ParseError(len(span) - len(rest), ErrorSource.TRAILING_INPUT,
                         f"unexpected trailing input '{excerpt(rest.diagnostic_text())}'")
    return val


def extract_json(text: Source, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[TextSpan, JsonValue]:
    """Find the first array or object embedded in `text`, skipping whatever precedes it."""
    return drop_until(shared_grammar(max_depth).container).parse(TextSpan.of(text))
