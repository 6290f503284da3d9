# pepser/__init__.py
"""pepser: a small parser-combinator engine.

This package provides:
- `TextSpan`, the immutable input view every parser consumes
- `ParseError`, a positioned failure whose offset composes through combinators
- combinators (`and_`, `or_`, `many`, `sep_by`, `wrapped`, `drop_until`, ...)
- primitive matchers (`sequence`, `take_while`, `ws`, ...)
- a JSON grammar built purely from the above (`pepser.json`)
"""

from .span import Input, TextSpan
from .errors import ErrorSource, ParseError, format_error
from .combinators import (
    Parser, FnParser, as_parser,
    And, Or, Map, Many, SepBy, Wrapped, Discard, DropUntil, Opt, ParseIf, Value, Lazy,
    and_, or_, choice, map_, many, sep_by, wrapped, discard, drop_until, opt, parse_if,
    value, lazy,
)
from .primitives import (
    sequence, take_while, none_of, any_of, not_char, digits, ws, char_class,
    is_whitespace, is_digit,
)
