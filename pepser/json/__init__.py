# pepser/json/__init__.py
"""JSON on top of pepser: value tree plus the grammar entry points."""

from .value import (
    Null, Boolean, Number, String, Array, Object, JsonValue, from_python,
)
from .grammar import (
    DEFAULT_MAX_DEPTH, ESCAPES, JsonGrammar, decode_number, shared_grammar,
    json_value, parse_json, extract_json,
)
