# pepser/cli.py
"""pepser – command line front end for the JSON grammar

Examples)
    $ pepser parse --text '[true, false, [false]]'
    $ pepser parse --input data.json --python -D
    $ pepser extract --text 'reply: {"ok": true} -- end'

Commands
--------
- parse   : decode a whole JSON document and print the value tree
- extract : find the first array/object embedded in free text and print it

With -D/--debug, progress notes go to stderr. Failures print a line:col
position and a caret snippet, and exit with status 2.
"""

from __future__ import annotations
import argparse
import json
import sys
from typing import Optional

from .errors import ParseError, format_error
from .json import DEFAULT_MAX_DEPTH, extract_json, parse_json

# ------------------------------
# Helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _read_source(args) -> str:
    if args.text is not None:
        return args.text
    with open(args.input, "r", encoding="utf-8") as f:
        return f.read()


def _render(value, as_python: bool) -> str:
    if as_python:
        return json.dumps(value.to_python(), ensure_ascii=False)
    return repr(value)

# ------------------------------
# Commands
# ------------------------------

def cmd_parse(args) -> int:
    try:
        text = _read_source(args)
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2
    if args.debug: _eprint(f"[DEBUG] input ready | chars={len(text)} max_depth={args.max_depth}")

    try:
        value = parse_json(text, max_depth=args.max_depth)
    except ParseError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(format_error(text, e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug: _eprint(f"[DEBUG] parsed | type={type(value).__name__}")
    print(_render(value, args.python))
    return 0


def cmd_extract(args) -> int:
    try:
        text = _read_source(args)
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2
    if args.debug: _eprint(f"[DEBUG] input ready | chars={len(text)}")

    try:
        rest, value = extract_json(text, max_depth=args.max_depth)
    except ParseError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(format_error(text, e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug: _eprint(f"[DEBUG] found value | ends at offset {rest.offset}, {len(rest)} chars left")
    print(_render(value, args.python))
    return 0

# ------------------------------
# Entry point
# ------------------------------

def _add_source_args(p: argparse.ArgumentParser) -> None:
    src_group = p.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="input text given directly")
    src_group.add_argument("--input", help="path of a UTF-8 input file")
    p.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH, help="maximum array/object nesting")
    p.add_argument("--python", action="store_true", help="print plain JSON instead of the value tree")
    p.add_argument("-D", "--debug", action="store_true", help="print progress notes to stderr")


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="pepser", description="pepser JSON parser CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_parse = sub.add_parser("parse", help="decode a complete JSON document")
    _add_source_args(p_parse)
    p_parse.set_defaults(func=cmd_parse)

    p_extract = sub.add_parser("extract", help="find the first JSON array/object inside arbitrary text")
    _add_source_args(p_extract)
    p_extract.set_defaults(func=cmd_extract)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
