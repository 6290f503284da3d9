import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from pepser import ErrorSource, ParseError, TextSpan
from pepser.json import (
    DEFAULT_MAX_DEPTH, Array, Boolean, JsonGrammar, Null, Number, Object, String,
    decode_number, extract_json, from_python, json_value, parse_json, shared_grammar,
)


# ---- literals ----

def test_null_and_booleans():
    assert parse_json("null") == Null()
    assert parse_json("true") == Boolean(True)
    assert parse_json("  false ") == Boolean(False)


def test_json_value_returns_remaining_input():
    rest, val = json_value("true, 1")
    assert val == Boolean(True)
    assert str(rest) == ", 1"
    assert rest.offset == 4


def test_nested_booleans():
    assert parse_json("[true, false, [false]]") == Array(
        [Boolean(True), Boolean(False), Array([Boolean(False)])]
    )


# ---- strings ----

def test_plain_string():
    assert parse_json('"hello world"') == String("hello world")
    assert parse_json('""') == String("")


def test_escaped_quote():
    assert parse_json('"a\\"b"') == String('a"b')


@pytest.mark.parametrize("escape, decoded", [
    ("\\\\", "\\"),
    ('\\"', '"'),
    ("\\n", "\n"),
    ("\\t", "\t"),
    ("\\r", "\r"),
    ("\\/", "/"),
    ("\\f", "\f"),
    ("\\b", "\b"),
])
def test_escape_table(escape, decoded):
    assert parse_json('"x' + escape + 'y"') == String("x" + decoded + "y")


def test_unicode_escape_is_not_decoded():
    with pytest.raises(ParseError):
        parse_json('"\\u0041"')


def test_non_ascii_text_passes_through():
    assert parse_json('"καλημέρα 👋"') == String("καλημέρα 👋")


def test_unterminated_string():
    g = JsonGrammar()
    with pytest.raises(ParseError) as ei:
        g.string.parse(TextSpan('"abc'))
    assert ei.value.offset == 4


# ---- numbers ----

@pytest.mark.parametrize("text, expected", [
    ("0", 0.0),
    ("7", 7.0),
    ("-0", -0.0),
    ("42", 42.0),
    ("-17", -17.0),
    ("3.25", 3.25),
    ("0.5", 0.5),
    ("1e3", 1000.0),
    ("1E+2", 100.0),
    ("25e-2", 0.25),
    ("-15.3E2", -1530.0),
    ("0.1", 0.1),
])
def test_numbers(text, expected):
    assert parse_json(text) == Number(expected)


def test_exponent_scales_instead_of_powering_mantissa():
    # (-15.3) ** 2 would be 234.09
    assert parse_json("-15.3E2").value == -1530.0


def test_number_rounds_once():
    assert parse_json("12345678901234567890").value == 1.2345678901234567e19
    assert parse_json("1.7976931348623157e308").value == 1.7976931348623157e308


def test_out_of_range_numbers_saturate():
    assert math.isinf(parse_json("1e400").value)
    assert parse_json("-1e-400").value == 0.0


def test_decode_number_directly():
    assert decode_number(1, "15", "3", "2") == 1530.0
    assert decode_number(-1, "2", None, "0") == -2.0


def test_leading_zero_stops_integral_part():
    rest, val = json_value("0123")
    assert val == Number(0.0)
    assert str(rest) == "123"
    with pytest.raises(ParseError) as ei:
        parse_json("0123")
    assert ei.value.source is ErrorSource.TRAILING_INPUT
    assert ei.value.offset == 1


def test_dangling_decimal_point_fails():
    with pytest.raises(ParseError):
        parse_json("1.")


def test_exponent_without_digits_is_left_unconsumed():
    rest, val = json_value("2e")
    assert val == Number(2.0)
    assert str(rest) == "e"


# ---- arrays ----

def test_empty_array():
    assert parse_json("[]") == Array([])
    assert parse_json("[   ]") == Array([])


def test_array_whitespace_everywhere():
    assert parse_json(" [ 1 ,\n 2\t, \"x\" ] ") == Array([Number(1.0), Number(2.0), String("x")])


def test_array_trailing_comma_accepted():
    assert parse_json("[1,]") == Array([Number(1.0)])
    assert parse_json("[1, 2 , ]") == Array([Number(1.0), Number(2.0)])


@pytest.mark.parametrize("text", ["[,]", "[1,,]", "[1,,2]"])
def test_array_stray_commas_rejected(text):
    with pytest.raises(ParseError):
        parse_json(text)


def test_unclosed_array():
    with pytest.raises(ParseError):
        parse_json("[1,2")


# ---- objects ----

def test_empty_object():
    assert parse_json("{}") == Object({})
    assert parse_json("{ \n }") == Object({})


def test_object_members():
    val = parse_json('{"a": 1, "b" : [null], "c":{"d":"e"}}')
    assert val == Object({
        "a": Number(1.0),
        "b": Array([Null()]),
        "c": Object({"d": String("e")}),
    })
    assert val["c"]["d"] == String("e")
    assert "b" in val


def test_duplicate_keys_last_wins():
    val = parse_json('{"a":1,"a":2}')
    assert len(val) == 1
    assert val["a"] == Number(2.0)


def test_object_trailing_comma_accepted():
    assert parse_json('{"a":1,}') == Object({"a": Number(1.0)})
    with pytest.raises(ParseError):
        parse_json('{"a":1,,}')


def test_object_key_must_be_string():
    with pytest.raises(ParseError):
        parse_json("{a: 1}")


def test_object_missing_colon():
    with pytest.raises(ParseError):
        parse_json('{"a" 1}')


def test_realistic_document():
    doc = """    {
        "description": "the description of the test case",
        "schema": {"the schema that should" : "be validated against"},
        "tests": [
            {
                "description": "a specific test of a valid instance",
                "data": "the instance",
                "valid": true
            },
            {
                "description": "another specific test this time, invalid",
                "data": -15.3E2,
                "valid": false
            }
        ]
    }"""
    assert parse_json(doc).to_python() == {
        "description": "the description of the test case",
        "schema": {"the schema that should": "be validated against"},
        "tests": [
            {"description": "a specific test of a valid instance", "data": "the instance", "valid": True},
            {"description": "another specific test this time, invalid", "data": -1530.0, "valid": False},
        ],
    }


# ---- errors ----

def test_trailing_input_reported_at_offset():
    with pytest.raises(ParseError) as ei:
        parse_json("[1] 2")
    assert ei.value.source is ErrorSource.TRAILING_INPUT
    assert ei.value.offset == 4


def test_empty_document():
    with pytest.raises(ParseError):
        parse_json("")
    with pytest.raises(ParseError):
        parse_json("   ")


def test_failure_reports_last_alternative():
    # ordered choice keeps only the number branch's complaint
    with pytest.raises(ParseError) as ei:
        parse_json("  nul")
    assert ei.value.offset == 2
    assert ei.value.source is ErrorSource.PREDICATE_EXHAUSTED


def test_nesting_limit():
    assert parse_json("[[[1]]]", max_depth=4) == from_python([[[1]]])
    with pytest.raises(ParseError) as ei:
        parse_json("[[[1]]]", max_depth=3)
    assert ei.value.source is ErrorSource.NESTING_TOO_DEEP
    assert ei.value.offset == 3


def test_deep_input_fails_cleanly_with_default_limit():
    with pytest.raises(ParseError) as ei:
        parse_json("[" * 5000 + "]" * 5000)
    assert ei.value.source is ErrorSource.NESTING_TOO_DEEP


def test_grammar_instance_resets_depth():
    g = JsonGrammar(max_depth=2)
    for _ in range(3):
        rest, val = g.value(TextSpan("[1]"))
        assert val == Array([Number(1.0)])
    with pytest.raises(ParseError):
        g.value(TextSpan("[[1]]"))
    assert g.value(TextSpan("[2]"))[1] == Array([Number(2.0)])


def test_grammar_shared_across_threads():
    g = JsonGrammar(max_depth=40)
    text = "[" * 30 + "]" * 30

    def work(_):
        return [g.value(TextSpan(text))[0] for _ in range(50)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(work, range(8)))
    assert all(str(rest) == "" for batch in results for rest in batch)
    with pytest.raises(ParseError) as ei:
        g.value(TextSpan("[" * 41 + "]" * 41))
    assert ei.value.source is ErrorSource.NESTING_TOO_DEEP


def test_entry_points_reuse_one_grammar():
    assert shared_grammar(5) is shared_grammar(5)
    assert shared_grammar(5) is not shared_grammar(6)
    assert shared_grammar().max_depth == DEFAULT_MAX_DEPTH


def test_invalid_max_depth():
    with pytest.raises(ValueError):
        parse_json("1", max_depth=0)


# ---- extraction ----

def test_extract_json_skips_prose():
    rest, val = extract_json('Sure! Here it is: {"ok": true, "n": [1, 2]} -- done')
    assert val.to_python() == {"ok": True, "n": [1.0, 2.0]}
    assert str(rest) == " -- done"


def test_extract_json_skips_broken_candidates():
    rest, val = extract_json("[oops] then [3]")
    assert val == Array([Number(3.0)])


def test_extract_json_without_container():
    with pytest.raises(ParseError) as ei:
        extract_json("just words, 12 and true")
    assert ei.value.source is ErrorSource.LOOKAHEAD_EXHAUSTED


# ---- value tree ----

def test_to_python_and_back():
    data = {"a": [None, True, 1.5, "s"], "b": {}}
    tree = from_python(data)
    assert tree.to_python() == data
    assert parse_json('{"a": [null, true, 1.5, "s"], "b": {}}') == tree


def test_from_python_rejects_unknown_types():
    with pytest.raises(TypeError):
        from_python({1, 2})


def test_values_are_immutable():
    arr = Array([Number(1.0)])
    assert isinstance(arr.items, tuple)
    with pytest.raises(Exception):
        arr.items = ()
