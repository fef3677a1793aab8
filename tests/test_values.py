from smartflow.rules.values import (
    MISSING,
    BoolVal,
    ListVal,
    NumberVal,
    StringVal,
    parse_number,
    tag,
)

def test_tagging():
    assert tag(None) is MISSING
    assert tag(True) == BoolVal(raw=True)
    assert tag(3) == NumberVal(raw=3.0)
    assert tag("3") == StringVal(raw="3")
    assert tag(["a", 1, True]) == ListVal(items=("a", "1", "true"))
    assert tag({}) is MISSING

def test_text_forms():
    assert MISSING.text() == ""
    assert tag(21).text() == "21"
    assert tag(21.0).text() == "21"
    assert tag(1.5).text() == "1.5"
    assert tag(False).text() == "false"
    assert tag(["x", "y"]).text() == "x,y"

def test_parse_number_accepts_plain_literals_only():
    assert parse_number("42") == 42.0
    assert parse_number(" -3.5 ") == -3.5
    assert parse_number("1e3") == 1000.0
    assert parse_number(".5") == 0.5
    for bad in ("", "  ", "abc", "nan", "inf", "1_000", "1,000", "0x10"):
        assert parse_number(bad) is None

def test_numbers():
    assert tag("18").number() == 18.0
    assert tag(18).number() == 18.0
    assert tag(float("nan")).number() is None
    assert tag(True).number() is None
    assert tag([1]).number() is None
    assert MISSING.number() is None

def test_emptiness():
    assert MISSING.empty()
    assert tag("").empty()
    assert tag(" \t").empty()
    assert tag([]).empty()
    assert not tag(0).empty()
    assert not tag(False).empty()
    assert not tag("x").empty()
    assert not tag({"a": 1}).empty()

def test_non_finite_text_forms():
    assert tag(float("nan")).text() == "NaN"
    assert tag(float("inf")).text() == "Infinity"
    assert tag(float("-inf")).text() == "-Infinity"
