"""
Tests for the error hierarchy.
"""
from enum import Enum

from clinscore.errors import (
    ADVISORY,
    BLOCKING,
    CalculatorError,
    MissingFieldError,
    ParseError,
    RangeError,
    UnknownCalculatorError,
    UnknownFieldError,
)


class Colour(Enum):
    RED = "red"


def test_all_errors_share_the_base():
    for exc in (ParseError("age", "x", "a number"), RangeError("age", 400, "too old"),
                MissingFieldError("age"), UnknownFieldError("x"), UnknownCalculatorError("x")):
        assert isinstance(exc, CalculatorError)
        assert set(exc.to_dict()) == {"error", "message", "severity", "details"}


def test_codes():
    assert ParseError("age", "x", "a number").code == "PARSE_ERROR"
    assert RangeError("age", 400, "too old").code == "RANGE_ERROR"
    assert MissingFieldError("age").code == "MISSING_FIELD"
    assert UnknownFieldError("x").code == "UNKNOWN_FIELD"
    assert UnknownCalculatorError("x").code == "UNKNOWN_CALCULATOR"


def test_severity():
    assert RangeError("age", 400, "too old").blocking
    assert not RangeError("age", 400, "too old", severity=ADVISORY).blocking
    assert UnknownFieldError("x").severity == ADVISORY
    assert MissingFieldError("age").severity == BLOCKING


def test_details_are_json_friendly():
    err = ParseError("colour", Colour.RED, "one of blue")
    assert err.details["raw"] == "red"
    err = ParseError("when", object, "a date")
    assert isinstance(err.details["raw"], str)


def test_missing_field_message_includes_label():
    assert MissingFieldError("age", "Age").message == "Missing required field: age (Age)"


def test_equality_by_payload():
    assert MissingFieldError("age") == MissingFieldError("age")
    assert MissingFieldError("age") != MissingFieldError("sex")
