from __future__ import annotations

import pytest

from tests.support.harness import (
    LoxTypeError,
    LoxZeroDivisionError,
    ParseError,
    eval_expr,
    run_expr_case,
)

SCENARIOS = [
    pytest.param("1 + 2 * 3", ("number", 7), None, id="precedence-mul-over-add"),
    pytest.param("(1 + 2) * 3", ("number", 9), None, id="precedence-group"),
    pytest.param("10 - 4 - 3", ("number", 3), None, id="sub-left-assoc"),
    pytest.param("7 / 2", ("number", 3.5), None, id="true-division"),
    pytest.param("-(3)", ("number", -3), None, id="negate"),
    pytest.param("--3", ("number", 3), None, id="double-negate"),
    pytest.param("2 > 1", ("bool", True), None, id="gt"),
    pytest.param("2 >= 2", ("bool", True), None, id="gte"),
    pytest.param("1 < 1", ("bool", False), None, id="lt"),
    pytest.param("1 <= 1", ("bool", True), None, id="lte"),
    pytest.param('"a" + "b"', ("string", "ab"), None, id="concat-strings"),
    pytest.param('"a" + 1', ("string", "a1"), None, id="concat-string-number"),
    pytest.param('1 + "a"', ("string", "1a"), None, id="concat-number-string"),
    pytest.param('"n" + 2.5', ("string", "n2.5"), None, id="concat-fraction"),
    pytest.param('"a" + true', ("string", "atrue"), None, id="concat-bool"),
    pytest.param('"a" + nil', None, LoxTypeError, id="concat-nil-rejected"),
    pytest.param('nil + "a"', None, LoxTypeError, id="concat-nil-left-rejected"),
    pytest.param("true + 1", None, LoxTypeError, id="add-bool-number"),
    pytest.param("1 / 0", None, LoxZeroDivisionError, id="divide-by-zero"),
    pytest.param("0 / 0", None, LoxZeroDivisionError, id="zero-by-zero"),
    pytest.param('-"a"', None, LoxTypeError, id="negate-string"),
    pytest.param('1 < "2"', None, LoxTypeError, id="compare-mixed"),
    pytest.param('"a" * 2', None, LoxTypeError, id="mul-string"),
    pytest.param("nil == nil", ("bool", True), None, id="eq-nil-nil"),
    pytest.param("nil == false", ("bool", False), None, id="eq-nil-false"),
    pytest.param("0 == nil", ("bool", False), None, id="eq-zero-nil"),
    pytest.param('1 == "1"', ("bool", False), None, id="eq-no-coercion"),
    pytest.param('"x" == "x"', ("bool", True), None, id="eq-strings"),
    pytest.param("1 != 2", ("bool", True), None, id="neq"),
    pytest.param("true == true", ("bool", True), None, id="eq-bools"),
    pytest.param("!nil", ("bool", True), None, id="not-nil"),
    pytest.param("!0", ("bool", False), None, id="zero-is-truthy"),
    pytest.param('!""', ("bool", False), None, id="empty-string-is-truthy"),
    pytest.param("nil or 3", ("number", 3), None, id="or-returns-right"),
    pytest.param('"left" or 3', ("string", "left"), None, id="or-returns-left"),
    pytest.param("nil and 3", ("nil", None), None, id="and-returns-left"),
    pytest.param("1 and 2", ("number", 2), None, id="and-returns-right"),
    pytest.param("false and (1/0 == 1)", ("bool", False), None, id="and-short-circuit"),
    pytest.param("true or (1/0 == 1)", ("bool", True), None, id="or-short-circuit"),
    pytest.param("true ? 1 : false ? 2 : 3", ("number", 1), None, id="ternary-right-assoc-0"),
    pytest.param("false ? 1 : true ? 2 : 3", ("number", 2), None, id="ternary-right-assoc-1"),
    pytest.param("false ? 1/0 : 4", ("number", 4), None, id="ternary-untaken-branch-lazy"),
    pytest.param("nil ? 1 : 2", ("number", 2), None, id="ternary-nil-falsy"),
    pytest.param("clock", ("fn", "<native fn>"), None, id="native-value"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source: str, expectation, expected_exc) -> None:
    run_expr_case(source, expectation, expected_exc)


def test_division_error_message() -> None:
    with pytest.raises(LoxZeroDivisionError) as exc_info:
        eval_expr("1 / 0")
    assert "divide by zero" in str(exc_info.value)
    assert exc_info.value.token.lexeme == "/"


@pytest.mark.parametrize(
    "source, message",
    [
        pytest.param("-nil", "Operand must be a number.", id="unary"),
        pytest.param("1 - nil", "Operands must be numbers.", id="binary"),
        pytest.param("nil + nil", "Invalid operands for + operation.", id="plus"),
    ],
)
def test_type_error_messages(source: str, message: str) -> None:
    with pytest.raises(LoxTypeError) as exc_info:
        eval_expr(source)
    assert str(exc_info.value) == message


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("(a) = 1", id="invalid-assignment-target"),
        pytest.param("1 + @ 2", id="unexpected-character"),
    ],
)
def test_reported_static_error_is_not_evaluated(source: str) -> None:
    with pytest.raises(ParseError):
        eval_expr(source)
