from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import LoxNameError, run_output_case

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            var a = "global";
            {
              var a = "inner";
              print a;
            }
            print a;
            """
        ),
        ["inner", "global"],
        None,
        id="shadowing-does-not-destroy-outer",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            {
              a = 2;
            }
            print a;
            """
        ),
        ["2"],
        None,
        id="assign-reaches-enclosing-scope",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            {
              var a = 10;
              a = 20;
              print a;
            }
            print a;
            """
        ),
        ["20", "1"],
        None,
        id="assign-targets-nearest-binding",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            var a = 2;
            print a;
            """
        ),
        ["2"],
        None,
        id="redefinition-overwrites",
    ),
    pytest.param(
        dedent(
            """\
            var a;
            print a;
            """
        ),
        ["nil"],
        None,
        id="uninitialized-is-nil",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            {
              var a = a + 1;
              print a;
            }
            """
        ),
        ["2"],
        None,
        id="initializer-sees-outer-binding",
    ),
    pytest.param(
        dedent(
            """\
            {
              var hidden = 1;
            }
            print hidden;
            """
        ),
        None,
        LoxNameError,
        id="block-locals-do-not-leak",
    ),
    pytest.param("print missing;", None, LoxNameError, id="undefined-read"),
    pytest.param("missing = 1;", None, LoxNameError, id="undefined-assign"),
    pytest.param(
        dedent(
            """\
            {
              undeclared = 1;
            }
            """
        ),
        None,
        LoxNameError,
        id="assign-never-creates-binding",
    ),
    pytest.param(
        dedent(
            """\
            var a = "outer";
            fun show() { print a; }
            {
              var a = "block";
              show();
            }
            """
        ),
        ["outer"],
        None,
        id="lexical-not-dynamic-scope",
    ),
    pytest.param(
        dedent(
            """\
            var x = 0;
            while (x < 2) {
              var seen = x;
              x = x + 1;
              print seen;
            }
            """
        ),
        ["0", "1"],
        None,
        id="loop-body-block-fresh-each-pass",
    ),
]


@pytest.mark.parametrize("source, expected_lines, expected_exc", SCENARIOS)
def test_scoping(source: str, expected_lines, expected_exc) -> None:
    run_output_case(source, expected_lines, expected_exc)


def test_undefined_variable_message_names_variable() -> None:
    with pytest.raises(LoxNameError) as exc_info:
        run_output_case("print ghost;", None, None)
    err = exc_info.value
    assert str(err) == "Undefined variable 'ghost'."
    assert err.token.lexeme == "ghost"
    assert err.line == 1
