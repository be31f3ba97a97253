from __future__ import annotations

import io
from textwrap import dedent

import pytest

from lox_ref.runtime import LoxRuntimeError
from tests.support.harness import (
    TT,
    ErrorReporter,
    Interpreter,
    SilentReporter,
    Tok,
    run_source,
)


def _reporter() -> tuple[ErrorReporter, io.StringIO]:
    stream = io.StringIO()
    return ErrorReporter(stream=stream), stream


def test_report_format_and_flag() -> None:
    reporter, stream = _reporter()
    reporter.report(3, "Something broke.")

    assert stream.getvalue() == "[line 3] Error: Something broke.\n"
    assert reporter.had_error
    assert not reporter.had_runtime_error


@pytest.mark.parametrize(
    "token, expected",
    [
        pytest.param(Tok(TT.IDENT, "foo", None, 2), "[line 2] Error at 'foo': Bad.", id="at-lexeme"),
        pytest.param(Tok(TT.EOF, "", None, 9), "[line 9] Error at end: Bad.", id="at-end"),
    ],
)
def test_token_error_format(token: Tok, expected: str) -> None:
    reporter, stream = _reporter()
    reporter.error(token, "Bad.")
    assert stream.getvalue().splitlines() == [expected]


def test_runtime_error_format() -> None:
    reporter, stream = _reporter()
    reporter.runtime_error(LoxRuntimeError(Tok(TT.SLASH, "/", None, 4), "Cannot divide by zero."))

    assert stream.getvalue() == "Cannot divide by zero.\n[line 4]\n"
    assert reporter.had_runtime_error
    assert not reporter.had_error


def test_runtime_error_without_token_omits_line() -> None:
    reporter, stream = _reporter()
    reporter.runtime_error(LoxRuntimeError(None, "Stack overflow."))
    assert stream.getvalue() == "Stack overflow.\n"


def test_reset_clears_only_static_flag() -> None:
    reporter = SilentReporter()
    reporter.report(1, "x")
    reporter.runtime_error(LoxRuntimeError(None, "y"))
    reporter.reset()

    assert not reporter.had_error
    assert reporter.had_runtime_error


def test_default_stream_is_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    ErrorReporter().report(1, "to stderr")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "[line 1] Error: to stderr\n"


def test_static_error_prevents_execution() -> None:
    result = run_source('print "side effect";\nprint ;')

    assert result.had_error
    assert result.output == []
    assert result.diagnostics == ["[line 2] Error at ';': Expect expression."]


def test_runtime_error_halts_remaining_statements() -> None:
    result = run_source("print 1;\nprint 1 / 0;\nprint 2;")

    assert result.output == ["1"]
    assert result.diagnostics == ["Cannot divide by zero.\n[line 2]"]


def test_environment_restored_after_error_inside_block() -> None:
    result = run_source(dedent(
        """\
        var a = "global";
        {
          var a = "block";
          print nope;
        }
        """
    ))
    assert result.had_runtime_error

    interp = result.interpreter
    assert interp.environment is interp.globals
    assert interp.call_depth == 0

    follow_up = run_source("print a;", interpreter=interp)
    assert follow_up.output == ["global"]


def test_environment_restored_after_error_inside_call() -> None:
    result = run_source(dedent(
        """\
        fun boom(x) {
          var local = x;
          return local + nil;
        }
        boom(1);
        """
    ))
    assert result.diagnostics == ["Invalid operands for + operation.\n[line 3]"]

    interp = result.interpreter
    assert interp.environment is interp.globals
    assert interp.call_depth == 0
    assert "local" not in interp.globals.vars


def test_globals_survive_between_runs() -> None:
    first = run_source("var kept = 41;")
    second = run_source("kept = kept + 1; print kept;", interpreter=first.interpreter)
    assert second.output == ["42"]


def test_runtime_error_line_comes_from_operator_token() -> None:
    result = run_source('var a = 1;\nvar b = "s";\nprint a\n  - b;')
    assert result.diagnostics == ["Operands must be numbers.\n[line 4]"]


def test_unbounded_recursion_reports_stack_overflow() -> None:
    result = run_source("fun f() { return f(); }\nf();")

    assert result.had_runtime_error
    assert result.diagnostics == ["Stack overflow."]
    assert result.interpreter.environment is result.interpreter.globals
    assert result.interpreter.call_depth == 0


def test_py_trace_printed_when_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOX_DEBUG_PY_TRACE", "1")
    stream = io.StringIO()
    interp = Interpreter(reporter=ErrorReporter(stream=stream), out=io.StringIO())

    run_source("print -nil;", interpreter=interp)

    text = stream.getvalue()
    assert text.startswith("Operand must be a number.\n[line 1]\n")
    assert "Python traceback:" in text


def test_py_trace_silent_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOX_DEBUG_PY_TRACE", raising=False)
    stream = io.StringIO()
    interp = Interpreter(reporter=ErrorReporter(stream=stream), out=io.StringIO())

    run_source("print -nil;", interpreter=interp)

    assert "Python traceback:" not in stream.getvalue()
