from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO, TypeVar

from .errors import ErrorReporter, SilentReporter
from .evaluator import Interpreter
from .parser_rd import parse_expr_fragment, parse_source
from .printer import dump_tree, paren_print, rpn_print
from .runtime import LoxRuntimeError, LoxValue
from .tree import Stmt
from .utils import recursion_limit

# sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

USAGE = "Usage: lox [options] [script]"

_RENDERERS: dict[str, Callable[[List[Stmt]], str]] = {
    "--dump-ast": dump_tree,
    "--parens": paren_print,
    "--rpn": rpn_print,
}

T = TypeVar("T")


def _guarded(thunk: Callable[[], T], reporter: ErrorReporter) -> Optional[T]:
    """Run *thunk*, turning escaping runtime faults into reported errors."""
    try:
        return thunk()
    except LoxRuntimeError as exc:
        reporter.runtime_error(exc)
        reporter.py_trace(exc)
    except RecursionError as exc:
        reporter.runtime_error(LoxRuntimeError(None, "Stack overflow."))
        reporter.py_trace(exc)
    return None


def run(source: str, interpreter: Interpreter, reporter: ErrorReporter) -> None:
    """Scan, parse and (when no static error was reported) execute *source*."""
    statements = parse_source(source, reporter)

    if reporter.had_error:
        return

    _guarded(lambda: interpreter.interpret(statements), reporter)


def repl_eval(source: str, interpreter: Interpreter, reporter: ErrorReporter) -> Optional[LoxValue]:
    """
    Run one REPL entry.
    A bare expression (no trailing ';' or '}') is evaluated and its value
    returned for echoing; anything else runs as statements and yields None.
    """
    text = source.strip()

    if not text or text.endswith((";", "}")):
        run(source, interpreter, reporter)
        return None

    scratch = SilentReporter()
    expr = parse_expr_fragment(source, scratch)
    if expr is None or scratch.had_error:
        run(source, interpreter, reporter)
        return None

    return _guarded(lambda: interpreter.evaluate(expr), reporter)


def render(mode: str, statements: List[Stmt]) -> str:
    return _RENDERERS[mode](statements)


def run_file(path: str, mode: Optional[str]=None, out: Optional[TextIO]=None, err: Optional[TextIO]=None) -> int:
    """Run (or render) a script and return the process exit status."""
    try:
        source = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Could not read '{path}': {exc.strerror or exc}", file=err if err is not None else sys.stderr)
        return EX_NOINPUT

    reporter = ErrorReporter(stream=err)

    if mode is not None:
        statements = parse_source(source, reporter)
        if reporter.had_error:
            return EX_DATAERR
        print(render(mode, statements), file=out)
        return EX_OK

    interpreter = Interpreter(reporter=reporter, out=out)
    run(source, interpreter, reporter)

    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def main(argv: Optional[List[str]]=None) -> None:
    args = sys.argv[1:] if argv is None else argv
    mode: Optional[str] = None
    script: Optional[str] = None

    for token in args:
        if token in ("-h", "--help"):
            print(USAGE)
            return

        if token in _RENDERERS:
            mode = token
            continue

        if token.startswith("--"):
            print(f"Unknown option: {token}", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            raise SystemExit(EX_USAGE)

        if script is None:
            script = token
        else:
            print(USAGE, file=sys.stderr)
            raise SystemExit(EX_USAGE)

    limit = recursion_limit()
    if limit is not None:
        sys.setrecursionlimit(limit)

    if script is None:
        if mode is not None:
            print(f"{mode} requires a script path", file=sys.stderr)
            raise SystemExit(EX_USAGE)

        from .repl import repl
        repl()
        return

    code = run_file(script, mode)
    if code != EX_OK:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
