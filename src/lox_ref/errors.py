"""Error reporting shared by the scanner, parser and interpreter.

Static (scan/parse) errors and runtime errors are reported here and never
raised past this point. The two flags drive the CLI exit status.
"""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING, List, Optional, TextIO

from .token_types import TT, Tok
from .utils import debug_py_trace_enabled

if TYPE_CHECKING:
    from .types import LoxRuntimeError


class ErrorReporter:
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.diagnostics: List[str] = []

    def _write(self, text: str) -> None:
        self.diagnostics.append(text)
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def report(self, line: int, message: str, where: str = "") -> None:
        self._write(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def error(self, token: Tok, message: str) -> None:
        if token.kind == TT.EOF:
            self.report(token.line, message, " at end")
        else:
            self.report(token.line, message, f" at '{token.lexeme}'")

    def runtime_error(self, err: LoxRuntimeError) -> None:
        token = err.token
        if token is None:
            self._write(str(err))
        else:
            self._write(f"{err}\n[line {token.line}]")
        self.had_runtime_error = True

    def py_trace(self, exc: BaseException) -> None:
        """Dump the Python traceback of *exc* when LOX_DEBUG_PY_TRACE is on."""
        if not debug_py_trace_enabled() or exc.__traceback__ is None:
            return
        out = self.stream if self.stream is not None else sys.stderr
        print("\nPython traceback:", file=out)
        print("".join(traceback.format_tb(exc.__traceback__)), file=out, end="")

    def reset(self) -> None:
        """Clear the static-error flag between REPL lines."""
        self.had_error = False


class SilentReporter(ErrorReporter):
    """Records diagnostics without writing them anywhere."""

    def _write(self, text: str) -> None:
        self.diagnostics.append(text)

    def py_trace(self, exc: BaseException) -> None:
        return
