"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .errors import ErrorReporter, SilentReporter
from .eval.common import stringify
from .evaluator import Interpreter
from .lexer_rd import tokenize
from .repl_highlight import LoxLexer
from .runner import repl_eval
from .token_types import TT
from .utils import debug_py_trace_enabled, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {TT.LPAR, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAR, TT.RBRACE}

INDENT = "    "


def open_depth(text: str) -> int:
    """Number of unclosed '(' and '{' in *text* (never negative)."""
    depth = 0

    for tok in tokenize(text, reporter=SilentReporter()):
        if tok.kind in _DEPTH_OPEN:
            depth += 1
        elif tok.kind in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)

    return depth


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


class ReplState:
    """The interpreter and reporter shared by every line; /reset swaps them."""

    def __init__(self):
        self.reporter = ErrorReporter()
        self.interpreter = Interpreter(reporter=self.reporter)

    def reset(self) -> None:
        self.reporter = ErrorReporter()
        self.interpreter = Interpreter(reporter=self.reporter)

    def eval_line(self, text: str) -> Optional[str]:
        """Run one entry and return the echo text for a bare expression."""
        self.reporter.reset()
        value = repl_eval(text, self.interpreter, self.reporter)

        if value is None:
            return None
        return stringify(value)


def handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_debug_py_trace(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_debug_py_trace(False)
        elif arg == "":
            set_debug_py_trace(not debug_py_trace_enabled())
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state_text = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state_text}")
        return True

    if cmd == "/reset":
        state.reset()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _compute_indent(text: str) -> str:
    return INDENT * open_depth(text)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    state = ReplState()

    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Slash commands and balanced input submit immediately.
        if text.lstrip().startswith("/") or open_depth(text) == 0:
            buf.validate_and_handle()
            return

        # An empty continuation line forces submission so the parser can
        # report whatever is still unbalanced.
        lines: List[str] = text.split("\n")
        if len(lines) > 1 and lines[-1].strip() == "":
            buf.text = "\n".join(lines[:-1])
            buf.cursor_position = len(buf.text)
            buf.validate_and_handle()
            return

        buf.insert_text("\n" + _compute_indent(text))

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=LoxLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("lox repl, Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        echo = state.eval_line(text)
        if echo is not None:
            print(echo)
