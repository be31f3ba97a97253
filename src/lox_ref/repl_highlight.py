"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .errors import SilentReporter
from .lexer_rd import Lexer as LoxScanner
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_TT_GROUP = {kind: "keyword" for kind in LoxScanner.KEYWORDS.values()}
_TT_GROUP.update({
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NIL: "constant",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.NEG: "operator",
    TT.NEQ: "operator",
    TT.ASSIGN: "operator",
    TT.EQ: "operator",
    TT.GT: "operator",
    TT.GTE: "operator",
    TT.LT: "operator",
    TT.LTE: "operator",
    TT.QMARK: "operator",
    TT.COLON: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.DOT: "punctuation",
    TT.SEMI: "punctuation",
})


def _gap_spans(gap: str) -> StyleAndTextTuples:
    """Unstyled text between tokens; a comment opener styles the rest of the gap."""
    for marker in ("//", "/*"):
        idx = gap.find(marker)
        if idx >= 0:
            spans: StyleAndTextTuples = []
            if idx > 0:
                spans.append(("", gap[:idx]))
            spans.append((GROUP_STYLE["comment"], gap[idx:]))
            return spans
    return [("", gap)]


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    tokens = LoxScanner(text, reporter=SilentReporter()).tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.kind == TT.EOF or not tok.lexeme:
            continue

        # Find actual position of this token in the line from pos onwards.
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue

        if idx > pos:
            result.extend(_gap_spans(text[pos:idx]))

        group = _TT_GROUP.get(tok.kind, "")
        # Identifier directly after `fun` or before `(` names a function.
        if tok.kind == TT.IDENT:
            prev_fun = i > 0 and tokens[i - 1].kind == TT.FUN
            next_call = i + 1 < len(tokens) and tokens[i + 1].kind == TT.LPAR
            if prev_fun or next_call:
                group = "function"

        result.append((GROUP_STYLE.get(group, ""), tok.lexeme))
        pos = idx + len(tok.lexeme)

    if pos < len(text):
        rest = text[pos:]
        if rest.lstrip().startswith('"'):
            result.append((GROUP_STYLE["error"], rest))
        else:
            result.extend(_gap_spans(rest))

    return result if result else [("", text)]


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD scanner."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
