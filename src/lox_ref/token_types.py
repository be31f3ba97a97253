"""
Token Types for the Lox scanner and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Single-character punctuation
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMI = auto()
    SLASH = auto()
    STAR = auto()
    QMARK = auto()
    COLON = auto()

    # One or two character operators
    NEG = auto()  # !
    NEQ = auto()  # !=
    ASSIGN = auto()  # =
    EQ = auto()  # ==
    GT = auto()
    GTE = auto()
    LT = auto()
    LTE = auto()

    # Literals
    IDENT = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Tok:
    """Token with its source lexeme, decoded literal and 1-based line"""

    kind: TT
    lexeme: str
    literal: Any = None
    line: int = 0

    def __repr__(self):
        return f"Tok({self.kind.name}, {self.lexeme!r}, {self.literal!r}, line {self.line})"
