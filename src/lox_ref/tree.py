"""AST node classes produced by the parser and walked by the evaluator.

Two families: expressions (evaluate to a value) and statements (run for
effect). Nodes are frozen once built; the evaluator dispatches on their
class with structural pattern matching.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from typing_extensions import TypeAlias

from .token_types import Tok


class Expr:
    """Base class for expression nodes."""
    __slots__ = ()


class Stmt:
    """Base class for statement nodes."""
    __slots__ = ()


# ---------- Expressions ----------

@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass(frozen=True)
class Grouping(Expr):
    inner: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Tok
    operand: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Tok
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Tok  # and | or
    right: Expr


@dataclass(frozen=True)
class Ternary(Expr):
    condition: Expr
    question: Tok
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Tok


@dataclass(frozen=True)
class Assign(Expr):
    name: Tok
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Tok  # closing paren, used for error location
    arguments: List[Expr]


# ---------- Statements ----------

@dataclass(frozen=True)
class Expression(Stmt):
    expr: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expr: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Tok
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    name: Tok
    params: List[Tok]
    body: List[Stmt]


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Tok
    value: Optional[Expr] = None


Node: TypeAlias = Union[Expr, Stmt]
