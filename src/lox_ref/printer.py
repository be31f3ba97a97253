"""Debug renderings of a parsed program.

The dataclass AST is first lowered into a ``lark.Tree`` (operators and names
become ``lark.Token`` leaves) so that ``Tree.pretty()`` and lark
``Transformer`` subclasses can render it. None of this is used at runtime.
"""

from __future__ import annotations

from typing import List, Sequence

from lark import Token, Transformer, Tree

from .tree import (
    Assign, Binary, Block, Call, Expression, Function, Grouping, If, Literal,
    Logical, Node, Print, Return, Ternary, Unary, Var, Variable, While,
)
from .types import LoxNumber


def literal_text(value: object) -> str:
    match value:
        case None:
            return "nil"
        case bool():
            return "true" if value else "false"
        case float() | int():
            return repr(LoxNumber(float(value)))
        case _:
            return str(value)


def _op(tok) -> Token:
    return Token(tok.kind.name, tok.lexeme, line=tok.line)


def _name(tok) -> Token:
    return Token("IDENT", tok.lexeme, line=tok.line)


def to_tree(node: Node) -> Tree:
    """Lower one AST node (and its subtree) into a lark Tree."""
    match node:
        case Literal(value=value):
            return Tree("literal", [Token("LITERAL", literal_text(value))])
        case Grouping(inner=inner):
            return Tree("grouping", [to_tree(inner)])
        case Unary(operator=op, operand=operand):
            return Tree("unary", [_op(op), to_tree(operand)])
        case Binary(left=left, operator=op, right=right):
            return Tree("binary", [to_tree(left), _op(op), to_tree(right)])
        case Logical(left=left, operator=op, right=right):
            return Tree("logical", [to_tree(left), _op(op), to_tree(right)])
        case Ternary(condition=cond, then_branch=then, else_branch=other):
            return Tree("ternary", [to_tree(cond), to_tree(then), to_tree(other)])
        case Variable(name=name):
            return Tree("variable", [_name(name)])
        case Assign(name=name, value=value):
            return Tree("assign", [_name(name), to_tree(value)])
        case Call(callee=callee, arguments=args):
            return Tree("call", [to_tree(callee), *[to_tree(a) for a in args]])
        case Expression(expr=expr):
            return Tree("expression_stmt", [to_tree(expr)])
        case Print(expr=expr):
            return Tree("print_stmt", [to_tree(expr)])
        case Var(name=name, initializer=init):
            children = [_name(name)]
            if init is not None:
                children.append(to_tree(init))
            return Tree("var_decl", children)
        case Block(statements=stmts):
            return Tree("block", [to_tree(s) for s in stmts])
        case If(condition=cond, then_branch=then, else_branch=other):
            children = [to_tree(cond), to_tree(then)]
            if other is not None:
                children.append(to_tree(other))
            return Tree("if_stmt", children)
        case While(condition=cond, body=body):
            return Tree("while_stmt", [to_tree(cond), to_tree(body)])
        case Function(name=name, params=params, body=body):
            return Tree("fun_decl", [
                _name(name),
                Tree("params", [_name(p) for p in params]),
                Tree("body", [to_tree(s) for s in body]),
            ])
        case Return(value=value):
            return Tree("return_stmt", [] if value is None else [to_tree(value)])
        case _:
            raise TypeError(f"Cannot lower {type(node).__name__}")


def program_tree(statements: Sequence[Node]) -> Tree:
    return Tree("program", [to_tree(s) for s in statements])


def _parenthesize(name: str, *parts: str) -> str:
    return "(" + " ".join([name, *parts]) + ")"


class ParenPrinter(Transformer):
    """Lisp-style rendering: ``1 + 2 * 3`` becomes ``(+ 1 (* 2 3))``."""

    def literal(self, c):
        return str(c[0])

    def variable(self, c):
        return str(c[0])

    def grouping(self, c):
        return _parenthesize("group", c[0])

    def unary(self, c):
        return _parenthesize(str(c[0]), c[1])

    def binary(self, c):
        return _parenthesize(str(c[1]), c[0], c[2])

    logical = binary

    def ternary(self, c):
        return _parenthesize("?:", *c)

    def assign(self, c):
        return _parenthesize("=", str(c[0]), c[1])

    def call(self, c):
        return _parenthesize("call", *c)

    def expression_stmt(self, c):
        return _parenthesize(";", c[0])

    def print_stmt(self, c):
        return _parenthesize("print", c[0])

    def var_decl(self, c):
        if len(c) == 1:
            return _parenthesize("var", str(c[0]))
        return _parenthesize("var", str(c[0]), "=", c[1])

    def block(self, c):
        return _parenthesize("block", *c)

    def if_stmt(self, c):
        return _parenthesize("if", *c)

    def while_stmt(self, c):
        return _parenthesize("while", *c)

    def params(self, c):
        return "(" + " ".join(str(p) for p in c) + ")"

    def body(self, c):
        return list(c)

    def fun_decl(self, c):
        name, params, body = c
        return _parenthesize("fun", str(name), params, *body)

    def return_stmt(self, c):
        return _parenthesize("return", *c)

    def program(self, c):
        return "\n".join(c)


class RpnPrinter(Transformer):
    """Reverse Polish rendering: ``(1 + 2) * 3`` becomes ``1 2 + 3 *``.

    Statements are rendered as their expressions followed by a keyword.
    """

    def literal(self, c):
        return str(c[0])

    def variable(self, c):
        return str(c[0])

    def grouping(self, c):
        return c[0]

    def unary(self, c):
        return f"{c[1]}{c[0]}"

    def binary(self, c):
        return f"{c[0]} {c[2]} {c[1]}"

    logical = binary

    def ternary(self, c):
        return f"{c[0]} {c[1]} {c[2]} ?:"

    def assign(self, c):
        return f"{c[1]} {c[0]} ="

    def call(self, c):
        callee, *args = c
        return " ".join([callee, *args, f"call/{len(args)}"])

    def expression_stmt(self, c):
        return c[0]

    def print_stmt(self, c):
        return f"{c[0]} print"

    def var_decl(self, c):
        if len(c) == 1:
            return f"nil {c[0]} var"
        return f"{c[1]} {c[0]} var"

    def block(self, c):
        return " ".join(["{", *c, "}"])

    def if_stmt(self, c):
        return " ".join([*c, "if"])

    def while_stmt(self, c):
        return " ".join([*c, "while"])

    def params(self, c):
        return [str(p) for p in c]

    def body(self, c):
        return list(c)

    def fun_decl(self, c):
        name, params, body = c
        return " ".join([*params, "{", *body, "}", str(name), "fun"])

    def return_stmt(self, c):
        return " ".join([*c, "return"])

    def program(self, c):
        return "\n".join(c)


def dump_tree(statements: Sequence[Node]) -> str:
    return program_tree(statements).pretty()


def paren_print(statements: Sequence[Node]) -> str:
    return ParenPrinter().transform(program_tree(statements))


def rpn_print(statements: Sequence[Node]) -> str:
    return RpnPrinter().transform(program_tree(statements))


def paren_expr(node: Node) -> str:
    return ParenPrinter().transform(to_tree(node))


def rpn_expr(node: Node) -> str:
    return RpnPrinter().transform(to_tree(node))


__all__: List[str] = [
    "to_tree", "program_tree", "ParenPrinter", "RpnPrinter",
    "dump_tree", "paren_print", "rpn_print", "paren_expr", "rpn_expr",
]
