from __future__ import annotations

from typing import Callable, List, Optional, TextIO

from .errors import ErrorReporter
from .runtime import (
    Environment,
    LoxBool,
    LoxNil,
    LoxNumber,
    LoxRuntimeError,
    LoxString,
    LoxValue,
    init_natives,
)
from .tree import (
    Assign, Binary, Block, Call, Expr, Expression, Function, Grouping, If,
    Literal, Logical, Print, Return, Stmt, Ternary, Unary, Var, Variable, While,
)

from .eval.blocks import eval_block, run_statements
from .eval.common import stringify
from .eval.expr import eval_binary, eval_logical, eval_ternary, eval_unary
from .eval.fn import eval_call, eval_fn_def, eval_return_stmt
from .eval.loops import eval_if_stmt, eval_while_stmt

# ---------------- Public API ----------------

class Interpreter:
    """
    Tree-walking interpreter.

    Holds the global scope and the scope currently in effect. One instance
    can run many programs (REPL lines); globals persist between them.
    """

    def __init__(self, reporter: Optional[ErrorReporter]=None, out: Optional[TextIO]=None):
        init_natives()
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.out = out
        self.globals = Environment()
        self.environment = self.globals
        self.call_depth = 0

    def interpret(self, statements: List[Stmt]) -> bool:
        """Run top-level statements in order; stop at the first runtime error.

        Returns False when a runtime error was reported.
        """
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as e:
            self.reporter.runtime_error(e)
            self.reporter.py_trace(e)
            return False

        return True

    def evaluate(self, expr: Expr) -> LoxValue:
        return eval_expr(expr, self)

    def execute(self, stmt: Stmt) -> None:
        exec_stmt(stmt, self)

    def execute_block(self, statements: List[Stmt], env: Environment) -> None:
        run_statements(statements, self, env)

    def write(self, text: str) -> None:
        print(text, file=self.out)

# ---------------- Core evaluator ----------------

def eval_expr(n: Expr, interp: Interpreter) -> LoxValue:
    match n:
        case Literal(value=value):
            return _literal_value(value)
        case Grouping(inner=inner):
            return eval_expr(inner, interp)
        case Unary():
            return eval_unary(n, interp)
        case Binary():
            return eval_binary(n, interp)
        case Logical():
            return eval_logical(n, interp)
        case Ternary():
            return eval_ternary(n, interp)
        case Variable(name=name):
            return interp.environment.get(name)
        case Assign(name=name, value=value_node):
            value = eval_expr(value_node, interp)
            interp.environment.assign(name, value)
            return value
        case Call():
            return eval_call(n, interp)
        case _:
            raise LoxRuntimeError(None, f"Unknown expression node: {type(n).__name__}")

def exec_stmt(n: Stmt, interp: Interpreter) -> None:
    handler = _STMT_DISPATCH.get(type(n))

    if handler is None:
        raise LoxRuntimeError(None, f"Unknown statement node: {type(n).__name__}")

    handler(n, interp)

def _literal_value(value: object) -> LoxValue:
    match value:
        case None:
            return LoxNil()
        case bool():
            return LoxBool(value)
        case int() | float():
            return LoxNumber(float(value))
        case str():
            return LoxString(value)
        case _:
            raise LoxRuntimeError(None, f"Unsupported literal {value!r}")

# ---------------- Statements ----------------

def _eval_expression_stmt(n: Expression, interp: Interpreter) -> None:
    interp.evaluate(n.expr)

def _eval_print_stmt(n: Print, interp: Interpreter) -> None:
    interp.write(stringify(interp.evaluate(n.expr)))

def _eval_var_stmt(n: Var, interp: Interpreter) -> None:
    value = interp.evaluate(n.initializer) if n.initializer is not None else LoxNil()
    interp.environment.define(n.name.lexeme, value)

_STMT_DISPATCH: dict[type, Callable[[Stmt, Interpreter], None]] = {
    Expression: _eval_expression_stmt,
    Print: _eval_print_stmt,
    Var: _eval_var_stmt,
    Block: eval_block,
    If: eval_if_stmt,
    While: eval_while_stmt,
    Function: eval_fn_def,
    Return: eval_return_stmt,
}
