from __future__ import annotations

from typing import TYPE_CHECKING

from ..runtime import (
    LoxBool,
    LoxNil,
    LoxNumber,
    LoxRuntimeError,
    LoxString,
    LoxTypeError,
    LoxValue,
    LoxZeroDivisionError,
)
from ..token_types import TT, Tok
from ..tree import Binary, Logical, Ternary, Unary
from .common import require_number, require_numbers, stringify
from .helpers import is_truthy, lox_equals

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_unary(n: Unary, interp: 'Interpreter') -> LoxValue:
    rhs = interp.evaluate(n.operand)

    match n.operator.kind:
        case TT.MINUS:
            return LoxNumber(-require_number(n.operator, rhs))
        case TT.NEG:
            return LoxBool(not is_truthy(rhs))
        case _:
            raise LoxRuntimeError(n.operator, f"Unsupported unary operator '{n.operator.lexeme}'.")

def eval_binary(n: Binary, interp: 'Interpreter') -> LoxValue:
    lhs = interp.evaluate(n.left)
    rhs = interp.evaluate(n.right)

    return apply_binary_operator(n.operator, lhs, rhs)

def apply_binary_operator(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match op.kind:
        case TT.EQ:
            return LoxBool(lox_equals(lhs, rhs))
        case TT.NEQ:
            return LoxBool(not lox_equals(lhs, rhs))
        case TT.PLUS:
            return _add(op, lhs, rhs)
        case TT.MINUS:
            a, b = require_numbers(op, lhs, rhs)
            return LoxNumber(a - b)
        case TT.STAR:
            a, b = require_numbers(op, lhs, rhs)
            return LoxNumber(a * b)
        case TT.SLASH:
            a, b = require_numbers(op, lhs, rhs)
            if b == 0:
                raise LoxZeroDivisionError(op, "Cannot divide by zero.")
            return LoxNumber(a / b)
        case TT.GT:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a > b)
        case TT.GTE:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a >= b)
        case TT.LT:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a < b)
        case TT.LTE:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a <= b)
        case _:
            raise LoxRuntimeError(op, f"Unsupported binary operator '{op.lexeme}'.")

def _add(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match lhs, rhs:
        case LoxNumber(value=a), LoxNumber(value=b):
            return LoxNumber(a + b)
        case LoxString(), _ if not isinstance(rhs, LoxNil):
            return LoxString(stringify(lhs) + stringify(rhs))
        case _, LoxString() if not isinstance(lhs, LoxNil):
            return LoxString(stringify(lhs) + stringify(rhs))
        case _:
            raise LoxTypeError(op, "Invalid operands for + operation.")

def eval_logical(n: Logical, interp: 'Interpreter') -> LoxValue:
    lhs = interp.evaluate(n.left)

    if n.operator.kind == TT.OR:
        if is_truthy(lhs):
            return lhs
    elif not is_truthy(lhs):
        return lhs

    return interp.evaluate(n.right)

def eval_ternary(n: Ternary, interp: 'Interpreter') -> LoxValue:
    if is_truthy(interp.evaluate(n.condition)):
        return interp.evaluate(n.then_branch)

    return interp.evaluate(n.else_branch)
