from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..runtime import (
    LoxArityError,
    LoxCallable,
    LoxFn,
    LoxNil,
    LoxReturnSignal,
    LoxRuntimeError,
    LoxTypeError,
    LoxValue,
    NativeFn,
    ensure_value,
    is_callable,
)
from ..token_types import Tok
from ..tree import Call, Function, Return

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_fn_def(n: Function, interp: 'Interpreter') -> None:
    # Captures the live scope by reference, so later writes stay visible.
    fn_value = LoxFn(declaration=n, closure=interp.environment)
    interp.environment.define(n.name.lexeme, fn_value)

def eval_call(n: Call, interp: 'Interpreter') -> LoxValue:
    callee = interp.evaluate(n.callee)

    if not is_callable(callee):
        raise LoxTypeError(n.paren, "Can only call functions and classes.")

    args = [interp.evaluate(arg) for arg in n.arguments]

    return call_value(callee, args, n.paren, interp)

def call_value(cal: LoxCallable, args: List[LoxValue], paren: Tok, interp: 'Interpreter') -> LoxValue:
    expected = cal.arity()

    if len(args) != expected:
        raise LoxArityError(paren, f"Expected {expected} arguments but got {len(args)}.")

    interp.call_depth += 1

    try:
        match cal:
            case LoxFn():
                return cal.call(interp, args)
            case NativeFn():
                return ensure_value(cal.call(interp, args))
    except LoxRuntimeError as exc:
        if exc.token is None:
            exc.token = paren
        raise
    finally:
        interp.call_depth -= 1

def eval_return_stmt(n: Return, interp: 'Interpreter') -> None:
    if interp.call_depth == 0:
        raise LoxRuntimeError(n.keyword, "Can't return from top-level code.")

    value = interp.evaluate(n.value) if n.value is not None else LoxNil()

    raise LoxReturnSignal(value)
