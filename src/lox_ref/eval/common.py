from __future__ import annotations

from typing import Any, Tuple

from ..runtime import LoxNil, LoxNumber, LoxTypeError, LoxValue
from ..token_types import Tok

def require_number(op: Tok, value: LoxValue) -> float:
    if not isinstance(value, LoxNumber):
        raise LoxTypeError(op, "Operand must be a number.")

    return value.value

def require_numbers(op: Tok, left: LoxValue, right: LoxValue) -> Tuple[float, float]:
    if not isinstance(left, LoxNumber) or not isinstance(right, LoxNumber):
        raise LoxTypeError(op, "Operands must be numbers.")

    return left.value, right.value

def stringify(value: Any) -> str:
    if value is None or isinstance(value, LoxNil):
        return "nil"

    return repr(value)
