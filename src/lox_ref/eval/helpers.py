from __future__ import annotations

from ..runtime import LoxBool, LoxNil, LoxValue

def is_truthy(val: LoxValue) -> bool:
    match val:
        case LoxBool(value=b):
            return b
        case LoxNil():
            return False
        case _:
            return True

def lox_equals(left: LoxValue, right: LoxValue) -> bool:
    """Value equality across variants; never raises and never coerces."""
    match left, right:
        case LoxNil(), LoxNil():
            return True
        case LoxNil(), _:
            return False
        case _, LoxNil():
            return False
        case _:
            return left == right
