from __future__ import annotations

import importlib
from typing import Optional

from .types import (
    LoxNil, LoxBool, LoxNumber, LoxString, LoxFn, NativeFn, NativeImpl,
    LoxValue, LoxCallable, Environment, Natives,
    LoxRuntimeError, LoxTypeError, LoxArityError, LoxNameError,
    LoxZeroDivisionError, LoxReturnSignal,
    is_lox_value, is_callable,
)

_NATIVES_INITIALIZED = False

def init_natives() -> None:
    """Load native modules (idempotent) so register_native hooks run."""
    global _NATIVES_INITIALIZED

    if _NATIVES_INITIALIZED:
        return

    importlib.import_module("lox_ref.stdlib")
    _NATIVES_INITIALIZED = True

def register_native(name: str, *, arity: int = 0):
    def dec(fn: NativeImpl):
        Natives.registry[name] = NativeFn(name=name, fn=fn, param_count=arity)
        return fn

    return dec

def unregister_native(name: str) -> Optional[NativeFn]:
    return Natives.registry.pop(name, None)

def ensure_value(value: object) -> LoxValue:
    """Normalize a host result: None becomes nil, anything else must already be a Lox value."""
    if value is None:
        return LoxNil()
    if is_lox_value(value):
        return value
    raise LoxTypeError(None, f"Unexpected value type {type(value).__name__}")

__all__ = [
    "LoxNil", "LoxBool", "LoxNumber", "LoxString", "LoxFn", "NativeFn",
    "LoxValue", "LoxCallable", "Environment", "Natives",
    "LoxRuntimeError", "LoxTypeError", "LoxArityError", "LoxNameError",
    "LoxZeroDivisionError", "LoxReturnSignal",
    "is_lox_value", "is_callable",
    "init_natives", "register_native", "unregister_native", "ensure_value",
]
