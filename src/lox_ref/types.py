from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
from typing_extensions import Protocol, TypeAlias, TypeGuard

from .token_types import Tok
from .tree import Function

if TYPE_CHECKING:
    from .evaluator import Interpreter

# ---------- Value Model ----------

@dataclass
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        text = repr(self.value)
        return text[:-2] if text.endswith(".0") else text

@dataclass
class LoxString:
    value: str
    def __repr__(self) -> str:
        return self.value

class LoxCallable(Protocol):
    def arity(self) -> int: ...
    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue': ...

@dataclass(eq=False)
class LoxFn:
    """User function: a declaration plus the Environment it closed over."""
    declaration: Function
    closure: 'Environment'

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        # Parent is the captured scope, never the caller's.
        env = Environment(parent=self.closure)

        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)

        try:
            interpreter.execute_block(self.declaration.body, env)
        except LoxReturnSignal as signal:
            return signal.value

        return LoxNil()

    def __repr__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"

NativeImpl = Callable[['Interpreter', List['LoxValue']], 'LoxValue']

@dataclass(eq=False)
class NativeFn:
    name: str
    fn: NativeImpl
    param_count: int = 0

    def arity(self) -> int:
        return self.param_count

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        return self.fn(interpreter, arguments)

    def __repr__(self) -> str:
        return "<native fn>"

LoxValue: TypeAlias = (
    LoxNil
    | LoxBool
    | LoxNumber
    | LoxString
    | LoxFn
    | NativeFn
)

# ---------- Scopes ----------

class Environment:
    def __init__(self, parent: Optional['Environment']=None):
        self.parent = parent
        self.vars: Dict[str, LoxValue] = {}

        if parent is None and Natives.registry:
            for name, native in Natives.registry.items():
                self.vars[name] = native

    def define(self, name: str, val: LoxValue) -> None:
        # Redeclaring in the same scope overwrites.
        self.vars[name] = val

    def get(self, name: Tok) -> LoxValue:
        if name.lexeme in self.vars:
            return self.vars[name.lexeme]

        if self.parent is not None:
            return self.parent.get(name)

        raise LoxNameError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Tok, val: LoxValue) -> None:
        if name.lexeme in self.vars:
            self.vars[name.lexeme] = val
            return

        if self.parent is not None:
            self.parent.assign(name, val)
            return

        raise LoxNameError(name, f"Undefined variable '{name.lexeme}'.")

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    token: Optional[Tok]

    def __init__(self, token: Optional[Tok], message: str):
        super().__init__(message)
        self.token = token

    @property
    def line(self) -> Optional[int]:
        return self.token.line if self.token is not None else None

class LoxTypeError(LoxRuntimeError):
    pass

class LoxArityError(LoxRuntimeError):
    pass

class LoxNameError(LoxRuntimeError):
    pass

class LoxZeroDivisionError(LoxRuntimeError):
    pass

class LoxReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`."""
    def __init__(self, value: LoxValue):
        self.value = value

_LOX_VALUE_TYPES: Tuple[type, ...] = (
    LoxNil,
    LoxBool,
    LoxNumber,
    LoxString,
    LoxFn,
    NativeFn,
)

_CALLABLE_TYPES: Tuple[type, ...] = (LoxFn, NativeFn)

def is_lox_value(value: object) -> TypeGuard[LoxValue]:
    return isinstance(value, _LOX_VALUE_TYPES)

def is_callable(value: LoxValue) -> TypeGuard[LoxFn | NativeFn]:
    return isinstance(value, _CALLABLE_TYPES)

class Natives:
    registry: Dict[str, NativeFn] = {}
