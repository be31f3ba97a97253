"""Native functions registered into every global scope."""

from __future__ import annotations

import time
from typing import List

from .runtime import register_native, LoxNumber, LoxValue

@register_native("clock", arity=0)
def native_clock(_interp, args: List[LoxValue]) -> LoxNumber:
    return LoxNumber(time.time())
