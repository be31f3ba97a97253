from __future__ import annotations

from typing import TYPE_CHECKING

from ..tree import If, While
from .helpers import is_truthy as _is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_if_stmt(n: If, interp: 'Interpreter') -> None:
    if _is_truthy(interp.evaluate(n.condition)):
        interp.execute(n.then_branch)
    elif n.else_branch is not None:
        interp.execute(n.else_branch)

def eval_while_stmt(n: While, interp: 'Interpreter') -> None:
    # The loop itself opens no scope; a block body opens a fresh one per pass.
    while _is_truthy(interp.evaluate(n.condition)):
        interp.execute(n.body)
