from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, List

from ..runtime import Environment
from ..tree import Block, Stmt

if TYPE_CHECKING:
    from ..evaluator import Interpreter

@contextmanager
def scoped(interp: 'Interpreter', env: Environment) -> Iterator[Environment]:
    """Make *env* current for the body; the previous scope comes back on every exit path."""
    previous = interp.environment
    interp.environment = env

    try:
        yield env
    finally:
        interp.environment = previous

def run_statements(stmts: List[Stmt], interp: 'Interpreter', env: Environment) -> None:
    with scoped(interp, env):
        for stmt in stmts:
            interp.execute(stmt)

def eval_block(n: Block, interp: 'Interpreter') -> None:
    run_statements(n.statements, interp, Environment(parent=interp.environment))
