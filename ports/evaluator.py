"""
Port: Evaluator
Responsibility: deterministic evaluation of an ExprAST against an environment.
"""
from typing import Any, Protocol, runtime_checkable

from contracts import EvalResult, ExprAST
from ports.environment import Environment


@runtime_checkable
class Evaluator(Protocol):
    def evaluate(self, ast: ExprAST, env: Environment) -> Any:
        """
        Evaluates the AST and returns the bare value.
        Operators and functions are looked up in env by name at this point.
        Raises UnboundReferenceError for any name missing from env.
        Errors raised by bound operators (e.g. ZeroDivisionError) propagate.
        """
        ...

    def eval_expr(
        self,
        ast: ExprAST,
        env: Environment,
        trace: bool = False,
    ) -> EvalResult:
        """
        Evaluates the AST to an EvalResult with:
          - value: whatever the bound operators produced
          - is_exact: False when the value is a float
          - steps: human-readable computation steps (only when trace=True)
        """
        ...
