"""
Adapter: ASTEvaluator
Implements the Evaluator port — recursive walk of an ExprAST against an
environment.

Every name in the tree (variables, operator symbols, callees) is looked up
in the environment here, at evaluation time; the parser never resolves
anything. The same tree can therefore be evaluated against environments with
different operator semantics.

evaluate()  — bare value
eval_expr() — EvalResult, optionally with a readable step trace
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from adapters.environment.cell import deref
from contracts import (
    BinaryOpNode,
    CallNode,
    EvalResult,
    ExprAST,
    LiteralNode,
    UnboundReferenceError,
    VariableRefNode,
    format_number,
)
from ports.environment import Environment

logger = logging.getLogger("infix.evaluator")


def lookup(env: Environment, name: str) -> Any:
    """Binding for name, dereferenced if it is a Cell."""
    if name not in env:
        raise UnboundReferenceError(name)
    return deref(env[name])


class ASTEvaluator:
    """Evaluates ExprAST trees. Holds no state between calls."""

    def __init__(self, float_precision: int = 12) -> None:
        self._precision = float_precision

    # -- Evaluator protocol ------------------------------------------------

    def evaluate(self, ast: ExprAST, env: Environment) -> Any:
        return self._eval(ast, env, None)

    def eval_expr(
        self,
        ast: ExprAST,
        env: Environment,
        trace: bool = False,
    ) -> EvalResult:
        steps: Optional[list[str]] = [] if trace else None
        value = self._eval(ast, env, steps)
        if steps is not None:
            logger.debug("Evaluated in %d steps: %s", len(steps), self._fmt(value))
        return EvalResult(
            value=value,
            is_exact=not isinstance(value, float),
            steps=steps or [],
        )

    # -- private -------------------------------------------------------------

    def _eval(
        self,
        node: ExprAST,
        env: Environment,
        steps: Optional[list[str]],
    ) -> Any:
        if isinstance(node, LiteralNode):
            return node.value

        if isinstance(node, VariableRefNode):
            value = lookup(env, node.name)
            if steps is not None:
                steps.append(f"{node.name} = {self._fmt(value)}")
            return value

        if isinstance(node, BinaryOpNode):
            return self._fold(node, env, steps)

        if isinstance(node, CallNode):
            fn: Callable[..., Any] = lookup(env, node.callee)
            args = [deref(self._eval(arg, env, steps)) for arg in node.args]
            result = deref(fn(*args))
            if steps is not None:
                shown = ", ".join(self._fmt(a) for a in args)
                steps.append(f"{node.callee}({shown}) = {self._fmt(result)}")
            return result

        raise TypeError(f"Unknown AST node type: {type(node)}")

    def _fold(
        self,
        node: BinaryOpNode,
        env: Environment,
        steps: Optional[list[str]],
    ) -> Any:
        """
        Left fold over the left spine of a chain of binary operators.
        "a - b - c" is ((a - b) - c): walk down to a, then apply each operator
        with its right operand in source order. Chain length adds no recursion.
        """
        spine: list[BinaryOpNode] = []
        leftmost: ExprAST = node
        while isinstance(leftmost, BinaryOpNode):
            spine.append(leftmost)
            leftmost = leftmost.left

        acc = deref(self._eval(leftmost, env, steps))
        for link in reversed(spine):
            op = lookup(env, link.op)
            rhs = deref(self._eval(link.right, env, steps))
            result = op(acc, rhs)
            if steps is not None:
                steps.append(
                    f"{self._fmt(acc)} {link.op} {self._fmt(rhs)} = {self._fmt(result)}"
                )
            acc = result
        return acc

    def _fmt(self, value: Any) -> str:
        return format_number(value, self._precision)


_DEFAULT_EVALUATOR = ASTEvaluator()


def evaluate(ast: ExprAST, env: Environment) -> Any:
    """Module-level shortcut for ASTEvaluator().evaluate(ast, env)."""
    return _DEFAULT_EVALUATOR.evaluate(ast, env)
