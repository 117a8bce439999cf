"""
compiler.py — parse once, evaluate many times.

    f = from_string("x * x + y", params=("x", "y"))
    f(3, 1)       # 10
    f(2, 0)       # 4

Positional arguments are bound to params on top of the environment given at
compile time (the base environment by default).
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from adapters.environment.base_env import base_environment, merge_env
from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.grammar import RecursiveDescentParser
from contracts import EvalResult, ExprAST


class CompiledExpression:
    def __init__(
        self,
        text: str,
        ast: ExprAST,
        names: list[str],
        params: tuple[str, ...],
        env: Mapping[str, Any],
        evaluator: ASTEvaluator,
    ) -> None:
        self.text = text
        self.ast = ast
        self.names = names
        self.params = params
        self._env = env
        self._evaluator = evaluator

    def bind(self, args: tuple[Any, ...]) -> dict[str, Any]:
        if len(args) != len(self.params):
            raise TypeError(
                f"expression {self.text!r} takes {len(self.params)} argument(s) "
                f"{list(self.params)}, got {len(args)}"
            )
        return merge_env(self._env, dict(zip(self.params, args)))

    def __call__(self, *args: Any) -> Any:
        return self._evaluator.evaluate(self.ast, self.bind(args))

    def trace(self, *args: Any) -> EvalResult:
        return self._evaluator.eval_expr(self.ast, self.bind(args), trace=True)

    def unbound(self, env: Optional[Mapping[str, Any]] = None) -> list[str]:
        """Free names that neither env (default: compile-time env) nor params provide."""
        scope = self._env if env is None else env
        return [n for n in self.names if n not in scope and n not in self.params]

    def __repr__(self) -> str:
        return f"CompiledExpression({self.text!r}, params={list(self.params)})"


def from_string(
    text: str,
    params: Iterable[str] = (),
    env: Optional[Mapping[str, Any]] = None,
    parser: Optional[RecursiveDescentParser] = None,
    evaluator: Optional[ASTEvaluator] = None,
) -> CompiledExpression:
    """Parses text now; raises ParseFailure immediately if it does not match."""
    parsed = (parser or RecursiveDescentParser()).parse(text)
    params = tuple(params)
    if len(set(params)) != len(params):
        raise ValueError(f"duplicate parameter names: {list(params)}")
    return CompiledExpression(
        text=text,
        ast=parsed.ast,
        names=parsed.names,
        params=params,
        env=base_environment() if env is None else env,
        evaluator=evaluator or ASTEvaluator(),
    )
