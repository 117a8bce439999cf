"""
contracts.py — Single source of truth for every data type in infix.
All modules import AST nodes, results and errors from here only.
"""
from __future__ import annotations

from fractions import Fraction
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

CONTRACTS_VERSION = "1.0.0"

Number = Union[int, float, Fraction]


# ─────────────────────────── Operators ───────────────────────────────────

# Order matters: longest symbol first, otherwise ">>" shadows ">>>".
MUL_OPS: tuple[str, ...] = (">>>", "**", ">>", "<<", "*", "/", "÷", "%")
ADD_OPS: tuple[str, ...] = ("+", "-", "|", "&")

OperatorSymbol = Literal[
    "*", "/", "÷", "**", "%", ">>", ">>>", "<<",
    "+", "-", "|", "&",
]


# ─────────────────────────── Helpers ─────────────────────────────────────

def format_number(value: Any, precision: int = 12) -> str:
    """Readable form of a numeric value (Fraction as n/d, floats with %g)."""
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return str(value.numerator)
        return f"{value.numerator}/{value.denominator}"
    if isinstance(value, float):
        return f"{value:.{precision}g}"
    return str(value)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Fraction):
        return format_number(value)
    return value


# ─────────────────────────── Errors ──────────────────────────────────────

class InfixError(Exception):
    """Base class for errors raised while parsing or evaluating expressions."""


class ParseFailure(InfixError, ValueError):
    """The input does not match the grammar. No partial AST is produced."""

    def __init__(self, text: str, position: int, expected: list[str]) -> None:
        self.text = text
        self.position = position
        self.expected = expected
        found = repr(text[position]) if position < len(text) else "end of input"
        wanted = ", ".join(expected) if expected else "nothing"
        super().__init__(
            f"Parse failure at position {position}: found {found}, expected {wanted}"
        )


class UnboundReferenceError(InfixError, LookupError):
    """A variable, operator or function name has no binding in the environment."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is not bound in environment")


# ─────────────────────────── Expression AST ──────────────────────────────

class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class LiteralNode(_Node):
    node_type: Literal["literal"] = "literal"
    value: Number

    @field_serializer("value", when_used="json")
    def _serialize_value(self, value: Number) -> Any:
        return _jsonable(value)


class VariableRefNode(_Node):
    node_type: Literal["variable"] = "variable"
    name: str


class BinaryOpNode(_Node):
    node_type: Literal["binop"] = "binop"
    op: OperatorSymbol      # binding key, resolved only at evaluation time
    left: "ExprAST"
    right: "ExprAST"


class CallNode(_Node):
    node_type: Literal["call"] = "call"
    callee: str
    args: tuple["ExprAST", ...] = ()


ExprAST = Union[LiteralNode, VariableRefNode, BinaryOpNode, CallNode]
BinaryOpNode.model_rebuild()
CallNode.model_rebuild()


# ─────────────────────────── ExpressionParser ────────────────────────────

class ParsedExpression(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    ast: ExprAST
    names: list[str] = Field(default_factory=list)  # free binding keys, first-seen order


# ─────────────────────────── Evaluator ───────────────────────────────────

class EvalResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: Any                      # whatever the bound operators produce
    is_exact: bool = True
    steps: list[str] = Field(default_factory=list)  # readable trace

    @field_serializer("value", when_used="json")
    def _serialize_value(self, value: Any) -> Any:
        return _jsonable(value)
