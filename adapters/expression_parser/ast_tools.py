"""
ast_tools.py — static helpers over ExprAST (no environment involved).

free_names() — binding keys a tree needs before it can be evaluated
to_infix()   — fully parenthesised text that parses back to an equal tree
"""
from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction

from contracts import BinaryOpNode, CallNode, ExprAST, LiteralNode, VariableRefNode


def free_names(ast: ExprAST) -> list[str]:
    """Variables, operator symbols and callees, in first-seen (left-to-right) order."""
    seen: dict[str, None] = {}
    stack: list[ExprAST] = [ast]
    while stack:
        node = stack.pop()
        if isinstance(node, VariableRefNode):
            seen.setdefault(node.name, None)
        elif isinstance(node, BinaryOpNode):
            # operands before the operator, so "a + b" lists a, then +, then b
            stack.append(node.right)
            stack.append(_OperatorMark(node.op))  # type: ignore[arg-type]
            stack.append(node.left)
        elif isinstance(node, CallNode):
            seen.setdefault(node.callee, None)
            stack.extend(reversed(node.args))
        elif isinstance(node, _OperatorMark):
            seen.setdefault(node.symbol, None)
    return list(seen)


class _OperatorMark:
    __slots__ = ("symbol",)

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol


def to_infix(ast: ExprAST) -> str:
    if isinstance(ast, LiteralNode):
        return _literal_text(ast.value)
    if isinstance(ast, VariableRefNode):
        return ast.name
    if isinstance(ast, BinaryOpNode):
        return f"({to_infix(ast.left)} {ast.op} {to_infix(ast.right)})"
    if isinstance(ast, CallNode):
        return f"{ast.callee}({', '.join(to_infix(a) for a in ast.args)})"
    raise TypeError(f"Unknown AST node type: {type(ast)}")


def _literal_text(value) -> str:
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return str(value.numerator)
        return f"{value.numerator}/{value.denominator}"
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{value!r} has no literal form")
        text = repr(value)
        if "e" in text or "E" in text:
            # exact decimal expansion; reads back as the same float
            text = format(Decimal(value), "f")
        if "." not in text:
            text += ".0"
        return text
    return str(value)
