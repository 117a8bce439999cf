from __future__ import annotations

import pytest

from adapters.expression_parser.ast_tools import free_names, to_infix
from adapters.expression_parser.grammar import parse_expression
from contracts import LiteralNode


def test_to_infix_parenthesises_every_operation():
    assert to_infix(parse_expression("1+2*3")) == "(1 + (2 * 3))"
    assert to_infix(parse_expression("f 4")) == "f(4)"
    assert to_infix(parse_expression("g()")) == "g()"


@pytest.mark.parametrize(
    "text",
    ["1-2-3", "f 4", "max(1, 2, x)", "3/4", "-0x10 * 2.5", "g() ** a >>> 2", "sqrt 4 + 1"],
)
def test_to_infix_reparses_to_an_equal_tree(text):
    ast = parse_expression(text)

    assert parse_expression(to_infix(ast)) == ast


def test_to_infix_writes_small_floats_without_exponent():
    text = to_infix(LiteralNode(value=1e-7))

    assert "e" not in text
    assert parse_expression(text) == LiteralNode(value=1e-7)


def test_to_infix_rejects_non_finite_floats():
    with pytest.raises(ValueError):
        to_infix(LiteralNode(value=float("inf")))


def test_free_names_are_unique_and_ordered():
    assert free_names(parse_expression("x + x * x")) == ["x", "+", "*"]
    assert free_names(parse_expression("42")) == []
