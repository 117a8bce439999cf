from __future__ import annotations

import operator
from fractions import Fraction

import pytest

from adapters.environment.base_env import base_environment
from adapters.environment.cell import Cell
from adapters.evaluator.ast_evaluator import ASTEvaluator, evaluate
from adapters.expression_parser.grammar import parse_expression
from contracts import BinaryOpNode, LiteralNode, UnboundReferenceError, VariableRefNode
from ports.evaluator import Evaluator

_ARITH = {"+": operator.add, "-": operator.sub, "*": operator.mul}


def _eval(text: str, **bindings):
    env = base_environment()
    env.update(bindings)
    return evaluate(parse_expression(text), env)


def test_evaluator_satisfies_port():
    assert isinstance(ASTEvaluator(), Evaluator)


def test_left_associative_reduction():
    assert _eval("1-2-3") == -4
    assert _eval("2 ** 3 ** 2") == 64
    assert _eval("100 / 10 / 5") == 2


def test_precedence_and_parentheses():
    assert _eval("1+2*3") == 7
    assert _eval("(1+2)*3") == 9


def test_rational_literal_and_division():
    assert _eval("3/4") == Fraction(3, 4)
    assert _eval("1 / 3 + 2/3") == 1
    with pytest.raises(ZeroDivisionError):
        _eval("4/0")


def test_unbound_variable_names_the_variable():
    with pytest.raises(UnboundReferenceError) as info:
        evaluate(VariableRefNode(name="x"), {})

    assert info.value.name == "x"
    assert str(info.value) == "x is not bound in environment"


def test_unbound_operator_names_the_symbol():
    ast = BinaryOpNode(op="%", left=VariableRefNode(name="a"), right=VariableRefNode(name="b"))

    with pytest.raises(UnboundReferenceError) as info:
        evaluate(ast, {"a": 7, "b": 2})

    assert info.value.name == "%"


def test_unbound_function_surfaces_only_at_evaluation():
    ast = parse_expression("nope(x) ** y")

    with pytest.raises(UnboundReferenceError) as info:
        evaluate(ast, {"x": 1, "y": 2, "**": pow})

    assert info.value.name == "nope"


def test_same_tree_against_different_operator_semantics():
    ast = parse_expression("a + b * c")
    scalar = dict(_ARITH, a=2, b=3, c=5)
    swapped = dict(_ARITH, a=2, b=3, c=5)
    swapped["+"], swapped["*"] = operator.mul, operator.add

    assert evaluate(ast, scalar) == 17
    assert evaluate(ast, swapped) == 16


def test_custom_algebra_over_strings():
    env = {"+": lambda a, b: f"{a}{b}", "x": "foo", "y": "bar"}

    assert evaluate(parse_expression("x + y + x"), env) == "foobarfoo"


def test_calls_receive_arguments_in_order():
    env = {"sub": lambda a, b: a - b, "f": lambda: 42, "g": lambda x: x * 10}

    assert evaluate(parse_expression("sub(10, 3)"), env) == 7
    assert evaluate(parse_expression("f()"), env) == 42
    assert evaluate(parse_expression("g 4"), env) == 40
    assert evaluate(parse_expression("g(4)"), env) == 40


def test_cells_are_dereferenced_at_use():
    counter = Cell(5)
    env = {"x": counter, "+": Cell(operator.add), "inc": Cell(lambda v: v + 1)}
    ast = parse_expression("inc(x) + x")

    assert evaluate(ast, env) == 11
    counter.set(10)
    assert evaluate(ast, env) == 21
    assert evaluate(parse_expression("x"), env) == 10


def test_reevaluation_is_idempotent():
    ast = parse_expression("max(1, x) * 3/4 - 2")
    env = base_environment()
    env["x"] = 8

    first = evaluate(ast, env)
    second = evaluate(ast, env)

    assert first == second == 4


def test_eval_expr_records_steps_when_traced():
    ast = parse_expression("1 + 2 * x")
    env = base_environment()
    env["x"] = 3

    result = ASTEvaluator().eval_expr(ast, env, trace=True)

    assert result.value == 7
    assert result.is_exact is True
    assert result.steps == ["x = 3", "2 * 3 = 6", "1 + 6 = 7"]


def test_eval_expr_traces_calls():
    result = ASTEvaluator().eval_expr(parse_expression("max(1, 3/4)"), base_environment(), trace=True)

    assert result.steps == ["max(1, 3/4) = 1"]


def test_eval_expr_without_trace_and_with_floats():
    result = ASTEvaluator().eval_expr(parse_expression("1.5 * 2"), base_environment())

    assert result.value == 3.0
    assert result.is_exact is False
    assert result.steps == []


def test_long_chain_evaluates_iteratively():
    ast = parse_expression("+".join(["1"] * 3000))

    assert evaluate(ast, base_environment()) == 3000


def test_literal_needs_no_environment():
    assert evaluate(LiteralNode(value=Fraction(1, 2)), {}) == Fraction(1, 2)


def test_unknown_node_type_is_rejected():
    with pytest.raises(TypeError):
        evaluate("1 + 2", {})  # type: ignore[arg-type]
