from __future__ import annotations

import math
from fractions import Fraction

import pytest

from adapters.environment.base_env import (
    base_environment,
    bit_and,
    bit_or,
    divide,
    mean,
    merge_env,
    modulo,
    power,
    shift_left,
    shift_right,
    unsigned_shift_right,
)
from adapters.evaluator.ast_evaluator import evaluate
from adapters.expression_parser.grammar import parse_expression
from contracts import ADD_OPS, MUL_OPS


def _eval(text: str):
    return evaluate(parse_expression(text), base_environment())


def test_every_operator_symbol_is_bound():
    env = base_environment()
    for symbol in MUL_OPS + ADD_OPS:
        assert callable(env[symbol])


def test_division_stays_exact_for_exact_operands():
    assert divide(1, 3) == Fraction(1, 3)
    result = divide(6, 3)
    assert result == 2 and isinstance(result, int)
    assert divide(1.0, 4) == 0.25
    with pytest.raises(ZeroDivisionError):
        divide(1, 0)
    with pytest.raises(ZeroDivisionError):
        divide(1.0, 0)


def test_power_and_modulo():
    assert power(2, 10) == 1024
    assert power(Fraction(1, 2), 2) == Fraction(1, 4)
    assert power(2, -1) == 0.5
    assert modulo(-7, 3) == 2


def test_negative_exponent_stays_exact():
    result = power(2, -2)
    assert result == Fraction(1, 4) and isinstance(result, Fraction)
    assert power(Fraction(2, 3), -1) == Fraction(3, 2)
    assert power(2.0, -1) == 0.5
    with pytest.raises(ZeroDivisionError):
        power(0, -1)


def test_shifts_and_bitwise_operators():
    assert shift_left(1, 4) == 16
    assert shift_right(-16, 2) == -4
    assert unsigned_shift_right(-1, 60) == 15
    assert unsigned_shift_right(16, 2) == 4
    assert unsigned_shift_right(-16, 0) == -16
    assert bit_or(0b1010, 0b0101) == 15
    assert bit_and(12, 10) == 8
    with pytest.raises(TypeError):
        shift_left(Fraction(1, 2), 1)


def test_mean_is_exact_when_possible():
    assert mean(1, 2) == Fraction(3, 2)
    assert mean(1.0, 2.0) == 1.5
    with pytest.raises(ValueError):
        mean()


def test_operators_through_the_grammar():
    assert _eval("0b1010 | 0b0101") == 15
    assert _eval("1 << 4") == 16
    assert _eval("-16 >>> 60") == 15
    assert _eval("7 % 3") == 1
    assert _eval("8 ÷ 2") == 4
    assert _eval("#ff & 0x0f") == 15


def test_functions_and_constants():
    assert _eval("sqrt 16") == 4.0
    assert _eval("fact(5)") == 120
    assert _eval("abs(-3/4)") == Fraction(3, 4)
    assert _eval("gcd(12, 18) + lcm(4, 6)") == 18
    assert _eval("sum(1, 2, 3) * product(2, 3)") == 36
    assert _eval("pi") == math.pi
    assert _eval("floor(7/2)") == 3
    assert 0 <= _eval("rand()") < 1


def test_base_environment_is_fresh_each_time():
    first = base_environment()
    second = base_environment()
    first["+"] = None

    assert first is not second
    assert callable(second["+"])


def test_merge_env_prefers_overrides_and_copies():
    base = {"x": 1, "y": 2}
    merged = merge_env(base, {"y": 20, "z": 30})

    assert merged == {"x": 1, "y": 20, "z": 30}
    assert base == {"x": 1, "y": 2}
