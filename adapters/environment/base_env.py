"""
Adapter: base environment
Default bindings for every operator symbol the grammar recognises, a handful
of constants and a small math library. Implements the Environment port as a
plain dict, so callers can copy it and override any entry (including
operators) to give the same parsed expression different semantics.

Arithmetic stays exact (int / Fraction) for as long as the operands are
exact; once a float enters, results are floats.
"""
from __future__ import annotations

import math
import random
from fractions import Fraction
from typing import Any, Callable, Mapping

INT64_MAX = 2 ** 63 - 1
_MASK64 = 2 ** 64 - 1


def _exact(x: Any) -> bool:
    return isinstance(x, (int, Fraction)) and not isinstance(x, bool)


def _collapse(x: Any) -> Any:
    """Fraction with denominator 1 -> int."""
    if isinstance(x, Fraction) and x.denominator == 1:
        return x.numerator
    return x


def _integral(x: Any, op: str) -> int:
    x = _collapse(x)
    if isinstance(x, float) and x.is_integer():
        return int(x)
    if isinstance(x, int):
        return x
    raise TypeError(f"{op} expects integer operands, got {x!r}")


# ─────────────────────────── Operators ───────────────────────────────────

def add(a, b):
    return _collapse(a + b)


def subtract(a, b):
    return _collapse(a - b)


def multiply(a, b):
    return _collapse(a * b)


def divide(a, b):
    if _exact(a) and _exact(b):
        return _collapse(Fraction(a) / Fraction(b))
    return a / b


def power(a, b):
    b = _collapse(b)
    if _exact(a) and isinstance(b, int):
        if b < 0:
            # 0 ** -n raises ZeroDivisionError here
            return _collapse(Fraction(a) ** b)
        return _collapse(a ** b)
    return math.pow(a, b)


def modulo(a, b):
    return _collapse(a % b)


def shift_left(a, b):
    return _integral(a, "<<") << _integral(b, "<<")


def shift_right(a, b):
    return _integral(a, ">>") >> _integral(b, ">>")


def unsigned_shift_right(a, b):
    """64-bit logical shift: the sign bit is shifted in as zero."""
    shifted = (_integral(a, ">>>") & _MASK64) >> (_integral(b, ">>>") & 63)
    if shifted > INT64_MAX:
        shifted -= 2 ** 64
    return shifted


def bit_or(a, b):
    return _integral(a, "|") | _integral(b, "|")


def bit_and(a, b):
    return _integral(a, "&") & _integral(b, "&")


OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "/": divide,
    "÷": divide,
    "**": power,
    "%": modulo,
    "<<": shift_left,
    ">>": shift_right,
    ">>>": unsigned_shift_right,
    "|": bit_or,
    "&": bit_and,
}


# ─────────────────────────── Functions ───────────────────────────────────

def absolute(x):
    return _collapse(abs(x))


def signum(x):
    if x > 0:
        return 1
    if x < 0:
        return -1
    return 0


def cbrt(x):
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def log(x, base=None):
    if base is None:
        return math.log(x)
    return math.log(x, base)


def mean(*xs):
    if not xs:
        raise ValueError("mean() of no values")
    if all(_exact(x) for x in xs):
        return _collapse(Fraction(sum(xs)) / len(xs))
    return math.fsum(xs) / len(xs)


def total(*xs):
    return _collapse(sum(xs))


def product(*xs):
    return _collapse(math.prod(xs))


def fact(n):
    return math.factorial(_integral(n, "fact"))


def gcd(*xs):
    return math.gcd(*(_integral(x, "gcd") for x in xs))


def lcm(*xs):
    return math.lcm(*(_integral(x, "lcm") for x in xs))


def rand(n=None):
    """rand() in [0, 1); rand(n) in [0, n)."""
    if n is None:
        return random.random()
    return random.random() * n


FUNCTIONS: dict[str, Callable[..., Any]] = {
    "abs": absolute,
    "signum": signum,
    "sqrt": math.sqrt,
    "cbrt": cbrt,
    "exp": math.exp,
    "log": log,
    "log10": math.log10,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "atan2": math.atan2,
    "sinh": math.sinh,
    "cosh": math.cosh,
    "tanh": math.tanh,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": round,
    "min": min,
    "max": max,
    "sum": total,
    "product": product,
    "mean": mean,
    "hypot": math.hypot,
    "fact": fact,
    "gcd": gcd,
    "lcm": lcm,
    "rand": rand,
}

CONSTANTS: dict[str, float] = {
    "e": math.e,
    "pi": math.pi,
    "tau": math.tau,
    "phi": (1 + math.sqrt(5)) / 2,
}


def base_environment() -> dict[str, Any]:
    """Fresh dict with all operators, constants and functions; safe to mutate."""
    env: dict[str, Any] = {}
    env.update(OPERATORS)
    env.update(CONSTANTS)
    env.update(FUNCTIONS)
    return env


def merge_env(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """New dict: base bindings with overrides on top. Neither input is modified."""
    merged = dict(base)
    merged.update(overrides)
    return merged
