"""
literals.py — numeric literal parsers.

  integer  = ["-"] digits                     -> int (signed 64-bit)
  decimal  = ["-"] digits "." digits          -> float
  rational = integer "/" digits               -> Fraction (int when whole)
  binary   = ["-"] "0b" ("0"|"1")+            -> int
  hex      = ["-"] ("0x"|"#") hexdigit+       -> int

number() yields every literal that matches at a position, longest reading
first, so the grammar can fall back to a shorter one if the rest of the
input does not fit.
"""
from __future__ import annotations

from fractions import Fraction
from typing import Iterator, Union

from adapters.expression_parser.lexical import Scanner, is_bin_digit, is_hex_digit

LiteralValue = Union[int, float, Fraction]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def _sign(scan: Scanner, pos: int) -> tuple[str, int]:
    if scan.peek(pos) == "-":
        return "-", pos + 1
    return "", pos


def _to_long(scan: Scanner, pos: int, text: str, base: int) -> int | None:
    value = int(text, base)
    if INT64_MIN <= value <= INT64_MAX:
        return value
    return scan.fail(pos, "64-bit integer")


def integer(scan: Scanner, pos: int) -> tuple[int, int] | None:
    sign, start = _sign(scan, pos)
    found = scan.digits(start)
    if found is None:
        return None
    text, stop = found
    value = _to_long(scan, pos, sign + text, 10)
    if value is None:
        return None
    return value, stop


def decimal(scan: Scanner, pos: int) -> tuple[float, int] | None:
    sign, start = _sign(scan, pos)
    whole = scan.digits(start)
    if whole is None:
        return None
    dot = scan.match(whole[1], ".")
    if dot is None:
        return None
    frac = scan.digits(dot)
    if frac is None:
        return None
    return float(f"{sign}{whole[0]}.{frac[0]}"), frac[1]


def rational(scan: Scanner, pos: int) -> tuple[LiteralValue, int] | None:
    dividend = integer(scan, pos)
    if dividend is None:
        return None
    slash = scan.match(dividend[1], "/")
    if slash is None:
        return None
    found = scan.digits(slash)
    if found is None:
        return None
    divisor = _to_long(scan, slash, found[0], 10)
    if divisor is None:
        return None
    if divisor == 0:
        # n/0 is left to the "/" operator, which raises at evaluation time.
        return scan.fail(slash, "non-zero divisor")
    value = Fraction(dividend[0], divisor)
    if value.denominator == 1:
        return int(value), found[1]
    return value, found[1]


def binary(scan: Scanner, pos: int) -> tuple[int, int] | None:
    sign, start = _sign(scan, pos)
    body = scan.match(start, "0b")
    if body is None:
        return None
    found = scan.run_of(body, is_bin_digit, "binary digit")
    if found is None:
        return None
    value = _to_long(scan, pos, sign + found[0], 2)
    if value is None:
        return None
    return value, found[1]


def hexadecimal(scan: Scanner, pos: int) -> tuple[int, int] | None:
    sign, start = _sign(scan, pos)
    body = scan.match(start, "#")
    if body is None:
        body = scan.match(start, "0x")
    if body is None:
        return None
    found = scan.run_of(body, is_hex_digit, "hex digit")
    if found is None:
        return None
    value = _to_long(scan, pos, sign + found[0], 16)
    if value is None:
        return None
    return value, found[1]


_LONGEST_FIRST = (hexadecimal, binary, rational, decimal, integer)


def number(scan: Scanner, pos: int) -> Iterator[tuple[LiteralValue, int]]:
    for parser in _LONGEST_FIRST:
        found = parser(scan, pos)
        if found is not None:
            yield found
