"""
lexical.py — character classifiers and the Scanner used by the grammar.

Every primitive takes a position and returns the position after the match,
or None on failure. A failed primitive consumes nothing; it only records what
it expected so that ParseFailure can report the furthest point reached.
"""
from __future__ import annotations

import string
from typing import Callable

from contracts import ParseFailure

DIGITS = frozenset(string.digits)
# ASCII only; non-ASCII letters are not identifier characters.
LETTERS = frozenset(string.ascii_letters)
IDENT_CHARS = LETTERS | DIGITS | {"_"}
HEX_DIGITS = frozenset(string.hexdigits)
BIN_DIGITS = frozenset("01")
WHITESPACE = frozenset(" \t\r\n")

# (furthest position, labels expected there)
Failures = tuple[int, frozenset[str]]


def is_digit(ch: str) -> bool:
    return ch in DIGITS


def is_letter(ch: str) -> bool:
    return ch in LETTERS


def is_ident_char(ch: str) -> bool:
    return ch in IDENT_CHARS


def is_hex_digit(ch: str) -> bool:
    return ch in HEX_DIGITS


def is_bin_digit(ch: str) -> bool:
    return ch in BIN_DIGITS


class Scanner:
    """Read-only view of the input plus furthest-failure bookkeeping."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.end = len(text)
        self._furthest = 0
        self._expected: set[str] = set()

    # -- failure tracking ----------------------------------------------------

    def fail(self, pos: int, label: str) -> None:
        if pos > self._furthest:
            self._furthest = pos
            self._expected = {label}
        elif pos == self._furthest:
            self._expected.add(label)
        return None

    def failure(self) -> ParseFailure:
        return ParseFailure(self.text, self._furthest, sorted(self._expected))

    def checkpoint(self) -> tuple[int, set[str]]:
        """Start recording failures afresh. Hand the result back to resume()."""
        saved = (self._furthest, self._expected)
        self._furthest, self._expected = -1, set()
        return saved

    def resume(self, saved: tuple[int, set[str]], keep: bool = True) -> Failures:
        """
        Return to the state saved by checkpoint(). The failures recorded in
        between are returned, and merged back in unless keep is False.
        """
        recorded = (self._furthest, frozenset(self._expected))
        self._furthest, self._expected = saved
        if keep:
            self.replay(recorded)
        return recorded

    def replay(self, recorded: Failures) -> None:
        pos, labels = recorded
        for label in labels:
            self.fail(pos, label)

    # -- primitives ----------------------------------------------------------

    def peek(self, pos: int) -> str:
        return self.text[pos] if pos < self.end else ""

    def char_in(self, pos: int, accepts: Callable[[str], bool], label: str) -> int | None:
        if pos < self.end and accepts(self.text[pos]):
            return pos + 1
        return self.fail(pos, label)

    def match(self, pos: int, literal: str) -> int | None:
        if self.text.startswith(literal, pos):
            return pos + len(literal)
        return self.fail(pos, repr(literal))

    def run_of(self, pos: int, accepts: Callable[[str], bool], label: str) -> tuple[str, int] | None:
        """One or more characters satisfying `accepts`."""
        stop = self.char_in(pos, accepts, label)
        if stop is None:
            return None
        while stop < self.end and accepts(self.text[stop]):
            stop += 1
        return self.text[pos:stop], stop

    def digits(self, pos: int) -> tuple[str, int] | None:
        return self.run_of(pos, is_digit, "digit")

    def spaces(self, pos: int) -> int:
        """Zero or more whitespace characters; never fails."""
        while pos < self.end and self.text[pos] in WHITESPACE:
            pos += 1
        return pos

    def identifier(self, pos: int) -> tuple[str, int] | None:
        stop = self.char_in(pos, is_letter, "letter")
        if stop is None:
            return None
        while stop < self.end and is_ident_char(self.text[stop]):
            stop += 1
        return self.text[pos:stop], stop

    def starts_identifier(self, pos: int) -> bool:
        """True where an identifier begins, not inside one."""
        if not is_letter(self.peek(pos)):
            return False
        return pos == 0 or not is_ident_char(self.text[pos - 1])

    def operator(self, pos: int, symbols: tuple[str, ...], label: str) -> tuple[str, int] | None:
        """First of `symbols` found at pos; callers pass them longest first."""
        for symbol in symbols:
            if self.text.startswith(symbol, pos):
                return symbol, pos + len(symbol)
        return self.fail(pos, label)
