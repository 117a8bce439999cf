"""
cell.py — mutable container that can be bound in an environment.

The grammar has no syntax for cells; a caller binds one to share a value
that changes between evaluations. The evaluator always consumes the current
contents, never the Cell itself.
"""
from __future__ import annotations

from typing import Any


class Cell:
    __slots__ = ("value",)

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


def deref(value: Any) -> Any:
    """Current contents of a Cell (followed through nested cells); other values as-is."""
    while isinstance(value, Cell):
        value = value.value
    return value
