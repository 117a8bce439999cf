"""
Port: Environment
Responsibility: name -> bound value lookup consulted during evaluation only.

A bound value is a number, a two-argument operator, an n-argument callable
or a Cell wrapping one of those. A plain dict satisfies this protocol.
"""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Environment(Protocol):
    def __getitem__(self, name: str) -> Any:
        ...

    def __contains__(self, name: object) -> bool:
        ...
