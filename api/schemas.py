"""
schemas.py — FastAPI request/response models.
Kept apart from contracts.py so the API can evolve independently.
"""
from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, Field


# ─────────────────────────── /parse ──────────────────────────────

class ParseRequest(BaseModel):
    text: str = Field(..., min_length=1)


class ParseResponse(BaseModel):
    text: str
    ast: dict[str, Any]     # ExprAST dumped with mode="json"
    infix: str              # fully parenthesised rendering
    names: list[str]


# ─────────────────────────── /evaluate ───────────────────────────

class EvaluateRequest(BaseModel):
    text: str = Field(..., min_length=1)
    bindings: dict[str, Union[int, float]] = Field(default_factory=dict)
    trace: bool = False


class EvaluateResponse(BaseModel):
    value: Union[int, float, str]   # str for exact rationals ("3/4")
    is_exact: bool
    steps: list[str]


# ─────────────────────────── errors ──────────────────────────────

class ParseErrorResponse(BaseModel):
    detail: str
    position: int
    expected: list[str]


class UnboundErrorResponse(BaseModel):
    detail: str
    name: str


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
