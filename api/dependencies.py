"""
dependencies.py — FastAPI dependency injection.
Each dependency returns the matching adapter from Request.app.state.
"""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.grammar import RecursiveDescentParser
from config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_parser(request: Request) -> RecursiveDescentParser:
    return request.app.state.parser


def get_evaluator(request: Request) -> ASTEvaluator:
    return request.app.state.evaluator


def get_base_env(request: Request) -> dict[str, Any]:
    return request.app.state.base_env


def check_length(text: str, settings: Settings) -> None:
    if len(text) > settings.max_expression_length:
        raise HTTPException(
            status_code=422,
            detail=f"Expression longer than {settings.max_expression_length} characters.",
        )
