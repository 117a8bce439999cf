"""
api/main.py — FastAPI entry point.

Lifespan:
  - Builds the stateless adapters once (parser, evaluator, base environment)
  - Nothing to release on shutdown; the adapters own no external resources

Error mapping:
  ParseFailure          -> 422 {detail, position, expected}
  UnboundReferenceError -> 422 {detail, name}
  ArithmeticError       -> 400 (e.g. division by zero in a bound operator)
  ValueError/TypeError  -> 400 (domain errors from bound functions)
  RecursionError        -> 422 (tree too deep to evaluate or render)
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adapters.environment.base_env import base_environment
from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.grammar import RecursiveDescentParser
from api.routers import evaluate, parse
from api.schemas import HealthResponse, ParseErrorResponse, UnboundErrorResponse
from config import Settings
from contracts import ParseFailure, UnboundReferenceError

logger = logging.getLogger("infix.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # Stateless adapters, created once and shared by all requests
    app.state.parser = RecursiveDescentParser()
    app.state.evaluator = ASTEvaluator(float_precision=settings.float_precision)
    app.state.base_env = base_environment()

    logger.info("infix API ready (%d base bindings).", len(app.state.base_env))
    yield
    logger.info("Shutting down.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(parse.router)
    app.include_router(evaluate.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version)

    # Error handlers
    @app.exception_handler(ParseFailure)
    async def parse_failure_handler(request: Request, exc: ParseFailure):
        body = ParseErrorResponse(detail=str(exc), position=exc.position, expected=exc.expected)
        return JSONResponse(status_code=422, content=body.model_dump())

    @app.exception_handler(UnboundReferenceError)
    async def unbound_handler(request: Request, exc: UnboundReferenceError):
        body = UnboundErrorResponse(detail=str(exc), name=exc.name)
        return JSONResponse(status_code=422, content=body.model_dump())

    @app.exception_handler(ArithmeticError)
    async def arithmetic_handler(request: Request, exc: ArithmeticError):
        return JSONResponse(status_code=400, content={"detail": str(exc) or type(exc).__name__})

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(TypeError)
    async def type_error_handler(request: Request, exc: TypeError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RecursionError)
    async def recursion_handler(request: Request, exc: RecursionError):
        logger.warning("Expression too deeply nested: %s", exc)
        return JSONResponse(status_code=422, content={"detail": "Expression nested too deeply"})

    return app


app = create_app()
