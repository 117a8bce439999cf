"""
Router: POST /evaluate
Parses text and evaluates it against the base environment plus the
request's variable bindings.
"""
import logging

from fastapi import APIRouter, Depends

from adapters.environment.base_env import merge_env
from api.dependencies import (
    check_length,
    get_base_env,
    get_evaluator,
    get_parser,
    get_settings,
)
from api.schemas import EvaluateRequest, EvaluateResponse
from contracts import format_number

logger = logging.getLogger("infix.api")

router = APIRouter(prefix="/evaluate", tags=["evaluate"])


@router.post(
    "",
    response_model=EvaluateResponse,
    responses={
        400: {"description": "Arithmetic or domain error raised by a bound operator"},
        422: {"description": "Parse failure, unbound name or nesting too deep"},
    },
)
async def evaluate(
    body: EvaluateRequest,
    parser=Depends(get_parser),
    evaluator=Depends(get_evaluator),
    base_env=Depends(get_base_env),
    settings=Depends(get_settings),
) -> EvaluateResponse:
    check_length(body.text, settings)
    ast = parser.parse_ast(body.text)
    env = merge_env(base_env, body.bindings)
    result = evaluator.eval_expr(ast, env, trace=body.trace)
    logger.info("Evaluated %r with %d binding(s).", body.text, len(body.bindings))

    value = result.value
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        value = format_number(value, settings.float_precision)
    return EvaluateResponse(value=value, is_exact=result.is_exact, steps=result.steps)
