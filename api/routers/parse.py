"""
Router: POST /parse
Parses text into an AST without evaluating it.
"""
from fastapi import APIRouter, Depends

from adapters.expression_parser.ast_tools import to_infix
from api.dependencies import check_length, get_parser, get_settings
from api.schemas import ParseErrorResponse, ParseRequest, ParseResponse

router = APIRouter(prefix="/parse", tags=["parse"])


@router.post(
    "",
    response_model=ParseResponse,
    responses={422: {"model": ParseErrorResponse}},
)
async def parse(
    body: ParseRequest,
    parser=Depends(get_parser),
    settings=Depends(get_settings),
) -> ParseResponse:
    check_length(body.text, settings)
    parsed = parser.parse(body.text)
    return ParseResponse(
        text=parsed.text,
        ast=parsed.ast.model_dump(mode="json"),
        infix=to_infix(parsed.ast),
        names=parsed.names,
    )
