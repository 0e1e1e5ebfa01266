"""
Query-credential authorization endpoint.

GET /test compares the ``auth`` query parameter to a fixed credential and
answers 200 or 401 with the status code echoed in the JSON body.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.src.dependencies import get_request_logger
from api.src.models.auth import AuthStatusResponse

EXPECTED_AUTH = "Ivan"

router = APIRouter(tags=["Authorization"])


def first_query_value(request: Request, name: str) -> str:
    """Return the first value of a query parameter, or "" when absent."""
    values = request.query_params.getlist(name)
    return values[0] if values else ""


def _status_response(status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=AuthStatusResponse(code=status_code).model_dump(),
    )


@router.get(
    "/test",
    response_model=AuthStatusResponse,
    responses={
        200: {"model": AuthStatusResponse, "description": "Authorized"},
        401: {"model": AuthStatusResponse, "description": "Unauthorized"},
    },
)
def check_auth(request: Request, logger: Any = Depends(get_request_logger)) -> JSONResponse:
    """
    Check the ``auth`` query parameter.

    The comparison is exact and case-sensitive, with no trimming.
    """
    if first_query_value(request, "auth") != EXPECTED_AUTH:
        logger.warning("Unauthorized")
        return _status_response(status.HTTP_401_UNAUTHORIZED)

    logger.info("Authorized")
    response = _status_response(status.HTTP_200_OK)
    logger.info("OK")
    return response
