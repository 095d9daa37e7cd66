"""
FastAPI exception handlers.

Every failure is rendered through `map_error()`, so the status code, message
and payload shape come from one table:

    {"detail": "<client message>", "code": "<error kind>"}

Registered sources:
  - QAError: everything raised by handlers, validators, stores and moderation
  - RequestValidationError: malformed JSON/form bodies -> BodyDeserializeError (422)
  - Starlette HTTPException: unmatched routes and methods -> "Route not found" (404)
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from qa_service.exceptions import BodyDeserializeError, QAError, map_error

logger = logging.getLogger(__name__)


def _render(request: Request, exc: BaseException) -> JSONResponse:
    response = map_error(exc)
    logger.debug(
        "http.error_response",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "code": response.code,
        },
    )
    return JSONResponse(status_code=response.status_code, content=response.to_payload())


async def qa_error_handler(request: Request, exc: QAError) -> JSONResponse:
    return _render(request, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body detail goes to the log only; the client gets the generic message."""
    return _render(request, BodyDeserializeError(detail=exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _render(request, exc)


def register_exception_handlers(app):
    app.add_exception_handler(QAError, qa_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
