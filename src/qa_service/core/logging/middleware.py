# src/qa_service/core/logging/middleware.py
"""
Request ID middleware for FastAPI / Starlette.

Each request gets a correlation id: the incoming `X-Request-ID` header when it is
a sane value, a fresh UUID4 otherwise. The id is stored in the request_id
contextvar (read by RequestIdFilter), on `request.state.request_id` (read by the
`get_request_id` dependency that hands it to the handlers), and echoed back in
the `X-Request-ID` response header.
"""

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Printable token without whitespace, bounded length: keeps log lines single-line.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")


def _resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = _resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        token = set_request_id(rid)

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
