"""
CORS middleware whose rejections go through the error table.

Starlette's CORSMiddleware answers a preflight from a disallowed origin itself,
with a plain-text 400. Here that case is rendered as CorsForbiddenError (403)
like every other transport rejection. Other preflight failures (method or
header not allowed) keep Starlette's response.
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response

from qa_service.exceptions import CorsForbiddenError, map_error


def forbidden_origin(origin: str) -> CorsForbiddenError:
    return CorsForbiddenError(f"CORS request forbidden: origin {origin} is not allowed")


class QACORSMiddleware(CORSMiddleware):
    def preflight_response(self, request_headers: Headers) -> Response:
        origin = request_headers["origin"]
        if not self.is_allowed_origin(origin=origin):
            error = map_error(forbidden_origin(origin))
            return JSONResponse(error.to_payload(), status_code=error.status_code)
        return super().preflight_response(request_headers)
