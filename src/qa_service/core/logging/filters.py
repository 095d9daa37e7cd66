# src/qa_service/core/logging/filters.py
"""
Logging filters.

RequestIdFilter attaches the per-request correlation id to every LogRecord. The
id lives in a `contextvars.ContextVar`, so it follows a request across awaits
and concurrently handled requests never see each other's id.

RedactFilter masks record attributes whose name marks them as secret. The
moderation client logs its outbound request context, and the API key travels in
an `apikey` header, so that name is on the list alongside the usual suspects.

Both filters return True: they annotate records, they never drop them.
"""

import logging
import contextvars
from logging import LogRecord

# Default None means "no request id set in this context".
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

REDACTED = "***REDACTED***"


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context.

    Returns:
        token: pass it to reset_request_id(token) to restore the previous value.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token):
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee that every LogRecord has a `request_id` attribute.

    Precedence:
      1. an explicit `extra={"request_id": ...}` passed by the caller (handlers do this)
      2. the contextvar set by RequestIDMiddleware
      3. the sentinel "-"
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "apikey",
        "api_key",
        "moderation_api_key",
    }

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = REDACTED
        # nested header dicts, e.g. extra={"headers": {...}}
        headers = record.__dict__.get("headers")
        if isinstance(headers, dict):
            record.__dict__["headers"] = {
                k: (REDACTED if str(k).lower() in self.SENSITIVE else v) for k, v in headers.items()
            }
        return True
