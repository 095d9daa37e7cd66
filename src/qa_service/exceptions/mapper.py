"""
Map exceptions to client-visible responses.

`map_error()` is the single place where a failure becomes a status code and a
message. It is total: taxonomy members go through `_RESPONSE_TABLE`, and
anything else falls back to "Route not found" (404) with the full detail logged
server-side only.

`db_error_handler()` is the store-boundary counterpart: it converts whatever the
database layer raises into taxonomy exceptions.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from .base import (
    ErrorKind,
    QAError,
    QuestionAlreadyExistsError,
    QuestionNotFoundError,
    StorageError,
)
from .integrity_classifier import ConstraintKind, classify_integrity_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorResponse:
    status_code: int
    message: str
    code: str

    def to_payload(self) -> dict:
        """JSON body for the response. Kept free of raw backend text."""
        return {"detail": self.message, "code": self.code}


@dataclass(frozen=True)
class _Rule:
    status_code: int
    # None echoes the exception's own message (only for messages we wrote ourselves)
    message: str | None
    log_level: int


_RESPONSE_TABLE: dict[ErrorKind, _Rule] = {
    ErrorKind.CORS_FORBIDDEN: _Rule(403, None, logging.WARNING),
    ErrorKind.BODY_DESERIALIZE: _Rule(422, "Body deserialize error", logging.INFO),
    ErrorKind.INVALID_ID: _Rule(422, "No valid id provided", logging.INFO),
    ErrorKind.MISSING_PARAMETERS: _Rule(400, "Missing parameters", logging.INFO),
    ErrorKind.RANGE_INVERTED: _Rule(400, None, logging.INFO),
    ErrorKind.PARSE_ERROR: _Rule(400, "Parse error", logging.INFO),
    ErrorKind.QUESTION_NOT_FOUND: _Rule(404, "Question not found", logging.WARNING),
    ErrorKind.QUESTION_ALREADY_EXISTS: _Rule(409, "Question already exists", logging.INFO),
    ErrorKind.STORAGE: _Rule(500, "Query could not be executed", logging.ERROR),
    ErrorKind.UPSTREAM_CLIENT: _Rule(502, "External Client error", logging.WARNING),
    ErrorKind.UPSTREAM_UNREACHABLE: _Rule(502, "External API error", logging.ERROR),
    ErrorKind.UPSTREAM_SERVER: _Rule(502, "External Server error", logging.ERROR),
}

_missing_rules = set(ErrorKind) - set(_RESPONSE_TABLE)
if _missing_rules:
    raise RuntimeError(f"No response rule for error kind(s): {sorted(k.value for k in _missing_rules)}")

ROUTE_NOT_FOUND = ErrorResponse(404, "Route not found", "route_not_found")


def map_error(exc: BaseException) -> ErrorResponse:
    """
    Return the (status, message, code) for any exception and log the branch taken.

    Client mistakes are logged at INFO/WARNING, internal faults at ERROR. The log
    record carries the internal detail; the returned message never does.
    """
    if not isinstance(exc, QAError):
        logger.error(
            "error.unrecognized",
            extra={"error_type": type(exc).__name__, "error_detail": repr(exc)},
        )
        return ROUTE_NOT_FOUND

    rule = _RESPONSE_TABLE[exc.kind]
    message = rule.message if rule.message is not None else exc.message

    logger.log(
        rule.log_level,
        "error.mapped",
        extra={
            "error_code": exc.kind.value,
            "status_code": rule.status_code,
            "error_detail": str(exc),
        },
    )
    cause = getattr(exc, "cause", None) or exc.__cause__
    if cause is not None:
        logger.debug("error.mapped.cause", extra={"error_code": exc.kind.value, "cause": repr(cause)})

    return ErrorResponse(rule.status_code, message, exc.kind.value)


# -----------------------
# Store boundary
# -----------------------

def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Map a SQLAlchemy IntegrityError to a taxonomy exception and raise it.

    - unique violation on a question -> QuestionAlreadyExistsError
    - foreign key violation (answer pointing at a missing question) -> QuestionNotFoundError
    - anything else -> StorageError
    """
    constraint_kind, constraint_name = classify_integrity_error(exc)
    model_part = model_name or "Record"

    if constraint_kind is ConstraintKind.UNIQUE:
        logger.info("mapper.duplicate_detected", extra={"model": model_part, "constraint": constraint_name})
        raise QuestionAlreadyExistsError() from exc

    if constraint_kind is ConstraintKind.FOREIGN_KEY:
        logger.info("mapper.foreign_key_violation", extra={"model": model_part, "constraint": constraint_name})
        raise QuestionNotFoundError() from exc

    logger.error(
        "mapper.integrity_error",
        extra={"model": model_part, "constraint": constraint_name, "constraint_kind": constraint_kind.value},
    )
    logger.debug("mapper.integrity_error_raw", extra={"model": model_part, "raw": str(exc.orig)})
    raise StorageError() from exc


@asynccontextmanager
async def db_error_handler(model_name: str | None = None):
    """
    Usage:
        async with db_error_handler("Question"):
            async with sessions.begin() as session:
                ... DB ops ...

    Taxonomy exceptions raised inside the block pass through untouched. Integrity
    errors are classified; every other failure (connection loss, pool timeout,
    mapping errors) becomes a StorageError with the cause logged.
    """
    try:
        yield
    except QAError:
        raise
    except IntegrityError as exc:
        raise_mapped_integrity_error(exc, model_name)
    except Exception as exc:
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        raise StorageError() from exc
