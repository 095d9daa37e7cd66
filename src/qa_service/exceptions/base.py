"""
Application-level exceptions for the question/answer service.

Every failure the service can report to a client is one member of a closed set
of kinds (`ErrorKind`). Each kind has exactly one exception class, and each
class carries only what is needed to render the response and to log it:

    - message: human-friendly text, safe to return for client-side mistakes
    - kind: the canonical code used by the response table in `mapper.py`

Internal detail (raw parse errors, database errors, upstream messages) is kept
on the exception for logging but is never part of the client payload.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds. Every member must have a row in the response table."""

    CORS_FORBIDDEN = "cors_forbidden"
    BODY_DESERIALIZE = "body_deserialize"
    INVALID_ID = "invalid_id"
    MISSING_PARAMETERS = "missing_parameters"
    RANGE_INVERTED = "range_inverted"
    PARSE_ERROR = "parse_error"
    QUESTION_NOT_FOUND = "question_not_found"
    QUESTION_ALREADY_EXISTS = "question_already_exists"
    STORAGE = "storage"
    UPSTREAM_CLIENT = "upstream_client"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    UPSTREAM_SERVER = "upstream_server"


class QAError(Exception):
    """
    Base exception for every failure kind known to the service.

    Subclasses set `kind` as a class attribute, so the response mapping never
    depends on message text.
    """

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} (code: {self.kind.value})"


# -------------------------------------------------------------------------------------------
# Transport passthroughs: produced by the HTTP layer, rendered by the same table
# -------------------------------------------------------------------------------------------

class TransportRejection(QAError):
    """A request rejected by the transport layer before it reached a handler."""


class CorsForbiddenError(TransportRejection):
    kind = ErrorKind.CORS_FORBIDDEN

    def __init__(self, message: str = "CORS request forbidden"):
        super().__init__(message)


class BodyDeserializeError(TransportRejection):
    kind = ErrorKind.BODY_DESERIALIZE

    def __init__(self, message: str = "Body deserialize error", *, detail: object = None):
        super().__init__(message)
        # validation errors from pydantic; logged only
        self.detail = detail


# -------------------------------------------------------------------------------------------
# Request validation
# -------------------------------------------------------------------------------------------

class InvalidIdError(QAError):
    """A path identity could not be parsed, or two identities that must match did not."""

    kind = ErrorKind.INVALID_ID

    def __init__(self, message: str = "Invalid id"):
        super().__init__(message)


class MissingParametersError(QAError):
    kind = ErrorKind.MISSING_PARAMETERS

    def __init__(self, message: str = "Missing parameters", *, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class RangeInvertedError(QAError):
    kind = ErrorKind.RANGE_INVERTED

    def __init__(self, message: str = "Start cannot be greater than end"):
        super().__init__(message)


class ParameterParseError(QAError):
    """A numeric query parameter could not be parsed. Wraps the original ValueError."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(self, parameter: str, cause: Exception):
        super().__init__(f"Could not parse parameter '{parameter}'")
        self.parameter = parameter
        self.cause = cause


# -------------------------------------------------------------------------------------------
# Store outcomes
# -------------------------------------------------------------------------------------------

class QuestionNotFoundError(QAError):
    kind = ErrorKind.QUESTION_NOT_FOUND

    def __init__(self, question_id: int | None = None):
        message = "Question not found" if question_id is None else f"Question {question_id} not found"
        super().__init__(message)
        self.question_id = question_id


class QuestionAlreadyExistsError(QAError):
    kind = ErrorKind.QUESTION_ALREADY_EXISTS

    def __init__(self, question_id: int | None = None):
        message = "Question already exists" if question_id is None else f"Question {question_id} already exists"
        super().__init__(message)
        self.question_id = question_id


class StorageError(QAError):
    """
    The backing store failed for reasons opaque to the caller.

    The underlying cause is chained (`raise ... from exc`) and logged at the store
    boundary; it is not copied into the message.
    """

    kind = ErrorKind.STORAGE

    def __init__(self, message: str = "Query could not be executed"):
        super().__init__(message)


# -------------------------------------------------------------------------------------------
# Moderation service failures
# -------------------------------------------------------------------------------------------

class UpstreamError(QAError):
    """The moderation service answered with a non-success status."""

    def __init__(self, status: int, message: str):
        super().__init__(f"Status: {status}, Message: {message}")
        self.status = status
        self.upstream_message = message


class UpstreamClientError(UpstreamError):
    kind = ErrorKind.UPSTREAM_CLIENT


class UpstreamServerError(UpstreamError):
    kind = ErrorKind.UPSTREAM_SERVER


class UpstreamUnreachableError(QAError):
    """The moderation call did not produce a usable response (network failure, bad body)."""

    kind = ErrorKind.UPSTREAM_UNREACHABLE

    def __init__(self, message: str = "External API error"):
        super().__init__(message)


__all__ = [
    "ErrorKind",
    "QAError",
    "TransportRejection",
    "CorsForbiddenError",
    "BodyDeserializeError",
    "InvalidIdError",
    "MissingParametersError",
    "RangeInvertedError",
    "ParameterParseError",
    "QuestionNotFoundError",
    "QuestionAlreadyExistsError",
    "StorageError",
    "UpstreamError",
    "UpstreamClientError",
    "UpstreamServerError",
    "UpstreamUnreachableError",
]
