"""
Pagination parameter validation.

Two mutually exclusive parameter pairs are understood:

  - offset/limit (default): counts. `offset > limit` is rejected, values are
    otherwise passed through unchanged.
  - start/end: absolute indices into the current result set. Both bounds are
    clamped to `total_length` after the ordering check.

Query parameters arrive as raw strings. A non-empty query map is always
validated; callers skip validation only when no parameters were sent at all.
"""

import logging
from dataclasses import dataclass
from typing import Mapping

from qa_service.exceptions import (
    MissingParametersError,
    ParameterParseError,
    RangeInvertedError,
)

logger = logging.getLogger(__name__)

# Largest value the database binds as an integer (signed 32-bit).
MAX_INT = 2**31 - 1
_MAX_DIGITS = len(str(MAX_INT))


def parse_bounded_int(raw: str) -> int | None:
    """
    Decode ASCII decimal digits into an int in `[0, MAX_INT]`, or None.

    Leading zeros are allowed. The length check runs before `int()`, so huge
    inputs never reach the interpreter's digit limit.
    """
    if not (raw.isascii() and raw.isdigit()):
        return None
    digits = raw.lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        return None
    value = int(digits)
    return value if value <= MAX_INT else None


@dataclass(frozen=True)
class Pagination:
    offset: int
    limit: int


@dataclass(frozen=True)
class IndexRange:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


def parse_non_negative(name: str, raw: str) -> int:
    """
    Parse a query value as a non-negative decimal integer.

    Only ASCII digits are accepted: no sign, no whitespace, no underscores.
    Values above MAX_INT are rejected like any other malformed input.
    """
    value = parse_bounded_int(raw)
    if value is not None:
        return value
    cause = ValueError(f"not an integer in [0, {MAX_INT}]: {raw[:32]!r}")
    raise ParameterParseError(name, cause) from cause


def _require_pair(params: Mapping[str, str], lower: str, upper: str) -> tuple[str, str]:
    missing = [key for key in (lower, upper) if key not in params]
    if missing:
        logger.info("pagination.missing_parameters", extra={"missing": missing})
        raise MissingParametersError(fields=missing)
    return params[lower], params[upper]


def extract_pagination(params: Mapping[str, str]) -> Pagination:
    """
    Validate an `offset`/`limit` pair.

    Raises:
        MissingParametersError: either key is absent.
        ParameterParseError: either value is not a non-negative integer.
        RangeInvertedError: offset > limit.
    """
    raw_offset, raw_limit = _require_pair(params, "offset", "limit")
    offset = parse_non_negative("offset", raw_offset)
    limit = parse_non_negative("limit", raw_limit)

    if offset > limit:
        raise RangeInvertedError("Offset cannot be greater than limit")

    return Pagination(offset=offset, limit=limit)


def extract_index_range(params: Mapping[str, str], total_length: int) -> IndexRange:
    """
    Validate a `start`/`end` pair and clamp it into `[0, total_length]`.

    The ordering check runs on the raw values, so `start > end` is rejected even
    when both would clamp to the same position.
    """
    raw_start, raw_end = _require_pair(params, "start", "end")
    start = parse_non_negative("start", raw_start)
    end = parse_non_negative("end", raw_end)

    if start > end:
        raise RangeInvertedError("Start cannot be greater than end")

    return IndexRange(start=min(start, total_length), end=min(end, total_length))
