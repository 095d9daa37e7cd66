from .pagination import (
    MAX_INT,
    IndexRange,
    Pagination,
    extract_index_range,
    extract_pagination,
    parse_bounded_int,
    parse_non_negative,
)

__all__ = [
    "MAX_INT",
    "IndexRange",
    "Pagination",
    "extract_index_range",
    "extract_pagination",
    "parse_bounded_int",
    "parse_non_negative",
]
