"""
Persistence layer.

Two interchangeable stores implement the `BaseStore` contract:

    from qa_service.repositories import InMemoryStore, SqlStore
"""

from .base_store import BaseStore, DEFAULT_PAGE_SIZE
from .memory_store import InMemoryStore
from .sql_store import SqlStore

__all__ = [
    "BaseStore",
    "DEFAULT_PAGE_SIZE",
    "InMemoryStore",
    "SqlStore",
]
