from .base import Base
from .session import (
    check_connection,
    create_engine,
    create_schema,
    create_session_factory,
    drop_schema,
)

__all__ = [
    "Base",
    "check_connection",
    "create_engine",
    "create_schema",
    "create_session_factory",
    "drop_schema",
]
