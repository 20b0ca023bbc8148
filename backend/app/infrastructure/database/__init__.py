from .base import Base
from .session import (
    create_local_engine,
    create_session_factory,
    ensure_sqlite_directory,
    get_async_url,
)

__all__ = [
    "Base",
    "create_local_engine",
    "create_session_factory",
    "ensure_sqlite_directory",
    "get_async_url",
]
