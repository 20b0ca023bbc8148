from .local_store import SQLAlchemyLocalStore

__all__ = [
    "SQLAlchemyLocalStore",
]
