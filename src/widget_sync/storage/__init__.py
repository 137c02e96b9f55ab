"""Storage package exports for SQLAlchemy helpers and the key-value store."""
from .db import get_engine, get_session, init_db  # noqa: F401
from .kv import KeyValueStore  # noqa: F401
from .models import Base, KeyValueEntry  # noqa: F401

__all__ = ["Base", "KeyValueEntry", "KeyValueStore", "get_engine", "init_db", "get_session"]
