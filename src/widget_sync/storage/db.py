from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

logger = logging.getLogger("widget_sync.storage")

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def _make_sqlite_url(path: Union[str, Path]) -> str:
    p = Path(path)
    if not p.is_absolute():
        p = p.resolve()
    return f"sqlite:///{p.as_posix()}"


def get_engine(path: Optional[Union[str, Path]] = None) -> Engine:
    """Return a SQLAlchemy Engine for the given path.

    - If path is None or 'memory', return an in-memory SQLite engine.
    - Otherwise create parent directories as needed and return a file-based engine.
    """
    global _engine, _SessionFactory

    if path is None or path == "memory":
        # A single shared connection, or every session would see its own empty database.
        _engine = sa.create_engine(
            "sqlite://",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=sa.pool.StaticPool,
        )
    else:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        _engine = sa.create_engine(_make_sqlite_url(path), echo=False)

    _SessionFactory = sessionmaker(bind=_engine)
    return _engine


def init_db(engine: Optional[Engine] = None) -> Engine:
    """Create the schema and make `engine` the one sessions bind to."""
    global _engine, _SessionFactory

    if engine is None:
        engine = get_engine(None)

    Base.metadata.create_all(engine)

    _engine = engine
    _SessionFactory = sessionmaker(bind=_engine)
    logger.info({"event": "storage.init_db", "engine": str(engine.url)})
    return engine


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a Session on the configured engine.

    Commits on success, rolls back on exception, always closes.
    """
    if _SessionFactory is None:
        get_engine(None)
        Base.metadata.create_all(_engine)

    assert _SessionFactory is not None
    sess: Session = _SessionFactory()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()
