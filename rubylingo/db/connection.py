"""
Database connection management for RubyLingo.

Provides SQLAlchemy engines and sessions for the SQLite dictionary
database. Engines are cached per database path.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Union

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from rubylingo.db.models import Base
from rubylingo.settings import DB_PATH

_engines: Dict[str, Engine] = {}
_engines_lock = threading.Lock()


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.execute("PRAGMA synchronous = NORMAL")
    cursor.close()


def get_engine(db_path: Union[str, Path, None] = None) -> Engine:
    """
    Get the (cached) engine for a database file.

    Args:
        db_path: Path to the SQLite file. Defaults to settings.DB_PATH.
    """
    path = Path(db_path) if db_path is not None else DB_PATH
    key = str(path.resolve())
    with _engines_lock:
        engine = _engines.get(key)
        if engine is None:
            engine = create_engine(f"sqlite:///{path}", future=True)
            event.listen(engine, "connect", _set_sqlite_pragmas)
            _engines[key] = engine
    return engine


def get_session(db_path: Union[str, Path, None] = None) -> Session:
    """Open a new session on the database."""
    return sessionmaker(bind=get_engine(db_path), future=True)()


@contextmanager
def session_scope(db_path: Union[str, Path, None] = None) -> Iterator[Session]:
    """
    Transactional session scope.

    Commits on success, rolls back on error, always closes.
    """
    session = get_session(db_path)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(db_path: Union[str, Path, None] = None) -> Engine:
    """Create the database file and its tables if they don't exist."""
    path = Path(db_path) if db_path is not None else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(path)
    Base.metadata.create_all(engine)
    return engine

