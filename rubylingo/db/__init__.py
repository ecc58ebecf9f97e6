"""Dictionary database: ORM models and connection handling."""

from rubylingo.db.connection import get_engine, get_session, init_db, session_scope
from rubylingo.db.models import Base, Entry, Gloss, PosTag

__all__ = [
    "Base", "Entry", "Gloss", "PosTag",
    "get_engine", "get_session", "init_db", "session_scope",
]
