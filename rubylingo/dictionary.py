"""
Dictionary stores for RubyLingo.

A store maps head words to DictionaryEntry records. Stores are loaded
exactly once (concurrent first callers share one load) and are read-only
afterwards, so lookups need no locking. Until a store is ready every
lookup raises DictionaryUnavailable; "not loaded" is never reported as
"not found".

Sources:
- InMemoryDictionaryStore: a mapping supplied by the caller.
- JsonDictionaryStore: a flat JSON file, word -> record, where a record
  looks like {"translation": ..., "translations": [...], "reading": ...,
  "pos": [...]}.
- SqliteDictionaryStore: the SQLite database built by ``rubylingo init-db``.
"""

import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from rubylingo.errors import DictionaryFormatError, DictionaryUnavailable
from rubylingo.settings import DB_PATH, DEFAULT_LEVEL, dictionary_path

logger = logging.getLogger(__name__)


# ============================================================================
# Entries
# ============================================================================

@dataclass(frozen=True)
class DictionaryEntry:
    """
    An immutable dictionary record.

    Attributes:
        word: Head word (the lookup key).
        translation: Primary gloss.
        translations: All glosses in order, primary first.
        reading: Kana reading, if known.
        pos: Part-of-speech tags.
    """
    word: str
    translation: str
    translations: Tuple[str, ...] = ()
    reading: Optional[str] = None
    pos: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not self.translations:
            object.__setattr__(self, 'translations', (self.translation,))

    @classmethod
    def from_record(cls, word: str, record: Any) -> "DictionaryEntry":
        """
        Build an entry from a flat dictionary record.

        A bare string is accepted as a record holding only the primary
        gloss.

        Raises:
            DictionaryFormatError: If the record has no usable gloss.
        """
        if isinstance(record, str):
            record = {'translation': record}
        if not isinstance(record, Mapping):
            raise DictionaryFormatError(f"Entry {word!r}: expected an object, got {type(record).__name__}")

        translations = record.get('translations') or []
        if isinstance(translations, str):
            translations = [translations]
        translations = [t for t in translations if isinstance(t, str) and t]

        translation = record.get('translation') or record.get('primary')
        if not translation and translations:
            translation = translations[0]
        if not translation or not isinstance(translation, str):
            raise DictionaryFormatError(f"Entry {word!r} has no translation")
        if translation not in translations:
            translations.insert(0, translation)

        pos = record.get('pos') or []
        if isinstance(pos, str):
            pos = [pos]

        return cls(
            word=word,
            translation=translation,
            translations=tuple(translations),
            reading=record.get('reading') or None,
            pos=frozenset(pos),
        )

    def to_record(self) -> Dict[str, Any]:
        """Inverse of from_record."""
        return {
            'translation': self.translation,
            'translations': list(self.translations),
            'reading': self.reading,
            'pos': sorted(self.pos),
        }


def parse_records(data: Any, source: str) -> Dict[str, DictionaryEntry]:
    """
    Parse a flat word -> record mapping into entries.

    Records without a usable gloss are skipped with a warning.

    Raises:
        DictionaryFormatError: If data is not a mapping.
    """
    if not isinstance(data, Mapping):
        raise DictionaryFormatError(f"{source}: expected a word -> entry object")

    entries = {}
    skipped = 0
    for word, record in data.items():
        try:
            entries[word] = DictionaryEntry.from_record(word, record)
        except DictionaryFormatError as e:
            skipped += 1
            logger.debug(f"{source}: {e}")
    if skipped:
        logger.warning(f"{source}: skipped {skipped} malformed entries")
    return entries


# ============================================================================
# Store Base
# ============================================================================

class DictionaryStore(ABC):
    """
    Read-only word -> DictionaryEntry lookup with an explicit readiness
    signal.

    ensure_ready() loads synchronously; start_loading() loads on a
    background thread and wait_ready() waits for it.
    """

    def __init__(self, name: str, level: Optional[str] = None):
        self.name = name
        self.level = level
        self.load_time_ms: Optional[float] = None
        self._entries: Optional[Mapping[str, DictionaryEntry]] = None
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._done = threading.Event()
        self._loader: Optional[threading.Thread] = None

    @abstractmethod
    def _load(self) -> Dict[str, DictionaryEntry]:
        """Read every entry from the source."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.name!r}, ready={self.is_ready})>"

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def ensure_ready(self) -> "DictionaryStore":
        """
        Load the store if it is not loaded yet.

        Safe to call from several threads; the source is read at most once
        per successful load.

        Raises:
            DictionaryUnavailable: If loading fails.
        """
        if self._ready.is_set():
            return self

        with self._lock:
            if self._ready.is_set():
                return self

            self._error = None
            self._done.clear()
            t0 = time.perf_counter()
            try:
                entries = self._load()
            except Exception as e:
                self._error = e
                self._done.set()
                logger.exception(f"Failed to load dictionary {self.name}")
                raise DictionaryUnavailable(self.name, f"load failed: {e}") from e

            self._entries = MappingProxyType(dict(entries))
            self.load_time_ms = (time.perf_counter() - t0) * 1000
            self._ready.set()
            self._done.set()

        logger.info(f"Loaded {len(self._entries):,} entries from {self.name} in {self.load_time_ms:.1f}ms")
        return self

    def start_loading(self) -> Optional[threading.Thread]:
        """
        Load the store on a daemon thread.

        Returns:
            The loader thread, or None if the store is already ready.
        """
        if self._ready.is_set():
            return None
        with self._lock:
            if self._loader is None or not self._loader.is_alive():
                self._done.clear()
                self._loader = threading.Thread(
                    target=self._background_load,
                    name=f"dictionary-load-{self.name}",
                    daemon=True,
                )
                self._loader.start()
            return self._loader

    def _background_load(self):
        try:
            self.ensure_ready()
        except DictionaryUnavailable:
            # recorded in self._error and raised again by lookup/wait_ready
            pass

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for a background load.

        Args:
            timeout: Seconds to wait; None waits indefinitely.

        Returns:
            True if the store is ready, False if the wait timed out.

        Raises:
            DictionaryUnavailable: If the load failed.
        """
        if self._ready.is_set():
            return True
        self._done.wait(timeout)
        if self._error is not None:
            raise DictionaryUnavailable(self.name, f"load failed: {self._error}") from self._error
        return self._ready.is_set()

    def require_ready(self):
        """Raise DictionaryUnavailable unless the store is ready."""
        if self._entries is None:
            reason = f"load failed: {self._error}" if self._error is not None else "not loaded"
            raise DictionaryUnavailable(self.name, reason)

    def lookup(self, key: str) -> Optional[DictionaryEntry]:
        """
        Look up a head word.

        Returns:
            The entry, or None if the word is not in the dictionary.

        Raises:
            DictionaryUnavailable: If the store is not ready.
        """
        entries = self._entries
        if entries is None:
            self.require_ready()
            entries = self._entries
        return entries.get(key)

    def __contains__(self, key: str) -> bool:
        return self.lookup(key) is not None

    def __len__(self) -> int:
        return len(self._entries) if self._entries is not None else 0

    def stats(self) -> Dict[str, Any]:
        """Summary used by status reports."""
        return {
            'name': self.name,
            'level': self.level,
            'ready': self.is_ready,
            'entries': len(self),
            'load_time_ms': self.load_time_ms,
            'error': str(self._error) if self._error is not None else None,
        }


# ============================================================================
# Store Implementations
# ============================================================================

class InMemoryDictionaryStore(DictionaryStore):
    """Store over a mapping of word -> DictionaryEntry or flat record."""

    def __init__(self, entries: Mapping[str, Any], name: str = "memory", level: Optional[str] = None):
        super().__init__(name, level)
        self._source = dict(entries)

    def _load(self) -> Dict[str, DictionaryEntry]:
        result = {}
        raw = {}
        for word, value in self._source.items():
            if isinstance(value, DictionaryEntry):
                result[word] = value
            else:
                raw[word] = value
        result.update(parse_records(raw, self.name))
        return result


class JsonDictionaryStore(DictionaryStore):
    """Store backed by a flat JSON dictionary file."""

    def __init__(self, path: Union[str, Path], level: Optional[str] = None):
        self.path = Path(path)
        super().__init__(str(self.path), level)

    @classmethod
    def for_level(cls, level: str = DEFAULT_LEVEL) -> "JsonDictionaryStore":
        """Store for one of the bundled dictionary levels."""
        return cls(dictionary_path(level), level=level)

    def _load(self) -> Dict[str, DictionaryEntry]:
        logger.info(f"Loading {self.level or 'JSON'} dictionary from {self.path}...")
        with open(self.path, encoding='utf-8') as f:
            data = json.load(f)
        return parse_records(data, str(self.path))


class SqliteDictionaryStore(DictionaryStore):
    """Store backed by the SQLite dictionary database."""

    def __init__(self, db_path: Union[str, Path, None] = None, level: str = DEFAULT_LEVEL):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH
        super().__init__(f"{self.db_path}#{level}", level)

    def _load(self) -> Dict[str, DictionaryEntry]:
        from rubylingo.db.connection import get_session
        from rubylingo.db.models import Entry

        if not self.db_path.exists():
            raise FileNotFoundError(f"Database not found: {self.db_path}")

        session = get_session(self.db_path)
        try:
            rows = session.execute(
                select(Entry)
                .where(Entry.level == self.level)
                .options(selectinload(Entry.glosses), selectinload(Entry.pos_tags))
            ).scalars().all()

            entries = {}
            for row in rows:
                translations = tuple(g.text for g in row.glosses) or (row.translation,)
                entries[row.word] = DictionaryEntry(
                    word=row.word,
                    translation=row.translation,
                    translations=translations,
                    reading=row.reading,
                    pos=frozenset(p.tag for p in row.pos_tags),
                )
            return entries
        finally:
            session.close()


def open_store(path: Union[str, Path, None] = None, level: Optional[str] = None) -> DictionaryStore:
    """
    Create a store for a dictionary source.

    Args:
        path: A ``.json`` file or an SQLite database. When omitted, the
            JSON file for the level is used if it exists, otherwise the
            configured database.
        level: Dictionary level (defaults to settings.DEFAULT_LEVEL).

    Returns:
        An unloaded store; call ensure_ready() or start_loading().
    """
    level = level or DEFAULT_LEVEL
    if path is None:
        json_path = dictionary_path(level)
        if json_path.exists():
            return JsonDictionaryStore(json_path, level=level)
        return SqliteDictionaryStore(DB_PATH, level=level)

    path = Path(path)
    if path.suffix.lower() == '.json':
        return JsonDictionaryStore(path, level=level)
    return SqliteDictionaryStore(path, level=level)
