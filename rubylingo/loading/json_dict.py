"""
Import a flat JSON dictionary into the RubyLingo database.

The JSON file maps head words to records:

    {"食べる": {"reading": "たべる", "translation": "to eat",
                "translations": ["to eat", "to live on"], "pos": ["v1", "vt"]}}

Importing a level replaces every entry previously stored for that level.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from sqlalchemy import delete, select

from rubylingo.db.connection import init_db, session_scope
from rubylingo.db.models import Entry, Gloss, PosTag
from rubylingo.dictionary import parse_records
from rubylingo.settings import DEFAULT_LEVEL

logger = logging.getLogger(__name__)


def clear_level(session, level: str) -> int:
    """Delete every entry of a level. Returns the number deleted."""
    ids = session.execute(select(Entry.id).where(Entry.level == level)).scalars().all()
    if not ids:
        return 0
    session.execute(delete(Gloss).where(Gloss.entry_id.in_(ids)))
    session.execute(delete(PosTag).where(PosTag.entry_id.in_(ids)))
    session.execute(delete(Entry).where(Entry.level == level))
    return len(ids)


def load_json_dictionary(
    json_path: Union[str, Path],
    db_path: Union[str, Path, None] = None,
    level: str = DEFAULT_LEVEL,
    batch_size: int = 5000,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> int:
    """
    Import a JSON dictionary file as one dictionary level.

    Args:
        json_path: Flat word -> record JSON file.
        db_path: Target SQLite database (created if missing).
        level: Level the entries are stored under.
        batch_size: Entries per flush.
        progress_callback: Called with the running entry count after
            each batch.

    Returns:
        Number of entries imported.
    """
    json_path = Path(json_path)
    with open(json_path, encoding='utf-8') as f:
        data = json.load(f)
    entries = parse_records(data, str(json_path))

    init_db(db_path)
    count = 0
    with session_scope(db_path) as session:
        removed = clear_level(session, level)
        if removed:
            logger.info(f"Removed {removed} existing '{level}' entries")

        for word, entry in entries.items():
            row = Entry(
                word=word,
                level=level,
                reading=entry.reading,
                translation=entry.translation,
            )
            row.glosses = [Gloss(ord=i, text=text) for i, text in enumerate(entry.translations)]
            row.pos_tags = [PosTag(tag=tag) for tag in sorted(entry.pos)]
            session.add(row)
            count += 1

            if count % batch_size == 0:
                session.flush()
                if progress_callback:
                    progress_callback(count)

    if progress_callback and count % batch_size:
        progress_callback(count)

    logger.info(f"Imported {count} entries into level '{level}' from {json_path}")
    return count
