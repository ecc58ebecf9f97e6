"""
Dictionary lookup cascade for RubyLingo.

A segment is resolved by trying, in order:

1. EXACT       the segment as written
2. NORMALIZED  its dictionary form from conjugations.normalize, only if
               normalization changed the string
3. COMPOUND    the head before a medial marker such as まし, with a
               citation ending appended (食べまし -> 食べる)

The first step that finds an entry wins. There is no ranking.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from rubylingo.conjugations import normalize
from rubylingo.dictionary import DictionaryEntry, DictionaryStore

logger = logging.getLogger(__name__)


class CascadeStep(Enum):
    """Which lookup strategy produced a match."""
    EXACT = "exact"
    NORMALIZED = "normalized"
    COMPOUND = "compound"


@dataclass(frozen=True)
class Resolution:
    """
    A successful lookup.

    Attributes:
        entry: The dictionary entry found.
        step: The cascade step that found it.
        key: The string that was looked up (the base form for
            NORMALIZED and COMPOUND).
    """
    entry: DictionaryEntry
    step: CascadeStep
    key: str


# (medial marker, citation ending appended to the head)
COMPOUND_MARKERS: List[Tuple[str, str]] = [
    ('まし', 'る'),
]


def decompose_compound(segment: str) -> Optional[str]:
    """
    Guess a base form by cutting a segment at a medial marker.

    The marker must occur exactly once and leave a non-empty head:
    食べまして -> 食べる.

    Returns:
        The candidate base form, or None.
    """
    for marker, ending in COMPOUND_MARKERS:
        parts = segment.split(marker)
        if len(parts) == 2 and parts[0]:
            return parts[0] + ending
    return None


class LookupCascade:
    """
    Resolves segments against a dictionary store.

    Args:
        store: The dictionary store. Lookups raise DictionaryUnavailable
            while it is not ready.
        normalizer: Maps a surface form to its dictionary form.
        decomposer: Maps a surface form to a compound-head candidate, or
            None.
    """

    def __init__(
        self,
        store: DictionaryStore,
        normalizer: Callable[[str], str] = normalize,
        decomposer: Callable[[str], Optional[str]] = decompose_compound,
    ):
        self.store = store
        self.normalizer = normalizer
        self.decomposer = decomposer

    def resolve_with_step(self, segment: str) -> Optional[Resolution]:
        """
        Resolve a segment and report which step matched.

        Raises:
            DictionaryUnavailable: If the store is not ready.
        """
        entry = self.store.lookup(segment)
        if entry is not None:
            return Resolution(entry, CascadeStep.EXACT, segment)

        base = self.normalizer(segment)
        if base != segment:
            entry = self.store.lookup(base)
            if entry is not None:
                return Resolution(entry, CascadeStep.NORMALIZED, base)

        candidate = self.decomposer(segment)
        if candidate and candidate != segment and candidate != base:
            entry = self.store.lookup(candidate)
            if entry is not None:
                return Resolution(entry, CascadeStep.COMPOUND, candidate)

        logger.debug(f"No entry for {segment!r}")
        return None

    def resolve(self, segment: str) -> Optional[DictionaryEntry]:
        """Resolve a segment to a dictionary entry, or None."""
        resolution = self.resolve_with_step(segment)
        return resolution.entry if resolution is not None else None
