"""
Segmenters for RubyLingo.

A segmenter splits raw text into an ordered list of Segments whose
concatenation reproduces the input exactly:

    segments[i].end == segments[i + 1].start
    ''.join(s.text for s in segments) == text

Two implementations are provided:
- ScriptSegmenter: dependency-free, splits on script changes (kanji,
  kana, Latin, digits, punctuation) and attaches okurigana to kanji.
- MecabSegmenter: MeCab morphological analysis through fugashi
  (optional dependency).
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

from rubylingo.characters import script_runs
from rubylingo.errors import SegmenterUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    """
    A contiguous substring of the source text.

    Attributes:
        text: The substring itself.
        start: Code-point offset of the first character.
        end: Code-point offset one past the last character.
    """
    text: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


class Segmenter(ABC):
    """Interface every segmenter implements."""

    name: str = "segmenter"

    @abstractmethod
    def segment(self, text: str) -> List[Segment]:
        """Split text into ordered, contiguous segments."""


def segments_from_pieces(text: str, pieces: Iterable[str]) -> List[Segment]:
    """
    Build Segments from an ordered list of surface strings.

    Each piece is located in the text at or after the previous piece.
    Characters the pieces do not account for (whitespace dropped by a
    tokenizer, for example) become segments of their own, so the result
    always covers the text exactly.

    Args:
        text: Source text.
        pieces: Surface strings in text order.

    Returns:
        List of Segment objects.
    """
    segments: List[Segment] = []
    cursor = 0
    for piece in pieces:
        if not piece:
            continue
        idx = text.find(piece, cursor)
        if idx < 0:
            logger.debug(f"Piece {piece!r} not found after offset {cursor}, skipped")
            continue
        if idx > cursor:
            segments.append(Segment(text[cursor:idx], cursor, idx))
        segments.append(Segment(piece, idx, idx + len(piece)))
        cursor = idx + len(piece)
    if cursor < len(text):
        segments.append(Segment(text[cursor:], cursor, len(text)))
    return segments


def coverage_problems(text: str, segments: List[Segment]) -> List[str]:
    """
    Describe every violation of the coverage and contiguity contract.

    Returns:
        Empty list when the segments cover the text exactly.
    """
    problems = []
    cursor = 0
    for seg in segments:
        if seg.start != cursor:
            problems.append(f"segment {seg.text!r} starts at {seg.start}, expected {cursor}")
        if text[seg.start:seg.end] != seg.text:
            problems.append(f"segment {seg.text!r} does not match text at {seg.start}:{seg.end}")
        cursor = seg.end
    if cursor != len(text):
        problems.append(f"segments end at {cursor}, text length is {len(text)}")
    return problems


# ============================================================================
# Script-run Segmenter
# ============================================================================

# Particles and copulas that are split off a preceding kanji run
FUNCTION_WORDS = frozenset({
    'は', 'が', 'を', 'に', 'で', 'と', 'も', 'へ', 'の', 'や', 'か',
    'から', 'まで', 'より', 'には', 'では', 'とは', 'にも', 'でも', 'への',
    'です', 'でした', 'だ', 'だった', 'である', 'でしょう',
})

# Trailing particles that never end an inflected form
TRAILING_PARTICLES = frozenset({'は', 'が', 'を', 'へ'})


def _split_kana_tail(tail: str) -> List[str]:
    if tail in FUNCTION_WORDS:
        return ['', tail]
    if len(tail) > 1 and tail[-1] in TRAILING_PARTICLES:
        return [tail[:-1], tail[-1]]
    return [tail, '']


class ScriptSegmenter(Segmenter):
    """
    Heuristic segmenter based on script changes.

    A kanji run absorbs the hiragana that follows it (okurigana), so
    inflected verbs and adjectives stay in one piece: 食べました, 高かった.
    Particles and copulas are split back off: 学生です -> 学生 / です,
    これは -> これ / は.
    """

    name = "script"

    def segment(self, text: str) -> List[Segment]:
        runs = script_runs(text)
        pieces: List[str] = []
        i = 0
        while i < len(runs):
            script, start, end = runs[i]
            run = text[start:end]
            nxt = runs[i + 1] if i + 1 < len(runs) else None

            if script == 'kanji' and nxt is not None and nxt[0] == 'hiragana':
                tail = text[nxt[1]:nxt[2]]
                okurigana, particle = _split_kana_tail(tail)
                pieces.append(run + okurigana)
                if particle:
                    pieces.append(particle)
                i += 2
                continue

            if script == 'hiragana' and run not in FUNCTION_WORDS:
                head, particle = _split_kana_tail(run)
                if head:
                    pieces.append(head)
                if particle:
                    pieces.append(particle)
                i += 1
                continue

            pieces.append(run)
            i += 1

        return segments_from_pieces(text, pieces)


# ============================================================================
# MeCab Segmenter
# ============================================================================

class MecabSegmenter(Segmenter):
    """
    Segmenter backed by MeCab through fugashi.

    Raises SegmenterUnavailable when fugashi or a MeCab dictionary is
    missing. Install with ``pip install rubylingo[mecab]``.
    """

    name = "mecab"

    def __init__(self, tagger: Optional[object] = None):
        if tagger is None:
            try:
                from fugashi import Tagger  # type: ignore
            except ImportError as exc:
                raise SegmenterUnavailable(
                    "The mecab segmenter requires 'fugashi' (pip install rubylingo[mecab])."
                ) from exc
            try:
                tagger = Tagger()
            except RuntimeError as exc:
                raise SegmenterUnavailable(f"MeCab could not be initialized: {exc}") from exc
        self._tagger = tagger
        # fugashi taggers are not safe to share between threads
        self._lock = threading.Lock()

    def segment(self, text: str) -> List[Segment]:
        if not text:
            return []
        with self._lock:
            pieces = [word.surface for word in self._tagger(text)]
        return segments_from_pieces(text, pieces)


def get_segmenter(name: str = "script") -> Segmenter:
    """
    Create a segmenter by name.

    Args:
        name: 'script' or 'mecab'.
    """
    if name == "script":
        return ScriptSegmenter()
    if name == "mecab":
        return MecabSegmenter()
    raise ValueError(f"Unknown segmenter: {name}")
