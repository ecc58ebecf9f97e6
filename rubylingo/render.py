"""
Span resolution and rendering for RubyLingo.

Rebuilds the source text from segment boundaries, wrapping matched
segments in an annotation marker that carries the gloss. Output is built
only from escaped slices of the source text plus markers, so removing the
markers and unescaping gives back the input exactly, whatever the length
of the glosses and whatever markup the source already holds.

Segments that break the segmenter contract (overlapping, out of order,
or running past the end of the text) are clipped to the cursor and logged;
in strict mode MalformedSegmentation is raised instead.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Mapping, Optional, Tuple

from rubylingo.errors import MalformedSegmentation
from rubylingo.lookup import CascadeStep, Resolution
from rubylingo.segment import Segment

logger = logging.getLogger(__name__)


# ============================================================================
# Matches and Spans
# ============================================================================

@dataclass(frozen=True)
class Match:
    """
    A segment that resolved to a dictionary entry.

    Attributes:
        text: The segment as it appears in the source.
        gloss: Gloss shown in the annotation (the entry's primary gloss).
        reading: Reading of the matched entry.
        start: Start offset of the segment.
        end: End offset of the segment.
        step: Cascade step that produced the match.
        base_form: Dictionary key that matched.
        translations: Every gloss of the entry.
        pos: Part-of-speech tags of the entry.
    """
    text: str
    gloss: str
    reading: Optional[str]
    start: int
    end: int
    step: Optional[CascadeStep] = None
    base_form: Optional[str] = None
    translations: Tuple[str, ...] = ()
    pos: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def span(self) -> Tuple[int, int]:
        return (self.start, self.end)

    @classmethod
    def from_resolution(cls, segment: Segment, resolution: Resolution) -> "Match":
        entry = resolution.entry
        return cls(
            text=segment.text,
            gloss=entry.translation,
            reading=entry.reading,
            start=segment.start,
            end=segment.end,
            step=resolution.step,
            base_form=resolution.key,
            translations=entry.translations,
            pos=entry.pos,
        )


@dataclass(frozen=True)
class AnnotatedSpan:
    """
    A (start, end, gloss) rendering unit.

    Spans returned by resolve_spans tile the source text; a span with no
    gloss is emitted as plain text.
    """
    start: int
    end: int
    gloss: Optional[str] = None

    @property
    def annotated(self) -> bool:
        return self.gloss is not None


# ============================================================================
# Annotation Formats
# ============================================================================

_RUBY_PATTERN = re.compile(r"<ruby>([^<]*)<rt>[^<]*</rt></ruby>")
_AOZORA_PATTERN = re.compile(r"｜([^｜《》]*)《[^》]*》")
_AOZORA_GLOSS_TABLE = str.maketrans({'《': '<', '》': '>', '｜': '|'})

# Aozora Bunko writes literal marker characters as ※［＃...］ notes.
_AOZORA_NOTES = {
    '※': '米印',
    '｜': '縦線',
    '《': '始め二重山括弧',
    '》': '終わり二重山括弧',
}
_AOZORA_ESCAPE_TABLE = str.maketrans({char: f"※［＃{note}］" for char, note in _AOZORA_NOTES.items()})
_AOZORA_NOTE_PATTERN = re.compile("※［＃(" + "|".join(_AOZORA_NOTES.values()) + ")］")
_AOZORA_NOTE_CHARS = {note: char for char, note in _AOZORA_NOTES.items()}


class AnnotationFormat(Enum):
    """
    How an annotated span is written.

    RUBY:   <ruby>テスト<rt>test</rt></ruby>
    AOZORA: ｜テスト《test》

    Literal source text is escaped in both formats so it can never be
    read back as a marker.
    """
    RUBY = "ruby"
    AOZORA = "aozora"

    @classmethod
    def from_name(cls, name: str) -> "AnnotationFormat":
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown annotation format: {name!r}") from None

    def escape(self, text: str) -> str:
        """Escape literal source text for this format."""
        if self is AnnotationFormat.RUBY:
            return html.escape(text, quote=False)
        return text.translate(_AOZORA_ESCAPE_TABLE)

    def unescape(self, text: str) -> str:
        if self is AnnotationFormat.RUBY:
            return html.unescape(text)
        return _AOZORA_NOTE_PATTERN.sub(lambda m: _AOZORA_NOTE_CHARS[m.group(1)], text)

    def wrap(self, text: str, gloss: str) -> str:
        """Wrap a literal source fragment and its gloss in a marker."""
        if self is AnnotationFormat.RUBY:
            return f"<ruby>{self.escape(text)}<rt>{html.escape(gloss)}</rt></ruby>"
        return f"｜{self.escape(text)}《{gloss.translate(_AOZORA_GLOSS_TABLE)}》"

    def strip(self, annotated: str) -> str:
        """Remove markers and glosses, then unescape the literal text."""
        pattern = _RUBY_PATTERN if self is AnnotationFormat.RUBY else _AOZORA_PATTERN
        return self.unescape(pattern.sub(r"\1", annotated))


def strip_annotations(annotated: str, fmt: AnnotationFormat = AnnotationFormat.RUBY) -> str:
    """Recover the source text from rendered output."""
    return fmt.strip(annotated)


# ============================================================================
# Rendering
# ============================================================================

def _contract_violation(message: str, seg: Segment, cursor: int, strict: bool):
    if strict:
        raise MalformedSegmentation(message, seg.start, seg.end, cursor)
    logger.warning(f"Malformed segmentation: {message}")


def resolve_spans(
    text: str,
    segments: Iterable[Segment],
    matches: Mapping[Segment, Match],
    strict: bool = False,
) -> List[AnnotatedSpan]:
    """
    Turn segments and their matches into spans that tile ``text``.

    A single pass over the segments with one cursor. Gaps between
    segments and text after the last segment become unannotated spans.

    Args:
        text: Source text.
        segments: Segments in source order.
        matches: Matched segments.
        strict: Raise MalformedSegmentation on contract violations
            instead of clipping.

    Returns:
        Contiguous spans from 0 to ``len(text)``.
    """
    spans: List[AnnotatedSpan] = []
    cursor = 0
    length = len(text)

    for seg in segments:
        start, end = seg.start, seg.end

        if start > cursor:
            _contract_violation(
                f"gap {cursor}:{start} before segment {seg.text!r}, emitting source text",
                seg, cursor, strict,
            )
            spans.append(AnnotatedSpan(cursor, min(start, length)))
            cursor = min(start, length)
            start = cursor
        elif start < cursor:
            _contract_violation(
                f"segment {seg.text!r} at {start}:{end} overlaps cursor {cursor}, clipping",
                seg, cursor, strict,
            )
            start = cursor

        if end > length:
            _contract_violation(
                f"segment {seg.text!r} at {seg.start}:{end} runs past end of text ({length}), clipping",
                seg, cursor, strict,
            )
            end = length

        if end <= start:
            if seg.end > seg.start:
                logger.warning(f"Dropping segment {seg.text!r} at {seg.start}:{seg.end}, nothing left after clipping")
            continue

        match = matches.get(seg)
        spans.append(AnnotatedSpan(start, end, match.gloss if match is not None else None))
        cursor = end

    if cursor < length:
        spans.append(AnnotatedSpan(cursor, length))

    return spans


def render(
    text: str,
    segments: Iterable[Segment],
    matches: Mapping[Segment, Match],
    fmt: AnnotationFormat = AnnotationFormat.RUBY,
    strict: bool = False,
) -> str:
    """
    Interleave annotations with the escaped source text.

    Literal text always comes from ``text[start:end]``, never from the
    segment or the match.

    Returns:
        The annotated text.
    """
    parts: List[str] = []
    for span in resolve_spans(text, segments, matches, strict):
        literal = text[span.start:span.end]
        parts.append(fmt.wrap(literal, span.gloss) if span.annotated else fmt.escape(literal))
    return ''.join(parts)
