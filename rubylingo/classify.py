"""
Segment classification for RubyLingo.

Decides whether a segment is worth a dictionary lookup. Punctuation,
grammatical function words, Latin words and numbers are skipped; every
other segment (kanji, kana, mixed) is eligible.
"""

from enum import Enum
from typing import Union

from rubylingo.characters import is_latin, is_numeric, is_punctuation
from rubylingo.segment import Segment


class Classification(Enum):
    """Result of classifying a segment."""
    ELIGIBLE = "eligible"
    EMPTY = "empty"
    PUNCTUATION = "punctuation"
    STOPWORD = "stopword"
    LATIN = "latin"
    NUMERIC = "numeric"

    @property
    def eligible(self) -> bool:
        return self is Classification.ELIGIBLE


# Particles, copulas, auxiliaries and kana fragments that never carry a
# gloss of their own
STOPWORDS = frozenset({
    # Particles
    'は', 'を', 'が', 'の', 'に', 'で', 'と', 'も', 'から', 'まで', 'より',
    'へ', 'や', 'か', 'ば', 'けれど', 'けれども',
    # Auxiliaries and copulas
    'です', 'である', 'だ', 'ます', 'ません', 'ました', 'ませんでした',
    # Single kana that segmenters split off inflected forms
    'し', 'て', 'た', 'く', 'る', 'れ', 'ろ', 'う', 'え', 'お', 'い',
    # Sentence-final particles and small kana
    'な', 'ね', 'よ', 'わ', 'ぞ', 'ぜ', 'さ', 'ぁ', 'ぃ', 'ぅ', 'ぇ', 'ぉ',
})


def classify(segment: Union[Segment, str]) -> Classification:
    """
    Classify a segment for translation.

    Rules are applied in order; the first one that matches decides.

    Args:
        segment: A Segment or its text.

    Returns:
        Classification.ELIGIBLE or the reason the segment is skipped.
    """
    text = segment.text if isinstance(segment, Segment) else segment

    if not text or not text.strip():
        return Classification.EMPTY if not text else Classification.PUNCTUATION
    if is_punctuation(text):
        return Classification.PUNCTUATION
    if text in STOPWORDS:
        return Classification.STOPWORD
    if len(text) > 1 and is_latin(text):
        return Classification.LATIN
    if is_numeric(text):
        return Classification.NUMERIC
    return Classification.ELIGIBLE


def is_eligible(segment: Union[Segment, str]) -> bool:
    """True if the segment should be looked up in the dictionary."""
    return classify(segment).eligible
