"""
Character classification for RubyLingo.

Provides the script classes used by the segmenter and the segment
classifier: kanji, hiragana, katakana, Latin letters, digits, whitespace
and punctuation.
"""

import re
import unicodedata
from typing import List, Tuple

# ============================================================================
# Character Classes
# ============================================================================

KATAKANA_REGEX = r"[ァ-ヺヽヾー]"
HIRAGANA_REGEX = r"[ぁ-ゔゝゞー]"
KANJI_REGEX = r"[々ヶ〆一-龯㐀-䶵]"
LATIN_REGEX = r"[A-Za-z]"
DIGIT_REGEX = r"[0-9０-９]"

# Japanese and ASCII marks that never carry a gloss on their own.
# ー is a long vowel mark inside words; alone it behaves like a dash.
PUNCTUATION_CHARACTERS = (
    "、。，．・：；？！…‥〜～ー－―"
    "「」『』（）【】［］〈〉《》〔〕｛｝"
    "“”‘’"
    ".,!?-:;'\"()[]{}<>/\\|~*+=_&%$#@^`"
)
WHITESPACE_CHARACTERS = " \t\r\n　 "

_WORD_PATTERNS = {
    'katakana': re.compile(rf"^{KATAKANA_REGEX}+$"),
    'hiragana': re.compile(rf"^{HIRAGANA_REGEX}+$"),
    'kanji': re.compile(rf"^{KANJI_REGEX}+$"),
    'latin': re.compile(rf"^{LATIN_REGEX}+$"),
    'number': re.compile(rf"^{DIGIT_REGEX}+$"),
}

_KANJI_CHAR_PATTERN = re.compile(KANJI_REGEX)
_HIRAGANA_CHAR_PATTERN = re.compile(r"[ぁ-ゔゝゞ]")
_KATAKANA_CHAR_PATTERN = re.compile(r"[ァ-ヺヽヾ]")


def test_word(word: str, char_class: str) -> bool:
    """
    Test if a word consists entirely of a specific character class.

    Args:
        word: The word to test.
        char_class: One of 'katakana', 'hiragana', 'kanji',
            'latin', 'number'.

    Returns:
        True if the word matches the character class entirely.
    """
    if not word:
        return False
    pattern = _WORD_PATTERNS.get(char_class)
    if pattern is None:
        return False
    return bool(pattern.match(word))


def is_latin(word: str) -> bool:
    """Check if word is a run of ASCII letters."""
    return test_word(word, 'latin')


def is_numeric(word: str) -> bool:
    """Check if word is a run of ASCII or full-width digits."""
    return test_word(word, 'number')


def is_punctuation(word: str) -> bool:
    """
    Check if word consists solely of whitespace and punctuation.

    Empty strings are not punctuation.
    """
    if not word:
        return False
    return all(
        ch in PUNCTUATION_CHARACTERS or ch in WHITESPACE_CHARACTERS
        for ch in word
    )


# ============================================================================
# Script Runs
# ============================================================================

def char_script(char: str) -> str:
    """
    Get the script class of a single character.

    Returns one of 'space', 'punct', 'kanji', 'hiragana', 'katakana',
    'latin', 'digit' or 'other'. The long vowel mark follows the
    preceding character, so it is reported as 'prolong'.
    """
    if char in WHITESPACE_CHARACTERS:
        return 'space'
    if char == 'ー':
        return 'prolong'
    if char in PUNCTUATION_CHARACTERS:
        return 'punct'
    if _KANJI_CHAR_PATTERN.match(char):
        return 'kanji'
    if _HIRAGANA_CHAR_PATTERN.match(char):
        return 'hiragana'
    if _KATAKANA_CHAR_PATTERN.match(char):
        return 'katakana'
    if 'A' <= char <= 'Z' or 'a' <= char <= 'z':
        return 'latin'
    if char.isdigit():
        return 'digit'
    if unicodedata.category(char).startswith('P'):
        return 'punct'
    return 'other'


def script_runs(text: str) -> List[Tuple[str, int, int]]:
    """
    Split text into maximal runs of a single script class.

    Args:
        text: Text to split.

    Returns:
        List of (script, start, end) triples covering the text exactly.
    """
    runs: List[Tuple[str, int, int]] = []
    start = 0
    current = None
    for i, char in enumerate(text):
        script = char_script(char)
        if script == 'prolong':
            script = current if current in ('hiragana', 'katakana') else 'punct'
        if script != current:
            if current is not None:
                runs.append((current, start, i))
            current = script
            start = i
    if current is not None:
        runs.append((current, start, len(text)))
    return runs


