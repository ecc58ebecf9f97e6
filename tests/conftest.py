"""
Shared fixtures for the rubylingo test suite.
"""

import json
from typing import List

import pytest

from rubylingo.dictionary import InMemoryDictionaryStore
from rubylingo.engine import AnnotationEngine
from rubylingo.segment import Segment, Segmenter, segments_from_pieces


SAMPLE_RECORDS = {
    'テスト': {'reading': 'てすと', 'translation': 'test', 'pos': ['n', 'vs']},
    '食べる': {'reading': 'たべる', 'translation': 'to eat', 'translations': ['to eat', 'to live on'], 'pos': ['v1']},
    '飲む': {'reading': 'のむ', 'translation': 'to drink', 'pos': ['v5m']},
    '書く': {'reading': 'かく', 'translation': 'to write', 'pos': ['v5k']},
    '高い': {'reading': 'たかい', 'translation': 'high', 'translations': ['high', 'tall', 'expensive'], 'pos': ['adj-i']},
    '勉強': {'reading': 'べんきょう', 'translation': 'study', 'pos': ['n', 'vs']},
    '学生': {'reading': 'がくせい', 'translation': 'student', 'pos': ['n']},
    '学校': {'reading': 'がっこう', 'translation': 'school', 'pos': ['n']},
    '日本語': {'reading': 'にほんご', 'translation': 'Japanese (language)', 'pos': ['n']},
    '私': {'reading': 'わたし', 'translation': 'I', 'pos': ['pn']},
}


class PiecesSegmenter(Segmenter):
    """Segmenter that splits text into a fixed list of pieces."""

    name = "pieces"

    def __init__(self, pieces: List[str]):
        self.pieces = pieces

    def segment(self, text: str) -> List[Segment]:
        return segments_from_pieces(text, self.pieces)


class RawSegmenter(Segmenter):
    """Segmenter that returns a fixed list of segments, valid or not."""

    name = "raw"

    def __init__(self, segments: List[Segment]):
        self.segments = segments

    def segment(self, text: str) -> List[Segment]:
        return list(self.segments)


@pytest.fixture
def sample_records():
    return dict(SAMPLE_RECORDS)


@pytest.fixture
def store():
    """A loaded in-memory store with the sample entries."""
    return InMemoryDictionaryStore(SAMPLE_RECORDS, name="sample").ensure_ready()


@pytest.fixture
def unloaded_store():
    """The same store, never loaded."""
    return InMemoryDictionaryStore(SAMPLE_RECORDS, name="sample")


@pytest.fixture
def engine(store):
    return AnnotationEngine(store, fmt="ruby", strict=False)


@pytest.fixture
def json_dictionary(tmp_path):
    """The sample entries written as a flat JSON dictionary file."""
    path = tmp_path / "basic.json"
    path.write_text(json.dumps(SAMPLE_RECORDS, ensure_ascii=False), encoding="utf-8")
    return path
