"""
Tests for lookup.py - the exact / normalized / compound cascade.
"""

from unittest import mock

import pytest

from rubylingo.conjugations import normalize
from rubylingo.errors import DictionaryUnavailable
from rubylingo.lookup import CascadeStep, LookupCascade, decompose_compound


def identity(word):
    return word


class TestDecomposeCompound:

    def test_masu_split(self):
        assert decompose_compound('食べまして') == '食べる'
        assert decompose_compound('見まし') == '見る'

    def test_needs_head(self):
        assert decompose_compound('ました') is None

    def test_marker_must_occur_once(self):
        assert decompose_compound('ましまし') is None

    def test_no_marker(self):
        assert decompose_compound('テスト') is None


class TestCascadeSteps:
    """Each step of the cascade, in order."""

    def test_exact(self, store):
        resolution = LookupCascade(store).resolve_with_step('テスト')
        assert resolution.step is CascadeStep.EXACT
        assert resolution.key == 'テスト'
        assert resolution.entry.translation == 'test'

    def test_normalized(self, store):
        resolution = LookupCascade(store).resolve_with_step('食べました')
        assert resolution.step is CascadeStep.NORMALIZED
        assert resolution.key == '食べる'
        assert resolution.entry.translation == 'to eat'

    def test_normalized_adjective(self, store):
        resolution = LookupCascade(store).resolve_with_step('高かった')
        assert resolution.step is CascadeStep.NORMALIZED
        assert resolution.entry.word == '高い'

    def test_normalized_suru_verb(self, store):
        resolution = LookupCascade(store).resolve_with_step('勉強しました')
        assert resolution.step is CascadeStep.NORMALIZED
        assert resolution.key == '勉強'
        assert resolution.entry.translation == 'study'

    def test_compound(self, store):
        cascade = LookupCascade(store, normalizer=identity)
        resolution = cascade.resolve_with_step('食べまして')
        assert resolution.step is CascadeStep.COMPOUND
        assert resolution.key == '食べる'

    def test_no_match(self, store):
        cascade = LookupCascade(store)
        assert cascade.resolve_with_step('これ') is None
        assert cascade.resolve('これ') is None

    def test_resolve_returns_entry(self, store):
        entry = LookupCascade(store).resolve('飲んだ')
        assert entry.word == '飲む'
        assert entry.reading == 'のむ'


class TestShortCircuit:
    """Later steps run only when earlier ones miss."""

    def test_exact_hit_skips_normalize_and_decompose(self, store):
        normalizer = mock.MagicMock(wraps=normalize)
        decomposer = mock.MagicMock(wraps=decompose_compound)
        cascade = LookupCascade(store, normalizer=normalizer, decomposer=decomposer)

        assert cascade.resolve('テスト') is not None
        normalizer.assert_not_called()
        decomposer.assert_not_called()

    def test_normalized_hit_skips_decompose(self, store):
        normalizer = mock.MagicMock(wraps=normalize)
        decomposer = mock.MagicMock(wraps=decompose_compound)
        cascade = LookupCascade(store, normalizer=normalizer, decomposer=decomposer)

        assert cascade.resolve('食べました') is not None
        normalizer.assert_called_once_with('食べました')
        decomposer.assert_not_called()

    def test_miss_runs_every_step(self, store):
        normalizer = mock.MagicMock(wraps=normalize)
        decomposer = mock.MagicMock(wraps=decompose_compound)
        cascade = LookupCascade(store, normalizer=normalizer, decomposer=decomposer)

        assert cascade.resolve('これ') is None
        normalizer.assert_called_once_with('これ')
        decomposer.assert_called_once_with('これ')

    def test_unchanged_normalization_not_looked_up_twice(self, store):
        with mock.patch.object(store, 'lookup', wraps=store.lookup) as lookup:
            LookupCascade(store).resolve('これ')
        assert lookup.call_count == 1

    def test_compound_candidate_equal_to_base_not_repeated(self, store):
        cascade = LookupCascade(store, normalizer=lambda s: 'どこ', decomposer=lambda s: 'どこ')
        with mock.patch.object(store, 'lookup', wraps=store.lookup) as lookup:
            assert cascade.resolve('なに') is None
        assert [c.args[0] for c in lookup.call_args_list] == ['なに', 'どこ']


class TestReadiness:

    def test_unloaded_store_raises(self, unloaded_store):
        cascade = LookupCascade(unloaded_store)
        with pytest.raises(DictionaryUnavailable):
            cascade.resolve('テスト')

    def test_not_ready_is_not_no_match(self, unloaded_store):
        with pytest.raises(DictionaryUnavailable) as exc_info:
            LookupCascade(unloaded_store).resolve('これ')
        assert exc_info.value.reason == 'not loaded'
