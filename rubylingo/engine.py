"""
Annotation engine for RubyLingo.

Wires the pipeline together:

    Segmenter -> classify -> LookupCascade (normalize, decompose) -> render

The engine holds no per-request state. Each call works only on its input
text and the read-only dictionary store, so one engine can serve
concurrent requests.
"""

import logging
import time
from typing import Dict, List, Optional, Tuple, Union

from rubylingo.classify import classify
from rubylingo.conjugations import deconjugate, normalize
from rubylingo.dictionary import DictionaryStore
from rubylingo.lookup import CascadeStep, LookupCascade, decompose_compound
from rubylingo.models import (
    AnalysisResult, ConversionResult, ConversionStats, SegmentInfo, StatusResult, TokenResult,
)
from rubylingo.render import AnnotationFormat, Match, render
from rubylingo.segment import ScriptSegmenter, Segment, Segmenter
from rubylingo.settings import DEFAULT_FORMAT, STRICT_SEGMENTATION, available_levels

logger = logging.getLogger(__name__)


class AnnotationEngine:
    """
    Overlays dictionary glosses onto Japanese text.

    Args:
        store: Dictionary store. It must be ready before convert/analyze
            are called (see DictionaryStore.ensure_ready).
        segmenter: Segmenter to use; defaults to ScriptSegmenter.
        fmt: Annotation format, an AnnotationFormat or its name.
        strict: Raise MalformedSegmentation on segmenter contract
            violations instead of clipping.
        normalizer: Form normalizer used by the lookup cascade.
        decomposer: Compound decomposer used by the lookup cascade.
    """

    def __init__(
        self,
        store: DictionaryStore,
        segmenter: Optional[Segmenter] = None,
        fmt: Union[AnnotationFormat, str, None] = None,
        strict: Optional[bool] = None,
        normalizer=normalize,
        decomposer=decompose_compound,
    ):
        self.store = store
        self.segmenter = segmenter if segmenter is not None else ScriptSegmenter()
        if fmt is None:
            fmt = DEFAULT_FORMAT
        self.format = fmt if isinstance(fmt, AnnotationFormat) else AnnotationFormat.from_name(fmt)
        self.strict = STRICT_SEGMENTATION if strict is None else strict
        self.cascade = LookupCascade(store, normalizer, decomposer)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def match_segments(self, segments: List[Segment]) -> Tuple[Dict[Segment, Match], int]:
        """
        Classify and resolve segments.

        Returns:
            (matches keyed by segment, number of eligible segments)

        Raises:
            DictionaryUnavailable: If the store is not ready.
        """
        matches: Dict[Segment, Match] = {}
        eligible = 0
        for seg in segments:
            if not classify(seg).eligible:
                continue
            eligible += 1
            resolution = self.cascade.resolve_with_step(seg.text)
            if resolution is not None:
                matches[seg] = Match.from_resolution(seg, resolution)
        return matches, eligible

    def _run(self, text: str) -> Tuple[List[Segment], Dict[Segment, Match], int]:
        self.store.require_ready()
        segments = self.segmenter.segment(text) if text else []
        matches, eligible = self.match_segments(segments)
        return segments, matches, eligible

    @staticmethod
    def _stats(text: str, segments: List[Segment], matches: Dict[Segment, Match],
               eligible: int, started: float) -> ConversionStats:
        total = len(segments)
        return ConversionStats(
            characters=len(text),
            matched_segments=len(matches),
            match_rate=len(matches) / total if total else 0.0,
            total_segments=total,
            eligible_segments=eligible,
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def convert(self, text: str) -> ConversionResult:
        """
        Annotate text with dictionary glosses.

        Args:
            text: Japanese text. Length limits are the caller's policy.

        Returns:
            ConversionResult with the original text, the annotated text
            and statistics.

        Raises:
            DictionaryUnavailable: If the store is not ready.
            MalformedSegmentation: In strict mode, if the segmenter breaks
                its contract.

        Example:
            >>> store = InMemoryDictionaryStore({'テスト': 'test'}).ensure_ready()
            >>> AnnotationEngine(store).convert('これはテストです。').annotated
            'これは<ruby>テスト<rt>test</rt></ruby>です。'
        """
        started = time.perf_counter()
        segments, matches, eligible = self._run(text)
        annotated = render(text, segments, matches, self.format, self.strict)
        stats = self._stats(text, segments, matches, eligible, started)
        logger.debug(f"Converted {stats.characters} chars, {stats.matched_segments}/{stats.total_segments} segments matched")
        return ConversionResult(
            original=text,
            annotated=annotated,
            format=self.format.value,
            stats=stats,
        )

    def analyze(self, text: str) -> AnalysisResult:
        """
        Detailed analysis: every segment with its classification, and the
        matched tokens with readings, glosses, lookup step and the
        inflection that was reversed.

        Raises:
            DictionaryUnavailable: If the store is not ready.
        """
        started = time.perf_counter()
        segments, matches, eligible = self._run(text)

        tokens = []
        infos = []
        for seg in segments:
            classification = classify(seg)
            match = matches.get(seg)
            infos.append(SegmentInfo(
                surface=seg.text,
                start=seg.start,
                end=seg.end,
                classification=classification.value,
                is_target=classification.eligible,
                matched=match is not None,
            ))
            if match is None:
                continue
            conjugation = None
            if match.step is CascadeStep.NORMALIZED:
                reversed_form = deconjugate(seg.text)
                if reversed_form is not None:
                    conjugation = reversed_form.description
            tokens.append(TokenResult.from_match(match, conjugation))

        return AnalysisResult(
            text=text,
            tokens=tokens,
            segments=infos,
            stats=self._stats(text, segments, matches, eligible, started),
        )

    def status(self) -> StatusResult:
        """Readiness and configuration of the engine."""
        from rubylingo import __version__

        return StatusResult(
            version=__version__,
            ready=self.store.is_ready,
            segmenter=self.segmenter.name,
            format=self.format.value,
            strict=self.strict,
            dictionary=self.store.stats(),
            available_levels=available_levels(),
        )
