"""
Tests for render.py - annotation markers and the clip-and-log policy.
"""

import logging

import pytest

from rubylingo.errors import MalformedSegmentation
from rubylingo.render import (
    AnnotatedSpan,
    AnnotationFormat,
    Match,
    render,
    resolve_spans,
    strip_annotations,
)
from rubylingo.segment import Segment, segments_from_pieces


def match_for(seg, gloss):
    return Match(text=seg.text, gloss=gloss, reading=None, start=seg.start, end=seg.end)


# =============================================================================
# Formats
# =============================================================================


class TestAnnotationFormat:

    def test_ruby(self):
        assert AnnotationFormat.RUBY.wrap('テスト', 'test') == '<ruby>テスト<rt>test</rt></ruby>'

    def test_ruby_escapes_gloss(self):
        assert AnnotationFormat.RUBY.wrap('本', 'a <b> & c') == '<ruby>本<rt>a &lt;b&gt; &amp; c</rt></ruby>'

    def test_aozora(self):
        assert AnnotationFormat.AOZORA.wrap('テスト', 'test') == '｜テスト《test》'

    def test_aozora_gloss_cannot_close_marker(self):
        assert AnnotationFormat.AOZORA.wrap('本', 'a《b》') == '｜本《a<b>》'

    def test_from_name(self):
        assert AnnotationFormat.from_name('RUBY') is AnnotationFormat.RUBY
        assert AnnotationFormat.from_name('aozora') is AnnotationFormat.AOZORA

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match='Unknown annotation format'):
            AnnotationFormat.from_name('markdown')

    @pytest.mark.parametrize('fmt', list(AnnotationFormat))
    def test_strip_restores_literal(self, fmt):
        annotated = 'これは' + fmt.wrap('テスト', 'test (a <quiz>)') + 'です。'
        assert strip_annotations(annotated, fmt) == 'これはテストです。'

    def test_ruby_escapes_literal(self):
        assert AnnotationFormat.RUBY.wrap('a<b>&', 'x') == '<ruby>a&lt;b&gt;&amp;<rt>x</rt></ruby>'

    def test_aozora_escapes_literal(self):
        assert AnnotationFormat.AOZORA.escape('A｜B《C》※') == (
            'A※［＃縦線］B※［＃始め二重山括弧］C※［＃終わり二重山括弧］※［＃米印］'
        )

    @pytest.mark.parametrize('fmt', list(AnnotationFormat))
    @pytest.mark.parametrize('text', [
        '<ruby>漢字<rt>かんじ</rt></ruby>',
        '&amp; &lt; &',
        '｜本《ほん》',
        '※［＃縦線］',
        '"quoted" \'single\'',
    ])
    def test_unescape_inverts_escape(self, fmt, text):
        assert fmt.unescape(fmt.escape(text)) == text


# =============================================================================
# Rendering
# =============================================================================


class TestRender:
    """Well-formed segmentations."""

    def test_only_matched_segments_wrapped(self):
        text = 'これはテストです。'
        segments = segments_from_pieces(text, ['これ', 'は', 'テスト', 'です', '。'])
        matches = {segments[2]: match_for(segments[2], 'test')}

        assert render(text, segments, matches) == 'これは<ruby>テスト<rt>test</rt></ruby>です。'

    def test_no_matches_is_identity(self):
        text = '。、！'
        segments = segments_from_pieces(text, ['。', '、', '！'])
        assert render(text, segments, {}) == text

    def test_empty_text(self):
        assert render('', [], {}) == ''

    def test_no_segments_keeps_text(self):
        assert render('テスト', [], {}) == 'テスト'

    def test_literal_comes_from_source(self):
        text = 'テスト'
        seg = Segment('XYZ', 0, 3)
        assert render(text, [seg], {seg: match_for(seg, 'test')}) == '<ruby>テスト<rt>test</rt></ruby>'

    @pytest.mark.parametrize('gloss', ['', 'x', 'a very long gloss ' * 20])
    def test_round_trip_independent_of_gloss_length(self, gloss):
        text = '私は学生です'
        segments = segments_from_pieces(text, ['私', 'は', '学生', 'です'])
        matches = {segments[0]: match_for(segments[0], gloss), segments[2]: match_for(segments[2], gloss)}
        for fmt in AnnotationFormat:
            assert strip_annotations(render(text, segments, matches, fmt), fmt) == text

    def test_aozora_output(self):
        text = '学生です'
        segments = segments_from_pieces(text, ['学生', 'です'])
        matches = {segments[0]: match_for(segments[0], 'student')}
        assert render(text, segments, matches, AnnotationFormat.AOZORA) == '｜学生《student》です'

    def test_unmatched_markup_escaped(self):
        text = '<b>テスト</b>'
        segments = segments_from_pieces(text, ['<b>', 'テスト', '</b>'])
        matches = {segments[1]: match_for(segments[1], 'test')}
        assert render(text, segments, matches) == '&lt;b&gt;<ruby>テスト<rt>test</rt></ruby>&lt;/b&gt;'

    @pytest.mark.parametrize('fmt', list(AnnotationFormat))
    @pytest.mark.parametrize('text, pieces', [
        ('<ruby>漢字<rt>かんじ</rt></ruby>とテスト', ['<ruby>', '漢字', '<rt>', 'かんじ', '</rt></ruby>', 'と', 'テスト']),
        ('A｜B テスト', ['A', '｜', 'B', ' ', 'テスト']),
        ('｜本《ほん》', ['｜', '本', '《', 'ほん', '》']),
    ])
    def test_source_markup_round_trips(self, fmt, text, pieces):
        segments = segments_from_pieces(text, pieces)
        matches = {seg: match_for(seg, 'g') for seg in segments if seg.text in ('漢字', 'テスト', '本')}
        assert strip_annotations(render(text, segments, matches, fmt), fmt) == text


class TestClipPolicy:
    """Segmentations that break the contiguity contract."""

    def test_overlap_clipped(self, caplog):
        text = 'テスト'
        first, second = Segment('テス', 0, 2), Segment('スト', 1, 3)
        with caplog.at_level(logging.WARNING, logger='rubylingo.render'):
            result = render(text, [first, second], {second: match_for(second, 'x')})

        assert result == 'テス<ruby>ト<rt>x</rt></ruby>'
        assert 'overlaps cursor 2' in caplog.text

    def test_fully_overlapped_segment_dropped(self, caplog):
        text = 'テスト'
        outer, inner = Segment('テスト', 0, 3), Segment('ス', 1, 2)
        with caplog.at_level(logging.WARNING, logger='rubylingo.render'):
            result = render(text, [outer, inner], {inner: match_for(inner, 'x')})

        assert result == 'テスト'
        assert 'Dropping segment' in caplog.text

    def test_past_end_clipped(self, caplog):
        text = 'テスト'
        seg = Segment('テスト！', 0, 4)
        with caplog.at_level(logging.WARNING, logger='rubylingo.render'):
            result = render(text, [seg], {seg: match_for(seg, 'test')})

        assert result == '<ruby>テスト<rt>test</rt></ruby>'
        assert 'runs past end of text' in caplog.text

    def test_gap_emits_source_text(self, caplog):
        text = 'テスト'
        segments = [Segment('テ', 0, 1), Segment('ト', 2, 3)]
        with caplog.at_level(logging.WARNING, logger='rubylingo.render'):
            result = render(text, segments, {})

        assert result == 'テスト'
        assert 'gap 1:2' in caplog.text

    def test_clipped_output_round_trips(self):
        text = '日本語を勉強'
        segments = [Segment('日本語', 0, 3), Segment('語を', 2, 4), Segment('勉強', 4, 6), Segment('強', 5, 6)]
        matches = {seg: match_for(seg, 'g') for seg in segments}
        assert strip_annotations(render(text, segments, matches)) == text

    def test_strict_overlap_raises(self):
        text = 'テスト'
        first, second = Segment('テス', 0, 2), Segment('スト', 1, 3)
        with pytest.raises(MalformedSegmentation) as exc_info:
            render(text, [first, second], {}, strict=True)

        assert exc_info.value.start == 1
        assert exc_info.value.end == 3
        assert exc_info.value.cursor == 2

    def test_strict_past_end_raises(self):
        with pytest.raises(MalformedSegmentation):
            render('テスト', [Segment('テスト！', 0, 4)], {}, strict=True)

    def test_strict_accepts_valid_segments(self):
        text = 'これはテスト'
        segments = segments_from_pieces(text, ['これ', 'は', 'テスト'])
        assert render(text, segments, {}, strict=True) == text


class TestSpans:

    def test_spans_tile_text(self):
        text = '私は学生'
        segments = segments_from_pieces(text, ['私', 'は', '学生'])
        matches = {seg: match_for(seg, seg.text + '!') for seg in (segments[2], segments[0])}

        assert resolve_spans(text, segments, matches) == [
            AnnotatedSpan(0, 1, '私!'),
            AnnotatedSpan(1, 2),
            AnnotatedSpan(2, 4, '学生!'),
        ]

    def test_gap_and_trailing_text_become_plain_spans(self, caplog):
        text = 'テスト。'
        seg = Segment('ス', 1, 2)
        with caplog.at_level(logging.WARNING, logger='rubylingo.render'):
            spans = resolve_spans(text, [seg], {seg: match_for(seg, 'x')})

        assert spans == [AnnotatedSpan(0, 1), AnnotatedSpan(1, 2, 'x'), AnnotatedSpan(2, 4)]
        assert [s.annotated for s in spans] == [False, True, False]

    def test_empty_gloss_is_still_annotated(self):
        text = '本'
        seg = Segment('本', 0, 1)
        assert resolve_spans(text, [seg], {seg: match_for(seg, '')}) == [AnnotatedSpan(0, 1, '')]

    def test_match_span(self):
        assert Match('本', 'book', 'ほん', 3, 4).span == (3, 4)
