"""
Pydantic models for RubyLingo results.

These are the shapes returned by AnnotationEngine.convert, analyze and
status, and printed as JSON by the command line interface. They serialize
directly for use in a web service:

    @app.post("/api/convert", response_model=ConversionResult)
    def convert_endpoint(body: ConvertRequest):
        return engine.convert(body.text)
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from rubylingo.render import Match


class ConversionStats(BaseModel):
    """Counters for one conversion."""
    characters: int = Field(..., description="Length of the input in characters")
    matched_segments: int = Field(..., description="Segments that received a gloss")
    match_rate: float = Field(..., description="matched_segments / total_segments, 0 for empty input")
    total_segments: int = Field(0, description="Segments produced by the segmenter")
    eligible_segments: int = Field(0, description="Segments that passed classification")
    processing_time_ms: float = Field(0.0, description="Wall time spent converting")


class ConversionResult(BaseModel):
    """Annotated text and its statistics."""
    original: str = Field(..., description="Input text")
    annotated: str = Field(..., description="Input text with inline annotations")
    format: str = Field("ruby", description="Annotation format used")
    stats: ConversionStats


class TokenResult(BaseModel):
    """A segment that matched a dictionary entry."""
    word: str = Field(..., description="Segment as it appears in the input")
    reading: str = Field(..., description="Reading of the entry (the word itself if unknown)")
    translation: str = Field(..., description="Primary gloss")
    translations: List[str] = Field(default_factory=list, description="All glosses")
    pos: List[str] = Field(default_factory=list, description="Part-of-speech tags")
    basic_form: str = Field(..., description="Dictionary key that matched")
    start: int = Field(..., description="Start index in the input")
    end: int = Field(..., description="End index in the input")
    step: str = Field(..., description="Lookup step: exact, normalized or compound")
    conjugation: Optional[str] = Field(None, description="Inflection reversed by the normalized step, if any")

    @classmethod
    def from_match(cls, match: Match, conjugation: Optional[str] = None) -> "TokenResult":
        return cls(
            word=match.text,
            reading=match.reading or match.text,
            translation=match.gloss,
            translations=list(match.translations) or [match.gloss],
            pos=sorted(match.pos),
            basic_form=match.base_form or match.text,
            start=match.start,
            end=match.end,
            step=match.step.value if match.step is not None else "exact",
            conjugation=conjugation,
        )


class SegmentInfo(BaseModel):
    """Every segment of the input with its classification."""
    surface: str
    start: int
    end: int
    classification: str
    is_target: bool
    matched: bool = False


class AnalysisResult(BaseModel):
    """Detailed analysis: matches, all segments and statistics."""
    text: str
    tokens: List[TokenResult] = Field(default_factory=list)
    segments: List[SegmentInfo] = Field(default_factory=list)
    stats: ConversionStats


class StatusResult(BaseModel):
    """Engine status."""
    version: str
    ready: bool
    segmenter: str
    format: str
    strict: bool
    dictionary: Dict[str, Any] = Field(default_factory=dict)
    available_levels: List[str] = Field(default_factory=list)
