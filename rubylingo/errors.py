"""
Exceptions raised by RubyLingo.

Only the dictionary store and the segmenter backends can fail; the
classifier and the normalizer are total functions.
"""


class RubylingoError(Exception):
    """Base class for all RubyLingo errors."""


class DictionaryUnavailable(RubylingoError, RuntimeError):
    """
    Raised when a lookup is attempted before the dictionary store is ready,
    or after its load failed.

    A retryable precondition failure, never reported as a segment with no
    entry.
    """

    def __init__(self, store: str, reason: str = "not loaded"):
        self.store = store
        self.reason = reason
        super().__init__(f"Dictionary {store} is unavailable: {reason}")


class DictionaryFormatError(RubylingoError, ValueError):
    """Raised when a dictionary source is not a flat word -> record mapping."""


class MalformedSegmentation(RubylingoError, ValueError):
    """
    Raised in strict mode when a segmenter returns overlapping, out of order
    or out of range segments.
    """

    def __init__(self, message: str, start: int, end: int, cursor: int):
        self.start = start
        self.end = end
        self.cursor = cursor
        super().__init__(message)


class SegmenterUnavailable(RubylingoError, RuntimeError):
    """Raised when an optional segmenter backend cannot be initialized."""
