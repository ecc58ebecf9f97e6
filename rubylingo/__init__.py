"""
RubyLingo: inline English glosses for Japanese text.

Segments Japanese text, looks segments up in a bilingual dictionary
(undoing verb and adjective inflections where needed) and rebuilds the
text with ruby annotations on the matched words.
"""

import threading
import time
from typing import Tuple

__version__ = "0.2.0"

_default_engine = None
_default_engine_lock = threading.Lock()


def get_default_engine():
    """
    The process-wide engine, built on first use.

    Uses the dictionary and segmenter configured in rubylingo.settings.
    Construction happens at most once even with concurrent first callers;
    the dictionary itself is loaded by warm_up() or ensure_ready().
    """
    global _default_engine

    if _default_engine is not None:
        return _default_engine

    with _default_engine_lock:
        if _default_engine is None:
            from rubylingo.dictionary import open_store
            from rubylingo.engine import AnnotationEngine

            _default_engine = AnnotationEngine(open_store())
    return _default_engine


def warm_up(verbose: bool = False) -> Tuple[float, dict]:
    """
    Load the default dictionary ahead of the first request.

    Args:
        verbose: If True, print timing information.

    Returns:
        Tuple of (total_time_seconds, timing_details_dict)

    Example:
        >>> import rubylingo
        >>> elapsed, details = rubylingo.warm_up(verbose=True)
        Warming up rubylingo...
          Engine:            0.4ms
          Dictionary:      812.3ms
        Total warm-up:     812.7ms
    """
    timings = {}
    total_start = time.perf_counter()

    if verbose:
        print("Warming up rubylingo...")

    t0 = time.perf_counter()
    engine = get_default_engine()
    timings['engine'] = (time.perf_counter() - t0) * 1000
    if verbose:
        print(f"  Engine:        {timings['engine']:>7.1f}ms")

    t0 = time.perf_counter()
    engine.store.ensure_ready()
    timings['dictionary'] = (time.perf_counter() - t0) * 1000
    if verbose:
        print(f"  Dictionary:    {timings['dictionary']:>7.1f}ms")

    total_time = time.perf_counter() - total_start
    timings['total'] = total_time * 1000

    if verbose:
        print(f"Total warm-up:   {timings['total']:>7.1f}ms")

    return total_time, timings


def convert(text: str, engine=None):
    """
    Annotate text with dictionary glosses.

    This is the main high-level API.

    Args:
        text: Japanese text.
        engine: Optional AnnotationEngine. If None, the default engine is
            used and its dictionary is loaded if needed.

    Returns:
        ConversionResult with original, annotated and stats.

    Example:
        >>> import rubylingo
        >>> result = rubylingo.convert("日本語を勉強します")
        >>> print(result.annotated)
    """
    if engine is None:
        engine = get_default_engine()
        engine.store.ensure_ready()
    return engine.convert(text)
