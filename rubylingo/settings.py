"""
Settings and configuration for RubyLingo.

Every value can be overridden through an environment variable.
"""

import os
from pathlib import Path

# Data directory paths
PACKAGE_DIR = Path(__file__).parent
DATA_DIR = Path(os.environ.get("RUBYLINGO_DATA_DIR", PACKAGE_DIR / "data"))

# Flat JSON dictionaries, one file per level (basic.json, business.json, ...)
DICT_DIR = Path(os.environ.get("RUBYLINGO_DICT_DIR", DATA_DIR / "dictionaries"))

# SQLite dictionary database
DEFAULT_DB_PATH = DATA_DIR / "rubylingo.db"
DB_PATH = Path(os.environ.get("RUBYLINGO_DB_PATH", DEFAULT_DB_PATH))

# Dictionary levels, smallest first
DICTIONARY_LEVELS = ("basic", "business", "academic", "comprehensive")
DEFAULT_LEVEL = os.environ.get("RUBYLINGO_LEVEL", "basic")

# Annotation format: "ruby" (HTML) or "aozora"
DEFAULT_FORMAT = os.environ.get("RUBYLINGO_FORMAT", "ruby")

# Raise MalformedSegmentation instead of clipping bad segmenter output
STRICT_SEGMENTATION = os.environ.get(
    "RUBYLINGO_STRICT_SEGMENTATION", ""
).lower() in ("1", "true", "yes")

# Debug mode
DEBUG = os.environ.get("RUBYLINGO_DEBUG", "").lower() in ("1", "true", "yes")

# Longest text accepted by the command line (the engine itself has no limit)
MAX_TEXT_LENGTH = 10000


def dictionary_path(level: str = DEFAULT_LEVEL) -> Path:
    """Path of the JSON dictionary file for a level."""
    return DICT_DIR / f"{level}.json"


def available_levels() -> list:
    """Levels whose JSON dictionary file exists on disk."""
    return [level for level in DICTIONARY_LEVELS if dictionary_path(level).exists()]

