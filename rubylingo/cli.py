"""
Command line interface for rubylingo.

Usage:
    rubylingo "日本語テキスト"               # annotated text
    rubylingo -f "日本語テキスト"            # full conversion result as JSON
    rubylingo -a "日本語テキスト"            # detailed analysis as JSON
    rubylingo -s                             # engine status as JSON
    rubylingo init-db --json basic.json      # import a dictionary
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from rubylingo import __version__
from rubylingo.dictionary import open_store
from rubylingo.engine import AnnotationEngine
from rubylingo.errors import RubylingoError
from rubylingo.render import AnnotationFormat
from rubylingo.segment import get_segmenter
from rubylingo.settings import DB_PATH, DEBUG, DEFAULT_FORMAT, DEFAULT_LEVEL, DICTIONARY_LEVELS, MAX_TEXT_LENGTH

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    """Log to stderr; DEBUG with --verbose or RUBYLINGO_DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose or DEBUG else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_json(model) -> None:
    print(json.dumps(model.model_dump(), ensure_ascii=False, indent=2))


# ============================================================================
# init-db
# ============================================================================

def init_db_command(args) -> int:
    """Import a JSON dictionary into the database."""
    json_path = Path(args.json)
    if not json_path.exists():
        print(f"Error: dictionary file not found: {json_path}", file=sys.stderr)
        return 1

    db_path = Path(args.output) if args.output else DB_PATH

    if db_path.exists() and not args.force:
        print(f"Database already exists: {db_path}")
        response = input(f"Replace level '{args.level}'? [y/N]: ").strip().lower()
        if response != 'y':
            print("Aborted.")
            return 1

    print("Importing dictionary...")
    print(f"  JSON:   {json_path}")
    print(f"  Output: {db_path}")
    print(f"  Level:  {args.level}")

    from rubylingo.loading.json_dict import load_json_dictionary

    def progress(count):
        print(f"  {count:,} entries imported...")

    t0 = time.perf_counter()
    try:
        total = load_json_dictionary(
            json_path=json_path,
            db_path=db_path,
            level=args.level,
            batch_size=50000,
            progress_callback=progress,
        )
    except (OSError, ValueError) as e:
        print(f"Error importing dictionary: {e}", file=sys.stderr)
        return 1

    elapsed = time.perf_counter() - t0
    print()
    print(f"Imported {total:,} entries in {elapsed:.1f}s")
    print("Set RUBYLINGO_DB_PATH to use this database:")
    print(f'  export RUBYLINGO_DB_PATH="{db_path.absolute()}"')
    return 0


def main_init_db(args: list) -> int:
    """CLI entry point for init-db subcommand."""
    parser = argparse.ArgumentParser(
        description='Import a flat JSON dictionary into the rubylingo database',
        prog='rubylingo init-db',
    )
    parser.add_argument(
        '--json', '-j',
        type=str,
        required=True,
        metavar='PATH',
        help='JSON dictionary file (word -> entry)',
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        metavar='PATH',
        help=f'Output database path (default: {DB_PATH})',
    )
    parser.add_argument(
        '--level', '-L',
        choices=DICTIONARY_LEVELS,
        default=DEFAULT_LEVEL,
        help=f'Dictionary level to import into (default: {DEFAULT_LEVEL})',
    )
    parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Replace the level without prompting',
    )
    parsed = parser.parse_args(args)
    return init_db_command(parsed)


# ============================================================================
# Main
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='RubyLingo: annotate Japanese text with English glosses',
        prog='rubylingo',
        epilog='Subcommands:\n  rubylingo init-db    Import a JSON dictionary into the database',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('text', nargs='*', help='Japanese text to annotate')

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('-f', '--full', action='store_true', help='Print the conversion result as JSON')
    mode.add_argument('-a', '--analyze', action='store_true', help='Print a detailed analysis as JSON')
    mode.add_argument('-s', '--status', action='store_true', help='Print engine status as JSON')

    parser.add_argument(
        '-d', '--dictionary',
        type=str,
        default=None,
        metavar='PATH',
        help='Dictionary file (.json) or database (.db)',
    )
    parser.add_argument(
        '-L', '--level',
        choices=DICTIONARY_LEVELS,
        default=DEFAULT_LEVEL,
        help=f'Dictionary level (default: {DEFAULT_LEVEL})',
    )
    parser.add_argument(
        '--format',
        choices=[f.value for f in AnnotationFormat],
        default=DEFAULT_FORMAT,
        help=f'Annotation format (default: {DEFAULT_FORMAT})',
    )
    parser.add_argument(
        '--segmenter',
        choices=['script', 'mecab'],
        default='script',
        help='Segmenter (default: script; mecab needs fugashi)',
    )
    parser.add_argument('--strict', action='store_true', help='Fail on malformed segmentation instead of clipping')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    parser.add_argument('-v', '--version', action='store_true', help='Show version information')
    return parser


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point."""
    args_list = args if args is not None else sys.argv[1:]

    if args_list and args_list[0] == 'init-db':
        return main_init_db(args_list[1:])

    parser = build_parser()
    parsed = parser.parse_args(args_list)

    if parsed.version:
        print(f'rubylingo {__version__}')
        return 0

    configure_logging(parsed.verbose)

    text = ' '.join(parsed.text) if parsed.text else ''
    if text == '-':
        text = sys.stdin.read()

    if not text and not parsed.status:
        parser.print_help()
        return 1

    if len(text) > MAX_TEXT_LENGTH:
        print(f'Error: text is too long ({len(text):,} characters, maximum {MAX_TEXT_LENGTH:,})', file=sys.stderr)
        return 1

    try:
        engine = AnnotationEngine(
            open_store(parsed.dictionary, parsed.level),
            segmenter=get_segmenter(parsed.segmenter),
            fmt=parsed.format,
            strict=parsed.strict or None,
        )
        if parsed.status:
            try:
                engine.store.ensure_ready()
            except RubylingoError as e:
                logger.warning(f"Dictionary not loaded: {e}")
            print_json(engine.status())
            return 0

        engine.store.ensure_ready()
        if parsed.analyze:
            print_json(engine.analyze(text))
        elif parsed.full:
            print_json(engine.convert(text))
        else:
            print(engine.convert(text).annotated)
        return 0

    except RubylingoError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
