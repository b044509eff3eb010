"""Deck file scanning: find markdown deck files and build decks from them."""

import pathlib
import sys

from flashplay.decks import DEFAULT_DECK_NAME, build_deck
from flashplay.models import Deck
from flashplay.parser import Parser


def scan_decks(paths: list[pathlib.Path], parser: Parser | None = None
               ) -> list[tuple[str, Deck]]:
    """Scan files and directories for ``.md`` deck files.

    Directories are walked recursively, skipping hidden ones. Each file is
    read at most once. Returns list of (source_path, deck) sorted by path
    within each directory.
    """
    parser = parser or Parser()
    results = []
    seen_paths: set[str] = set()

    for path in paths:
        path = pathlib.Path(path).resolve()
        if path.is_file() and path.suffix == ".md":
            _scan_md_file(path, parser, results, seen_paths)
        elif path.is_dir():
            _scan_directory(path, parser, results, seen_paths)

    return results


def _scan_md_file(path: pathlib.Path, parser: Parser, results: list, seen_paths: set):
    if str(path) in seen_paths:
        return
    seen_paths.add(str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Warning: cannot read {path}: {e}", file=sys.stderr)
        return
    deck = build_deck(text, parser=parser)
    if deck.name == DEFAULT_DECK_NAME:
        deck.name = path.stem
    if not deck.cards:
        print(f"Warning: no cards found in {path}", file=sys.stderr)
    results.append((str(path), deck))


def _scan_directory(dirpath: pathlib.Path, parser: Parser, results: list, seen_paths: set):
    try:
        entries = sorted(dirpath.iterdir())
    except PermissionError:
        return
    for item in entries:
        if item.is_dir() and not item.name.startswith("."):
            _scan_directory(item, parser, results, seen_paths)
        elif item.is_file() and item.suffix == ".md":
            _scan_md_file(item, parser, results, seen_paths)
