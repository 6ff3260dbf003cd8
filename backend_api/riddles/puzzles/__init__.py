"""
Letters-from-letters puzzle engine and word-set ingestion.

Exports:
- normalize and is_letter for canonical word comparison
- make_bank for building shuffled letter banks
- PuzzleEngine, PuzzleStatus, Slot and PickedTile for a single puzzle
- parse, dedupe, PuzzleItem and the IngestionError family for word files
- ParserRegistry and get_parser for resolving word-file formats
- RiddleGame, SessionStore and MemoryStore for the active word set
- reveal_next_letter hint helper

These modules are framework-agnostic and can be reused by views or commands
without importing request objects.
"""

from .normalizer import normalize, is_letter
from .bank import make_bank
from .engine import PuzzleEngine, PuzzleStatus, Slot, PickedTile
from .ingestion import (
    PuzzleItem,
    IngestionError,
    ParseError,
    EmptyResultError,
    dedupe,
    decode_upload,
    format_from_filename,
)
from .registry import ParserRegistry, get_parser, parse
from .game import RiddleGame, SessionStore, MemoryStore
from .hints import reveal_next_letter

__all__ = [
    "normalize",
    "is_letter",
    "make_bank",
    "PuzzleEngine",
    "PuzzleStatus",
    "Slot",
    "PickedTile",
    "PuzzleItem",
    "IngestionError",
    "ParseError",
    "EmptyResultError",
    "parse",
    "dedupe",
    "decode_upload",
    "format_from_filename",
    "ParserRegistry",
    "get_parser",
    "RiddleGame",
    "SessionStore",
    "MemoryStore",
    "reveal_next_letter",
]
