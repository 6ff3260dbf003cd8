"""
Riddles app package initializer.

Re-exports the puzzle engine, ingestion helpers and game orchestration so
callers can import from riddles directly, e.g.:

    from riddles import RiddleGame, MemoryStore
"""

# PUBLIC_INTERFACE
from .puzzles import (
    PuzzleEngine,
    PuzzleStatus,
    PuzzleItem,
    IngestionError,
    ParseError,
    EmptyResultError,
    RiddleGame,
    MemoryStore,
    normalize,
    reveal_next_letter,
)

__all__ = [
    "PuzzleEngine",
    "PuzzleStatus",
    "PuzzleItem",
    "IngestionError",
    "ParseError",
    "EmptyResultError",
    "RiddleGame",
    "MemoryStore",
    "normalize",
    "reveal_next_letter",
]
