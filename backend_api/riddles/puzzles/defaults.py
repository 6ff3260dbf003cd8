from typing import List

from .ingestion import PuzzleItem

DEFAULT_SET: List[PuzzleItem] = [
    PuzzleItem("DRAGON", "mythical creature"),
    PuzzleItem("MOUSE", "small animal"),
    PuzzleItem("FOREST", "many trees"),
    PuzzleItem("FRIEND", "buddy"),
    PuzzleItem("SING", "make music with your voice"),
]


# PUBLIC_INTERFACE
def default_items() -> List[PuzzleItem]:
    """A fresh copy of the built-in demo set."""
    return list(DEFAULT_SET)
