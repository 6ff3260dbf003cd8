from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class _EngineLike(Protocol):
    """Minimal interface required from PuzzleEngine for hint payloads."""

    target: str
    revealed: int

    @property
    def letter_count(self) -> int: ...

    def hint(self) -> bool: ...

    def slots(self) -> list: ...


def _letter_position(engine: _EngineLike, logical_index: int) -> Optional[int]:
    """Map the n-th letter slot to its index in the target word."""
    seen = 0
    for pos, slot in enumerate(engine.slots()):
        if not slot.is_letter:
            continue
        if seen == logical_index:
            return pos
        seen += 1
    return None


# PUBLIC_INTERFACE
def reveal_next_letter(engine: _EngineLike) -> Dict[str, Any]:
    """Reveal the next unrevealed letter slot, left to right.

    When every letter is already revealed nothing changes and index/letter
    are None.

    Returns:
        {
            "type": "reveal_next_letter",
            "data": { "index": int | None, "letter": str | None, "remaining": int }
        }
    """
    index: Optional[int] = None
    letter: Optional[str] = None
    if engine.hint():
        index = _letter_position(engine, engine.revealed - 1)
        if index is not None:
            letter = engine.target[index]
    remaining = max(0, engine.letter_count - engine.revealed)
    return {
        "type": "reveal_next_letter",
        "data": {"index": index, "letter": letter, "remaining": remaining},
    }
