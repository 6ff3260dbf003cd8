from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .bank import make_bank, shuffle_tiles
from .normalizer import is_letter, normalize

logger = logging.getLogger(__name__)


class PuzzleStatus(str, Enum):
    """Attempt state.

    IDLE accepts picks, removals and checks. CORRECT is final for the attempt.
    WRONG only blocks check(); editing the answer clears the verdict.
    """

    IDLE = "idle"
    CORRECT = "correct"
    WRONG = "wrong"


@dataclass(frozen=True)
class Slot:
    """One character position of the target word."""

    char: str
    is_letter: bool
    revealed: bool


@dataclass(frozen=True)
class PickedTile:
    """A letter moved out of the bank, with the bank position it came from."""

    char: str
    bank_index: int


# PUBLIC_INTERFACE
class PuzzleEngine:
    """Letters-from-letters puzzle for a single target word.

    The bank is a fixed-size list of tiles where None marks a tile already
    placed into a slot. Picks form a stack of PickedTile entries that point
    back into the bank, so remove_last() restores a tile to exactly the
    position it was taken from.

    Invalid operations (picking in a finished attempt, removing from an empty
    stack, revealing past the last letter) are no-ops that return False.

    Example:
        engine = PuzzleEngine("DRAGON")
        engine.pick(engine.bank.index("D"))
        engine.hint()
        engine.check()
    """

    def __init__(self, target: str, bank: Optional[List[Optional[str]]] = None, rng=None):
        self.target = (target or "").strip()
        self.normalized_target = normalize(self.target)
        self._rng = rng or random
        if bank is None:
            bank = make_bank(self.normalized_target, rng=self._rng)
        self.bank: List[Optional[str]] = list(bank)
        self.picked: List[PickedTile] = []
        self.revealed = 0
        self.status = PuzzleStatus.IDLE

    @property
    def letter_count(self) -> int:
        return sum(1 for ch in self.target if is_letter(ch))

    @property
    def filled_count(self) -> int:
        return len(self.picked) + self.revealed

    @property
    def is_idle(self) -> bool:
        return self.status is PuzzleStatus.IDLE

    @property
    def is_solved(self) -> bool:
        return self.status is PuzzleStatus.CORRECT

    def slots(self) -> List[Slot]:
        """Classify every target position; the first `revealed` letters are revealed."""
        result: List[Slot] = []
        logical = 0
        for ch in self.target:
            if is_letter(ch):
                result.append(Slot(ch, True, logical < self.revealed))
                logical += 1
            else:
                result.append(Slot(ch, False, False))
        return result

    def _fill_letters(self) -> List[str]:
        """Characters currently occupying the target positions.

        Non-letters are verbatim, revealed letters are the true character and
        the remaining letter slots take picks in stack order ("" when unfilled).
        """
        out: List[str] = []
        logical = 0
        for slot in self.slots():
            if not slot.is_letter:
                out.append(slot.char)
                continue
            if slot.revealed:
                out.append(slot.char)
            else:
                pos = logical - self.revealed
                out.append(self.picked[pos].char if pos < len(self.picked) else "")
            logical += 1
        return out

    def display(self) -> List[str]:
        """What each target position shows right now."""
        return self._fill_letters()

    def candidate(self) -> str:
        """The full answer assembled from reveals and picks, punctuation included."""
        return "".join(self._fill_letters())

    # PUBLIC_INTERFACE
    def pick(self, tile_index: int) -> bool:
        """Move the bank tile at tile_index into the next free letter slot."""
        if self.is_solved:
            return False
        if tile_index < 0 or tile_index >= len(self.bank):
            return False
        ch = self.bank[tile_index]
        if not ch:
            return False
        if self.filled_count >= self.letter_count:
            return False
        self.picked.append(PickedTile(ch, tile_index))
        self.bank[tile_index] = None
        self.status = PuzzleStatus.IDLE
        logger.debug("Picked %r from bank position %d", ch, tile_index)
        return True

    # PUBLIC_INTERFACE
    def remove_last(self) -> bool:
        """Return the most recent pick to its original bank position."""
        if self.is_solved or not self.picked:
            return False
        last = self.picked.pop()
        self.bank[last.bank_index] = last.char
        self.status = PuzzleStatus.IDLE
        return True

    # PUBLIC_INTERFACE
    def hint(self) -> bool:
        """Reveal the next letter slot, left to right. Allowed in any state."""
        if self.revealed >= self.letter_count:
            return False
        self.revealed += 1
        return True

    # PUBLIC_INTERFACE
    def check(self) -> PuzzleStatus:
        """Compare the assembled answer with the target in canonical form.

        Case and the stripped punctuation set are ignored; letter order and
        missing letters are not. Outside IDLE the current status is returned
        unchanged.
        """
        if not self.is_idle:
            return self.status
        ok = normalize(self.candidate()) == self.normalized_target
        self.status = PuzzleStatus.CORRECT if ok else PuzzleStatus.WRONG
        logger.debug("Checked %r: %s", self.target, self.status.value)
        return self.status

    # PUBLIC_INTERFACE
    def reset(self) -> None:
        """Start the attempt over with the tiles still in the bank.

        Tiles consumed by picks are not returned; the bank is rebuilt from the
        non-empty tiles, reshuffled.
        """
        remaining = [ch for ch in self.bank if ch]
        self.bank = shuffle_tiles(remaining, self._rng)
        self.picked = []
        self.revealed = 0
        self.status = PuzzleStatus.IDLE

    # PUBLIC_INTERFACE
    def shuffle(self) -> None:
        """Permute the remaining tiles among the non-empty bank positions."""
        positions = [i for i, ch in enumerate(self.bank) if ch]
        letters = shuffle_tiles([self.bank[i] for i in positions], self._rng)
        for i, ch in zip(positions, letters):
            self.bank[i] = ch

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "bank": list(self.bank),
            "picked": [[p.char, p.bank_index] for p in self.picked],
            "revealed": self.revealed,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], rng=None) -> "PuzzleEngine":
        """Rebuild an engine from to_dict() output. Raises KeyError/ValueError on bad data."""
        engine = cls(data["target"], bank=data["bank"], rng=rng)
        engine.picked = [PickedTile(str(ch), int(i)) for ch, i in data.get("picked", [])]
        engine.revealed = int(data.get("revealed", 0))
        engine.status = PuzzleStatus(data.get("status", PuzzleStatus.IDLE.value))
        for p in engine.picked:
            if not 0 <= p.bank_index < len(engine.bank) or engine.bank[p.bank_index]:
                raise ValueError("Picked tile does not reference an empty bank position.")
        if not 0 <= engine.revealed <= engine.letter_count:
            raise ValueError("Revealed count out of range.")
        return engine
