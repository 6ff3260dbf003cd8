from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .defaults import default_items
from .engine import PuzzleEngine
from .ingestion import MAX_WORDS, PuzzleItem, dedupe
from .registry import parse

logger = logging.getLogger(__name__)

WORDS_KEY = "custom-words"
STATE_KEY = "riddle-state"


@runtime_checkable
class SessionStore(Protocol):
    """Opaque key-value text storage backing the active word set."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed SessionStore, for tests and one-off scripts."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


def load_items(store: SessionStore, key: str = WORDS_KEY) -> List[PuzzleItem]:
    """Read the persisted word set, falling back to the defaults if absent or unreadable."""
    raw = store.get(key)
    if not raw:
        return default_items()
    try:
        items = [PuzzleItem.from_dict(x) for x in json.loads(raw)]
    except (ValueError, TypeError, KeyError, AttributeError):
        logger.warning("Stored word set under %r is unreadable; using defaults.", key)
        return default_items()
    if not items:
        return default_items()
    return items


# PUBLIC_INTERFACE
class RiddleGame:
    """The active word set, its current position and the running puzzle.

    The store is only written when a new word set is ingested (words key),
    cleared on reset_to_default(), and, for callers that need to resume
    between requests, snapshotted with save_state() (state key).

    Example:
        game = RiddleGame.from_store(MemoryStore())
        game.ingest("panda | animal\\nlion", "text")
        game.engine.pick(0)
    """

    def __init__(
        self,
        items: List[PuzzleItem],
        store: SessionStore,
        index: int = 0,
        engine: Optional[PuzzleEngine] = None,
        max_words: int = MAX_WORDS,
        words_key: str = WORDS_KEY,
        state_key: str = STATE_KEY,
        rng=None,
    ):
        self.items: List[PuzzleItem] = list(items) or default_items()
        self.store = store
        self.max_words = max_words
        self.words_key = words_key
        self.state_key = state_key
        self._rng = rng
        self.index = index if 0 <= index < len(self.items) else 0
        if engine is None or engine.target != self.current.word.strip():
            engine = self._new_engine()
        self.engine = engine

    @classmethod
    def from_store(cls, store: SessionStore, words_key: str = WORDS_KEY, state_key: str = STATE_KEY, **kwargs) -> "RiddleGame":
        """Recover the word set and, when a valid snapshot exists, the running puzzle."""
        items = load_items(store, words_key)
        index = 0
        engine = None
        raw_state = store.get(state_key)
        if raw_state:
            try:
                state = json.loads(raw_state)
                index = int(state["index"])
                engine = PuzzleEngine.from_dict(state["engine"], rng=kwargs.get("rng"))
            except (ValueError, TypeError, KeyError, AttributeError):
                logger.warning("Stored puzzle state under %r is unreadable; starting over.", state_key)
                index, engine = 0, None
        return cls(items, store, index=index, engine=engine, words_key=words_key, state_key=state_key, **kwargs)

    @property
    def current(self) -> PuzzleItem:
        return self.items[self.index]

    @property
    def progress(self) -> int:
        """Percent of the set reached, counting the current word."""
        return int((self.index + 1) * 100 / len(self.items) + 0.5)

    def _new_engine(self) -> PuzzleEngine:
        return PuzzleEngine(self.current.word, rng=self._rng)

    # PUBLIC_INTERFACE
    def next(self) -> PuzzleItem:
        """Advance to the next word, wrapping after the last one, with a fresh puzzle."""
        self.index = self.index + 1 if self.index + 1 < len(self.items) else 0
        self.engine = self._new_engine()
        return self.current

    # PUBLIC_INTERFACE
    def ingest(self, raw_text: str, format_hint: str) -> List[PuzzleItem]:
        """Replace the word set from raw file text, all or nothing.

        Raises:
            IngestionError: the previous set, position and puzzle are untouched.
        """
        items = dedupe(parse(raw_text, format_hint), self.max_words)
        self.items = items
        self.index = 0
        self.engine = self._new_engine()
        self.store.set(self.words_key, json.dumps([item.to_dict() for item in items], ensure_ascii=False))
        self.store.remove(self.state_key)
        logger.info("Loaded %d words from %s input.", len(items), format_hint)
        return items

    # PUBLIC_INTERFACE
    def reset_to_default(self) -> None:
        """Forget the uploaded set and go back to the built-in words."""
        self.store.remove(self.words_key)
        self.store.remove(self.state_key)
        self.items = default_items()
        self.index = 0
        self.engine = self._new_engine()
        logger.info("Word set reset to defaults.")

    def save_state(self) -> None:
        """Snapshot the position and running puzzle for the next load."""
        state = {"index": self.index, "engine": self.engine.to_dict()}
        self.store.set(self.state_key, json.dumps(state, ensure_ascii=False))
