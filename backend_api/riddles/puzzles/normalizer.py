from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
# hyphen, underscore, apostrophes, period, comma, !, ?, guillemets, parentheses
_PUNCTUATION = re.compile(r"[\-_'`.,!?«»()]")
_LETTER = re.compile(r"[a-zA-Zа-яА-ЯёЁ]")


# PUBLIC_INTERFACE
def normalize(word: str) -> str:
    """Return the canonical form of a word used for equality checks.

    Whitespace and the fixed punctuation set are removed and the remainder is
    lower-cased. Latin and Cyrillic letters are both folded by str.lower().

    Example:
        normalize("Mother-in-Law") == "motherinlaw"
    """
    stripped = _WHITESPACE.sub("", word or "")
    return _PUNCTUATION.sub("", stripped).lower()


# PUBLIC_INTERFACE
def is_letter(ch: str) -> bool:
    """True if ch is a Latin or Cyrillic letter (a pickable slot)."""
    return bool(_LETTER.fullmatch(ch))
