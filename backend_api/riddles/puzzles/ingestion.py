from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .normalizer import normalize

MAX_WORDS = 20

_LINE_BREAK = re.compile(r"\r?\n")
_CSV_DELIMITER = re.compile(r"[,;\t]")


class IngestionError(Exception):
    """Base class for word-file ingestion failures."""


class ParseError(IngestionError):
    """Raw text does not match the grammar of the selected format."""


class EmptyResultError(IngestionError):
    """Input parsed but produced no usable words."""


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class PuzzleItem:
    """A target word as stored for play, with an optional free-text hint."""

    word: str
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"word": self.word}
        if self.hint is not None:
            data["hint"] = self.hint
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PuzzleItem":
        hint = data.get("hint")
        return cls(word=str(data["word"]), hint=str(hint) if hint is not None else None)


def _clean_hint(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def parse_text(raw_text: str) -> List[PuzzleItem]:
    """One word per line, optionally followed by `| hint`."""
    out: List[PuzzleItem] = []
    for line in _LINE_BREAK.split(raw_text):
        line = line.strip()
        if not line:
            continue
        word, _, hint = line.partition("|")
        word = word.strip()
        if word:
            out.append(PuzzleItem(word, _clean_hint(hint)))
    return out


def _split_csv_line(line: str) -> List[str]:
    # each line picks its own delimiter: the first of , ; or tab it contains
    match = _CSV_DELIMITER.search(line)
    cells = line.split(match.group()) if match else [line]
    return [cell.strip() for cell in cells]


def parse_csv(raw_text: str) -> List[PuzzleItem]:
    """Rows of `word,hint` with an optional `word` header row."""
    rows = [_split_csv_line(line) for line in _LINE_BREAK.split(raw_text) if line]
    start = 1 if rows and rows[0][0].lower() == "word" else 0
    out: List[PuzzleItem] = []
    for row in rows[start:]:
        word = row[0]
        if word:
            out.append(PuzzleItem(word, _clean_hint(row[1]) if len(row) > 1 else None))
    return out


def parse_json(raw_text: str) -> List[PuzzleItem]:
    """An array of objects with a required `word` and an optional `hint`."""
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno}).") from e
    if not isinstance(data, list):
        raise ParseError("Expected a JSON array of objects.")

    out: List[PuzzleItem] = []
    for element in data:
        if not isinstance(element, dict):
            continue
        word = str(element.get("word") or "").strip()
        hint = element.get("hint")
        if word:
            out.append(PuzzleItem(word, _clean_hint(str(hint)) if hint is not None else None))
    return out


# PUBLIC_INTERFACE
def dedupe(items: Iterable[PuzzleItem], max_count: int = MAX_WORDS) -> List[PuzzleItem]:
    """Keep the first occurrence of each normalized word, upper-cased, up to max_count.

    Words that normalize to nothing are dropped. The hint of the first
    occurrence is kept as is.
    """
    seen = set()
    out: List[PuzzleItem] = []
    for item in items:
        key = normalize(item.word)
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(PuzzleItem(item.word.upper(), item.hint))
    return out[:max_count]


def format_from_filename(filename: str) -> str:
    """Pick the format hint from a file extension; anything unknown is text."""
    ext = (filename or "").rsplit(".", 1)[-1].lower() if "." in (filename or "") else ""
    if ext in ("json", "csv"):
        return ext
    return "text"


def decode_upload(data: bytes) -> str:
    """Decode uploaded bytes as UTF-8, tolerating a byte-order mark."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError("File is not valid UTF-8 text.") from e
