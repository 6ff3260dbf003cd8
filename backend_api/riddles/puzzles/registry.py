from __future__ import annotations

from typing import Callable, Dict, List

from .ingestion import EmptyResultError, ParseError, PuzzleItem, parse_csv, parse_json, parse_text

Parser = Callable[[str], List[PuzzleItem]]


# PUBLIC_INTERFACE
class ParserRegistry:
    """Registry mapping format hints to word-file parsers."""

    _registry: Dict[str, Parser] = {
        "text": parse_text,
        "csv": parse_csv,
        "json": parse_json,
    }

    @classmethod
    def get(cls, format_hint: str) -> Parser:
        """Return the parser for a format hint, or raise KeyError."""
        key = (format_hint or "").strip().lower()
        if key not in cls._registry:
            raise KeyError(f"Unknown word file format: {format_hint!r}")
        return cls._registry[key]

    @classmethod
    def register(cls, format_hint: str, parser: Parser) -> None:
        """Register or override the parser for a format hint."""
        key = (format_hint or "").strip().lower()
        if not key:
            raise ValueError("format_hint must be a non-empty string")
        cls._registry[key] = parser

    @classmethod
    def formats(cls) -> List[str]:
        return list(cls._registry)


# PUBLIC_INTERFACE
def get_parser(format_hint: str) -> Parser:
    """Convenience lookup.

    Example:
        items = get_parser("csv")("word,hint\\npanda,animal")
    """
    return ParserRegistry.get(format_hint)


# PUBLIC_INTERFACE
def parse(raw_text: str, format_hint: str) -> List[PuzzleItem]:
    """Parse raw word-file text in the given format (text, csv or json).

    Raises:
        ParseError: unknown format or text that does not fit the format.
        EmptyResultError: the file is well formed but holds no words.
    """
    try:
        parser = get_parser(format_hint)
    except KeyError as e:
        raise ParseError(str(e.args[0])) from e
    items = parser(raw_text)
    if not items:
        raise EmptyResultError("No words found in file.")
    return items
