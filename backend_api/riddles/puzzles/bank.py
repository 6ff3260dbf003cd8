from __future__ import annotations

import random
import string
from typing import List, Optional, Sequence

CYRILLIC_ALPHABET = "АБВГДЕЁЖЗИЙКЛМНОПРСТУФХЦЧШЩЪЫЬЭЮЯ"
LATIN_ALPHABET = string.ascii_uppercase
FILLER_ALPHABET = CYRILLIC_ALPHABET + LATIN_ALPHABET

MIN_BANK_SIZE = 12
MAX_BANK_SIZE = 16
FILLER_PADDING = 6


def bank_size(seed_length: int) -> int:
    """Number of tiles for a seed of the given length, clamped to 12..16."""
    return max(MIN_BANK_SIZE, min(MAX_BANK_SIZE, seed_length + FILLER_PADDING))


# PUBLIC_INTERFACE
def shuffle_tiles(tiles: Sequence[Optional[str]], rng=None) -> List[Optional[str]]:
    """Return a uniformly shuffled copy of tiles (Fisher-Yates)."""
    rng = rng or random
    out = list(tiles)
    rng.shuffle(out)
    return out


# PUBLIC_INTERFACE
def make_bank(normalized_target: str, rng=None) -> List[str]:
    """Build a shuffled letter bank for a normalized target word.

    Every character of the target is seeded (upper-cased), then random fillers
    from the combined Cyrillic and Latin alphabet pad the bank up to
    bank_size(). Fillers may repeat seed letters.

    Parameters:
        normalized_target: output of normalize() for the target word.
        rng: optional random.Random-compatible source; defaults to the
             module-level random generator.

    Returns:
        List of single tiles, seed letters at unpredictable positions.
    """
    rng = rng or random
    tiles = list(normalized_target.upper())
    size = bank_size(len(tiles))
    while len(tiles) < size:
        tiles.append(rng.choice(FILLER_ALPHABET))
    return shuffle_tiles(tiles, rng)
