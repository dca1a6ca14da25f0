"""Parsing, formatting and ordering helpers for display values."""

import re
import unicodedata
from typing import Optional, Tuple

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_estimate(text: Optional[str]) -> int:
    """
    Parse a population estimate field.

    Reads the leading integer, so "5000" and "5000.0" both give 5000.
    Absent, empty or non-numeric text counts as zero.
    """
    if not text:
        return 0
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def format_population(value: int) -> str:
    """Format an integer with US thousands separators, e.g. 1234567 -> "1,234,567"."""
    return f"{value:,}"


# Root collation order of common punctuation, all of it ahead of digits and letters
_PUNCTUATION_ORDER = " _-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"
_PUNCTUATION_RANK = str.maketrans({ch: chr(rank) for rank, ch in enumerate(_PUNCTUATION_ORDER, 1)})


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize('NFKD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def collation_key(text: str) -> Tuple[str, str, str]:
    """
    Sort key approximating locale-aware (en-US) string comparison.

    Letters compare ignoring accents and case first, then accents, then case,
    so "Doña Ana" sorts beside "Dona Ana" rather than after "Z". ASCII
    punctuation follows the Unicode root collation order ("-" < "." < "'" < "(")
    instead of code point order. Other symbols keep code point order, and
    punctuation is never ignored the way some locales ignore it.
    """
    base = _strip_accents(text).translate(_PUNCTUATION_RANK)
    return (
        base.casefold(),
        text.casefold().translate(_PUNCTUATION_RANK),
        text.swapcase().translate(_PUNCTUATION_RANK),
    )
