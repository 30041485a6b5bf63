"""Text canonicalization used before any keyword or amount matching."""

from __future__ import annotations

import unicodedata

__all__ = ["normalize"]


def normalize(text: str | None) -> str:
    """Return lower-cased text without diacritics and with collapsed whitespace.

    The function is total and idempotent: ``normalize(normalize(x)) ==
    normalize(x)`` for any input.
    """

    if not text:
        return ""

    # Lower before decomposing: some capitals lower into combining sequences.
    decomposed = unicodedata.normalize("NFKD", text.lower())
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return " ".join(stripped.lower().split())
