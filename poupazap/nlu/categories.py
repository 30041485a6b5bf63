"""Mapping of free-text words onto the user's spending categories."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from poupazap.nlu.normalizer import normalize

MIN_PARTIAL_LENGTH = 3


def classify(
    token: str,
    categories: Sequence[str],
    *,
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> str | None:
    """Return the category matching ``token`` or ``None``.

    Parameters
    ----------
    token:
        Word or short phrase taken from the user's message.
    categories:
        The user's categories; the first match in this order wins.
    aliases:
        Optional mapping from a normalized category name to extra words that
        point at it. Aliases only resolve to categories present in
        ``categories``.
    """

    needle = normalize(token)
    if not needle or not categories:
        return None

    for category in categories:
        name = normalize(category)
        if not name:
            continue
        if needle == name:
            return category
        if len(needle) >= MIN_PARTIAL_LENGTH and (needle in name or name in needle):
            return category

    if not aliases:
        return None

    for category in categories:
        for alias in aliases.get(normalize(category), ()):
            if needle == alias:
                return category
    return None


__all__ = ["classify"]
