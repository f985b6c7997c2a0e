"""
Vocabulary helpers: word detection and nearest-spelling lookup.
"""

import re
from typing import Iterable, Optional

from rapidfuzz import process
from rapidfuzz.distance import DamerauLevenshtein

SPECIAL_CHARSET = set("¿÷≥≤µ`´^=¨;:,.!?¡\"«»$%&/()[]{}<>|*+#~@_\\")

_SPACE_RE = re.compile(r"\s")


def is_word(value: str) -> bool:
    """True when ``value`` is a non-empty run of characters without spaces or punctuation."""
    if not value or _SPACE_RE.search(value):
        return False
    if any(c in SPECIAL_CHARSET for c in value):
        return False
    return any(c.isalnum() for c in value)


def get_closest_spelling_token(
    token: str,
    vocab: Iterable[str],
    max_edit_distance: Optional[int] = None,
) -> Optional[str]:
    """
    Find the vocabulary entry lexically closest to ``token``.

    Distance is Damerau-Levenshtein, so a single transposition ("wordl" ->
    "world") counts as one edit. Ties go to the entry seen first.

    Args:
        token: Token to look up (lowercased before comparison)
        vocab: Candidate vocabulary entries
        max_edit_distance: Reject candidates farther than this many edits;
            None keeps the plain closest entry however far it is

    Returns:
        Closest entry, or None when the vocabulary is empty or nothing
        is within ``max_edit_distance``
    """
    choices = list(vocab)
    if not choices:
        return None

    match = process.extractOne(
        token.lower(),
        choices,
        scorer=DamerauLevenshtein.distance,
        score_cutoff=max_edit_distance,
    )
    if match is None:
        return None
    return match[0]
