"""Name similarity scoring based on the Levenshtein edit distance."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def calculate_name_similarity(name1: str, name2: str) -> float:
    """Return a case-insensitive similarity score for two names.

    The score is ``1 - distance / max(len(name1), len(name2))`` where
    ``distance`` is the Levenshtein distance of the lower-cased names.  ``1.0``
    means identical names; two empty names are considered identical.

    Examples
    --------
    >>> calculate_name_similarity("glucose", "GLUCOSE")
    1.0
    >>> round(calculate_name_similarity("Glucose", "Glucoze"), 3)
    0.857
    """

    first = name1.lower()
    second = name2.lower()
    max_length = max(len(first), len(second))
    if max_length == 0:
        return 1.0
    distance = Levenshtein.distance(first, second)
    return 1 - distance / max_length
