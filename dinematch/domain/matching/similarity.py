"""Fuzzy text similarity used by event scoring"""

from collections import Counter


def _bigrams(text: str) -> Counter:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def compare_two_strings(first: str, second: str) -> float:
    """
    Sørensen-Dice coefficient over character bigrams, whitespace ignored.

    Case-insensitive and symmetric, 1.0 for identical strings and 0.0 when
    either side is shorter than two characters.
    """
    first = "".join(first.lower().split())
    second = "".join(second.lower().split())

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    overlap = sum((_bigrams(first) & _bigrams(second)).values())
    return 2.0 * overlap / (len(first) + len(second) - 2)
