"""Word-overlap similarity for short free-text fields.

Used by duplicate detection to compare titles, descriptions and party
names. Pure functions, stdlib only.
"""


def normalize(text: str) -> str:
    """Lower-case and trim."""
    return text.strip().lower()


def similarity(first: str | None, second: str | None) -> float:
    """Score the textual overlap of two strings in [0, 1].

    Returns 0 if either string is empty and 1 if they are equal after
    normalization. Otherwise counts the words of ``first`` that contain, or
    are contained in, some word of ``second`` and returns
    ``2 * matches / (len(words1) + len(words2))``.

    Matching is by containment rather than identity, so "dispute" matches
    "disputes" and "v" matches "vs". Because only words of ``first`` are
    counted the score is not guaranteed to be symmetric.

    Repeated words in ``first`` can push the bare ratio past 1: "jones jones
    jones" against "jones smith" is 6/5. The returned score is capped at 1.0,
    a deliberate departure from the bare ratio. A capped field therefore
    adds less to a weighted composite than the uncapped ratio would.
    """
    if not first or not second:
        return 0.0

    a = normalize(first)
    b = normalize(second)
    if a == b:
        return 1.0

    words1 = a.split()
    words2 = b.split()
    total = len(words1) + len(words2)
    if total == 0:
        return 0.0

    matches = sum(1 for w1 in words1 if any(w1 in w2 or w2 in w1 for w2 in words2))
    return min(1.0, (2 * matches) / total)
