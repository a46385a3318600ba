import re
from collections import Counter
from typing import List

STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "of", "to", "in", "for", "on", "with", "by",
    "is", "are", "was", "were", "this", "that", "as", "from", "it", "be", "at",
})

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def extract_topics(text: str, n: int = 10) -> List[str]:
    """
    Frequency-ranked keywords: stopwords and tokens under 3 characters are
    dropped, ties keep first-seen order.
    """
    words = _NON_ALNUM.sub(" ", (text or "").lower()).split()
    frequency = Counter(w for w in words if len(w) >= 3 and w not in STOPWORDS)
    # most_common sorts stably, so equal counts stay in insertion order
    return [w for w, _ in frequency.most_common(max(0, n))]
