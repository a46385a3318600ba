import re
from typing import List

# story-site chrome that leaks into extracted article text
_STORY_LABEL = re.compile(r"\bMember-only story\b", re.IGNORECASE)
_UI_LABEL_LINE = re.compile(r"^[^\S\n]*(?:Listen|Share|Member|Follow)[^\S\n]*$", re.MULTILINE)
_DIGIT_LINE = re.compile(r"^[^\S\n]*\d+[^\S\n]*$", re.MULTILINE)
_LETTER_LINE = re.compile(r"^[^\S\n]*[A-Z][^\S\n]*$", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def clean_noise(text: str) -> str:
    """Strip UI debris (labels, stray line numbers/letters) and collapse whitespace."""
    t = _STORY_LABEL.sub("", text or "")
    t = _UI_LABEL_LINE.sub("", t)
    t = _DIGIT_LINE.sub("", t)
    t = _LETTER_LINE.sub("", t)
    return _WHITESPACE.sub(" ", t).strip()


def split_into_sentences(text: str) -> List[str]:
    parts = _SENTENCE_END.split(text or "")
    return [p.strip() for p in parts if p.strip()]
