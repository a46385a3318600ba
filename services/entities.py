# services/entities.py
import re
from typing import Dict, List

from models import Entity, EntityKind, EntityPool
from services.cleaner import clean_noise

FUNCTION_WORDS = frozenset({"The", "A", "An", "In", "On", "At", "For", "With", "By", "And", "Of", "To"})

MONTHS = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)

_DATE = re.compile(r"\b(?:\d{4}|" + "|".join(MONTHS) + r")\b")
_PROPER = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+){0,3}\b")
_NUMBER = re.compile(r"\b\d[A-Za-z0-9]*\b")


def _trim_function_words(phrase: str) -> str:
    words = phrase.split()
    while words and words[0] in FUNCTION_WORDS:
        words.pop(0)
    return " ".join(words)


def find_dates(sentence: str) -> List[str]:
    return _DATE.findall(sentence or "")


def find_proper_nouns(sentence: str) -> List[str]:
    """Runs of 1-4 capitalized words, leading function words ('The Battle' -> 'Battle') dropped."""
    out = []
    for m in _PROPER.findall(sentence or ""):
        phrase = _trim_function_words(m)
        if phrase:
            out.append(phrase)
    return out


def find_numbers(sentence: str) -> List[str]:
    return _NUMBER.findall(sentence or "")


_FINDERS = {
    EntityKind.PROPER_NOUN: find_proper_nouns,
    EntityKind.DATE: find_dates,
    EntityKind.NUMBER: find_numbers,
}


def extract_entities(sentence: str) -> Dict[EntityKind, List[Entity]]:
    """Typed candidate spans of one sentence, in match order per kind."""
    return {
        kind: [Entity(value=v, kind=kind) for v in find(sentence)]
        for kind, find in _FINDERS.items()
    }


def build_entity_pool(text: str) -> EntityPool:
    """Every entity of the normalized article, grouped by kind, deduplicated in first-seen order."""
    cleaned = clean_noise(text)
    pool: EntityPool = {}
    for kind, find in _FINDERS.items():
        seen = set()
        values = []
        for v in find(cleaned):
            if v not in seen:
                seen.add(v)
                values.append(v)
        pool[kind] = values
    return pool
