# services/validator.py
import re
from typing import Any, Mapping

from services.logging import get_logger

logger = get_logger(__name__)

BLANK = "_____"
BLACKLIST = frozenset({"updated", "posted", "share", "subscribe", "follow", "views", "comments"})

_BLANK_RUN = re.compile(r"_{3,}")
_ABOVE = re.compile(r"^(none|all) of the above$", re.IGNORECASE)
_NUMBER = re.compile(
    r"^\d+(?:\.\d+)?\s*(?:million|billion|thousand|%|percent)?$",
    re.IGNORECASE,
)


def detect_type(opt: str) -> str:
    """Coarse option class: 'number', 'string' (capitalized), 'unknown' or 'invalid'."""
    o = (opt or "").strip()
    if not o or _ABOVE.match(o):
        return "invalid"
    if _NUMBER.match(o):
        return "number"
    if o[0].isupper():
        return "string"
    return "unknown"


def count_blanks(question: str) -> int:
    return len(_BLANK_RUN.findall(question or ""))


def _reject(reason: str, q: Mapping[str, Any]) -> bool:
    logger.debug("question_rejected", reason=reason, question=str(q.get("question", ""))[:80])
    return False


def is_valid_question(q: Any) -> bool:
    """
    Quiz-quality contract for one candidate {question, options, answer}.
    Returns False on the first broken rule; the candidate is never modified.
    """
    if not isinstance(q, Mapping):
        return False
    question, options, answer = q.get("question"), q.get("options"), q.get("answer")
    if not question or not options or not answer:
        return _reject("missing_field", q)
    if not isinstance(question, str) or not isinstance(answer, str):
        return _reject("not_text", q)
    if not isinstance(options, (list, tuple)) or len(options) != 4:
        return _reject("option_count", q)
    if not all(isinstance(o, str) and o.strip() for o in options):
        return _reject("empty_option", q)

    if len({o.strip().lower() for o in options}) < 4:
        return _reject("duplicate_options", q)
    if answer not in options:
        return _reject("answer_not_in_options", q)
    if any(o.strip().lower() in BLACKLIST for o in options):
        return _reject("blacklisted_option", q)
    if any(len(o.strip()) < 2 for o in options):
        return _reject("short_option", q)
    if count_blanks(question) != 1:
        return _reject("blank_count", q)

    types = {detect_type(o) for o in options}
    if "invalid" in types:
        return _reject("invalid_option", q)
    if len(types) > 1:
        return _reject("mixed_types", q)
    return True
