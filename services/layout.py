# services/layout.py
import re
from typing import List, Optional

from ai_providers.base import AICapability, Availability, SessionConfig, open_session
from models import Mindmap, StructuredItem
from services.cleaner import clean_noise, split_into_sentences
from services.logging import get_logger
from services.providers import LAYOUTS, default_layout
from services.repair import MalformedResponse, parse_json_object
from services.topics import extract_topics

logger = get_logger(__name__)

_YEAR = re.compile(r"\b(?:19|20)\d{2}s?\b")  # "1969", also decades like "1990s"
_STEPS = re.compile(r"step\s?\d+|first,|second,|then,|finally", re.IGNORECASE)

MAX_ITEMS = 8
MIN_ITEM_CHARS = 60
PASSAGE_CHARS = 2500

SYSTEM_LAYOUT = (
    "You organise articles into visual study aids. Use ONLY the passage the user provides. "
    "Output STRICT JSON only, no extra text."
)

LAYOUT_PROMPT = """\
Analyze the passage and choose one visualization: timeline, process, or map.
If timeline or process, return JSON ONLY with {{"layout": "timeline|process", "items": [{{"date": "optional string", "label": "string"}}]}}.
If map, return JSON ONLY with {{"layout": "map", "topics": ["string"]}}.

Passage:

{passage}
"""


def detect_layout(text: str, default: Optional[str] = None) -> str:
    """
    'timeline' when a 1900-2099 year (or decade) shows up, else 'process' on step cues,
    else the default (DEFAULT_LAYOUT, 'process' unless configured).
    Years win over step cues.
    """
    if _YEAR.search(text or ""):
        return "timeline"
    if _STEPS.search(text or ""):
        return "process"
    return default if default in LAYOUTS else default_layout()


#iz AI odgovora uzimamo prvi neprazan opis stavke
def _to_item(raw) -> Optional[StructuredItem]:
    if isinstance(raw, str):
        label = raw.strip()
        return StructuredItem(label=label) if label else None
    if not isinstance(raw, dict):
        return None
    label = ""
    for key in ("label", "title", "topic", "desc", "summary"):
        value = raw.get(key)
        if value and str(value).strip():
            label = str(value).strip()
            break
    if not label:
        return None
    date = raw.get("date")
    return StructuredItem(label=label, date=str(date).strip() if date else None)


def items_from_sentences(text: str) -> List[StructuredItem]:
    sents = [s for s in split_into_sentences(clean_noise(text)) if len(s) > MIN_ITEM_CHARS]
    return [StructuredItem(label=s) for s in sents[:MAX_ITEMS]]


def _ask_model(text: str, capability: AICapability) -> Optional[dict]:
    try:
        if capability.availability() != Availability.AVAILABLE:
            return None
        config = SessionConfig(temperature=0.2, top_k=3, system_prompt=SYSTEM_LAYOUT)
        with open_session(capability, config) as session:
            raw = session.prompt(LAYOUT_PROMPT.format(passage=text[:PASSAGE_CHARS]))
        return parse_json_object(raw)
    except MalformedResponse as e:
        logger.warning("ai_layout_malformed", error=str(e))
    except Exception as e:
        logger.warning("ai_layout_failed", provider=capability.name, error=str(e))
    return None


def build_mindmap(title: str, text: str, capability: Optional[AICapability] = None,
                  default: Optional[str] = None) -> Mindmap:
    layout = detect_layout(text, default)
    ai_items, ai_topics = None, None

    data = _ask_model(text, capability) if capability is not None else None
    if data:
        if data.get("layout") in LAYOUTS:
            layout = data["layout"]
        if isinstance(data.get("items"), list):
            ai_items = [it for it in (_to_item(x) for x in data["items"]) if it is not None]
        if isinstance(data.get("topics"), list):
            ai_topics = [str(t).strip() for t in data["topics"] if str(t).strip()]

    if layout == "map":
        topics = ai_topics or extract_topics(text)
        return Mindmap(title=title, layout="map", topics=topics)

    items = ai_items or items_from_sentences(text)
    return Mindmap(title=title, layout=layout, items=items)
