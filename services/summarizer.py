# services/summarizer.py
from typing import Optional

from ai_providers.base import AICapability, Availability, SessionConfig, open_session
from services.cleaner import clean_noise, split_into_sentences
from services.logging import get_logger

logger = get_logger(__name__)

MAX_SENTENCES = 10
MIN_SENTENCE_CHARS = 40

SYSTEM_SUMMARIZER = (
    "You are an article summarizer for a reading assistant. "
    "Use ONLY the text you are given and write in the same language as the input. "
    "If information is missing or unclear, say so rather than inventing content."
)

SUMMARY_PROMPT = (
    "Write a long, detailed summary of the following article. "
    "Use plain paragraphs separated by blank lines, no headings and no markdown.\n\n"
    "{text}"
)


def fallback_summary(text: str) -> str:
    """Crude extractive summary: the first sentences that carry some content."""
    sents = [s for s in split_into_sentences(clean_noise(text)) if len(s) > MIN_SENTENCE_CHARS]
    return " ".join(sents[:MAX_SENTENCES])


def summarize(text: str, capability: Optional[AICapability] = None) -> str:
    if not (text or "").strip():
        return ""
    if capability is not None:
        try:
            if capability.availability() == Availability.AVAILABLE:
                config = SessionConfig(temperature=0.2, top_k=3, system_prompt=SYSTEM_SUMMARIZER)
                with open_session(capability, config) as session:
                    resp = session.prompt(SUMMARY_PROMPT.format(text=text))
                if resp.strip():
                    return resp
                logger.info("ai_summary_empty", provider=capability.name)
        except Exception as e:
            logger.warning("ai_summary_failed", provider=capability.name, error=str(e))
    return fallback_summary(text)


def word_count(summary: str) -> int:
    return len(summary.split())
