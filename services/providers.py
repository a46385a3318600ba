# services/providers.py
import os

from ai_providers.base import AICapability
from ai_providers.groq_provider import GroqCapability
from ai_providers.local_stub import LocalStub
from ai_providers.ollama_provider import OllamaCapability
from services.logging import get_logger

logger = get_logger(__name__)

LAYOUTS = ("timeline", "process", "map")


def get_capability(name: str = None) -> AICapability:
    """
    Pick the AI adapter from the environment: AI_PROVIDER forces one,
    otherwise Groq when a key is set, Ollama when a model is named,
    else the local stub.
    """
    name = (name if name is not None else os.getenv("AI_PROVIDER", "")).strip().lower()

    if name in ("", "groq") and os.getenv("GROQ_API_KEY"):
        return GroqCapability()
    if name == "ollama" or (name == "" and os.getenv("OLLAMA_MODEL")):
        return OllamaCapability()
    if name not in ("", "stub", "groq"):
        logger.warning("unknown_ai_provider", value=name)
    return LocalStub()


def default_layout() -> str:
    layout = os.getenv("DEFAULT_LAYOUT", "process").strip().lower()
    if layout not in LAYOUTS:
        logger.warning("unknown_default_layout", value=layout)
        return "process"
    return layout
