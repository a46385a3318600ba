from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Availability(str, Enum):
    UNAVAILABLE = "unavailable"
    AVAILABLE = "available"


class AdapterFailure(RuntimeError):
    """Session creation, prompting or streaming failed inside an adapter."""


@dataclass(frozen=True)
class SessionConfig:
    temperature: float = 0.2
    top_k: int = 3
    system_prompt: str = ""


class AISession(ABC):
    @abstractmethod
    def prompt_streaming(self, prompt: str) -> Iterator[str]:
        """
        Lazy, finite sequence of text chunks for one prompt.
        Single use: once drained it cannot be restarted.
        """

    @abstractmethod
    def prompt(self, prompt: str) -> str:
        """Whole response for one prompt."""

    @abstractmethod
    def destroy(self) -> None:
        """Release the session; later prompts raise AdapterFailure."""


class AICapability(ABC):
    @abstractmethod
    def availability(self) -> Availability:
        """Cheap check whether sessions can be created right now."""

    @abstractmethod
    def create_session(self, config: SessionConfig) -> AISession:
        """Open a session bound to the given generation parameters."""

    @property
    def name(self) -> str:
        return self.__class__.__name__.replace("Capability", "").lower()


@contextmanager
def open_session(capability: AICapability, config: SessionConfig) -> Iterator[AISession]:
    """Session scope: destroy() runs on every exit path, including errors."""
    session = capability.create_session(config)
    try:
        yield session
    finally:
        session.destroy()
