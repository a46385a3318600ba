# ai_providers/groq_provider.py
import os
from typing import Iterator, List

from groq import Groq, GroqError, RateLimitError

from services.logging import get_logger
from .base import AdapterFailure, AICapability, AISession, Availability, SessionConfig

logger = get_logger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"


class GroqSession(AISession):
    def __init__(self, client: Groq, model: str, config: SessionConfig):
        self.client = client
        self.model = model
        self.config = config
        self._closed = False

    def _messages(self, prompt: str) -> List[dict]:
        msgs = []
        if self.config.system_prompt:
            msgs.append({"role": "system", "content": self.config.system_prompt})
        msgs.append({"role": "user", "content": prompt})
        return msgs

    def _create(self, prompt: str, stream: bool):
        if self._closed:
            raise AdapterFailure("session already destroyed")
        # top_k is not exposed by the Groq chat API
        try:
            return self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt),
                temperature=self.config.temperature,
                stream=stream,
            )
        except RateLimitError as e:
            logger.warning("groq_rate_limited", model=self.model)
            raise AdapterFailure(f"rate limited: {e}") from e
        except GroqError as e:
            raise AdapterFailure(f"groq request failed: {e}") from e

    def prompt_streaming(self, prompt: str) -> Iterator[str]:
        return self._chunks(self._create(prompt, stream=True))

    def _chunks(self, stream) -> Iterator[str]:
        try:
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except GroqError as e:
            raise AdapterFailure(f"groq stream broke: {e}") from e

    def prompt(self, prompt: str) -> str:
        resp = self._create(prompt, stream=False)
        return resp.choices[0].message.content or ""

    def destroy(self) -> None:
        self._closed = True


class GroqCapability(AICapability):
    def __init__(self, api_key: str = None, model: str = None, client: Groq = None):
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        self.model = model or os.getenv("GROQ_MODEL", DEFAULT_MODEL)
        self._client = client

    def availability(self) -> Availability:
        if self._client is not None or self.api_key:
            return Availability.AVAILABLE
        return Availability.UNAVAILABLE

    def _get_client(self) -> Groq:
        if self._client is None:
            try:
                self._client = Groq(api_key=self.api_key)
            except GroqError as e:
                raise AdapterFailure(f"groq init failed: {e}") from e
        return self._client

    def create_session(self, config: SessionConfig) -> GroqSession:
        return GroqSession(self._get_client(), self.model, config)
