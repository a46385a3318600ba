import json
import os
from typing import Iterator

import requests

from .base import AdapterFailure, AICapability, AISession, Availability, SessionConfig

OLLAMA_URL = "http://127.0.0.1:11434"  # default


class OllamaSession(AISession):
    def __init__(self, base_url: str, model: str, config: SessionConfig, timeout: float = 120):
        self.base_url = base_url
        self.model = model
        self.config = config
        self.timeout = timeout
        self._closed = False

    def _payload(self, prompt: str, stream: bool) -> dict:
        messages = []
        if self.config.system_prompt:
            messages.append({"role": "system", "content": self.config.system_prompt})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.model,
            "messages": messages,
            "stream": stream,
            "options": {"temperature": self.config.temperature, "top_k": self.config.top_k},
        }

    def _post(self, prompt: str, stream: bool) -> requests.Response:
        if self._closed:
            raise AdapterFailure("session already destroyed")
        try:
            r = requests.post(f"{self.base_url}/api/chat", json=self._payload(prompt, stream),
                              stream=stream, timeout=self.timeout)
            r.raise_for_status()
            return r
        except requests.RequestException as e:
            raise AdapterFailure(f"ollama request failed: {e}") from e

    def prompt_streaming(self, prompt: str) -> Iterator[str]:
        return self._chunks(self._post(prompt, stream=True))

    def _chunks(self, r: requests.Response) -> Iterator[str]:
        # NDJSON: one {"message": {"content": ...}, "done": bool} object per line
        try:
            for line in r.iter_lines(decode_unicode=True):
                if not line:
                    continue
                data = json.loads(line)
                if data.get("error"):
                    raise AdapterFailure(f"ollama error: {data['error']}")
                content = data.get("message", {}).get("content", "")
                if content:
                    yield content
                if data.get("done"):
                    break
        except (requests.RequestException, ValueError) as e:
            raise AdapterFailure(f"ollama stream broke: {e}") from e
        finally:
            r.close()

    def prompt(self, prompt: str) -> str:
        try:
            data = self._post(prompt, stream=False).json()
        except ValueError as e:
            raise AdapterFailure(f"ollama returned non-JSON: {e}") from e
        return data.get("message", {}).get("content", "")

    def destroy(self) -> None:
        self._closed = True


class OllamaCapability(AICapability):
    def __init__(self, model: str = None, base_url: str = None):
        self.model = model or os.getenv("OLLAMA_MODEL", "llama3")
        self.base_url = (base_url or os.getenv("OLLAMA_URL", OLLAMA_URL)).rstrip("/")

    def availability(self) -> Availability:
        try:
            r = requests.get(f"{self.base_url}/api/tags", timeout=3)
            r.raise_for_status()
            names = {m.get("name", "") for m in r.json().get("models", [])}
        except (requests.RequestException, ValueError):
            return Availability.UNAVAILABLE
        # tags carry a ":latest" style suffix
        if any(n == self.model or n.split(":")[0] == self.model for n in names):
            return Availability.AVAILABLE
        return Availability.UNAVAILABLE

    def create_session(self, config: SessionConfig) -> OllamaSession:
        return OllamaSession(self.base_url, self.model, config)
