# debatecoach/llm.py
"""
Thin wrapper around the OpenAI SDK (>= 1.0).

The app builds one `LLMClient` at startup and hands it to the routes through a
FastAPI dependency, so tests can swap in any object exposing the same two
methods: `complete(system, messages, temperature)` and `transcribe(path, language)`.
"""
from typing import Dict, List, Optional

from openai import APIStatusError, OpenAI, OpenAIError

from debatecoach.errors import ServiceNotConfigured, UpstreamError

ChatMessage = Dict[str, str]


def _upstream_error(exc: OpenAIError) -> UpstreamError:
    status = exc.status_code if isinstance(exc, APIStatusError) else None
    return UpstreamError(str(exc) or exc.__class__.__name__, details=str(exc), status_code=status)


class LLMClient:
    def __init__(
        self,
        api_key: str,
        chat_model: str = "gpt-4o-mini",
        transcribe_model: str = "whisper-1",
        client: Optional[OpenAI] = None,
    ):
        self.client = client or OpenAI(api_key=api_key)
        self.chat_model = chat_model
        self.transcribe_model = transcribe_model

    def complete(self, system: str, messages: List[ChatMessage], temperature: float = 0.7) -> str:
        """Run one chat completion with `system` prepended; returns "" when the model says nothing."""
        try:
            resp = self.client.chat.completions.create(
                model=self.chat_model,
                temperature=temperature,
                messages=[{"role": "system", "content": system}] + list(messages),
            )
        except OpenAIError as exc:
            raise _upstream_error(exc) from exc

        if not resp.choices:
            return ""
        content = resp.choices[0].message.content
        return (content or "").strip()

    def transcribe(self, path: str, language: str = "en") -> str:
        try:
            with open(path, "rb") as audio:
                resp = self.client.audio.transcriptions.create(
                    model=self.transcribe_model,
                    file=audio,
                    language=language,
                )
        except OpenAIError as exc:
            raise _upstream_error(exc) from exc
        return resp.text or ""


class UnconfiguredLLM:
    """Stands in when no API key is set; fails only once a route actually needs OpenAI."""

    def complete(self, system: str, messages: List[ChatMessage], temperature: float = 0.7) -> str:
        raise ServiceNotConfigured()

    def transcribe(self, path: str, language: str = "en") -> str:
        raise ServiceNotConfigured()
