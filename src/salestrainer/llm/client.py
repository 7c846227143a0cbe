"""Generative backend client.

Three opaque request/response services sit behind one interface:
- chat completions (scenario generation, customer dialogue, evaluation)
- text-to-speech for customer replies
- speech-to-text for trainee voice input

Calls carry a timeout and are never retried here; callers decide whether a
whole operation can be repeated.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import openai

from salestrainer.core.config import Settings
from salestrainer.core.errors import ConfigurationError, TransientServiceError
from salestrainer.core.logging import get_logger

logger = get_logger(__name__)

JSON_OBJECT = {"type": "json_object"}


@dataclass
class LLMResponse:
    """Response from a chat completion call."""

    content: str
    model: str
    usage: dict[str, int] = field(default_factory=dict)
    finish_reason: str = "stop"


class GenerativeClient(ABC):
    """Abstract interface for the external generative services."""

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        response_format: Optional[dict[str, str]] = None,
    ) -> LLMResponse:
        """Generate a chat completion.

        Args:
            messages: List of message dicts with role and content.
            temperature: Sampling temperature.
            response_format: Optional response format (e.g., {"type": "json_object"}).

        Returns:
            LLMResponse with the completion.

        Raises:
            TransientServiceError: The backend failed or timed out.
        """

    @abstractmethod
    async def synthesize_speech(self, text: str) -> bytes:
        """Render text to MP3 audio bytes."""

    @abstractmethod
    async def transcribe(self, filename: str, content: bytes, content_type: str | None) -> str:
        """Convert recorded audio to text."""


class OpenAIGenerativeClient(GenerativeClient):
    """OpenAI implementation (chat completions, audio speech, audio transcriptions)."""

    def __init__(self, settings: Settings):
        if not settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured on the server.")
        self.settings = settings
        self._client = openai.AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        response_format: Optional[dict[str, str]] = None,
    ) -> LLMResponse:
        kwargs: dict[str, Any] = {
            "model": self.settings.chat_model,
            "messages": messages,
            "temperature": temperature,
        }
        if response_format:
            kwargs["response_format"] = response_format

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.OpenAIError as exc:
            raise _service_error("chat completion", exc) from exc

        if not response.choices:
            raise TransientServiceError("Generative service returned no choices")

        choice = response.choices[0]
        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            usage=usage,
            finish_reason=choice.finish_reason or "stop",
        )

    async def synthesize_speech(self, text: str) -> bytes:
        try:
            response = await self._client.audio.speech.create(
                model=self.settings.tts_model,
                voice=self.settings.tts_voice,
                input=text,
                response_format="mp3",
            )
        except openai.OpenAIError as exc:
            raise _service_error("speech synthesis", exc) from exc
        return response.content

    async def transcribe(self, filename: str, content: bytes, content_type: str | None) -> str:
        upload = (filename, content, content_type) if content_type else (filename, content)
        try:
            transcription = await self._client.audio.transcriptions.create(
                model=self.settings.transcribe_model,
                file=upload,
            )
        except openai.OpenAIError as exc:
            raise _service_error("transcription", exc) from exc
        return transcription.text


def _service_error(operation: str, exc: Exception) -> TransientServiceError:
    logger.error("llm.request_failed", operation=operation, error=type(exc).__name__)
    return TransientServiceError(
        f"Failed to complete {operation}",
        details={"operation": operation, "error": str(exc)},
    )


def create_client(settings: Settings) -> GenerativeClient:
    """Build the configured client, failing fast when credentials are absent."""
    return OpenAIGenerativeClient(settings)
