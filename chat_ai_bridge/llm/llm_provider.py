"""LLM Provider implementation using the OpenAI-compatible GitHub Models API."""

import os
from typing import Any, Protocol

import openai

from ..config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    INFERENCE_BASE_URL,
    TOKEN_ENV_VAR,
)
from ..errors import ConfigurationError, ProviderError
from ..models import CompletionResult


class ILLMProvider(Protocol):
    """Abstraction for LLM access."""

    async def complete(
        self,
        messages: list[dict],  # [{"role": "user", "content": "..."}]
        system: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> CompletionResult:
        """Generate completion."""
        ...


class LLMProvider:
    """Chat-completions provider bound to the GitHub Models inference endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = INFERENCE_BASE_URL,
        model: str = DEFAULT_MODEL,
    ):
        self._api_key = api_key or os.getenv(TOKEN_ENV_VAR)
        if not self._api_key:
            raise ConfigurationError(f"GitHub token ({TOKEN_ENV_VAR}) is required")

        self._model = model
        # No retries: a failed completion is terminal for that message
        self._client = openai.AsyncOpenAI(
            api_key=self._api_key,
            base_url=base_url,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> CompletionResult:
        """Generate completion; the system prompt goes first as a system message."""
        request_messages = list(messages)
        if system:
            request_messages.insert(0, {"role": "system", "content": system})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=request_messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            raise ProviderError(str(e)) from e

        return extract_completion(response)


def extract_completion(response: Any) -> CompletionResult:
    """Pull the first choice's text out of a chat-completions response."""
    if not hasattr(response, "choices"):
        raise ProviderError("Malformed completion response: no choices")

    choices = response.choices or []
    if not choices:
        return CompletionResult.empty()

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        return CompletionResult.empty()
    return CompletionResult(content=content)
