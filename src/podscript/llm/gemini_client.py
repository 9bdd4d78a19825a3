"""
Google Gemini LLM client.

Gemini has no separate system role in this adapter, so the system prompt is
prepended to the user prompt as a single text input.
"""

import logging
from typing import Iterator, Optional

import httpx
from google import genai
from google.genai import errors, types

from .base_client import BaseLLMClient
from .errors import EmptyResponseError, ProviderError
from .models import CompletionRequest, CompletionResponse, Provider

logger = logging.getLogger(__name__)


def _candidate_text(response) -> Optional[str]:
    """Text of the first candidate, or None when there is no content."""
    if not response.candidates:
        return None
    content = response.candidates[0].content
    if content is None or not content.parts:
        return None
    return "".join(part.text or "" for part in content.parts)


class GeminiClient(BaseLLMClient):
    """Google GenAI adapter."""

    provider = Provider.GEMINI

    def __init__(self, api_key: str, timeout: float = 120.0, client=None, **kwargs):
        super().__init__(**kwargs)
        self._client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self._config = types.GenerateContentConfig(temperature=0)

    def _wrap_error(self, exc: Exception) -> ProviderError:
        if isinstance(exc, errors.APIError):
            message = exc.message or str(exc)
            return ProviderError(
                self.provider,
                message,
                status_code=exc.code,
                overloaded="overloaded" in message.lower(),
            )
        return ProviderError(self.provider, str(exc))

    def _complete(self, request: CompletionRequest) -> CompletionResponse:
        try:
            response = self._client.models.generate_content(
                model=request.model,
                contents=self.combined_prompt(request),
                config=self._config,
            )
        except (errors.APIError, httpx.HTTPError) as e:
            raise self._wrap_error(e) from e

        text = _candidate_text(response)
        if text is None:
            raise EmptyResponseError(self.provider)
        return CompletionResponse(text=text, provider=self.provider)

    def _stream_text(self, request: CompletionRequest) -> Iterator[str]:
        try:
            for response in self._client.models.generate_content_stream(
                model=request.model,
                contents=self.combined_prompt(request),
                config=self._config,
            ):
                text = _candidate_text(response)
                if text:
                    yield text
        except (errors.APIError, httpx.HTTPError) as e:
            raise self._wrap_error(e) from e
