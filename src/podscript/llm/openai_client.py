"""
OpenAI-compatible LLM client.

Works with any API that speaks the OpenAI Chat Completions protocol:
  - OpenAI  (base_url=https://api.openai.com/v1)
  - Groq    (base_url=https://api.groq.com/openai/v1)

Temperature is forced to 0 at the adapter level.
"""

import logging
from typing import Iterator, List, Optional

import httpx
import openai

from .base_client import BaseLLMClient
from .errors import EmptyResponseError, ProviderError
from .models import CompletionRequest, CompletionResponse, Provider

logger = logging.getLogger(__name__)

_BASE_URLS = {
    Provider.OPENAI: "https://api.openai.com/v1",
    Provider.GROQ: "https://api.groq.com/openai/v1",
}

# Both backends report overload as a 503 with one of these phrases
_OVERLOADED_MARKERS = ("overloaded", "over capacity")


class OpenAICompatibleClient(BaseLLMClient):
    """Chat Completions adapter for OpenAI and Groq."""

    def __init__(
        self,
        api_key: str,
        provider: Provider = Provider.OPENAI,
        base_url: Optional[str] = None,
        timeout: float = 120.0,
        client=None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if provider not in _BASE_URLS:
            raise ValueError(f"{provider} does not speak the OpenAI protocol")
        self.provider = provider
        self._client = client or openai.OpenAI(
            api_key=api_key,
            base_url=base_url or _BASE_URLS[provider],
            timeout=httpx.Timeout(timeout, connect=10.0),
            max_retries=0,
        )

    @staticmethod
    def _messages(request: CompletionRequest) -> List[dict]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.user_prompt})
        return messages

    def _wrap_error(self, exc: openai.APIError) -> ProviderError:
        # APIConnectionError and timeouts carry no status code
        status = getattr(exc, "status_code", None)
        message = str(exc)
        return ProviderError(
            self.provider,
            message,
            status_code=status,
            overloaded=any(s in message.lower() for s in _OVERLOADED_MARKERS),
        )

    def _complete(self, request: CompletionRequest) -> CompletionResponse:
        try:
            response = self._client.chat.completions.create(
                model=request.model,
                messages=self._messages(request),
                temperature=0,
            )
        except openai.APIError as e:
            raise self._wrap_error(e) from e

        if not response.choices:
            raise EmptyResponseError(self.provider)

        return CompletionResponse(
            text=response.choices[0].message.content or "",
            provider=self.provider,
        )

    def _stream_text(self, request: CompletionRequest) -> Iterator[str]:
        try:
            stream = self._client.chat.completions.create(
                model=request.model,
                messages=self._messages(request),
                temperature=0,
                stream=True,
            )
            with stream:
                for chunk in stream:
                    if chunk.choices:
                        yield chunk.choices[0].delta.content or ""
        except openai.APIError as e:
            raise self._wrap_error(e) from e
