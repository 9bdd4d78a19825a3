"""
Anthropic Claude LLM client.

Uses the Messages API with a dedicated system field. max_tokens is mandatory
for this API and comes from the model registry.
"""

import logging
from typing import Iterator

import anthropic
import httpx

from .base_client import BaseLLMClient
from .errors import EmptyResponseError, ProviderError, StreamDecodeError
from .models import CompletionRequest, CompletionResponse, Provider, max_output_tokens

logger = logging.getLogger(__name__)

OVERLOADED_STATUS = 529

# Stream events that carry no text
_SKIPPED_EVENTS = {
    "message_start",
    "message_delta",
    "message_stop",
    "content_block_start",
    "content_block_stop",
    "ping",
}


def _is_overloaded(exc: anthropic.APIError) -> bool:
    if getattr(exc, "status_code", None) == OVERLOADED_STATUS:
        return True
    body = exc.body if isinstance(exc.body, dict) else {}
    return body.get("error", {}).get("type") == "overloaded_error"


class ClaudeClient(BaseLLMClient):
    """Anthropic Messages API adapter."""

    provider = Provider.CLAUDE

    def __init__(self, api_key: str, timeout: float = 120.0, client=None, **kwargs):
        super().__init__(**kwargs)
        self._client = client or anthropic.Anthropic(
            api_key=api_key,
            timeout=httpx.Timeout(timeout, connect=10.0),
            max_retries=0,
        )

    def _params(self, request: CompletionRequest) -> dict:
        params = {
            "model": request.model,
            "max_tokens": max_output_tokens(request.model),
            "temperature": 0,
            "messages": [{"role": "user", "content": request.user_prompt}],
        }
        if request.system_prompt:
            params["system"] = request.system_prompt
        return params

    def _wrap_error(self, exc: anthropic.APIError) -> ProviderError:
        return ProviderError(
            self.provider,
            str(exc),
            status_code=getattr(exc, "status_code", None),
            overloaded=_is_overloaded(exc),
        )

    def _complete(self, request: CompletionRequest) -> CompletionResponse:
        try:
            message = self._client.messages.create(**self._params(request))
        except anthropic.APIError as e:
            raise self._wrap_error(e) from e

        if not message.content:
            raise EmptyResponseError(self.provider)

        return CompletionResponse(text=message.content[0].text, provider=self.provider)

    def _stream_text(self, request: CompletionRequest) -> Iterator[str]:
        try:
            stream = self._client.messages.create(**self._params(request), stream=True)
            with stream:
                for event in stream:
                    if event.type == "content_block_delta":
                        if event.delta.type == "text_delta":
                            yield event.delta.text
                    elif event.type not in _SKIPPED_EVENTS:
                        raise StreamDecodeError(
                            self.provider, f"unknown stream event: {event.type}"
                        )
        except anthropic.APIError as e:
            raise self._wrap_error(e) from e
