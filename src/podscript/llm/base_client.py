"""
Base LLM Client Interface

Abstract base class defining the completion contract for all providers.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from .errors import PodscriptError, ProviderError
from .models import CompletionRequest, CompletionResponse, Provider
from .retry import MAX_ELAPSED, retry_with_backoff
from .stream import CompletionStream

logger = logging.getLogger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for all provider adapters.

    Implementations:
    - OpenAICompatibleClient: OpenAI and Groq chat completions
    - ClaudeClient: Anthropic messages API
    - GeminiClient: Google GenAI
    - BedrockClient: Anthropic models on AWS Bedrock

    Subclasses implement one blocking call (``_complete``) and one generator of
    text deltas (``_stream_text``). Retry and the streaming producer thread are
    handled here so every backend behaves the same way.
    """

    provider: Provider

    def __init__(
        self,
        retry_max_elapsed: float = MAX_ELAPSED,
        stream_poll_interval: float = 0.1,
    ):
        self.retry_max_elapsed = retry_max_elapsed
        self.stream_poll_interval = stream_poll_interval

    @abstractmethod
    def _complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Perform one blocking backend call.

        Raises:
            ProviderError: transport or API failure
            EmptyResponseError: backend returned no content
        """

    @abstractmethod
    def _stream_text(self, request: CompletionRequest) -> Iterator[str]:
        """
        Open a streaming call and yield text deltas in backend order.

        Raises:
            ProviderError: transport or API failure
            StreamDecodeError: malformed or unknown event
        """

    def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Blocking completion, retried on rate limits and overload."""
        logger.debug(f"{self.provider.value} complete: model={request.model}")
        return retry_with_backoff(
            lambda: self._complete(request),
            max_elapsed=self.retry_max_elapsed,
        )

    def complete_stream(
        self,
        request: CompletionRequest,
        cancel_event: Optional[threading.Event] = None,
    ) -> CompletionStream:
        """
        Start a streaming completion.

        Streams are never retried. Iterate the returned stream for chunks, then
        check ``stream.error``.
        """
        logger.debug(f"{self.provider.value} stream: model={request.model}")
        stream = CompletionStream(
            self.provider,
            cancel_event=cancel_event,
            poll_interval=self.stream_poll_interval,
        )
        return stream.start(lambda s: self._produce(request, s))

    def _produce(self, request: CompletionRequest, stream: CompletionStream) -> None:
        texts = self._stream_text(request)
        try:
            for text in texts:
                if stream.stopped:
                    logger.debug(f"{self.provider.value} stream stopped by caller")
                    return
                if text:
                    stream.put_text(text)
        except PodscriptError:
            raise
        except Exception as exc:
            raise ProviderError(self.provider, str(exc)) from exc
        finally:
            close = getattr(texts, "close", None)
            if close is not None:
                close()

        stream.put_done()

    @staticmethod
    def combined_prompt(request: CompletionRequest) -> str:
        """Prepend the system prompt for backends without a system role."""
        if request.system_prompt:
            return f"{request.system_prompt}\n\n{request.user_prompt}"
        return request.user_prompt
