"""
Podscript LLM Completion Layer

One completion contract over OpenAI, Anthropic, Groq, Gemini and AWS Bedrock,
with blocking (retried) and streaming calls.
"""

from .errors import (
    Cancelled,
    EmptyResponseError,
    MissingCredentialError,
    PodscriptError,
    ProviderError,
    RetryExhaustedError,
    SourceUnavailableError,
    StreamDecodeError,
    UnsupportedModelError,
    UnsupportedProviderError,
)
from .models import (
    MODEL_REGISTRY,
    CompletionChunk,
    CompletionRequest,
    CompletionResponse,
    ModelInfo,
    Provider,
    get_model_info,
    list_models,
    max_output_tokens,
    provider_for_model,
)
from .retry import retry_with_backoff
from .stream import CompletionStream
from .base_client import BaseLLMClient
from .factory import client_for_model, new_llm_client

__all__ = [
    # Data model
    "Provider",
    "ModelInfo",
    "MODEL_REGISTRY",
    "CompletionRequest",
    "CompletionResponse",
    "CompletionChunk",
    "get_model_info",
    "list_models",
    "max_output_tokens",
    "provider_for_model",
    # Clients
    "BaseLLMClient",
    "CompletionStream",
    "new_llm_client",
    "client_for_model",
    "retry_with_backoff",
    # Errors
    "PodscriptError",
    "UnsupportedProviderError",
    "UnsupportedModelError",
    "MissingCredentialError",
    "ProviderError",
    "EmptyResponseError",
    "RetryExhaustedError",
    "StreamDecodeError",
    "Cancelled",
    "SourceUnavailableError",
]
