"""
LLM Data Models

Provider enum, the static model registry, and the request/response shapes
shared by every provider adapter.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnsupportedModelError, UnsupportedProviderError


class Provider(str, Enum):
    """LLM backend families."""

    OPENAI = "openai"
    CLAUDE = "claude"
    GROQ = "groq"
    GEMINI = "gemini"
    BEDROCK = "bedrock"


@dataclass(frozen=True)
class ModelInfo:
    """Registry entry for a model identifier."""

    name: str
    provider: Provider
    max_output_tokens: int


def _registry(*entries: ModelInfo) -> Mapping[str, ModelInfo]:
    return MappingProxyType({entry.name: entry for entry in entries})


# Output token limits for each model
MODEL_REGISTRY: Mapping[str, ModelInfo] = _registry(
    ModelInfo("gpt-4o", Provider.OPENAI, 16384),
    ModelInfo("gpt-4o-mini", Provider.OPENAI, 16384),
    ModelInfo("claude-3-7-sonnet-20250219", Provider.CLAUDE, 8192),
    ModelInfo("claude-3-5-haiku-20241022", Provider.CLAUDE, 8192),
    ModelInfo("llama-3.3-70b-versatile", Provider.GROQ, 32768),
    ModelInfo("llama-3.1-8b-instant", Provider.GROQ, 8192),
    ModelInfo("gemini-2.0-flash", Provider.GEMINI, 8192),
    ModelInfo("anthropic.claude-3-7-sonnet-20250219-v1:0", Provider.BEDROCK, 4096),
    ModelInfo("anthropic.claude-3-5-haiku-20241022-v1:0", Provider.BEDROCK, 4096),
)


def parse_provider(value: Union[str, Provider]) -> Provider:
    """Convert a provider identifier to a Provider, rejecting unknown names."""
    if isinstance(value, Provider):
        return value
    try:
        return Provider(str(value).lower())
    except ValueError:
        raise UnsupportedProviderError(value) from None


def get_model_info(model: str) -> ModelInfo:
    """Look up a model in the registry."""
    try:
        return MODEL_REGISTRY[model]
    except KeyError:
        raise UnsupportedModelError(model) from None


def max_output_tokens(model: str) -> int:
    return get_model_info(model).max_output_tokens


def provider_for_model(model: str) -> Provider:
    return get_model_info(model).provider


def list_models(provider: Optional[Provider] = None) -> List[str]:
    """Sorted model identifiers, optionally restricted to one provider."""
    return sorted(
        name
        for name, info in MODEL_REGISTRY.items()
        if provider is None or info.provider == provider
    )


class CompletionRequest(BaseModel):
    """A single completion call: optional system prompt plus a user turn."""

    model_config = ConfigDict(frozen=True)

    system_prompt: str = ""
    user_prompt: str = Field(min_length=1)
    model: str


class CompletionResponse(BaseModel):
    """Result of a blocking completion."""

    model_config = ConfigDict(frozen=True)

    text: str
    provider: Provider


class CompletionChunk(BaseModel):
    """
    A piece of a streamed completion.

    The last chunk of a successful stream has done=True and no text.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    provider: Provider
    done: bool = False
