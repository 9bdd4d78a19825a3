"""
LLM Client Factory

Creates the provider adapter for a provider identifier, after checking that
the credentials it needs are configured.
"""

import logging
from typing import Union

from .base_client import BaseLLMClient
from .errors import MissingCredentialError
from .models import Provider, parse_provider, provider_for_model

logger = logging.getLogger(__name__)


def new_llm_client(provider: Union[str, Provider], config=None) -> BaseLLMClient:
    """
    Create the adapter for ``provider``.

    Args:
        provider: Provider enum or identifier ('openai', 'claude', 'groq',
                  'gemini', 'bedrock')
        config: Settings instance holding credentials (defaults to the
                global settings)

    Returns:
        BaseLLMClient for the provider

    Raises:
        UnsupportedProviderError: unknown provider identifier
        MissingCredentialError: a required credential is not set
    """
    provider = parse_provider(provider)
    if config is None:
        from ..config import settings as config

    missing = config.missing_credentials(provider)
    if missing:
        raise MissingCredentialError(provider, missing)

    common = {
        "timeout": config.llm_request_timeout,
        "retry_max_elapsed": config.retry_max_elapsed_seconds,
        "stream_poll_interval": config.stream_poll_interval,
    }

    if provider == Provider.OPENAI:
        from .openai_client import OpenAICompatibleClient
        client = OpenAICompatibleClient(config.openai_api_key, Provider.OPENAI, **common)
    elif provider == Provider.GROQ:
        from .openai_client import OpenAICompatibleClient
        client = OpenAICompatibleClient(config.groq_api_key, Provider.GROQ, **common)
    elif provider == Provider.CLAUDE:
        from .anthropic_client import ClaudeClient
        client = ClaudeClient(config.anthropic_api_key, **common)
    elif provider == Provider.GEMINI:
        from .gemini_client import GeminiClient
        client = GeminiClient(config.gemini_api_key, **common)
    else:
        from .bedrock_client import BedrockClient
        client = BedrockClient(
            region=config.aws_region,
            access_key_id=config.aws_access_key_id,
            secret_access_key=config.aws_secret_access_key,
            session_token=config.aws_session_token,
            **common,
        )

    logger.info(f"Using {type(client).__name__} for provider {provider.value}")
    return client


def client_for_model(model: str, config=None) -> BaseLLMClient:
    """
    Create the adapter serving ``model``.

    Raises:
        UnsupportedModelError: model is not in the registry
        MissingCredentialError: a required credential is not set
    """
    return new_llm_client(provider_for_model(model), config)
