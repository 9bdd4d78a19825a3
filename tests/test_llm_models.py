"""
Tests for the model registry and completion data models.
"""

import pytest
from pydantic import ValidationError

from podscript.llm.errors import UnsupportedModelError, UnsupportedProviderError
from podscript.llm.models import (
    MODEL_REGISTRY,
    CompletionChunk,
    CompletionRequest,
    Provider,
    get_model_info,
    list_models,
    max_output_tokens,
    parse_provider,
    provider_for_model,
)


class TestModelRegistry:
    def test_token_limits(self):
        assert max_output_tokens("gpt-4o") == 16384
        assert max_output_tokens("claude-3-7-sonnet-20250219") == 8192
        assert max_output_tokens("llama-3.3-70b-versatile") == 32768
        assert max_output_tokens("gemini-2.0-flash") == 8192
        assert max_output_tokens("anthropic.claude-3-7-sonnet-20250219-v1:0") == 4096

    def test_providers(self):
        assert provider_for_model("gpt-4o-mini") == Provider.OPENAI
        assert provider_for_model("claude-3-5-haiku-20241022") == Provider.CLAUDE
        assert provider_for_model("llama-3.1-8b-instant") == Provider.GROQ
        assert provider_for_model("gemini-2.0-flash") == Provider.GEMINI
        assert provider_for_model("anthropic.claude-3-5-haiku-20241022-v1:0") == Provider.BEDROCK

    def test_every_provider_has_a_model(self):
        for provider in Provider:
            assert list_models(provider)

    def test_list_models_sorted(self):
        models = list_models()
        assert models == sorted(MODEL_REGISTRY)

    def test_unknown_model(self):
        with pytest.raises(UnsupportedModelError):
            get_model_info("gpt-2")

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            MODEL_REGISTRY["new-model"] = get_model_info("gpt-4o")


class TestParseProvider:
    def test_known_names(self):
        assert parse_provider("openai") == Provider.OPENAI
        assert parse_provider("Bedrock") == Provider.BEDROCK
        assert parse_provider(Provider.GEMINI) == Provider.GEMINI

    @pytest.mark.parametrize("name", ["mistral", "", "anthropic"])
    def test_unknown_names(self, name):
        with pytest.raises(UnsupportedProviderError):
            parse_provider(name)


class TestCompletionModels:
    def test_request_requires_user_prompt(self):
        with pytest.raises(ValidationError):
            CompletionRequest(user_prompt="", model="gpt-4o")

    def test_request_system_prompt_optional(self):
        request = CompletionRequest(user_prompt="hello", model="gpt-4o")
        assert request.system_prompt == ""

    def test_request_is_immutable(self):
        request = CompletionRequest(user_prompt="hello", model="gpt-4o")
        with pytest.raises(ValidationError):
            request.user_prompt = "changed"

    def test_chunk_defaults(self):
        chunk = CompletionChunk(provider=Provider.CLAUDE, done=True)
        assert chunk.text == ""
        assert chunk.done is True
