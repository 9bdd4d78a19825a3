"""
Shared fixtures: a scripted LLM client and isolated settings.
"""

import pytest

from podscript.config import Settings
from podscript.llm.base_client import BaseLLMClient
from podscript.llm.models import CompletionResponse, Provider


class ScriptedClient(BaseLLMClient):
    """
    In-process adapter for pipeline tests.

    ``script(index, request)`` returns the items streamed for the index-th
    call: strings are yielded, exceptions are raised. Without a script the
    client echoes the user prompt as a single piece.
    """

    provider = Provider.OPENAI

    def __init__(self, script=None):
        super().__init__(retry_max_elapsed=1.0, stream_poll_interval=0.01)
        self.script = script
        self.requests = []

    def _complete(self, request):
        self.requests.append(request)
        return CompletionResponse(text=request.user_prompt, provider=self.provider)

    def _stream_text(self, request):
        index = len(self.requests)
        self.requests.append(request)
        if self.script is None:
            yield request.user_prompt
            return
        for item in self.script(index, request):
            if isinstance(item, Exception):
                raise item
            yield item


@pytest.fixture
def echo_client():
    return ScriptedClient()


@pytest.fixture
def scripted_client():
    """Factory for clients with a custom script."""
    return ScriptedClient


@pytest.fixture
def test_settings():
    """Settings with every credential filled in and no .env lookup."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        anthropic_api_key="sk-ant-test",
        groq_api_key="gsk-test",
        gemini_api_key="gemini-test",
        aws_region="us-east-1",
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="secret",
        aws_session_token="",
    )
