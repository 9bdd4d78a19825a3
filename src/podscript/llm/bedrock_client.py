"""
AWS Bedrock LLM client for Anthropic models.

The request body is the Anthropic Messages shape marshalled to JSON, with the
Bedrock-specific anthropic_version. Responses come back as a JSON wrapper
(blocking) or an event stream of JSON chunks (streaming).
"""

import json
import logging
from typing import Iterator, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base_client import BaseLLMClient
from .errors import EmptyResponseError, ProviderError, StreamDecodeError
from .models import CompletionRequest, CompletionResponse, Provider, max_output_tokens

logger = logging.getLogger(__name__)

BEDROCK_ANTHROPIC_VERSION = "bedrock-2023-05-31"
BEDROCK_CONTENT_TYPE = "application/json"

_THROTTLING_CODES = {"ThrottlingException", "throttlingException"}
_OVERLOADED_CODES = {"ServiceUnavailableException", "serviceUnavailableException"}

_SKIPPED_EVENTS = {
    "message_start",
    "message_delta",
    "message_stop",
    "content_block_start",
    "content_block_stop",
}


class BedrockClient(BaseLLMClient):
    """Bedrock runtime adapter using a session-scoped boto3 client."""

    provider = Provider.BEDROCK

    def __init__(
        self,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        session_token: Optional[str] = None,
        timeout: float = 120.0,
        client=None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if client is None:
            session = boto3.Session(
                region_name=region,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                aws_session_token=session_token or None,
            )
            client = session.client(
                "bedrock-runtime",
                config=Config(read_timeout=timeout, retries={"max_attempts": 0}),
            )
        self._client = client

    def build_body(self, request: CompletionRequest) -> str:
        body = {
            "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
            "max_tokens": max_output_tokens(request.model),
            "temperature": 0,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": request.user_prompt}],
                }
            ],
        }
        if request.system_prompt:
            body["system"] = request.system_prompt
        return json.dumps(body)

    def _wrap_error(self, exc: Exception) -> ProviderError:
        if isinstance(exc, ClientError):
            error = exc.response.get("Error", {})
            code = error.get("Code", "")
            status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if code in _THROTTLING_CODES:
                status = 429
            return ProviderError(
                self.provider,
                str(exc),
                status_code=status,
                overloaded=code in _OVERLOADED_CODES,
            )
        return ProviderError(self.provider, str(exc))

    def _complete(self, request: CompletionRequest) -> CompletionResponse:
        try:
            output = self._client.invoke_model(
                modelId=request.model,
                contentType=BEDROCK_CONTENT_TYPE,
                body=self.build_body(request),
            )
            raw = output["body"].read()
        except (ClientError, BotoCoreError) as e:
            raise self._wrap_error(e) from e

        try:
            response = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ProviderError(self.provider, f"failed to unmarshal response: {e}") from e

        content = response.get("content") or []
        if not content:
            raise EmptyResponseError(self.provider)

        return CompletionResponse(text=content[0].get("text", ""), provider=self.provider)

    def _decode_chunk(self, data: bytes) -> Optional[str]:
        try:
            event = json.loads(data)
        except (TypeError, json.JSONDecodeError) as e:
            raise StreamDecodeError(self.provider, f"failed to decode chunk: {e}") from e

        event_type = event.get("type")
        if event_type == "content_block_delta":
            return event.get("delta", {}).get("text") or None
        if event_type in _SKIPPED_EVENTS:
            return None
        raise StreamDecodeError(self.provider, f"unknown stream event: {event_type}")

    def _stream_text(self, request: CompletionRequest) -> Iterator[str]:
        try:
            output = self._client.invoke_model_with_response_stream(
                modelId=request.model,
                contentType=BEDROCK_CONTENT_TYPE,
                body=self.build_body(request),
            )
            body = output["body"]
            try:
                for event in body:
                    if not event:
                        raise StreamDecodeError(self.provider, "received empty event")
                    if "chunk" not in event:
                        member = next(iter(event))
                        raise StreamDecodeError(
                            self.provider, f"unknown response stream event: {member}"
                        )
                    text = self._decode_chunk(event["chunk"].get("bytes"))
                    if text:
                        yield text
            finally:
                # releases the HTTP connection when the caller stops early
                body.close()
        except (ClientError, BotoCoreError) as e:
            raise self._wrap_error(e) from e
