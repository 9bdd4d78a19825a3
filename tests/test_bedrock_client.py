"""
Tests for the AWS Bedrock client.
"""

import io
import json
import time
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from podscript.llm.bedrock_client import BEDROCK_ANTHROPIC_VERSION, BedrockClient
from podscript.llm.errors import EmptyResponseError, ProviderError, StreamDecodeError
from podscript.llm.models import CompletionRequest, Provider


MODEL = "anthropic.claude-3-7-sonnet-20250219-v1:0"
REQUEST = CompletionRequest(system_prompt="Be tidy.", user_prompt="um hello", model=MODEL)


def body(payload):
    return {"body": io.BytesIO(json.dumps(payload).encode())}


def chunk(payload):
    return {"chunk": {"bytes": json.dumps(payload).encode()}}


class EventStream:
    """Stand-in for botocore's EventStream: iterable and closable."""

    def __init__(self, events):
        self.events = events
        self.closed = False

    def __iter__(self):
        return iter(self.events)

    def close(self):
        self.closed = True


def endless_deltas():
    while True:
        time.sleep(0.01)
        yield chunk({"type": "content_block_delta", "delta": {"text": "tick"}})


def client_error(code, status):
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} raised"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        "InvokeModel",
    )


@pytest.fixture
def sdk():
    return MagicMock()


@pytest.fixture
def client(sdk):
    return BedrockClient("us-east-1", "AKIATEST", "secret", client=sdk)


class TestRequestBody:
    def test_body_shape(self, client):
        payload = json.loads(client.build_body(REQUEST))

        assert payload == {
            "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
            "max_tokens": 4096,
            "temperature": 0,
            "system": "Be tidy.",
            "messages": [
                {"role": "user", "content": [{"type": "text", "text": "um hello"}]}
            ],
        }

    def test_system_omitted_when_empty(self, client):
        payload = json.loads(client.build_body(CompletionRequest(user_prompt="hi", model=MODEL)))
        assert "system" not in payload


class TestComplete:
    def test_unwraps_response(self, client, sdk):
        sdk.invoke_model.return_value = body({
            "content": [{"type": "text", "text": "Hello."}],
            "stop_reason": "end_turn",
            "model": MODEL,
        })

        response = client.complete(REQUEST)

        assert response.text == "Hello."
        assert response.provider == Provider.BEDROCK
        kwargs = sdk.invoke_model.call_args.kwargs
        assert kwargs["modelId"] == MODEL
        assert kwargs["contentType"] == "application/json"

    def test_empty_content(self, client, sdk):
        sdk.invoke_model.return_value = body({"content": []})

        with pytest.raises(EmptyResponseError):
            client.complete(REQUEST)

    def test_malformed_body(self, client, sdk):
        sdk.invoke_model.return_value = {"body": io.BytesIO(b"<html>")}

        with pytest.raises(ProviderError):
            client.complete(REQUEST)

    @patch("podscript.llm.retry.time.sleep")
    def test_throttling_retried(self, mock_sleep, client, sdk):
        sdk.invoke_model.side_effect = [
            client_error("ThrottlingException", 400),
            body({"content": [{"text": "Done."}]}),
        ]

        assert client.complete(REQUEST).text == "Done."
        assert mock_sleep.call_count == 1

    def test_access_denied_permanent(self, client, sdk):
        sdk.invoke_model.side_effect = client_error("AccessDeniedException", 403)

        with pytest.raises(ProviderError) as exc_info:
            client.complete(REQUEST)

        assert exc_info.value.status_code == 403
        assert sdk.invoke_model.call_count == 1

    def test_service_unavailable_is_overload(self, client):
        error = client._wrap_error(client_error("ServiceUnavailableException", 503))
        assert error.overloaded is True
        assert error.is_transient

    def test_transport_error(self, client, sdk):
        sdk.invoke_model.side_effect = EndpointConnectionError(endpoint_url="https://bedrock")

        with pytest.raises(ProviderError):
            client.complete(REQUEST)


class TestCompleteStream:
    def test_content_block_deltas(self, client, sdk):
        sdk.invoke_model_with_response_stream.return_value = {"body": EventStream([
            chunk({"type": "message_start", "message": {}}),
            chunk({"type": "content_block_start", "index": 0}),
            chunk({"type": "content_block_delta", "index": 0,
                   "delta": {"type": "text_delta", "text": "Hel"}}),
            chunk({"type": "content_block_delta", "index": 0,
                   "delta": {"type": "text_delta", "text": "lo."}}),
            chunk({"type": "content_block_stop", "index": 0}),
            chunk({"type": "message_delta", "delta": {"stop_reason": "end_turn"}}),
            chunk({"type": "message_stop"}),
        ])}

        stream = client.complete_stream(REQUEST)
        chunks = list(stream)

        assert [c.text for c in chunks] == ["Hel", "lo.", ""]
        assert chunks[-1].done is True
        assert stream.error is None
        assert stream.wait(timeout=2.0)
        assert sdk.invoke_model_with_response_stream.return_value["body"].closed

    def test_event_stream_closed_when_caller_stops(self, client, sdk):
        """Closing the completion stream releases the Bedrock event stream."""
        events = EventStream(endless_deltas())
        sdk.invoke_model_with_response_stream.return_value = {"body": events}

        stream = client.complete_stream(REQUEST)
        first = next(iter(stream))
        stream.close()

        assert first.text == "tick"
        assert stream.wait(timeout=2.0)
        assert events.closed
        assert stream.error is None

    def test_event_stream_closed_on_decode_error(self, client, sdk):
        events = EventStream([{"chunk": {"bytes": b"{not json"}}])
        sdk.invoke_model_with_response_stream.return_value = {"body": events}

        stream = client.complete_stream(REQUEST)
        list(stream)

        assert stream.wait(timeout=2.0)
        assert events.closed

    def test_unknown_union_member(self, client, sdk):
        sdk.invoke_model_with_response_stream.return_value = {"body": EventStream([
            chunk({"type": "content_block_delta", "delta": {"text": "partial"}}),
            {"somethingNew": {"value": 1}},
        ])}

        stream = client.complete_stream(REQUEST)
        chunks = list(stream)

        assert [c.text for c in chunks] == ["partial"]
        assert isinstance(stream.error, StreamDecodeError)

    def test_undecodable_chunk(self, client, sdk):
        sdk.invoke_model_with_response_stream.return_value = {"body": EventStream([
            {"chunk": {"bytes": b"{not json"}},
        ])}

        stream = client.complete_stream(REQUEST)

        assert list(stream) == []
        assert isinstance(stream.error, StreamDecodeError)

    def test_unknown_event_type(self, client, sdk):
        sdk.invoke_model_with_response_stream.return_value = {"body": EventStream([
            chunk({"type": "surprise"}),
        ])}

        stream = client.complete_stream(REQUEST)
        list(stream)

        assert isinstance(stream.error, StreamDecodeError)

    def test_invoke_failure(self, client, sdk):
        sdk.invoke_model_with_response_stream.side_effect = client_error(
            "ValidationException", 400
        )

        stream = client.complete_stream(REQUEST)

        assert list(stream) == []
        assert isinstance(stream.error, ProviderError)
        assert stream.error.status_code == 400


class TestSessionClient:
    @patch("podscript.llm.bedrock_client.boto3.Session")
    def test_credentials_passed_to_session(self, mock_session):
        BedrockClient("eu-west-1", "AKIA", "secret", session_token="token")

        mock_session.assert_called_once_with(
            region_name="eu-west-1",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            aws_session_token="token",
        )
        assert mock_session.return_value.client.call_args.args == ("bedrock-runtime",)

    @patch("podscript.llm.bedrock_client.boto3.Session")
    def test_blank_session_token_dropped(self, mock_session):
        BedrockClient("eu-west-1", "AKIA", "secret", session_token="")

        assert mock_session.call_args.kwargs["aws_session_token"] is None
