from types import SimpleNamespace

import httpx
import pytest
from unittest.mock import MagicMock, patch
from openai import APIConnectionError, BadRequestError

from expense_tracker.exception import CustomException, NoTextResponse, TransportFailure
from expense_tracker.llm.openai_client import OpenAIClient
from expense_tracker.models import EncodedPayload

PAYLOAD = EncodedPayload(data="aGVsbG8=", media_type="image/png")
_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/responses")


def _response(*blocks):
    return SimpleNamespace(
        model="gpt-4o-mini",
        output=[SimpleNamespace(type="message", content=list(blocks))],
        usage=SimpleNamespace(input_tokens=120, output_tokens=40, total_tokens=160),
    )


def _text(text):
    return SimpleNamespace(type="output_text", text=text)


@pytest.fixture
def sdk():
    return MagicMock()


@pytest.fixture
def client(sdk):
    return OpenAIClient(model="gpt-4o-mini", client=sdk)


def test_init_without_api_key_fails():
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(CustomException) as excinfo:
            OpenAIClient()
    assert "OPENAI_API_KEY" in str(excinfo.value)


def test_init_disables_sdk_retries():
    with patch("expense_tracker.llm.openai_client.OpenAI") as mock_openai:
        OpenAIClient(api_key="sk-test")

    assert mock_openai.call_args.kwargs["max_retries"] == 0
    assert mock_openai.call_args.kwargs["api_key"] == "sk-test"


def test_extract_receipt_request_shape(client, sdk):
    sdk.responses.create.return_value = _response(_text('{"vendor": "Acme"}'))

    result = client.extract_receipt(PAYLOAD, "PROMPT")

    sdk.responses.create.assert_called_once()
    request = sdk.responses.create.call_args.kwargs
    assert request["model"] == "gpt-4o-mini"
    content = request["input"][0]["content"]
    assert content[0] == {"type": "input_image", "image_url": "data:image/png;base64,aGVsbG8="}
    assert content[1] == {"type": "input_text", "text": "PROMPT"}
    assert "stream" not in request
    assert "timeout" not in request

    assert result.content == '{"vendor": "Acme"}'
    assert result.provider == "OpenAIClient"
    assert result.total_tokens == 160


def test_extract_receipt_returns_first_text_block(client, sdk):
    sdk.responses.create.return_value = _response(
        SimpleNamespace(type="refusal", refusal="no"),
        _text("first"),
        _text("second"),
    )

    assert client.extract_receipt(PAYLOAD, "PROMPT").content == "first"


def test_extract_receipt_without_text_block(client, sdk):
    sdk.responses.create.return_value = _response(SimpleNamespace(type="refusal", refusal="no"))

    with pytest.raises(NoTextResponse):
        client.extract_receipt(PAYLOAD, "PROMPT")


def test_extract_receipt_empty_output(client, sdk):
    sdk.responses.create.return_value = SimpleNamespace(model="gpt-4o-mini", output=[], usage=None)

    with pytest.raises(NoTextResponse):
        client.extract_receipt(PAYLOAD, "PROMPT")


def test_transport_error_is_surfaced_once(client, sdk):
    sdk.responses.create.side_effect = APIConnectionError(request=_REQUEST)

    with pytest.raises(TransportFailure) as excinfo:
        client.extract_receipt(PAYLOAD, "PROMPT")

    assert "Connection error" in str(excinfo.value)
    assert sdk.responses.create.call_count == 1


def test_rejected_request_is_a_transport_failure(client, sdk):
    response = httpx.Response(400, request=_REQUEST, json={"error": {"message": "image too large"}})
    sdk.responses.create.side_effect = BadRequestError("image too large", response=response, body=None)

    with pytest.raises(TransportFailure) as excinfo:
        client.extract_receipt(PAYLOAD, "PROMPT")

    assert "image too large" in str(excinfo.value)
