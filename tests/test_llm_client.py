"""Tests for the chat completion client."""

from __future__ import annotations

import json

import httpx
import pytest

from mail_assist.core.config import OpenAiSettings
from mail_assist.intelligence.llm import LLMError, OpenAIChatClient, build_llm_client

MESSAGES = [
    {"role": "system", "content": "You are a professional email assistant."},
    {"role": "user", "content": "Say hi"},
]


def _client(handler, **settings_kwargs) -> OpenAIChatClient:
    settings = OpenAiSettings(api_key="sk-test", **settings_kwargs)
    transport = httpx.MockTransport(handler)
    return OpenAIChatClient(settings, httpx.Client(transport=transport))


def test_complete_sends_fixed_sampling_parameters() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "model": "gpt-4-0613",
                "choices": [{"message": {"role": "assistant", "content": "Hi!"}}],
                "usage": {"prompt_tokens": 9, "completion_tokens": 2, "total_tokens": 11},
            },
        )

    completion = _client(handler).complete(MESSAGES)

    assert completion.text == "Hi!"
    assert completion.model == "gpt-4-0613"
    assert completion.usage == {"prompt_tokens": 9, "completion_tokens": 2, "total_tokens": 11}
    assert seen["url"] == "https://api.openai.com/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"] == {
        "model": "gpt-4",
        "messages": MESSAGES,
        "temperature": 0.7,
        "max_tokens": 1000,
    }


def test_complete_uses_configured_model_and_base_url() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["model"] = json.loads(request.content)["model"]
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    completion = _client(
        handler, model="gpt-4o-mini", base_url="https://llm.internal/v1/"
    ).complete(MESSAGES)

    assert seen == {
        "url": "https://llm.internal/v1/chat/completions",
        "model": "gpt-4o-mini",
    }
    assert completion.model == "gpt-4o-mini"
    assert completion.usage == {}


def test_provider_error_message_is_surfaced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            401, json={"error": {"message": "Incorrect API key provided"}}
        )

    with pytest.raises(LLMError, match="401 Incorrect API key provided"):
        _client(handler).complete(MESSAGES)


def test_network_failure_raises_llm_error() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMError, match="connection refused"):
        _client(handler).complete(MESSAGES)
    assert calls == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"choices": []},
        {"choices": [{"message": {}}]},
        {"model": "gpt-4"},
        ["not", "an", "object"],
    ],
)
def test_malformed_response_raises_llm_error(payload: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    with pytest.raises(LLMError):
        _client(handler).complete(MESSAGES)


def test_invalid_json_raises_llm_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(LLMError, match="invalid JSON"):
        _client(handler).complete(MESSAGES)


def test_build_llm_client_requires_key() -> None:
    assert build_llm_client(OpenAiSettings()) is None
    client = build_llm_client(OpenAiSettings(api_key="sk-test"))
    assert client is not None
    assert client.provider_id == "openai:gpt-4"
