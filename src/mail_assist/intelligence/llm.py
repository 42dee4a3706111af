"""Chat completion client used by the relay."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urljoin

import httpx

from mail_assist.core.config import OpenAiSettings


class LLMError(RuntimeError):
    """Raised when the LLM provider fails to respond as expected."""


@dataclass(slots=True, frozen=True)
class Completion:
    """Text returned by the provider with its accounting metadata."""

    text: str
    model: str
    usage: dict[str, Any] = field(default_factory=dict)


class LLMClient(Protocol):
    """Protocol describing the minimal chat completion behaviour."""

    @property
    def provider_id(self) -> str:
        """Identifier describing the backing model/provider."""
        raise NotImplementedError

    def complete(self, messages: list[dict[str, str]]) -> Completion:
        """Return the completion for a system/user message list."""
        raise NotImplementedError


@dataclass(slots=True)
class OpenAIChatClient:
    """Thin synchronous client for the OpenAI chat completions API."""

    settings: OpenAiSettings
    http_client: httpx.Client | None = None

    def complete(self, messages: list[dict[str, str]]) -> Completion:
        """Send a single, non-streaming completion request."""
        endpoint = _resolve_endpoint(self.settings.base_url)
        payload: dict[str, object] = {
            "model": self.settings.model,
            "messages": messages,
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_output_tokens,
        }
        request_kwargs: dict[str, Any] = {
            "json": payload,
            "headers": {"Authorization": f"Bearer {self.settings.api_key}"},
        }
        if self.settings.timeout_seconds is not None:
            request_kwargs["timeout"] = self.settings.timeout_seconds

        post = self.http_client.post if self.http_client is not None else httpx.post
        try:
            response = post(endpoint, **request_kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise LLMError(_describe_status_error(exc.response)) from exc
        except httpx.HTTPError as exc:
            raise LLMError(f"Request to completion API failed: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise LLMError("LLM returned invalid JSON") from exc

        return _parse_completion(data, default_model=self.settings.model)

    @property
    def provider_id(self) -> str:
        """Return a human readable identifier for the configured model."""
        return f"openai:{self.settings.model}"


def build_llm_client(settings: OpenAiSettings) -> OpenAIChatClient | None:
    """Return a client when an API key is configured, otherwise ``None``."""
    if not settings.api_key:
        return None
    return OpenAIChatClient(settings)


def _resolve_endpoint(base_url: str) -> str:
    trimmed = base_url.rstrip("/") + "/"
    return urljoin(trimmed, "chat/completions")


def _describe_status_error(response: httpx.Response) -> str:
    detail = response.reason_phrase or "error"
    try:
        body = response.json()
    except json.JSONDecodeError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            detail = error["message"]
        elif isinstance(error, str):
            detail = error
    return f"{response.status_code} {detail}"


def _parse_completion(data: Any, *, default_model: str) -> Completion:
    if not isinstance(data, dict):
        raise LLMError("LLM response was not a JSON object")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise LLMError("LLM response missing 'choices'")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise LLMError("LLM response missing message content")

    model = data.get("model")
    usage = data.get("usage")
    return Completion(
        text=content,
        model=model if isinstance(model, str) and model else default_model,
        usage=usage if isinstance(usage, dict) else {},
    )


__all__ = [
    "Completion",
    "LLMClient",
    "LLMError",
    "OpenAIChatClient",
    "build_llm_client",
]
