"""Tests for the email composer service."""

from __future__ import annotations

import pytest

from mail_assist.core.models import EmailContext, GenerationRequest, PromptRequiredError
from mail_assist.intelligence.composer import (
    EmailComposer,
    GenerationError,
    MissingCredentialError,
)
from mail_assist.intelligence.llm import Completion, LLMError


class StubLLM:
    """LLM stub returning a predetermined completion."""

    def __init__(self, text: str = "Dear team, ...") -> None:
        self.text = text
        self.provider_id = "stub-llm"
        self.last_messages: list[dict[str, str]] | None = None

    def complete(self, messages: list[dict[str, str]]) -> Completion:
        self.last_messages = messages
        return Completion(
            text=self.text,
            model="stub-model-0613",
            usage={"prompt_tokens": 12, "completion_tokens": 30, "total_tokens": 42},
        )


class FailingLLM:
    """LLM stub that always raises an error."""

    provider_id = "failing-llm"

    def complete(self, messages: list[dict[str, str]]) -> Completion:
        del messages
        raise LLMError("429 Rate limit reached")


def test_compose_returns_generated_text_and_metadata() -> None:
    llm = StubLLM("Thanks for the update!")
    composer = EmailComposer(llm)

    result = composer.compose(GenerationRequest(prompt="Reply politely"))

    assert result.email == "Thanks for the update!"
    assert result.model == "stub-model-0613"
    assert result.usage["total_tokens"] == 42


def test_compose_passes_prompt_through_as_user_turn() -> None:
    llm = StubLLM()
    composer = EmailComposer(llm)
    context = EmailContext(subject="Invoice", sender="billing@example.com", body="Due")

    composer.compose(GenerationRequest(prompt="  Say thanks  ", email_context=context))

    assert llm.last_messages is not None
    system, user = llm.last_messages
    assert system["role"] == "system"
    assert "Subject: Invoice" in system["content"]
    assert user == {"role": "user", "content": "  Say thanks  "}


def test_compose_applies_body_bound() -> None:
    llm = StubLLM()
    composer = EmailComposer(llm, max_body_chars=10)
    context = EmailContext(body="x" * 50)

    composer.compose(GenerationRequest(prompt="Summarise", email_context=context))

    assert llm.last_messages is not None
    assert "x" * 11 not in llm.last_messages[0]["content"]


def test_compose_rejects_blank_prompt_before_credential_check() -> None:
    composer = EmailComposer(None)

    with pytest.raises(PromptRequiredError):
        composer.compose(GenerationRequest(prompt="   "))


def test_compose_without_client_reports_missing_credential() -> None:
    composer = EmailComposer(None)

    with pytest.raises(MissingCredentialError, match="OpenAI API key not configured"):
        composer.compose(GenerationRequest(prompt="Hello"))


def test_compose_wraps_provider_failures() -> None:
    composer = EmailComposer(FailingLLM())

    with pytest.raises(GenerationError, match="Rate limit"):
        composer.compose(GenerationRequest(prompt="Hello"))
