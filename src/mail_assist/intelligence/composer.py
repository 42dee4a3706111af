"""Email composer that turns a generation request into completion text."""

from __future__ import annotations

import logging

from mail_assist.core.models import (
    GenerationRequest,
    GenerationResult,
    PromptRequiredError,
)

from .llm import LLMClient, LLMError
from .prompts import build_messages

LOGGER = logging.getLogger(__name__)


class MissingCredentialError(RuntimeError):
    """Raised when no API key is configured for the completion provider."""

    def __init__(self) -> None:
        super().__init__("OpenAI API key not configured")


class GenerationError(RuntimeError):
    """Raised when the completion provider call fails."""


class EmailComposer:
    """Compose prompts from request context and forward them to the LLM."""

    def __init__(
        self,
        llm_client: LLMClient | None,
        *,
        max_body_chars: int | None = None,
    ) -> None:
        """Initialise with an optional client; ``None`` means no credential."""
        self._llm_client = llm_client
        self._max_body_chars = max_body_chars

    def compose(self, request: GenerationRequest) -> GenerationResult:
        """Return generated email text for ``request``."""
        if not request.prompt.strip():
            raise PromptRequiredError()
        if self._llm_client is None:
            raise MissingCredentialError()

        messages = build_messages(
            request.prompt,
            request.email_context,
            max_body_chars=self._max_body_chars,
        )
        LOGGER.debug(
            "Requesting completion from %s (context: %s)",
            self._llm_client.provider_id,
            "yes" if request.email_context is not None else "no",
        )
        try:
            completion = self._llm_client.complete(messages)
        except LLMError as exc:
            raise GenerationError(str(exc)) from exc

        return GenerationResult(
            email=completion.text,
            model=completion.model,
            usage=completion.usage,
        )


__all__ = ["EmailComposer", "GenerationError", "MissingCredentialError"]
