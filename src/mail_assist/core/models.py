"""Request and response values exchanged between the panel and the relay."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class PromptRequiredError(ValueError):
    """Raised when a generation request carries no usable prompt."""

    def __init__(self) -> None:
        super().__init__("Prompt is required")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(slots=True, frozen=True)
class EmailContext:
    """Subject, sender and body of the email currently open in the host."""

    subject: str = ""
    sender: str = ""
    body: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> EmailContext | None:
        """Build a context from a client payload; ``None`` when absent."""
        if not isinstance(payload, Mapping):
            return None
        return cls(
            subject=_as_text(payload.get("subject")),
            sender=_as_text(payload.get("from")),
            body=_as_text(payload.get("body")),
        )

    def to_payload(self) -> dict[str, str]:
        return {"subject": self.subject, "from": self.sender, "body": self.body}


@dataclass(slots=True, frozen=True)
class GenerationRequest:
    """A prompt plus the optional email it refers to."""

    prompt: str
    email_context: EmailContext | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> GenerationRequest:
        """Validate a decoded JSON body, raising ``PromptRequiredError``."""
        if not isinstance(payload, Mapping):
            raise PromptRequiredError()
        prompt = payload.get("prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            raise PromptRequiredError()
        return cls(
            prompt=prompt,
            email_context=EmailContext.from_payload(payload.get("emailContext")),
        )

    def to_payload(self) -> dict[str, Any]:
        context = self.email_context.to_payload() if self.email_context else None
        return {"prompt": self.prompt, "emailContext": context}


@dataclass(slots=True, frozen=True)
class GenerationResult:
    """Generated email text with provider metadata."""

    email: str
    model: str
    usage: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GenerationResult:
        usage = payload.get("usage")
        return cls(
            email=_as_text(payload.get("email")),
            model=_as_text(payload.get("model")),
            usage=dict(usage) if isinstance(usage, Mapping) else {},
        )

    def to_payload(self) -> dict[str, Any]:
        return {"email": self.email, "model": self.model, "usage": self.usage}


@dataclass(slots=True, frozen=True)
class GenerationFailure:
    """Structured error body returned by the relay."""

    error: str
    message: str | None = None

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.error}
        if self.message is not None:
            payload["message"] = self.message
        return payload


__all__ = [
    "EmailContext",
    "GenerationFailure",
    "GenerationRequest",
    "GenerationResult",
    "PromptRequiredError",
]
