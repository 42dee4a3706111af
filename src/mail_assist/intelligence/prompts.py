"""Prompt templates for email generation."""

from __future__ import annotations

from mail_assist.core.models import EmailContext

SYSTEM_INSTRUCTION = (
    "You are a professional email assistant. Generate well-written, "
    "professional emails based on the user's prompt."
)
CONTEXT_HEADER = "You are responding to or composing an email. Here's the context:"
CONTEXT_FOOTER = (
    "Generate an appropriate email response or draft based on the user's prompt."
)
TRUNCATION_MARKER = "[... email truncated ...]"


def build_system_message(
    context: EmailContext | None, *, max_body_chars: int | None = None
) -> str:
    """Compose the system turn, appending only the populated context fields."""
    if context is None:
        return SYSTEM_INSTRUCTION

    lines = [SYSTEM_INSTRUCTION, "", CONTEXT_HEADER]
    if context.subject:
        lines.append(f"Subject: {context.subject}")
    if context.sender:
        lines.append(f"From: {context.sender}")
    if context.body:
        lines.append("Original Email Body:")
        lines.append(truncate_body(context.body, max_body_chars))
    lines.extend(["", CONTEXT_FOOTER])
    return "\n".join(lines)


def truncate_body(body: str, max_chars: int | None) -> str:
    """Bound the forwarded body, marking the cut when one is made."""
    if max_chars is None or len(body) <= max_chars:
        return body
    return f"{body[:max_chars]}\n{TRUNCATION_MARKER}"


def build_messages(
    prompt: str, context: EmailContext | None, *, max_body_chars: int | None = None
) -> list[dict[str, str]]:
    """Return the system/user message pair sent to the completion API."""
    return [
        {
            "role": "system",
            "content": build_system_message(context, max_body_chars=max_body_chars),
        },
        {"role": "user", "content": prompt},
    ]


__all__ = [
    "CONTEXT_FOOTER",
    "CONTEXT_HEADER",
    "SYSTEM_INSTRUCTION",
    "TRUNCATION_MARKER",
    "build_messages",
    "build_system_message",
    "truncate_body",
]
