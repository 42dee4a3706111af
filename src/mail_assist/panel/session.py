"""Panel session: the add-in's state and user actions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from mail_assist.core.config import PanelSettings
from mail_assist.core.models import EmailContext, GenerationRequest

from .banner import MessageBanner
from .clipboard import ClipboardCapability, ClipboardError, FallbackClipboard
from .host import CoercionType, HostBridge, HostError, Mailbox, NoActiveItemError
from .relay import RelayClient, RelayError

LOGGER = logging.getLogger(__name__)

PREVIEW_CHARS = 200


@dataclass(slots=True, frozen=True)
class ContextSummary:
    """What the panel displays about the loaded email."""

    subject: str
    sender: str
    preview: str


def preview_body(body: str, limit: int = PREVIEW_CHARS) -> str:
    """Cut ``body`` to ``limit`` characters, adding an ellipsis only if cut."""
    if len(body) > limit:
        return body[:limit] + "..."
    return body


def summarize_context(
    context: EmailContext, *, preview_chars: int = PREVIEW_CHARS
) -> ContextSummary:
    return ContextSummary(
        subject=context.subject or "No subject",
        sender=context.sender or "Unknown",
        preview=preview_body(context.body, preview_chars),
    )


class PanelSession:
    """State for one panel instance and the handlers for its controls.

    The loaded context and the current draft are replaced wholesale by each
    action; nothing is merged.
    """

    def __init__(
        self,
        host: HostBridge,
        relay: RelayClient,
        clipboard: FallbackClipboard,
        banner: MessageBanner | None = None,
        *,
        preview_chars: int = PREVIEW_CHARS,
    ) -> None:
        self._host = host
        self._relay = relay
        self._clipboard = clipboard
        self.banner = banner or MessageBanner()
        self._preview_chars = preview_chars

        self.email_context: EmailContext | None = None
        self.summary: ContextSummary | None = None
        self.draft = ""
        self.busy = False
        self.actions_enabled = False

    @property
    def generate_enabled(self) -> bool:
        return not self.busy

    async def load_context(self) -> EmailContext | None:
        """Read subject, sender and body from the open item."""
        try:
            item = self._host.active_item()
        except NoActiveItemError as exc:
            self.banner.show_error(str(exc))
            return self.email_context

        subject = item.subject or ""
        sender = item.sender or ""
        try:
            body = await self._host.read_body(item, CoercionType.TEXT)
        except HostError as exc:
            LOGGER.warning("Error loading email body: %s", exc)
            self._replace_context(EmailContext(subject=subject, sender=sender))
            self.banner.show_error(
                "Loaded subject and sender, but the body could not be read"
            )
            return self.email_context

        self._replace_context(EmailContext(subject=subject, sender=sender, body=body))
        self.banner.show_success("Email context loaded successfully")
        return self.email_context

    async def generate(self, prompt_text: str) -> str | None:
        """Send the prompt and loaded context to the relay."""
        if self.busy:
            return None
        prompt = prompt_text.strip()
        if not prompt:
            self.banner.show_error("Please enter a prompt")
            return None

        self.busy = True
        self.banner.clear()
        try:
            result = await self._relay.generate(
                GenerationRequest(prompt=prompt, email_context=self.email_context)
            )
        except RelayError as exc:
            LOGGER.warning("Error generating email: %s", exc)
            self.draft = ""
            self.actions_enabled = False
            self.banner.show_error(
                f"Error: {exc}. Make sure the server is running "
                "and the API key is configured."
            )
            return None
        finally:
            self.busy = False

        self.draft = result.email
        self.actions_enabled = True
        self.banner.show_success("Email generated successfully!")
        return self.draft

    async def insert(self, draft_text: str | None = None) -> bool:
        """Replace the selection in the open item with the draft as HTML."""
        text = (self.draft if draft_text is None else draft_text).strip()
        if not text:
            self.banner.show_error("No email to insert")
            return False
        try:
            item = self._host.active_item()
        except NoActiveItemError as exc:
            self.banner.show_error(str(exc))
            return False

        try:
            await self._host.replace_selection(item, text, CoercionType.HTML)
        except HostError as exc:
            LOGGER.warning("Error inserting email: %s", exc)
            self.banner.show_error("Failed to insert email")
            return False
        self.banner.show_success("Email inserted successfully!")
        return True

    async def copy(self, draft_text: str | None = None) -> bool:
        text = (self.draft if draft_text is None else draft_text).strip()
        if not text:
            self.banner.show_error("No email to copy")
            return False
        try:
            await self._clipboard.write_text(text)
        except ClipboardError:
            self.banner.show_error("Failed to copy to clipboard")
            return False
        self.banner.show_success("Copied to clipboard!")
        return True

    def _replace_context(self, context: EmailContext) -> None:
        self.email_context = context
        self.summary = summarize_context(context, preview_chars=self._preview_chars)


def create_session(
    settings: PanelSettings,
    mailbox: Mailbox,
    clipboard_capabilities: Sequence[ClipboardCapability],
    *,
    http_client: httpx.AsyncClient | None = None,
) -> PanelSession:
    """Wire a panel session from settings and the host's capabilities."""
    return PanelSession(
        HostBridge(mailbox),
        RelayClient(
            settings.relay_url, client=http_client, verify_tls=settings.verify_tls
        ),
        FallbackClipboard(clipboard_capabilities),
        MessageBanner(clear_after=settings.message_seconds),
        preview_chars=settings.preview_chars,
    )


__all__ = [
    "ContextSummary",
    "PanelSession",
    "create_session",
    "preview_body",
    "summarize_context",
]
