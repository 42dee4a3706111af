"""Adapters over the host mail application's callback-style item API."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")


class HostError(RuntimeError):
    """Raised when the host application reports a failed operation."""


class NoActiveItemError(HostError):
    """Raised when no mail item is open in the host."""

    def __init__(self) -> None:
        super().__init__("No email item selected")


class AsyncResultStatus(str, Enum):
    """Completion status reported by host callbacks."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CoercionType(str, Enum):
    """Format the host converts item content to or from."""

    TEXT = "text"
    HTML = "html"


@dataclass(slots=True, frozen=True)
class AsyncResult(Generic[T]):
    """Status-tagged value handed to a host callback."""

    status: AsyncResultStatus
    value: T | None = None
    error: Any = None


HostCallback = Callable[[AsyncResult[Any]], None]


class MailItem(Protocol):
    """The host's currently open message."""

    subject: str | None
    sender: str | None

    def get_body_async(
        self, coercion: CoercionType, callback: HostCallback
    ) -> None:
        """Read the body, reporting the result through ``callback``."""
        raise NotImplementedError

    def set_selected_data_async(
        self, data: str, coercion: CoercionType, callback: HostCallback
    ) -> None:
        """Replace the current selection, reporting through ``callback``."""
        raise NotImplementedError


class Mailbox(Protocol):
    """Access to whichever item the host has open."""

    @property
    def item(self) -> MailItem | None:
        raise NotImplementedError


def unwrap_result(result: AsyncResult[T]) -> T | None:
    """Return the value of a successful result or raise ``HostError``."""
    if result.status is AsyncResultStatus.SUCCEEDED:
        return result.value
    error = result.error
    message = getattr(error, "message", None) or (str(error) if error else "")
    raise HostError(message or "Host operation failed")


async def call_host(operation: Callable[..., None], *args: Any) -> Any:
    """Invoke a callback-style host operation and await its result.

    ``operation`` receives ``args`` followed by a callback. The callback may be
    invoked synchronously, later on the loop, or from another thread.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[AsyncResult[Any]] = loop.create_future()

    def _settle(result: AsyncResult[Any]) -> None:
        if not future.done():
            future.set_result(result)

    def _callback(result: AsyncResult[Any]) -> None:
        loop.call_soon_threadsafe(_settle, result)

    try:
        operation(*args, _callback)
    except Exception as exc:  # noqa: BLE001  # pylint: disable=broad-exception-caught
        raise HostError(str(exc) or "Host operation failed") from exc
    return unwrap_result(await future)


class HostBridge:
    """Awaitable operations over the host's active mail item."""

    def __init__(self, mailbox: Mailbox) -> None:
        self._mailbox = mailbox

    def active_item(self) -> MailItem:
        """Return the open item or raise ``NoActiveItemError``."""
        item = self._mailbox.item
        if item is None:
            raise NoActiveItemError()
        return item

    async def read_body(
        self, item: MailItem, coercion: CoercionType = CoercionType.TEXT
    ) -> str:
        body = await call_host(item.get_body_async, coercion)
        return body or ""

    async def replace_selection(
        self, item: MailItem, data: str, coercion: CoercionType = CoercionType.HTML
    ) -> None:
        await call_host(item.set_selected_data_async, data, coercion)


__all__ = [
    "AsyncResult",
    "AsyncResultStatus",
    "CoercionType",
    "HostBridge",
    "HostError",
    "MailItem",
    "Mailbox",
    "NoActiveItemError",
    "call_host",
    "unwrap_result",
]
