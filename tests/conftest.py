"""Shared pytest fixtures providing host, clipboard and relay fakes."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from mail_assist.panel.host import AsyncResult, AsyncResultStatus, CoercionType


class HostFailure:
    """Mimics the error object a host attaches to failed results."""

    def __init__(self, message: str) -> None:
        self.message = message


class FakeItem:
    """In-memory mail item answering through status-tagged callbacks."""

    def __init__(
        self,
        *,
        subject: str | None = "Quarterly report",
        sender: str | None = "alice@example.com",
        body: str = "Please review the attached figures.",
        body_error: str | None = None,
        insert_error: str | None = None,
        threaded: bool = False,
    ) -> None:
        self.subject = subject
        self.sender = sender
        self.body = body
        self.body_error = body_error
        self.insert_error = insert_error
        self.threaded = threaded
        self.body_coercions: list[CoercionType] = []
        self.inserted: list[tuple[str, CoercionType]] = []

    def get_body_async(
        self, coercion: CoercionType, callback: Callable[[AsyncResult[Any]], None]
    ) -> None:
        self.body_coercions.append(coercion)
        if self.body_error is not None:
            result = AsyncResult(AsyncResultStatus.FAILED, error=HostFailure(self.body_error))
        else:
            result = AsyncResult(AsyncResultStatus.SUCCEEDED, value=self.body)
        self._deliver(callback, result)

    def set_selected_data_async(
        self,
        data: str,
        coercion: CoercionType,
        callback: Callable[[AsyncResult[Any]], None],
    ) -> None:
        if self.insert_error is not None:
            result = AsyncResult(
                AsyncResultStatus.FAILED, error=HostFailure(self.insert_error)
            )
        else:
            self.inserted.append((data, coercion))
            result = AsyncResult(AsyncResultStatus.SUCCEEDED)
        self._deliver(callback, result)

    def _deliver(
        self, callback: Callable[[AsyncResult[Any]], None], result: AsyncResult[Any]
    ) -> None:
        if self.threaded:
            threading.Thread(target=callback, args=(result,)).start()
        else:
            callback(result)


class FakeMailbox:
    def __init__(self, item: FakeItem | None = None) -> None:
        self.item = item


class RecordingCapability:
    """Clipboard capability that records writes or fails on demand."""

    def __init__(self, name: str, *, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.writes: list[str] = []

    async def write_text(self, text: str) -> None:
        if self.fail:
            raise RuntimeError(f"{self.name} unavailable")
        self.writes.append(text)


class RelayStub:
    """MockTransport handler standing in for the relay endpoint."""

    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self.payload = payload if payload is not None else {
            "email": "Hi Alice,\n\nThanks!",
            "model": "gpt-4",
            "usage": {"total_tokens": 20},
        }
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    def async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_item() -> FakeItem:
    return FakeItem()


@pytest.fixture
def relay_stub() -> RelayStub:
    return RelayStub()


@pytest.fixture
def make_item() -> type[FakeItem]:
    return FakeItem


@pytest.fixture
def make_mailbox() -> type[FakeMailbox]:
    return FakeMailbox


@pytest.fixture
def host_failure() -> type[HostFailure]:
    return HostFailure


@pytest.fixture
def make_capability() -> type[RecordingCapability]:
    return RecordingCapability


@pytest.fixture
def make_relay_stub() -> type[RelayStub]:
    return RelayStub
