"""Single-slot user message banner with auto clear."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

DEFAULT_CLEAR_SECONDS = 5.0


class BannerKind(str, Enum):
    ERROR = "error"
    SUCCESS = "success"


@dataclass(slots=True, frozen=True)
class Banner:
    """A message currently shown to the user."""

    kind: BannerKind
    text: str


class MessageBanner:
    """Show at most one error or success message at a time.

    Each message clears itself after ``clear_after`` seconds unless a newer
    message replaced it first. Must be used from within a running event loop.
    """

    def __init__(
        self,
        *,
        clear_after: float = DEFAULT_CLEAR_SECONDS,
        on_change: Callable[[Banner | None], None] | None = None,
    ) -> None:
        self._clear_after = clear_after
        self._on_change = on_change
        self._current: Banner | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def current(self) -> Banner | None:
        return self._current

    def show_error(self, text: str) -> None:
        self.show(BannerKind.ERROR, text)

    def show_success(self, text: str) -> None:
        self.show(BannerKind.SUCCESS, text)

    def show(self, kind: BannerKind, text: str) -> None:
        self._cancel_timer()
        self._set(Banner(kind=kind, text=text))
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._clear_after, self._expire)

    def clear(self) -> None:
        self._cancel_timer()
        if self._current is not None:
            self._set(None)

    def _expire(self) -> None:
        self._timer = None
        self._set(None)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set(self, banner: Banner | None) -> None:
        self._current = banner
        if self._on_change is not None:
            self._on_change(banner)


__all__ = ["Banner", "BannerKind", "MessageBanner"]
