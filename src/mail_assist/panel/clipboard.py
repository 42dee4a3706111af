"""Clipboard writes with capability fallback."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

LOGGER = logging.getLogger(__name__)


class ClipboardError(RuntimeError):
    """Raised when no clipboard capability accepted the text."""


class ClipboardCapability(Protocol):
    """One way of placing text on the system clipboard."""

    name: str

    async def write_text(self, text: str) -> None:
        """Write ``text`` or raise on failure."""
        raise NotImplementedError


class SelectionCopy:
    """Legacy copy: select the text in a scratch element and issue a copy.

    ``copy_command`` performs the synchronous select-and-copy and returns
    whether the host accepted it.
    """

    name = "selection"

    def __init__(self, copy_command: Callable[[str], bool]) -> None:
        self._copy_command = copy_command

    async def write_text(self, text: str) -> None:
        if not self._copy_command(text):
            raise ClipboardError("Copy command was rejected")


class FallbackClipboard:
    """Try each capability in order until one succeeds."""

    def __init__(self, capabilities: Sequence[ClipboardCapability]) -> None:
        if not capabilities:
            raise ValueError("At least one clipboard capability is required")
        self._capabilities = tuple(capabilities)

    async def write_text(self, text: str) -> str:
        """Write ``text`` and return the name of the capability that worked."""
        last_error: Exception | None = None
        for capability in self._capabilities:
            try:
                await capability.write_text(text)
            except Exception as exc:  # noqa: BLE001  # pylint: disable=broad-exception-caught
                LOGGER.warning("Clipboard capability %s failed: %s", capability.name, exc)
                last_error = exc
                continue
            return capability.name
        raise ClipboardError("Failed to copy to clipboard") from last_error


__all__ = [
    "ClipboardCapability",
    "ClipboardError",
    "FallbackClipboard",
    "SelectionCopy",
]
