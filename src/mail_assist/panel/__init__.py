"""Add-in panel controller and its host, clipboard and relay adapters."""

from .banner import Banner, BannerKind, MessageBanner
from .clipboard import ClipboardError, FallbackClipboard, SelectionCopy
from .host import (
    AsyncResult,
    AsyncResultStatus,
    CoercionType,
    HostBridge,
    HostError,
    NoActiveItemError,
)
from .relay import RelayClient, RelayError
from .session import (
    ContextSummary,
    PanelSession,
    create_session,
    preview_body,
    summarize_context,
)

__all__ = [
    "AsyncResult",
    "AsyncResultStatus",
    "Banner",
    "BannerKind",
    "ClipboardError",
    "CoercionType",
    "ContextSummary",
    "FallbackClipboard",
    "HostBridge",
    "HostError",
    "MessageBanner",
    "NoActiveItemError",
    "PanelSession",
    "RelayClient",
    "RelayError",
    "SelectionCopy",
    "create_session",
    "preview_body",
    "summarize_context",
]
