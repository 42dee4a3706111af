"""Core utilities for configuration, logging, and shared models."""

from .config import AppSettings, load_app_settings
from .logging import configure_logging
from .models import (
    EmailContext,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    PromptRequiredError,
)

__all__ = [
    "AppSettings",
    "EmailContext",
    "GenerationFailure",
    "GenerationRequest",
    "GenerationResult",
    "PromptRequiredError",
    "configure_logging",
    "load_app_settings",
]
