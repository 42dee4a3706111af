"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator


class OpenAiSettings(BaseModel):
    """Settings for the chat completion provider."""

    api_key: str | None = Field(default=None, description="Provider API key")
    base_url: str = Field(
        default="https://api.openai.com/v1", description="Provider API base URL"
    )
    model: str = Field(default="gpt-4", description="Model identifier")
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for completions",
    )
    max_output_tokens: int = Field(
        default=1000,
        ge=1,
        description="Maximum tokens to request from the provider",
    )
    timeout_seconds: float | None = Field(
        default=None,
        description="Request timeout; the HTTP client's default when unset",
    )


class RelaySettings(BaseModel):
    """Settings bounding what the relay forwards upstream."""

    max_body_chars: int | None = Field(
        default=8000,
        ge=1,
        description="Longest email body forwarded as context; unset disables",
    )


class ServerSettings(BaseModel):
    """Settings for the HTTP(S) server hosting the relay and panel."""

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=3000, description="Listening port")
    use_https: bool = Field(default=True, description="Serve over TLS")
    cert_path: Path = Field(
        default=Path("cert.pem"), description="TLS certificate file"
    )
    key_path: Path = Field(default=Path("key.pem"), description="TLS key file")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if value is None:
            return ["*"]
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class PanelSettings(BaseModel):
    """Settings for the add-in panel controller."""

    relay_url: str = Field(
        default="https://localhost:3000/api/generate-email",
        description="Relay endpoint the panel posts to",
    )
    message_seconds: float = Field(
        default=5.0, gt=0, description="Seconds before a banner auto-clears"
    )
    preview_chars: int = Field(
        default=200, ge=1, description="Body preview length in the context summary"
    )
    verify_tls: bool = Field(
        default=True, description="Verify the relay's TLS certificate"
    )


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    openai: OpenAiSettings = Field(default_factory=OpenAiSettings)
    relay: RelaySettings = Field(default_factory=RelaySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    panel: PanelSettings = Field(default_factory=PanelSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_PREFIX = "MAIL_ASSIST_"

# Settings where an empty value means "unset" rather than "use the default".
NULLABLE_PATHS: frozenset[tuple[str, ...]] = frozenset(
    {
        ("openai", "api_key"),
        ("openai", "timeout_seconds"),
        ("relay", "max_body_chars"),
    }
)

# Unprefixed names understood for compatibility with plain .env files.
ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "OPENAI_API_KEY": ("openai", "api_key"),
    "OPENAI_MODEL": ("openai", "model"),
    "PORT": ("server", "port"),
    "USE_HTTPS": ("server", "use_https"),
}


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    alias = ENV_ALIASES.get(raw_key)
    if alias is not None:
        return list(alias)
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _is_config_key(key: str | None) -> bool:
    return bool(key) and (key.startswith(ENV_PREFIX) or key in ENV_ALIASES)


def _normalize_value(value: Any) -> Any:
    if isinstance(value, str) and value == "":
        return None
    if isinstance(value, str):
        lowercase_value = value.lower()
        if lowercase_value == "true":
            return True
        if lowercase_value == "false":
            return False
    return value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool = True
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if _is_config_key(key)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value for key, value in os.environ.items() if _is_config_key(key)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    # Aliases first so prefixed keys override them.
    ordered = sorted(combined.items(), key=lambda item: item[0].startswith(ENV_PREFIX))
    for key, value in ordered:
        path = _normalize_key(key)
        if not path:
            continue
        normalized_value = _normalize_value(value)
        if normalized_value is None and tuple(path) not in NULLABLE_PATHS:
            continue
        _merge_into_tree(collected, path, normalized_value)

    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment=include_environment)
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "LoggingSettings",
    "OpenAiSettings",
    "PanelSettings",
    "RelaySettings",
    "ServerSettings",
    "load_app_settings",
]
