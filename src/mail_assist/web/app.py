"""FastAPI application exposing the generation relay and panel assets."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status as http_status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.routing import APIRoute
from starlette.responses import Response

from mail_assist.core import AppSettings, load_app_settings
from mail_assist.core.models import (
    GenerationFailure,
    GenerationRequest,
    PromptRequiredError,
)
from mail_assist.intelligence import (
    EmailComposer,
    GenerationError,
    LLMClient,
    MissingCredentialError,
    build_llm_client,
)

LOGGER = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"
PANEL_DOCUMENT = "taskpane.html"
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_DEFAULT_ENV_FILE = _PROJECT_ROOT / ".env"
_ENV_FILE_OVERRIDE_VAR = "MAIL_ASSIST_ENV_FILE"

GENERATION_FAILED = "Failed to generate email"


def create_app(
    settings: AppSettings | None = None,
    *,
    llm_client: LLMClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = settings or load_app_settings(env_file=_resolve_env_file())
    app = FastAPI(title="Mail Assist Relay")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if llm_client is None:
        llm_client = build_llm_client(app_settings.openai)
    composer = EmailComposer(
        llm_client,
        max_body_chars=app_settings.relay.max_body_chars,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/generate-email")
    async def generate_email(request: Request) -> JSONResponse:
        """Compose a prompt from the request and return the generated email."""
        payload = await _read_json(request)
        try:
            generation_request = GenerationRequest.from_payload(payload)
            result = await asyncio.to_thread(composer.compose, generation_request)
        except PromptRequiredError as exc:
            return _failure(http_status.HTTP_400_BAD_REQUEST, GenerationFailure(str(exc)))
        except MissingCredentialError as exc:
            LOGGER.error("Generation requested but no API key is configured")
            return _failure(
                http_status.HTTP_500_INTERNAL_SERVER_ERROR, GenerationFailure(str(exc))
            )
        except GenerationError as exc:
            LOGGER.exception("Error generating email: %s", exc)
            return _failure(
                http_status.HTTP_500_INTERNAL_SERVER_ERROR,
                GenerationFailure(GENERATION_FAILED, message=str(exc)),
            )
        except Exception as exc:  # noqa: BLE001  # pylint: disable=broad-exception-caught
            LOGGER.exception("Unexpected error generating email: %s", exc)
            return _failure(
                http_status.HTTP_500_INTERNAL_SERVER_ERROR,
                GenerationFailure(GENERATION_FAILED, message=str(exc)),
            )
        return JSONResponse(result.to_payload())

    @app.get("/{asset_path:path}", include_in_schema=False)
    async def static_asset(asset_path: str) -> Response:
        target = _resolve_static_path(asset_path)
        if target is None:
            return JSONResponse(
                {"error": "Not found"}, status_code=http_status.HTTP_404_NOT_FOUND
            )
        return FileResponse(target)

    _ensure_route_names(app)
    return app


def _ensure_route_names(app: FastAPI) -> None:
    """Assign names to routes if absent for better URL reversing."""
    for route in app.router.routes:
        if isinstance(route, APIRoute) and route.name is None:
            route.name = route.path_format.replace("/", ":") or "root"


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


def _failure(status_code: int, failure: GenerationFailure) -> JSONResponse:
    return JSONResponse(failure.to_payload(), status_code=status_code)


def _resolve_static_path(asset_path: str) -> Path | None:
    """Map a request path to a file under the static directory."""
    relative = asset_path.strip("/") or PANEL_DOCUMENT
    root = STATIC_DIR.resolve()
    try:
        candidate = (root / relative).resolve()
        if not candidate.is_relative_to(root) or not candidate.is_file():
            return None
    except (OSError, ValueError):
        return None
    return candidate


def _resolve_env_file() -> Path:
    override = os.getenv(_ENV_FILE_OVERRIDE_VAR)
    if override:
        return Path(override)
    return _DEFAULT_ENV_FILE


__all__ = ["STATIC_DIR", "create_app"]
