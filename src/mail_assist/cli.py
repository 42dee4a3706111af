"""Command-line entry point for Mail Assist."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import uvicorn

from mail_assist.core import AppSettings, configure_logging, load_app_settings
from mail_assist.core.config import ServerSettings
from mail_assist.core.models import EmailContext, GenerationRequest
from mail_assist.intelligence import (
    EmailComposer,
    GenerationError,
    MissingCredentialError,
    build_llm_client,
)
from mail_assist.web import create_app

LOGGER = logging.getLogger(__name__)

CERT_HINT = (
    'openssl req -x509 -newkey rsa:4096 -nodes -keyout key.pem -out cert.pem '
    '-days 365 -subj "/CN=localhost"'
)


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Mail Assist relay and tools")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="info",
        choices=["info", "serve", "generate"],
        help="Operation to execute.",
    )
    parser.add_argument(
        "--prompt",
        default=None,
        help="Instruction for the generate command.",
    )
    parser.add_argument("--subject", default="", help="Context subject for generate.")
    parser.add_argument(
        "--from",
        dest="sender",
        default="",
        help="Context sender address for generate.",
    )
    parser.add_argument(
        "--body-file",
        dest="body_file",
        type=Path,
        default=None,
        help="File whose text is used as the context body for generate.",
    )
    return parser


def execute(args: argparse.Namespace, settings: AppSettings) -> int:
    """Execute the requested CLI command and return an exit status."""
    command = args.command
    if command == "info":
        _print_info(settings)
        return 0
    if command == "serve":
        _run_server(settings)
        return 0
    return _run_generate(
        settings,
        prompt=args.prompt or "",
        subject=args.subject,
        sender=args.sender,
        body_file=args.body_file,
    )


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    raise SystemExit(execute(args, settings))


def _print_info(settings: AppSettings) -> None:
    key_state = "configured" if settings.openai.api_key else "missing"
    scheme = "https" if settings.server.use_https else "http"
    print("Mail Assist relay configuration")
    print(f"Listen: {scheme}://{settings.server.host}:{settings.server.port}")
    print(f"Model: {settings.openai.model}")
    print(f"API key: {key_state}")
    print(f"Panel relay URL: {settings.panel.relay_url}")


def resolve_ssl_files(server: ServerSettings) -> tuple[Path, Path] | None:
    """Return the certificate and key paths when TLS can be enabled."""
    if not server.use_https:
        return None
    if server.cert_path.is_file() and server.key_path.is_file():
        return server.cert_path, server.key_path
    LOGGER.warning("HTTPS certificates not found. Running on HTTP.")
    LOGGER.warning("Mail hosts require HTTPS. Generate certificates with: %s", CERT_HINT)
    LOGGER.warning("Or set USE_HTTPS=false for development.")
    return None


def _run_server(settings: AppSettings) -> None:
    server = settings.server
    ssl_files = resolve_ssl_files(server)
    if not settings.openai.api_key:
        LOGGER.warning("OPENAI_API_KEY is not configured; generation requests will fail")

    app = create_app(settings)
    if ssl_files is None:
        LOGGER.info("Serving on http://%s:%s", server.host, server.port)
        if not server.use_https:
            LOGGER.info("Mail hosts require HTTPS; use a tunnel or certificates.")
        uvicorn.run(app, host=server.host, port=server.port, log_config=None)
        return

    cert_path, key_path = ssl_files
    LOGGER.info("Serving on https://%s:%s", server.host, server.port)
    uvicorn.run(
        app,
        host=server.host,
        port=server.port,
        ssl_certfile=str(cert_path),
        ssl_keyfile=str(key_path),
        log_config=None,
    )


def _run_generate(
    settings: AppSettings,
    *,
    prompt: str,
    subject: str,
    sender: str,
    body_file: Path | None,
) -> int:
    """Generate an email locally and print it."""
    if not prompt.strip():
        print("A --prompt is required for the generate command.")
        return 2

    context: EmailContext | None = None
    if subject or sender or body_file is not None:
        body = body_file.read_text(encoding="utf-8") if body_file else ""
        context = EmailContext(subject=subject, sender=sender, body=body)

    composer = EmailComposer(
        build_llm_client(settings.openai),
        max_body_chars=settings.relay.max_body_chars,
    )
    try:
        result = composer.compose(GenerationRequest(prompt=prompt, email_context=context))
    except (MissingCredentialError, GenerationError) as exc:
        print(f"Generation failed: {exc}")
        return 1

    print(result.email)
    total_tokens = result.usage.get("total_tokens")
    if total_tokens is not None:
        print(f"\n[{result.model}, {total_tokens} tokens]")
    return 0


if __name__ == "__main__":
    main()
