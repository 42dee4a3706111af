"""HTTP client the panel uses to reach the generation relay."""

from __future__ import annotations

import json
from types import TracebackType

import httpx

from mail_assist.core.models import GenerationRequest, GenerationResult

GENERIC_FAILURE = "Failed to generate email"


class RelayError(RuntimeError):
    """Raised when the relay cannot produce a generated email."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RelayClient:
    """Post generation requests to the relay endpoint."""

    def __init__(
        self,
        endpoint: str,
        *,
        client: httpx.AsyncClient | None = None,
        verify_tls: bool = True,
    ) -> None:
        self._endpoint = endpoint
        self._owns_client = client is None
        self._client = (
            client if client is not None else httpx.AsyncClient(verify=verify_tls)
        )

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Return the relay's result or raise ``RelayError``."""
        try:
            response = await self._client.post(
                self._endpoint, json=request.to_payload()
            )
        except httpx.HTTPError as exc:
            raise RelayError(str(exc) or GENERIC_FAILURE) from exc

        if not response.is_success:
            raise RelayError(
                _error_message(response), status_code=response.status_code
            )
        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            raise RelayError("Relay returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise RelayError("Relay returned an unexpected response")
        return GenerationResult.from_payload(payload)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> RelayClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    """Pick the most specific message from a relay error body."""
    try:
        body = response.json()
    except json.JSONDecodeError:
        return GENERIC_FAILURE
    if not isinstance(body, dict):
        return GENERIC_FAILURE
    for key in ("message", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return GENERIC_FAILURE


__all__ = ["RelayClient", "RelayError"]
