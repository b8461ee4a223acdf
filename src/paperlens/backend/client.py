"""Async HTTP+JSON transport to the AI backend.

Every artifact operation issues exactly one POST. Failures of any kind
(connection, timeout, non-2xx status, undecodable body) are converted into a
single ``BackendError`` whose message is fit to show to the user. There is no
automatic retry: all triggers are user-initiated, so the user retries.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from paperlens.exceptions import BackendError, ResponseFormatError

logger = logging.getLogger(__name__)

_USER_AGENT = "paperlens/0.1"


class BackendClient:
    """Thin wrapper around ``httpx.AsyncClient`` bound to the backend base URL.

    Args:
        base_url: Scheme + host of the backend, e.g. ``http://localhost:8000``.
        timeout: Seconds allowed per request (connect + read).
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=10.0),
            headers={"User-Agent": _USER_AGENT, "Content-Type": "application/json"},
            transport=transport,
        )

    async def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST *payload* to *path* and return the decoded JSON object.

        Raises:
            BackendError: On connection failure, timeout, or non-2xx status.
            ResponseFormatError: If a 2xx body is not a JSON object.
        """
        logger.debug("POST %s%s", self.base_url, path)
        try:
            response = await self._client.post(path, json=payload)
        except httpx.TimeoutException as exc:
            raise BackendError(
                f"The AI backend did not respond within {self.timeout:g} seconds"
            ) from exc
        except httpx.TransportError as exc:
            raise BackendError(
                f"Could not reach the AI backend at {self.base_url}. "
                "Please ensure the backend is running"
            ) from exc

        if not response.is_success:
            message = _error_message(response)
            logger.warning("POST %s failed with HTTP %d: %s", path, response.status_code, message)
            raise BackendError(message)

        try:
            body = response.json()
        except ValueError as exc:
            raise ResponseFormatError("The AI backend returned a malformed response") from exc
        if not isinstance(body, dict):
            raise ResponseFormatError(
                f"The AI backend returned a {type(body).__name__} instead of a JSON object"
            )
        return body

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    """Pick the best description for a non-2xx response.

    Order: the body's ``error`` string, then the HTTP reason phrase, then
    ``Server Error: <status>``.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()
    return response.reason_phrase or f"Server Error: {response.status_code}"
