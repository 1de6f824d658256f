"""Store backed by a Redis-compatible REST API (Vercel KV / Upstash)."""

import json
from typing import Any

import httpx

from bookpoll.logging import get_logger

from .base import StorageError, Store

logger = get_logger(__name__)


class KvStore(Store):
    """Sends Redis commands as JSON arrays to a REST endpoint.

    Each command is POSTed to the base URL, e.g. ``["SET", "poll:abc", "..."]``,
    authenticated with a bearer token. The endpoint answers with
    ``{"result": ...}`` on success and ``{"error": "..."}`` otherwise.
    Values are stored as JSON strings.

    Args:
        url: Base URL of the REST API
        token: Bearer token with read/write access
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    def _command(self, *args: str) -> Any:
        try:
            response = self._client.post("", json=list(args))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("storage_error", command=args[0], status=e.response.status_code)
            raise StorageError(
                f"KV command {args[0]} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error("storage_unreachable", command=args[0], error=str(e))
            raise StorageError(f"Error reaching KV store: {e}") from e

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid response from KV store: {e}") from e

        if "error" in payload:
            raise StorageError(f"KV command {args[0]} failed: {payload['error']}")
        return payload.get("result")

    def get(self, key: str) -> Any | None:
        raw = self._command("GET", key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._command("SET", key, json.dumps(value))

    def delete(self, key: str) -> None:
        self._command("DEL", key)

    def close(self) -> None:
        self._client.close()
