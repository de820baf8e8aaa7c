"""Minimal JSON-RPC 2.0 client over HTTP."""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx

from solcanon.errors import RPCError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class RPCClient:
    """Synchronous JSON-RPC client for an execution-layer node.

    Parameters
    ----------
    url : str
        HTTP endpoint of the node.
    timeout : float
        Per-request timeout in seconds.
    transport : httpx.BaseTransport | None
        Custom transport, mainly for tests.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not url:
            raise RPCError("No RPC URL configured")
        self.url = url
        self._ids = itertools.count(1)
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def call(self, method: str, params: list | None = None) -> Any:
        """Call ``method`` and return its ``result``."""
        request_id = next(self._ids)
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": request_id,
        }
        logger.debug("RPC %s #%d %s", method, request_id, payload["params"])

        try:
            response = self._client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise RPCError(f"{method}: request to {self.url} failed: {e}") from e

        if response.status_code >= 400:
            raise RPCError(f"{method}: HTTP {response.status_code} from {self.url}")

        try:
            body = response.json()
        except ValueError as e:
            raise RPCError(f"{method}: response is not JSON") from e

        if not isinstance(body, dict):
            raise RPCError(f"{method}: unexpected response {body!r}")

        error = body.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RPCError(f"{method}: {message}", code=code)

        return body.get("result")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RPCClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
