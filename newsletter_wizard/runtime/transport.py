"""
HTTP transport for remote function calls.

The transport performs exactly one POST and reports what happened as an
AttemptOutcome. It does not retry, classify, or pick credentials; the
invoker does that.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

import httpx
from loguru import logger

from .outcome import AttemptOutcome, NetworkFailure, TimeoutFailure, outcome_from_response


@runtime_checkable
class Transport(Protocol):
    """Protocol for sending one JSON request."""

    async def send(
        self,
        url: str,
        content: bytes,
        headers: Mapping[str, str],
        timeout: float,
    ) -> AttemptOutcome:
        """
        POST `content` to `url` and report the outcome.

        Args:
            url: Full function URL.
            content: Encoded JSON body.
            headers: Request headers, including Authorization.
            timeout: Per-attempt timeout in seconds.

        Returns:
            The outcome of the attempt. Must not raise for transport failures.
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...


class HttpxTransport:
    """Pooled httpx transport.

    Features:
    - Connection pooling via httpx.AsyncClient
    - Transport errors reported as NetworkFailure / TimeoutFailure
    - Cancellation-safe: cancelling send() aborts the request and returns the
      connection to the pool

    Example:
        async with HttpxTransport() as transport:
            outcome = await transport.send(url, b"{}", headers, timeout=30.0)
    """

    def __init__(
        self,
        max_connections: int = 100,
        max_keepalive: int = 20,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the transport.

        Args:
            max_connections: Maximum total connections in pool.
            max_keepalive: Maximum keepalive connections.
            client: Optional pre-built client (not closed by this transport).
        """
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            keepalive_expiry=30.0,
        )
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client.

        Returns:
            The shared httpx.AsyncClient instance.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(limits=self._limits)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def send(
        self,
        url: str,
        content: bytes,
        headers: Mapping[str, str],
        timeout: float,
    ) -> AttemptOutcome:
        client = await self._get_client()
        try:
            response = await client.post(
                url,
                content=content,
                headers=dict(headers),
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            logger.debug(f"POST {url} timed out: {type(e).__name__}")
            return TimeoutFailure(timeout_ms=round(timeout * 1000))
        except (httpx.TransportError, OSError) as e:
            logger.debug(f"POST {url} failed: {type(e).__name__}")
            return NetworkFailure(detail=type(e).__name__)

        return outcome_from_response(
            response.status_code,
            response.content,
            response.headers,
        )
