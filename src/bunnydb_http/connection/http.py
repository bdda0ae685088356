"""
HTTP Transport Implementation for the Bunny Database client.

Sends pipeline payloads with httpx and classifies failures so the client
can decide whether to retry.
"""

import asyncio
import logging

import httpx

from ..exceptions import TransportError, TransportErrorKind
from .base import BaseTransport, TransportResponse

logger = logging.getLogger(__name__)


def classify_request_error(error: Exception) -> TransportErrorKind:
    """Map an httpx exception raised before a response arrived to a transport error kind."""
    if isinstance(error, httpx.TimeoutException):
        return TransportErrorKind.TIMEOUT
    if isinstance(error, httpx.ConnectError):
        return TransportErrorKind.CONNECT
    if isinstance(error, httpx.UnsupportedProtocol):
        return TransportErrorKind.OTHER
    if isinstance(error, httpx.RequestError):
        return TransportErrorKind.REQUEST
    return TransportErrorKind.OTHER


class HTTPTransport(BaseTransport):
    """
    httpx-based pipeline transport.

    The underlying ``httpx.AsyncClient`` holds the connection pool and is safe
    to share between concurrent calls. When no client is supplied one is
    created on first use and closed by ``close()``; a supplied client is only
    borrowed.
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        """
        Initialize HTTP transport.

        Args:
            client: Optional preconfigured httpx client (proxies, TLS, limits)
        """
        self._client = client
        self._owns_client = client is None

    @property
    def is_connected(self) -> bool:
        """Check if an HTTP client is available."""
        return self._client is not None

    def connect(self) -> httpx.AsyncClient:
        """Create the HTTP client if needed and return it."""
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def post(
        self,
        url: str,
        headers: dict[str, str],
        body: bytes,
        timeout: float,
    ) -> TransportResponse:
        """
        POST the body and read the full response.

        The timeout bounds the whole attempt, including reading the body.

        Raises:
            TransportError: Classified as timeout, connect, request, body or other
        """
        client = self.connect()
        try:
            return await asyncio.wait_for(self._round_trip(client, url, headers, body, timeout), timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"request timed out after {timeout:.3f}s",
                TransportErrorKind.TIMEOUT,
                cause=e,
            ) from e

    async def _round_trip(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str],
        body: bytes,
        timeout: float,
    ) -> TransportResponse:
        try:
            request = client.build_request("POST", url, content=body, headers=headers, timeout=timeout)
            response = await client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            kind = classify_request_error(e)
            logger.debug(f"Pipeline request failed ({kind.value}): {e!r}")
            raise TransportError(f"Request failed: {e}", kind, cause=e) from e

        try:
            content = await response.aread()
        except httpx.TimeoutException as e:
            raise TransportError(f"Reading response body timed out: {e}", TransportErrorKind.TIMEOUT, cause=e) from e
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise TransportError(f"Reading response body failed: {e}", TransportErrorKind.BODY, cause=e) from e
        finally:
            await response.aclose()

        return TransportResponse(status=response.status_code, body=content)
