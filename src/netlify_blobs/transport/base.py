"""
Transport interfaces for Netlify Blobs.

A transport turns a logical blob request into the HTTP exchange(s) that carry
it out, and describes backend failures. The edge and API transports present
this same contract, so the request executor never branches on the mode.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import httpx

from ..errors import BlobsInternalError, BlobsNetworkError
from ..retry import RetryPolicy, is_retryable_status

__all__ = ["BlobRequest", "BlobTransport", "HTTPTransport"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobRequest:
    """
    One logical operation on a blob.

    Attributes:
        method: HTTP method (GET, HEAD, PUT or DELETE)
        key: Validated blob key
        headers: Conditional and cache headers for the storage request
        body: Encoded body for writes
        metadata: Encoded metadata header value for writes
    """
    method: str
    key: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    metadata: Optional[str] = None


@runtime_checkable
class BlobTransport(Protocol):
    """Protocol for the strategies that reach the blob backend."""

    mode: str
    client: httpx.AsyncClient

    async def send(self, request: BlobRequest) -> httpx.Response:
        """
        Perform the storage operation for `request`.

        Returns:
            The storage response, opened in streaming mode. Callers own it and
            must close it or read it to completion.

        Raises:
            BlobsInternalError: If an intermediate request fails
            BlobsNetworkError: If the transport keeps failing after retries
        """
        ...

    def error_for(self, response: httpx.Response) -> BlobsInternalError:
        """Describe an unexpected storage response as an error."""
        ...


class HTTPTransport:
    """
    Shared plumbing for transports backed by an httpx client.

    Holds the resolved routing (site, scope, region) and sends storage
    requests through the retry policy.
    """

    mode = "http"

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        token: str,
        site_id: str,
        scope: str,
        region: Optional[str] = None,
        retry: Optional[RetryPolicy] = None,
    ) -> None:
        self.client = client
        self.site_id = site_id
        self.scope = scope
        self.region = region
        self.retry = retry or RetryPolicy()
        self._token = token

    def _auth_headers(self) -> Dict[str, str]:
        return {"authorization": f"Bearer {self._token}"}

    def _blob_path(self, key: str) -> str:
        return f"{self.site_id}/{self.scope}/{quote(key, safe='/')}"

    async def _send_storage(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        content: Optional[bytes] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Send a storage request with retries, returning a streamed response."""

        async def attempt() -> httpx.Response:
            request = self.client.build_request(method, url, headers=headers, content=content, params=params)
            response = await self.client.send(request, stream=True)
            if is_retryable_status(response.status_code):
                # Drain the body so the connection is released before the next attempt
                await response.aread()
                await response.aclose()
            return response

        return await self._guard(method, url, lambda: self.retry.call(attempt))

    async def _guard(
        self,
        method: str,
        url: str,
        send: Callable[[], Awaitable[httpx.Response]],
    ) -> httpx.Response:
        try:
            return await send()
        except httpx.TransportError as e:
            target = url.split("?", 1)[0]
            raise BlobsNetworkError(f"Netlify Blobs could not reach {method} {target}: {e}") from e
