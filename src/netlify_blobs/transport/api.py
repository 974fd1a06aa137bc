"""
API transport.

Reads and writes go through a two-hop flow: the management API issues a
short-lived signed URL, then the operation runs unauthenticated against that
URL. HEAD and DELETE are answered by the management API directly.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..errors import BlobsInternalError
from ..headers import METADATA_HEADER_EXTERNAL, METADATA_HEADER_INTERNAL, NF_REQUEST_ID, SIGNED_URL_ACCEPT
from .base import BlobRequest, HTTPTransport

__all__ = ["APITransport", "SignedURL"]

logger = logging.getLogger(__name__)

# Methods the management API serves itself, without a signed URL
DIRECT_METHODS = frozenset({"HEAD", "DELETE"})


class SignedURL(BaseModel):
    """Management API response carrying a pre-signed storage URL."""
    url: str = Field(..., min_length=1, description="Pre-signed storage URL")


class APITransport(HTTPTransport):
    """Access through the management API, using signed URLs for reads and writes."""

    mode = "api"

    def __init__(self, *, api_url: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_url = api_url.rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.api_url}/api/v1/blobs/{self._blob_path(key)}"

    def _params(self) -> Optional[Dict[str, str]]:
        return {"region": self.region} if self.region else None

    async def send(self, request: BlobRequest) -> httpx.Response:
        if request.method in DIRECT_METHODS:
            logger.debug(f"API {request.method} for key {request.key!r} in {self.scope}")
            return await self._send_storage(
                request.method,
                self.url_for(request.key),
                headers={**self._auth_headers(), **request.headers},
                params=self._params(),
            )

        signed_url = await self._signed_url(request)

        headers = dict(request.headers)
        if request.metadata:
            headers[METADATA_HEADER_INTERNAL] = request.metadata

        logger.debug(f"Signed URL {request.method} for key {request.key!r} in {self.scope}")
        return await self._send_storage(request.method, signed_url, headers=headers, content=request.body)

    async def _signed_url(self, request: BlobRequest) -> str:
        """
        Ask the management API for a signed URL for `request`.

        Not retried: the API answer is authoritative for this operation.

        Raises:
            BlobsInternalError: If the API refuses or returns an unusable body
        """
        url = self.url_for(request.key)
        headers = {**self._auth_headers(), "accept": SIGNED_URL_ACCEPT}
        if request.metadata:
            headers[METADATA_HEADER_EXTERNAL] = request.metadata

        response = await self._guard(
            request.method,
            url,
            lambda: self.client.request(request.method, url, headers=headers, params=self._params()),
        )

        if response.status_code != 200:
            raise self.error_for(response)

        try:
            return SignedURL.model_validate_json(response.content).url
        except ValidationError as e:
            raise BlobsInternalError(
                f"Netlify Blobs could not read the signed URL returned by the API ({e.error_count()} errors)",
                status_code=response.status_code,
                request_id=response.headers.get(NF_REQUEST_ID),
            ) from e

    def error_for(self, response: httpx.Response) -> BlobsInternalError:
        return BlobsInternalError.from_status(response.status_code, request_id=response.headers.get(NF_REQUEST_ID))
