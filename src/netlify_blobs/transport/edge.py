"""
Edge transport.

Sends every operation as a single authenticated request to the edge endpoint:
``{edgeURL}/[region:{region}/]{siteID}/{scope}/{key}``.
"""
from __future__ import annotations

import logging

import httpx

from ..errors import BlobsInternalError
from ..headers import METADATA_HEADER_INTERNAL, NF_ERROR
from .base import BlobRequest, HTTPTransport

__all__ = ["EdgeTransport"]

logger = logging.getLogger(__name__)


class EdgeTransport(HTTPTransport):
    """Direct, single-hop access through the edge endpoint."""

    mode = "edge"

    def __init__(self, *, edge_url: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.edge_url = edge_url.rstrip("/")

    def url_for(self, key: str) -> str:
        region_segment = f"region:{self.region}/" if self.region else ""
        return f"{self.edge_url}/{region_segment}{self._blob_path(key)}"

    async def send(self, request: BlobRequest) -> httpx.Response:
        url = self.url_for(request.key)
        headers = {**self._auth_headers(), **request.headers}
        if request.metadata:
            headers[METADATA_HEADER_INTERNAL] = request.metadata

        logger.debug(f"Edge {request.method} for key {request.key!r} in {self.scope}")
        return await self._send_storage(request.method, url, headers=headers, content=request.body)

    def error_for(self, response: httpx.Response) -> BlobsInternalError:
        return BlobsInternalError.from_status(response.status_code, detail=response.headers.get(NF_ERROR))
