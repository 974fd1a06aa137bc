"""
Request executor for Netlify Blobs.

Maps each logical operation to an HTTP method and headers, hands it to the
store's transport, and classifies the response:

- 404 on a read is a missing entry (None), on a delete a success
- 412 on a conditional write is an unmodified result
- 304 on a conditional read keeps the etag and metadata but drops the body
- any other non-2xx status becomes a BlobsInternalError
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from .body import BodyType, materialize_body
from .headers import METADATA_HEADER_INTERNAL, WRITE_CACHE_CONTROL
from .metadata import decode_metadata
from .transport.base import BlobRequest, BlobTransport

__all__ = ["BlobEntry", "BlobMetadata", "WriteResult", "RequestExecutor"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobMetadata:
    """
    Etag and user metadata of an entry.

    Attributes:
        etag: Opaque version identifier assigned by the backend
        metadata: User metadata, empty when none was stored
    """
    etag: Optional[str]
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BlobEntry:
    """
    An entry read together with its etag and metadata.

    `data` is None when a conditional read found the entry unchanged.
    """
    data: Any
    etag: Optional[str]
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WriteResult:
    """
    Outcome of a write.

    Attributes:
        modified: False when a conditional write was rejected by the backend
        etag: Etag of the new entry, when it was written
    """
    modified: bool
    etag: Optional[str] = None


class RequestExecutor:
    """Runs logical blob operations over a transport."""

    def __init__(self, transport: BlobTransport) -> None:
        self.transport = transport

    async def get(self, key: str, *, body_type: BodyType = "text", etag: Optional[str] = None) -> Optional[BlobEntry]:
        """
        Read an entry.

        Args:
            key: Validated blob key
            body_type: Representation of the returned data
            etag: Known etag; the backend answers 304 if it is still current

        Returns:
            BlobEntry, or None if the entry does not exist
        """
        headers = {"if-none-match": etag} if etag else {}
        response = await self.transport.send(BlobRequest(method="GET", key=key, headers=headers))

        if response.status_code == 404:
            await response.aclose()
            return None

        if response.status_code == 304:
            await response.aclose()
            return BlobEntry(data=None, **self._describe(response))

        if not response.is_success:
            await response.aclose()
            raise self.transport.error_for(response)

        try:
            described = self._describe(response)
        except Exception:
            await response.aclose()
            raise

        data = await materialize_body(response, body_type)
        return BlobEntry(data=data, **described)

    async def head(self, key: str) -> Optional[BlobMetadata]:
        """Read the etag and metadata of an entry without its body."""
        response = await self.transport.send(BlobRequest(method="HEAD", key=key))
        await response.aclose()

        if response.status_code == 404:
            return None

        if not response.is_success:
            raise self.transport.error_for(response)

        return BlobMetadata(**self._describe(response))

    async def put(
        self,
        key: str,
        body: bytes,
        *,
        metadata: Optional[str] = None,
        only_if_match: Optional[str] = None,
        only_if_new: Optional[bool] = None,
    ) -> WriteResult:
        """
        Write an entry.

        Args:
            key: Validated blob key
            body: Encoded body
            metadata: Encoded metadata header value
            only_if_match: Write only if the current etag matches
            only_if_new: Write only if the key has no entry

        Returns:
            WriteResult with the new etag, or modified=False on 412
        """
        headers = {"cache-control": WRITE_CACHE_CONTROL}
        if only_if_match is not None:
            headers["if-match"] = only_if_match
        elif only_if_new:
            headers["if-none-match"] = "*"

        request = BlobRequest(method="PUT", key=key, headers=headers, body=body, metadata=metadata)
        response = await self.transport.send(request)
        await response.aclose()

        if response.status_code == 412:
            logger.debug(f"Conditional write for key {key!r} was not applied")
            return WriteResult(modified=False)

        if not response.is_success:
            raise self.transport.error_for(response)

        return WriteResult(modified=True, etag=response.headers.get("etag"))

    async def delete(self, key: str) -> None:
        """Delete an entry. Missing entries are not an error."""
        response = await self.transport.send(BlobRequest(method="DELETE", key=key))
        await response.aclose()

        if response.status_code == 404 or response.is_success:
            return

        raise self.transport.error_for(response)

    @staticmethod
    def _describe(response: httpx.Response) -> Dict[str, Any]:
        return {
            "etag": response.headers.get("etag"),
            "metadata": decode_metadata(response.headers.get(METADATA_HEADER_INTERNAL)),
        }
