"""
Response body materialization.

Storage responses are always received in streaming mode. Callers choose the
representation they want; only the 'stream' type leaves the body unread.
"""
from __future__ import annotations

import json
from typing import Any, AsyncIterator, Literal, Union

import httpx

from .errors import BlobsValidationError

__all__ = ["BodyType", "BODY_TYPES", "BlobStream", "materialize_body", "encode_body", "validate_body_type"]

BodyType = Literal["text", "json", "bytes", "stream"]
BODY_TYPES = ("text", "json", "bytes", "stream")

CHUNK_SIZE = 64 * 1024


class BlobStream:
    """
    Async iterator over a blob body.

    The underlying response is closed once the body is exhausted, when
    `aclose()` is called, or when leaving an `async with` block.
    """

    def __init__(self, response: httpx.Response, chunk_size: int = CHUNK_SIZE):
        self._response = response
        self._chunks = response.aiter_bytes(chunk_size)

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise

    async def read(self) -> bytes:
        """Read the remaining body into memory."""
        chunks = [chunk async for chunk in self]
        return b"".join(chunks)

    async def aclose(self) -> None:
        await self._response.aclose()

    async def __aenter__(self) -> BlobStream:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def validate_body_type(body_type: str) -> None:
    if body_type not in BODY_TYPES:
        raise BlobsValidationError(
            f"Unsupported body type '{body_type}'. Expected one of: {', '.join(BODY_TYPES)}"
        )


async def materialize_body(response: httpx.Response, body_type: BodyType) -> Any:
    """
    Convert a streamed response body into the requested representation.

    Args:
        response: Response opened with ``stream=True``
        body_type: One of 'text', 'json', 'bytes' or 'stream'

    Returns:
        str, parsed JSON, bytes, or a BlobStream that owns the response
    """
    if body_type == "stream":
        return BlobStream(response)

    try:
        content = await response.aread()
    finally:
        await response.aclose()

    if body_type == "bytes":
        return content
    if body_type == "json":
        return json.loads(content)
    return content.decode(response.encoding or "utf-8")


def encode_body(data: Union[str, bytes, bytearray, memoryview]) -> bytes:
    """Encode a blob body for upload."""
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise BlobsValidationError(
        f"Blob data must be a string or a bytes-like object, got {type(data).__name__}. "
        "Use set_json to store other values."
    )
