"""
Tests for body encoding and streamed reads.
"""
from __future__ import annotations

import httpx
import pytest

from netlify_blobs.body import BlobStream, encode_body, materialize_body
from netlify_blobs.errors import BlobsValidationError


async def _streamed(content: bytes, headers=None) -> httpx.Response:
    """Open a streamed response the way stores receive them."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers=headers, content=content)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    request = client.build_request("GET", "https://signed.url/blob")
    return await client.send(request, stream=True)


class TestEncodeBody:
    """Test upload body encoding."""

    def test_text_is_utf8(self):
        assert encode_body("Ñetlify") == "Ñetlify".encode("utf-8")

    def test_bytes_like(self):
        assert encode_body(b"abc") == b"abc"
        assert encode_body(bytearray(b"abc")) == b"abc"
        assert encode_body(memoryview(b"abc")) == b"abc"

    def test_rejects_other_types(self):
        with pytest.raises(BlobsValidationError, match="must be a string or a bytes-like object, got int"):
            encode_body(42)


@pytest.mark.asyncio
class TestMaterializeBody:
    """Test conversion of streamed responses."""

    async def test_text_closes_response(self):
        response = await _streamed(b"hello")

        assert await materialize_body(response, "text") == "hello"
        assert response.is_closed

    async def test_text_honours_charset(self):
        response = await _streamed("olé".encode("latin-1"), headers={"content-type": "text/plain; charset=latin-1"})

        assert await materialize_body(response, "text") == "olé"

    async def test_invalid_json_raises(self):
        response = await _streamed(b"{nope")

        with pytest.raises(ValueError):
            await materialize_body(response, "json")
        assert response.is_closed

    async def test_stream_chunks(self):
        response = await _streamed(b"x" * 10)
        stream = await materialize_body(response, "stream")

        chunks = [chunk async for chunk in stream]

        assert b"".join(chunks) == b"x" * 10
        assert response.is_closed

    async def test_stream_closed_early(self):
        response = await _streamed(b"data")

        async with BlobStream(response) as stream:
            assert stream is not None

        assert response.is_closed
