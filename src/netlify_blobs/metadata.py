"""
Metadata codec for Netlify Blobs.

User metadata travels in a single HTTP header as tagged, base64-encoded JSON:
``b64;<base64(json)>``. The tag lets the decoder tell encoded values apart
from legacy raw values, which decode to an empty mapping.
"""
from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Mapping, Optional

from .errors import BlobsValidationError, MetadataDecodeError, MetadataSizeError

__all__ = ["BASE64_PREFIX", "METADATA_MAX_SIZE", "encode_metadata", "decode_metadata"]

BASE64_PREFIX = "b64;"
METADATA_MAX_SIZE = 2 * 1024


def encode_metadata(metadata: Optional[Mapping[str, Any]]) -> Optional[str]:
    """
    Encode a metadata mapping into a header value.

    Args:
        metadata: JSON-serializable mapping, or None

    Returns:
        Tagged header value, or None when there is no metadata to send

    Raises:
        BlobsValidationError: If metadata is not a JSON-serializable mapping
        MetadataSizeError: If the encoded value exceeds METADATA_MAX_SIZE bytes
    """
    if not metadata:
        return None

    if not isinstance(metadata, Mapping):
        raise BlobsValidationError("Metadata must be a mapping of JSON-serializable values.")

    try:
        payload = json.dumps(dict(metadata), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise BlobsValidationError(f"Metadata object is not JSON-serializable: {e}") from e

    encoded = BASE64_PREFIX + base64.b64encode(payload.encode("utf-8")).decode("ascii")

    if len(encoded.encode("utf-8")) > METADATA_MAX_SIZE:
        raise MetadataSizeError(
            f"Metadata object exceeds the maximum size of {METADATA_MAX_SIZE} bytes after encoding."
        )

    return encoded


def decode_metadata(header: Optional[str]) -> Dict[str, Any]:
    """
    Decode a metadata header value.

    Absent headers and values without the encoding tag yield an empty mapping.

    Raises:
        MetadataDecodeError: If a tagged value is not valid base64 JSON
    """
    if not header or not header.startswith(BASE64_PREFIX):
        return {}

    try:
        decoded = base64.b64decode(header[len(BASE64_PREFIX):], validate=True).decode("utf-8")
        metadata = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise MetadataDecodeError() from e

    if not isinstance(metadata, dict):
        raise MetadataDecodeError()

    return metadata
