"""
HTTP header names and fixed header values used on the wire.
"""
from __future__ import annotations

# Encoded user metadata on storage requests and responses
METADATA_HEADER_INTERNAL = "x-amz-meta-user"

# Encoded user metadata sent to the management API when requesting a signed URL
METADATA_HEADER_EXTERNAL = "netlify-blobs-metadata"

# Correlation ID on management API error responses
NF_REQUEST_ID = "x-nf-request-id"

# Error details on edge error responses
NF_ERROR = "x-nf-error"

RATE_LIMIT_RESET = "X-RateLimit-Reset"

SIGNED_URL_ACCEPT = "application/json;type=signed-url"

WRITE_CACHE_CONTROL = "max-age=0, stale-while-revalidate=60"

__all__ = [
    "METADATA_HEADER_INTERNAL",
    "METADATA_HEADER_EXTERNAL",
    "NF_REQUEST_ID",
    "NF_ERROR",
    "RATE_LIMIT_RESET",
    "SIGNED_URL_ACCEPT",
    "WRITE_CACHE_CONTROL",
]
