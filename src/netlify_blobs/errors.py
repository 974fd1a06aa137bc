"""
Netlify Blobs error classes.

Provides a clear taxonomy of the errors a store can raise so calling code
can branch on the kind of failure. Not-found reads and conditional write
mismatches are modelled as results, never as errors.
"""
from __future__ import annotations

from typing import Optional, Sequence


class BlobsError(Exception):
    """Base class for all Netlify Blobs errors."""
    pass


class BlobsConfigurationError(BlobsError):
    """
    The store cannot be constructed with the available configuration.

    Raised synchronously by the store constructors, before any network access.
    """
    pass


class MissingBlobsEnvironmentError(BlobsConfigurationError):
    """
    No usable credentials could be assembled from options, environment or
    the process-global context.
    """

    def __init__(self, required: Sequence[str]):
        self.required = list(required)
        super().__init__(
            "The environment has not been configured to use Netlify Blobs. "
            "To use it manually, supply the following properties when creating a store: "
            f"{', '.join(self.required)}"
        )


class MissingTransportError(BlobsConfigurationError):
    """No HTTP client was injected and none is available in this runtime."""

    def __init__(self):
        super().__init__(
            "Netlify Blobs could not find an HTTP client to use. You can either restore the "
            "default client factory or supply your own `httpx.AsyncClient` using the `client` argument."
        )


class BlobsValidationError(BlobsError, ValueError):
    """
    An argument failed validation.

    Raised when:
    - A key, store name, deploy ID or region is malformed
    - Write options are mistyped or mutually exclusive
    - A body or metadata object cannot be sent
    """
    pass


class MetadataSizeError(BlobsValidationError):
    """Encoded metadata exceeds the maximum header size."""
    pass


class BlobsInternalError(BlobsError):
    """
    The backend answered with an unexpected status code.

    Raised after retries are exhausted for transient statuses, or immediately
    for non-retryable ones. Carries the correlation data sent by the backend.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.request_id = request_id
        self.detail = detail

    @classmethod
    def from_status(
        cls,
        status_code: int,
        *,
        request_id: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> BlobsInternalError:
        """Build the error surfaced for a failed HTTP response."""
        if detail:
            details = detail
        elif request_id:
            details = f"{status_code} status code, ID: {request_id}"
        else:
            details = f"{status_code} status code"
        return cls(
            f"Netlify Blobs has generated an internal error ({details})",
            status_code=status_code,
            request_id=request_id,
            detail=detail,
        )


class MetadataDecodeError(BlobsInternalError):
    """
    A metadata header could not be decoded.

    Signals a protocol mismatch between this client and the backend rather
    than a caller mistake, so the parse error itself is not surfaced.
    """

    def __init__(self):
        super().__init__(
            "An internal error occurred while trying to retrieve the metadata for an entry. "
            "Please try updating to the latest version of the Netlify Blobs client."
        )


class BlobsNetworkError(BlobsError):
    """The HTTP transport kept failing after all retry attempts."""
    pass


__all__ = [
    "BlobsError",
    "BlobsConfigurationError",
    "MissingBlobsEnvironmentError",
    "MissingTransportError",
    "BlobsValidationError",
    "MetadataSizeError",
    "BlobsInternalError",
    "MetadataDecodeError",
    "BlobsNetworkError",
]
