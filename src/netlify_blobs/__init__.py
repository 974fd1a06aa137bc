"""
Netlify Blobs client for Python.

Key-value storage scoped to a Netlify site or to one of its deploys.
"""
from __future__ import annotations

from .body import BlobStream
from .client import BlobEntry, BlobMetadata, WriteResult
from .environment import BlobsContext, clear_global_context, set_environment_context, set_global_context
from .errors import (
    BlobsConfigurationError,
    BlobsError,
    BlobsInternalError,
    BlobsNetworkError,
    BlobsValidationError,
    MetadataDecodeError,
    MetadataSizeError,
    MissingBlobsEnvironmentError,
    MissingTransportError,
)
from .settings import Settings, create_settings_from_env
from .store import Store, get_deploy_store, get_store

__version__ = "0.1.0"

__all__ = [
    "get_store",
    "get_deploy_store",
    "set_environment_context",
    "set_global_context",
    "clear_global_context",
    "Store",
    "BlobsContext",
    "Settings",
    "create_settings_from_env",
    "BlobEntry",
    "BlobMetadata",
    "WriteResult",
    "BlobStream",
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
