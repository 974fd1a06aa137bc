"""
Context resolution for Netlify Blobs.

A context bundles the credentials and routing information a store needs:
token, site ID, and optionally an edge URL, a primary region and a deploy ID.
Contexts are layered, highest priority first:

1. Options passed explicitly to the store constructor
2. Base64 JSON in the NETLIFY_BLOBS_CONTEXT environment variable
3. Base64 JSON in the process-global context slot

The first complete layer (non-empty token and site ID) wins. Explicit options
are then written over the chosen layer.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MissingBlobsEnvironmentError

__all__ = [
    "BlobsContext",
    "CONTEXT_ENV_VAR",
    "resolve_context",
    "resolve_store_context",
    "read_environment_context",
    "read_global_context",
    "set_environment_context",
    "set_global_context",
    "clear_global_context",
]

logger = logging.getLogger(__name__)

CONTEXT_ENV_VAR = "NETLIFY_BLOBS_CONTEXT"

# Process-global context blob, the Python counterpart of a runtime-injected global
_global_context: Optional[str] = None


class BlobsContext(BaseModel):
    """
    Credentials and routing information for a store.

    Field aliases match the JSON keys used in serialized context blobs.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    token: Optional[str] = Field(default=None, description="Bearer token")
    site_id: Optional[str] = Field(default=None, alias="siteID", description="Site ID")
    edge_url: Optional[str] = Field(default=None, alias="edgeURL", description="Edge endpoint; enables edge mode")
    primary_region: Optional[str] = Field(default=None, alias="primaryRegion", description="Default region")
    deploy_id: Optional[str] = Field(default=None, alias="deployID", description="Current deploy ID")

    @property
    def is_complete(self) -> bool:
        """Whether this context carries both a token and a site ID."""
        return bool(self.token) and bool(self.site_id)

    def merged_with(self, overrides: BlobsContext) -> BlobsContext:
        """Return a copy with every non-empty field of `overrides` written over this context."""
        update = {
            name: value
            for name, value in overrides.model_dump().items()
            if value
        }
        if not update:
            return self
        return self.model_copy(update=update)

    def to_base64(self) -> str:
        """Serialize to the base64 JSON form used in environment and global slots."""
        payload = json.dumps(self.model_dump(by_alias=True, exclude_none=True))
        return base64.b64encode(payload.encode("utf-8")).decode("ascii")

    @classmethod
    def from_base64(cls, value: str) -> Optional[BlobsContext]:
        """
        Parse a base64 JSON context blob.

        Returns:
            The decoded context, or None if the blob cannot be decoded
        """
        try:
            data = json.loads(base64.b64decode(value).decode("utf-8"))
            return cls.model_validate(data)
        except (binascii.Error, UnicodeDecodeError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring undecodable Netlify Blobs context: {type(e).__name__}")
            return None


def read_environment_context() -> Optional[BlobsContext]:
    """Read the context from the NETLIFY_BLOBS_CONTEXT environment variable."""
    value = os.getenv(CONTEXT_ENV_VAR)
    if not value:
        return None
    return BlobsContext.from_base64(value)


def read_global_context() -> Optional[BlobsContext]:
    """Read the context from the process-global slot."""
    if not _global_context:
        return None
    return BlobsContext.from_base64(_global_context)


def resolve_context(*sources: Optional[BlobsContext]) -> BlobsContext:
    """
    Return the first complete context among `sources`, in priority order.

    Raises:
        MissingBlobsEnvironmentError: If no source carries both token and site ID
    """
    for source in sources:
        if source is not None and source.is_complete:
            return source
    raise MissingBlobsEnvironmentError(["siteID", "token"])


def resolve_store_context(explicit: BlobsContext) -> BlobsContext:
    """
    Resolve the context for a new store.

    Layers explicit options over the environment and global contexts, then
    writes explicit fields over whichever layer was selected.
    """
    context = resolve_context(explicit, read_environment_context(), read_global_context())
    if context is not explicit:
        logger.debug("Using Netlify Blobs context from the environment")
        context = context.merged_with(explicit)
    return context


def _as_context(context: Union[BlobsContext, dict]) -> BlobsContext:
    if isinstance(context, BlobsContext):
        return context
    return BlobsContext.model_validate(context)


def set_environment_context(context: Union[BlobsContext, dict]) -> None:
    """
    Write a context into NETLIFY_BLOBS_CONTEXT.

    Stores created later in this process, or in child processes that inherit
    the environment, pick it up automatically.
    """
    os.environ[CONTEXT_ENV_VAR] = _as_context(context).to_base64()


def set_global_context(context: Union[BlobsContext, dict, str]) -> None:
    """Place a context, or an already encoded context blob, in the process-global slot."""
    global _global_context
    _global_context = context if isinstance(context, str) else _as_context(context).to_base64()


def clear_global_context() -> None:
    """Empty the process-global slot."""
    global _global_context
    _global_context = None
