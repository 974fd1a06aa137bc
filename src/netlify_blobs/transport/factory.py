"""
Transport factory.

Picks the transport strategy once, when a store is constructed, from the
resolved context: an edge URL selects the edge transport, otherwise the
management API is used.
"""
from __future__ import annotations

from typing import Optional

import httpx

from ..environment import BlobsContext
from ..retry import RetryPolicy
from ..settings import Settings
from .api import APITransport
from .base import BlobTransport
from .edge import EdgeTransport


def make_transport(
    context: BlobsContext,
    *,
    client: httpx.AsyncClient,
    scope: str,
    settings: Settings,
    region: Optional[str] = None,
) -> BlobTransport:
    """
    Create the transport for a store.

    Args:
        context: Complete context (token and site ID present)
        client: HTTP client used for every request of the store
        scope: Scope segment, e.g. "site:images" or "deploy:<id>"
        settings: Client settings (API URL, retry policy)
        region: Region segment, if the store is region-bound

    Returns:
        EdgeTransport when the context carries an edge URL, APITransport otherwise
    """
    common = dict(
        client=client,
        token=context.token,
        site_id=context.site_id,
        scope=scope,
        region=region,
        retry=RetryPolicy.from_settings(settings),
    )

    if context.edge_url:
        return EdgeTransport(edge_url=context.edge_url, **common)
    return APITransport(api_url=settings.api_url, **common)


__all__ = ["make_transport"]
