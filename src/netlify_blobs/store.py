"""
Store handles for Netlify Blobs.

A Store is bound to one (site, scope, region) tuple. Its constructors resolve
the context, validate every identifier and pick the transport synchronously,
so misconfiguration surfaces before any network access.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional, Union

import httpx

from .body import BodyType, encode_body, validate_body_type
from .client import BlobEntry, BlobMetadata, RequestExecutor, WriteResult
from .environment import BlobsContext, resolve_store_context
from .errors import (
    BlobsConfigurationError,
    BlobsValidationError,
    MissingBlobsEnvironmentError,
    MissingTransportError,
)
from .metadata import encode_metadata
from .settings import Settings, create_settings_from_env
from .transport import BlobTransport, make_transport
from .validation import (
    REGION_AUTO,
    deploy_scope,
    store_scope,
    validate_key,
    validate_region,
    validate_write_options,
)

__all__ = ["Store", "get_store", "get_deploy_store", "default_client_factory"]

logger = logging.getLogger(__name__)

BlobData = Union[str, bytes, bytearray, memoryview]


def _create_default_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_s, connect=5.0),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
    )


# Builds the HTTP client for stores created without one. Runtimes without
# outbound HTTP may set this to None; store construction then fails.
default_client_factory: Optional[Callable[[Settings], httpx.AsyncClient]] = _create_default_client


class Store:
    """
    Handle on one blob store.

    Operations are coroutines and may run concurrently; the handle holds no
    mutable state besides the HTTP client it may own.
    """

    def __init__(
        self,
        *,
        name: str,
        transport: BlobTransport,
        owns_client: bool = False,
    ) -> None:
        self.name = name
        self._transport = transport
        self._executor = RequestExecutor(transport)
        self._owns_client = owns_client

    @property
    def mode(self) -> str:
        """Transport mode: 'edge' or 'api'."""
        return self._transport.mode

    async def get(self, key: str, *, type: BodyType = "text") -> Any:
        """
        Read the value of an entry.

        Args:
            key: Blob key
            type: 'text' (default), 'json', 'bytes' or 'stream'

        Returns:
            The value in the requested representation, or None if missing
        """
        validate_key(key)
        validate_body_type(type)
        entry = await self._executor.get(key, body_type=type)
        return entry.data if entry is not None else None

    async def get_with_metadata(
        self,
        key: str,
        *,
        etag: Optional[str] = None,
        type: BodyType = "text",
    ) -> Optional[BlobEntry]:
        """
        Read an entry with its etag and metadata.

        When `etag` is still current, the returned entry has `data=None`.
        """
        validate_key(key)
        validate_body_type(type)
        return await self._executor.get(key, body_type=type, etag=etag)

    async def get_metadata(self, key: str) -> Optional[BlobMetadata]:
        """Read the etag and metadata of an entry, or None if missing."""
        validate_key(key)
        return await self._executor.head(key)

    async def set(
        self,
        key: str,
        data: BlobData,
        *,
        metadata: Optional[Mapping[str, Any]] = None,
        only_if_match: Optional[str] = None,
        only_if_new: Optional[bool] = None,
    ) -> WriteResult:
        """
        Write an entry.

        Args:
            key: Blob key
            data: String or bytes-like value
            metadata: JSON-serializable mapping stored alongside the value
            only_if_match: Write only if the current etag equals this one
            only_if_new: Write only if the key has no entry

        Returns:
            WriteResult; `modified` is False when a condition was not met
        """
        validate_key(key)
        validate_write_options(only_if_match=only_if_match, only_if_new=only_if_new)
        encoded_metadata = encode_metadata(metadata)
        body = encode_body(data)

        return await self._executor.put(
            key,
            body,
            metadata=encoded_metadata,
            only_if_match=only_if_match,
            only_if_new=only_if_new,
        )

    async def set_json(
        self,
        key: str,
        value: Any,
        *,
        metadata: Optional[Mapping[str, Any]] = None,
        only_if_match: Optional[str] = None,
        only_if_new: Optional[bool] = None,
    ) -> WriteResult:
        """Write a JSON-serializable value as compact JSON text."""
        try:
            payload = json.dumps(value, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise BlobsValidationError(f"Value is not JSON-serializable: {e}") from e
        return await self.set(
            key,
            payload,
            metadata=metadata,
            only_if_match=only_if_match,
            only_if_new=only_if_new,
        )

    async def delete(self, key: str) -> None:
        """Delete an entry. Deleting a missing entry succeeds."""
        validate_key(key)
        await self._executor.delete(key)

    async def aclose(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            await self._transport.client.aclose()

    async def __aenter__(self) -> Store:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"Store(name={self.name!r}, mode={self.mode!r})"


def _explicit_context(
    *,
    site_id: Optional[str],
    token: Optional[str],
    edge_url: Optional[str],
    deploy_id: Optional[str] = None,
) -> BlobsContext:
    return BlobsContext(site_id=site_id, token=token, edge_url=edge_url, deploy_id=deploy_id)


def _resolve_client(
    client: Optional[httpx.AsyncClient],
    settings: Settings,
) -> tuple[httpx.AsyncClient, bool]:
    if client is not None:
        return client, False
    if default_client_factory is None:
        raise MissingTransportError()
    return default_client_factory(settings), True


def _build_store(
    *,
    name: str,
    context: BlobsContext,
    scope: str,
    region: Optional[str],
    client: Optional[httpx.AsyncClient],
    settings: Settings,
) -> Store:
    http_client, owns_client = _resolve_client(client, settings)
    transport = make_transport(context, client=http_client, scope=scope, settings=settings, region=region)
    logger.debug(
        f"Created {transport.mode} store {name!r} for site {context.site_id} "
        f"(scope: {scope}, region: {region or 'none'})"
    )
    return Store(name=name, transport=transport, owns_client=owns_client)


def get_store(
    name: Optional[str] = None,
    *,
    deploy_id: Optional[str] = None,
    site_id: Optional[str] = None,
    token: Optional[str] = None,
    edge_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> Store:
    """
    Get a handle on a site-wide store, or on a deploy store when `deploy_id` is given.

    Args:
        name: Store name; required unless `deploy_id` is given
        deploy_id: Deploy whose store to access
        site_id: Site ID, overriding the environment context
        token: Access token, overriding the environment context
        edge_url: Edge endpoint, overriding the environment context
        client: HTTP client to use instead of the default one
        settings: Client settings; loaded from the environment when omitted

    Raises:
        BlobsConfigurationError: If credentials, the store name or an HTTP client are missing
        BlobsValidationError: If the name or deploy ID is malformed
    """
    if deploy_id is not None:
        scope = deploy_scope(deploy_id, name or None)
        name = name or scope
    elif isinstance(name, str) and name:
        scope = store_scope(name)
    else:
        raise BlobsConfigurationError(
            "get_store requires the name of the store as a string or as the `name` keyword argument"
        )

    settings = settings or create_settings_from_env()
    context = resolve_store_context(
        _explicit_context(site_id=site_id, token=token, edge_url=edge_url, deploy_id=deploy_id)
    )
    return _build_store(name=name, context=context, scope=scope, region=None, client=client, settings=settings)


def get_deploy_store(
    name: Optional[str] = None,
    *,
    deploy_id: Optional[str] = None,
    region: Optional[str] = None,
    site_id: Optional[str] = None,
    token: Optional[str] = None,
    edge_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> Store:
    """
    Get a handle on the store of a deploy, optionally a named one.

    The deploy defaults to the one in the environment context. The region is,
    in order: `region`, the context's primary region, then 'auto' in API
    mode. Edge mode requires a region.

    Raises:
        MissingBlobsEnvironmentError: If no deploy ID is available
        BlobsConfigurationError: If edge mode is used without any region
        BlobsValidationError: If the deploy ID, name or region is malformed
    """
    settings = settings or create_settings_from_env()
    if region is not None:
        validate_region(region)

    context = resolve_store_context(
        _explicit_context(site_id=site_id, token=token, edge_url=edge_url, deploy_id=deploy_id)
    )

    if not context.deploy_id:
        raise MissingBlobsEnvironmentError(["deployID"])

    scope = deploy_scope(context.deploy_id, name)

    store_region = region or context.primary_region
    if not store_region:
        if context.edge_url:
            raise BlobsConfigurationError(
                "When accessing a deploy store, the Netlify Blobs client needs to be configured with "
                "a region, and one was not found in the environment. Set the `region` argument of "
                "get_deploy_store to one of the supported regions."
            )
        store_region = REGION_AUTO

    return _build_store(
        name=name or scope, context=context, scope=scope, region=store_region, client=client, settings=settings
    )
