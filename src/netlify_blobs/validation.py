"""
Identifier validation for Netlify Blobs.

Pure checks on keys, store names, deploy IDs and regions. Every failure
raises BlobsValidationError before any request is sent.
"""
from __future__ import annotations

import re
from typing import Any, Optional

from .errors import BlobsValidationError

__all__ = [
    "LEGACY_STORE_INTERNAL_PREFIX",
    "REGION_AUTO",
    "SUPPORTED_REGIONS",
    "validate_key",
    "validate_store_name",
    "validate_deploy_id",
    "validate_region",
    "validate_write_options",
    "store_scope",
    "deploy_scope",
]

KEY_MAX_BYTES = 600
STORE_NAME_MAX_BYTES = 64

# Store names with this prefix address stores created before scopes existed
LEGACY_STORE_INTERNAL_PREFIX = "netlify-internal/legacy-namespace/"

DEPLOY_ID_PATTERN = re.compile(r"^\w{1,24}$", re.ASCII)

REGION_AUTO = "auto"
SUPPORTED_REGIONS = ("us-east-1", "us-east-2", "eu-central-1", "ap-southeast-1", "ap-southeast-2")


def validate_key(key: str) -> None:
    """
    Validate a blob key.

    Rules:
    - Must be a non-empty string
    - Must not start with '/'
    - UTF-8 encoding must be at most 600 bytes

    Raises:
        BlobsValidationError: If the key violates any rule
    """
    if not isinstance(key, str):
        raise BlobsValidationError("Blob key must be a string.")

    if key == "":
        raise BlobsValidationError("Blob key must not be empty.")

    if key.startswith("/"):
        raise BlobsValidationError("Blob key must not start with forward slash (/).")

    if len(key.encode("utf-8")) > KEY_MAX_BYTES:
        raise BlobsValidationError(
            f"Blob key must be a sequence of Unicode characters whose UTF-8 encoding is at most "
            f"{KEY_MAX_BYTES} bytes long."
        )


def validate_store_name(name: str) -> None:
    """
    Validate a store name.

    Rules:
    - Must not contain '/'
    - UTF-8 encoding must be at most 64 bytes

    Raises:
        BlobsValidationError: If the name violates any rule
    """
    if not isinstance(name, str):
        raise BlobsValidationError("Store name must be a string.")

    if "/" in name:
        raise BlobsValidationError("Store name must not contain forward slashes (/).")

    if len(name.encode("utf-8")) > STORE_NAME_MAX_BYTES:
        raise BlobsValidationError(
            f"Store name must be a sequence of Unicode characters whose UTF-8 encoding is at most "
            f"{STORE_NAME_MAX_BYTES} bytes long."
        )


def validate_deploy_id(deploy_id: str) -> None:
    """Validate a deploy ID, naming the offending value on failure."""
    if not isinstance(deploy_id, str) or not DEPLOY_ID_PATTERN.match(deploy_id):
        raise BlobsValidationError(f"'{deploy_id}' is not a valid Netlify deploy ID.")


def validate_region(region: str) -> None:
    """Validate that an explicitly supplied region is supported."""
    if region not in SUPPORTED_REGIONS:
        raise BlobsValidationError(
            f"{region} is not a supported Netlify Blobs region. "
            f"Supported values are: {', '.join(SUPPORTED_REGIONS)}."
        )


def validate_write_options(only_if_match: Any = None, only_if_new: Any = None) -> None:
    """
    Validate the conditional write options.

    `only_if_match` must be a non-empty ETag string and `only_if_new` a boolean;
    the two options are mutually exclusive.
    """
    if only_if_match is not None and only_if_new is not None:
        raise BlobsValidationError(
            "The 'onlyIfMatch' and 'onlyIfNew' options are mutually exclusive. Using 'onlyIfMatch' "
            "will make the write succeed only if there is an entry for the key with the given "
            "content, while 'onlyIfNew' will make the write succeed only if there is no entry "
            "for the key."
        )

    if only_if_match is not None and not isinstance(only_if_match, str):
        raise BlobsValidationError("The 'onlyIfMatch' property expects a string representing an ETag.")

    if only_if_match == "":
        raise BlobsValidationError("The 'onlyIfMatch' property expects a non-empty string representing an ETag.")

    if only_if_new is not None and not isinstance(only_if_new, bool):
        raise BlobsValidationError(
            "The 'onlyIfNew' property expects a boolean indicating whether the write should fail "
            "if an entry for the key already exists."
        )


def store_scope(name: str) -> str:
    """
    Build the scope segment for a site-wide store.

    Legacy-namespace names map to the literal scope that follows the prefix,
    which must itself be a valid store name. Every other name is validated and prefixed with 'site:'.

    Examples:
        >>> store_scope("production")
        'site:production'

        >>> store_scope("netlify-internal/legacy-namespace/oldie")
        'oldie'
    """
    if name.startswith(LEGACY_STORE_INTERNAL_PREFIX):
        legacy_scope = name[len(LEGACY_STORE_INTERNAL_PREFIX):]
        if not legacy_scope:
            raise BlobsValidationError("Legacy store names must include a namespace after the prefix.")
        validate_store_name(legacy_scope)
        return legacy_scope

    validate_store_name(name)
    return f"site:{name}"


def deploy_scope(deploy_id: str, name: Optional[str] = None) -> str:
    """Build the scope segment for a deploy-wide store, optionally named."""
    validate_deploy_id(deploy_id)
    if not name:
        return f"deploy:{deploy_id}"

    validate_store_name(name)
    return f"deploy:{deploy_id}:{name}"
