"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and a wrapper for CLI
commands so every Typer command handles errors the same way.
"""
from __future__ import annotations

from typing import Callable, TypeVar

import typer

from ..errors import (
    BlobsConfigurationError,
    BlobsInternalError,
    BlobsNetworkError,
    BlobsValidationError,
)

T = TypeVar('T')


class BlobNotFoundError(Exception):
    """Raised by CLI commands when the requested entry does not exist."""

    def __init__(self, store: str, key: str):
        self.store = store
        self.key = key
        super().__init__(f"No entry for key '{key}' in store '{store}'")


# Checked in order; the first matching class wins
EXIT_CODES = (
    (BlobNotFoundError, 1),
    (BlobsValidationError, 2),
    (ValueError, 2),
    (BlobsInternalError, 3),
    (BlobsNetworkError, 3),
    (BlobsConfigurationError, 4),
)

FALLBACK_EXIT_CODE = 3


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns:
    - 1: Entry not found
    - 2: Invalid argument (BlobsValidationError, ValueError)
    - 3: Backend or network failure, and unknown errors
    - 4: Missing credentials or HTTP client (BlobsConfigurationError)
    """
    for exc_type, code in EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return FALLBACK_EXIT_CODE


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes `func` and turns any exception into a message on stderr and a
    typer.Exit carrying the mapped exit code.

    Raises:
        typer.Exit: With the mapped exit code if `func` raises
    """
    try:
        return func()
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
