"""
Operations package - shared plumbing between the CLI and the store API.

Centralizes error mapping so CLI commands stay thin and testable.
"""
from .mappers import BlobNotFoundError, exit_code_for, run_and_exit

__all__ = ["BlobNotFoundError", "exit_code_for", "run_and_exit"]
