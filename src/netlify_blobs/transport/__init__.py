"""
Transport strategies for reaching the blob backend.
"""
from .api import APITransport
from .base import BlobRequest, BlobTransport
from .edge import EdgeTransport
from .factory import make_transport

__all__ = ["APITransport", "BlobRequest", "BlobTransport", "EdgeTransport", "make_transport"]
