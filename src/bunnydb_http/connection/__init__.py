"""
Bunny Database Transport Module.

Provides the transport interface and its httpx implementation.
"""

from .base import BaseTransport, TransportResponse
from .http import HTTPTransport

__all__ = [
    "BaseTransport",
    "HTTPTransport",
    "TransportResponse",
]
