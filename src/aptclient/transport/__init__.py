"""
Transport layer for aptclient.

Provides the Transport capability and its requests-based implementation.
"""

from .http import Transport, RequestsTransport

__all__ = ["Transport", "RequestsTransport"]
