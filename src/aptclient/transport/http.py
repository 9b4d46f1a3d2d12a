"""
HTTP transport for the REST API.

The client never talks to ``requests`` directly: it is handed a Transport,
so tests (and callers with their own HTTP stack) can substitute one.
Transports return the raw response body; the client decides whether the
body is an error envelope or a success record.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from ..runtime.errors import TransportError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Request/response capability consumed by AptClient."""

    @abstractmethod
    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """GET ``path`` and return the response body."""

    @abstractmethod
    def post(self, path: str, body: Any, params: Optional[Dict[str, Any]] = None) -> str:
        """POST ``body`` as JSON to ``path`` and return the response body."""

    def close(self) -> None:
        """Release any held resources."""


class RequestsTransport(Transport):
    """
    Transport backed by a ``requests.Session``.

    HTTP status codes are not interpreted: the REST API reports failures in
    the body, and the body alone decides success.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = 30.0,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the transport.

        Args:
            base_url: API root, e.g. ``https://fullnode.testnet.aptoslabs.com/v1``
            timeout: Request timeout in seconds
            verify_ssl: Verify TLS certificates
            user_agent: Optional User-Agent header
            session: Optional requests.Session for connection pooling
        """
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if user_agent:
            self._headers["User-Agent"] = user_agent

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs) -> str:
        url = self._url(path)
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers,
                timeout=self.timeout,
                verify=self.verify_ssl,
                **kwargs
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}", details={"url": url}, cause=e)

        logger.debug(f"{method} {url} -> {response.status_code} ({len(response.content)} bytes)")
        return response.text

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        return self._send("GET", path, params=params)

    def post(self, path: str, body: Any, params: Optional[Dict[str, Any]] = None) -> str:
        return self._send("POST", path, json=body, params=params)

    def close(self) -> None:
        """Close the HTTP session if owned by this transport."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["Transport", "RequestsTransport"]
