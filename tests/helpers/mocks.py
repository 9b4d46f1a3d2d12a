"""
Mock transport for exercising AptClient without a node.

Responses are scripted per (method, path).  A scripted value may be a
string (returned verbatim), any other JSON-able value (serialized), a list
of such values (consumed one per call, the last one repeating) or an
exception instance (raised).
"""

from __future__ import annotations
import json
from typing import Any, Dict, List, Optional, Tuple

from aptclient.transport.http import Transport


class MockTransport(Transport):
    """Transport that records calls and replays scripted bodies."""

    def __init__(self):
        self.responses: Dict[Tuple[str, str], List[Any]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def add(self, method: str, path: str, *bodies: Any) -> MockTransport:
        self.responses[(method.upper(), path)] = list(bodies)
        return self

    def on_get(self, path: str, *bodies: Any) -> MockTransport:
        return self.add("GET", path, *bodies)

    def on_post(self, path: str, *bodies: Any) -> MockTransport:
        return self.add("POST", path, *bodies)

    def _reply(self, method: str, path: str) -> str:
        queue = self.responses.get((method, path))
        if not queue:
            raise AssertionError(f"unexpected {method} {path}")
        body = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return body
        return json.dumps(body)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        self.calls.append({"method": "GET", "path": path, "params": params})
        return self._reply("GET", path)

    def post(self, path: str, body: Any, params: Optional[Dict[str, Any]] = None) -> str:
        self.calls.append({"method": "POST", "path": path, "body": body, "params": params})
        return self._reply("POST", path)

    def close(self) -> None:
        self.closed = True

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]
