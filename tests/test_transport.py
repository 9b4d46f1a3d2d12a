"""
Tests for the requests-backed transport.
"""

from unittest.mock import Mock

import pytest
import requests

from aptclient.runtime.errors import TransportError
from aptclient.transport.http import RequestsTransport


def _session(text="{}", status_code=200):
    session = Mock(spec=requests.Session)
    response = Mock()
    response.text = text
    response.content = text.encode()
    response.status_code = status_code
    session.request.return_value = response
    return session


class TestRequestsTransport:

    def test_get_builds_url(self):
        session = _session('{"ok": true}')
        transport = RequestsTransport("http://node/v1/", session=session, user_agent="ua/1")

        assert transport.get("/accounts/0x1", {"limit": 5}) == '{"ok": true}'

        args, kwargs = session.request.call_args
        assert args == ("GET", "http://node/v1/accounts/0x1")
        assert kwargs["params"] == {"limit": 5}
        assert kwargs["headers"]["User-Agent"] == "ua/1"

    def test_post_sends_json(self):
        session = _session('"0xab"')
        transport = RequestsTransport("http://node/v1", session=session, timeout=5.0)

        transport.post("transactions/encode_submission", {"a": 1})

        args, kwargs = session.request.call_args
        assert args[0] == "POST"
        assert kwargs["json"] == {"a": 1}
        assert kwargs["timeout"] == 5.0

    def test_error_status_body_is_returned(self):
        body = '{"message": "not found", "error_code": "account_not_found"}'
        transport = RequestsTransport("http://node/v1", session=_session(body, 404))
        assert transport.get("accounts/0x1") == body

    def test_network_failure(self):
        session = _session()
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        transport = RequestsTransport("http://node/v1", session=session)

        with pytest.raises(TransportError) as exc:
            transport.get("")
        assert exc.value.details["url"] == "http://node/v1/"

    def test_injected_session_not_closed(self):
        session = _session()
        with RequestsTransport("http://node/v1", session=session):
            pass
        session.close.assert_not_called()
