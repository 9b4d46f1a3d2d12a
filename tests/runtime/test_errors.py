"""
Tests for the error model and envelope probing.
"""

import json

import pytest

from aptclient.runtime.errors import (
    ApiError,
    AptClientError,
    BatchSubmissionError,
    ErrorCode,
    PollTimeoutError,
    ProtocolError,
    ValidationError,
    probe_error_envelope,
    raise_for_envelope,
)


class TestAptClientError:

    def test_default_code(self):
        assert ValidationError("bad").code == ErrorCode.INVALID_ARGUMENT

    def test_str_includes_details_and_cause(self):
        cause = ValueError("inner")
        err = AptClientError("outer", details={"k": 1}, cause=cause)
        text = str(err)
        assert text.startswith("[UNKNOWN] outer")
        assert "Details: {'k': 1}" in text
        assert "Caused by: inner" in text

    def test_to_dict(self):
        err = PollTimeoutError("0xabc", 3)
        data = err.to_dict()
        assert data["code"] == ErrorCode.TIMEOUT.value
        assert data["details"] == {"hash": "0xabc", "attempts": 3}

    def test_hierarchy(self):
        assert issubclass(ApiError, ProtocolError)
        assert issubclass(BatchSubmissionError, AptClientError)


class TestProbeErrorEnvelope:
    """Error bodies must be recognised before decoding as records."""

    def test_envelope_with_message(self):
        body = json.dumps({"message": "account not found", "error_code": "account_not_found",
                           "vm_error_code": None})
        envelope = probe_error_envelope(body)
        assert envelope is not None
        assert envelope.error_code == "account_not_found"

    def test_code_without_message(self):
        assert probe_error_envelope({"error_code": 7}) is not None

    @pytest.mark.parametrize("body", [
        '"0xdeadbeef"',
        "[]",
        "not json",
        "",
        json.dumps({"hash": "0x1", "version": "3"}),
        json.dumps({"message": "", "error_code": None}),
        json.dumps({"message": "", "error_code": "0"}),
    ])
    def test_not_an_envelope(self, body):
        assert probe_error_envelope(body) is None

    def test_raise_for_envelope(self):
        body = {"message": "sequence number too old", "error_code": "sequence_number_too_old",
                "vm_error_code": 3, "ledger_version": "991"}
        with pytest.raises(ApiError) as exc:
            raise_for_envelope(body)
        assert exc.value.error_code == "sequence_number_too_old"
        assert exc.value.vm_error_code == 3
        assert exc.value.ledger_version == "991"
        assert exc.value.message == "sequence number too old"

    def test_raise_for_success_body_is_noop(self):
        raise_for_envelope('{"hash": "0x1"}')
