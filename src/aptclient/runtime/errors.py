"""
aptclient error model

Every failure raised by the key-management and transaction-signing code is a
subclass of AptClientError.  Errors carry a numeric ErrorCode, optional
structured details and the underlying cause, and are never swallowed: callers
can always catch the specific subclass or fall back to the base class.
"""

from __future__ import annotations
import json
from typing import Optional, Dict, Any, Union
from enum import IntEnum

from pydantic import BaseModel, ValidationError as PydanticValidationError


class ErrorCode(IntEnum):
    """Error codes used across the client."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INVALID_ARGUMENT = 2

    # Credential errors (100-199)
    CLASSIFICATION_ERROR = 100
    KEY_TYPE_MISMATCH = 101

    # Derivation errors (200-299)
    DERIVATION_ERROR = 200
    SEED_LENGTH = 201
    INVALID_MNEMONIC = 202
    INVALID_MNEMONIC_INDEX = 203

    # Encoding errors (300-399)
    ENCODING_ERROR = 300
    DECODE_ERROR = 301

    # Protocol errors (400-499)
    PROTOCOL_ERROR = 400
    API_ERROR = 401
    PAYLOAD_MISSING = 402
    MALFORMED_RESPONSE = 403
    DIGEST_DECODE = 404
    BATCH_FAILED = 405
    INVALID_STATE = 406

    # Network errors (500-599)
    NETWORK_ERROR = 500
    TIMEOUT = 501


class AptClientError(Exception):
    """
    Base class for all aptclient errors.

    Provides structured error information (code, details, cause).
    """

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an aptclient error.

        Args:
            message: Error message
            code: Error code (defaults to the class default)
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(AptClientError):
    """Invalid caller input (empty hash, malformed address, bad limits)."""

    default_code = ErrorCode.INVALID_ARGUMENT


# =============================================================================
# Credential classification
# =============================================================================

class ClassificationError(AptClientError):
    """The credential does not support the requested operation."""

    default_code = ErrorCode.CLASSIFICATION_ERROR


class KeyTypeMismatchError(ClassificationError):
    """A derivation was requested against a credential of another kind."""

    default_code = ErrorCode.KEY_TYPE_MISMATCH

    def __init__(self, expected: Any, actual: Any):
        super().__init__(
            f"credential is {getattr(actual, 'value', actual)}, "
            f"operation requires {getattr(expected, 'value', expected)}",
            details={"expected": str(getattr(expected, "value", expected)),
                     "actual": str(getattr(actual, "value", actual))},
        )
        self.expected = expected
        self.actual = actual


# =============================================================================
# Key derivation
# =============================================================================

class DerivationError(AptClientError):
    """Key derivation failed. Not retryable with the same input."""

    default_code = ErrorCode.DERIVATION_ERROR


class SeedLengthError(DerivationError):
    """Decoded key material is shorter than an Ed25519 seed."""

    default_code = ErrorCode.SEED_LENGTH

    def __init__(self, length: int, required: int = 32):
        super().__init__(
            f"decoded private key is {length} bytes, need at least {required}",
            details={"length": length, "required": required},
        )


class MnemonicError(DerivationError):
    """Mnemonic phrase does not map to valid BIP39 entropy."""

    default_code = ErrorCode.INVALID_MNEMONIC


class MnemonicIndexError(DerivationError):
    """Account index outside the hardened-index range."""

    default_code = ErrorCode.INVALID_MNEMONIC_INDEX


# =============================================================================
# Encoding
# =============================================================================

class EncodingError(AptClientError):
    """Data encoding/decoding errors."""

    default_code = ErrorCode.ENCODING_ERROR


class DecodeError(EncodingError):
    """String is not valid in the selected encoding (hex or base58)."""

    default_code = ErrorCode.DECODE_ERROR


# =============================================================================
# Protocol
# =============================================================================

class ProtocolError(AptClientError):
    """The node rejected a request or answered with something unusable."""

    default_code = ErrorCode.PROTOCOL_ERROR


class ApiError(ProtocolError):
    """The node returned an error envelope."""

    default_code = ErrorCode.API_ERROR

    def __init__(self, message: str, error_code: Union[str, int, None] = None,
                 ledger_version: Union[str, int, None] = None, vm_error_code: Optional[int] = None):
        details: Dict[str, Any] = {}
        if error_code not in (None, ""):
            details["error_code"] = error_code
        if ledger_version:
            details["ledger_version"] = ledger_version
        if vm_error_code is not None:
            details["vm_error_code"] = vm_error_code
        super().__init__(message, details=details)
        self.error_code = error_code
        self.ledger_version = ledger_version
        self.vm_error_code = vm_error_code

    @classmethod
    def from_envelope(cls, envelope: ErrorEnvelope) -> ApiError:
        """Build from a decoded error envelope."""
        return cls(
            envelope.message or f"request failed with error code {envelope.error_code}",
            error_code=envelope.error_code,
            ledger_version=envelope.ledger_version,
            vm_error_code=envelope.vm_error_code,
        )


class PayloadMissingError(ProtocolError):
    """Unsigned transaction has no payload."""

    default_code = ErrorCode.PAYLOAD_MISSING

    def __init__(self, message: str = "payload is missing"):
        super().__init__(message)


class MalformedResponseError(ProtocolError):
    """Response is not shaped like the expected success value."""

    default_code = ErrorCode.MALFORMED_RESPONSE


class DigestDecodeError(ProtocolError):
    """Signing message digest is not valid hex."""

    default_code = ErrorCode.DIGEST_DECODE


class BatchSubmissionError(ProtocolError):
    """One aggregate failure for a batch submission."""

    default_code = ErrorCode.BATCH_FAILED

    def __init__(self, message: str, failures: Optional[list] = None):
        super().__init__(message, details={"failures": failures} if failures else None)
        self.failures = failures or []


class InvalidStateError(ProtocolError):
    """A transaction stage was invoked out of order."""

    default_code = ErrorCode.INVALID_STATE


# =============================================================================
# Network / timing
# =============================================================================

class TransportError(AptClientError):
    """The HTTP round trip itself failed."""

    default_code = ErrorCode.NETWORK_ERROR


class PollTimeoutError(AptClientError):
    """
    Poll ceiling exceeded before the transaction was confirmed.

    The outcome is unknown: the transaction may still be committed later.
    """

    default_code = ErrorCode.TIMEOUT

    def __init__(self, tx_hash: str, attempts: int):
        super().__init__(
            f"transaction {tx_hash} not confirmed after {attempts} attempts",
            details={"hash": tx_hash, "attempts": attempts},
        )
        self.tx_hash = tx_hash
        self.attempts = attempts


# =============================================================================
# Error envelope
# =============================================================================

class ErrorEnvelope(BaseModel):
    """Error body returned by the REST API."""

    message: str = ""
    error_code: Union[str, int, None] = None
    vm_error_code: Optional[int] = None
    ledger_version: Union[str, int, None] = None

    model_config = {"extra": "ignore"}

    @property
    def is_error(self) -> bool:
        """A non-empty message or a non-zero code marks a failure."""
        if self.message:
            return True
        return self.error_code not in (None, "", 0, "0")


def probe_error_envelope(body: Union[str, bytes, Dict[str, Any], None]) -> Optional[ErrorEnvelope]:
    """
    Check whether a response body is an error envelope.

    Must run before a body is decoded as a success record: decoding an
    envelope as a record would fabricate empty field values.

    Args:
        body: Raw response text or already-parsed JSON

    Returns:
        The envelope if the body is error-shaped, otherwise None
    """
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except (ValueError, TypeError):
            return None

    if not isinstance(body, dict):
        return None
    if "message" not in body and "error_code" not in body:
        return None

    try:
        envelope = ErrorEnvelope.model_validate(body)
    except PydanticValidationError:
        return None
    return envelope if envelope.is_error else None


def raise_for_envelope(body: Union[str, bytes, Dict[str, Any], None]) -> None:
    """Raise ApiError if body is an error envelope."""
    envelope = probe_error_envelope(body)
    if envelope is not None:
        raise ApiError.from_envelope(envelope)


__all__ = [
    "ErrorCode",
    "AptClientError",
    "ValidationError",
    "ClassificationError",
    "KeyTypeMismatchError",
    "DerivationError",
    "SeedLengthError",
    "MnemonicError",
    "MnemonicIndexError",
    "EncodingError",
    "DecodeError",
    "ProtocolError",
    "ApiError",
    "PayloadMissingError",
    "MalformedResponseError",
    "DigestDecodeError",
    "BatchSubmissionError",
    "InvalidStateError",
    "TransportError",
    "PollTimeoutError",
    "ErrorEnvelope",
    "probe_error_envelope",
    "raise_for_envelope",
]
