"""
Account address derivation.

    address = sha3_256(public_key || 0x00)

The trailing zero byte is the single-signer Ed25519 scheme discriminator.
At creation time the authentication key equals the address; they only
diverge after an on-chain key rotation.
"""

from __future__ import annotations
import re
from typing import Tuple

from ..crypto import sha3_256
from ..crypto.ed25519 import PUBLIC_KEY_SIZE
from ..runtime.errors import EncodingError, ValidationError

ED25519_SCHEME = b"\x00"
ADDRESS_LENGTH = 66

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


def derive_address(public_key: bytes) -> Tuple[str, str]:
    """
    Derive (address, authentication key) from a raw Ed25519 public key.

    Args:
        public_key: 32-byte public key

    Returns:
        Tuple of ``0x``-prefixed hex strings; both values are equal

    Raises:
        EncodingError: If public_key is not 32 bytes
    """
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise EncodingError(f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(public_key)}")

    value = "0x" + sha3_256(bytes(public_key) + ED25519_SCHEME).hex()
    return value, value


def is_valid_address(address: str) -> bool:
    """True for a ``0x`` hex address of at most 32 bytes."""
    return bool(address) and _ADDRESS_RE.match(address) is not None


def normalize_address(address: str) -> str:
    """
    Lower-case and left-pad an address to the full 66-character form.

    Raises:
        ValidationError: If address is empty or not hex
    """
    if not address:
        raise ValidationError("address is empty")
    if not is_valid_address(address):
        raise ValidationError(f"invalid address: {address}")
    return "0x" + address[2:].lower().rjust(64, "0")


def check_address(address: str) -> str:
    """
    Validate a full-length address as the REST endpoints expect it.

    Raises:
        ValidationError: If empty, not 66 characters, or not hex
    """
    if not address:
        raise ValidationError("address is empty")
    if len(address) != ADDRESS_LENGTH:
        raise ValidationError(f"address length {len(address)} != {ADDRESS_LENGTH}")
    if not is_valid_address(address):
        raise ValidationError(f"invalid address: {address}")
    return address


__all__ = [
    "ED25519_SCHEME",
    "ADDRESS_LENGTH",
    "derive_address",
    "is_valid_address",
    "normalize_address",
    "check_address",
]
