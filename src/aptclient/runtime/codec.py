"""
Encoding helpers shared by key derivation and the REST client.

Hex values on the wire carry a ``0x`` marker; private keys may also be
exchanged as base58 (Bitcoin alphabet, no checksum).
"""

from __future__ import annotations
from typing import Union

import base58

from .errors import DecodeError, EncodingError

HEX_PREFIX = "0x"
U64_MAX = 2 ** 64 - 1


def has_hex_prefix(value: str) -> bool:
    """True if value starts with ``0x`` or ``0X``."""
    return len(value) >= 2 and value[0] == "0" and value[1] in "xX"


def strip_hex_prefix(value: str) -> str:
    """Remove a leading ``0x``/``0X`` marker if present."""
    return value[2:] if has_hex_prefix(value) else value


def hex_to_bytes(value: str) -> bytes:
    """
    Decode a hex string, with or without ``0x`` marker.

    Raises:
        DecodeError: If the string is not valid hex
    """
    try:
        return bytes.fromhex(strip_hex_prefix(value.strip()))
    except ValueError as e:
        raise DecodeError(f"invalid hex string: {e}", cause=e)


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """Encode bytes as lowercase hex, ``0x``-prefixed by default."""
    encoded = data.hex()
    return f"{HEX_PREFIX}{encoded}" if prefix else encoded


def base58_to_bytes(value: str) -> bytes:
    """
    Decode a base58 string (no checksum).

    Raises:
        DecodeError: If the string contains characters outside the alphabet
    """
    try:
        return base58.b58decode(value.strip())
    except ValueError as e:
        raise DecodeError(f"invalid base58 string: {e}", cause=e)


def bytes_to_base58(data: bytes) -> str:
    """Encode bytes as base58 (no checksum)."""
    return base58.b58encode(data).decode("ascii")


def decode_private_key(encoded: str) -> bytes:
    """
    Decode an encoded private key.

    ``0x``/``0X`` prefixed strings are hex, anything else is base58.
    """
    if has_hex_prefix(encoded.strip()):
        return hex_to_bytes(encoded)
    return base58_to_bytes(encoded)


def u64_to_str(value: Union[int, str]) -> str:
    """
    Render an unsigned 64-bit value as a decimal string.

    Raises:
        EncodingError: If the value is negative or exceeds u64
    """
    number = int(value)
    if number < 0 or number > U64_MAX:
        raise EncodingError(f"value {number} is out of u64 range")
    return str(number)


__all__ = [
    "HEX_PREFIX",
    "U64_MAX",
    "has_hex_prefix",
    "strip_hex_prefix",
    "hex_to_bytes",
    "bytes_to_hex",
    "base58_to_bytes",
    "bytes_to_base58",
    "decode_private_key",
    "u64_to_str",
]
