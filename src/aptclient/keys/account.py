"""
Account handle.

Holds an account's Ed25519 key pair together with its address and
authentication key.  The address pair is computed lazily, once, from the
public key; signing never touches it.
"""

from __future__ import annotations
import logging
import threading
from typing import Any, Dict, Optional, Tuple

from ..crypto.ed25519 import Ed25519KeyPair
from ..runtime.codec import bytes_to_base58
from .address import derive_address, normalize_address

logger = logging.getLogger(__name__)


class Account:
    """
    Single-signer Ed25519 account.

    Immutable after construction apart from the memoized address pair,
    which is written once under a lock so concurrent readers never see a
    partially initialized value.
    """

    def __init__(self, key_pair: Ed25519KeyPair, authentication_key: Optional[str] = None):
        """
        Initialize account.

        Args:
            key_pair: Ed25519 key pair owned by this account
            authentication_key: Known authentication key for a rotated
                account; defaults to the derived address
        """
        self._key_pair = key_pair
        self._auth_key_override = normalize_address(authentication_key) if authentication_key else None
        self._lock = threading.Lock()
        self._derived: Optional[Tuple[str, str]] = None

    def _address_pair(self) -> Tuple[str, str]:
        derived = self._derived
        if derived is not None:
            return derived
        with self._lock:
            if self._derived is None:
                address, auth_key = derive_address(self._key_pair.public_key_bytes())
                if self._auth_key_override is not None:
                    auth_key = self._auth_key_override
                self._derived = (address, auth_key)
                logger.debug(f"Derived address {address}")
            return self._derived

    @property
    def address(self) -> str:
        """``0x``-prefixed 32-byte account address."""
        return self._address_pair()[0]

    @property
    def authentication_key(self) -> str:
        """``0x``-prefixed 32-byte authentication key."""
        return self._address_pair()[1]

    @property
    def public_key(self) -> str:
        """``0x``-prefixed hex public key."""
        return self._key_pair.public_key.to_hex()

    @property
    def public_key_bytes(self) -> bytes:
        return self._key_pair.public_key_bytes()

    @property
    def private_key(self) -> bytes:
        """64-byte expanded Ed25519 private key (seed || public key)."""
        return self._key_pair.private_key_bytes()

    @property
    def key_pair(self) -> Ed25519KeyPair:
        return self._key_pair

    def private_key_base58(self) -> str:
        """Export the 64-byte private key as base58."""
        return bytes_to_base58(self.private_key)

    def sign(self, message: bytes) -> bytes:
        """
        Sign raw bytes.

        No hashing or domain separation is applied: pass exactly the bytes
        that must be signed.
        """
        return self._key_pair.sign(message)

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Verify a signature against this account's public key. Never raises."""
        return self._key_pair.verify(signature, message)

    def to_dict(self) -> Dict[str, Any]:
        """Public view of the account; no private key material."""
        return {
            "address": self.address,
            "public_key": self.public_key,
            "authentication_key": self.authentication_key,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Account):
            return False
        return self._key_pair == other._key_pair and self.authentication_key == other.authentication_key

    def __hash__(self) -> int:
        return hash(self.public_key_bytes)

    def __repr__(self) -> str:
        return f"Account(address='{self.address}')"


__all__ = ["Account"]
