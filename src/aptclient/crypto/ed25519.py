"""
Ed25519 cryptographic operations.

Key generation, signing and verification on top of ``cryptography``.
Private keys are held as the 32-byte seed; the 64-byte expanded form
(seed || public key) is what gets exported and stored.
"""

from __future__ import annotations
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..runtime.errors import EncodingError

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
EXPANDED_KEY_SIZE = 64
SIGNATURE_SIZE = 64


class Ed25519Error(EncodingError):
    """Invalid Ed25519 key material."""
    pass


class Ed25519PublicKey:
    """
    Ed25519 public key.

    Provides verification operations and serialization.
    """

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize from 32-byte public key.

        Args:
            public_key_bytes: 32-byte Ed25519 public key

        Raises:
            Ed25519Error: If key is invalid
        """
        if len(public_key_bytes) != PUBLIC_KEY_SIZE:
            raise Ed25519Error(f"Ed25519 public key must be 32 bytes, got {len(public_key_bytes)}")

        self._key_bytes = bytes(public_key_bytes)
        try:
            self._crypto_key = CryptoEd25519PublicKey.from_public_bytes(self._key_bytes)
        except ValueError as e:
            raise Ed25519Error(f"Invalid Ed25519 public key: {e}", cause=e)

    @classmethod
    def from_hex(cls, hex_string: str) -> Ed25519PublicKey:
        """Create public key from hex string (``0x`` marker optional)."""
        if hex_string[:2] in ("0x", "0X"):
            hex_string = hex_string[2:]
        try:
            key_bytes = bytes.fromhex(hex_string)
        except ValueError as e:
            raise Ed25519Error(f"Invalid hex string: {e}", cause=e)
        return cls(key_bytes)

    def to_bytes(self) -> bytes:
        """Get the 32-byte public key."""
        return self._key_bytes

    def to_hex(self) -> str:
        """Get the public key as ``0x``-prefixed hex."""
        return "0x" + self._key_bytes.hex()

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a signature against a message.

        Args:
            signature: 64-byte Ed25519 signature
            message: Message that was signed

        Returns:
            True if signature is valid; False for non-bytes, wrong-length or bad signatures
        """
        if not isinstance(signature, (bytes, bytearray, memoryview)):
            return False
        if len(signature) != SIGNATURE_SIZE:
            return False
        try:
            self._crypto_key.verify(bytes(signature), message)
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519PublicKey):
            return False
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PublicKey.from_hex('{self.to_hex()}')"


class Ed25519PrivateKey:
    """
    Ed25519 private key.

    Provides signing operations. The seed is never rendered by repr().
    """

    def __init__(self, seed: bytes):
        """
        Initialize from 32-byte private key seed.

        Args:
            seed: 32-byte Ed25519 private key seed

        Raises:
            Ed25519Error: If the seed is not 32 bytes
        """
        if len(seed) != SEED_SIZE:
            raise Ed25519Error(f"Ed25519 private key seed must be 32 bytes, got {len(seed)}")

        self._seed = bytes(seed)
        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(self._seed)
        self._public_key = Ed25519PublicKey(
            self._crypto_key.public_key().public_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PublicFormat.Raw
            )
        )

    @classmethod
    def generate(cls) -> Ed25519PrivateKey:
        """Generate a new random Ed25519 private key."""
        crypto_key = CryptoEd25519PrivateKey.generate()
        seed = crypto_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )
        return cls(seed)

    @classmethod
    def from_seed(cls, seed: bytes) -> Ed25519PrivateKey:
        """Create private key from a 32-byte seed."""
        return cls(seed)

    def seed(self) -> bytes:
        """Get the 32-byte seed."""
        return self._seed

    def to_bytes(self) -> bytes:
        """Get the 64-byte expanded key (seed || public key)."""
        return self._seed + self._public_key.to_bytes()

    def public_key(self) -> Ed25519PublicKey:
        """Get the corresponding public key."""
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Args:
            message: Message to sign

        Returns:
            64-byte Ed25519 signature
        """
        return self._crypto_key.sign(message)

    def __repr__(self) -> str:
        return f"Ed25519PrivateKey(public={self._public_key.to_hex()})"


class Ed25519KeyPair:
    """
    Ed25519 key pair containing both private and public keys.
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def generate(cls) -> Ed25519KeyPair:
        """Generate a new random key pair."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: Union[bytes, bytearray]) -> Ed25519KeyPair:
        """
        Create deterministic key pair from a 32-byte seed.

        Raises:
            Ed25519Error: If seed is not exactly 32 bytes
        """
        return cls(Ed25519PrivateKey.from_seed(bytes(seed)))

    def sign(self, message: bytes) -> bytes:
        """Sign a message and return signature bytes."""
        return self.private_key.sign(message)

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Verify a signature against a message."""
        return self.public_key.verify(signature, message)

    def public_key_bytes(self) -> bytes:
        """Get the 32-byte public key."""
        return self.public_key.to_bytes()

    def private_key_bytes(self) -> bytes:
        """Get the 64-byte expanded private key."""
        return self.private_key.to_bytes()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519KeyPair):
            return False
        return self.private_key.seed() == other.private_key.seed()

    def __hash__(self) -> int:
        return hash(self.public_key)

    def __repr__(self) -> str:
        return f"Ed25519KeyPair(public={self.public_key.to_hex()})"


__all__ = [
    "SEED_SIZE",
    "PUBLIC_KEY_SIZE",
    "EXPANDED_KEY_SIZE",
    "SIGNATURE_SIZE",
    "Ed25519PublicKey",
    "Ed25519PrivateKey",
    "Ed25519KeyPair",
    "Ed25519Error",
]
