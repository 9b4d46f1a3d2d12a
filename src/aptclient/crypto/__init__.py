"""
Cryptographic primitives.

Ed25519 signing keys and the SHA3-256 helper used for address derivation.
"""

import hashlib

from .ed25519 import Ed25519KeyPair, Ed25519PublicKey, Ed25519PrivateKey, Ed25519Error


def sha3_256(data: bytes) -> bytes:
    """SHA3-256 digest."""
    return hashlib.sha3_256(data).digest()


__all__ = [
    "Ed25519KeyPair",
    "Ed25519PublicKey",
    "Ed25519PrivateKey",
    "Ed25519Error",
    "sha3_256",
]
