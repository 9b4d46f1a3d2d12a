"""
Credential classification.

A caller hands over a single string; it is either empty (generate a new key),
a BIP39 phrase, or an encoded private key.  Only the exact BIP39 word counts
count as a phrase: a 13-word string is treated as an encoded key and will
fail decoding rather than derive an account nobody can recover.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

MNEMONIC_WORD_COUNTS = frozenset({12, 15, 18, 21, 24})


class KeyKind(str, Enum):
    """Kind of key material a credential carries."""

    NONE = "none"
    PRIVATE_KEY = "private_key"
    MNEMONIC = "mnemonic"


@dataclass(frozen=True)
class KeyCredential:
    """A classified credential. Immutable once built."""

    kind: KeyKind
    value: str = ""

    @property
    def is_mnemonic(self) -> bool:
        return self.kind is KeyKind.MNEMONIC

    @property
    def is_private_key(self) -> bool:
        return self.kind is KeyKind.PRIVATE_KEY

    @property
    def is_none(self) -> bool:
        return self.kind is KeyKind.NONE

    def __repr__(self) -> str:
        # value is secret material in both non-empty variants
        return f"KeyCredential(kind={self.kind.value})"


def is_mnemonic(words: str) -> bool:
    """True if words splits into exactly 12, 15, 18, 21 or 24 tokens."""
    return len(words.split()) in MNEMONIC_WORD_COUNTS


def normalize_mnemonic(phrase: str) -> str:
    """Lower-case and collapse whitespace to single spaces."""
    return " ".join(phrase.lower().split())


def classify(credential: Optional[str]) -> KeyCredential:
    """
    Classify a raw credential string.

    Never raises: any non-empty string that is not a phrase of a valid BIP39
    length becomes a PRIVATE_KEY credential and is checked when decoded.

    Args:
        credential: Mnemonic phrase, encoded private key, or empty/None

    Returns:
        KeyCredential tagged with its KeyKind
    """
    if credential is None or not credential.strip():
        return KeyCredential(KeyKind.NONE)
    if is_mnemonic(credential):
        return KeyCredential(KeyKind.MNEMONIC, normalize_mnemonic(credential))
    return KeyCredential(KeyKind.PRIVATE_KEY, credential.strip())


__all__ = [
    "MNEMONIC_WORD_COUNTS",
    "KeyKind",
    "KeyCredential",
    "is_mnemonic",
    "normalize_mnemonic",
    "classify",
]
