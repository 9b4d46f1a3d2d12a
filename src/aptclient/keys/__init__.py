"""
Account key management.

Credential classification, key derivation, address derivation and the
account handle used for signing.
"""

from .credential import KeyKind, KeyCredential, classify, is_mnemonic
from .address import derive_address, is_valid_address, normalize_address
from .account import Account
from .derivation import (
    KeyDeriver,
    KeyStrategy,
    RandomKeyStrategy,
    EncodedKeyStrategy,
    MnemonicKeyStrategy,
    derive_account,
    derivation_path,
)

__all__ = [
    "KeyKind",
    "KeyCredential",
    "classify",
    "is_mnemonic",
    "derive_address",
    "is_valid_address",
    "normalize_address",
    "Account",
    "KeyDeriver",
    "KeyStrategy",
    "RandomKeyStrategy",
    "EncodedKeyStrategy",
    "MnemonicKeyStrategy",
    "derive_account",
    "derivation_path",
]
