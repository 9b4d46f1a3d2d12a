"""
Signing key derivation.

Three closed strategies produce an Ed25519 key pair:

* RandomKeyStrategy   - fresh secure randomness
* EncodedKeyStrategy  - hex (``0x``) or base58 private key; first 32 bytes are the seed
* MnemonicKeyStrategy - BIP39 phrase walked along m/44'/637'/{index}'/0/0

The strategy is chosen once, from the credential's kind, when a KeyDeriver
is built.  Asking a deriver for a different kind raises
KeyTypeMismatchError before any key material is touched.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from bip_utils import (
    Bip32KeyError,
    Bip32PathError,
    Bip32Secp256k1,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
)

from ..crypto.ed25519 import Ed25519KeyPair, SEED_SIZE
from ..runtime.codec import decode_private_key
from ..runtime.errors import (
    KeyTypeMismatchError,
    MnemonicError,
    MnemonicIndexError,
    SeedLengthError,
)
from .account import Account
from .credential import KeyCredential, KeyKind, classify

logger = logging.getLogger(__name__)

PURPOSE_BIP44 = 44
COIN_TYPE_APT = 637
MAX_ACCOUNT_INDEX = 2 ** 31 - 1


def derivation_path(index: int) -> str:
    """BIP44 path for an account index: m/44'/637'/{index}'/0/0."""
    return f"m/{PURPOSE_BIP44}'/{COIN_TYPE_APT}'/{index}'/0/0"


def check_index(index: int) -> int:
    """
    Validate an account index before it is used as an unsigned value.

    Raises:
        MnemonicIndexError: If index is negative or above the hardened range
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise MnemonicIndexError(f"index must be an integer, got {type(index).__name__}")
    if index < 0:
        raise MnemonicIndexError("index must be >= 0 for mnemonic derivation")
    if index > MAX_ACCOUNT_INDEX:
        raise MnemonicIndexError(f"index must be <= {MAX_ACCOUNT_INDEX}")
    return index


def key_pair_from_seed_material(material: bytes) -> Ed25519KeyPair:
    """
    Build a key pair from decoded key material.

    Raises:
        SeedLengthError: If fewer than 32 bytes are available
    """
    if len(material) < SEED_SIZE:
        raise SeedLengthError(len(material), SEED_SIZE)
    return Ed25519KeyPair.from_seed(material[:SEED_SIZE])


class KeyStrategy(ABC):
    """One way of producing a signing key pair."""

    kind: KeyKind

    @abstractmethod
    def derive(self) -> Ed25519KeyPair:
        """Produce the key pair."""


class RandomKeyStrategy(KeyStrategy):
    """Fresh key from the OS CSPRNG. Not reproducible."""

    kind = KeyKind.NONE

    def derive(self) -> Ed25519KeyPair:
        return Ed25519KeyPair.generate()


class EncodedKeyStrategy(KeyStrategy):
    """Key decoded from a hex (``0x``/``0X``) or base58 string."""

    kind = KeyKind.PRIVATE_KEY

    def __init__(self, encoded: str):
        self._encoded = encoded

    def derive(self) -> Ed25519KeyPair:
        return key_pair_from_seed_material(decode_private_key(self._encoded))


class MnemonicKeyStrategy(KeyStrategy):
    """Key derived from a BIP39 phrase at a caller-chosen account index."""

    kind = KeyKind.MNEMONIC

    def __init__(self, phrase: str, index: int = 0, passphrase: str = ""):
        self._phrase = phrase
        self._index = check_index(index)
        self._passphrase = passphrase

    @property
    def path(self) -> str:
        return derivation_path(self._index)

    def derive(self) -> Ed25519KeyPair:
        if not Bip39MnemonicValidator().IsValid(self._phrase):
            raise MnemonicError("mnemonic does not map to valid BIP39 entropy (bad word or checksum)")
        try:
            seed = Bip39SeedGenerator(self._phrase).Generate(self._passphrase)
            node = Bip32Secp256k1.FromSeed(seed).DerivePath(self.path)
        except (ValueError, Bip32KeyError, Bip32PathError) as e:
            raise MnemonicError(f"mnemonic derivation failed: {e}", cause=e)
        return key_pair_from_seed_material(node.PrivateKey().Raw().ToBytes())


class KeyDeriver:
    """
    Derives key pairs and accounts from one classified credential.

    Example:
        ```python
        deriver = KeyDeriver("abandon abandon ... about")
        account = deriver.derive_account(index=0)
        ```
    """

    def __init__(self, credential: Union[str, KeyCredential, None], authentication_key: Optional[str] = None):
        """
        Initialize deriver.

        Args:
            credential: Raw credential string or an already classified one
            authentication_key: Known authentication key for rotated accounts
        """
        if not isinstance(credential, KeyCredential):
            credential = classify(credential)
        self.credential = credential
        self.authentication_key = authentication_key

    @property
    def kind(self) -> KeyKind:
        return self.credential.kind

    def _require(self, kind: KeyKind) -> None:
        if self.credential.kind is not kind:
            raise KeyTypeMismatchError(kind, self.credential.kind)

    def strategy(self, index: int = 0) -> KeyStrategy:
        """Strategy matching the credential kind."""
        kind = self.credential.kind
        if kind is KeyKind.MNEMONIC:
            return MnemonicKeyStrategy(self.credential.value, index)
        if kind is KeyKind.PRIVATE_KEY:
            return EncodedKeyStrategy(self.credential.value)
        return RandomKeyStrategy()

    def from_random(self) -> Ed25519KeyPair:
        """
        Generate a new key pair.

        Raises:
            KeyTypeMismatchError: If the credential is not empty
        """
        self._require(KeyKind.NONE)
        return RandomKeyStrategy().derive()

    def from_encoded_private_key(self) -> Ed25519KeyPair:
        """
        Decode the credential's private key.

        Raises:
            KeyTypeMismatchError: If the credential is not a private key
            DecodeError: If the string is not valid hex/base58
            SeedLengthError: If fewer than 32 bytes decode
        """
        self._require(KeyKind.PRIVATE_KEY)
        return EncodedKeyStrategy(self.credential.value).derive()

    def from_mnemonic(self, index: int = 0) -> Ed25519KeyPair:
        """
        Derive from the credential's phrase at the given account index.

        Raises:
            KeyTypeMismatchError: If the credential is not a mnemonic
            MnemonicIndexError: If index is negative
            MnemonicError: If the phrase is not valid BIP39
        """
        self._require(KeyKind.MNEMONIC)
        return MnemonicKeyStrategy(self.credential.value, index).derive()

    def derive(self, index: int = 0) -> Ed25519KeyPair:
        """Route to the one operation matching the credential kind."""
        strategy = self.strategy(index)
        logger.debug(f"Deriving key pair via {type(strategy).__name__}")
        return strategy.derive()

    def derive_account(self, index: int = 0) -> Account:
        """Derive the key pair and wrap it in an Account."""
        return Account(self.derive(index), authentication_key=self.authentication_key)


def derive_account(
    credential: Union[str, KeyCredential, None],
    index: int = 0,
    authentication_key: Optional[str] = None
) -> Account:
    """
    Derive an account from a credential.

    Args:
        credential: Mnemonic, encoded private key, or empty for a new key
        index: Account index (mnemonic credentials only)
        authentication_key: Known authentication key for rotated accounts

    Returns:
        Account handle
    """
    return KeyDeriver(credential, authentication_key).derive_account(index)


__all__ = [
    "PURPOSE_BIP44",
    "COIN_TYPE_APT",
    "MAX_ACCOUNT_INDEX",
    "derivation_path",
    "check_index",
    "key_pair_from_seed_material",
    "KeyStrategy",
    "RandomKeyStrategy",
    "EncodedKeyStrategy",
    "MnemonicKeyStrategy",
    "KeyDeriver",
    "derive_account",
]
