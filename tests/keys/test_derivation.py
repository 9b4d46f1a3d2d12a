"""
Tests for key derivation strategies.
"""

import pytest
from bip_utils import Bip32Secp256k1, Bip39SeedGenerator

from aptclient.keys.credential import KeyKind
from aptclient.keys.derivation import (
    EncodedKeyStrategy,
    KeyDeriver,
    MnemonicKeyStrategy,
    RandomKeyStrategy,
    derivation_path,
    derive_account,
)
from aptclient.runtime.codec import bytes_to_base58
from aptclient.runtime.errors import (
    DecodeError,
    KeyTypeMismatchError,
    MnemonicError,
    MnemonicIndexError,
    SeedLengthError,
)

SEED = bytes(range(32))


class TestDerivationPath:

    def test_path_shape(self):
        assert derivation_path(0) == "m/44'/637'/0'/0/0"
        assert derivation_path(7) == "m/44'/637'/7'/0/0"


class TestMnemonic:
    """BIP39/BIP44 derivation."""

    def test_deterministic(self, test_mnemonic):
        a = KeyDeriver(test_mnemonic).from_mnemonic(0)
        b = KeyDeriver(test_mnemonic).from_mnemonic(0)
        assert a.public_key_bytes() == b.public_key_bytes()

    @pytest.mark.parametrize("phrase", [
        " ".join(["abandon"] * 11 + ["about"]),
        " ".join(["abandon"] * 23 + ["art"]),
    ])
    def test_indices_give_distinct_keys(self, phrase):
        deriver = KeyDeriver(phrase)
        keys = {deriver.from_mnemonic(i).public_key_bytes() for i in range(3)}
        assert len(keys) == 3

    def test_matches_bip44_child_key(self, test_mnemonic):
        seed = Bip39SeedGenerator(test_mnemonic).Generate()
        child = Bip32Secp256k1.FromSeed(seed).DerivePath("m/44'/637'/1'/0/0")
        expected = child.PrivateKey().Raw().ToBytes()

        kp = KeyDeriver(test_mnemonic).from_mnemonic(1)
        assert kp.private_key.seed() == expected

    def test_passphrase_changes_key(self, test_mnemonic):
        plain = MnemonicKeyStrategy(test_mnemonic, 0).derive()
        salted = MnemonicKeyStrategy(test_mnemonic, 0, passphrase="TREZOR").derive()
        assert plain != salted

    def test_negative_index(self, test_mnemonic):
        with pytest.raises(MnemonicIndexError):
            KeyDeriver(test_mnemonic).from_mnemonic(-1)

    def test_index_beyond_hardened_range(self, test_mnemonic):
        with pytest.raises(MnemonicIndexError):
            KeyDeriver(test_mnemonic).from_mnemonic(2 ** 31)

    def test_bad_checksum(self):
        # right word count, wrong checksum
        phrase = " ".join(["abandon"] * 12)
        with pytest.raises(MnemonicError):
            KeyDeriver(phrase).from_mnemonic(0)

    def test_unknown_word(self, test_mnemonic):
        phrase = test_mnemonic.replace("about", "zzzzz")
        with pytest.raises(MnemonicError):
            KeyDeriver(phrase).from_mnemonic(0)


class TestEncodedKey:
    """Hex and base58 private keys."""

    def test_hex_and_base58_agree(self):
        from_hex = KeyDeriver("0x" + SEED.hex()).from_encoded_private_key()
        from_b58 = KeyDeriver(bytes_to_base58(SEED)).from_encoded_private_key()
        assert from_hex == from_b58

    def test_uppercase_prefix(self):
        kp = KeyDeriver("0X" + SEED.hex()).from_encoded_private_key()
        assert kp.private_key.seed() == SEED

    def test_expanded_key_uses_first_32_bytes(self):
        expanded = SEED + b"\xff" * 32
        kp = KeyDeriver("0x" + expanded.hex()).from_encoded_private_key()
        assert kp.private_key.seed() == SEED

    def test_exported_private_key_roundtrips(self):
        account = derive_account("0x" + SEED.hex())
        again = derive_account(account.private_key_base58())
        assert again.address == account.address

    def test_short_key(self):
        with pytest.raises(SeedLengthError) as exc:
            KeyDeriver("0x" + "11" * 31).from_encoded_private_key()
        assert exc.value.details["length"] == 31

    def test_bad_hex(self):
        with pytest.raises(DecodeError):
            KeyDeriver("0xnothex").from_encoded_private_key()

    def test_bad_base58(self):
        # 0, O, I and l are outside the base58 alphabet
        with pytest.raises(DecodeError):
            KeyDeriver("0OIl0OIl").from_encoded_private_key()


class TestKindMismatch:
    """Operations must match the credential kind."""

    def test_mnemonic_op_on_private_key(self):
        with pytest.raises(KeyTypeMismatchError):
            KeyDeriver("0x" + SEED.hex()).from_mnemonic(0)

    def test_private_key_op_on_mnemonic(self, test_mnemonic):
        with pytest.raises(KeyTypeMismatchError):
            KeyDeriver(test_mnemonic).from_encoded_private_key()

    def test_random_op_on_private_key(self):
        with pytest.raises(KeyTypeMismatchError) as exc:
            KeyDeriver("0x" + SEED.hex()).from_random()
        assert exc.value.expected is KeyKind.NONE
        assert exc.value.actual is KeyKind.PRIVATE_KEY

    def test_empty_credential_generates(self):
        deriver = KeyDeriver("")
        assert deriver.kind is KeyKind.NONE
        assert deriver.from_random() != deriver.from_random()


class TestRouting:
    """KeyDeriver.strategy routes on the credential kind."""

    def test_strategy_types(self, test_mnemonic):
        assert isinstance(KeyDeriver(None).strategy(), RandomKeyStrategy)
        assert isinstance(KeyDeriver("0x" + SEED.hex()).strategy(), EncodedKeyStrategy)
        assert isinstance(KeyDeriver(test_mnemonic).strategy(3), MnemonicKeyStrategy)

    def test_derive_account_with_index(self, test_mnemonic):
        a0 = derive_account(test_mnemonic, index=0)
        a1 = derive_account(test_mnemonic, index=1)
        assert a0.address != a1.address
        assert a0 == derive_account(test_mnemonic, index=0)

    def test_authentication_key_override(self):
        rotated = "0x" + "99" * 32
        account = derive_account("0x" + SEED.hex(), authentication_key=rotated)
        assert account.authentication_key == rotated
        assert account.address != rotated
