"""
Tests for address derivation and validation.
"""

import hashlib

import pytest

from aptclient.keys.address import check_address, derive_address, is_valid_address, normalize_address
from aptclient.runtime.errors import EncodingError, ValidationError

PUBLIC_KEY = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")


class TestDeriveAddress:

    def test_sha3_of_key_and_scheme_byte(self):
        expected = "0x" + hashlib.sha3_256(PUBLIC_KEY + b"\x00").hexdigest()
        address, auth_key = derive_address(PUBLIC_KEY)
        assert address == expected
        assert auth_key == address

    def test_pure(self):
        assert derive_address(PUBLIC_KEY) == derive_address(PUBLIC_KEY)

    def test_full_length(self):
        address, _ = derive_address(PUBLIC_KEY)
        assert len(address) == 66
        assert address == address.lower()

    def test_rejects_wrong_key_length(self):
        with pytest.raises(EncodingError):
            derive_address(PUBLIC_KEY[:31])


class TestAddressValidation:

    def test_normalize_pads_short_form(self):
        assert normalize_address("0x1") == "0x" + "0" * 63 + "1"

    def test_normalize_lowercases(self):
        assert normalize_address("0x" + "AB" * 32) == "0x" + "ab" * 32

    @pytest.mark.parametrize("bad", ["", "1234", "0x", "0xzz", "0x" + "1" * 65])
    def test_normalize_rejects(self, bad):
        with pytest.raises(ValidationError):
            normalize_address(bad)

    def test_check_requires_full_length(self):
        with pytest.raises(ValidationError):
            check_address("0x1")
        with pytest.raises(ValidationError):
            check_address("")
        assert check_address("0x" + "01" * 32) == "0x" + "01" * 32

    def test_is_valid_address(self):
        assert is_valid_address("0x1")
        assert not is_valid_address("")
        assert not is_valid_address("1")
