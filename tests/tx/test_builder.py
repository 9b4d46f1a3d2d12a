"""
Tests for TransactionBuilder and payload helpers.
"""

import time
from unittest.mock import Mock

import pytest

from aptclient.runtime.errors import ValidationError
from aptclient.tx.builder import (
    DEFAULT_GAS_UNIT_PRICE,
    DEFAULT_MAX_GAS_AMOUNT,
    TransactionBuilder,
    coin_transfer,
    entry_function,
    script,
)

from helpers.factories import RECEIVER, mk_account


class TestPayloadHelpers:

    def test_entry_function_renders_arguments(self):
        payload = entry_function("0x1::m::f", ["u8"], [7, True, "0x2"])
        assert payload.arguments == ["7", "true", "0x2"]
        assert payload.type_arguments == ["u8"]

    def test_entry_function_rejects_unqualified_name(self):
        with pytest.raises(ValidationError):
            entry_function("f")

    def test_coin_transfer(self):
        payload = coin_transfer("0x2", 500)
        assert payload.function == "0x1::coin::transfer"
        assert payload.arguments == ["0x" + "0" * 63 + "2", "500"]

    @pytest.mark.parametrize("amount", [0, -1, True, 1.5])
    def test_coin_transfer_rejects_amount(self, amount):
        with pytest.raises(ValidationError):
            coin_transfer(RECEIVER, amount)

    def test_script(self):
        assert script("0xa11ceb0b").code.bytecode == "0xa11ceb0b"
        with pytest.raises(ValidationError):
            script("a11ceb0b")


class TestTransactionBuilder:

    def test_defaults(self):
        account = mk_account(1)
        before = int(time.time())
        tx = TransactionBuilder(account).with_sequence_number(3).coin_transfer(RECEIVER, 1).build()

        assert tx.sender == account.address
        assert tx.sequence_number == 3
        assert tx.max_gas_amount == DEFAULT_MAX_GAS_AMOUNT
        assert tx.gas_unit_price == DEFAULT_GAS_UNIT_PRICE
        assert before + 600 <= tx.expiration_timestamp_secs <= int(time.time()) + 600

    def test_overrides(self):
        tx = (TransactionBuilder("0x1")
              .with_sequence_number(0)
              .with_max_gas_amount(10)
              .with_gas_unit_price(1)
              .with_expiration(123)
              .entry_function("0x1::m::f")
              .build())
        assert (tx.max_gas_amount, tx.gas_unit_price, tx.expiration_timestamp_secs) == (10, 1, 123)

    def test_sequence_number_from_client(self):
        client = Mock()
        client.get_sequence_number.return_value = 9
        account = mk_account(1)

        tx = TransactionBuilder(account, client).coin_transfer(RECEIVER, 1).build()

        assert tx.sequence_number == 9
        client.get_sequence_number.assert_called_once_with(account.address)

    def test_sequence_number_required_without_client(self):
        with pytest.raises(ValidationError):
            TransactionBuilder("0x1").build()

    def test_out_of_range_field(self):
        with pytest.raises(ValidationError):
            TransactionBuilder("0x1").with_sequence_number(0).with_gas_unit_price(-1).build()

    def test_ttl(self):
        with pytest.raises(ValidationError):
            TransactionBuilder("0x1").with_ttl(0)
        tx = TransactionBuilder("0x1").with_sequence_number(0).with_ttl(5).build()
        assert tx.expiration_timestamp_secs <= int(time.time()) + 5
