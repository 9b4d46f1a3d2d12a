"""
Test factories for accounts, transactions and node responses.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Union

from aptclient.crypto.ed25519 import Ed25519KeyPair
from aptclient.keys.account import Account
from aptclient.transactions import UnsignedTransaction
from aptclient.tx.builder import coin_transfer

TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)

RECEIVER = "0x" + "ab" * 32

# 32-byte digest the mock node hands back from encode_submission
SIGNING_DIGEST = "0x" + "5a" * 32

TX_HASH = "0x" + "cd" * 32


def mk_account(seed: Union[int, bytes] = 1) -> Account:
    """Deterministic account from an int or 32-byte seed."""
    if isinstance(seed, int):
        seed = seed.to_bytes(32, "big")
    return Account(Ed25519KeyPair.from_seed(seed))


def mk_unsigned_tx(
    sender: str,
    sequence_number: int = 5,
    max_gas_amount: int = 10,
    gas_unit_price: int = 1,
    expiration_timestamp_secs: int = 1_700_000_600,
    amount: Optional[int] = 1000,
) -> UnsignedTransaction:
    """Coin transfer to RECEIVER, or no payload when amount is None."""
    return UnsignedTransaction(
        sender=sender,
        sequence_number=sequence_number,
        max_gas_amount=max_gas_amount,
        gas_unit_price=gas_unit_price,
        expiration_timestamp_secs=expiration_timestamp_secs,
        payload=coin_transfer(RECEIVER, amount) if amount is not None else None,
    )


def pending_record(tx_hash: str = TX_HASH, **overrides: Any) -> Dict[str, Any]:
    record = {"type": "pending_transaction", "hash": tx_hash}
    record.update(overrides)
    return record


def committed_record(tx_hash: str = TX_HASH, success: bool = True, version: str = "1234",
                     **overrides: Any) -> Dict[str, Any]:
    record = {
        "type": "user_transaction",
        "hash": tx_hash,
        "version": version,
        "success": success,
        "vm_status": "Executed successfully" if success else "Move abort",
        "gas_used": "7",
    }
    record.update(overrides)
    return record


def error_envelope(message: str, error_code: str = "invalid_input", **overrides: Any) -> Dict[str, Any]:
    envelope = {"message": message, "error_code": error_code, "vm_error_code": None}
    envelope.update(overrides)
    return envelope
