"""
Unsigned transaction builder.

Fills in gas and expiration defaults and, when given a client, looks up the
sender's current sequence number.  Setters return the builder so calls can
be chained.
"""

from __future__ import annotations
import logging
import time
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from ..keys.account import Account
from ..keys.address import normalize_address
from ..runtime.codec import u64_to_str
from ..runtime.errors import ValidationError
from ..transactions import EntryFunctionPayload, MoveScriptBytecode, ScriptPayload, UnsignedTransaction

logger = logging.getLogger(__name__)

DEFAULT_MAX_GAS_AMOUNT = 2000
DEFAULT_GAS_UNIT_PRICE = 100
DEFAULT_TTL_SECS = 600

APTOS_COIN = "0x1::aptos_coin::AptosCoin"
COIN_TRANSFER_FUNCTION = "0x1::coin::transfer"


def _arg(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return u64_to_str(value)
    return str(value)


def entry_function(function: str, type_arguments: Optional[Sequence[str]] = None,
                   arguments: Optional[Sequence[Any]] = None) -> EntryFunctionPayload:
    """
    Build an entry-function payload.

    Integer arguments are rendered as decimal strings.

    Raises:
        ValidationError: If the function name is not fully qualified
    """
    try:
        return EntryFunctionPayload(
            function=function,
            type_arguments=list(type_arguments or []),
            arguments=[_arg(a) for a in (arguments or [])],
        )
    except PydanticValidationError as e:
        raise ValidationError(f"invalid entry function payload: {e}", cause=e)


def coin_transfer(receiver: str, amount: int, coin_type: str = APTOS_COIN) -> EntryFunctionPayload:
    """Payload transferring ``amount`` of ``coin_type`` to ``receiver``."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(f"transfer amount must be a positive integer, got {amount!r}")
    return entry_function(COIN_TRANSFER_FUNCTION, [coin_type], [normalize_address(receiver), amount])


def script(bytecode: str, type_arguments: Optional[Sequence[str]] = None,
           arguments: Optional[Sequence[Any]] = None) -> ScriptPayload:
    """Build a script payload from ``0x``-prefixed bytecode."""
    try:
        return ScriptPayload(
            code=MoveScriptBytecode(bytecode=bytecode),
            type_arguments=list(type_arguments or []),
            arguments=[_arg(a) for a in (arguments or [])],
        )
    except PydanticValidationError as e:
        raise ValidationError(f"invalid script payload: {e}", cause=e)


class TransactionBuilder:
    """
    Fluent builder for UnsignedTransaction.

    Example:
        ```python
        unsigned = (TransactionBuilder(account, client)
                    .coin_transfer(receiver, 1000)
                    .with_gas_unit_price(150)
                    .build())
        ```
    """

    def __init__(self, sender: Union[str, Account], client=None):
        """
        Initialize builder.

        Args:
            sender: Sending account or its address
            client: Client used to look up the sequence number when unset
        """
        address = sender.address if isinstance(sender, Account) else sender
        self.sender = normalize_address(address)
        self.client = client
        self.sequence_number: Optional[int] = None
        self.max_gas_amount = DEFAULT_MAX_GAS_AMOUNT
        self.gas_unit_price = DEFAULT_GAS_UNIT_PRICE
        self.expiration_timestamp_secs: Optional[int] = None
        self.ttl_secs = DEFAULT_TTL_SECS
        self.payload: Optional[Union[EntryFunctionPayload, ScriptPayload]] = None

    def with_sequence_number(self, sequence_number: int) -> TransactionBuilder:
        self.sequence_number = sequence_number
        return self

    def with_max_gas_amount(self, max_gas_amount: int) -> TransactionBuilder:
        self.max_gas_amount = max_gas_amount
        return self

    def with_gas_unit_price(self, gas_unit_price: int) -> TransactionBuilder:
        self.gas_unit_price = gas_unit_price
        return self

    def with_expiration(self, expiration_timestamp_secs: int) -> TransactionBuilder:
        """Set an absolute expiration (unix seconds)."""
        self.expiration_timestamp_secs = expiration_timestamp_secs
        return self

    def with_ttl(self, ttl_secs: int) -> TransactionBuilder:
        """Expire ``ttl_secs`` after build time."""
        if ttl_secs <= 0:
            raise ValidationError(f"ttl must be positive, got {ttl_secs}")
        self.ttl_secs = ttl_secs
        self.expiration_timestamp_secs = None
        return self

    def with_payload(self, payload: Union[EntryFunctionPayload, ScriptPayload]) -> TransactionBuilder:
        self.payload = payload
        return self

    def entry_function(self, function: str, type_arguments: Optional[List[str]] = None,
                       arguments: Optional[List[Any]] = None) -> TransactionBuilder:
        """Set an entry-function payload."""
        return self.with_payload(entry_function(function, type_arguments, arguments))

    def coin_transfer(self, receiver: str, amount: int, coin_type: str = APTOS_COIN) -> TransactionBuilder:
        """Set a coin transfer payload."""
        return self.with_payload(coin_transfer(receiver, amount, coin_type))

    def _resolve_sequence_number(self) -> int:
        if self.sequence_number is not None:
            return self.sequence_number
        if self.client is None:
            raise ValidationError("sequence number is unset and no client was given to look it up")
        sequence_number = self.client.get_sequence_number(self.sender)
        logger.debug(f"Looked up sequence number {sequence_number} for {self.sender}")
        return sequence_number

    def build(self) -> UnsignedTransaction:
        """
        Assemble the unsigned transaction.

        Raises:
            ValidationError: If a field is out of range
        """
        expiration = self.expiration_timestamp_secs
        if expiration is None:
            expiration = int(time.time()) + self.ttl_secs

        try:
            return UnsignedTransaction(
                sender=self.sender,
                sequence_number=self._resolve_sequence_number(),
                max_gas_amount=self.max_gas_amount,
                gas_unit_price=self.gas_unit_price,
                expiration_timestamp_secs=expiration,
                payload=self.payload,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"invalid transaction: {e}", cause=e)


__all__ = [
    "DEFAULT_MAX_GAS_AMOUNT",
    "DEFAULT_GAS_UNIT_PRICE",
    "DEFAULT_TTL_SECS",
    "APTOS_COIN",
    "COIN_TRANSFER_FUNCTION",
    "entry_function",
    "coin_transfer",
    "script",
    "TransactionBuilder",
]
