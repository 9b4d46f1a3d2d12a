"""
Transaction execution: sign, submit or simulate, then poll until final.

TransactionFlow walks one transaction through the signing protocol:

    BUILT -> MESSAGE_REQUESTED -> SIGNED -> SUBMITTED  -> FINALIZED
                                        \\-> SIMULATED

Any failing stage moves the flow to FAILED and re-raises.  While waiting,
only a node error about the transaction fails the flow; a timeout or a
transport failure leaves it in SUBMITTED, since the outcome is still unknown.
"""

from __future__ import annotations
import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from ..runtime.errors import (
    AptClientError,
    ApiError,
    InvalidStateError,
    PollTimeoutError,
    ValidationError,
)
from ..transactions import SignedTransaction, SigningMessage, TransactionRecord, UnsignedTransaction, attach_signature

logger = logging.getLogger(__name__)

TRANSACTION_NOT_FOUND = "transaction_not_found"


def check_attempts(max_attempts: int) -> int:
    """Raise ValidationError unless max_attempts is at least 1."""
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ValidationError(f"max_attempts must be an integer >= 1, got {max_attempts!r}")
    return max_attempts


def poll_until_final(
    client,
    tx_hash: str,
    max_attempts: int,
    interval: float = 1.0,
    sleep: Callable[[float], None] = time.sleep
) -> bool:
    """
    Poll a transaction by hash until it has a committed version.

    Args:
        client: AptClient (anything with ``transaction_by_hash``)
        tx_hash: Hash returned by submit
        max_attempts: Poll ceiling, at least 1
        interval: Seconds between attempts
        sleep: Sleep function, replaceable in tests

    Returns:
        The committed transaction's ``success`` flag

    Raises:
        ValidationError: If max_attempts < 1
        PollTimeoutError: If still pending after max_attempts polls
        ApiError: For any error envelope other than "not found"
    """
    check_attempts(max_attempts)

    for attempt in range(1, max_attempts + 1):
        try:
            record: Optional[TransactionRecord] = client.transaction_by_hash(tx_hash)
        except ApiError as e:
            # Nodes can briefly report a just-submitted hash as unknown
            if e.error_code != TRANSACTION_NOT_FOUND:
                raise
            record = None

        if record is not None and not record.is_pending:
            logger.debug(f"Transaction {tx_hash} committed at version {record.version} (success={record.success})")
            return bool(record.success)

        logger.debug(f"Transaction {tx_hash} pending (attempt {attempt}/{max_attempts})")
        if attempt < max_attempts:
            sleep(interval)

    raise PollTimeoutError(tx_hash, max_attempts)


class TransactionState(str, Enum):
    BUILT = "built"
    MESSAGE_REQUESTED = "message_requested"
    SIGNED = "signed"
    SUBMITTED = "submitted"
    SIMULATED = "simulated"
    FINALIZED = "finalized"
    FAILED = "failed"


class TransactionFlow:
    """
    Drives one transaction through the signing protocol.

    Not thread safe; use one flow per thread.
    """

    def __init__(self, client, account, unsigned_tx: UnsignedTransaction):
        """
        Initialize flow.

        Args:
            client: AptClient
            account: Signing Account
            unsigned_tx: Transaction to sign
        """
        self.client = client
        self.account = account
        self.unsigned_tx = unsigned_tx
        self.state = TransactionState.BUILT
        self.signing_message: Optional[SigningMessage] = None
        self.signed_tx: Optional[SignedTransaction] = None
        self.pending: Optional[TransactionRecord] = None
        self.simulation: Optional[List[TransactionRecord]] = None
        self.success: Optional[bool] = None
        self.error: Optional[AptClientError] = None

    def _require(self, *states: TransactionState) -> None:
        if self.state not in states:
            expected = ", ".join(s.value for s in states)
            raise InvalidStateError(
                f"cannot run this stage in state {self.state.value} (expected {expected})",
                details={"state": self.state.value},
            )

    def _advance(self, state: TransactionState) -> None:
        logger.debug(f"{self.unsigned_tx.sender}#{self.unsigned_tx.sequence_number}: "
                     f"{self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, error: AptClientError) -> None:
        self.error = error
        self._advance(TransactionState.FAILED)

    def request_signing_message(self) -> SigningMessage:
        """BUILT -> MESSAGE_REQUESTED."""
        self._require(TransactionState.BUILT)
        try:
            self.signing_message = self.client.sign_message(self.unsigned_tx)
        except AptClientError as e:
            self._fail(e)
            raise
        self._advance(TransactionState.MESSAGE_REQUESTED)
        return self.signing_message

    def sign(self) -> SignedTransaction:
        """MESSAGE_REQUESTED -> SIGNED; requests the message first if still BUILT."""
        if self.state == TransactionState.BUILT:
            self.request_signing_message()
        self._require(TransactionState.MESSAGE_REQUESTED)
        try:
            self.signed_tx = attach_signature(self.account, self.unsigned_tx, self.signing_message)
        except AptClientError as e:
            self._fail(e)
            raise
        self._advance(TransactionState.SIGNED)
        return self.signed_tx

    def simulate(self, estimate_gas_unit_price: bool = False,
                 estimate_max_gas_amount: bool = False) -> List[TransactionRecord]:
        """SIGNED -> SIMULATED.  Nothing is committed; the flow may still submit."""
        self._require(TransactionState.SIGNED)
        try:
            self.simulation = self.client.simulate_transaction(
                self.signed_tx,
                estimate_gas_unit_price=estimate_gas_unit_price,
                estimate_max_gas_amount=estimate_max_gas_amount,
            )
        except AptClientError as e:
            self._fail(e)
            raise
        self._advance(TransactionState.SIMULATED)
        return self.simulation

    def submit(self) -> TransactionRecord:
        """SIGNED or SIMULATED -> SUBMITTED."""
        self._require(TransactionState.SIGNED, TransactionState.SIMULATED)
        try:
            self.pending = self.client.submit_transaction(self.signed_tx)
        except AptClientError as e:
            self._fail(e)
            raise
        self._advance(TransactionState.SUBMITTED)
        return self.pending

    def wait(self, max_attempts: int = 30, interval: float = 1.0,
             sleep: Callable[[float], None] = time.sleep) -> bool:
        """
        SUBMITTED -> FINALIZED.

        Only a node error about the transaction itself moves the flow to
        FAILED. Bad arguments, timeouts and transport failures leave it in
        SUBMITTED, since the transaction may still commit, and wait may be
        called again.

        Returns:
            The committed transaction's success flag

        Raises:
            ValidationError: If max_attempts < 1
            PollTimeoutError: If still pending after max_attempts polls
            TransportError: If a poll request fails
        """
        self._require(TransactionState.SUBMITTED)
        check_attempts(max_attempts)
        try:
            self.success = poll_until_final(self.client, self.pending.hash, max_attempts, interval, sleep)
        except ApiError as e:
            self._fail(e)
            raise
        self._advance(TransactionState.FINALIZED)
        return self.success

    def run(self, max_attempts: int = 30, interval: float = 1.0,
            sleep: Callable[[float], None] = time.sleep) -> bool:
        """Sign, submit and wait in one call."""
        self.sign()
        self.submit()
        return self.wait(max_attempts, interval, sleep)


__all__ = [
    "TRANSACTION_NOT_FOUND",
    "check_attempts",
    "poll_until_final",
    "TransactionState",
    "TransactionFlow",
]
