"""
Ledger REST API client.

Covers the transaction-signing protocol (encode_submission, submit,
simulate, batch, lookup by hash) plus the read-only account, ledger, block
and event endpoints.  Every response body is probed for an error envelope
before it is decoded as a success record.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from .keys.address import check_address
from .runtime.errors import (
    ApiError,
    BatchSubmissionError,
    ErrorEnvelope,
    MalformedResponseError,
    PayloadMissingError,
    ValidationError,
    probe_error_envelope,
    raise_for_envelope,
)
from .transactions import (
    SignedTransaction,
    SigningMessage,
    TransactionRecord,
    UnsignedTransaction,
    attach_signature,
)
from .transport.http import RequestsTransport, Transport
from .types import (
    ACCOUNT_RESOURCE,
    APTOS_COIN_STORE,
    AccountInfo,
    AccountModule,
    AccountResource,
    Block,
    Event,
    GasEstimate,
    LedgerInfo,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_PAGE_SIZE = 25

WELL_KNOWN_ENDPOINTS = {
    "mainnet": "https://fullnode.mainnet.aptoslabs.com/v1",
    "testnet": "https://fullnode.testnet.aptoslabs.com/v1",
    "devnet": "https://fullnode.devnet.aptoslabs.com/v1",
    "local": "http://127.0.0.1:8080/v1",
}


@dataclass(frozen=True)
class ApiPaths:
    """
    Endpoint paths, pinned to the ``v1`` REST API revision.

    Earlier API revisions used a different signing-message path; override
    the relevant fields rather than assuming revisions are interchangeable.
    """

    ledger_info: str = ""
    health: str = "-/healthy"
    block_by_height: str = "blocks/by_height/{height}"
    block_by_version: str = "blocks/by_version/{version}"
    account: str = "accounts/{address}"
    account_resources: str = "accounts/{address}/resources"
    account_resource: str = "accounts/{address}/resource/{resource_type}"
    account_modules: str = "accounts/{address}/modules"
    account_module: str = "accounts/{address}/module/{module_name}"
    account_transactions: str = "accounts/{address}/transactions"
    transactions: str = "transactions"
    transaction_by_hash: str = "transactions/by_hash/{txn_hash}"
    transaction_by_version: str = "transactions/by_version/{version}"
    encode_submission: str = "transactions/encode_submission"
    submit: str = "transactions"
    simulate: str = "transactions/simulate"
    batch: str = "transactions/batch"
    events_by_key: str = "events/{key}"
    events_by_creation_number: str = "accounts/{address}/events/{creation_number}"
    events_by_handle: str = "accounts/{address}/events/{handle}/{field_name}"
    estimate_gas_price: str = "estimate_gas_price"


@dataclass
class ClientConfig:
    """Configuration for the REST API client."""

    endpoint: str
    timeout: Optional[float] = 30.0
    verify_ssl: bool = True
    user_agent: str = "aptclient-python/0.1.0"
    debug: bool = False
    poll_interval: float = 1.0
    poll_attempts: int = 30
    paths: ApiPaths = field(default_factory=ApiPaths)

    @property
    def base_url(self) -> str:
        """Endpoint with well-known names resolved and trailing slash removed."""
        endpoint = self.endpoint.strip()
        if not endpoint:
            raise ValidationError("endpoint is empty")
        endpoint = WELL_KNOWN_ENDPOINTS.get(endpoint.lower(), endpoint)
        return endpoint.rstrip("/")


def _page(limit: Optional[int] = None, start: Optional[int] = None) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    if limit is not None:
        if limit <= 0:
            raise ValidationError(f"limit must be positive, got {limit}")
        params["limit"] = limit
    if start is not None:
        if start < 0:
            raise ValidationError(f"start must be >= 0, got {start}")
        params["start"] = start
    return params


class AptClient:
    """
    REST API client for an account-based Move ledger.

    Example:
        ```python
        client = AptClient("testnet")
        account = derive_account(mnemonic, index=0)
        unsigned = TransactionBuilder(account, client).coin_transfer(receiver, 1000).build()
        signed = client.sign_transaction(account, unsigned)
        record = client.submit_transaction(signed)
        client.wait_for_transaction(record.hash)
        ```
    """

    def __init__(self, config: Union[str, ClientConfig], transport: Optional[Transport] = None):
        """
        Initialize the client.

        Args:
            config: Either an endpoint URL / well-known name or a ClientConfig
            transport: Transport to use; a RequestsTransport is built if omitted
        """
        if isinstance(config, str):
            config = ClientConfig(endpoint=config)
        self.config = config
        self.paths = config.paths

        self.logger = logging.getLogger(__name__)
        if self.config.debug:
            self.logger.setLevel(logging.DEBUG)

        if transport is None:
            transport = RequestsTransport(
                config.base_url,
                timeout=config.timeout,
                verify_ssl=config.verify_ssl,
                user_agent=config.user_agent,
            )
            self._owns_transport = True
        else:
            self._owns_transport = False
        self.transport = transport

    def close(self) -> None:
        """Close the transport if owned by this client."""
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> AptClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # Response decoding
    # =========================================================================

    @staticmethod
    def _parse(body: str) -> Any:
        """Probe for an error envelope, then parse JSON."""
        raise_for_envelope(body)
        try:
            return json.loads(body)
        except (ValueError, TypeError) as e:
            raise MalformedResponseError(f"response is not valid JSON: {body!r:.200}", cause=e)

    @staticmethod
    def _validate(model: Type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(f"unexpected {model.__name__} shape: {e}", cause=e)

    def _decode(self, body: str, model: Type[ModelT]) -> ModelT:
        return self._validate(model, self._parse(body))

    def _decode_list(self, body: str, model: Type[ModelT]) -> List[ModelT]:
        data = self._parse(body)
        if not isinstance(data, list):
            raise MalformedResponseError(f"expected a list of {model.__name__}, got {type(data).__name__}")
        return [self._validate(model, item) for item in data]

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        self.logger.debug(f"GET {path} params={params}")
        return self.transport.get(path, params or None)

    def _post(self, path: str, body: Any, params: Optional[Dict[str, Any]] = None) -> str:
        self.logger.debug(f"POST {path}")
        return self.transport.post(path, body, params or None)

    # =========================================================================
    # Node and ledger
    # =========================================================================

    def node_health(self, duration_secs: Optional[int] = None) -> str:
        """
        Check node health.

        Args:
            duration_secs: Fail if the latest ledger is older than this

        Returns:
            Health message reported by the node
        """
        params = {"duration_secs": duration_secs} if duration_secs is not None else None
        body = self._get(self.paths.health, params)
        try:
            data = json.loads(body)
        except ValueError:
            return body.strip()
        if isinstance(data, dict) and data.get("error_code"):
            raise ApiError.from_envelope(ErrorEnvelope.model_validate(data))
        if isinstance(data, dict):
            return str(data.get("message", ""))
        return str(data)

    def ledger_info(self) -> LedgerInfo:
        """Get the latest ledger information."""
        return self._decode(self._get(self.paths.ledger_info), LedgerInfo)

    def block_by_height(self, height: int, with_transactions: bool = False) -> Block:
        """Get a block by its height."""
        path = self.paths.block_by_height.format(height=height)
        params = {"with_transactions": "true" if with_transactions else "false"}
        return self._decode(self._get(path, params), Block)

    def block_by_version(self, version: int, with_transactions: bool = False) -> Block:
        """Get the block containing a ledger version."""
        path = self.paths.block_by_version.format(version=version)
        params = {"with_transactions": "true" if with_transactions else "false"}
        return self._decode(self._get(path, params), Block)

    def estimate_gas_price(self) -> int:
        """Estimated gas unit price."""
        return self._decode(self._get(self.paths.estimate_gas_price), GasEstimate).gas_estimate

    # =========================================================================
    # Accounts
    # =========================================================================

    def account(self, address: str) -> AccountInfo:
        """Get an account's sequence number and authentication key."""
        path = self.paths.account.format(address=check_address(address))
        return self._decode(self._get(path), AccountInfo)

    def account_resources(self, address: str, version: Optional[int] = None) -> List[AccountResource]:
        """List resources stored under an account."""
        path = self.paths.account_resources.format(address=check_address(address))
        params = {"ledger_version": version} if version is not None else None
        return self._decode_list(self._get(path, params), AccountResource)

    def account_resource(self, address: str, resource_type: str,
                         version: Optional[int] = None) -> AccountResource:
        """
        Get one resource by its fully qualified type.

        Raises:
            ValidationError: If resource_type is empty
        """
        if not resource_type:
            raise ValidationError("resource type is empty")
        path = self.paths.account_resource.format(address=check_address(address), resource_type=resource_type)
        params = {"ledger_version": version} if version is not None else None
        return self._decode(self._get(path, params), AccountResource)

    def account_modules(self, address: str, version: Optional[int] = None) -> List[AccountModule]:
        """List modules published under an account."""
        path = self.paths.account_modules.format(address=check_address(address))
        params = {"ledger_version": version} if version is not None else None
        return self._decode_list(self._get(path, params), AccountModule)

    def account_module(self, address: str, module_name: str, version: Optional[int] = None) -> AccountModule:
        """Get one module by name."""
        if not module_name:
            raise ValidationError("module name is empty")
        path = self.paths.account_module.format(address=check_address(address), module_name=module_name)
        params = {"ledger_version": version} if version is not None else None
        return self._decode(self._get(path, params), AccountModule)

    def get_sequence_number(self, address: str) -> int:
        """
        Current sequence number of an account.

        Raises:
            MalformedResponseError: If the resource lacks ``sequence_number``
        """
        resource = self.account_resource(address, ACCOUNT_RESOURCE)
        value = resource.data.get("sequence_number")
        if not isinstance(value, str) or not value.isdigit():
            raise MalformedResponseError(f"sequence_number missing or not a decimal string: {value!r}")
        return int(value)

    def get_balance(self, address: str, coin_store: str = APTOS_COIN_STORE) -> int:
        """
        Coin balance of an account.

        Raises:
            MalformedResponseError: If the resource lacks ``coin.value``
        """
        resource = self.account_resource(address, coin_store)
        coin = resource.data.get("coin")
        if not isinstance(coin, dict) or not str(coin.get("value", "")).isdigit():
            raise MalformedResponseError(f"coin value missing from {coin_store}")
        return int(coin["value"])

    # =========================================================================
    # Transactions: reads
    # =========================================================================

    def transactions(self, limit: int = DEFAULT_PAGE_SIZE, start: Optional[int] = None) -> List[TransactionRecord]:
        """List committed transactions."""
        return self._decode_list(self._get(self.paths.transactions, _page(limit, start)), TransactionRecord)

    def transactions_by_account(self, address: str, limit: int = DEFAULT_PAGE_SIZE,
                                start: Optional[int] = None) -> List[TransactionRecord]:
        """List transactions sent by an account."""
        path = self.paths.account_transactions.format(address=check_address(address))
        return self._decode_list(self._get(path, _page(limit, start)), TransactionRecord)

    def transaction_by_hash(self, txn_hash: str) -> TransactionRecord:
        """
        Look up a transaction (pending or committed) by hash.

        Raises:
            ValidationError: If the hash is empty
        """
        if not txn_hash:
            raise ValidationError("transaction hash is empty")
        path = self.paths.transaction_by_hash.format(txn_hash=txn_hash)
        return self._decode(self._get(path), TransactionRecord)

    def transaction_by_version(self, version: int) -> TransactionRecord:
        """Look up a committed transaction by ledger version."""
        path = self.paths.transaction_by_version.format(version=version)
        return self._decode(self._get(path), TransactionRecord)

    # =========================================================================
    # Transactions: signing protocol
    # =========================================================================

    def sign_message(self, unsigned_tx: UnsignedTransaction) -> SigningMessage:
        """
        Ask the node for the canonical signing message of a transaction.

        Raises:
            PayloadMissingError: If the transaction has no payload (no request is sent)
            ApiError: If the node returns an error envelope
            MalformedResponseError: If the response is not a ``0x`` string
        """
        if unsigned_tx.payload is None:
            raise PayloadMissingError()

        body = self._post(self.paths.encode_submission, unsigned_tx.to_dict())
        if not body or not body.strip():
            raise MalformedResponseError("empty signing message response")
        raise_for_envelope(body)
        return SigningMessage.from_response(body)

    def sign_transaction(self, account, unsigned_tx: UnsignedTransaction) -> SignedTransaction:
        """
        Request the signing message and sign it with the account key.

        Raises:
            DigestDecodeError: If the returned digest is not valid hex
        """
        signing_message = self.sign_message(unsigned_tx)
        signed = attach_signature(account, unsigned_tx, signing_message)
        self.logger.debug(f"Signed transaction {unsigned_tx.sender}#{unsigned_tx.sequence_number}")
        return signed

    def submit_transaction(self, signed_tx: SignedTransaction) -> TransactionRecord:
        """
        Submit a signed transaction.

        Returns:
            The pending transaction record

        Raises:
            ApiError: If the node rejects the transaction
        """
        body = self._post(self.paths.submit, signed_tx.to_dict())
        record = self._decode(body, TransactionRecord)
        self.logger.debug(f"Submitted transaction {record.hash}")
        return record

    def simulate_transaction(
        self,
        signed_tx: SignedTransaction,
        estimate_gas_unit_price: bool = False,
        estimate_max_gas_amount: bool = False
    ) -> List[TransactionRecord]:
        """
        Dry-run a signed transaction without committing state.

        Returns:
            Simulated transaction records (the node answers with a list)
        """
        params: Dict[str, Any] = {}
        if estimate_gas_unit_price:
            params["estimate_gas_unit_price"] = "true"
        if estimate_max_gas_amount:
            params["estimate_max_gas_amount"] = "true"

        data = self._parse(self._post(self.paths.simulate, signed_tx.to_dict(), params))
        items = data if isinstance(data, list) else [data]
        return [self._validate(TransactionRecord, item) for item in items]

    def submit_batch(self, signed_txs: Sequence[SignedTransaction]) -> List[TransactionRecord]:
        """
        Submit several signed transactions in one request.

        Failures are reported as one aggregate error; submit individually
        when per-transaction status is needed.

        Raises:
            ValidationError: If the batch is empty
            BatchSubmissionError: If the node rejects any part of the batch
        """
        if not signed_txs:
            raise ValidationError("batch is empty")

        batch = {str(i): tx.to_dict() for i, tx in enumerate(signed_txs)}
        body = self._post(self.paths.batch, batch)

        envelope = probe_error_envelope(body)
        if envelope is not None:
            raise BatchSubmissionError(
                f"batch of {len(signed_txs)} rejected: {envelope.message}",
                failures=[envelope.model_dump()],
            )

        try:
            data = json.loads(body) if body and body.strip() else []
        except ValueError as e:
            raise MalformedResponseError(f"batch response is not valid JSON: {body!r:.200}", cause=e)

        if isinstance(data, dict):
            failures = data.get("transaction_failures") or []
            if failures:
                raise BatchSubmissionError(
                    f"{len(failures)} of {len(signed_txs)} transactions failed",
                    failures=failures,
                )
            return []
        if not isinstance(data, list):
            raise MalformedResponseError(f"unexpected batch response: {type(data).__name__}")
        return [self._validate(TransactionRecord, item) for item in data]

    def wait_for_transaction(self, txn_hash: str, max_attempts: Optional[int] = None,
                             interval: Optional[float] = None) -> bool:
        """
        Poll until a transaction is committed and return its success flag.

        Raises:
            PollTimeoutError: If still pending after max_attempts polls
        """
        from .tx.execute import poll_until_final

        return poll_until_final(
            self,
            txn_hash,
            max_attempts if max_attempts is not None else self.config.poll_attempts,
            interval=interval if interval is not None else self.config.poll_interval,
        )

    # =========================================================================
    # Events
    # =========================================================================

    def events_by_key(self, key: str, limit: int = DEFAULT_PAGE_SIZE, start: Optional[int] = None) -> List[Event]:
        """Events for an event key (deprecated by newer nodes)."""
        if not key:
            raise ValidationError("event key is empty")
        path = self.paths.events_by_key.format(key=key)
        return self._decode_list(self._get(path, _page(limit, start)), Event)

    def events_by_creation_number(self, address: str, creation_number: Union[int, str],
                                  limit: int = DEFAULT_PAGE_SIZE, start: Optional[int] = None) -> List[Event]:
        """Events for an event stream identified by its creation number."""
        if creation_number in (None, ""):
            raise ValidationError("creation number is empty")
        path = self.paths.events_by_creation_number.format(
            address=check_address(address), creation_number=creation_number)
        return self._decode_list(self._get(path, _page(limit, start)), Event)

    def events_by_handle(self, address: str, handle: str, field_name: str,
                         limit: int = DEFAULT_PAGE_SIZE, start: Optional[int] = None) -> List[Event]:
        """Events for an event handle field of a resource."""
        if not handle or not field_name:
            raise ValidationError("event handle and field name are required")
        path = self.paths.events_by_handle.format(
            address=check_address(address), handle=handle, field_name=field_name)
        return self._decode_list(self._get(path, _page(limit, start)), Event)


def mainnet_client(**kwargs) -> AptClient:
    """Client for mainnet."""
    return AptClient(ClientConfig(endpoint="mainnet", **kwargs))


def testnet_client(**kwargs) -> AptClient:
    """Client for testnet."""
    return AptClient(ClientConfig(endpoint="testnet", **kwargs))


def local_client(**kwargs) -> AptClient:
    """Client for a local node."""
    return AptClient(ClientConfig(endpoint="local", **kwargs))


__all__ = [
    "WELL_KNOWN_ENDPOINTS",
    "ApiPaths",
    "ClientConfig",
    "AptClient",
    "mainnet_client",
    "testnet_client",
    "local_client",
]
