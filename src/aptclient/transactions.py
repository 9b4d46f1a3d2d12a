# Transaction wire models for the ledger REST API.
# Numeric u64 fields are ints in Python and decimal strings on the wire: the
# node recomputes the signing message from these exact strings.

from __future__ import annotations
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .keys.address import normalize_address
from .runtime.codec import U64_MAX, bytes_to_hex, hex_to_bytes, u64_to_str
from .runtime.errors import DecodeError, DigestDecodeError, MalformedResponseError

ED25519_SCHEME = "ed25519"
ED25519_SIGNATURE_TYPE = f"{ED25519_SCHEME}_signature"
ENTRY_FUNCTION_PAYLOAD = "entry_function_payload"
SCRIPT_PAYLOAD = "script_payload"
PENDING_TRANSACTION = "pending_transaction"
USER_TRANSACTION = "user_transaction"

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]


# =============================================================================
# Payloads
# =============================================================================

class EntryFunctionPayload(BaseModel):
    """Call of a public entry function: ``<address>::<module>::<function>``."""
    type: Literal["entry_function_payload"] = ENTRY_FUNCTION_PAYLOAD
    function: str
    type_arguments: List[str] = Field(default_factory=list)
    arguments: List[str] = Field(default_factory=list)

    @field_validator('function')
    @classmethod
    def validate_function(cls, v: str) -> str:
        """Require a fully qualified module and function name."""
        parts = v.split("::")
        if len(parts) != 3 or not all(parts):
            raise ValueError(f"function must be '<address>::<module>::<name>', got {v!r}")
        return v


class MoveScriptBytecode(BaseModel):
    """Compiled Move script."""
    bytecode: str

    @field_validator('bytecode')
    @classmethod
    def validate_bytecode(cls, v: str) -> str:
        if not v.startswith("0x"):
            raise ValueError("bytecode must be 0x-prefixed hex")
        return v


class ScriptPayload(BaseModel):
    """One-off Move script execution."""
    type: Literal["script_payload"] = SCRIPT_PAYLOAD
    code: MoveScriptBytecode
    type_arguments: List[str] = Field(default_factory=list)
    arguments: List[str] = Field(default_factory=list)


Payload = Annotated[Union[EntryFunctionPayload, ScriptPayload], Field(discriminator="type")]


# =============================================================================
# Transactions
# =============================================================================

class UnsignedTransaction(BaseModel):
    """
    Raw user transaction before signing.

    ``payload`` may be left unset while the transaction is being assembled;
    requesting a signing message without one fails before any network call.
    """
    sender: str
    sequence_number: U64
    max_gas_amount: U64
    gas_unit_price: U64
    expiration_timestamp_secs: U64
    payload: Optional[Payload] = None

    @field_validator('sender')
    @classmethod
    def validate_sender(cls, v: str) -> str:
        return normalize_address(v)

    def wire_fields(self) -> Dict[str, Any]:
        """Fields shared by the unsigned and signed wire maps."""
        return {
            "sender": self.sender,
            "sequence_number": u64_to_str(self.sequence_number),
            "max_gas_amount": u64_to_str(self.max_gas_amount),
            "gas_unit_price": u64_to_str(self.gas_unit_price),
            "expiration_timestamp_secs": u64_to_str(self.expiration_timestamp_secs),
            "payload": self.payload.model_dump() if self.payload is not None else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Wire map sent to ``encode_submission``."""
        return self.wire_fields()


class TransactionSignature(BaseModel):
    """Single-signer Ed25519 authenticator."""
    type: Literal["ed25519_signature"] = ED25519_SIGNATURE_TYPE
    public_key: str
    signature: str


class SignedTransaction(UnsignedTransaction):
    """Unsigned transaction plus the signature over the node's signing message."""
    signature: TransactionSignature

    def to_dict(self) -> Dict[str, Any]:
        """Wire map sent to the submit/simulate endpoints."""
        result = self.wire_fields()
        result["signature"] = self.signature.model_dump()
        return result

    def unsigned(self) -> UnsignedTransaction:
        """The transaction without its signature."""
        return UnsignedTransaction.model_validate(self.model_dump(exclude={"signature"}))


class SigningMessage(BaseModel):
    """Canonical signing message computed by the node."""
    message: str

    @classmethod
    def from_response(cls, body: str) -> SigningMessage:
        """
        Parse the ``encode_submission`` response body.

        Raises:
            MalformedResponseError: If the body is not a ``0x`` string
        """
        message = (body or "").strip().strip('"')
        if not message.startswith("0x"):
            raise MalformedResponseError(f"signing message is not 0x-prefixed: {body!r}")
        return cls(message=message)

    def to_bytes(self) -> bytes:
        """
        Decode the digest.

        Raises:
            DigestDecodeError: If the digest is not valid hex
        """
        try:
            return hex_to_bytes(self.message)
        except DecodeError as e:
            raise DigestDecodeError(f"invalid signing message digest: {e.message}", cause=e)


def attach_signature(account, unsigned_tx: UnsignedTransaction,
                     signing_message: SigningMessage) -> SignedTransaction:
    """
    Sign the node's digest verbatim and build the signed transaction.

    Args:
        account: Account whose key signs
        unsigned_tx: Transaction the signing message was requested for
        signing_message: Message returned by ``encode_submission``

    Returns:
        SignedTransaction
    """
    digest = signing_message.to_bytes()
    signature = TransactionSignature(
        public_key=account.public_key,
        signature=bytes_to_hex(account.sign(digest)),
    )
    return SignedTransaction.model_validate({**unsigned_tx.model_dump(), "signature": signature})


# =============================================================================
# Records returned by the node
# =============================================================================

class TransactionRecord(BaseModel):
    """
    Transaction as reported by the node.

    Pending transactions carry no version; committed ones carry the ledger
    version and the execution outcome in ``success``/``vm_status``.
    """
    type: str = ""
    hash: str = ""
    version: Optional[str] = None
    success: Optional[bool] = None
    vm_status: Optional[str] = None
    gas_used: Optional[int] = None
    sender: Optional[str] = None
    sequence_number: Optional[int] = None
    max_gas_amount: Optional[int] = None
    gas_unit_price: Optional[int] = None
    expiration_timestamp_secs: Optional[int] = None
    timestamp: Optional[str] = None
    state_change_hash: Optional[str] = None
    event_root_hash: Optional[str] = None
    accumulator_root_hash: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    signature: Optional[Dict[str, Any]] = None
    events: List[Dict[str, Any]] = Field(default_factory=list)
    changes: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    @field_validator('version', mode='before')
    @classmethod
    def validate_version(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    @property
    def is_pending(self) -> bool:
        """True while the transaction has no committed version."""
        return self.version is None or self.type == PENDING_TRANSACTION


__all__ = [
    "ED25519_SCHEME",
    "ED25519_SIGNATURE_TYPE",
    "ENTRY_FUNCTION_PAYLOAD",
    "SCRIPT_PAYLOAD",
    "PENDING_TRANSACTION",
    "USER_TRANSACTION",
    "EntryFunctionPayload",
    "MoveScriptBytecode",
    "ScriptPayload",
    "Payload",
    "UnsignedTransaction",
    "TransactionSignature",
    "SignedTransaction",
    "SigningMessage",
    "attach_signature",
    "TransactionRecord",
]
