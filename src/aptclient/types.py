# Read-only models for ledger, block, account and event responses.
# Unknown fields are kept so newer node versions do not break decoding.

from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .transactions import TransactionRecord

APTOS_COIN_STORE = "0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>"
ACCOUNT_RESOURCE = "0x1::account::Account"


class LedgerInfo(BaseModel):
    """Current ledger state reported by the node root endpoint."""
    chain_id: int
    epoch: int
    ledger_version: int
    oldest_ledger_version: int
    ledger_timestamp: int
    node_role: str
    block_height: Optional[int] = None
    oldest_block_height: Optional[int] = None
    git_hash: Optional[str] = None

    model_config = {"extra": "allow"}


class Block(BaseModel):
    """Block with an optional list of its transactions."""
    block_height: int
    block_hash: str
    block_timestamp: int
    first_version: int
    last_version: int
    transactions: Optional[List[TransactionRecord]] = None

    model_config = {"extra": "allow"}


class AccountInfo(BaseModel):
    """On-chain account: sequence number and authentication key."""
    sequence_number: int
    authentication_key: str

    model_config = {"extra": "allow"}


class AccountResource(BaseModel):
    """Move resource stored under an account."""
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}


class MoveModuleABI(BaseModel):
    address: str
    name: str
    friends: List[str] = Field(default_factory=list)
    exposed_functions: List[Dict[str, Any]] = Field(default_factory=list)
    structs: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class AccountModule(BaseModel):
    """Published Move module bytecode and ABI."""
    bytecode: str
    abi: Optional[MoveModuleABI] = None

    model_config = {"extra": "allow"}


class Event(BaseModel):
    """Event emitted by a transaction."""
    type: str
    sequence_number: int
    data: Any = None
    key: Optional[str] = None
    guid: Optional[Dict[str, Any]] = None
    version: Optional[int] = None

    model_config = {"extra": "allow"}


class GasEstimate(BaseModel):
    """Gas unit price estimate."""
    gas_estimate: int
    deprioritized_gas_estimate: Optional[int] = None
    prioritized_gas_estimate: Optional[int] = None

    model_config = {"extra": "allow"}


__all__ = [
    "APTOS_COIN_STORE",
    "ACCOUNT_RESOURCE",
    "LedgerInfo",
    "Block",
    "AccountInfo",
    "AccountResource",
    "MoveModuleABI",
    "AccountModule",
    "Event",
    "GasEstimate",
]
