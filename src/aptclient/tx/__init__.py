"""
Transaction building and execution.
"""

from .builder import TransactionBuilder, entry_function, coin_transfer, script
from .execute import TransactionFlow, TransactionState, poll_until_final

__all__ = [
    "TransactionBuilder",
    "entry_function",
    "coin_transfer",
    "script",
    "TransactionFlow",
    "TransactionState",
    "poll_until_final",
]
