"""In-process transaction sink."""

from typing import Dict, List

from ..models.core import ParsedTransaction
from ..sync.base import TransactionSink


class MemoryTransactionSink(TransactionSink):
    """Keeps appended transactions in insertion order with auto-incrementing ids"""

    def __init__(self):
        self.transactions: Dict[str, ParsedTransaction] = {}
        self._next_id = 1

    def append(self, transaction: ParsedTransaction) -> str:
        transaction_id = str(self._next_id)
        self._next_id += 1
        self.transactions[transaction_id] = transaction
        return transaction_id

    def contains_fingerprint(self, fingerprint: str) -> bool:
        return any(t.fingerprint == fingerprint for t in self.transactions.values())

    def delete(self, transaction_id: str) -> bool:
        return self.transactions.pop(transaction_id, None) is not None

    def all(self) -> List[ParsedTransaction]:
        """Transactions in append order"""
        return list(self.transactions.values())
