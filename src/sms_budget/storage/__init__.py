"""Transaction sinks"""

from .memory import MemoryTransactionSink
from .sqlite_store import SQLiteTransactionStore, StoredTransaction

__all__ = ['MemoryTransactionSink', 'SQLiteTransactionStore', 'StoredTransaction']
