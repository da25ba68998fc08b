"""Checkpointed sync of bank messages"""

from .base import CheckpointStore, MessageFilter, MessageSource, TransactionSink
from .checkpoint import JSONCheckpointStore, MemoryCheckpointStore
from .coordinator import SyncCoordinator, SyncState
from .sources import InMemoryMessageSource, JSONFileMessageSource

__all__ = [
    'CheckpointStore',
    'MessageFilter',
    'MessageSource',
    'TransactionSink',
    'JSONCheckpointStore',
    'MemoryCheckpointStore',
    'SyncCoordinator',
    'SyncState',
    'InMemoryMessageSource',
    'JSONFileMessageSource',
]
