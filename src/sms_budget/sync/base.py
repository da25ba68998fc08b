"""Abstract collaborators of the sync coordinator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from ..models.core import ParsedTransaction, RawMessage


@dataclass(frozen=True)
class MessageFilter:
    """Query passed to a message source"""
    since_timestamp_millis: int = 0
    max_count: int = 100
    box: str = "inbox"


class MessageSource(ABC):
    """Supplies inbox messages.

    Implementations must not return messages older than
    since_timestamp_millis and may return duplicates across calls.
    """

    @abstractmethod
    def list(self, message_filter: MessageFilter) -> Iterable[RawMessage]:
        """Return candidate messages; raise SourceUnavailable on failure"""
        pass


class TransactionSink(ABC):
    """Durable storage for accepted transactions"""

    @abstractmethod
    def append(self, transaction: ParsedTransaction) -> str:
        """Store transaction and return its assigned id; raise SinkWriteError on failure"""
        pass

    def contains_fingerprint(self, fingerprint: str) -> bool:
        """Whether a transaction with this fingerprint is already stored"""
        return False


class CheckpointStore(ABC):
    """Persists the sync watermark"""

    @abstractmethod
    def get(self) -> int:
        """Return the stored watermark, 0 if never set"""
        pass

    @abstractmethod
    def set(self, value: int) -> None:
        """Persist the watermark; raise CheckpointWriteError on failure"""
        pass
