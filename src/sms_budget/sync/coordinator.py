"""Incremental, checkpointed sync of bank messages into a transaction sink."""

import logging
import threading
import time
from enum import Enum
from typing import Callable, List, Optional

from ..exceptions import CheckpointWriteError, SourceUnavailable
from ..models.core import ParsedTransaction, RawMessage, SyncConfig, SyncResult
from ..parsers.bank_resolver import BankResolver
from ..parsers.message_parser import MessageParser
from ..utils.error_handler import (
    ErrorCategory,
    ErrorHandler,
    handle_checkpoint_error,
    handle_sink_error,
    handle_source_error,
)
from .base import CheckpointStore, MessageFilter, MessageSource, TransactionSink


logger = logging.getLogger(__name__)


def wall_clock_millis() -> int:
    return int(time.time() * 1000)


class SyncState(Enum):
    IDLE = "idle"
    SYNCING = "syncing"


class SyncCoordinator:
    """Runs sync cycles: checkpoint read, source query, parse, append, checkpoint write.

    Only one cycle runs at a time per coordinator. A call made while a
    cycle is in flight returns immediately with SyncResult(skipped=True)
    and touches neither the source, the sink nor the checkpoint.

    The checkpoint moves to the wall-clock time sampled when the cycle
    started, and only if at least one transaction was appended. It never
    moves backwards.
    """

    def __init__(self,
                 source: MessageSource,
                 sink: TransactionSink,
                 checkpoint_store: CheckpointStore,
                 parser: Optional[MessageParser] = None,
                 config: Optional[SyncConfig] = None,
                 error_handler: Optional[ErrorHandler] = None,
                 clock: Optional[Callable[[], int]] = None):
        self.config = config or SyncConfig()
        self.source = source
        self.sink = sink
        self.checkpoint_store = checkpoint_store
        self.parser = parser or MessageParser(
            BankResolver(self.config.bank_headers, self.config.bank_names),
            description_max_length=self.config.description_max_length,
        )
        self.error_handler = error_handler or ErrorHandler()
        self.clock = clock or wall_clock_millis

        self._lock = threading.Lock()
        self._state = SyncState.IDLE

    @property
    def state(self) -> SyncState:
        return self._state

    def run_sync_cycle(self) -> SyncResult:
        """Run one cycle.

        Raises:
            SourceUnavailable: The source query failed; nothing was written.
            CheckpointWriteError: Transactions were appended but the new
                checkpoint could not be saved. The exception carries the result.
        """
        if not self._lock.acquire(blocking=False):
            logger.info("Sync already in progress, skipping")
            return SyncResult(skipped=True)

        try:
            self._state = SyncState.SYNCING
            return self._run_cycle()
        finally:
            self._state = SyncState.IDLE
            self._lock.release()

    def _run_cycle(self) -> SyncResult:
        started_at = self.clock()
        last_sync = self.checkpoint_store.get()

        message_filter = MessageFilter(
            since_timestamp_millis=last_sync,
            max_count=self.config.max_count,
        )
        messages = self._fetch_messages(message_filter)

        result = SyncResult()
        bank_messages = []
        for message in messages:
            if self.parser.resolver.is_bank_sender(message.sender):
                bank_messages.append(message)
            else:
                result.filtered_count += 1

        logger.info(f"Found {len(bank_messages)} potential bank messages")

        for message in bank_messages:
            self._process_message(message, result)

        if result.accepted_count > 0:
            self._advance_checkpoint(last_sync, started_at, result)
            logger.info(f"Synced {result.accepted_count} new transactions")
        else:
            logger.info("No new transactions, checkpoint unchanged")

        self.error_handler.log_info("Sync cycle finished", result.to_dict())
        return result

    def _fetch_messages(self, message_filter: MessageFilter) -> List[RawMessage]:
        try:
            messages = list(self.source.list(message_filter))
        except SourceUnavailable as e:
            handle_source_error(self.error_handler, e)
            raise
        except Exception as e:
            handle_source_error(self.error_handler, e)
            raise SourceUnavailable(f"Message source failed: {e}") from e

        valid = [m for m in messages if isinstance(m, RawMessage)]
        if len(valid) < len(messages):
            self.error_handler.log_warning(
                f"Source returned {len(messages) - len(valid)} items that are not messages",
                "SOURCE_CONTRACT_VIOLATION",
                ErrorCategory.MESSAGE_SOURCE
            )
            messages = valid

        since = message_filter.since_timestamp_millis
        fresh = [
            m for m in messages
            if not (isinstance(m.timestamp_millis, int) and m.timestamp_millis < since)
        ]
        if len(fresh) < len(messages):
            self.error_handler.log_warning(
                f"Source returned {len(messages) - len(fresh)} messages older than the checkpoint",
                "SOURCE_CONTRACT_VIOLATION",
                ErrorCategory.MESSAGE_SOURCE,
                context={'since': since}
            )

        if len(fresh) > message_filter.max_count:
            self.error_handler.log_warning(
                f"Source returned {len(fresh)} messages, limit is {message_filter.max_count}",
                "SOURCE_CONTRACT_VIOLATION",
                ErrorCategory.MESSAGE_SOURCE
            )
            fresh = fresh[:message_filter.max_count]

        return fresh

    def _process_message(self, message: RawMessage, result: SyncResult) -> None:
        outcome = self.parser.parse(message)
        if not outcome.accepted:
            self.error_handler.log_debug(
                f"Rejected message from {message.sender}",
                {'reason': outcome.reason.value, 'message_timestamp': message.timestamp_millis}
            )
            result.rejected_count += 1
            return

        transaction = outcome.transaction
        if self.config.dedup_enabled and self._is_duplicate(transaction):
            logger.debug(f"Skipping already stored message from {message.sender}")
            result.duplicate_count += 1
            return

        try:
            transaction_id = self.sink.append(transaction)
        except Exception as e:
            handle_sink_error(self.error_handler, message.sender, message.timestamp_millis, e)
            result.rejected_count += 1
            return

        result.accepted_count += 1
        result.transaction_ids.append(str(transaction_id))

    def _is_duplicate(self, transaction: ParsedTransaction) -> bool:
        if not transaction.fingerprint:
            return False
        try:
            return self.sink.contains_fingerprint(transaction.fingerprint)
        except Exception as e:
            self.error_handler.log_warning(
                f"Duplicate check failed, appending anyway: {e}",
                "DUPLICATE_TRANSACTION",
                ErrorCategory.TRANSACTION_SINK
            )
            return False

    def _advance_checkpoint(self, last_sync: int, started_at: int, result: SyncResult) -> None:
        new_value = max(last_sync, started_at)
        try:
            self.checkpoint_store.set(new_value)
        except Exception as e:
            handle_checkpoint_error(self.error_handler, e, new_value)
            raise CheckpointWriteError(f"Failed to persist checkpoint: {e}", result=result) from e

        result.checkpoint_advanced = True
