"""Message to transaction parsing pipeline."""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..models.core import (
    ParsedTransaction,
    ParseResult,
    RawMessage,
    RejectionReason,
    TransactionKind,
)
from ..utils.fingerprint import message_fingerprint
from .bank_resolver import BankResolver
from .classifier import classify
from .extractors import (
    DEFAULT_DESCRIPTION_LENGTH,
    extract_account_suffix,
    extract_amount,
    extract_description,
)


logger = logging.getLogger(__name__)


class MessageParser:
    """Turns a RawMessage into a ParsedTransaction or a rejection.

    Stages run in order and stop at the first failure:

    1. classify the body (NONE rejects)
    2. extract the amount (missing rejects)
    3. extract the account suffix (optional)
    4. resolve the bank from the sender (unknown is allowed)
    5. extract the merchant description
    6. derive the UTC date from the message timestamp

    The parser keeps no state between calls and performs no I/O, so one
    instance can be shared across threads.
    """

    def __init__(self,
                 resolver: Optional[BankResolver] = None,
                 description_max_length: int = DEFAULT_DESCRIPTION_LENGTH):
        self.resolver = resolver or BankResolver()
        self.description_max_length = description_max_length

    def parse(self, message: RawMessage) -> ParseResult:
        """Parse a message. Never raises; bad input is reported as a rejection."""
        sender = getattr(message, 'sender', None)
        body = getattr(message, 'body', None)
        timestamp = getattr(message, 'timestamp_millis', None)

        if not isinstance(body, str) or not isinstance(sender, str):
            return self._reject(RejectionReason.MALFORMED)

        kind = classify(body)
        if kind == TransactionKind.NONE:
            return self._reject(RejectionReason.NOT_TRANSACTIONAL)

        amount = extract_amount(body)
        if amount is None:
            return self._reject(RejectionReason.AMOUNT_NOT_FOUND)

        occurred_on = self._message_date(timestamp)
        if occurred_on is None:
            return self._reject(RejectionReason.INVALID_TIMESTAMP)

        bank = self.resolver.resolve(sender)

        transaction = ParsedTransaction(
            amount=amount,
            kind=kind,
            account_suffix=extract_account_suffix(body),
            occurred_on=occurred_on,
            bank_name=bank.name,
            description=extract_description(body, kind, self.description_max_length),
            fingerprint=message_fingerprint(sender, body, timestamp),
        )
        return ParseResult(transaction=transaction)

    @staticmethod
    def _message_date(timestamp_millis):
        # bool is an int subclass but never a valid timestamp
        if isinstance(timestamp_millis, bool) or not isinstance(timestamp_millis, int):
            return None
        try:
            instant = datetime.fromtimestamp(timestamp_millis / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
        return instant.date()

    @staticmethod
    def _reject(reason: RejectionReason) -> ParseResult:
        logger.debug(f"Message rejected: {reason.value}")
        return ParseResult(reason=reason)


_default_parser = MessageParser()


def parse_message(message: RawMessage) -> Optional[ParsedTransaction]:
    """Parse with the default bank table, returning None on rejection"""
    return _default_parser.parse(message).transaction
