"""Keyword classification of bank messages into debit and credit events."""

import re

from ..models.core import TransactionKind


DEBIT_PATTERN = re.compile(r'debited|spent|purchase|sent|paid', re.IGNORECASE)
CREDIT_PATTERN = re.compile(r'credited|received|deposited|added', re.IGNORECASE)


def classify(body: str) -> TransactionKind:
    """Classify a message body as DEBIT, CREDIT or NONE.

    The debit pattern is checked first, so a body that mentions both a
    debit and a credit keyword ("sent ... received") is a DEBIT.
    """
    if not isinstance(body, str) or not body:
        return TransactionKind.NONE

    if DEBIT_PATTERN.search(body):
        return TransactionKind.DEBIT
    if CREDIT_PATTERN.search(body):
        return TransactionKind.CREDIT
    return TransactionKind.NONE
