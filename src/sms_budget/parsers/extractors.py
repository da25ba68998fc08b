"""Field extractors for amount, account and description in bank messages."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..models.core import TransactionKind


# Fixed currency markers only; anything else is not treated as an amount
AMOUNT_PATTERN = re.compile(r'(?:Rs\.?|INR)\s*([\d,]+(?:\.\d{1,2})?)', re.IGNORECASE)

# "a/c XX1234", "A/c *5678", "a/c 123"
ACCOUNT_PATTERN = re.compile(r'[Aa]/[Cc]\s*[Xx*]*(\d{3,4})')

MERCHANT_PATTERN = re.compile(
    r'\b(?:at|to|info)\b[\s:]+'
    r'(.+?)'
    r'(?=\s*[.,;]?\s+(?:on|from|thru|using|ref|avl)\b|\s*[.,;]?\s*$)',
    re.IGNORECASE,
)

DEFAULT_DESCRIPTION_LENGTH = 30
DEBIT_FALLBACK = "Debit Transaction"
CREDIT_DESCRIPTION = "Bank Credit"


def extract_amount(body: str) -> Optional[Decimal]:
    """Extract the first Rs./INR amount in body.

    Thousands separators are removed before parsing, so "Rs. 1,234.50"
    yields Decimal("1234.50"). Returns None if no amount is present or the
    value is not a positive finite number.
    """
    if not isinstance(body, str):
        return None

    match = AMOUNT_PATTERN.search(body)
    if not match:
        return None

    cleaned = match.group(1).replace(',', '')
    try:
        amount = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None

    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def extract_account_suffix(body: str) -> Optional[str]:
    """Return the 3-4 trailing digits of an "a/c" reference, if any"""
    if not isinstance(body, str):
        return None

    match = ACCOUNT_PATTERN.search(body)
    return match.group(1) if match else None


def extract_description(body: str,
                        kind: TransactionKind,
                        max_length: int = DEFAULT_DESCRIPTION_LENGTH) -> str:
    """Build a short description for the transaction.

    Debits look for a merchant after "at", "to" or "info" and stop at the
    next "on", "from", "thru", "using", "Ref" or "Avl". Credits always get
    the fixed "Bank Credit" label; merchant extraction is not attempted
    for them.

    Args:
        body: Message text
        kind: Classified transaction kind
        max_length: Maximum description length

    Returns:
        Description string, never empty
    """
    if kind == TransactionKind.CREDIT:
        return CREDIT_DESCRIPTION

    if isinstance(body, str):
        match = MERCHANT_PATTERN.search(body)
        if match:
            merchant = match.group(1).strip()
            if merchant:
                return merchant[:max_length]

    return DEBIT_FALLBACK
