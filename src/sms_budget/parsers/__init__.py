"""Bank message classification and field extraction"""

from .bank_resolver import BankResolver
from .classifier import classify
from .extractors import extract_amount, extract_account_suffix, extract_description
from .message_parser import MessageParser, parse_message

__all__ = [
    'BankResolver',
    'classify',
    'extract_amount',
    'extract_account_suffix',
    'extract_description',
    'MessageParser',
    'parse_message',
]
