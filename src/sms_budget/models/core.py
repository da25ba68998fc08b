"""Core data models for the bank message sync engine."""

from dataclasses import dataclass, field, asdict
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Dict, Any, Optional


UNKNOWN_BANK = "Unknown Bank"

# Common Indian bank sender headers, in match order
DEFAULT_BANK_HEADERS = [
    'HDFCBK', 'SBIINB', 'ICICIB', 'AXISBK', 'KOTAKB', 'INDUSB',
    'BOITXT', 'PNBSMS', 'CANARA', 'UNIONB', 'YESBNK', 'BOIIND',
]

DEFAULT_BANK_NAMES = {
    'HDFCBK': 'HDFC Bank',
    'SBIINB': 'SBI',
    'ICICIB': 'ICICI Bank',
    'AXISBK': 'Axis Bank',
    'KOTAKB': 'Kotak Bank',
    'INDUSB': 'IndusInd Bank',
    'CANARA': 'Canara Bank',
    'UNIONB': 'Union Bank',
    'YESBNK': 'Yes Bank',
}


class TransactionKind(Enum):
    """Outcome of message classification"""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    NONE = "NONE"


class RejectionReason(Enum):
    """Why the parser declined to produce a transaction"""
    MALFORMED = "malformed"
    NOT_TRANSACTIONAL = "not_transactional"
    AMOUNT_NOT_FOUND = "amount_not_found"
    INVALID_TIMESTAMP = "invalid_timestamp"


@dataclass(frozen=True)
class RawMessage:
    """A single inbox message as delivered by the message source"""
    sender: str
    body: str
    timestamp_millis: int


@dataclass(frozen=True)
class BankIdentity:
    """Resolved bank for a message sender.

    Attributes:
        token: Matched sender header token, or None when unresolved
        name: Human-readable bank name ("Unknown Bank" when unresolved)
    """
    token: Optional[str]
    name: str

    @property
    def is_known(self) -> bool:
        return self.token is not None


@dataclass(frozen=True)
class ParsedTransaction:
    """Transaction extracted from a bank message.

    Attributes:
        amount: Positive transaction amount
        kind: DEBIT or CREDIT
        account_suffix: Trailing account digits quoted in the message
        occurred_on: UTC calendar date of the message timestamp
        bank_name: Resolved bank name
        description: Merchant or fallback description
        fingerprint: Stable hash of the source message, used for dedup
    """
    amount: Decimal
    kind: TransactionKind
    account_suffix: Optional[str]
    occurred_on: date
    bank_name: str
    description: str
    fingerprint: Optional[str] = None

    @property
    def category(self) -> str:
        """Category label used when the transaction is stored"""
        return 'Income' if self.kind == TransactionKind.CREDIT else 'Bank Related'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            'amount': str(self.amount),
            'type': self.kind.value,
            'account': self.account_suffix,
            'date': self.occurred_on.isoformat(),
            'bank': self.bank_name,
            'description': self.description,
            'category': self.category,
            'fingerprint': self.fingerprint,
        }


@dataclass(frozen=True)
class ParseResult:
    """Parser outcome: either a transaction or a rejection reason"""
    transaction: Optional[ParsedTransaction] = None
    reason: Optional[RejectionReason] = None

    @property
    def accepted(self) -> bool:
        return self.transaction is not None


@dataclass
class SyncCheckpoint:
    """Watermark below which messages are considered processed"""
    last_sync_timestamp_millis: int = 0


@dataclass
class SyncResult:
    """Counts for one sync cycle"""
    accepted_count: int = 0
    rejected_count: int = 0
    filtered_count: int = 0
    duplicate_count: int = 0
    checkpoint_advanced: bool = False
    skipped: bool = False
    transaction_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SyncConfig:
    """Configuration for parsing and sync behavior"""
    max_count: int = 100
    description_max_length: int = 30
    bank_headers: Optional[List[str]] = None
    bank_names: Optional[Dict[str, str]] = None
    checkpoint_file: str = ".sms_budget_state/checkpoint.json"
    database_file: str = "sms_budget.db"
    log_directory: Optional[str] = None
    dedup_enabled: bool = True

    def __post_init__(self):
        if self.bank_headers is None:
            self.bank_headers = list(DEFAULT_BANK_HEADERS)
        if self.bank_names is None:
            self.bank_names = dict(DEFAULT_BANK_NAMES)
