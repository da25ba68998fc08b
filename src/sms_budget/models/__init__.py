"""Data models and structures"""

from .core import (
    BankIdentity,
    ParsedTransaction,
    ParseResult,
    RawMessage,
    RejectionReason,
    SyncCheckpoint,
    SyncConfig,
    SyncResult,
    TransactionKind,
    UNKNOWN_BANK,
)

__all__ = [
    'BankIdentity',
    'ParsedTransaction',
    'ParseResult',
    'RawMessage',
    'RejectionReason',
    'SyncCheckpoint',
    'SyncConfig',
    'SyncResult',
    'TransactionKind',
    'UNKNOWN_BANK',
]
