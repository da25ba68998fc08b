"""Exceptions raised by the sync engine and its collaborators."""

from typing import Optional

from .models.core import SyncResult


class SmsBudgetError(Exception):
    """Base class for all sms_budget errors"""


class SourceUnavailable(SmsBudgetError):
    """The message source could not be queried"""


class SinkWriteError(SmsBudgetError):
    """A transaction could not be written to the sink"""


class CheckpointWriteError(SmsBudgetError):
    """The new checkpoint could not be persisted.

    Carries the result of the cycle that tried to advance it, since the
    transactions appended before the failure are already in the sink.
    """

    def __init__(self, message: str, result: Optional[SyncResult] = None):
        super().__init__(message)
        self.result = result


class ConfigurationError(SmsBudgetError):
    """Invalid configuration data"""
