"""Utility functions and helpers"""

from .config_manager import ConfigManager
from .error_handler import (
    ErrorHandler,
    ErrorCategory,
    ErrorSeverity,
    handle_checkpoint_error,
    handle_checkpoint_read_error,
    handle_sink_error,
    handle_source_error,
)
from .fingerprint import message_fingerprint

__all__ = [
    'ConfigManager',
    'ErrorHandler',
    'ErrorCategory',
    'ErrorSeverity',
    'handle_checkpoint_error',
    'handle_checkpoint_read_error',
    'handle_sink_error',
    'handle_source_error',
    'message_fingerprint',
]
