"""Structured error recording and logging for sync cycles."""

import json
import logging
import traceback
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any


class ErrorSeverity(Enum):
    """Error severity levels"""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification"""
    MESSAGE_SOURCE = "message_source"
    MESSAGE_PARSING = "message_parsing"
    TRANSACTION_SINK = "transaction_sink"
    CHECKPOINT = "checkpoint"
    CONFIGURATION = "configuration"
    SYSTEM = "system"


@dataclass
class ErrorDetail:
    """Detailed error information"""
    timestamp: str
    severity: str
    category: str
    error_code: str
    message: str
    sender: Optional[str] = None
    message_timestamp: Optional[int] = None
    stack_trace: Optional[str] = None
    context: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


class JSONFormatter(logging.Formatter):
    """One JSON object per log record"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        for extra_field in ('error_code', 'category', 'sender', 'context'):
            if hasattr(record, extra_field):
                log_entry[extra_field] = getattr(record, extra_field)

        return json.dumps(log_entry, default=str)


class ErrorHandler:
    """Collects per-message errors and warnings and logs them.

    When log_directory is given, every record is also written as JSON lines
    to sync_YYYYMMDD.jsonl and errors to errors_YYYYMMDD.jsonl.
    """

    error_codes = {
        # Message source
        "SOURCE_UNAVAILABLE": "M001",
        "SOURCE_CONTRACT_VIOLATION": "M002",

        # Sink
        "SINK_WRITE_FAILED": "T001",
        "DUPLICATE_TRANSACTION": "T002",

        # Checkpoint
        "CHECKPOINT_READ_FAILED": "K001",
        "CHECKPOINT_WRITE_FAILED": "K002",

        # Configuration
        "INVALID_CONFIG_FORMAT": "C001",

        "UNEXPECTED_ERROR": "S999"
    }

    def __init__(self, log_directory: Optional[str] = None):
        self.log_directory = Path(log_directory) if log_directory else None
        self.errors: List[ErrorDetail] = []
        self.warnings: List[ErrorDetail] = []
        self._handlers: List[logging.Handler] = []

        self._setup_logging()

    def _setup_logging(self):
        self.logger = logging.getLogger('sms_budget.sync_log')
        self.logger.setLevel(logging.DEBUG)

        if self.log_directory is not None:
            self.log_directory.mkdir(parents=True, exist_ok=True)
            day = datetime.now().strftime('%Y%m%d')

            file_handler = logging.FileHandler(self.log_directory / f"sync_{day}.jsonl")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(JSONFormatter())
            file_handler.addFilter(self._owns_record)
            self._handlers.append(file_handler)

            error_handler = logging.FileHandler(self.log_directory / f"errors_{day}.jsonl")
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(JSONFormatter())
            error_handler.addFilter(self._owns_record)
            self._handlers.append(error_handler)

        for handler in self._handlers:
            self.logger.addHandler(handler)

    def _owns_record(self, record: logging.LogRecord) -> bool:
        # The logger is shared; only write records emitted by this instance
        return getattr(record, 'handler_id', None) == id(self)

    def _extra(self, **fields) -> Dict[str, Any]:
        fields['handler_id'] = id(self)
        return fields

    def close(self):
        """Detach and close the file handlers added by this instance"""
        for handler in self._handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers = []

    def _record(self,
                severity: ErrorSeverity,
                message: str,
                error_type: str,
                category: ErrorCategory,
                sender: Optional[str],
                message_timestamp: Optional[int],
                exception: Optional[BaseException],
                context: Optional[Dict[str, Any]]) -> ErrorDetail:
        stack_trace = None
        if exception is not None:
            stack_trace = ''.join(traceback.format_exception(
                type(exception), exception, exception.__traceback__
            ))

        return ErrorDetail(
            timestamp=datetime.now().isoformat(),
            severity=severity.value,
            category=category.value,
            error_code=self.error_codes.get(error_type, "S999"),
            message=message,
            sender=sender,
            message_timestamp=message_timestamp,
            stack_trace=stack_trace,
            context=context or {}
        )

    def log_error(self,
                  message: str,
                  error_type: str,
                  category: ErrorCategory = ErrorCategory.SYSTEM,
                  sender: Optional[str] = None,
                  message_timestamp: Optional[int] = None,
                  exception: Optional[BaseException] = None,
                  context: Optional[Dict[str, Any]] = None) -> ErrorDetail:
        """Record and log an error"""
        detail = self._record(ErrorSeverity.ERROR, message, error_type, category,
                              sender, message_timestamp, exception, context)
        self.errors.append(detail)

        self.logger.error(
            message,
            extra=self._extra(
                error_code=detail.error_code,
                category=detail.category,
                sender=sender,
                context=detail.context
            )
        )
        return detail

    def log_warning(self,
                    message: str,
                    warning_type: str,
                    category: ErrorCategory = ErrorCategory.SYSTEM,
                    sender: Optional[str] = None,
                    message_timestamp: Optional[int] = None,
                    context: Optional[Dict[str, Any]] = None) -> ErrorDetail:
        """Record and log a warning"""
        detail = self._record(ErrorSeverity.WARNING, message, warning_type, category,
                              sender, message_timestamp, None, context)
        self.warnings.append(detail)

        self.logger.warning(
            message,
            extra=self._extra(
                error_code=detail.error_code,
                category=detail.category,
                sender=sender,
                context=detail.context
            )
        )
        return detail

    def log_info(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.logger.info(message, extra=self._extra(context=context or {}))

    def log_debug(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.logger.debug(message, extra=self._extra(context=context or {}))

    def get_error_summary(self) -> Dict[str, Any]:
        """Get counts of errors and warnings by category"""
        errors_by_category: Dict[str, int] = {}
        warnings_by_category: Dict[str, int] = {}

        for error in self.errors:
            errors_by_category[error.category] = errors_by_category.get(error.category, 0) + 1
        for warning in self.warnings:
            warnings_by_category[warning.category] = warnings_by_category.get(warning.category, 0) + 1

        return {
            'total_errors': len(self.errors),
            'total_warnings': len(self.warnings),
            'errors_by_category': errors_by_category,
            'warnings_by_category': warnings_by_category,
            'senders_with_errors': len(set(e.sender for e in self.errors if e.sender)),
        }

    def clear_errors(self):
        """Clear all accumulated errors and warnings"""
        self.errors.clear()
        self.warnings.clear()

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


def handle_sink_error(error_handler: ErrorHandler,
                      sender: str,
                      message_timestamp: int,
                      exception: Exception) -> ErrorDetail:
    """Record a failed append for a single message"""
    return error_handler.log_error(
        f"Failed to store transaction from {sender}: {exception}",
        "SINK_WRITE_FAILED",
        ErrorCategory.TRANSACTION_SINK,
        sender=sender,
        message_timestamp=message_timestamp,
        exception=exception
    )


def handle_source_error(error_handler: ErrorHandler, exception: Exception) -> ErrorDetail:
    """Record a failed message source query"""
    return error_handler.log_error(
        f"Message source unavailable: {exception}",
        "SOURCE_UNAVAILABLE",
        ErrorCategory.MESSAGE_SOURCE,
        exception=exception
    )


def handle_checkpoint_error(error_handler: ErrorHandler,
                            exception: Exception,
                            value: Optional[int] = None) -> ErrorDetail:
    """Record a failed checkpoint write"""
    return error_handler.log_error(
        f"Failed to persist checkpoint: {exception}",
        "CHECKPOINT_WRITE_FAILED",
        ErrorCategory.CHECKPOINT,
        exception=exception,
        context={'checkpoint': value}
    )


def handle_checkpoint_read_error(error_handler: ErrorHandler,
                                 exception: Exception,
                                 state_file: str) -> ErrorDetail:
    """Record an unreadable checkpoint that is being treated as 0"""
    return error_handler.log_error(
        f"Failed to load checkpoint, starting from 0: {exception}",
        "CHECKPOINT_READ_FAILED",
        ErrorCategory.CHECKPOINT,
        exception=exception,
        context={'state_file': state_file}
    )
