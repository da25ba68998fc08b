"""Message sources backed by memory or an exported inbox file."""

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import SourceUnavailable
from ..models.core import RawMessage
from .base import MessageFilter, MessageSource


logger = logging.getLogger(__name__)


def _apply_filter(messages: Iterable[RawMessage],
                  message_filter: MessageFilter) -> List[RawMessage]:
    """Newest first, not older than the watermark, capped at max_count"""
    selected = [
        m for m in messages
        if m.timestamp_millis >= message_filter.since_timestamp_millis
    ]
    selected.sort(key=lambda m: m.timestamp_millis, reverse=True)
    return selected[:message_filter.max_count]


class InMemoryMessageSource(MessageSource):
    """Serves a fixed list of messages, mainly for embedding and tests"""

    def __init__(self, messages: Optional[List[RawMessage]] = None, box: str = "inbox"):
        self.messages = list(messages or [])
        self.box = box
        self.calls: List[MessageFilter] = []

    def add(self, message: RawMessage) -> None:
        self.messages.append(message)

    def list(self, message_filter: MessageFilter) -> List[RawMessage]:
        self.calls.append(message_filter)
        if message_filter.box != self.box:
            return []
        return _apply_filter(self.messages, message_filter)


class JSONFileMessageSource(MessageSource):
    """Reads messages from an exported inbox JSON file.

    The file holds a list of objects (or {"messages": [...]}) in the shape
    produced by Android SMS exports:

        [{"address": "VM-HDFCBK", "body": "...", "date": 1704067200000}]

    "sender" and "timestamp" are accepted as aliases, and an optional
    "box" field (default "inbox") is matched against the filter.
    """

    def __init__(self, path: str):
        self.path = path

    def list(self, message_filter: MessageFilter) -> List[RawMessage]:
        records = self._read_records()

        messages = []
        for index, record in enumerate(records):
            if record.get('box', 'inbox') != message_filter.box:
                continue
            message = self._to_message(record)
            if message is None:
                logger.warning(f"Skipping malformed message record #{index} in {self.path}")
                continue
            messages.append(message)

        selected = _apply_filter(messages, message_filter)
        logger.debug(f"Read {len(selected)} messages from {self.path}")
        return selected

    def _read_records(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.path):
            raise SourceUnavailable(f"Message file not found: {self.path}")

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SourceUnavailable(f"Cannot read message file {self.path}: {e}") from e

        if isinstance(data, dict):
            data = data.get('messages')
        if not isinstance(data, list):
            raise SourceUnavailable(f"Message file {self.path} must contain a list of messages")

        return [r for r in data if isinstance(r, dict)]

    @staticmethod
    def _to_message(record: Dict[str, Any]) -> Optional[RawMessage]:
        sender = record.get('address', record.get('sender'))
        body = record.get('body')
        timestamp = record.get('date', record.get('timestamp'))

        if not isinstance(sender, str) or not isinstance(body, str):
            return None
        if isinstance(timestamp, bool):
            return None
        try:
            timestamp = int(timestamp)
        except (TypeError, ValueError):
            return None

        return RawMessage(sender=sender, body=body, timestamp_millis=timestamp)
