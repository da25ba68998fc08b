"""Checkpoint stores for the sync watermark."""

import json
import logging
import os
import tempfile
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..exceptions import CheckpointWriteError
from ..models.core import SyncCheckpoint
from ..utils.error_handler import ErrorHandler, handle_checkpoint_read_error
from .base import CheckpointStore


logger = logging.getLogger(__name__)


class MemoryCheckpointStore(CheckpointStore):
    """Keeps the watermark in process memory"""

    def __init__(self, value: int = 0):
        self.value = value

    def get(self) -> int:
        return self.value

    def set(self, value: int) -> None:
        self.value = value


class JSONCheckpointStore(CheckpointStore):
    """Keeps the watermark in a small JSON state file.

    File layout:

        {"last_sync_timestamp_millis": 1704067200000,
         "last_updated": "2024-01-01T00:00:00"}

    Writes go through a temporary file in the same directory followed by
    os.replace, so a crash never leaves a half-written state file.
    """

    KEY = 'last_sync_timestamp_millis'

    def __init__(self,
                 state_file: str = ".sms_budget_state/checkpoint.json",
                 error_handler: Optional[ErrorHandler] = None):
        self.state_file = Path(state_file)
        self.error_handler = error_handler or ErrorHandler()

    def load(self) -> SyncCheckpoint:
        """Read the state file. A missing or unreadable file yields a zero checkpoint."""
        if not self.state_file.exists():
            return SyncCheckpoint()

        try:
            with open(self.state_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            value = data.get(self.KEY, 0)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{self.KEY} must be an integer, got {value!r}")
            return SyncCheckpoint(last_sync_timestamp_millis=value)

        except Exception as e:
            handle_checkpoint_read_error(self.error_handler, e, str(self.state_file))
            return SyncCheckpoint()

    def get(self) -> int:
        return self.load().last_sync_timestamp_millis

    def set(self, value: int) -> None:
        state_data = asdict(SyncCheckpoint(last_sync_timestamp_millis=int(value)))
        state_data['last_updated'] = datetime.now().isoformat()

        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.state_file.parent), prefix='.checkpoint', suffix='.tmp'
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(state_data, f, indent=2)
                os.replace(tmp_path, self.state_file)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise

        except OSError as e:
            raise CheckpointWriteError(f"Failed to save checkpoint to {self.state_file}: {e}") from e

        logger.debug(f"Checkpoint saved: {value}")

    def reset(self) -> None:
        """Remove the state file so the next cycle starts from 0"""
        if self.state_file.exists():
            self.state_file.unlink()
