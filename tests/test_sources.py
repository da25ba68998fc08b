"""Tests for message sources."""

import json
import os
import tempfile

import pytest

from sms_budget.exceptions import SourceUnavailable
from sms_budget.models.core import RawMessage
from sms_budget.sync.base import MessageFilter
from sms_budget.sync.sources import InMemoryMessageSource, JSONFileMessageSource


class TestJSONFileMessageSource:
    """Test cases for JSONFileMessageSource"""

    def setup_method(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, 'inbox.json')

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, data):
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f)

    def test_reads_android_export(self):
        self._write([
            {"address": "VM-HDFCBK", "body": "Rs 10 spent", "date": 2000},
            {"address": "JD-SBIINB", "body": "Rs 20 credited", "date": "3000"},
        ])

        messages = JSONFileMessageSource(self.path).list(MessageFilter())

        assert messages == [
            RawMessage("JD-SBIINB", "Rs 20 credited", 3000),
            RawMessage("VM-HDFCBK", "Rs 10 spent", 2000),
        ]

    def test_applies_since_and_max_count(self):
        self._write({"messages": [
            {"sender": "VM-HDFCBK", "body": f"msg {i}", "timestamp": i * 1000} for i in range(10)
        ]})

        messages = JSONFileMessageSource(self.path).list(
            MessageFilter(since_timestamp_millis=5000, max_count=3)
        )

        assert [m.timestamp_millis for m in messages] == [9000, 8000, 7000]

    def test_since_is_inclusive(self):
        self._write([{"address": "VM-HDFCBK", "body": "x", "date": 5000}])
        messages = JSONFileMessageSource(self.path).list(MessageFilter(since_timestamp_millis=5000))
        assert len(messages) == 1

    def test_box_filter(self):
        self._write([
            {"address": "VM-HDFCBK", "body": "inbox msg", "date": 1000},
            {"address": "VM-HDFCBK", "body": "sent msg", "date": 2000, "box": "sent"},
        ])

        messages = JSONFileMessageSource(self.path).list(MessageFilter())
        assert [m.body for m in messages] == ["inbox msg"]

    def test_malformed_records_skipped(self):
        self._write([
            {"address": "VM-HDFCBK", "body": "ok", "date": 1000},
            {"address": "VM-HDFCBK", "date": 1000},
            {"address": "VM-HDFCBK", "body": "bad date", "date": "soon"},
            "not an object",
        ])

        messages = JSONFileMessageSource(self.path).list(MessageFilter())
        assert [m.body for m in messages] == ["ok"]

    def test_missing_file(self):
        with pytest.raises(SourceUnavailable):
            JSONFileMessageSource(self.path).list(MessageFilter())

    def test_invalid_json(self):
        with open(self.path, 'w') as f:
            f.write("[{")
        with pytest.raises(SourceUnavailable):
            JSONFileMessageSource(self.path).list(MessageFilter())

    def test_wrong_top_level_type(self):
        self._write({"inbox": []})
        with pytest.raises(SourceUnavailable):
            JSONFileMessageSource(self.path).list(MessageFilter())


class TestInMemoryMessageSource:

    def test_filters_and_records_calls(self):
        source = InMemoryMessageSource([
            RawMessage("A", "old", 100),
            RawMessage("B", "new", 300),
        ])
        source.add(RawMessage("C", "newest", 500))

        messages = source.list(MessageFilter(since_timestamp_millis=200))

        assert [m.body for m in messages] == ["newest", "new"]
        assert len(source.calls) == 1

    def test_other_box_is_empty(self):
        source = InMemoryMessageSource([RawMessage("A", "x", 1)])
        assert source.list(MessageFilter(box="sent")) == []
