"""Tests for the command-line interface."""

import json
import os
import shutil
import tempfile

from click.testing import CliRunner

from sms_budget.cli import cli


class TestCLI:
    """Test cases for CLI commands"""

    def setup_method(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.mkdtemp()
        self.runner = CliRunner()
        self.config_file = os.path.join(self.temp_dir, 'sms_budget.json')
        self.messages_file = os.path.join(self.temp_dir, 'inbox.json')

        with open(self.config_file, 'w') as f:
            json.dump({
                "checkpoint_file": os.path.join(self.temp_dir, 'state', 'checkpoint.json'),
                "database_file": os.path.join(self.temp_dir, 'sms_budget.db'),
            }, f)

        with open(self.messages_file, 'w') as f:
            json.dump([
                {"address": "VM-HDFCBK",
                 "body": "Rs. 2,500.00 debited from a/c XX1234 at AMAZON on 12-01",
                 "date": 1704067200000},
                {"address": "VM-HDFCBK", "body": "Hello, your OTP is 4532", "date": 1704067300000},
                {"address": "+919876543210", "body": "Rs 50 paid to you", "date": 1704067400000},
            ], f)

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def invoke(self, *args):
        return self.runner.invoke(cli, ['--config', self.config_file] + list(args))

    def test_parse_accepted(self):
        result = self.invoke('parse', 'Rs. 2,500.00 debited from a/c XX1234 at AMAZON on 12-01',
                             '--sender', 'HDFCBK', '--timestamp', '1704067200000')

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['amount'] == '2500.00'
        assert data['bank'] == 'HDFC Bank'
        assert data['description'] == 'AMAZON'
        assert data['date'] == '2024-01-01'

    def test_parse_rejected(self):
        result = self.invoke('parse', 'Hello, your OTP is 4532', '--sender', 'HDFCBK')

        assert result.exit_code == 1
        assert 'not_transactional' in result.output

    def test_sync_then_list(self):
        result = self.invoke('sync', '--messages', self.messages_file)

        assert result.exit_code == 0, result.output
        assert 'Accepted: 1' in result.output
        assert 'Rejected: 1' in result.output
        assert 'Non-bank messages: 1' in result.output

        listing = self.invoke('list')
        assert 'AMAZON' in listing.output
        assert '2024-01-01' in listing.output

        again = self.invoke('sync', '--messages', self.messages_file)
        assert 'Accepted: 0' in again.output

    def test_sync_missing_file(self):
        result = self.invoke('sync', '--messages', os.path.join(self.temp_dir, 'missing.json'))
        assert result.exit_code == 1
        assert 'unavailable' in result.output

    def test_status_and_reset(self):
        self.invoke('sync', '--messages', self.messages_file)

        status = self.invoke('status')
        assert status.exit_code == 0
        assert 'Last sync: never' not in status.output

        reset = self.invoke('reset-checkpoint', '--yes')
        assert reset.exit_code == 0

        status = self.invoke('status')
        assert 'Last sync: never' in status.output

    def test_init_config_yaml(self):
        output = os.path.join(self.temp_dir, 'generated.json')
        result = self.invoke('init-config', output, '--format', 'yaml')

        assert result.exit_code == 0
        assert os.path.exists(os.path.join(self.temp_dir, 'generated.yml'))

    def test_init_config_yaml_without_extension(self):
        output = os.path.join(self.temp_dir, 'myconf')
        result = self.invoke('init-config', output, '--format', 'yaml')

        assert result.exit_code == 0
        with open(os.path.join(self.temp_dir, 'myconf.yml')) as f:
            assert f.read().lstrip().startswith('max_count:')

    def test_init_config_json_without_extension(self):
        output = os.path.join(self.temp_dir, 'myconf')
        result = self.invoke('init-config', output)

        assert result.exit_code == 0
        with open(os.path.join(self.temp_dir, 'myconf.json')) as f:
            assert json.load(f)['max_count'] == 100
