"""Tests for configuration management."""

import json
import os
import shutil
import tempfile
import unittest

import yaml

from sms_budget.models.core import DEFAULT_BANK_HEADERS, SyncConfig
from sms_budget.utils.config_manager import ConfigManager


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager"""

    def setUp(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, 'test_config.json')

    def tearDown(self):
        """Clean up test fixtures"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_default_config_loading(self):
        """Test loading default configuration when no file exists"""
        manager = ConfigManager(config_path="nonexistent_file.json")
        config = manager.load_config()

        self.assertIsInstance(config, SyncConfig)
        self.assertEqual(config.max_count, 100)
        self.assertEqual(config.description_max_length, 30)
        self.assertEqual(config.bank_headers, DEFAULT_BANK_HEADERS)
        self.assertEqual(config.bank_names['HDFCBK'], 'HDFC Bank')
        self.assertTrue(config.dedup_enabled)

    def test_json_config_loading(self):
        test_config = {
            "max_count": 50,
            "description_max_length": 20,
            "bank_headers": ["FEDBNK", "HDFCBK"],
            "bank_names": {"FEDBNK": "Federal Bank"},
            "checkpoint_file": "state/cp.json",
            "dedup_enabled": False
        }
        with open(self.config_file, 'w') as f:
            json.dump(test_config, f)

        config = ConfigManager(config_path=self.config_file).load_config()

        self.assertEqual(config.max_count, 50)
        self.assertEqual(config.description_max_length, 20)
        self.assertEqual(config.bank_headers, ["FEDBNK", "HDFCBK"])
        self.assertEqual(config.bank_names, {"FEDBNK": "Federal Bank"})
        self.assertEqual(config.checkpoint_file, "state/cp.json")
        self.assertFalse(config.dedup_enabled)

    def test_yaml_config_loading(self):
        yaml_file = os.path.join(self.temp_dir, 'config.yml')
        with open(yaml_file, 'w') as f:
            yaml.dump({"max_count": 25, "database_file": "ledger.db"}, f)

        config = ConfigManager(config_path=yaml_file).load_config()

        self.assertEqual(config.max_count, 25)
        self.assertEqual(config.database_file, "ledger.db")

    def test_config_validation(self):
        """Invalid files fall back to defaults"""
        invalid_config = {
            "max_count": 0,
            "bank_headers": "HDFCBK",
            "dedup_enabled": "yes"
        }
        with open(self.config_file, 'w') as f:
            json.dump(invalid_config, f)

        config = ConfigManager(config_path=self.config_file).load_config()

        self.assertEqual(config.max_count, 100)
        self.assertEqual(config.bank_headers, DEFAULT_BANK_HEADERS)
        self.assertTrue(config.dedup_enabled)

    def test_config_template_generation(self):
        template_file = os.path.join(self.temp_dir, 'template.json')
        ConfigManager().save_config_template(template_file)

        with open(template_file, 'r') as f:
            template = json.load(f)

        self.assertEqual(template['max_count'], 100)
        self.assertIn('HDFCBK', template['bank_headers'])
        self.assertIn('bank_names', template)

    def test_yaml_template_round_trips_through_loader(self):
        template_file = os.path.join(self.temp_dir, 'template.yml')
        ConfigManager().save_config_template(template_file)

        config = ConfigManager(config_path=template_file).load_config()
        self.assertEqual(config.log_directory, "logs")
        self.assertEqual(config.bank_headers, DEFAULT_BANK_HEADERS)

    def test_config_caching(self):
        with open(self.config_file, 'w') as f:
            json.dump({"max_count": 10}, f)

        manager = ConfigManager(config_path=self.config_file)
        self.assertEqual(manager.load_config().max_count, 10)

        with open(self.config_file, 'w') as f:
            json.dump({"max_count": 20}, f)

        self.assertEqual(manager.load_config().max_count, 10)
        self.assertEqual(manager.load_config(force_reload=True).max_count, 20)


if __name__ == '__main__':
    unittest.main()
