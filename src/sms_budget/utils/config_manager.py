"""Configuration management for the sync engine."""

import json
import os
import yaml
from dataclasses import asdict
from typing import Dict, Any, Optional
import logging

from ..models.core import SyncConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages loading and validation of sync configuration"""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager

        Args:
            config_path: Path to configuration file. If None, searches for default locations.
        """
        self.config_path = config_path
        self._config_cache: Optional[SyncConfig] = None

    def load_config(self, force_reload: bool = False) -> SyncConfig:
        """Load sync configuration from file or return default

        Args:
            force_reload: Force reload from file even if cached

        Returns:
            SyncConfig instance with loaded or default configuration
        """
        if self._config_cache is not None and not force_reload:
            return self._config_cache

        config_data = self._load_config_file()

        try:
            defaults = SyncConfig()
            self._config_cache = SyncConfig(
                max_count=config_data.get('max_count', defaults.max_count),
                description_max_length=config_data.get(
                    'description_max_length', defaults.description_max_length),
                bank_headers=config_data.get('bank_headers'),
                bank_names=config_data.get('bank_names'),
                checkpoint_file=config_data.get('checkpoint_file', defaults.checkpoint_file),
                database_file=config_data.get('database_file', defaults.database_file),
                log_directory=config_data.get('log_directory', defaults.log_directory),
                dedup_enabled=config_data.get('dedup_enabled', defaults.dedup_enabled),
            )
            logger.info(f"Configuration loaded successfully from {self.config_path or 'defaults'}")
            return self._config_cache

        except Exception as e:
            logger.warning(f"Error loading configuration: {e}. Using defaults.")
            self._config_cache = SyncConfig()
            return self._config_cache

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration from file

        Returns:
            Dictionary with configuration data or empty dict if no file found
        """
        config_file = self._find_config_file()

        if not config_file or not os.path.exists(config_file):
            logger.info("No configuration file found, using defaults")
            return {}

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.endswith('.json'):
                    data = json.load(f)
                elif config_file.endswith(('.yml', '.yaml')):
                    data = yaml.safe_load(f)
                else:
                    logger.warning(f"Unsupported config file format: {config_file}")
                    return {}

            self._validate_config_data(data)
            logger.info(f"Configuration loaded from {config_file}")
            return data

        except Exception as e:
            logger.error(f"Error reading configuration file {config_file}: {e}")
            return {}

    def _find_config_file(self) -> Optional[str]:
        if self.config_path:
            return self.config_path

        search_paths = [
            'sms_budget.json',
            'sms_budget.yml',
            'sms_budget.yaml',
            'config/sms_budget.json',
            'config/sms_budget.yml',
            'config/sms_budget.yaml',
            os.path.expanduser('~/.sms_budget/config.json'),
            os.path.expanduser('~/.sms_budget/config.yml'),
        ]

        for path in search_paths:
            if os.path.exists(path):
                return path

        return None

    def _validate_config_data(self, data: Dict[str, Any]) -> None:
        """Validate configuration data structure

        Raises:
            ValueError: If configuration data is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        for int_key in ['max_count', 'description_max_length']:
            if int_key in data:
                value = data[int_key]
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"{int_key} must be an integer")
                if value <= 0:
                    raise ValueError(f"{int_key} must be positive")

        for path_key in ['checkpoint_file', 'database_file']:
            if path_key in data:
                if not isinstance(data[path_key], str) or not data[path_key].strip():
                    raise ValueError(f"{path_key} must be a non-empty string")

        if data.get('log_directory') is not None and not isinstance(data['log_directory'], str):
            raise ValueError("log_directory must be a string")

        if 'dedup_enabled' in data and not isinstance(data['dedup_enabled'], bool):
            raise ValueError("dedup_enabled must be a boolean")

        if 'bank_headers' in data:
            headers = data['bank_headers']
            if not isinstance(headers, list) or not headers:
                raise ValueError("bank_headers must be a non-empty list")
            for header in headers:
                if not isinstance(header, str) or not header.strip():
                    raise ValueError("All bank headers must be non-empty strings")

        if 'bank_names' in data:
            if not isinstance(data['bank_names'], dict):
                raise ValueError("bank_names must be a dictionary")
            for token, name in data['bank_names'].items():
                if not isinstance(token, str) or not isinstance(name, str):
                    raise ValueError("bank_names must map strings to strings")

    def save_config_template(self, output_path: str) -> None:
        """Generate and save a configuration file template

        Args:
            output_path: Path where to save the template
        """
        template = asdict(SyncConfig())
        template['log_directory'] = "logs"

        try:
            output_dir = os.path.dirname(output_path)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)

            with open(output_path, 'w', encoding='utf-8') as f:
                if output_path.endswith(('.yml', '.yaml')):
                    yaml.dump(template, f, default_flow_style=False, indent=2, sort_keys=False)
                else:
                    json.dump(template, f, indent=2)

            logger.info(f"Configuration template saved to {output_path}")

        except Exception as e:
            logger.error(f"Error saving configuration template: {e}")
            raise

    def reset_config(self) -> None:
        """Reset configuration cache, forcing reload on next access"""
        self._config_cache = None
        logger.debug("Configuration cache reset")
