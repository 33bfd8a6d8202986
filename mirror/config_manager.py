#!/usr/bin/env python3
"""
Configuration Manager for evm-mirror

Loads user settings from a YAML file, with the Etherscan API key
overridable from the environment.
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from mirror.foundry_config import DEFAULT_SOLC_VERSION

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.evm-mirror/config.yaml"


@dataclass
class MirrorConfig:
    """Main configuration for evm-mirror."""

    # Explorer API settings
    etherscan_api_key: str = ""
    default_chain_id: str = "1"
    request_timeout: int = 30
    request_delay: float = 0.2  # Rate limiting delay between requests

    # Fetch the implementation instead of the proxy shell
    follow_proxy: bool = False

    # Used when the explorer's compiler version cannot be parsed
    default_solc_version: str = DEFAULT_SOLC_VERSION


class ConfigManager:
    """Manages evm-mirror configuration."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config_file = Path(config_file).expanduser()
        self.config = MirrorConfig()
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file, then apply environment overrides."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Could not load config file %s: %s", self.config_file, e)
                data = None

            if isinstance(data, dict):
                self._apply(data)

        env_key = os.getenv('ETHERSCAN_API_KEY')
        if env_key:
            self.config.etherscan_api_key = env_key.strip()

    def _apply(self, data: Dict[str, Any]) -> None:
        for key, value in data.items():
            if hasattr(self.config, key):
                if key == 'default_chain_id' and value is not None:
                    value = str(value)
                setattr(self.config, key, value)
            else:
                logger.warning("Ignoring unknown config key: %s", key)

    def save_config(self) -> None:
        """Save current configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            yaml.dump(asdict(self.config), f, default_flow_style=False, indent=2)
        logger.info("Configuration saved to %s", self.config_file)

    def set_etherscan_key(self, api_key: str) -> None:
        """Set and persist the Etherscan API key."""
        self.config.etherscan_api_key = api_key.strip()
        self.save_config()

    def get_config_summary(self) -> Dict[str, Any]:
        """Configuration as a dict, with the API key masked."""
        summary = asdict(self.config)
        if summary.get('etherscan_api_key'):
            key = summary['etherscan_api_key']
            summary['etherscan_api_key'] = f"{key[:4]}..." if len(key) > 4 else "***"
        return summary
