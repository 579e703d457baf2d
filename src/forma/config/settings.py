"""Configuration settings for the Forma client."""

import os
from pathlib import Path
from typing import Any

import yaml

from forma.config.env import EnvConfig
from forma.config.types import ApiConfig
from forma.config.types import AppConfig
from forma.config.types import CheckoutConfig
from forma.config.types import LoggingConfig
from forma.config.types import MembershipsConfig
from forma.config.utils import expand_path
from forma.config.utils import merge_sections
from forma.config.utils import parse_bool
from forma.config.utils import section
from forma.exceptions import ConfigError


DEFAULT_CONFIG_DIR = "~/.config/forma"

class ConfigurationManager:
    """Loads configuration from ``config.yaml`` and the environment, with caching.

    Values from the environment override values from the file.
    """

    def __init__(self, config_dir: str | None = None):
        self._config: AppConfig | None = None
        self._config_path: Path = _get_config_path(config_dir)

    @property
    def config(self) -> AppConfig:
        """Get the current configuration, loading it if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration with caching."""
        if self._config is not None:
            return self._config

        raw = merge_sections(_load_file_config(self._config_path), EnvConfig.overrides())
        self._config = _build_app_config(raw, self._config_path)
        return self._config

    def reload_config(self) -> AppConfig:
        """Force reload configuration."""
        self._config = None
        return self.load_config()

def _get_config_path(config_dir: str | None = None) -> Path:
    """Get configuration directory path."""
    return expand_path(config_dir or os.getenv("FORMA_CONFIG_DIR", DEFAULT_CONFIG_DIR))

def _load_file_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file if it exists."""
    config_file = config_path / "config.yaml"
    if not config_file.exists():
        return {}

    try:
        with open(config_file, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"Configuration file {config_file} must contain a mapping")
    return loaded

def _as_int(value: Any, name: str, minimum: int = 1) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if result < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {result}")
    return result

def _build_app_config(raw: dict[str, Any], config_path: Path) -> AppConfig:
    """Convert the merged configuration dictionary into an ``AppConfig``."""
    api_raw = section(raw, 'api')
    memberships_raw = section(raw, 'memberships')
    checkout_raw = section(raw, 'checkout')
    logging_raw = section(raw, 'logging')
    directories = section(raw, 'directories')

    defaults = ApiConfig()
    api = ApiConfig(
        base_url=str(api_raw.get('base_url', defaults.base_url)).rstrip('/'),
        api_key=str(api_raw.get('api_key', defaults.api_key) or ''),
        connect_timeout=_as_int(api_raw.get('connect_timeout', defaults.connect_timeout), 'api.connect_timeout'),
        timeout=_as_int(api_raw.get('timeout', defaults.timeout), 'api.timeout'),
        page_size=_as_int(api_raw.get('page_size', defaults.page_size), 'api.page_size'),
    )

    checkout_defaults = CheckoutConfig()
    checkout = CheckoutConfig(
        stripe_secret_key=str(checkout_raw.get('stripe_secret_key', '') or ''),
        activation_url=str(checkout_raw.get('activation_url', checkout_defaults.activation_url)),
        activation_key=str(checkout_raw.get('activation_key', '') or ''),
    )

    logging_config = LoggingConfig(
        level=str(logging_raw.get('level', 'WARNING')).upper(),
        file=logging_raw.get('file'),
    )
    if 'sensitive_fields' in logging_raw:
        logging_config.sensitive_fields = list(logging_raw['sensitive_fields'])

    state_dir = expand_path(directories.get('state', config_path), base_dir=config_path)

    return AppConfig(
        api=api,
        memberships=MembershipsConfig(
            fallback_on_error=parse_bool(memberships_raw.get('fallback_on_error', False))
        ),
        checkout=checkout,
        logging=logging_config,
        config_dir=str(config_path),
        state_dir=str(state_dir),
    )

def load_config(config_dir: str | None = None) -> AppConfig:
    """Load configuration using a ConfigurationManager."""
    return ConfigurationManager(config_dir).load_config()
