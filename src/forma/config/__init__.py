"""Configuration package for the Forma client."""

from .settings import ConfigurationManager, load_config
from .types import AppConfig

__all__ = ['AppConfig', 'ConfigurationManager', 'load_config']
