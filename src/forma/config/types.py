"""Configuration type definitions."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class ApiConfig:
    """Backend API configuration."""
    base_url: str = "https://formacr.com"
    api_key: str = ""
    connect_timeout: int = 7
    timeout: int = 20
    page_size: int = 100

@dataclass
class MembershipsConfig:
    """Memberships screen configuration."""
    fallback_on_error: bool = False

@dataclass
class CheckoutConfig:
    """Subscription checkout configuration."""
    stripe_secret_key: str = ""
    activation_url: str = "https://formacr.com/api/gym/activate"
    activation_key: str = ""

@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    file: str | None = None
    sensitive_fields: list[str] = field(default_factory=lambda: [
        'password', 'token', 'access_token', 'refresh_token', 'api_key', 'secret'
    ])

@dataclass
class AppConfig:
    """Application configuration."""
    api: ApiConfig
    memberships: MembershipsConfig
    checkout: CheckoutConfig
    logging: LoggingConfig
    config_dir: str = "config"
    state_dir: str = "config"

    @property
    def state_path(self) -> Path:
        """Directory holding persisted session and preference files."""
        return Path(self.state_dir)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return getattr(self, key, default)
