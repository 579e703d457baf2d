"""Environment variables that override ``config.yaml``."""

import os
from collections.abc import Mapping
from typing import Any


# variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    'FORMA_API_URL': ('api', 'base_url'),
    'FORMA_API_KEY': ('api', 'api_key'),
    'FORMA_API_TIMEOUT': ('api', 'timeout'),
    'FORMA_PAGE_SIZE': ('api', 'page_size'),
    'FORMA_FALLBACK_ON_ERROR': ('memberships', 'fallback_on_error'),
    'STRIPE_SECRET_KEY': ('checkout', 'stripe_secret_key'),
    'FORMA_ACTIVATION_URL': ('checkout', 'activation_url'),
    'FORMA_ACTIVATION_KEY': ('checkout', 'activation_key'),
    'FORMA_STATE_DIR': ('directories', 'state'),
    'FORMA_LOG_LEVEL': ('logging', 'level'),
    'FORMA_LOG_FILE': ('logging', 'file'),
}

class EnvConfig:
    """Reads the ``FORMA_*`` and ``STRIPE_*`` variables into config sections."""

    @staticmethod
    def overrides(environ: Mapping[str, str] | None = None) -> dict[str, dict[str, Any]]:
        """Return the sections set in the environment; unset variables are skipped."""
        environ = os.environ if environ is None else environ
        sections: dict[str, dict[str, Any]] = {}
        for variable, (section, key) in ENV_OVERRIDES.items():
            value = environ.get(variable)
            if value is not None:
                sections.setdefault(section, {})[key] = value
        return sections
