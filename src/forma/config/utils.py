"""Helpers for turning raw configuration values into typed settings."""

from pathlib import Path
from typing import Any

from forma.exceptions import ConfigError


TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})

def section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a top-level section of the config file; a missing one is empty."""
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value

def merge_sections(file_config: dict[str, Any], env_config: dict[str, dict[str, Any]]) -> dict[str, Any]:
    """Overlay environment values onto the file's sections, key by key.

    Every setting lives one level down, under its section name.
    """
    merged = dict(file_config)
    for name, values in env_config.items():
        merged[name] = {**section(file_config, name), **values}
    return merged

def expand_path(path: str | Path, base_dir: str | Path | None = None) -> Path:
    """Expand ``~`` and anchor relative paths at ``base_dir``."""
    path = Path(path).expanduser()
    if base_dir is not None and not path.is_absolute():
        return Path(base_dir) / path
    return path

def parse_bool(value: Any) -> bool:
    """Interpret YAML/env flag values ("1", "true", "yes", "on")."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES
