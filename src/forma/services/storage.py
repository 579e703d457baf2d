"""Key-value stores for the client state that survives between commands.

Two scopes exist: a durable store ("remember me", preferences) and a
session-only store that lives as long as the invoking terminal session.
"""

import json
import os
import time
from datetime import timedelta
from pathlib import Path
from typing import Any, Protocol

from forma.utils.logging_utils import LoggerMixin


SESSION_ENV = 'FORMA_SESSION'
SESSION_MAX_IDLE = timedelta(hours=12)

def process_start_marker(pid: int) -> str | None:
    """Start time of ``pid`` in clock ticks since boot, where /proc exposes it."""
    try:
        stat = Path(f'/proc/{pid}/stat').read_text()
    except OSError:
        return None
    # comm (field 2) may contain spaces; starttime is field 22
    fields = stat.rpartition(')')[2].split()
    return fields[19] if len(fields) > 19 else None

class Storage(Protocol):
    """Protocol for client state stores."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...

class MemoryStorage:
    """In-process store; everything is lost when the process exits."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._data

class FileStorage(LoggerMixin):
    """Store backed by a JSON file, rewritten on every change."""

    def __init__(self, path: Path | str):
        super().__init__()
        self.path = Path(path)

    def _load_state(self) -> dict[str, Any]:
        """Load state from file. A missing or unreadable file is an empty store."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to load state from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            self.logger.warning(f"Ignoring non-object state in {self.path}")
            return {}
        return data

    def _save_state(self, state: dict[str, Any]) -> None:
        """Save state to file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(state, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load_state().get(key, default)

    def set(self, key: str, value: Any) -> None:
        state = self._load_state()
        state[key] = value
        self._save_state(state)

    def remove(self, key: str) -> None:
        state = self._load_state()
        if key in state:
            del state[key]
            self._save_state(state)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def __contains__(self, key: str) -> bool:
        return key in self._load_state()

class SessionFileStorage(FileStorage):
    """File store scoped to one terminal session.

    The session is named by ``$FORMA_SESSION`` when set, otherwise by the
    parent process id (the shell running the CLI). Process ids get reused, so
    the file is also bound to an owner marker, by default the parent's start
    time. A file written under another owner is discarded on load. Other
    session files left idle longer than ``max_idle`` are pruned on
    construction.
    """

    OWNER_KEY = '_owner'

    def __init__(
        self,
        state_dir: Path | str,
        session_id: str | None = None,
        owner: str | None = None,
        max_idle: timedelta = SESSION_MAX_IDLE
    ):
        named = session_id or os.environ.get(SESSION_ENV)
        self.session_id = named or str(os.getppid())
        if owner is None and not named:
            owner = process_start_marker(os.getppid())
        self.owner = owner
        super().__init__(Path(state_dir) / 'sessions' / f'{self.session_id}.json')
        self.prune(max_idle)

    def prune(self, max_idle: timedelta) -> None:
        """Delete other session files not written to within ``max_idle``."""
        cutoff = time.time() - max_idle.total_seconds()
        for path in self.path.parent.glob('*.json'):
            if path == self.path:
                continue
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    self.debug("Pruned stale session file", path=str(path))
            except OSError as e:
                self.logger.warning(f"Could not prune {path}: {e}")

    def _load_state(self) -> dict[str, Any]:
        state = super()._load_state()
        if state and self.owner is not None and state.get(self.OWNER_KEY) != self.owner:
            self.debug("Discarding session file left by another session", path=str(self.path))
            self.clear()
            return {}
        return state

    def _save_state(self, state: dict[str, Any]) -> None:
        if self.owner is not None:
            state[self.OWNER_KEY] = self.owner
        super()._save_state(state)
