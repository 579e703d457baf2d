"""
In-memory collection of records fetched for one tenant.

The collection is replaced wholesale on every reload. Each reload takes a
token; a response that is no longer the latest one, or that arrives after the
store was closed, is dropped instead of overwriting newer state.
"""

import threading
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from forma.exceptions import ApiError
from forma.utils.logging_utils import LoggerMixin


class Identified(Protocol):
    id: str

T = TypeVar('T', bound=Identified)

# fetch(gym_id, limit, offset, status) -> records
Fetch = Callable[[str, int, int, str | None], list[T]]

ALL_STATUSES = 'all'

class CollectionStore(LoggerMixin, Generic[T]):
    """Holds the records of one list view."""

    def __init__(
        self,
        fetch: Fetch[T],
        page_size: int = 100,
        fallback_on_error: bool = False,
        fallback_records: Callable[[], list[T]] | None = None,
        default_error: str = "Error loading records"
    ):
        super().__init__()
        self._fetch = fetch
        self.page_size = page_size
        self.fallback_on_error = fallback_on_error
        self._fallback_records = fallback_records
        self.default_error = default_error

        self.records: list[T] = []
        self.loading = False
        self.error_message: str | None = None
        self.gym_id: str | None = None
        self.status: str | None = None

        self._lock = threading.Lock()
        self._token = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop accepting responses; in-flight reloads are discarded."""
        with self._lock:
            self._closed = True
            self._token += 1
        self.loading = False

    def _next_token(self) -> int:
        with self._lock:
            self._token += 1
            return self._token

    def _is_current(self, token: int) -> bool:
        return not self._closed and token == self._token

    def reload(self, gym_id: str | None, status: str | None = None) -> bool:
        """Fetch the first page for ``gym_id`` and replace the collection.

        ``status`` scopes the fetch server-side; ``None`` or ``'all'`` fetches
        every status. Returns True when fresh records were applied.
        """
        if not gym_id or self._closed:
            return False

        scope = None if status in (None, ALL_STATUSES) else status
        token = self._next_token()
        self.gym_id = gym_id
        self.status = scope
        self.loading = True
        self.error_message = None
        self.debug("Reloading collection", gym_id=gym_id, status=scope, token=token)

        try:
            records = self._fetch(gym_id, self.page_size, 0, scope)
        except ApiError as e:
            with self._lock:
                if not self._is_current(token):
                    self.debug("Discarding stale error", token=token)
                    return False
                self.error_message = e.message or self.default_error
                self.records = self._fallback() if self.fallback_on_error else []
                self.loading = False
            self.warning("Reload failed", gym_id=gym_id, error=self.error_message,
                         fallback=self.fallback_on_error)
            return False

        with self._lock:
            if not self._is_current(token):
                self.debug("Discarding stale response", token=token)
                return False
            self.records = list(records)
            self.loading = False
        return True

    def _fallback(self) -> list[T]:
        if self._fallback_records is None:
            return []
        return list(self._fallback_records())

    def get(self, record_id: str) -> T | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def replace_record(self, record: T) -> bool:
        """Swap the held record with the same id. False if it is not held."""
        for index, held in enumerate(self.records):
            if held.id == record.id:
                self.records[index] = record
                return True
        return False
