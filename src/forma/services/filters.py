"""Status filter and free-text search over a held collection."""

import unicodedata
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Protocol, TypeVar


ALL = 'all'

class Searchable(Protocol):
    @property
    def status(self) -> Enum | str:
        ...

    @property
    def searchable_fields(self) -> list[str]:
        ...

R = TypeVar('R', bound=Searchable)

def normalize(text: str) -> str:
    """Casefold and strip diacritics, so ``González`` compares as ``gonzalez``."""
    decomposed = unicodedata.normalize('NFKD', text.casefold())
    return ''.join(c for c in decomposed if not unicodedata.combining(c))

def status_value(record: Searchable) -> str:
    status = record.status
    return status.value if isinstance(status, Enum) else str(status)

def matches_search(record: Searchable, query: str) -> bool:
    """Substring match of ``query`` against the record's searchable fields.

    Only the empty query matches everything; whitespace is part of the needle.
    """
    needle = normalize(query)
    if not needle:
        return True
    return any(needle in normalize(field) for field in record.searchable_fields if field)

def matches_status(record: Searchable, status_filter: str) -> bool:
    return status_filter == ALL or status_value(record) == status_filter

class FilterComposer:
    """Derives the visible subset from (records, status filter, search query).

    The derivation is pure and keeps the source order.
    """

    def __init__(self, status_filter: str = ALL, query: str = ""):
        self.status_filter = status_filter
        self.query = query

    def visible(self, records: Iterable[R]) -> list[R]:
        return [
            record for record in records
            if matches_status(record, self.status_filter) and matches_search(record, self.query)
        ]

def status_counts(records: Sequence[Searchable], statuses: Iterable[str]) -> dict[str, int]:
    """Count records per status, plus ``'all'``."""
    counts = {ALL: len(records)}
    for status in statuses:
        counts[status] = 0
    for record in records:
        value = status_value(record)
        if value in counts and value != ALL:
            counts[value] += 1
    return counts
