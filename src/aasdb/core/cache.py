"""Concept description deduplication across a batch of loads.

Concept descriptions are shared definitions: the same IRDI appears in many
packages. The cache maps a concept description identifier to the id of the
record created for it, so later occurrences only link to that record.

The cache is owned by the caller and lives as long as the batch load that
shares it. It is not safe for concurrent population; when documents are
loaded in parallel, access must be serialized by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class ConceptDescriptionCache:
    """Identifier -> record id mapping; entries only leave through ``evict``."""

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})

    def get(self, identifier: str) -> str | None:
        """Record id created for ``identifier``, or None on a miss."""
        return self._entries.get(identifier)

    def add(self, identifier: str, record_id: str) -> bool:
        """Register a record id; the first registration for an identifier wins.

        Returns:
            True if the entry was added, False if the identifier was known.
        """
        if identifier in self._entries:
            return False
        self._entries[identifier] = record_id
        return True

    def evict(self, identifiers: Iterable[str]) -> int:
        """Forget entries, e.g. those of a batch whose commit failed.

        Returns:
            Number of entries removed
        """
        removed = 0
        for identifier in identifiers:
            if self._entries.pop(identifier, None) is not None:
                removed += 1
        if removed:
            logger.debug(f"Evicted {removed} concept description cache entries")
        return removed

    def clear(self) -> None:
        logger.debug(f"Clearing concept description cache ({len(self._entries)} entries)")
        self._entries.clear()

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)
