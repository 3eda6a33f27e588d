"""Newest-first rewrite history persisted as one JSON document."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator

from pydantic import ValidationError

from thought_translator.models.history import HistoryEntry
from thought_translator.storage.local_storage import LocalStorage

logger = logging.getLogger(__name__)

HISTORY_KEY = "translationHistory"


class HistoryStore:
    """Ordered history of completed rewrites.

    ``load`` is the only read from storage. Every successful mutation writes
    the whole collection back. Storage problems are logged and never raised:
    the in-memory list stays authoritative for the session.
    """

    def __init__(self, storage: LocalStorage, key: str = HISTORY_KEY):
        self.storage = storage
        self.key = key
        self._entries: list[HistoryEntry] = []

    def load(self) -> list[HistoryEntry]:
        """Replace in-memory state with the persisted document."""
        self._entries = []
        try:
            raw = self.storage.get_item(self.key)
        except (sqlite3.Error, OSError):
            logger.exception("Failed to read history from storage")
            return []
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.exception("Stored history is not valid JSON; starting empty")
            return []
        if not isinstance(data, list):
            logger.error("Stored history is not a list (got %s); starting empty", type(data).__name__)
            return []

        entries: list[HistoryEntry] = []
        seen: set[str] = set()
        for index, item in enumerate(data):
            try:
                entry = HistoryEntry.model_validate(item)
            except ValidationError as e:
                logger.warning("Skipping invalid history entry at index %d: %s", index, e)
                continue
            if entry.id in seen:
                logger.warning("Skipping duplicate history entry id %s", entry.id)
                continue
            seen.add(entry.id)
            entries.append(entry)

        self._entries = entries
        logger.debug("Loaded %d history entries", len(entries))
        return list(entries)

    def persist(self) -> bool:
        """Write the full collection. Returns False when the write failed."""
        document = json.dumps(
            [entry.to_document() for entry in self._entries],
            ensure_ascii=False,
        )
        try:
            self.storage.set_item(self.key, document)
        except (sqlite3.Error, OSError):
            logger.exception("Failed to save history to storage")
            return False
        return True

    def append(self, entry: HistoryEntry) -> None:
        """Insert ``entry`` as the most recent item."""
        if any(e.id == entry.id for e in self._entries):
            raise ValueError(f"Duplicate history entry id: {entry.id}")
        self._entries.insert(0, entry)
        self.persist()

    def remove(self, entry_id: str) -> bool:
        """Delete the entry with ``entry_id``; no-op when absent."""
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self.persist()
        return True

    def clear(self) -> None:
        self._entries = []
        self.persist()

    def get(self, entry_id: str) -> HistoryEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))
