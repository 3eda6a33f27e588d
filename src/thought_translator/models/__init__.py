"""Data models for the thought translator."""

from thought_translator.models.history import HistoryEntry, new_entry_id
from thought_translator.models.request import RewriteRequest
from thought_translator.models.tone import Tone

__all__ = [
    "HistoryEntry",
    "RewriteRequest",
    "Tone",
    "new_entry_id",
]
