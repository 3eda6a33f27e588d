"""Pydantic model for persisted rewrite history."""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from thought_translator.models.tone import Tone


def new_entry_id() -> str:
    """Time-derived identifier, unique even for entries created in the same instant."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="microseconds")
    return f"{stamp}-{uuid.uuid4().hex[:6]}"


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryEntry(BaseModel):
    """One completed rewrite. Serialized with the camelCase keys of the stored document."""

    id: str = Field(default_factory=new_entry_id)
    input: str
    output: str
    tone: Tone
    output_language: str = Field(alias="outputLanguage")
    timestamp: int = Field(default_factory=_now_ms)  # epoch milliseconds

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
