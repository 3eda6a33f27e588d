"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from thought_translator.clients.llm_client import LLMClient
from thought_translator.models.history import HistoryEntry
from thought_translator.models.tone import Tone
from thought_translator.storage.history_store import HistoryStore
from thought_translator.storage.local_storage import LocalStorage


def _make_streaming_llm(fragments: list[str], error: Exception | None = None) -> MagicMock:
    """Mock LLMClient whose stream_text yields ``fragments`` then optionally raises."""
    llm = MagicMock(spec=LLMClient)

    async def stream_text(**kwargs):
        for fragment in fragments:
            yield fragment
        if error is not None:
            raise error

    llm.stream_text = MagicMock(side_effect=stream_text)
    return llm


@pytest.fixture
def make_llm():
    """Factory fixture: make_llm(["Hel", "lo"], error=None) -> mock LLMClient."""
    return _make_streaming_llm


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(db_path=tmp_path / "storage.db")


@pytest.fixture
def history(storage) -> HistoryStore:
    store = HistoryStore(storage)
    store.load()
    return store


@pytest.fixture
def sample_entry() -> HistoryEntry:
    return HistoryEntry(
        input="im gonna b l8  2 the mtg srry",
        output="I'm going to be late to the meeting, sorry!",
        tone=Tone.FRIENDLY,
        output_language="English",
    )


@pytest.fixture
def mock_clipboard() -> MagicMock:
    clipboard = MagicMock()
    clipboard.copy.return_value = True
    return clipboard
