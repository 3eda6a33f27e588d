"""Tests for LocalStorage and HistoryStore."""

from __future__ import annotations

import json
import logging
import sqlite3
from unittest.mock import patch

import pytest

from thought_translator.models.history import HistoryEntry
from thought_translator.models.tone import Tone
from thought_translator.storage.history_store import HISTORY_KEY, HistoryStore
from thought_translator.storage.local_storage import LocalStorage


def _entry(text: str, **kwargs) -> HistoryEntry:
    return HistoryEntry(
        input=text,
        output=text.upper(),
        tone=kwargs.pop("tone", Tone.FRIENDLY),
        output_language=kwargs.pop("output_language", "English"),
        **kwargs,
    )


def _reloaded(storage: LocalStorage) -> HistoryStore:
    store = HistoryStore(storage)
    store.load()
    return store


class TestLocalStorage:
    def test_get_missing_returns_none(self, storage):
        assert storage.get_item("nope") is None

    def test_set_and_get(self, storage):
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"

    def test_set_overwrites(self, storage):
        storage.set_item("a", "1")
        storage.set_item("a", "2")
        assert storage.get_item("a") == "2"

    def test_persists_across_instances(self, tmp_path):
        LocalStorage(tmp_path / "s.db").set_item("k", "v")
        assert LocalStorage(tmp_path / "s.db").get_item("k") == "v"

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "storage.db"
        LocalStorage(db_path)
        assert db_path.exists()


class TestHistoryStoreMutations:
    def test_starts_empty(self, history):
        assert history.entries == []
        assert len(history) == 0

    def test_append_inserts_at_head(self, history):
        first, second = _entry("first"), _entry("second")
        history.append(first)
        history.append(second)
        assert [e.input for e in history] == ["second", "first"]

    def test_round_trip_preserves_entries(self, history, storage):
        history.append(_entry("hello", tone=Tone.HUMOROUS, output_language="Japanese"))
        history.append(_entry("bonjour", tone=Tone.PROFESSIONAL))

        assert _reloaded(storage).entries == history.entries

    def test_document_uses_camel_case_keys(self, history, storage, sample_entry):
        history.append(sample_entry)

        document = json.loads(storage.get_item(HISTORY_KEY))

        assert document == [{
            "id": sample_entry.id,
            "input": sample_entry.input,
            "output": sample_entry.output,
            "tone": "Friendly",
            "outputLanguage": "English",
            "timestamp": sample_entry.timestamp,
        }]

    def test_duplicate_id_rejected(self, history, sample_entry):
        history.append(sample_entry)
        with pytest.raises(ValueError, match="Duplicate"):
            history.append(sample_entry)
        assert len(history) == 1

    def test_remove_persists(self, history, storage):
        keep, drop = _entry("keep"), _entry("drop")
        history.append(keep)
        history.append(drop)

        assert history.remove(drop.id) is True

        assert _reloaded(storage).entries == [keep]

    def test_remove_missing_is_noop(self, history, storage, sample_entry):
        history.append(sample_entry)
        with patch.object(storage, "set_item") as mock_set:
            assert history.remove("missing") is False
        mock_set.assert_not_called()
        assert history.entries == [sample_entry]

    def test_clear_persists(self, history, storage):
        history.append(_entry("a"))
        history.append(_entry("b"))

        history.clear()

        assert len(history) == 0
        assert _reloaded(storage).entries == []

    def test_get(self, history, sample_entry):
        history.append(sample_entry)
        assert history.get(sample_entry.id) == sample_entry
        assert history.get("missing") is None

    def test_entries_is_a_copy(self, history, sample_entry):
        history.append(sample_entry)
        history.entries.clear()
        assert len(history) == 1

    def test_separate_keys_are_independent(self, storage):
        work = HistoryStore(storage, key="work")
        work.load()
        work.append(_entry("work item"))

        assert _reloaded(storage).entries == []


class TestHistoryStoreLoadFailures:
    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            '{"id": "x"}',
            '[{"id": "x", "input": "a"}]',
            '[{"id": "x", "input": "a", "output": "b", "tone": "Angry", '
            '"outputLanguage": "English", "timestamp": 1}]',
        ],
    )
    def test_unreadable_document_loads_empty(self, storage, raw):
        storage.set_item(HISTORY_KEY, raw)

        store = HistoryStore(storage)

        assert store.load() == []
        assert store.entries == []

    def test_invalid_items_are_skipped_and_valid_ones_kept(self, storage, sample_entry, caplog):
        storage.set_item(HISTORY_KEY, json.dumps([
            sample_entry.to_document(),
            {**sample_entry.to_document(), "id": "bad-tone", "tone": "Sarcastic"},
            {"id": "missing-fields"},
        ]))

        store = HistoryStore(storage)
        with caplog.at_level(logging.WARNING):
            assert store.load() == [sample_entry]
        assert "Skipping invalid history entry" in caplog.text

    def test_valid_entries_survive_next_write(self, storage, sample_entry):
        storage.set_item(HISTORY_KEY, json.dumps([
            sample_entry.to_document(),
            {**sample_entry.to_document(), "id": "bad-tone", "tone": "Sarcastic"},
        ]))
        store = HistoryStore(storage)
        store.load()

        newer = _entry("newer")
        store.append(newer)

        assert _reloaded(storage).entries == [newer, sample_entry]

    def test_duplicate_ids_in_document_keep_first(self, storage, sample_entry):
        duplicate = {**sample_entry.to_document(), "output": "other"}
        storage.set_item(HISTORY_KEY, json.dumps([sample_entry.to_document(), duplicate]))

        assert HistoryStore(storage).load() == [sample_entry]

    def test_load_discards_previous_state(self, history, storage, sample_entry):
        history.append(sample_entry)
        storage.set_item(HISTORY_KEY, "garbage")

        assert history.load() == []
        assert len(history) == 0

    def test_storage_read_error_loads_empty(self, storage, caplog):
        store = HistoryStore(storage)
        with patch.object(storage, "get_item", side_effect=sqlite3.OperationalError("locked")):
            with caplog.at_level(logging.ERROR):
                assert store.load() == []
        assert "Failed to read history" in caplog.text

    def test_load_accepts_document_from_browser(self, storage):
        storage.set_item(HISTORY_KEY, json.dumps([{
            "id": "1718000000000",
            "input": "hola",
            "output": "Hello",
            "tone": "Professional",
            "outputLanguage": "English",
            "timestamp": 1718000000000,
        }]))

        entries = HistoryStore(storage).load()

        assert len(entries) == 1
        assert entries[0].tone is Tone.PROFESSIONAL
        assert entries[0].output_language == "English"


class TestHistoryStorePersistFailure:
    def test_write_failure_is_logged_not_raised(self, history, storage, sample_entry, caplog):
        with patch.object(storage, "set_item", side_effect=sqlite3.OperationalError("disk full")):
            with caplog.at_level(logging.ERROR):
                history.append(sample_entry)

        assert history.entries == [sample_entry]
        assert "Failed to save history" in caplog.text

    def test_persist_reports_failure(self, history, storage):
        with patch.object(storage, "set_item", side_effect=OSError("read-only")):
            assert history.persist() is False
        assert history.persist() is True
