"""Tests for the typer CLI."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from thought_translator.cli import app
from thought_translator.config import AppConfig, HistoryConfig
from thought_translator.pipeline.controller import CLIPBOARD_UNSUPPORTED
from thought_translator.pipeline.rewriter import REWRITE_ERROR_MESSAGE
from thought_translator.session import build_history

runner = CliRunner()


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return AppConfig(history=HistoryConfig(db_path=str(tmp_path / "storage.db")))


@pytest.fixture
def cli_env(config, mock_clipboard):
    """Point the CLI at a temp database and a mock clipboard."""
    with patch("thought_translator.cli.load_config", return_value=config), \
         patch("thought_translator.cli.SystemClipboard", return_value=mock_clipboard):
        yield config


def _with_llm(llm):
    return patch("thought_translator.session.LLMClient", return_value=llm)


class TestRewriteCommand:
    def test_rewrite_prints_and_records(self, cli_env, make_llm, mock_clipboard):
        with _with_llm(make_llm(["I'm running", " late."])):
            result = runner.invoke(app, ["rewrite", "im runnin l8", "-t", "professional", "-l", "French"])

        assert result.exit_code == 0, result.output
        assert "I'm running late." in result.output
        assert "Professional | French | copied to clipboard" in result.output
        mock_clipboard.copy.assert_called_once_with("I'm running late.")

        entries = build_history(cli_env).entries
        assert len(entries) == 1
        assert entries[0].input == "im runnin l8"
        assert entries[0].output_language == "French"

    def test_no_copy(self, cli_env, make_llm, mock_clipboard):
        with _with_llm(make_llm(["Done"])):
            result = runner.invoke(app, ["rewrite", "done", "--no-copy"])

        assert result.exit_code == 0, result.output
        assert "copied to clipboard" not in result.output
        mock_clipboard.copy.assert_not_called()

    def test_clipboard_unavailable_notice(self, cli_env, make_llm, mock_clipboard):
        mock_clipboard.copy.return_value = False
        with _with_llm(make_llm(["Done"])):
            result = runner.invoke(app, ["rewrite", "done"])

        assert result.exit_code == 0, result.output
        assert CLIPBOARD_UNSUPPORTED in result.output
        assert "copied to clipboard" not in result.output

    def test_failure_exits_nonzero(self, cli_env, make_llm):
        with _with_llm(make_llm([], error=ConnectionError("down"))):
            result = runner.invoke(app, ["rewrite", "hello"])

        assert result.exit_code == 1
        assert REWRITE_ERROR_MESSAGE in result.output
        assert len(build_history(cli_env)) == 0

    def test_blank_text_exits_nonzero(self, cli_env, make_llm):
        llm = make_llm(["x"])
        with _with_llm(llm):
            result = runner.invoke(app, ["rewrite", "   "])

        assert result.exit_code == 1
        assert "Nothing to translate." in result.output
        llm.stream_text.assert_not_called()

    def test_unknown_tone_is_rejected(self, cli_env, make_llm):
        with _with_llm(make_llm(["x"])):
            result = runner.invoke(app, ["rewrite", "hi", "--tone", "sarcastic"])

        assert result.exit_code != 0


class TestHistoryCommands:
    @pytest.fixture
    def seeded(self, cli_env, sample_entry):
        store = build_history(cli_env)
        store.append(sample_entry)
        return sample_entry

    def test_empty_history(self, cli_env):
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "Your translations will appear here." in result.output

    def test_history_lists_entries(self, seeded):
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "History (1)" in result.output
        assert "Your translations will appear here." not in result.output

    def test_show(self, seeded, mock_clipboard):
        result = runner.invoke(app, ["show", seeded.id, "--copy"])
        assert result.exit_code == 0, result.output
        assert "Copied!" in result.output
        mock_clipboard.copy.assert_called_once_with(seeded.output)

    def test_show_unknown(self, cli_env):
        result = runner.invoke(app, ["show", "missing"])
        assert result.exit_code == 1

    def test_delete(self, seeded, cli_env):
        result = runner.invoke(app, ["delete", seeded.id])
        assert result.exit_code == 0
        assert len(build_history(cli_env)) == 0

    def test_clear_requires_confirmation(self, seeded, cli_env):
        result = runner.invoke(app, ["clear"], input="n\n")
        assert result.exit_code != 0
        assert len(build_history(cli_env)) == 1

    def test_clear_yes(self, seeded, cli_env):
        result = runner.invoke(app, ["clear", "--yes"])
        assert result.exit_code == 0
        assert "History cleared." in result.output
        assert len(build_history(cli_env)) == 0

    def test_speak_uses_entry_language(self, cli_env, sample_entry):
        store = build_history(cli_env)
        store.append(sample_entry.model_copy(update={"output_language": "Japanese"}))
        entry_id = store.entries[0].id
        synth = MagicMock()
        synth.is_speaking = False
        with patch("thought_translator.cli.SpeechSynthesizer", return_value=synth):
            result = runner.invoke(app, ["speak", entry_id])

        assert result.exit_code == 0, result.output
        synth.speak.assert_called_once_with(sample_entry.output, "ja-JP")


class TestLanguagesCommand:
    def test_search(self):
        result = runner.invoke(app, ["languages", "--search", "port"])
        assert result.exit_code == 0
        assert "Portuguese" in result.output
        assert "English" not in result.output

    def test_no_results(self):
        result = runner.invoke(app, ["languages", "-s", "zzz"])
        assert result.exit_code == 0
        assert "No results found." in result.output
