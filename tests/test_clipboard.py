"""Tests for SystemClipboard."""

from unittest.mock import patch

import pyperclip

from thought_translator.clipboard import SystemClipboard


def test_copy_writes_text():
    with patch("thought_translator.clipboard.pyperclip.copy") as mock_copy:
        assert SystemClipboard().copy("Hello there!") is True
    mock_copy.assert_called_once_with("Hello there!")


def test_copy_without_backend_returns_false(caplog):
    with patch(
        "thought_translator.clipboard.pyperclip.copy",
        side_effect=pyperclip.PyperclipException("no copy/paste mechanism"),
    ):
        assert SystemClipboard().copy("Hello") is False
    assert "Clipboard is not available" in caplog.text
