"""Errors raised by the optional voice capabilities."""

from __future__ import annotations


class SpeechUnavailableError(RuntimeError):
    """The speech capability is not available in this environment."""
