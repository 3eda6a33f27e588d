"""Voice selection for read-aloud."""

from __future__ import annotations

import re
from dataclasses import dataclass

_LEADING_JUNK = re.compile(r"^[^A-Za-z]+")


@dataclass(frozen=True)
class Voice:
    id: str
    name: str
    locale: str
    local_service: bool = True


def normalize_locale(value: str | bytes) -> str:
    """Normalise engine locale strings ("en_US", b"\\x05en-us") to "en-us"."""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    return _LEADING_JUNK.sub("", value.strip()).replace("_", "-").lower()


def pick_voice(voices: list[Voice], locale: str) -> Voice | None:
    """Best voice for ``locale``: the first non-local one, else the first match."""
    target = normalize_locale(locale)
    matches = [v for v in voices if normalize_locale(v.locale) == target]
    if not matches:
        return None
    for voice in matches:
        if not voice.local_service:
            return voice
    return matches[0]
