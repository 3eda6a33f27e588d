"""Rewrite tone options."""

from __future__ import annotations

from enum import Enum


class Tone(str, Enum):
    FRIENDLY = "Friendly"
    HUMOROUS = "Humorous"
    PROFESSIONAL = "Professional"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def names(cls) -> list[str]:
        return [t.value for t in cls]

    @classmethod
    def parse(cls, value: str | Tone) -> Tone:
        """Resolve a tone from its display value, case-insensitively."""
        if isinstance(value, Tone):
            return value
        needle = value.strip().lower()
        for tone in cls:
            if tone.value.lower() == needle or tone.name.lower() == needle:
                return tone
        raise ValueError(f"Unknown tone {value!r}; expected one of {cls.names()}")
