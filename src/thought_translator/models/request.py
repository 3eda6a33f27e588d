"""Pydantic model for a single rewrite submission."""

from __future__ import annotations

from pydantic import BaseModel

from thought_translator.models.tone import Tone


class RewriteRequest(BaseModel):
    text: str
    tone: Tone = Tone.FRIENDLY
    language: str = "English"

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()
