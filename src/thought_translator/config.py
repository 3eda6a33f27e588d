"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from thought_translator.models.tone import Tone


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    max_retries: int = 3
    timeout: int = 120
    temperature: float = 0.7
    top_p: float | None = None
    max_tokens: int = 2048
    thinking: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.max_retries <= 10:
            raise ValueError(f"max_retries must be between 1 and 10, got {self.max_retries}")
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"timeout must be between 1 and 600 seconds, got {self.timeout}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1, got {self.temperature}")
        if self.top_p is not None and not 0.0 < self.top_p <= 1.0:
            raise ValueError(f"top_p must be in (0, 1], got {self.top_p}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


@dataclass(frozen=True)
class HistoryConfig:
    db_path: str = "~/.thought-translator/storage.db"
    storage_key: str = "translationHistory"

    def __post_init__(self) -> None:
        if not self.storage_key.strip():
            raise ValueError("storage_key must not be empty")

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class SpeechConfig:
    default_locale: str = "en-US"
    dictation_locale: str = "en-US"
    phrase_time_limit: float = 10.0

    def __post_init__(self) -> None:
        if self.phrase_time_limit <= 0:
            raise ValueError(
                f"phrase_time_limit must be positive, got {self.phrase_time_limit}"
            )


@dataclass(frozen=True)
class UIConfig:
    auto_copy: bool = True
    default_tone: str = Tone.FRIENDLY.value
    default_language: str = "English"

    def __post_init__(self) -> None:
        if self.default_tone not in {t.value for t in Tone}:
            raise ValueError(f"default_tone must be one of {Tone.names()}, got {self.default_tone!r}")


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        history=HistoryConfig(**raw.get("history", {})),
        speech=SpeechConfig(**raw.get("speech", {})),
        ui=UIConfig(**raw.get("ui", {})),
    )
