"""Wire a controller from configuration."""

from __future__ import annotations

from thought_translator.clients.llm_client import LLMClient
from thought_translator.config import AppConfig
from thought_translator.models.tone import Tone
from thought_translator.pipeline.controller import InteractionController
from thought_translator.pipeline.rewriter import ThoughtRewriter
from thought_translator.storage.history_store import HistoryStore
from thought_translator.storage.local_storage import LocalStorage


def build_history(config: AppConfig) -> HistoryStore:
    """Open local storage and load the persisted history."""
    storage = LocalStorage(config.history.resolved_db_path)
    history = HistoryStore(storage, key=config.history.storage_key)
    history.load()
    return history


def build_controller(
    config: AppConfig,
    *,
    llm: LLMClient | None = None,
    history: HistoryStore | None = None,
    clipboard=None,
    dictation=None,
    speaker=None,
) -> InteractionController:
    if llm is None:
        llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    rewriter = ThoughtRewriter(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        top_p=config.llm.top_p,
        max_tokens=config.llm.max_tokens,
        thinking=config.llm.thinking,
    )
    return InteractionController(
        rewriter,
        history if history is not None else build_history(config),
        clipboard=clipboard,
        dictation=dictation,
        speaker=speaker,
        auto_copy=config.ui.auto_copy,
        tone=Tone.parse(config.ui.default_tone),
        language=config.ui.default_language,
        default_locale=config.speech.default_locale,
    )
