"""Rewrite client: streams a polished version of the user's text."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable

from thought_translator.clients.llm_client import DEFAULT_MODEL, LLMClient
from thought_translator.models.tone import Tone
from thought_translator.pipeline.prompt_builder import build_prompt

logger = logging.getLogger(__name__)

REWRITE_ERROR_MESSAGE = "Sorry, something went wrong while translating. Please try again."


class RewriteError(RuntimeError):
    """User-facing rewrite failure. The raw cause is kept on ``__cause__``."""

    def __init__(self, message: str = REWRITE_ERROR_MESSAGE):
        super().__init__(message)


class ThoughtRewriter:
    """Turn raw text into polished text in the requested tone and language."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        *,
        temperature: float = 0.7,
        top_p: float | None = None,
        max_tokens: int = 2048,
        thinking: bool = False,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self.max_tokens = max_tokens
        self.thinking = thinking

    async def stream(
        self,
        text: str,
        tone: Tone | str,
        language: str,
    ) -> AsyncIterator[str]:
        """Yield non-empty fragments of the rewrite in arrival order.

        Yields nothing for blank input. Any service or stream failure is
        raised as RewriteError.
        """
        prompt = build_prompt(text, tone, language)
        if prompt is None:
            return

        try:
            async for fragment in self.llm.stream_text(
                prompt=prompt.user,
                system=prompt.system,
                model=self.model,
                temperature=self.temperature,
                top_p=self.top_p,
                max_tokens=self.max_tokens,
                thinking=self.thinking,
            ):
                if fragment:
                    yield fragment
        except Exception as e:
            logger.exception("Rewrite stream failed")
            raise RewriteError() from e

    async def rewrite(
        self,
        text: str,
        tone: Tone | str,
        language: str,
        on_fragment: Callable[[str], None] | None = None,
    ) -> str:
        """Rewrite ``text`` and return the trimmed result.

        ``on_fragment`` is called synchronously with every fragment as it
        arrives. Returns "" for blank input without contacting the service.
        """
        if not text or not text.strip():
            return ""

        parts: list[str] = []
        async for fragment in self.stream(text, tone, language):
            parts.append(fragment)
            if on_fragment:
                on_fragment(fragment)
        return "".join(parts).strip()
