"""Claude API wrapper with async streaming and retry logic."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import anthropic
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

# Transient failures; anything else fails on the first attempt
RETRYABLE_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


class LLMClient:
    """Async Claude API client that streams text deltas.

    Opening a stream is retried with exponential backoff. Once the first
    event has been received the stream is never retried, so a caller never
    sees the same fragment twice.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 3,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.max_retries = max_retries
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def _open_stream(self, **kwargs):
        """Start a streaming Messages call, retrying transient failures."""
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            reraise=True,
        ):
            with attempt:
                stream = await self.client.messages.create(stream=True, **kwargs)
        return stream

    async def stream_text(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        top_p: float | None = None,
        max_tokens: int = 2048,
        thinking: bool = False,
    ) -> AsyncIterator[str]:
        """Yield text deltas from Claude in arrival order.

        Args:
            prompt: User message content.
            system: System instruction; omitted when empty.
            model: Claude model id.
            temperature: Sampling temperature.
            top_p: Nucleus sampling threshold; omitted when None.
            max_tokens: Upper bound on generated tokens.
            thinking: Whether extended thinking is enabled.

        Raises whatever the SDK raises (``anthropic.APIError`` and friends);
        callers decide how to present it.
        """
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        if top_p is not None:
            kwargs["top_p"] = top_p
        if not thinking:
            kwargs["thinking"] = {"type": "disabled"}

        logger.debug("LLM stream: model=%s temperature=%s top_p=%s", model, temperature, top_p)
        try:
            stream = await self._open_stream(**kwargs)
        except Exception:
            logger.error("LLM stream failed to open", exc_info=True)
            raise

        input_tokens = 0
        output_tokens = 0
        try:
            async for event in stream:
                if event.type == "message_start":
                    input_tokens = event.message.usage.input_tokens
                elif event.type == "content_block_delta" and event.delta.type == "text_delta":
                    if event.delta.text:
                        yield event.delta.text
                elif event.type == "message_delta":
                    output_tokens = event.usage.output_tokens
        finally:
            await stream.close()

        logger.debug("LLM stream finished: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
