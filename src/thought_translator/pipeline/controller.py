"""Interaction controller - one rewrite at a time, plus history and voice."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum

from thought_translator.languages import DEFAULT_LANGUAGE, DEFAULT_LOCALE, locale_for
from thought_translator.models.history import HistoryEntry
from thought_translator.models.request import RewriteRequest
from thought_translator.models.tone import Tone
from thought_translator.pipeline.rewriter import RewriteError, ThoughtRewriter
from thought_translator.speech.errors import SpeechUnavailableError
from thought_translator.storage.history_store import HistoryStore

logger = logging.getLogger(__name__)

FAILURE_OUTPUT = "Sorry, something went wrong. Please try again."
DICTATION_UNSUPPORTED = "Speech recognition is not supported in this environment."
SPEECH_UNSUPPORTED = "Text-to-speech is not supported in this environment."
CLIPBOARD_UNSUPPORTED = "Clipboard is not available in this environment."


class Phase(str, Enum):
    """Rewrite lifecycle.

    FAILED is passed through on the way back to IDLE. DONE rests until the
    next submission.
    """

    IDLE = "idle"
    SUBMITTING = "submitting"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


class InteractionController:
    """Owns the session state the UI renders.

    ``clipboard``, ``dictation`` and ``speaker`` are optional adapters; when
    one is missing or fails, the matching action sets ``notice`` and the rest
    of the flow is unaffected.
    """

    def __init__(
        self,
        rewriter: ThoughtRewriter,
        history: HistoryStore,
        *,
        clipboard=None,
        dictation=None,
        speaker=None,
        auto_copy: bool = True,
        tone: Tone = Tone.FRIENDLY,
        language: str = DEFAULT_LANGUAGE,
        default_locale: str = DEFAULT_LOCALE,
    ):
        self.rewriter = rewriter
        self.history = history
        self.clipboard = clipboard
        self.dictation = dictation
        self.speaker = speaker
        self.auto_copy = auto_copy
        self.default_locale = default_locale

        self.tone = tone
        self.language = language
        self.input_text = ""
        self.output_text = ""
        self.error: str | None = None
        self.notice: str | None = None
        self.phase = Phase.IDLE

        self._output_listeners: list[Callable[[str], None]] = []
        self._input_lock = threading.Lock()
        self._dictation_handle: int | None = None
        if dictation is not None:
            self._dictation_handle = dictation.add_listener(
                self.append_transcript,
                on_error=self._on_dictation_error,
            )

    # --- state ---

    @property
    def is_busy(self) -> bool:
        return self.phase in (Phase.SUBMITTING, Phase.STREAMING)

    @property
    def is_listening(self) -> bool:
        return self.dictation is not None and self.dictation.is_listening

    @property
    def is_speaking(self) -> bool:
        return self.speaker is not None and self.speaker.is_speaking

    def add_output_listener(self, listener: Callable[[str], None]) -> None:
        """``listener`` receives the full output text after every change."""
        self._output_listeners.append(listener)

    def remove_output_listener(self, listener: Callable[[str], None]) -> None:
        if listener in self._output_listeners:
            self._output_listeners.remove(listener)

    def _set_output(self, text: str) -> None:
        self.output_text = text
        for listener in list(self._output_listeners):
            listener(text)

    # --- rewrite ---

    async def submit(self) -> HistoryEntry | None:
        """Rewrite the current input.

        Returns the new history entry, or None when the submission was
        rejected (blank input, rewrite already running) or failed.
        """
        if self.is_busy:
            logger.debug("Submission rejected: a rewrite is already running")
            return None
        request = RewriteRequest(text=self.input_text, tone=self.tone, language=self.language)
        if request.is_empty:
            return None

        self.phase = Phase.SUBMITTING
        self.error = None
        self.notice = None
        self._stop_voice()
        self._set_output("")

        def on_fragment(fragment: str) -> None:
            if self.phase is Phase.SUBMITTING:
                self.phase = Phase.STREAMING
            self._set_output(self.output_text + fragment)

        try:
            result = await self.rewriter.rewrite(
                request.text, request.tone, request.language, on_fragment=on_fragment,
            )
        except RewriteError as e:
            self.phase = Phase.FAILED
            self.error = str(e)
            self._set_output(FAILURE_OUTPUT)
            # the failure stays visible through error and output_text
            self.phase = Phase.IDLE
            return None
        except BaseException:
            # never leave the session locked in a busy phase
            self.phase = Phase.IDLE
            raise

        self._set_output(result)
        self.phase = Phase.DONE

        if result and self.auto_copy:
            self.copy(result)

        entry = HistoryEntry(
            input=request.text,
            output=result,
            tone=request.tone,
            output_language=request.language,
        )
        self.history.append(entry)
        logger.debug("Rewrite complete: %d chars, history size %d", len(result), len(self.history))
        return entry

    # --- history ---

    def load_from_history(self, entry_id: str) -> HistoryEntry | None:
        """Restore a past rewrite into the input and output fields."""
        entry = self.history.get(entry_id)
        if entry is None:
            return None
        self.input_text = entry.input
        self.tone = entry.tone
        self.language = entry.output_language
        self._set_output(entry.output)
        if self.is_speaking:
            self.speaker.stop()
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        return self.history.remove(entry_id)

    def clear_history(self) -> None:
        self.history.clear()

    def copy(self, text: str) -> bool:
        """Copy ``text`` to the clipboard; best-effort."""
        if self.clipboard is None or not self.clipboard.copy(text):
            self.notice = CLIPBOARD_UNSUPPORTED
            return False
        return True

    # --- voice ---

    def toggle_dictation(self) -> bool:
        """Start or stop dictation. Returns True when dictation is now active."""
        if self.dictation is None:
            self.notice = DICTATION_UNSUPPORTED
            return False
        if self.dictation.is_listening:
            self.dictation.stop()
            return False
        try:
            self.dictation.start()
        except SpeechUnavailableError as e:
            self.notice = str(e)
            return False
        return True

    def toggle_speaking(self) -> bool:
        """Read the output aloud, or stop if already speaking. True while speaking."""
        if self.speaker is None:
            self.notice = SPEECH_UNSUPPORTED
            return False
        if self.speaker.is_speaking:
            self.speaker.stop()
            return False
        if not self.output_text.strip():
            return False
        locale = locale_for(self.language, self.default_locale)
        try:
            self.speaker.speak(self.output_text, locale)
        except SpeechUnavailableError as e:
            self.notice = str(e)
            return False
        return True

    def append_transcript(self, segment: str) -> None:
        """Append a finalized speech segment to the input, space separated."""
        segment = segment.strip()
        if not segment:
            return
        with self._input_lock:
            current = self.input_text
            sep = "" if not current or current[-1].isspace() else " "
            self.input_text = f"{current}{sep}{segment}"

    def _on_dictation_error(self, message: str) -> None:
        self.error = message

    def _stop_voice(self) -> None:
        if self.is_listening:
            self.dictation.stop()
        if self.is_speaking:
            self.speaker.stop()

    def close(self) -> None:
        """Release voice resources and deregister from the dictation session."""
        self._stop_voice()
        if self.dictation is not None and self._dictation_handle is not None:
            self.dictation.remove_listener(self._dictation_handle)
            self._dictation_handle = None
