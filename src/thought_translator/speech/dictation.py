"""Microphone dictation backed by the speech_recognition package."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

import speech_recognition as sr

from thought_translator.speech.errors import SpeechUnavailableError

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Speech recognition is not supported in this environment."


@dataclass(frozen=True)
class _Listener:
    on_transcript: Callable[[str], None]
    on_error: Callable[[str], None] | None = None
    on_end: Callable[[], None] | None = None


class DictationSession:
    """A single, explicitly owned speech-to-text resource.

    Construct it once and hand it to whoever needs dictation. ``start`` opens
    the microphone and listens on a background thread; every finalized
    transcript segment is delivered to the registered listeners. Listener
    callbacks run on that background thread.
    """

    def __init__(
        self,
        language: str = "en-US",
        *,
        recognizer: sr.Recognizer | None = None,
        microphone_factory: Callable[[], sr.AudioSource] = sr.Microphone,
        phrase_time_limit: float | None = 10.0,
    ):
        self.language = language
        self.recognizer = recognizer or sr.Recognizer()
        self.phrase_time_limit = phrase_time_limit
        self._microphone_factory = microphone_factory
        self._stopper: Callable[..., None] | None = None
        self._listeners: dict[int, _Listener] = {}
        self._next_handle = 0
        self._lock = threading.Lock()

    @property
    def is_listening(self) -> bool:
        return self._stopper is not None

    def add_listener(
        self,
        on_transcript: Callable[[str], None],
        on_error: Callable[[str], None] | None = None,
        on_end: Callable[[], None] | None = None,
    ) -> int:
        """Register callbacks and return a handle for ``remove_listener``."""
        with self._lock:
            handle = self._next_handle
            self._next_handle += 1
            self._listeners[handle] = _Listener(on_transcript, on_error, on_end)
        return handle

    def remove_listener(self, handle: int) -> None:
        with self._lock:
            self._listeners.pop(handle, None)

    def start(self) -> None:
        """Open the microphone and begin listening. No-op when already listening."""
        if self.is_listening:
            return
        try:
            source = self._microphone_factory()
        except (AttributeError, OSError) as e:
            # AttributeError: PyAudio missing; OSError: no input device
            raise SpeechUnavailableError(UNSUPPORTED_MESSAGE) from e
        self._stopper = self.recognizer.listen_in_background(
            source,
            self._handle_audio,
            phrase_time_limit=self.phrase_time_limit,
        )
        logger.debug("Dictation started (%s)", self.language)

    def stop(self) -> None:
        """Stop listening and notify ``on_end`` listeners. No-op when idle."""
        stopper, self._stopper = self._stopper, None
        if stopper is None:
            return
        stopper(wait_for_stop=False)
        logger.debug("Dictation stopped")
        for listener in self._snapshot():
            if listener.on_end:
                listener.on_end()

    def close(self) -> None:
        """Stop and drop every listener."""
        self.stop()
        with self._lock:
            self._listeners.clear()

    def _snapshot(self) -> list[_Listener]:
        with self._lock:
            return list(self._listeners.values())

    def _handle_audio(self, recognizer: sr.Recognizer, audio: sr.AudioData) -> None:
        try:
            transcript = recognizer.recognize_google(audio, language=self.language)
        except sr.UnknownValueError:
            return
        except sr.RequestError as e:
            logger.error("Speech recognition error: %s", e)
            for listener in self._snapshot():
                if listener.on_error:
                    listener.on_error(f"Speech recognition error: {e}")
            self.stop()
            return

        transcript = (transcript or "").strip()
        if not transcript:
            return
        for listener in self._snapshot():
            listener.on_transcript(transcript)
