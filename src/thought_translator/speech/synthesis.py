"""Read-aloud backed by pyttsx3."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import pyttsx3

from thought_translator.speech.errors import SpeechUnavailableError
from thought_translator.speech.voices import Voice, pick_voice

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Text-to-speech is not supported in this environment."


class SpeechSynthesizer:
    """Speaks text on a worker thread so the caller stays responsive."""

    def __init__(self, engine_factory: Callable[[], object] = pyttsx3.init):
        self._engine_factory = engine_factory
        self._engine = None
        self._thread: threading.Thread | None = None
        self._speaking = threading.Event()
        self.on_end: Callable[[], None] | None = None
        self.on_error: Callable[[str], None] | None = None

    def _get_engine(self):
        if self._engine is None:
            try:
                self._engine = self._engine_factory()
            except (ImportError, OSError, RuntimeError) as e:
                raise SpeechUnavailableError(UNSUPPORTED_MESSAGE) from e
        return self._engine

    @property
    def is_speaking(self) -> bool:
        return self._speaking.is_set()

    def voices(self) -> list[Voice]:
        engine = self._get_engine()
        result = []
        for v in engine.getProperty("voices") or []:
            languages = list(getattr(v, "languages", None) or [])
            locale = languages[0] if languages else ""
            if isinstance(locale, bytes):
                locale = locale.decode("utf-8", errors="ignore")
            # pyttsx3 drivers only expose on-device voices
            result.append(Voice(id=v.id, name=v.name, locale=locale, local_service=True))
        return result

    def speak(self, text: str, locale: str) -> None:
        """Cancel any current utterance and start reading ``text``."""
        if not text.strip():
            return
        engine = self._get_engine()
        self.stop()

        voice = pick_voice(self.voices(), locale)
        if voice is not None:
            engine.setProperty("voice", voice.id)
        else:
            logger.debug("No voice for %s; using the engine default", locale)

        self._speaking.set()
        self._thread = threading.Thread(target=self._run, args=(engine, text), daemon=True)
        self._thread.start()

    def _run(self, engine, text: str) -> None:
        try:
            engine.say(text)
            engine.runAndWait()
        except Exception as e:
            logger.exception("Speech synthesis failed")
            if self.on_error:
                self.on_error(f"Text-to-speech failed: {e}")
        finally:
            self._speaking.clear()
            if self.on_end:
                self.on_end()

    def stop(self) -> None:
        if self._engine is not None and self.is_speaking:
            self._engine.stop()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        self._speaking.clear()
