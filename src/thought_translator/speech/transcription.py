"""One-shot transcription of recorded audio clips (e.g. from the browser)."""

from __future__ import annotations

import io
import logging

import speech_recognition as sr

from thought_translator.speech.errors import SpeechUnavailableError

logger = logging.getLogger(__name__)

UNREADABLE_AUDIO_MESSAGE = "Could not read the recorded audio."


def transcribe_audio(
    audio: bytes,
    language: str = "en-US",
    *,
    recognizer: sr.Recognizer | None = None,
) -> str:
    """Transcribe a WAV/AIFF/FLAC clip with Google speech recognition.

    Returns "" when the clip holds no intelligible speech. Unreadable audio
    and recognition service failures raise SpeechUnavailableError with a
    one-line message for the user.
    """
    if not audio:
        return ""
    recognizer = recognizer or sr.Recognizer()
    try:
        with sr.AudioFile(io.BytesIO(audio)) as source:
            audio_data = recognizer.record(source)
    except (ValueError, OSError) as e:
        logger.warning("Unreadable audio clip (%d bytes): %s", len(audio), e)
        raise SpeechUnavailableError(UNREADABLE_AUDIO_MESSAGE) from e

    try:
        transcript = recognizer.recognize_google(audio_data, language=language)
    except sr.UnknownValueError:
        return ""
    except sr.RequestError as e:
        logger.error("Speech recognition error: %s", e)
        raise SpeechUnavailableError(f"Speech recognition error: {e}") from e
    return (transcript or "").strip()
