"""Optional voice input and output."""

from thought_translator.speech.dictation import DictationSession
from thought_translator.speech.errors import SpeechUnavailableError
from thought_translator.speech.synthesis import SpeechSynthesizer
from thought_translator.speech.transcription import transcribe_audio
from thought_translator.speech.voices import Voice, normalize_locale, pick_voice

__all__ = [
    "DictationSession",
    "SpeechSynthesizer",
    "SpeechUnavailableError",
    "Voice",
    "normalize_locale",
    "pick_voice",
    "transcribe_audio",
]
