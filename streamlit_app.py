"""Streamlit Web UI for thought-translator.

Main column: raw thoughts + tone + output language → streamed polished version.
Side column: locally persisted history with load / copy / delete / clear.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import time

logger = logging.getLogger(__name__)

import nest_asyncio
import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv

load_dotenv()
nest_asyncio.apply()

# Streamlit Cloud: sync st.secrets → os.environ so the LLM client can read it
for key in ("ANTHROPIC_API_KEY",):
    if key not in os.environ:
        try:
            os.environ[key] = st.secrets[key]
        except Exception:
            pass

from thought_translator.config import load_config
from thought_translator.languages import language_names
from thought_translator.models.tone import Tone
from thought_translator.pipeline.controller import InteractionController
from thought_translator.session import build_controller
from thought_translator.speech.errors import SpeechUnavailableError
from thought_translator.speech.transcription import transcribe_audio

CLEAR_CONFIRM_SECONDS = 3.0
NO_SPEECH_NOTICE = "No speech was recognised in the recording."

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Thought Translator",
    page_icon=":sparkles:",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Browser adapters (Clipboard API / Web Speech API)
# ---------------------------------------------------------------------------


class BrowserClipboard:
    """Copies through navigator.clipboard in the user's browser."""

    def copy(self, text: str) -> bool:
        components.html(
            f"""
            <script>
              const text = {json.dumps(text)};
              const clip = (window.parent && window.parent.navigator.clipboard) || navigator.clipboard;
              if (clip) {{ clip.writeText(text).catch((e) => console.error("Clipboard write failed", e)); }}
            </script>
            """,
            height=0,
        )
        return True


class BrowserSpeaker:
    """Reads text aloud with the browser's speechSynthesis.

    Voice choice mirrors ``pick_voice``: among voices for the locale, prefer a
    non-local (usually cloud, higher quality) one.
    """

    def __init__(self):
        self._speaking = False

    @property
    def is_speaking(self) -> bool:
        return self._speaking

    def speak(self, text: str, locale: str) -> None:
        components.html(
            f"""
            <script>
              const w = window.parent || window;
              const synth = w.speechSynthesis;
              const Utterance = w.SpeechSynthesisUtterance;
              const locale = {json.dumps(locale)};
              const run = () => {{
                const voices = synth.getVoices().filter((v) => v.lang === locale);
                const best = voices.find((v) => !v.localService) || voices[0];
                const utterance = new Utterance({json.dumps(text)});
                utterance.lang = locale;
                if (best) {{ utterance.voice = best; }}
                utterance.onerror = (e) => console.error("Speech synthesis error", e);
                synth.cancel();
                synth.speak(utterance);
              }};
              if (!synth) {{
                console.error("Text-to-speech is not supported in this browser.");
              }} else if (synth.getVoices().length > 0) {{
                run();
              }} else {{
                synth.onvoiceschanged = () => {{ synth.onvoiceschanged = null; run(); }};
              }}
            </script>
            """,
            height=0,
        )
        self._speaking = True

    def stop(self) -> None:
        components.html(
            """
            <script>
              const w = window.parent || window;
              if (w.speechSynthesis) { w.speechSynthesis.cancel(); }
            </script>
            """,
            height=0,
        )
        self._speaking = False


# ---------------------------------------------------------------------------
# Session resources (constructed once per browser session)
# ---------------------------------------------------------------------------


def _get_controller() -> InteractionController:
    if "controller" not in st.session_state:
        config = load_config()
        try:
            controller = build_controller(
                config,
                clipboard=BrowserClipboard(),
                speaker=BrowserSpeaker(),
            )
        except Exception as e:
            raise RuntimeError(f"Could not start the LLM client. Check ANTHROPIC_API_KEY: {e}") from e
        st.session_state.controller = controller
        st.session_state.synced_input = controller.input_text
        st.session_state.tone = controller.tone.value
        st.session_state.language = controller.language
        st.session_state.confirm_clear_at = 0.0
        st.session_state.dictation_locale = config.speech.dictation_locale
    return st.session_state.controller


controller = _get_controller()

# ---------------------------------------------------------------------------
# Callbacks (run before the script body, so widget state may be set here)
# ---------------------------------------------------------------------------


def _load_entry(entry_id: str) -> None:
    entry = controller.load_from_history(entry_id)
    if entry is not None:
        st.session_state.tone = entry.tone.value
        st.session_state.language = entry.output_language


def _delete_entry(entry_id: str) -> None:
    controller.delete_entry(entry_id)


def _clear_history() -> None:
    now = time.monotonic()
    if now - st.session_state.confirm_clear_at <= CLEAR_CONFIRM_SECONDS:
        controller.clear_history()
        st.session_state.confirm_clear_at = 0.0
    else:
        st.session_state.confirm_clear_at = now


def _transcribe_recording() -> None:
    clip = st.session_state.get("dictation_audio")
    if clip is None:
        return
    try:
        transcript = transcribe_audio(clip.getvalue(), st.session_state.dictation_locale)
    except SpeechUnavailableError as e:
        controller.error = str(e)
        return
    if transcript:
        # pick up edits committed in this same rerun
        controller.input_text = st.session_state.get("input_text", controller.input_text)
        controller.append_transcript(transcript)
    else:
        controller.notice = NO_SPEECH_NOTICE


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

main_col, history_col = st.columns([2, 1], gap="large")

with main_col:
    st.title("Thought Translator")
    st.caption("Untangle your thoughts. Write clearly, in any language.")

    # Dictation and history loads change controller.input_text outside the widget
    if st.session_state.synced_input != controller.input_text:
        st.session_state.input_text = controller.input_text

    st.markdown("**Your Raw Thoughts**")
    # Recorded in the browser, transcribed on the server
    st.audio_input(
        "Dictate",
        key="dictation_audio",
        on_change=_transcribe_recording,
        label_visibility="collapsed",
    )

    input_text = st.text_area(
        "Your Raw Thoughts",
        key="input_text",
        height=160,
        placeholder=(
            "Jot down anything... a messy idea, a quick note, "
            "or a sentence in another language."
        ),
        label_visibility="collapsed",
    )
    controller.input_text = input_text
    st.session_state.synced_input = input_text

    tone_col, lang_col = st.columns(2)
    with tone_col:
        tone_value = st.radio("Tone", Tone.names(), key="tone", horizontal=True)
    with lang_col:
        options = language_names()
        if st.session_state.language not in options:
            options.append(st.session_state.language)
        language = st.selectbox("Output Language", options, key="language")
    controller.tone = Tone.parse(tone_value)
    controller.language = language

    submitted = st.button(
        "Translate Thought",
        type="primary",
        disabled=controller.is_busy or not input_text.strip(),
        use_container_width=True,
    )

    output_placeholder = st.empty()

    if submitted:
        def on_output(text: str) -> None:
            output_placeholder.markdown(text)

        controller.add_output_listener(on_output)
        try:
            with st.spinner("Translating..."):
                asyncio.run(controller.submit())
        except Exception:
            logger.exception("Rewrite failed unexpectedly")
            st.error("An unexpected error occurred.")
        finally:
            controller.remove_output_listener(on_output)

    if controller.error:
        st.error(controller.error)
    if controller.notice:
        st.info(controller.notice)

    if controller.output_text:
        with output_placeholder.container(border=True):
            st.markdown("**Polished Version**")
            st.text(controller.output_text)
        speak_col, copy_col, _ = st.columns([1, 1, 4])
        with speak_col:
            if st.button("Stop reading" if controller.is_speaking else "Read aloud"):
                controller.toggle_speaking()
        with copy_col:
            if st.button("Copy"):
                controller.copy(controller.output_text)
                st.toast("Copied!")

with history_col:
    entries = controller.history.entries
    head_col, clear_col = st.columns([2, 1])
    with head_col:
        st.subheader("History")
    if entries:
        confirming = (
            time.monotonic() - st.session_state.confirm_clear_at <= CLEAR_CONFIRM_SECONDS
        )
        with clear_col:
            st.button(
                "Click to Confirm" if confirming else "Clear All",
                on_click=_clear_history,
                type="primary" if confirming else "secondary",
            )

    if not entries:
        st.info("Your translations will appear here.")
    for entry in entries:
        with st.container(border=True):
            st.caption(f'"{entry.input}"')
            st.markdown(entry.output)
            st.caption(
                f"{entry.tone.value} | {entry.output_language} · "
                f"{entry.created_at.strftime('%H:%M')}"
            )
            load_col, copy_col, del_col = st.columns(3)
            with load_col:
                st.button("Load", key=f"load-{entry.id}", on_click=_load_entry, args=(entry.id,))
            with copy_col:
                if st.button("Copy", key=f"copy-{entry.id}"):
                    controller.copy(entry.output)
                    st.toast("Copied!")
            with del_col:
                st.button("Delete", key=f"delete-{entry.id}", on_click=_delete_entry, args=(entry.id,))
