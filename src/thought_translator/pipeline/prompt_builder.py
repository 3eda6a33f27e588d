"""Fixed rewriting policy and per-call prompt assembly."""

from __future__ import annotations

from dataclasses import dataclass

from thought_translator.models.tone import Tone

CLARIFICATION_MESSAGE = (
    "I'm not quite sure what you mean. Could you please provide a little more detail?"
)

SYSTEM_INSTRUCTION = f"""\
You are an expert thought translator. Your task is to take any user input (fragmented \
sentences, broken grammar, slang, multilingual text, or messy thoughts) and rewrite it \
into clear, natural, and fluent text in a specified output language. Follow these rules strictly:
1. Preserve core meaning: the rewritten text must have exactly the same meaning, intent, \
and nuance as the original. Do not add any new information, ideas, or interpretations.
2. Match tone and style: mirror the original tone and register. If the user writes in slang, \
keep the conversational feel but make it understandable. The desired tone is given by the user.
3. Output language: always answer in the output language given by the user, whatever the \
input language is. If the input is already in that language, refine it in the same language.
4. Maintain flow: keep the length and structure close to the original. Do not expand short \
thoughts into long paragraphs or condense long sentences unnecessarily.
5. Silent correction: fix all spelling, grammar, and punctuation errors without drawing \
attention to them.
6. Clarification: if the input is too ambiguous or nonsensical to understand, respond ONLY \
with the sentence: "{CLARIFICATION_MESSAGE}"
7. Direct output: your entire response must be ONLY the refined text. No preamble, apology, \
or explanation such as "Here is the refined version:"."""

CONTENT_MARKER = "---"


@dataclass(frozen=True)
class RewritePrompt:
    system: str
    user: str


def build_user_prompt(text: str, tone: Tone | str, language: str) -> str:
    """Labeled metadata first, then the marker, then the literal text."""
    return (
        f"Tone: {Tone.parse(tone).value}\n"
        f"Output Language: {language}\n"
        f"Translate the following thought:\n"
        f"{CONTENT_MARKER}\n"
        f"{text}"
    )


def build_prompt(text: str, tone: Tone | str, language: str) -> RewritePrompt | None:
    """Return the system/user pair for a rewrite, or None for blank input."""
    if not text or not text.strip():
        return None
    return RewritePrompt(system=SYSTEM_INSTRUCTION, user=build_user_prompt(text, tone, language))
