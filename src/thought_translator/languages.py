"""Supported output languages and their speech locales."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LANGUAGE = "English"
DEFAULT_LOCALE = "en-US"


@dataclass(frozen=True)
class Language:
    name: str
    locale: str


LANGUAGES: tuple[Language, ...] = (
    Language("English", "en-US"),
    Language("Spanish", "es-ES"),
    Language("French", "fr-FR"),
    Language("German", "de-DE"),
    Language("Italian", "it-IT"),
    Language("Japanese", "ja-JP"),
    Language("Korean", "ko-KR"),
    Language("Russian", "ru-RU"),
    Language("Chinese (Simplified)", "zh-CN"),
    Language("Arabic", "ar-SA"),
    Language("Bengali", "bn-IN"),
    Language("Czech", "cs-CZ"),
    Language("Danish", "da-DK"),
    Language("Dutch", "nl-NL"),
    Language("Finnish", "fi-FI"),
    Language("Greek", "el-GR"),
    Language("Hebrew", "he-IL"),
    Language("Hindi", "hi-IN"),
    Language("Hungarian", "hu-HU"),
    Language("Indonesian", "id-ID"),
    Language("Norwegian", "no-NO"),
    Language("Polish", "pl-PL"),
    Language("Portuguese", "pt-PT"),
    Language("Romanian", "ro-RO"),
    Language("Slovak", "sk-SK"),
    Language("Swedish", "sv-SE"),
    Language("Thai", "th-TH"),
    Language("Turkish", "tr-TR"),
    Language("Ukrainian", "uk-UA"),
    Language("Vietnamese", "vi-VN"),
)

_BY_NAME = {lang.name: lang for lang in LANGUAGES}


def language_names() -> list[str]:
    return [lang.name for lang in LANGUAGES]


def locale_for(name: str, default: str = DEFAULT_LOCALE) -> str:
    """Return the speech locale for a language name, or ``default`` when unmapped."""
    lang = _BY_NAME.get(name)
    return lang.locale if lang else default


def search_languages(query: str) -> list[Language]:
    """Case-insensitive substring filter over language names, table order preserved."""
    needle = query.strip().lower()
    if not needle:
        return list(LANGUAGES)
    return [lang for lang in LANGUAGES if needle in lang.name.lower()]
