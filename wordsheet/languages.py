"""Language catalogue shared by the quiz, export and speech helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageDescriptor:
    code: str
    label: str
    flag: str
    transliteration_required: bool
    locale: str

    @property
    def primary_subtag(self) -> str:
        return self.locale.split("-")[0].lower()


LANGUAGE_CATALOGUE: tuple[LanguageDescriptor, ...] = (
    LanguageDescriptor("it", "Italiano", "🇮🇹", False, "it-IT"),
    LanguageDescriptor("en", "English", "🇬🇧", False, "en-US"),
    LanguageDescriptor("de", "Deutsch", "🇩🇪", False, "de-DE"),
    LanguageDescriptor("fr", "Français", "🇫🇷", False, "fr-FR"),
    LanguageDescriptor("es", "Español", "🇪🇸", False, "es-ES"),
    LanguageDescriptor("ru", "Русский", "🇷🇺", True, "ru-RU"),
    LanguageDescriptor("ja", "日本語", "🇯🇵", True, "ja-JP"),
    LanguageDescriptor("zh", "中文", "🇨🇳", True, "zh-CN"),
    LanguageDescriptor("ar", "العربية", "🇸🇦", True, "ar-SA"),
    LanguageDescriptor("he", "עברית", "🇮🇱", True, "he-IL"),
)

LANGUAGE_BY_CODE = {language.code: language for language in LANGUAGE_CATALOGUE}

TRANSLITERATION_CODES = frozenset(
    language.code for language in LANGUAGE_CATALOGUE if language.transliteration_required
)


def language_by_code(code: str) -> LanguageDescriptor:
    try:
        return LANGUAGE_BY_CODE[code]
    except KeyError:
        raise ValueError(f"Unknown language code '{code}'. Available: {sorted(LANGUAGE_BY_CODE)}") from None
