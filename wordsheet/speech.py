"""Speech provider interface and voice selection for pronouncing a word."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Sequence

from wordsheet.languages import language_by_code
from wordsheet.normalizer import WordEntry


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


class SpeechProvider(Protocol):
    def list_voices(self) -> Sequence[Voice]:
        ...

    def speak(self, text: str, locale_hint: Optional[str] = None, voice: Optional[Voice] = None) -> None:
        ...


@dataclass
class NullSpeechProvider:
    """Provider that speaks nothing and remembers what it was asked to say."""

    voices: list[Voice] = field(default_factory=list)
    spoken: list[tuple[str, Optional[str], Optional[Voice]]] = field(default_factory=list)

    def list_voices(self) -> Sequence[Voice]:
        return list(self.voices)

    def speak(self, text: str, locale_hint: Optional[str] = None, voice: Optional[Voice] = None) -> None:
        self.spoken.append((text, locale_hint, voice))


def preferred_languages(learning_languages: Sequence[str], mother_language: Optional[str]) -> list[str]:
    if learning_languages:
        return list(learning_languages)
    if mother_language:
        return [mother_language]
    return []


def pick_voice(voices: Iterable[Voice], language_codes: Sequence[str]) -> Optional[Voice]:
    subtags = [language_by_code(code).primary_subtag for code in language_codes]
    for voice in voices:
        lang = voice.lang.lower()
        if any(lang.startswith(subtag) for subtag in subtags):
            return voice
    return None


def speak_entry(
    provider: SpeechProvider,
    entry: Optional[WordEntry],
    learning_languages: Sequence[str] = (),
    mother_language: Optional[str] = None,
) -> bool:
    """Ask ``provider`` to pronounce the entry's word. Returns False when nothing was said."""
    if entry is None or not entry.unknown.strip():
        return False

    languages = preferred_languages(learning_languages, mother_language)
    voice = pick_voice(provider.list_voices(), languages)
    locale_hint = None
    if voice is None and languages:
        locale_hint = language_by_code(languages[0]).locale
    provider.speak(entry.unknown, locale_hint, voice)
    return True
