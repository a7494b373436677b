"""Header vocabularies: the keyword sets that identify each column role."""

from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

ROLE_UNKNOWN = "unknown"
ROLE_TRANSLATION = "translation"
ROLE_TRANSLITERATION = "transliteration"
ROLES = (ROLE_UNKNOWN, ROLE_TRANSLATION, ROLE_TRANSLITERATION)

# Positional column used when a header row carries no keyword for a role.
ROLE_FALLBACK_COLUMNS = {
    ROLE_UNKNOWN: 0,
    ROLE_TRANSLATION: 1,
    ROLE_TRANSLITERATION: 2,
}

ROLE_HEADER_HINTS = {
    ROLE_UNKNOWN: ("parola", "parola sconosciuta", "sconosciuta", "unknown", "word", "fremd"),
    ROLE_TRANSLATION: ("traduzione", "translation", "meaning", "bedeutung", "ubersetzung", "übersetzung"),
    ROLE_TRANSLITERATION: ("traslitterazione", "transliteration", "trascrizione", "transcription"),
}

SUPPORTED_VOCABULARY_SUFFIXES = {".json", ".yml", ".yaml"}

NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
WHITESPACE_RE = re.compile(r"\s+")


class VocabularyError(ValueError):
    pass


def normalize_header_value(value: str) -> str:
    """Comparison key for header text: lowercase, unaccented, ASCII alphanumerics."""
    lowered = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(ch for ch in lowered if not unicodedata.combining(ch))
    spaced = NON_ALNUM_RE.sub(" ", stripped)
    return WHITESPACE_RE.sub(" ", spaced).strip()


def keyword_matches(key: str, keyword: str) -> bool:
    if not keyword:
        return False
    return key == keyword or keyword in key or keyword in key.split(" ")


def _normalised_keywords(keywords: Iterable[str]) -> tuple[str, ...]:
    result: list[str] = []
    for keyword in keywords:
        normalized = normalize_header_value(keyword)
        if normalized and normalized not in result:
            result.append(normalized)
    return tuple(result)


@dataclass(frozen=True)
class HeaderVocabulary:
    unknown: tuple[str, ...]
    translation: tuple[str, ...]
    transliteration: tuple[str, ...]

    @classmethod
    def from_hints(cls, hints: dict[str, Iterable[str]]) -> "HeaderVocabulary":
        return cls(
            unknown=_normalised_keywords(hints.get(ROLE_UNKNOWN, ())),
            translation=_normalised_keywords(hints.get(ROLE_TRANSLATION, ())),
            transliteration=_normalised_keywords(hints.get(ROLE_TRANSLITERATION, ())),
        )

    def keywords(self, role: str) -> tuple[str, ...]:
        if role not in ROLES:
            raise KeyError(role)
        return getattr(self, role)

    def matches(self, key: str, role: str) -> bool:
        """True when a normalized cell key carries any keyword of ``role``."""
        return any(keyword_matches(key, keyword) for keyword in self.keywords(role))

    def matches_any(self, key: str) -> bool:
        return any(self.matches(key, role) for role in ROLES)

    def extended(self, hints: dict[str, Iterable[str]]) -> "HeaderVocabulary":
        merged = {role: list(self.keywords(role)) + list(hints.get(role, ())) for role in ROLES}
        return HeaderVocabulary.from_hints(merged)

    def as_dict(self) -> dict[str, list[str]]:
        return {role: list(self.keywords(role)) for role in ROLES}


DEFAULT_VOCABULARY = HeaderVocabulary.from_hints(ROLE_HEADER_HINTS)


def load_vocabulary(path: Path, base: HeaderVocabulary = DEFAULT_VOCABULARY) -> HeaderVocabulary:
    """
    Load extra header keywords from a JSON file and merge them into ``base``.

    The file holds an object keyed by role name, each value a list of strings.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_VOCABULARY_SUFFIXES:
        raise VocabularyError("Vocabulary must be a .json file")
    if suffix in {".yml", ".yaml"}:
        raise VocabularyError("YAML vocabularies are not supported yet; use .json")
    if not path.exists():
        raise VocabularyError(f"Vocabulary file not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise VocabularyError(f"Invalid vocabulary JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise VocabularyError("Vocabulary JSON root must be an object keyed by role")

    unknown_roles = sorted(set(payload) - set(ROLES))
    if unknown_roles:
        raise VocabularyError(f"Unknown vocabulary roles: {unknown_roles}. Expected: {list(ROLES)}")

    for role, keywords in payload.items():
        if not isinstance(keywords, list) or not all(isinstance(item, str) for item in keywords):
            raise VocabularyError(f"Vocabulary role '{role}' must be a list of strings")

    return base.extended(payload)
