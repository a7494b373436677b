"""
Row normalizer: decides whether the first grid row is a header, resolves
which column holds each role, and maps the remaining rows to WordEntry
records.

Data-quality problems never raise here. Rows without a word or a translation
are dropped, missing header keywords fall back to positional columns, and a
grid with no usable rows yields an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from wordsheet.loader import cell_text
from wordsheet.vocabulary import (
    DEFAULT_VOCABULARY,
    ROLE_FALLBACK_COLUMNS,
    ROLE_TRANSLATION,
    ROLE_TRANSLITERATION,
    ROLE_UNKNOWN,
    ROLES,
    HeaderVocabulary,
    normalize_header_value,
)


@dataclass(frozen=True)
class NoHeader:
    has_header = False

    def column(self, role: str) -> int:
        return ROLE_FALLBACK_COLUMNS[role]


@dataclass(frozen=True)
class Header:
    unknown_column: int
    translation_column: int
    transliteration_column: int
    has_header = True

    def column(self, role: str) -> int:
        return getattr(self, f"{role}_column")


HeaderDecision = Union[NoHeader, Header]


@dataclass(frozen=True)
class WordEntry:
    unknown: str
    translation: str
    transliteration: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        payload = {"unknown": self.unknown, "translation": self.translation}
        if self.transliteration is not None:
            payload["transliteration"] = self.transliteration
        return payload


def _locate_column(keys: list[str], role: str, vocabulary: HeaderVocabulary) -> Optional[int]:
    for idx, key in enumerate(keys):
        if vocabulary.matches(key, role):
            return idx
    return None


def _read_cell(row: Sequence[Any], index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    return cell_text(row[index]).strip()


def detect_header(
    rows: Sequence[Sequence[Any]],
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    *,
    strict: bool = False,
) -> HeaderDecision:
    """
    Classify the first row as header or data.

    Any cell matching any role keyword makes the row a header. Each role then
    resolves on its own to the first matching column, or to its positional
    fallback (0, 1, 2); two roles may land on the same column.

    With ``strict`` the row only counts as a header when the unknown and the
    translation roles both match, in different columns.
    """
    if not rows:
        return NoHeader()

    keys = [normalize_header_value(cell_text(cell)) for cell in rows[0]]
    if not any(vocabulary.matches_any(key) for key in keys):
        return NoHeader()

    located = {role: _locate_column(keys, role, vocabulary) for role in ROLES}
    if strict:
        unknown_idx = located[ROLE_UNKNOWN]
        translation_idx = located[ROLE_TRANSLATION]
        if unknown_idx is None or translation_idx is None or unknown_idx == translation_idx:
            return NoHeader()

    resolved = {
        role: idx if idx is not None else ROLE_FALLBACK_COLUMNS[role]
        for role, idx in located.items()
    }
    return Header(
        unknown_column=resolved[ROLE_UNKNOWN],
        translation_column=resolved[ROLE_TRANSLATION],
        transliteration_column=resolved[ROLE_TRANSLITERATION],
    )


def looks_like_repeated_header(unknown: str, translation: str, vocabulary: HeaderVocabulary) -> bool:
    return vocabulary.matches(normalize_header_value(unknown), ROLE_UNKNOWN) and vocabulary.matches(
        normalize_header_value(translation), ROLE_TRANSLATION
    )


def row_to_entry(
    row: Sequence[Any],
    decision: HeaderDecision,
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
) -> Optional[WordEntry]:
    """Map one data row, or return None when the row must be dropped."""
    unknown = _read_cell(row, decision.column(ROLE_UNKNOWN))
    translation = _read_cell(row, decision.column(ROLE_TRANSLATION))
    if not unknown or not translation:
        return None
    if looks_like_repeated_header(unknown, translation, vocabulary):
        return None
    transliteration = _read_cell(row, decision.column(ROLE_TRANSLITERATION))
    return WordEntry(
        unknown=unknown,
        translation=translation,
        transliteration=transliteration or None,
    )


def rows_to_entries(
    rows: Sequence[Sequence[Any]],
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    *,
    strict: bool = False,
    decision: Optional[HeaderDecision] = None,
) -> list[WordEntry]:
    if not rows:
        return []

    if decision is None:
        decision = detect_header(rows, vocabulary, strict=strict)
    data_rows = rows[1:] if decision.has_header else rows

    entries: list[WordEntry] = []
    for row in data_rows:
        entry = row_to_entry(row, decision, vocabulary)
        if entry is not None:
            entries.append(entry)
    return entries
