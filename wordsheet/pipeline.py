"""
Pipeline entry points.

    entries = parse_from_bytes(raw)     # workbook bytes, first sheet only
    entries = parse_from_text(text)     # CSV / Google Sheets CSV export
    result  = parse_file("words.xlsx")  # local file, mode picked from suffix

Acquiring the bytes is the caller's job. ``source_mode`` and
``google_sheet_export_locator`` help a transport layer decide which entry
point applies to a fetched payload.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs, urlparse

from wordsheet.loader import SourceGrid, decode_text, read_delimited_text, read_workbook_bytes
from wordsheet.normalizer import HeaderDecision, WordEntry, detect_header, rows_to_entries
from wordsheet.vocabulary import DEFAULT_VOCABULARY, HeaderVocabulary

TEXT_FORMATS = {".csv", ".tsv", ".txt"}
WORKBOOK_FORMATS = {".xlsx", ".xlsm", ".xls", ".ods"}
ALL_FORMATS = TEXT_FORMATS | WORKBOOK_FORMATS

MODE_TEXT = "text"
MODE_BINARY = "binary"

GOOGLE_SHEET_RE = re.compile(r"/spreadsheets/d/([^/]+)")


@dataclass
class ParseResult:
    entries: list[WordEntry]
    decision: HeaderDecision
    source: SourceGrid


def parse_source(
    source: SourceGrid,
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    *,
    strict: bool = False,
) -> ParseResult:
    decision = detect_header(source.rows, vocabulary, strict=strict)
    entries = rows_to_entries(source.rows, vocabulary, decision=decision)
    return ParseResult(entries=entries, decision=decision, source=source)


def parse_from_bytes(
    raw: bytes,
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    *,
    strict: bool = False,
) -> list[WordEntry]:
    return parse_source(read_workbook_bytes(raw), vocabulary, strict=strict).entries


def parse_from_text(
    text: str,
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    *,
    strict: bool = False,
) -> list[WordEntry]:
    return parse_source(read_delimited_text(text), vocabulary, strict=strict).entries


def parse_file(
    path: "str | Path",
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    *,
    strict: bool = False,
) -> ParseResult:
    """
    Read a local file and parse it.

    Raises:
        FileNotFoundError  if the file does not exist.
        ValueError         if the suffix is unsupported.
        MalformedSource    if the content cannot be read.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if suffix not in ALL_FORMATS:
        supported = ", ".join(sorted(ALL_FORMATS))
        raise ValueError(f"Unsupported format '{suffix or '[missing extension]'}'. Supported: {supported}")

    raw = path.read_bytes()
    if suffix in TEXT_FORMATS:
        text, encoding = decode_text(raw)
        source = read_delimited_text(text, delimiter="\t" if suffix == ".tsv" else None)
        source.detected_encoding = encoding
    else:
        source = read_workbook_bytes(raw)
    return parse_source(source, vocabulary, strict=strict)


def source_mode(content_type: Optional[str] = None, locator: Optional[str] = None) -> str:
    """Pick the entry point for a fetched payload: "text" for CSV, else "binary"."""
    if content_type and "text/csv" in content_type.lower():
        return MODE_TEXT
    if locator and "format=csv" in locator:
        return MODE_TEXT
    return MODE_BINARY


def google_sheet_export_locator(url: str, fmt: str = "csv") -> str:
    """Rewrite a Google Sheets share/edit URL into its export URL."""
    parsed = urlparse(url.strip())
    if parsed.netloc.lower() != "docs.google.com":
        return url.strip()
    match = GOOGLE_SHEET_RE.search(parsed.path)
    if not match:
        return url.strip()
    query = parse_qs(parsed.query, keep_blank_values=True)
    gid = query.get("gid", [None])[0]
    if gid is None and parsed.fragment.startswith("gid="):
        gid = parsed.fragment[len("gid="):]
    return (
        f"https://docs.google.com/spreadsheets/d/{match.group(1)}/export"
        f"?format={fmt}&gid={gid or '0'}"
    )
