"""
loader.py — Source reader for wordsheet

Turns a raw workbook byte buffer, or delimited text, into a grid of cells
taken from the first sheet only.

Public API:
    source = read_workbook_bytes(raw)
    source = read_delimited_text(text)
    rows   = source.rows

SourceGrid fields:
    rows              — list of rows; each row is a list of Text/Number cells
    detected_format   — "xlsx", "xls", "ods" or "csv"
    detected_encoding — encoding name when bytes were decoded; None otherwise
    delimiter         — delimiter char for text input; None for workbooks
    sheet_name        — sheet that was read; None for text input
    sheet_names       — every sheet in the workbook; None for text input
    warnings          — list of warning strings
"""

from __future__ import annotations

import codecs
import csv
import io
import math
import zipfile
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Optional, Union

# ── Container signatures ───────────────────────────────────────────────────────
ZIP_MAGIC = b"PK\x03\x04"
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
ODS_MIMETYPE = "application/vnd.oasis.opendocument.spreadsheet"
DELIMITER_CANDIDATES = [",", ";", "\t", "|"]

# UTF-32 first: its little-endian BOM starts with the UTF-16 one.
TEXT_BOMS = [
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
]


class MalformedSource(ValueError):
    """Raised when a buffer cannot be read as any supported tabular format."""


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Number:
    value: Union[int, float]


Cell = Union[Text, Number]


@dataclass
class SourceGrid:
    rows: list[list[Cell]]
    detected_format: str
    detected_encoding: Optional[str] = None
    delimiter: Optional[str] = None
    sheet_name: Optional[str] = None
    sheet_names: Optional[list[str]] = None
    warnings: list[str] = field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════════
# CELL PRINTING
# ══════════════════════════════════════════════════════════════════════════════

def format_number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def cell_text(cell: Any) -> str:
    """Printed form of a cell, whether tagged or a plain scalar."""
    if isinstance(cell, Text):
        return cell.value
    if isinstance(cell, Number):
        return format_number(cell.value)
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "TRUE" if cell else "FALSE"
    if isinstance(cell, (int, float)):
        return format_number(cell)
    return str(cell)


def to_cell(value: Any) -> Cell:
    if value is None:
        return Text("")
    if isinstance(value, bool):
        return Text("TRUE" if value else "FALSE")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return Text("")
        return Number(value)
    if isinstance(value, (datetime, date, time)):
        return Text(value.isoformat())
    return Text(str(value).replace("\x00", ""))


def _is_blank_row(row: list[Cell]) -> bool:
    return all(not cell_text(cell).strip() for cell in row)


def _build_rows(raw_rows) -> list[list[Cell]]:
    rows: list[list[Cell]] = []
    for values in raw_rows:
        row = [to_cell(value) for value in values]
        if _is_blank_row(row):
            continue
        rows.append(row)
    return rows


# ══════════════════════════════════════════════════════════════════════════════
# TEXT DECODING
# ══════════════════════════════════════════════════════════════════════════════

def decode_text(raw: bytes) -> tuple[str, str]:
    """
    Decode raw text bytes.

    Strategy:
      1. UTF-16 / UTF-32 when the buffer starts with their BOM
      2. UTF-8 (a leading BOM is dropped)
      3. chardet guess

    NUL bytes without a wide-encoding BOM mean binary input.
    Returns (text, encoding). Raises MalformedSource when nothing works.
    """
    for bom, encoding in TEXT_BOMS:
        if raw.startswith(bom):
            try:
                return raw.decode(encoding), encoding
            except UnicodeDecodeError as exc:
                raise MalformedSource(f"Could not decode input as {encoding}: {exc}") from exc

    if b"\x00" in raw[:8192]:
        raise MalformedSource("Input looks like binary data, not delimited text")

    try:
        return raw.decode("utf-8-sig"), "utf-8"
    except UnicodeDecodeError:
        pass

    import chardet

    result = chardet.detect(raw)
    detected = result.get("encoding")
    if not detected:
        raise MalformedSource("Could not detect the text encoding of the input")
    try:
        return raw.decode(detected), detected
    except (LookupError, UnicodeDecodeError) as exc:
        raise MalformedSource(f"Could not decode input as {detected}: {exc}") from exc


# ══════════════════════════════════════════════════════════════════════════════
# DELIMITED TEXT
# ══════════════════════════════════════════════════════════════════════════════

def detect_delimiter(text: str) -> str:
    """
    Infer the delimiter from sample lines.

    Uses csv.Sniffer first; falls back to scoring each candidate by
    column-count consistency. Defaults to comma.
    """
    sample_lines = [line for line in text.splitlines() if line.strip()][:50]
    sample = "\n".join(sample_lines[:25])
    if not sample:
        return ","

    try:
        return csv.Sniffer().sniff(sample, delimiters="".join(DELIMITER_CANDIDATES)).delimiter
    except csv.Error:
        pass

    best_delim = ","
    best_score = float("-inf")
    for delim in DELIMITER_CANDIDATES:
        widths = [
            len(row)
            for row in csv.reader(io.StringIO("\n".join(sample_lines)), delimiter=delim)
            if any(cell.strip() for cell in row)
        ]
        if not widths:
            continue
        mode_width, mode_count = Counter(widths).most_common(1)[0]
        if mode_width == 1:
            continue
        score = mode_width * 2.0 + (mode_count / len(widths)) * mode_width
        if score > best_score:
            best_score = score
            best_delim = delim
    return best_delim


def read_delimited_text(text: str, delimiter: Optional[str] = None) -> SourceGrid:
    """Parse CSV-like text into a SourceGrid. Cells are always Text."""
    text = text.lstrip("\ufeff").replace("\x00", "")
    if delimiter is None:
        delimiter = detect_delimiter(text)
    try:
        parsed = list(csv.reader(io.StringIO(text, newline=""), delimiter=delimiter))
    except csv.Error as exc:
        raise MalformedSource(f"Could not parse delimited text: {exc}") from exc

    rows: list[list[Cell]] = []
    for values in parsed:
        row: list[Cell] = [Text(value) for value in values]
        if _is_blank_row(row):
            continue
        rows.append(row)

    return SourceGrid(rows=rows, detected_format="csv", delimiter=delimiter)


# ══════════════════════════════════════════════════════════════════════════════
# WORKBOOKS
# ══════════════════════════════════════════════════════════════════════════════

def _ignored_sheets_warning(sheet_names: list[str]) -> list[str]:
    if len(sheet_names) <= 1:
        return []
    return [
        f"Multiple sheets found ({len(sheet_names)} total); "
        f"used '{sheet_names[0]}'. Ignored: {sheet_names[1:]}"
    ]


def _zip_kind(raw: bytes) -> str:
    try:
        with zipfile.ZipFile(io.BytesIO(raw)) as zf:
            names = set(zf.namelist())
            if "mimetype" in names:
                mimetype = zf.read("mimetype").decode("utf-8", errors="ignore").strip()
                if mimetype == ODS_MIMETYPE:
                    return "ods"
            if "xl/workbook.xml" in names:
                return "xlsx"
    except zipfile.BadZipFile as exc:
        raise MalformedSource(f"Could not read workbook: {exc}") from exc
    raise MalformedSource("Could not read workbook: ZIP container holds no spreadsheet")


def _read_xlsx(raw: bytes) -> SourceGrid:
    import openpyxl

    try:
        workbook = openpyxl.load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    except Exception as exc:
        raise MalformedSource(f"Could not read workbook: {exc}") from exc

    try:
        # Chartsheets hold no cells and are skipped.
        worksheets = list(workbook.worksheets)
        sheet_names = [sheet.title for sheet in worksheets]
        if not worksheets:
            return SourceGrid(rows=[], detected_format="xlsx", sheet_names=[])
        sheet = worksheets[0]
        try:
            rows = _build_rows(sheet.iter_rows(values_only=True))
        except Exception as exc:
            raise MalformedSource(f"Could not read sheet '{sheet_names[0]}': {exc}") from exc
    finally:
        workbook.close()

    return SourceGrid(
        rows=rows,
        detected_format="xlsx",
        sheet_name=sheet_names[0],
        sheet_names=sheet_names,
        warnings=_ignored_sheets_warning(sheet_names),
    )


def _read_with_pandas(raw: bytes, fmt: str) -> SourceGrid:
    import pandas as pd

    if fmt == "xls":
        try:
            import xlrd  # noqa: F401
        except ImportError:
            raise ImportError(".xls files require xlrd — run: pip install xlrd")
        engine = "xlrd"
    else:
        try:
            import odf  # noqa: F401
        except ImportError:
            raise ImportError(".ods files require odfpy — run: pip install odfpy")
        engine = "odf"

    try:
        with pd.ExcelFile(io.BytesIO(raw), engine=engine) as xf:
            sheet_names = [str(name) for name in xf.sheet_names]
            if not sheet_names:
                return SourceGrid(rows=[], detected_format=fmt, sheet_names=[])
            df = xf.parse(xf.sheet_names[0], header=None, keep_default_na=False)
    except Exception as exc:
        raise MalformedSource(f"Could not read workbook: {exc}") from exc

    return SourceGrid(
        rows=_build_rows(df.itertuples(index=False, name=None)),
        detected_format=fmt,
        sheet_name=sheet_names[0],
        sheet_names=sheet_names,
        warnings=_ignored_sheets_warning(sheet_names),
    )


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def read_workbook_bytes(raw: bytes) -> SourceGrid:
    """
    Read a binary spreadsheet container into a SourceGrid (first sheet only).

    Buffers without a ZIP or OLE2 signature are decoded and parsed as
    delimited text, the way spreadsheet libraries accept a CSV file picked
    as a workbook.

    Raises:
        MalformedSource  if the buffer cannot be read as any supported format.
        ImportError      if an optional engine (xlrd, odfpy) is missing.
    """
    if not raw:
        return SourceGrid(rows=[], detected_format="csv")

    if raw.startswith(ZIP_MAGIC):
        if _zip_kind(raw) == "ods":
            return _read_with_pandas(raw, "ods")
        return _read_xlsx(raw)

    if raw.startswith(OLE2_MAGIC):
        return _read_with_pandas(raw, "xls")

    text, encoding = decode_text(raw)
    source = read_delimited_text(text)
    source.detected_encoding = encoding
    return source
