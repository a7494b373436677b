"""Vocabulary list importer for spreadsheets and CSV exports."""

__version__ = "0.1.0"

from wordsheet.loader import MalformedSource, Number, SourceGrid, Text
from wordsheet.normalizer import Header, NoHeader, WordEntry, detect_header, rows_to_entries
from wordsheet.pipeline import parse_file, parse_from_bytes, parse_from_text, source_mode
from wordsheet.vocabulary import DEFAULT_VOCABULARY, HeaderVocabulary, load_vocabulary

__all__ = [
    "__version__",
    "DEFAULT_VOCABULARY",
    "Header",
    "HeaderVocabulary",
    "MalformedSource",
    "NoHeader",
    "Number",
    "SourceGrid",
    "Text",
    "WordEntry",
    "detect_header",
    "load_vocabulary",
    "parse_file",
    "parse_from_bytes",
    "parse_from_text",
    "rows_to_entries",
    "source_mode",
]
