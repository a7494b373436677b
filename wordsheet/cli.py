from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from wordsheet import __version__ as TOOL_VERSION
from wordsheet.contracts import build_contract, build_run_summary
from wordsheet.loader import MalformedSource
from wordsheet.normalizer import HeaderDecision
from wordsheet.pipeline import ALL_FORMATS, ParseResult, parse_file
from wordsheet.quiz import EMPTY_DATASET_MESSAGE
from wordsheet.vocabulary import (
    DEFAULT_VOCABULARY,
    ROLES,
    HeaderVocabulary,
    VocabularyError,
    load_vocabulary,
)

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_EMPTY_RESULT = 3


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class WordsheetArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)


def timestamp_token() -> str:
    override = os.environ.get("WORDSHEET_OUTPUT_STAMP")
    if override:
        return override
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def default_output_dir(input_path: Path) -> Path:
    return Path.cwd() / "wordsheet-output" / f"{input_path.stem}-{timestamp_token()}"


def write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")


def write_json(path: Path, payload: Any) -> None:
    write_text(path, json_dumps(payload))


def classify_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, (FileNotFoundError, VocabularyError)):
        return EXIT_COMMAND_ERROR
    if isinstance(exc, (MalformedSource, ImportError, UnicodeDecodeError)):
        return EXIT_PARSE_FAILED
    return EXIT_COMMAND_ERROR


def resolve_vocabulary(args: argparse.Namespace) -> HeaderVocabulary:
    if getattr(args, "vocabulary", None):
        return load_vocabulary(Path(args.vocabulary))
    return DEFAULT_VOCABULARY


def load_input(args: argparse.Namespace) -> tuple[Path, ParseResult]:
    input_path = Path(args.input)
    if not input_path.exists():
        raise CliError(f"File not found: {input_path}", EXIT_COMMAND_ERROR)
    if input_path.suffix.lower() not in ALL_FORMATS:
        raise CliError(
            f"Unsupported file type '{input_path.suffix.lower() or '[missing extension]'}'. "
            f"Supported: {', '.join(sorted(ALL_FORMATS))}",
            EXIT_COMMAND_ERROR,
        )
    vocabulary = resolve_vocabulary(args)
    return input_path, parse_file(input_path, vocabulary, strict=args.strict)


def describe_decision(decision: HeaderDecision) -> dict[str, Any]:
    return {
        "has_header": decision.has_header,
        "columns": {role: decision.column(role) for role in ROLES},
    }


def render_decision_text(decision: HeaderDecision) -> str:
    columns = ", ".join(f"{role}={decision.column(role)}" for role in ROLES)
    if decision.has_header:
        return f"Header: detected ({columns})"
    return f"Header: none, positional columns ({columns})"


def build_parser() -> argparse.ArgumentParser:
    parser = WordsheetArgumentParser(
        prog="wordsheet",
        description="Import vocabulary lists from spreadsheets and CSV exports.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Parse a file into vocabulary entries.")
    parse.add_argument("input", help="Input file path")
    parse.add_argument("-o", "--out", dest="out_dir", help="Output directory")
    parse.add_argument("--output", help="Explicit entries.json output path")
    parse.add_argument("--vocabulary", help="JSON file with extra header keywords per role")
    parse.add_argument("--strict", action="store_true", help="Require distinct word and translation header columns")
    parse.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    parse.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    parse.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    inspect = subparsers.add_parser("inspect", help="Show how a file's header and columns are interpreted.")
    inspect.add_argument("input", help="Input file path")
    inspect.add_argument("--vocabulary", help="JSON file with extra header keywords per role")
    inspect.add_argument("--strict", action="store_true", help="Require distinct word and translation header columns")
    inspect.add_argument("--json", action="store_true", help="Write machine JSON to stdout")

    config = subparsers.add_parser("config", help="Generate configuration.")
    config_subparsers = config.add_subparsers(dest="config_command", required=True)
    config_init = config_subparsers.add_parser("init", help="Write a starter vocabulary file.")
    config_init.add_argument("--path", default="wordsheet-vocabulary.json", help="Vocabulary output path")

    subparsers.add_parser("version", help="Print version")
    return parser


def maybe_emit_json_stdout(payload: Any, enabled: bool) -> None:
    if enabled:
        sys.stdout.write(json_dumps(payload) + "\n")


def run_parse(args: argparse.Namespace) -> int:
    try:
        input_path, result = load_input(args)
        source = result.source
        entries = [entry.to_dict() for entry in result.entries]
        if args.output:
            output_path = Path(args.output)
        else:
            out_dir = Path(args.out_dir) if args.out_dir else default_output_dir(input_path)
            output_path = out_dir / "entries.json"

        status = "ok" if entries else "empty"
        payload = {
            "contract": build_contract("wordsheet.entries"),
            "schema_version": build_contract("wordsheet.entries")["version"],
            "tool_version": TOOL_VERSION,
            "file": input_path.name,
            "entries": entries,
            "run_summary": build_run_summary(
                command="parse",
                input_path=input_path,
                status=status,
                output_path=output_path,
                metrics={
                    "grid_rows": len(source.rows),
                    "entries": len(entries),
                    "dropped_rows": len(source.rows) - len(entries) - (1 if result.decision.has_header else 0),
                    "has_header": result.decision.has_header,
                },
                warnings=source.warnings,
            ),
        }
        write_json(output_path, payload)

        if args.json:
            maybe_emit_json_stdout(payload, True)
        else:
            emit_human(f"Format: {source.detected_format}", quiet=args.quiet)
            if source.sheet_name:
                emit_human(f"Sheet: {source.sheet_name}", quiet=args.quiet)
            if args.verbose:
                emit_human(render_decision_text(result.decision), quiet=args.quiet)
                for warning in source.warnings:
                    emit_human(f"Warning: {warning}", quiet=args.quiet)
            emit_human(f"Entries: {len(entries)}", quiet=args.quiet)
            emit_human(f"Entries written: {output_path}", quiet=args.quiet)

        if not entries:
            eprint(EMPTY_DATASET_MESSAGE)
            return EXIT_EMPTY_RESULT
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_inspect(args: argparse.Namespace) -> int:
    try:
        input_path, result = load_input(args)
        source = result.source
        payload = {
            "contract": build_contract("wordsheet.inspect"),
            "file": input_path.name,
            "detected_format": source.detected_format,
            "detected_encoding": source.detected_encoding,
            "delimiter": source.delimiter,
            "sheet_name": source.sheet_name,
            "sheet_names": source.sheet_names,
            "grid_rows": len(source.rows),
            "grid_width": max((len(row) for row in source.rows), default=0),
            "header": describe_decision(result.decision),
            "entry_count": len(result.entries),
            "warnings": source.warnings,
        }
        if args.json:
            maybe_emit_json_stdout(payload, True)
        else:
            lines = [
                "wordsheet inspect",
                f"File: {payload['file']}",
                f"Format: {payload['detected_format']}",
                f"Rows: {payload['grid_rows']}",
                f"Width: {payload['grid_width']}",
                render_decision_text(result.decision),
                f"Entries: {payload['entry_count']}",
            ]
            if source.sheet_name:
                lines.insert(3, f"Sheet: {source.sheet_name}")
            lines.extend(f"Warning: {warning}" for warning in source.warnings)
            print("\n".join(lines))
        return EXIT_SUCCESS if result.entries else EXIT_EMPTY_RESULT
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_config_init(args: argparse.Namespace) -> int:
    config_path = Path(args.path)
    if config_path.exists():
        eprint(f"Refusing to overwrite existing config: {config_path}")
        return EXIT_COMMAND_ERROR
    payload = {role: [] for role in ROLES}
    write_json(config_path, payload)
    emit_human(f"Config written: {config_path}")
    return EXIT_SUCCESS


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        if args.command == "parse":
            return run_parse(args)
        if args.command == "inspect":
            return run_inspect(args)
        if args.command == "config":
            if args.config_command == "init":
                return run_config_init(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
