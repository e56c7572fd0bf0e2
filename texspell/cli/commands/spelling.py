"""Spelling CLI commands for checking LaTeX sources from the shell."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from texspell.spelling.base import ConfigError, DiagnosticRecord, OracleError
from texspell.spelling.config import load_config_mapping
from texspell.spelling.host import (
    InMemoryDiagnosticSink,
    InMemoryDocumentStore,
    ManualScheduler,
    PlainTextSyntaxProvider,
)
from texspell.spelling.oracles import SpellCheckerOracle, read_word_list
from texspell.spelling.service import SpellDiagnostics

OUTPUT_TEXT = "text"
OUTPUT_JSON = "json"

__all__ = ["register_commands", "build_parser", "check_cli"]


def register_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add spelling-related commands to the main CLI parser."""
    register_check_command(subparsers)


def register_check_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "check",
        description="Report misspelled words in LaTeX sources.",
        help="Report misspelled words in LaTeX sources.",
    )
    _configure_parser(parser)
    return parser


def build_parser(*, prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report misspelled words in LaTeX sources.",
        prog=prog,
    )
    _configure_parser(parser)
    return parser


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("paths", nargs="+", type=Path, help="Files to check.")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a spelling YAML config (default: config/spelling.yaml when present).",
    )
    parser.add_argument(
        "--words",
        type=Path,
        help="Personal word list, one word per line.",
    )
    parser.add_argument(
        "--language",
        default="en",
        help="Dictionary language for pyspellchecker (default: en).",
    )
    parser.add_argument(
        "--output",
        choices=[OUTPUT_TEXT, OUTPUT_JSON],
        default=OUTPUT_TEXT,
        help="Output format: one line per diagnostic or JSON.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.set_defaults(func=check_cli, command="check")


def check_cli(args: argparse.Namespace) -> int:
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config_mapping = load_config_mapping(args.config)
        extra_words = read_word_list(args.words) if args.words else []
    except (FileNotFoundError, ConfigError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        oracle = SpellCheckerOracle(args.language, extra_words=extra_words)
    except OracleError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    store = InMemoryDocumentStore()
    sink = InMemoryDiagnosticSink()
    scheduler = ManualScheduler()
    service = SpellDiagnostics(
        store,
        PlainTextSyntaxProvider(),
        oracle,
        sink,
        scheduler=scheduler,
    )
    for problem in service.setup(config_mapping):
        print(f"warning: {problem}", file=sys.stderr)

    if not service.enabled:
        print("Spelling diagnostics are disabled by configuration.")
        return 0

    results: dict[str, list[DiagnosticRecord]] = {}
    for path in args.paths:
        try:
            document = store.open_path(path)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"error: {path}: {exc}", file=sys.stderr)
            return 2

        filetype = store.filetype(document)
        if service.config.filetypes and filetype not in service.config.filetypes:
            print(f"[skipped] {document} (filetype '{filetype}' is not enabled)", file=sys.stderr)
            continue

        service.refresh(document)
        scheduler.run_ready()
        results[document] = list(sink.get(document, service.config.namespace))

    _emit_results(results, args.output)
    return 1 if any(results.values()) else 0


def _emit_results(results: dict[str, list[DiagnosticRecord]], mode: str) -> None:
    if mode == OUTPUT_JSON:
        payload = [
            {"path": path, "diagnostics": [record.to_dict() for record in records]}
            for path, records in results.items()
        ]
        print(json.dumps(payload, indent=2))
        return

    for path, records in results.items():
        for record in records:
            level = record.severity.name.lower()
            print(f"{path}:{record.start_line + 1}:{record.start_col + 1}: {level}: {record.message}")
