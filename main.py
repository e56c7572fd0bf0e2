#!/usr/bin/env python3

from __future__ import annotations

import argparse
import sys

from texspell.cli.commands import spelling as spelling_commands


def build_main_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Spelling diagnostics for LaTeX sources.",
        prog="python -m main",
    )
    subparsers = parser.add_subparsers(dest="subcommand", required=True)
    spelling_commands.register_commands(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    raw_args = sys.argv[1:] if argv is None else argv

    parser = build_main_parser()
    try:
        args = parser.parse_args(raw_args)
    except argparse.ArgumentError as exc:
        parser.error(str(exc))

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
