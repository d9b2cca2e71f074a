"""
Command-line interface for the path editor.

Usage:
    pathy gui [--config editor.yaml]
    pathy program [--step 1.0] [--config editor.yaml] < path.json
    pathy check < path.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .config import EditorConfig, load_editor_config
from .core import PersistedRecord, from_records, loads_records, to_program
from .settings import default_editor_config

Logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML editor configuration (defaults to PATHY_CONFIG or built-in values).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathy",
        description="Author Bézier robot paths and generate motion code.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # gui command
    gui_parser = subparsers.add_parser("gui", help="Launch the interactive path editor.")
    add_config_option(gui_parser)

    # program command
    program_parser = subparsers.add_parser(
        "program",
        help="Read path records (JSON) from stdin and print the generated motion program.",
    )
    add_config_option(program_parser)
    program_parser.add_argument(
        "--step",
        type=float,
        default=None,
        help="Solver step value (defaults to program.step from the configuration).",
    )

    # check command
    subparsers.add_parser(
        "check",
        help="Validate path records (JSON) from stdin and print a summary.",
    )

    return parser


def _resolve_config(config_path: Optional[Path]) -> EditorConfig:
    if config_path is None:
        return default_editor_config()
    return load_editor_config(config_path)


def summarize_records(records: List[PersistedRecord]) -> str:
    lines = [f"Anchors: {len(records)}", f"Segments: {max(len(records) - 1, 0)}"]
    broken = sum(1 for record in records if record.broken)
    if broken:
        lines.append(f"Broken anchors: {broken}")
    for idx, record in enumerate(records):
        lines.append(f"  [{idx}] {record.id} ({record.pos.x:.3f}, {record.pos.y:.3f})")
    return "\n".join(lines)


def program_command(args: argparse.Namespace, stdin: TextIO) -> int:
    config_path: Optional[Path] = args.config
    if config_path is not None and not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        config = _resolve_config(config_path)
        step = config.program.step if args.step is None else args.step
        path = from_records(loads_records(stdin.read()))
        print(to_program(path, step))
        return 0
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Program generation failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1


def check_command(args: argparse.Namespace, stdin: TextIO) -> int:
    try:
        records = loads_records(stdin.read())
        from_records(records)
        print(summarize_records(records))
        Logger.info("Validation succeeded.")
        return 0
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Validation failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1


def run_gui_with_args(args: argparse.Namespace) -> int:
    config_path: Optional[Path] = args.config
    if config_path is not None and not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2
    config = _resolve_config(config_path)

    from .gui import run as run_gui  # Local import to avoid Qt initialization unless needed

    return run_gui(config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "gui":
        return run_gui_with_args(args)
    if args.command == "program":
        return program_command(args, sys.stdin)
    if args.command == "check":
        return check_command(args, sys.stdin)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
