# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line entry point for reflection header generation."""

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

from rht.config import DEFAULT_HEADER_PATTERNS, GeneratorConfig
from rht.pipeline import GenerationSummary, run_generation

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


class ValidationError(RuntimeError):
    """Represent user input validation failure."""


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        prog="rht",
        description="Generate reflection glue and metadata for annotated C++ headers.",
    )
    parser.add_argument("input_root", help="Root directory scanned for headers.")
    parser.add_argument("output_dir", help="Directory receiving generated artifacts.")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Regenerate even when existing output is up to date.",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Skip headers with malformed class declarations instead of aborting.",
    )
    parser.add_argument(
        "--hardened",
        action="store_true",
        help="Ignore markers and braces inside literals and comments when scoping classes.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run header generation command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code == 0:
            return EXIT_OK
        logger.warning(f"Argument parsing failed (argv={argv})")
        stderr.write("Error: expected INPUT_ROOT and OUTPUT_DIR arguments\n")
        return EXIT_USAGE

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = _build_config(args)
    except ValidationError as exc:
        logger.warning(f"Validation failed (error={exc})")
        stderr.write(f"{exc}\n")
        return EXIT_USAGE

    try:
        summary = run_generation(config)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Generation failed (error={exc})")
        stderr.write(f"Generation failed: {exc}\n")
        return EXIT_FAILED

    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    _write_errors(summary=summary, stderr=stderr)
    _emit_summary(console=console, summary=summary)
    if summary.status == "completed":
        return EXIT_OK
    return EXIT_FAILED


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Validate parsed arguments and build the run configuration.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Run configuration.

    Raises:
        ValidationError: If the input root is missing or not a directory.
    """
    input_root = Path(args.input_root)
    if not input_root.exists():
        raise ValidationError(f"Input path does not exist: {input_root}")
    if not input_root.is_dir():
        raise ValidationError(f"Input path must be a directory: {input_root}")
    return GeneratorConfig(
        input_root=input_root,
        output_dir=Path(args.output_dir),
        force=args.force,
        keep_going=args.keep_going,
        hardened=args.hardened,
        header_patterns=DEFAULT_HEADER_PATTERNS,
    )


def _write_errors(summary: GenerationSummary, stderr: TextIO) -> None:
    for result in summary.results:
        if result.status == "read_failed":
            stderr.write(f"Failed to open file: {result.source_path}\n")
        elif result.status == "parse_failed":
            stderr.write(f"Failed to parse file: {result.source_path}: {result.error}\n")


def _emit_summary(console: Console, summary: GenerationSummary) -> None:
    fields = {
        "files_generated": summary.count("generated"),
        "files_up_to_date": summary.count("up_to_date"),
        "files_read_failed": summary.count("read_failed"),
        "files_parse_failed": summary.count("parse_failed"),
        "export_collisions": summary.export_collisions,
    }
    console.print(
        " ".join(f"{key}={value}" for key, value in fields.items()), soft_wrap=True
    )
    console.print(f"status={summary.status}")


def main() -> None:
    """Run header generation CLI."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
