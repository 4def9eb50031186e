# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Per-file generation pipeline and run driver."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from rht.config import GeneratorConfig
from rht.emitter import ExportRegistry, render_generated_header
from rht.metadata import render_metadata
from rht.model import ClassRecord, FileRecord
from rht.parser import DeclarationError, parse_class_block
from rht.scanner import extract_class_blocks
from rht.walker import (
    discover_headers,
    ensure_output_dir,
    generated_header_path,
    is_up_to_date,
    metadata_path,
)

logger = logging.getLogger(__name__)

FileStatus = Literal["generated", "up_to_date", "read_failed", "parse_failed"]
RunStatus = Literal["completed", "completed_with_errors", "aborted"]


@dataclass(frozen=True)
class FileResult:
    """Represent the outcome of processing one header.

    Attributes:
        source_path: Header path.
        status: Processing outcome.
        record: Parsed classes when the file was generated.
        outputs: Written artifact paths.
        error: Failure detail for ``read_failed`` and ``parse_failed``.
    """

    source_path: Path
    status: FileStatus
    record: FileRecord | None = None
    outputs: tuple[Path, ...] = ()
    error: str | None = None


@dataclass(frozen=True)
class GenerationSummary:
    """Represent the run summary."""

    status: RunStatus
    results: list[FileResult] = field(default_factory=list)
    export_collisions: int = 0

    def count(self, status: FileStatus) -> int:
        return sum(1 for result in self.results if result.status == status)


def parse_header(source: str, source_path: Path, hardened: bool = False) -> FileRecord:
    """Parse every annotated class of one header.

    Args:
        source: Header text.
        source_path: Header path recorded in the file record.
        hardened: Ignore markers and braces inside literals and comments while scoping.

    Returns:
        File record with classes in source order.

    Raises:
        DeclarationError: If a ``CLASS()`` block has no parseable class name, or
            two classes would define the same ``GENERATED_BODY`` macro.
    """
    classes: list[ClassRecord] = []
    macro_owners: dict[int, str] = {}
    for block in extract_class_blocks(source, hardened=hardened):
        record = parse_class_block(block)
        if not record.definition_line:
            logger.warning(
                f"GENERATED_BODY() missing in class (file_path={source_path} class_name={record.class_name})"
            )
        owner = macro_owners.get(record.definition_line)
        if owner is not None:
            logger.warning(
                f"Duplicate GENERATED_BODY macro (file_path={source_path} line={record.definition_line} class_name={record.class_name} owner={owner})"
            )
            raise DeclarationError(
                f"Class {record.class_name} at line {block.start_line} reuses the "
                f"GENERATED_BODY macro line {record.definition_line} of class {owner}",
                start_line=block.start_line,
            )
        macro_owners[record.definition_line] = record.class_name
        classes.append(record)
    return FileRecord(source_path=source_path, classes=classes)


def process_file(
    source_path: Path, config: GeneratorConfig, registry: ExportRegistry
) -> FileResult:
    """Scan, parse and emit artifacts for one header.

    Nothing is written for a file unless all of its class blocks parse.

    Args:
        source_path: Header path.
        config: Run configuration.
        registry: Run-wide exported symbol registry.

    Returns:
        File result; read and parse failures are reported, not raised.

    Raises:
        OSError: If writing the generated artifacts fails.
    """
    if is_up_to_date(source_path, config):
        logger.debug(f"Generated output is up to date (file_path={source_path})")
        return FileResult(source_path=source_path, status="up_to_date")

    try:
        source = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Failed to open file (file_path={source_path} error={exc})")
        return FileResult(source_path=source_path, status="read_failed", error=str(exc))

    try:
        file_record = parse_header(source, source_path, hardened=config.hardened)
    except DeclarationError as exc:
        logger.warning(f"Failed to parse file (file_path={source_path} error={exc})")
        return FileResult(source_path=source_path, status="parse_failed", error=str(exc))

    generated_text = render_generated_header(file_record, registry=registry)
    metadata_text = render_metadata(file_record)

    ensure_output_dir(config.output_dir)
    header_output = generated_header_path(source_path, config.output_dir)
    metadata_output = metadata_path(source_path, config.output_dir)
    _write_atomic(header_output, generated_text)
    _write_atomic(metadata_output, metadata_text)
    logger.info(
        f"Generated file (file_path={header_output} classes={len(file_record.classes)})"
    )
    return FileResult(
        source_path=source_path,
        status="generated",
        record=file_record,
        outputs=(header_output, metadata_output),
    )


def run_generation(config: GeneratorConfig) -> GenerationSummary:
    """Process every candidate header beneath the input root.

    A ``parse_failed`` result aborts the remaining tree unless
    ``config.keep_going`` is set.

    Args:
        config: Run configuration.

    Returns:
        Run summary with one result per processed header.

    Raises:
        OSError: If discovery or artifact writing fails.
    """
    registry = ExportRegistry()
    results: list[FileResult] = []
    status: RunStatus = "completed"
    for source_path in discover_headers(config):
        result = process_file(source_path, config=config, registry=registry)
        results.append(result)
        if result.status == "parse_failed" and not config.keep_going:
            logger.warning(f"Run aborted (file_path={source_path})")
            status = "aborted"
            break
        if result.status in ("read_failed", "parse_failed"):
            status = "completed_with_errors"

    logger.info(
        f"Generation completed (root={config.input_root} files={len(results)} status={status})"
    )
    return GenerationSummary(
        status=status, results=results, export_collisions=len(registry.collisions)
    )


def _write_atomic(path: Path, content: str) -> None:
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(path)
