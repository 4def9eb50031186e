# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Header discovery and output staleness checks."""

import logging
from pathlib import Path

import pathspec

from rht.config import (
    GENERATED_HEADER_SUFFIX,
    GENERATED_MARKER,
    METADATA_SUFFIX,
    GeneratorConfig,
)

logger = logging.getLogger(__name__)


def discover_headers(config: GeneratorConfig) -> list[Path]:
    """List annotated-header candidates beneath the input root.

    Regular files matching ``config.header_patterns`` are selected. Paths
    containing the ``.generated`` marker are always skipped so the tool never
    rescans its own output.

    Args:
        config: Run configuration.

    Returns:
        Candidate header paths in sorted order.
    """
    root = config.input_root
    selector = pathspec.GitIgnoreSpec.from_lines(list(config.header_patterns))

    headers: list[Path] = []
    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root).as_posix()
        if GENERATED_MARKER in relative:
            continue
        if path.is_file() and selector.match_file(relative):
            headers.append(path)
    logger.debug(f"Header discovery completed (root={root} headers={len(headers)})")
    return headers


def generated_header_path(source_path: Path, output_dir: Path) -> Path:
    """Return the ``X.generated.h`` artifact path for ``source_path``."""
    return output_dir / f"{source_path.stem}{GENERATED_HEADER_SUFFIX}"


def metadata_path(source_path: Path, output_dir: Path) -> Path:
    """Return the ``X.gen`` artifact path for ``source_path``."""
    return output_dir / f"{source_path.stem}{METADATA_SUFFIX}"


def is_up_to_date(source_path: Path, config: GeneratorConfig) -> bool:
    """Check whether existing generated output is at least as new as the source.

    Args:
        source_path: Annotated header path.
        config: Run configuration; ``force`` disables the check.

    Returns:
        True when regeneration can be skipped.
    """
    if config.force:
        return False
    output_path = generated_header_path(source_path, config.output_dir)
    try:
        generated_mtime = output_path.stat().st_mtime_ns
        source_mtime = source_path.stat().st_mtime_ns
    except FileNotFoundError:
        return False
    return generated_mtime >= source_mtime


def ensure_output_dir(output_dir: Path) -> None:
    """Create the output directory and its parents when missing."""
    output_dir.mkdir(parents=True, exist_ok=True)
