# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Generator run configuration."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_HEADER_PATTERNS: tuple[str, ...] = ("*.h", "*.hpp")
GENERATED_MARKER = ".generated"
GENERATED_HEADER_SUFFIX = ".generated.h"
METADATA_SUFFIX = ".gen"


@dataclass(frozen=True)
class GeneratorConfig:
    """Describe all values needed by one generation run.

    Attributes:
        input_root: Root directory scanned for annotated headers.
        output_dir: Directory receiving ``.generated.h`` and ``.gen`` artifacts.
        force: Regenerate even when the existing output is up to date.
        keep_going: Skip files with malformed class declarations instead of aborting.
        hardened: Ignore markers and braces inside literals and comments while scoping classes.
        header_patterns: Gitignore-style patterns selecting header files.
    """

    input_root: Path
    output_dir: Path
    force: bool = False
    keep_going: bool = False
    hardened: bool = False
    header_patterns: tuple[str, ...] = DEFAULT_HEADER_PATTERNS
