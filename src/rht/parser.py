# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Annotation parsing for one isolated class declaration block."""

import logging
import re

from rht.model import ClassRecord, MethodRecord, PropertyRecord
from rht.scanner import ClassBlock

logger = logging.getLogger(__name__)

CLASS_HEADER_PATTERN = re.compile(
    r"\bclass\s+(\w+)\s*"
    r"(?:\s*:\s*(?:public)?\s+((?:\w+::)*\w+(?:<\w*>|)?))?"
    r"\s*\{"
)
# PROPERTY(args)[;] [class|struct] <type> <name> [= default];
# <type> allows namespaces, one nested template level and a trailing pointer.
PROPERTY_PATTERN = re.compile(
    r"PROPERTY\(([^)]*)\)(?:;|)\s*(?:class\s+|struct\s+)?"
    r"((?:\w+::)*\w+(?:\s*<[^;<>]*(?:<(?:[^;<>]*)>)*[^;<>]*>)?\s*\*?)"
    r"\s+(\w+)\s*(?:=\s*[^;]*)?;"
)
METHOD_PATTERN = re.compile(r"FUNCTION\(\)(?:;|)\s*void\s+(\w+)\s*\(\s*\)")
ENUM_MARKER_PATTERN = re.compile(r"\bENUM\(\)")
BLOCK_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)
LINE_COMMENT_TOKEN = "//"


class DeclarationError(RuntimeError):
    """Represent a class block whose declaration shape is unsupported."""

    def __init__(self, message: str, start_line: int = 0) -> None:
        super().__init__(message)
        self.start_line = start_line


def parse_class_header(text: str) -> tuple[str, str] | None:
    """Extract the class name and immediate base from a declaration block.

    Only the first ``class`` header in the block is considered.

    Args:
        text: Class declaration block.

    Returns:
        ``(class_name, base_class_name)`` with the base defaulting to the class
        itself, or ``None`` when no header matches.
    """
    match = CLASS_HEADER_PATTERN.search(text)
    if match is None:
        return None
    class_name = match.group(1)
    base_class_name = match.group(2) or class_name
    return class_name, base_class_name


def parse_properties(text: str) -> list[PropertyRecord]:
    """Extract ``PROPERTY(...)`` annotated fields outside comments.

    Args:
        text: Class declaration block.

    Returns:
        Properties in source order.
    """
    comment_spans = _block_comment_spans(text)
    properties: list[PropertyRecord] = []
    for match in PROPERTY_PATTERN.finditer(text):
        if _is_commented(text, match.start(), comment_spans):
            continue
        properties.append(
            PropertyRecord(
                type=match.group(2).strip(),
                name=match.group(3),
                attributes=_split_attributes(match.group(1)),
            )
        )
    return properties


def parse_methods(text: str) -> list[MethodRecord]:
    """Extract ``FUNCTION()`` annotated zero-argument ``void`` methods outside comments."""
    comment_spans = _block_comment_spans(text)
    return [
        MethodRecord(name=match.group(1))
        for match in METHOD_PATTERN.finditer(text)
        if not _is_commented(text, match.start(), comment_spans)
    ]


def parse_enums(text: str) -> None:
    """Reserved extension point for ``ENUM()`` reflection; produces nothing."""
    if ENUM_MARKER_PATTERN.search(text):
        logger.debug("ENUM() marker ignored; enum reflection is not generated")


def parse_class_block(block: ClassBlock) -> ClassRecord:
    """Build a class record from one extracted block.

    Args:
        block: Isolated class declaration.

    Returns:
        Parsed class record.

    Raises:
        DeclarationError: If no class name can be matched.
    """
    header = parse_class_header(block.text)
    if header is None:
        logger.warning(f"Class name not found (start_line={block.start_line})")
        raise DeclarationError(
            f"Class name not found in CLASS() block at line {block.start_line}",
            start_line=block.start_line,
        )
    class_name, base_class_name = header
    parse_enums(block.text)
    return ClassRecord(
        class_name=class_name,
        base_class_name=base_class_name,
        definition_line=block.definition_line,
        properties=parse_properties(block.text),
        methods=parse_methods(block.text),
    )


def _split_attributes(arguments: str) -> list[str]:
    """Split an attribute list on commas.

    Inner empty tokens are kept; nothing after a trailing comma is a token.
    """
    tokens = arguments.split(",")
    if tokens[-1] == "":
        tokens.pop()
    return [token.strip() for token in tokens]


def _block_comment_spans(text: str) -> list[tuple[int, int]]:
    return [(match.start(), match.end()) for match in BLOCK_COMMENT_PATTERN.finditer(text)]


def _is_commented(text: str, position: int, comment_spans: list[tuple[int, int]]) -> bool:
    """Check whether ``position`` sits in a block comment or after ``//`` on its line."""
    if any(start <= position < end for start, end in comment_spans):
        return True
    line_start = text.rfind("\n", 0, position) + 1
    return text.find(LINE_COMMENT_TOKEN, line_start, position) != -1
