# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Line-oriented class scope extraction for ``CLASS()`` annotated headers.

The extractor is a two-state machine driven one line at a time:

==========  ==============================  =========================================
State       Event                           Transition
==========  ==============================  =========================================
OUTSIDE     line matches ``CLASS()``        start buffer, depth 0 -> IN_CLASS
IN_CLASS    any line                        append line to buffer
IN_CLASS    ``{``                           depth + 1
IN_CLASS    ``}``                           depth - 1; balanced after opening -> OUTSIDE
IN_CLASS    ``GENERATED_BODY()`` (first)    record definition line
==========  ==============================  =========================================

Matching is textual: markers and braces inside string literals and comments
count like code unless ``hardened`` is enabled.
"""

import enum
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CLASS_MARKER_PATTERN = re.compile(r"\bCLASS\(\)")
GENERATED_BODY_PATTERN = re.compile(r"\bGENERATED_BODY\(\)")


class ScanState(enum.Enum):
    OUTSIDE = "outside"
    IN_CLASS = "in_class"


class _LexMode(enum.Enum):
    CODE = "code"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    DOUBLE_QUOTE = "double_quote"
    SINGLE_QUOTE = "single_quote"


@dataclass(frozen=True)
class ClassBlock:
    """Represent one isolated annotated class declaration.

    Attributes:
        text: Lines from the ``CLASS()`` marker to the closing brace, newline-terminated.
        start_line: Line of the ``CLASS()`` marker (1-based).
        end_line: Line holding the balancing closing brace (1-based).
        definition_line: First ``GENERATED_BODY()`` line; ``0`` when absent.
    """

    text: str
    start_line: int
    end_line: int
    definition_line: int = 0


class ClassScopeExtractor:
    """Accumulate annotated class blocks from a stream of source lines."""

    def __init__(self, hardened: bool = False) -> None:
        """Initialize extractor state.

        Args:
            hardened: Ignore markers and braces inside literals and comments.
        """
        self._hardened = hardened
        self.state = ScanState.OUTSIDE
        self._buffer: list[str] = []
        self._depth = 0
        self._opened = False
        self._start_line = 0
        self._definition_line = 0
        self._mode = _LexMode.CODE

    def feed(self, line: str, line_number: int) -> ClassBlock | None:
        """Process one source line.

        Args:
            line: Line text without its trailing newline.
            line_number: 1-based line number of ``line``.

        Returns:
            The completed block when this line closes an annotated class.
        """
        code = self._code_text(line)
        if self.state is ScanState.OUTSIDE:
            if not CLASS_MARKER_PATTERN.search(code):
                return None
            self._enter_class(line_number)

        self._buffer.append(line)
        if not self._definition_line and GENERATED_BODY_PATTERN.search(code):
            self._definition_line = line_number
            logger.debug(f"GENERATED_BODY() found in class (line={line_number})")

        for char in code:
            if char == "{":
                self._depth += 1
                self._opened = True
            elif char == "}":
                self._depth -= 1
                if self._opened and self._depth == 0:
                    return self._close_class(line_number)
        return None

    def finish(self) -> None:
        """Signal end of input, dropping any unterminated class block."""
        if self.state is ScanState.IN_CLASS:
            logger.warning(
                f"Unterminated CLASS() block dropped (start_line={self._start_line} depth={self._depth})"
            )
        self._reset()
        self._mode = _LexMode.CODE
        self.state = ScanState.OUTSIDE

    def _enter_class(self, line_number: int) -> None:
        self._reset()
        self.state = ScanState.IN_CLASS
        self._start_line = line_number

    def _close_class(self, line_number: int) -> ClassBlock:
        block = ClassBlock(
            text="\n".join(self._buffer) + "\n",
            start_line=self._start_line,
            end_line=line_number,
            definition_line=self._definition_line,
        )
        logger.debug(
            f"Class block extracted (start_line={block.start_line} end_line={block.end_line})"
        )
        self._reset()
        self.state = ScanState.OUTSIDE
        return block

    def _reset(self) -> None:
        self._buffer = []
        self._depth = 0
        self._opened = False
        self._start_line = 0
        self._definition_line = 0

    def _code_text(self, line: str) -> str:
        """Return ``line`` with literals and comments blanked, updating lexer mode.

        Without ``hardened`` the line is returned unchanged. Block comments carry
        over between lines; line comments and unterminated literals end with the
        line.
        """
        if not self._hardened:
            return line
        code = [" "] * len(line)
        mode = self._mode
        escape = False
        i = 0
        n = len(line)
        while i < n:
            char = line[i]
            if mode is _LexMode.CODE:
                if line.startswith("//", i):
                    mode = _LexMode.LINE_COMMENT
                    break
                if line.startswith("/*", i):
                    mode = _LexMode.BLOCK_COMMENT
                    i += 2
                    continue
                if char == '"':
                    mode = _LexMode.DOUBLE_QUOTE
                    escape = False
                elif char == "'":
                    mode = _LexMode.SINGLE_QUOTE
                    escape = False
                else:
                    code[i] = char
                i += 1
                continue

            if mode is _LexMode.BLOCK_COMMENT:
                if line.startswith("*/", i):
                    mode = _LexMode.CODE
                    i += 2
                else:
                    i += 1
                continue

            quote = '"' if mode is _LexMode.DOUBLE_QUOTE else "'"
            if escape:
                escape = False
            elif char == "\\":
                escape = True
            elif char == quote:
                mode = _LexMode.CODE
            i += 1

        if mode is not _LexMode.BLOCK_COMMENT:
            mode = _LexMode.CODE
        self._mode = mode
        return "".join(code)
        mode = self._mode
        escape = False
        i = 0
        n = len(line)
        while i < n:
            char = line[i]
            if mode is _LexMode.CODE:
                if line.startswith("//", i):
                    mode = _LexMode.LINE_COMMENT
                    break
                if line.startswith("/*", i):
                    mode = _LexMode.BLOCK_COMMENT
                    i += 2
                    continue
                if char == '"':
                    mode = _LexMode.DOUBLE_QUOTE
                    escape = False
                elif char == "'":
                    mode = _LexMode.SINGLE_QUOTE
                    escape = False
                elif char in "{}":
                    braces.append(char)
                i += 1
                continue

            if mode is _LexMode.BLOCK_COMMENT:
                if line.startswith("*/", i):
                    mode = _LexMode.CODE
                    i += 2
                else:
                    i += 1
                continue

            quote = '"' if mode is _LexMode.DOUBLE_QUOTE else "'"
            if escape:
                escape = False
            elif char == "\\":
                escape = True
            elif char == quote:
                mode = _LexMode.CODE
            i += 1

        if mode is not _LexMode.BLOCK_COMMENT:
            mode = _LexMode.CODE
        self._mode = mode
        return braces


def extract_class_blocks(source: str, hardened: bool = False) -> list[ClassBlock]:
    """Split header source into annotated class blocks.

    Args:
        source: Full header text.
        hardened: Ignore markers and braces inside literals and comments.

    Returns:
        Completed class blocks in source order.
    """
    extractor = ClassScopeExtractor(hardened=hardened)
    blocks: list[ClassBlock] = []
    for line_number, line in enumerate(source.splitlines(), start=1):
        block = extractor.feed(line, line_number)
        if block is not None:
            blocks.append(block)
    extractor.finish()
    return blocks
