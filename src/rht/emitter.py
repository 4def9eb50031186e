# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Rendering of ``.generated.h`` reflection glue."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from rht.model import ClassRecord, FileRecord

logger = logging.getLogger(__name__)

_NON_IDENTIFIER_PATTERN = re.compile(r"[^A-Za-z0-9]")


@dataclass(frozen=True)
class ExportOwner:
    """Identify the declaration an exported symbol was generated for."""

    file_path: str
    class_name: str
    member_name: str


class ExportRegistry:
    """Track flat exported symbol names across one generation run.

    Exported names only concatenate class and member names, so two classes
    sharing a name anywhere in the linked program collide. The registry keys
    every emitted name by its owning ``(file, class, member)`` and reports
    such collisions without changing the emitted names.
    """

    def __init__(self) -> None:
        self._owners: dict[str, ExportOwner] = {}
        self.collisions: list[tuple[str, ExportOwner, ExportOwner]] = []

    def register(self, symbol: str, owner: ExportOwner) -> bool:
        """Record one exported symbol.

        Args:
            symbol: Flat exported function name.
            owner: Declaration the symbol belongs to.

        Returns:
            False when the name is already owned by a different declaration.
        """
        existing = self._owners.get(symbol)
        if existing is None:
            self._owners[symbol] = owner
            return True
        if existing == owner:
            logger.warning(
                f"Duplicate exported member (symbol={symbol} file_path={owner.file_path})"
            )
            return True
        logger.warning(
            f"Exported symbol collision (symbol={symbol} first={existing.file_path} second={owner.file_path})"
        )
        self.collisions.append((symbol, existing, owner))
        return False

    def owner_of(self, symbol: str) -> ExportOwner | None:
        return self._owners.get(symbol)


def file_identifier(source_path: Path) -> str:
    """Normalize a source path into a macro-safe upper-case identifier.

    Example: ``include/Game/Player.h`` becomes ``INCLUDE_GAME_PLAYER_H``.
    """
    return _NON_IDENTIFIER_PATTERN.sub("_", source_path.as_posix()).upper()


def body_macro_name(file_id: str, record: ClassRecord) -> str:
    """Return the per-class ``GENERATED_BODY`` macro name."""
    return f"{file_id}_{record.definition_line}_GENERATED_BODY"


def render_generated_body(file_id: str, record: ClassRecord) -> str:
    """Render the body-injection macro for one class.

    The macro injects ``Clone``, ``Internal_GetClassName``,
    ``Internal_GetClassNames`` and a private ``Super`` alias. Root classes
    start the name set empty; derived classes extend ``Super``'s set.
    """
    name = record.class_name
    if record.is_root:
        chain_init = "std::set<const char*> list;"
    else:
        chain_init = "std::set<const char*> list = Super::Internal_GetClassNames();"
    lines = [
        f"#define {body_macro_name(file_id, record)}",
        "public:",
        "\tvirtual void* Clone() {",
        f"\t\treturn new {name}(*this);",
        "\t}",
        "\t",
        f'\tvirtual const char* Internal_GetClassName() const {{return "{name}";}}',
        "\tvirtual std::set<const char*> Internal_GetClassNames() const",
        "\t{",
        f"\t\t{chain_init}",
        f"\t\tlist.insert({name}::Internal_GetClassName());",
        "\t\treturn list;",
        "\t}",
        "private:",
    ]
    continued = "\\\n".join(lines)
    return f"{continued}\\\n\ttypedef {record.base_class_name} Super;\n"


def render_exports(
    record: ClassRecord,
    registry: ExportRegistry | None = None,
    file_path: str = "",
) -> list[str]:
    """Render the exported functions of one class for the ``END_FILE()`` block.

    Args:
        record: Parsed class.
        registry: Optional run-wide symbol registry.
        file_path: Source path recorded as symbol owner.

    Returns:
        Macro body lines, each without the trailing continuation backslash.
    """
    name = record.class_name
    exports: list[tuple[str, str, str]] = [
        (
            f"Internal_Create_{name}",
            "",
            f"\tEXPORT_FUNC void* Internal_Create_{name}() {{return new {name}();}}",
        )
    ]
    for prop in record.properties:
        field = prop.name
        exports.append(
            (
                f"Internal_Get_{name}_{field}",
                field,
                f"\tEXPORT_FUNC void* Internal_Get_{name}_{field}({name}* object) "
                f"{{return &object->{field};}}",
            )
        )
        exports.append(
            (
                f"Internal_Set_{name}_{field}",
                field,
                f"\tEXPORT_FUNC void Internal_Set_{name}_{field}({name}* object, void* value)"
                f"{{ object->{field} = *reinterpret_cast<decltype(object->{field})*>(value);}}",
            )
        )
    for method in record.methods:
        exports.append(
            (
                f"Internal_Call_{name}_{method.name}",
                method.name,
                f"\tEXPORT_FUNC void Internal_Call_{name}_{method.name}({name}* object) "
                f"{{ object->{method.name}();}}",
            )
        )

    if registry is not None:
        for symbol, member, _ in exports:
            registry.register(
                symbol,
                ExportOwner(file_path=file_path, class_name=name, member_name=member),
            )
    return [line for _, _, line in exports]


def render_generated_header(
    file_record: FileRecord, registry: ExportRegistry | None = None
) -> str:
    """Render the complete ``.generated.h`` content for one header.

    Args:
        file_record: Parsed classes of one source file.
        registry: Optional run-wide symbol registry.

    Returns:
        Generated header text.
    """
    file_id = file_identifier(file_record.source_path)
    file_path = file_record.source_path.as_posix()
    parts = ["#pragma once\n"]
    end_file = ["#define END_FILE()"]
    for record in file_record.classes:
        parts.append(render_generated_body(file_id, record) + "\n")
        end_file.append("")
        end_file.extend(render_exports(record, registry=registry, file_path=file_path))
    parts.append("#undef END_FILE\n")
    parts.append("\\\n".join(end_file) + "\\\n")
    parts.append(f"\n#undef CURRENT_FILE_ID\n#define CURRENT_FILE_ID {file_id}")
    return "".join(parts)
