# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for generated header rendering."""

import re
from pathlib import Path

from rht.emitter import (
    ExportOwner,
    ExportRegistry,
    file_identifier,
    render_exports,
    render_generated_body,
    render_generated_header,
)
from rht.model import ClassRecord, FileRecord, MethodRecord, PropertyRecord

_MACRO_PATTERN = re.compile(
    r"#define \w+_GENERATED_BODY\\\n(?P<body>(?:.*\\\n)*.*\n)", re.MULTILINE
)


def _foo() -> ClassRecord:
    return ClassRecord(
        class_name="Foo",
        base_class_name="Bar",
        definition_line=5,
        properties=[PropertyRecord(type="int", name="Health", attributes=["edit"])],
        methods=[MethodRecord(name="Fire")],
    )


def _chain_of(generated: str, class_name: str) -> set[str]:
    """Evaluate Internal_GetClassNames() from the emitted macro bodies."""
    supers: dict[str, str | None] = {}
    for match in _MACRO_PATTERN.finditer(generated):
        body = match.group("body")
        name = re.search(r'Internal_GetClassName\(\) const \{return "(\w+)";\}', body)
        assert name is not None
        if "Super::Internal_GetClassNames()" in body:
            base = re.search(r"typedef (\w+) Super;", body)
            assert base is not None
            supers[name.group(1)] = base.group(1)
        else:
            supers[name.group(1)] = None
    names: set[str] = set()
    current: str | None = class_name
    while current is not None:
        names.add(current)
        current = supers[current]
    return names


def test_ph3_emit_001_file_identifier_normalizes_path() -> None:
    assert file_identifier(Path("include/Game/Player.h")) == "INCLUDE_GAME_PLAYER_H"
    assert file_identifier(Path("my-lib/a b.hpp")) == "MY_LIB_A_B_HPP"


def test_ph3_emit_002_two_classes_in_one_file_get_distinct_body_macros() -> None:
    record = FileRecord(
        source_path=Path("src/Units.h"),
        classes=[
            ClassRecord(class_name="Foo", base_class_name="Foo", definition_line=5),
            ClassRecord(class_name="Bar", base_class_name="Foo", definition_line=12),
        ],
    )

    generated = render_generated_header(record)

    assert "#define SRC_UNITS_H_5_GENERATED_BODY\\\n" in generated
    assert "#define SRC_UNITS_H_12_GENERATED_BODY\\\n" in generated
    names = re.findall(r"#define (\w+_GENERATED_BODY)", generated)
    assert len(names) == len(set(names)) == 2


def test_ph3_emit_003_root_class_starts_fresh_name_set() -> None:
    body = render_generated_body(
        "A_H", ClassRecord(class_name="A", base_class_name="A", definition_line=3)
    )

    assert "std::set<const char*> list;\\\n" in body
    assert "Super::Internal_GetClassNames()" not in body
    assert body.endswith("\ttypedef A Super;\n")
    assert "return new A(*this);" in body
    assert 'virtual const char* Internal_GetClassName() const {return "A";}' in body


def test_ph3_emit_004_derived_class_extends_base_name_set() -> None:
    body = render_generated_body("FOO_H", _foo())

    assert (
        "std::set<const char*> list = Super::Internal_GetClassNames();\\\n" in body
    )
    assert "list.insert(Foo::Internal_GetClassName());" in body
    assert body.endswith("\ttypedef Bar Super;\n")


def test_ph3_emit_005_body_macro_lines_are_continued_until_alias() -> None:
    lines = render_generated_body("FOO_H", _foo()).splitlines()

    assert all(line.endswith("\\") for line in lines[:-1])
    assert not lines[-1].endswith("\\")


def test_ph3_emit_006_three_level_hierarchy_accumulates_all_ancestors() -> None:
    record = FileRecord(
        source_path=Path("Hierarchy.h"),
        classes=[
            ClassRecord(class_name="A", base_class_name="A", definition_line=4),
            ClassRecord(class_name="B", base_class_name="A", definition_line=10),
            ClassRecord(class_name="C", base_class_name="B", definition_line=16),
        ],
    )

    generated = render_generated_header(record)

    assert _chain_of(generated, "C") == {"A", "B", "C"}
    assert _chain_of(generated, "B") == {"A", "B"}
    assert _chain_of(generated, "A") == {"A"}


def test_ph3_emit_007_exports_cover_factory_accessors_and_invokers() -> None:
    lines = render_exports(_foo())

    assert lines == [
        "\tEXPORT_FUNC void* Internal_Create_Foo() {return new Foo();}",
        "\tEXPORT_FUNC void* Internal_Get_Foo_Health(Foo* object) {return &object->Health;}",
        "\tEXPORT_FUNC void Internal_Set_Foo_Health(Foo* object, void* value)"
        "{ object->Health = *reinterpret_cast<decltype(object->Health)*>(value);}",
        "\tEXPORT_FUNC void Internal_Call_Foo_Fire(Foo* object) { object->Fire();}",
    ]


def test_ph3_emit_008_generated_header_layout() -> None:
    record = FileRecord(source_path=Path("game/Foo.h"), classes=[_foo()])

    generated = render_generated_header(record)

    assert generated.startswith("#pragma once\n#define GAME_FOO_H_5_GENERATED_BODY\\\n")
    assert (
        "#undef END_FILE\n#define END_FILE()\\\n\\\n"
        "\tEXPORT_FUNC void* Internal_Create_Foo() {return new Foo();}\\\n"
    ) in generated
    assert generated.endswith(
        "{ object->Fire();}\\\n\n#undef CURRENT_FILE_ID\n#define CURRENT_FILE_ID GAME_FOO_H"
    )


def test_ph3_emit_009_file_without_classes_still_defines_markers() -> None:
    generated = render_generated_header(FileRecord(source_path=Path("Empty.h")))

    assert generated == (
        "#pragma once\n#undef END_FILE\n#define END_FILE()\\\n"
        "\n#undef CURRENT_FILE_ID\n#define CURRENT_FILE_ID EMPTY_H"
    )


def test_ph3_emit_010_registry_reports_cross_file_symbol_collisions() -> None:
    registry = ExportRegistry()
    first = FileRecord(source_path=Path("a/Foo.h"), classes=[_foo()])
    second = FileRecord(source_path=Path("b/Foo.h"), classes=[_foo()])

    render_generated_header(first, registry=registry)
    generated = render_generated_header(second, registry=registry)

    assert "Internal_Create_Foo" in generated
    colliding = {symbol for symbol, _, _ in registry.collisions}
    assert colliding == {
        "Internal_Create_Foo",
        "Internal_Get_Foo_Health",
        "Internal_Set_Foo_Health",
        "Internal_Call_Foo_Fire",
    }
    assert registry.owner_of("Internal_Call_Foo_Fire") == ExportOwner(
        file_path="a/Foo.h", class_name="Foo", member_name="Fire"
    )


def test_ph3_emit_011_registry_accepts_repeated_registration_by_same_owner() -> None:
    registry = ExportRegistry()
    owner = ExportOwner(file_path="a.h", class_name="Foo", member_name="Value")

    assert registry.register("Internal_Get_Foo_Value", owner) is True
    assert registry.register("Internal_Get_Foo_Value", owner) is True
    assert registry.collisions == []
