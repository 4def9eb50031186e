# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for parsed reflection annotations."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class PropertyRecord:
    """Represent one ``PROPERTY(...)`` annotated field.

    Attributes:
        type: Declared type text, including namespace, template and pointer syntax.
        name: Field identifier.
        attributes: Attribute tokens taken verbatim from the annotation arguments.
    """

    type: str
    name: str
    attributes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MethodRecord:
    """Represent one ``FUNCTION()`` annotated zero-argument ``void`` method."""

    name: str


@dataclass(frozen=True)
class ClassRecord:
    """Represent one reflected class.

    Attributes:
        class_name: Declared class identifier.
        base_class_name: Immediate base; equals ``class_name`` for a hierarchy root.
        definition_line: Source line of ``GENERATED_BODY()``; ``0`` when absent.
        properties: Annotated properties in source order.
        methods: Annotated methods in source order.
    """

    class_name: str
    base_class_name: str
    definition_line: int = 0
    properties: list[PropertyRecord] = field(default_factory=list)
    methods: list[MethodRecord] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.base_class_name == self.class_name


@dataclass(frozen=True)
class FileRecord:
    """Represent all reflected classes declared in one header."""

    source_path: Path
    classes: list[ClassRecord] = field(default_factory=list)
