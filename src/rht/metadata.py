# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Metadata document serialization for reflected classes."""

import json
import logging
from typing import Any, Protocol

from rht.model import ClassRecord, FileRecord

logger = logging.getLogger(__name__)

MetadataValue = str | int


class MetadataError(RuntimeError):
    """Represent misuse of the map writer protocol."""


class MapWriter(Protocol):
    """Define a nested key/value writer without a native sequence primitive."""

    def begin_map(self, name: str) -> None:
        """Open a child map stored under ``name`` in the current map."""

    def key(self, name: str) -> None:
        """Set the key receiving the next value."""

    def value(self, value: MetadataValue) -> None:
        """Store a scalar under the pending key."""

    def end_map(self, name: str) -> None:
        """Close the innermost map, which must have been opened as ``name``."""


class JsonMapWriter:
    """Build an insertion-ordered JSON document from map writer calls."""

    def __init__(self) -> None:
        self._root: dict[str, Any] = {}
        self._stack: list[tuple[str, dict[str, Any]]] = [("", self._root)]
        self._pending_key: str | None = None

    def begin_map(self, name: str) -> None:
        self._ensure_no_pending_key(f"begin_map({name})")
        child: dict[str, Any] = {}
        self._insert(name, child)
        self._stack.append((name, child))

    def key(self, name: str) -> None:
        self._ensure_no_pending_key(f"key({name})")
        self._pending_key = name

    def value(self, value: MetadataValue) -> None:
        if self._pending_key is None:
            raise MetadataError("value() called without a pending key")
        name = self._pending_key
        self._pending_key = None
        self._insert(name, value)

    def end_map(self, name: str) -> None:
        self._ensure_no_pending_key(f"end_map({name})")
        if len(self._stack) == 1:
            raise MetadataError(f"end_map({name}) without an open map")
        open_name, _ = self._stack.pop()
        if open_name != name:
            raise MetadataError(f"end_map({name}) closes open map {open_name}")

    def document(self) -> dict[str, Any]:
        """Return the finished document.

        Raises:
            MetadataError: If maps are still open or a key is pending.
        """
        self._ensure_no_pending_key("document()")
        if len(self._stack) != 1:
            raise MetadataError(f"Unclosed map {self._stack[-1][0]}")
        return self._root

    def dumps(self) -> str:
        return json.dumps(self.document(), indent=2) + "\n"

    def _insert(self, name: str, value: Any) -> None:
        current = self._stack[-1][1]
        if name in current:
            raise MetadataError(f"Duplicate key {name}")
        current[name] = value

    def _ensure_no_pending_key(self, operation: str) -> None:
        if self._pending_key is not None:
            raise MetadataError(
                f"{operation} called while key {self._pending_key} awaits a value"
            )


def serialize_class(record: ClassRecord, writer: MapWriter, name: str) -> None:
    """Write one class map: name, counted properties, counted methods."""
    writer.begin_map(name)
    writer.key("Class Name")
    writer.value(record.class_name)
    writer.key("Property Size")
    writer.value(len(record.properties))
    for index, prop in enumerate(record.properties):
        writer.begin_map(f"Property {index}")
        writer.key("Argument Size")
        writer.value(len(prop.attributes))
        for arg_index, attribute in enumerate(prop.attributes):
            writer.key(f"Argument {arg_index}")
            writer.value(attribute)
        writer.key("Name")
        writer.value(prop.name)
        writer.key("Type")
        writer.value(prop.type)
        writer.end_map(f"Property {index}")
    writer.key("Method Size")
    writer.value(len(record.methods))
    for index, method in enumerate(record.methods):
        writer.begin_map(f"Method {index}")
        writer.key("Name")
        writer.value(method.name)
        writer.end_map(f"Method {index}")
    writer.end_map(name)


def serialize_metadata(file_record: FileRecord, writer: MapWriter) -> None:
    """Write the metadata document of one header through ``writer``.

    Args:
        file_record: Parsed classes of one source file.
        writer: Target map writer.
    """
    writer.key("Source Path")
    writer.value(file_record.source_path.as_posix())
    writer.key("Class Size")
    writer.value(len(file_record.classes))
    for index, record in enumerate(file_record.classes):
        serialize_class(record, writer, name=f"Class {index}")


def render_metadata(file_record: FileRecord) -> str:
    """Render the ``.gen`` JSON document for one header."""
    writer = JsonMapWriter()
    serialize_metadata(file_record, writer)
    return writer.dumps()
