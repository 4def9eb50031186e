# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for the reflection header tool."""

from rht.config import GeneratorConfig
from rht.emitter import ExportRegistry, render_generated_header
from rht.metadata import JsonMapWriter, MapWriter, render_metadata
from rht.model import ClassRecord, FileRecord, MethodRecord, PropertyRecord
from rht.parser import DeclarationError, parse_class_block
from rht.pipeline import FileResult, GenerationSummary, process_file, run_generation
from rht.scanner import ClassBlock, ClassScopeExtractor, extract_class_blocks

__all__ = [
    "ClassBlock",
    "ClassRecord",
    "ClassScopeExtractor",
    "DeclarationError",
    "ExportRegistry",
    "FileRecord",
    "FileResult",
    "GenerationSummary",
    "GeneratorConfig",
    "JsonMapWriter",
    "MapWriter",
    "MethodRecord",
    "PropertyRecord",
    "extract_class_blocks",
    "parse_class_block",
    "process_file",
    "render_generated_header",
    "render_metadata",
    "run_generation",
]
