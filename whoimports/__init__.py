"""Export-level dependency graphs for TypeScript codebases."""

__version__ = "0.2.0"

from .consumers import build_dependency_output, find_consumers
from .exports import (
    ExportRegistry,
    build_export_registry,
    get_all_exports_from_module,
    resolve_export,
)
from .extract import extract_facts
from .file_walker import find_common_ancestor, is_within_folders, iter_typescript_files
from .output import format_as_dot, format_as_json
from .parser import TypeScriptParser
from .resolver import ModuleResolver

__all__ = [
    "ExportRegistry",
    "ModuleResolver",
    "TypeScriptParser",
    "build_dependency_output",
    "build_export_registry",
    "extract_facts",
    "find_common_ancestor",
    "find_consumers",
    "format_as_dot",
    "format_as_json",
    "get_all_exports_from_module",
    "is_within_folders",
    "iter_typescript_files",
    "resolve_export",
]
