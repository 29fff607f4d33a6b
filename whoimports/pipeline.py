"""End-to-end pipeline for building an export dependency report from folders."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from . import __version__
from .consumers import build_dependency_output, find_consumers
from .exports import ExportRegistry, build_export_registry
from .extract import extract_facts
from .file_walker import (
    find_common_ancestor,
    ignore_patterns_for,
    iter_typescript_files,
    module_key,
)
from .models import ExportDependencyInfo, SourceFacts
from .output import formatter_for, write_output
from .parser import TypeScriptParser
from .resolver import ModuleResolver


logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Raised when a run cannot start or produces nothing to analyse."""


@dataclass(frozen=True)
class AnalysisConfig:
    folders: tuple[str, ...]
    consumer_folders: tuple[str, ...] | None = None
    ignore_extensions: tuple[str, ...] = ()
    include_declarations: bool = False


@dataclass
class AnalysisResult:
    base_path: Path
    registry: ExportRegistry
    exports: list[ExportDependencyInfo]
    export_modules: list[str] = field(default_factory=list)
    consumer_modules: list[str] = field(default_factory=list)

    @property
    def total_consumers(self) -> int:
        return sum(info.consumer_count for info in self.exports)


def validate_folders(folders: Iterable[str], label: str) -> None:
    for folder in folders:
        path = Path(folder)
        if not path.exists():
            raise AnalysisError(f"{label} folder not found: {folder}")
        if not path.is_dir():
            raise AnalysisError(f"{label} path is not a directory: {folder}")


def collect_files(folders: Iterable[str], ignore_patterns: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    files: list[str] = []
    for folder in folders:
        for path in iter_typescript_files(Path(folder).resolve(), ignore_patterns):
            if path not in seen:
                seen.add(path)
                files.append(path)
    return files


def collect_facts(
    paths: Iterable[str], base_path: Path, parser: TypeScriptParser
) -> dict[str, SourceFacts]:
    facts: dict[str, SourceFacts] = {}
    for path in paths:
        if path in facts:
            continue
        try:
            parsed = parser.parse_file(path)
        except OSError as exc:
            logger.warning("Skipping unreadable file %s: %s", path, exc)
            continue
        facts[path] = extract_facts(parsed, module_key(path, base_path))
    return facts


def analyze(config: AnalysisConfig) -> AnalysisResult:
    validate_folders(config.folders, "Export")
    if config.consumer_folders:
        validate_folders(config.consumer_folders, "Consumer")

    patterns = ignore_patterns_for(config.ignore_extensions, config.include_declarations)
    logger.info("Export folders: %s", ", ".join(config.folders))
    logger.info("Consumer folders: %s", ", ".join(config.consumer_folders or config.folders))

    export_paths = collect_files(config.folders, patterns)
    logger.info("Found %d export files", len(export_paths))
    if not export_paths:
        raise AnalysisError("No TypeScript files found in export folders")

    if config.consumer_folders:
        consumer_paths = collect_files(config.consumer_folders, patterns)
        base_path = find_common_ancestor([*config.folders, *config.consumer_folders])
        logger.info("Found %d consumer files", len(consumer_paths))
    else:
        consumer_paths = export_paths
        base_path = find_common_ancestor(config.folders)

    logger.info("Parsing TypeScript files...")
    parser = TypeScriptParser()
    facts = collect_facts([*export_paths, *consumer_paths], base_path, parser)
    export_facts = [facts[path] for path in export_paths if path in facts]
    consumer_facts = [facts[path] for path in consumer_paths if path in facts]
    resolver = ModuleResolver(source.module for source in facts.values())

    logger.info("Extracting exports...")
    registry = build_export_registry(export_facts, resolver)
    logger.info("Found %d exports", len(registry))

    logger.info("Finding consumers...")
    consumers = find_consumers(consumer_facts, registry, resolver)

    logger.info("Building dependency graph...")
    exports = build_dependency_output(registry, consumers)

    return AnalysisResult(
        base_path=base_path,
        registry=registry,
        exports=exports,
        export_modules=[source.module for source in export_facts],
        consumer_modules=[source.module for source in consumer_facts],
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="who-imports",
        description="Generate export-level dependency graphs for TypeScript codebases",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-f",
        "--folder",
        nargs="+",
        required=True,
        help="Target folder(s) to analyze exports from",
    )
    parser.add_argument(
        "-c",
        "--consumer",
        nargs="+",
        default=None,
        help="Folder(s) to search for consumers (defaults to --folder)",
    )
    parser.add_argument(
        "-i",
        "--ignore-extension",
        nargs="+",
        default=None,
        help="File extensions to ignore (e.g., .test.ts .spec.ts)",
    )
    parser.add_argument(
        "-d",
        "--declarations",
        action="store_true",
        help="Include .d.ts declaration files (excluded by default)",
    )
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        help="Output file path (.json or .dot)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log unresolved imports and skipped files",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    if formatter_for(args.output) is None:
        logger.error("Error: Output file must have .json or .dot extension")
        return 1

    config = AnalysisConfig(
        folders=tuple(args.folder),
        consumer_folders=tuple(args.consumer) if args.consumer else None,
        ignore_extensions=tuple(args.ignore_extension or ()),
        include_declarations=args.declarations,
    )
    try:
        result = analyze(config)
    except AnalysisError as exc:
        logger.error("Error: %s", exc)
        return 1

    try:
        output_path = write_output(result.exports, args.output)
    except OSError as exc:
        logger.error("Error: %s", exc)
        return 1
    logger.info("Output written to: %s", output_path)

    print("\nSummary:")
    print(f"  Exports: {len(result.exports)}")
    print(f"  Total consumer relationships: {result.total_consumers}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
