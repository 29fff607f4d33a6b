"""Attribute imports to original exports and aggregate the dependency output."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Iterable

from .exports import resolve_export
from .models import (
    DEFAULT_EXPORT,
    WILDCARD,
    Consumer,
    ExportDependencyInfo,
    ExportEntry,
    ImportKind,
    SourceFacts,
    export_key,
)
from .resolver import ModuleResolver


logger = logging.getLogger(__name__)

# originalModule::originalName -> consumers, possibly repeating a module
ConsumerMap = dict[str, list[Consumer]]


def find_consumers(
    consumer_facts: Iterable[SourceFacts],
    registry: Mapping[str, ExportEntry],
    resolver: ModuleResolver,
) -> ConsumerMap:
    """Scan consumer-scope modules and record who imports each original export."""
    consumers: ConsumerMap = {}
    for source in consumer_facts:
        merge_consumer_maps(consumers, trace_module(source, registry, resolver))
    return consumers


def trace_module(
    source: SourceFacts,
    registry: Mapping[str, ExportEntry],
    resolver: ModuleResolver,
) -> ConsumerMap:
    """Consumer-map fragment contributed by a single module."""
    fragment: ConsumerMap = {}
    consumer_module = source.module

    for binding in source.imports:
        imported_module = resolver.resolve(consumer_module, binding.source_specifier)
        if imported_module is None:
            continue

        if binding.kind is ImportKind.DEFAULT:
            record_consumer(imported_module, DEFAULT_EXPORT, consumer_module, registry, fragment)
        elif binding.kind is ImportKind.NAMED:
            record_consumer(
                imported_module,
                binding.source_export_name or binding.local_name,
                consumer_module,
                registry,
                fragment,
            )
        else:
            # M.x usages stand in for the names a namespace import consumes.
            for access in source.property_accesses:
                if access.base_identifier == binding.local_name:
                    record_consumer(
                        imported_module,
                        access.property_name,
                        consumer_module,
                        registry,
                        fragment,
                    )

    return fragment


def record_consumer(
    imported_module: str,
    export_name: str,
    consumer_module: str,
    registry: Mapping[str, ExportEntry],
    consumers: ConsumerMap,
) -> None:
    if imported_module == consumer_module:
        return

    resolved = resolve_export(imported_module, export_name, registry)
    if resolved is None:
        logger.debug(
            "Unresolved import of %s from %s in %s", export_name, imported_module, consumer_module
        )
        return
    if resolved.original_module == consumer_module:
        return

    via = tuple(
        module for module in resolved.re_export_chain if module != resolved.original_module
    )
    key = export_key(resolved.original_module, resolved.original_name)
    consumers.setdefault(key, []).append(Consumer(module=consumer_module, via=via or None))


def merge_consumer_maps(target: ConsumerMap, fragment: Mapping[str, list[Consumer]]) -> ConsumerMap:
    for key, records in fragment.items():
        target.setdefault(key, []).extend(records)
    return target


def deduplicate_consumers(consumers: Iterable[Consumer]) -> list[Consumer]:
    """One record per consumer module, preferring a record that carries ``via``."""
    seen: dict[str, Consumer] = {}
    for consumer in consumers:
        existing = seen.get(consumer.module)
        if existing is None or (consumer.via and not existing.via):
            seen[consumer.module] = consumer
    return sorted(seen.values(), key=lambda consumer: consumer.module)


def build_dependency_output(
    registry: Mapping[str, ExportEntry],
    consumers: Mapping[str, list[Consumer]],
) -> list[ExportDependencyInfo]:
    """Collapse the registry onto original exports and attach their consumers."""
    output: list[ExportDependencyInfo] = []
    processed: set[str] = set()

    for entry in registry.values():
        if entry.name == WILDCARD:
            continue

        resolved = resolve_export(entry.module, entry.name, registry)
        if resolved is None:
            continue

        original_key = export_key(resolved.original_module, resolved.original_name)
        if original_key in processed:
            continue
        processed.add(original_key)

        unique = deduplicate_consumers(consumers.get(original_key, ()))
        output.append(
            ExportDependencyInfo(
                module=resolved.original_module,
                name=resolved.original_name,
                consumer_count=len(unique),
                consumers=tuple(unique),
            )
        )

    output.sort(key=lambda info: (info.module, info.name))
    return output
