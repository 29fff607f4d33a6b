"""Export registry construction and re-export chain resolution."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Iterator

from .models import (
    DEFAULT_EXPORT,
    WILDCARD,
    ExportEntry,
    ExportKind,
    ImportKind,
    ResolvedExport,
    SourceFacts,
    export_key,
)
from .resolver import ModuleResolver


logger = logging.getLogger(__name__)


class ExportRegistry(Mapping):
    """Read-only mapping of ``module::name`` keys to :class:`ExportEntry`."""

    def __init__(self, entries: Mapping[str, ExportEntry] | None = None) -> None:
        self._entries: dict[str, ExportEntry] = dict(entries or {})
        self._names_by_module: dict[str, list[str]] = {}
        for entry in self._entries.values():
            self._names_by_module.setdefault(entry.module, []).append(entry.name)

    def __getitem__(self, key: str) -> ExportEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ExportRegistry(entries={len(self._entries)}, modules={len(self._names_by_module)})"

    def entry(self, module: str, name: str) -> ExportEntry | None:
        return self._entries.get(export_key(module, name))

    def names_in(self, module: str) -> list[str]:
        return list(self._names_by_module.get(module, ()))


@dataclass(frozen=True)
class _ImportedBinding:
    source_module: str | None
    source_name: str
    kind: ImportKind


def build_export_registry(
    facts: Iterable[SourceFacts], resolver: ModuleResolver
) -> ExportRegistry:
    """Build the registry from export-scope modules, in the order given."""
    entries: dict[str, ExportEntry] = {}
    for source in facts:
        _register_module_exports(source, resolver, entries)
    registry = ExportRegistry(entries)
    logger.debug("Built %r", registry)
    return registry


def _register(entries: dict[str, ExportEntry], entry: ExportEntry) -> None:
    # First writer wins; later registration steps never overwrite.
    entries.setdefault(export_key(entry.module, entry.name), entry)


def _build_import_map(
    source: SourceFacts, resolver: ModuleResolver
) -> dict[str, _ImportedBinding]:
    import_map: dict[str, _ImportedBinding] = {}
    for binding in source.imports:
        if binding.kind is ImportKind.DEFAULT:
            source_name = DEFAULT_EXPORT
        elif binding.kind is ImportKind.NAMESPACE:
            source_name = WILDCARD
        else:
            source_name = binding.source_export_name or binding.local_name
        import_map[binding.local_name] = _ImportedBinding(
            source_module=resolver.resolve(source.module, binding.source_specifier),
            source_name=source_name,
            kind=binding.kind,
        )
    return import_map


def _register_module_exports(
    source: SourceFacts, resolver: ModuleResolver, entries: dict[str, ExportEntry]
) -> None:
    module = source.module
    import_map = _build_import_map(source, resolver)

    # export { X as Y } from './other' and export * from './other'
    for binding in source.exports:
        if binding.source_specifier is None:
            continue
        source_module = resolver.resolve(module, binding.source_specifier)
        if binding.kind is ExportKind.WILDCARD_RE_EXPORT:
            if source_module is None:
                logger.debug(
                    "Dropping wildcard re-export of %r in %s", binding.source_specifier, module
                )
                continue
            _register(
                entries,
                ExportEntry(module=module, name=WILDCARD, is_re_export=True, source_module=source_module),
            )
        elif binding.kind is ExportKind.NAMED_RE_EXPORT:
            _register(
                entries,
                ExportEntry(
                    module=module,
                    name=binding.exported_name,
                    is_re_export=True,
                    source_module=source_module,
                    source_name=binding.source_export_name or binding.exported_name,
                ),
            )

    # export { X as Y } with no source: import-then-export or a local binding
    for binding in source.exports:
        if binding.kind is not ExportKind.NAMED_RE_EXPORT or binding.source_specifier is not None:
            continue
        local_name = binding.local_name or binding.exported_name
        imported = import_map.get(local_name)
        if (
            imported is not None
            and imported.source_module is not None
            and imported.kind is not ImportKind.NAMESPACE
        ):
            _register(
                entries,
                ExportEntry(
                    module=module,
                    name=binding.exported_name,
                    is_re_export=True,
                    source_module=imported.source_module,
                    source_name=imported.source_name,
                ),
            )
        else:
            _register(
                entries,
                ExportEntry(module=module, name=binding.exported_name, is_re_export=False),
            )

    # export const / function / class / type / interface ...
    for binding in source.exports:
        if binding.kind is not ExportKind.LOCAL_DECLARATION:
            continue
        if binding.declared_in is not None and binding.declared_in != module:
            continue
        _register(
            entries,
            ExportEntry(module=module, name=binding.exported_name, is_re_export=False),
        )

    # export default ... / export = ...
    if any(binding.kind is ExportKind.DEFAULT_ASSIGNMENT for binding in source.exports):
        _register(
            entries,
            ExportEntry(module=module, name=DEFAULT_EXPORT, is_re_export=False),
        )


def resolve_export(
    module: str,
    name: str,
    registry: Mapping[str, ExportEntry],
    visited: set[str] | None = None,
) -> ResolvedExport | None:
    """Follow re-exports from ``module::name`` back to the declaring module.

    Returns ``None`` when the chain ends at an unknown module, an unresolvable
    specifier, or revisits a key already seen during this resolution.
    """
    if name == WILDCARD:
        return None
    if visited is None:
        visited = set()

    key = export_key(module, name)
    if key in visited:
        return None
    visited.add(key)

    entry = registry.get(key)
    if entry is None:
        return _resolve_from_wildcard(module, name, registry, visited)

    if not entry.is_re_export:
        return ResolvedExport(original_module=module, original_name=name)

    if entry.source_module is None:
        return None

    resolved = resolve_export(
        entry.source_module, entry.source_name or name, registry, visited
    )
    if resolved is None:
        return None
    return _through(module, resolved)


def _resolve_from_wildcard(
    module: str,
    name: str,
    registry: Mapping[str, ExportEntry],
    visited: set[str],
) -> ResolvedExport | None:
    wildcard = registry.get(export_key(module, WILDCARD))
    if wildcard is None or wildcard.source_module is None:
        return None

    resolved = resolve_export(wildcard.source_module, name, registry, visited)
    if resolved is None:
        return None
    return _through(module, resolved)


def _through(module: str, resolved: ResolvedExport) -> ResolvedExport:
    return ResolvedExport(
        original_module=resolved.original_module,
        original_name=resolved.original_name,
        re_export_chain=(module, *resolved.re_export_chain),
    )


def get_all_exports_from_module(
    module: str,
    registry: ExportRegistry,
    visited: set[str] | None = None,
) -> dict[str, ResolvedExport]:
    """Enumerate every name ``module`` exposes, including wildcard-forwarded names."""
    result: dict[str, ResolvedExport] = {}
    if visited is None:
        visited = set()
    if module in visited:
        return result
    visited.add(module)

    for name in registry.names_in(module):
        if name == WILDCARD:
            continue
        resolved = resolve_export(module, name, registry)
        if resolved is not None:
            result[name] = resolved

    wildcard = registry.entry(module, WILDCARD)
    if wildcard is not None and wildcard.source_module is not None:
        forwarded = get_all_exports_from_module(wildcard.source_module, registry, visited)
        for name, resolved in forwarded.items():
            if name not in result:
                result[name] = _through(module, resolved)

    return result
