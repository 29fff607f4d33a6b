"""Lightweight data models for source facts and export resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


WILDCARD = "*"
DEFAULT_EXPORT = "default"


class ImportKind(str, Enum):
    DEFAULT = "default"
    NAMED = "named"
    NAMESPACE = "namespace"


class ExportKind(str, Enum):
    LOCAL_DECLARATION = "localDeclaration"
    NAMED_RE_EXPORT = "namedReExport"
    WILDCARD_RE_EXPORT = "wildcardReExport"
    DEFAULT_ASSIGNMENT = "defaultAssignment"


@dataclass(frozen=True)
class ImportBinding:
    local_name: str
    kind: ImportKind
    source_specifier: str
    source_export_name: str | None = None


@dataclass(frozen=True)
class ExportBinding:
    exported_name: str
    kind: ExportKind
    local_name: str | None = None
    source_specifier: str | None = None
    source_export_name: str | None = None
    # Module the declaration physically lives in, when known.
    declared_in: str | None = None


@dataclass(frozen=True)
class PropertyAccess:
    base_identifier: str
    property_name: str


@dataclass(frozen=True)
class SourceFacts:
    module: str
    imports: tuple[ImportBinding, ...] = ()
    exports: tuple[ExportBinding, ...] = ()
    property_accesses: tuple[PropertyAccess, ...] = ()


@dataclass(frozen=True)
class ExportEntry:
    module: str
    name: str
    is_re_export: bool
    source_module: str | None = None
    source_name: str | None = None


@dataclass(frozen=True)
class ResolvedExport:
    original_module: str
    original_name: str
    re_export_chain: tuple[str, ...] = ()


@dataclass(frozen=True)
class Consumer:
    module: str
    via: tuple[str, ...] | None = None

    def to_dict(self) -> dict:
        data: dict = {"module": self.module}
        if self.via:
            data["via"] = list(self.via)
        return data


@dataclass(frozen=True)
class ExportDependencyInfo:
    module: str
    name: str
    consumer_count: int
    consumers: tuple[Consumer, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "module": self.module,
            "name": self.name,
            "consumerCount": self.consumer_count,
            "consumers": [consumer.to_dict() for consumer in self.consumers],
        }


def export_key(module: str, name: str) -> str:
    return f"{module}::{name}"
