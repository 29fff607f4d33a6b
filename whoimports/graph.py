"""NetworkX graph construction from aggregated export dependencies."""

from __future__ import annotations

from typing import Iterable

import networkx as nx

from .models import ExportDependencyInfo


NODE_EXPORT = "Export"
NODE_MODULE = "Module"

EDGE_CONSUMES = "CONSUMES"


def export_node_id(module: str, name: str) -> str:
    return f"export:{module}::{name}"


def module_node_id(module: str) -> str:
    return f"module:{module}"


def build_graph(exports: Iterable[ExportDependencyInfo]) -> nx.DiGraph:
    """Export nodes per original export, consumer edges pointing at them.

    A consumer that itself exports something is represented by its first
    export node; consumer-only modules get a ``Module`` node of their own.
    """
    graph = nx.DiGraph()
    exports = list(exports)
    first_export: dict[str, str] = {}

    for info in exports:
        node_id = export_node_id(info.module, info.name)
        _ensure_node(
            graph,
            node_id,
            type=NODE_EXPORT,
            module=info.module,
            name=info.name,
            consumer_count=info.consumer_count,
        )
        first_export.setdefault(info.module, node_id)

    for info in exports:
        target_id = export_node_id(info.module, info.name)
        for consumer in info.consumers:
            source_id = first_export.get(consumer.module)
            if source_id is None:
                source_id = module_node_id(consumer.module)
                _ensure_node(
                    graph,
                    source_id,
                    type=NODE_MODULE,
                    module=consumer.module,
                    name=consumer.module.rsplit("/", 1)[-1],
                )
            graph.add_edge(
                source_id,
                target_id,
                type=EDGE_CONSUMES,
                consumer=consumer.module,
                via=list(consumer.via or ()),
            )

    return graph


def exports_by_module(graph: nx.DiGraph) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for node_id, data in graph.nodes(data=True):
        if data.get("type") == NODE_EXPORT:
            grouped.setdefault(data["module"], []).append(node_id)
    return grouped


def consumer_modules(graph: nx.DiGraph) -> list[str]:
    return [
        node_id for node_id, data in graph.nodes(data=True) if data.get("type") == NODE_MODULE
    ]


def _ensure_node(graph: nx.DiGraph, node_id: str, **attrs) -> None:
    if node_id not in graph:
        graph.add_node(node_id, **attrs)
