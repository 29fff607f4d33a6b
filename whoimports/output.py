"""JSON and GraphViz DOT serializers for export dependency output."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Callable, Iterable

from .graph import NODE_EXPORT, build_graph, consumer_modules, exports_by_module
from .models import DEFAULT_EXPORT, ExportDependencyInfo, export_key


def format_as_json(exports: Iterable[ExportDependencyInfo], indent: int = 2) -> str:
    data = {"exports": [info.to_dict() for info in exports]}
    return json.dumps(data, indent=indent)


def format_as_dot(exports: Iterable[ExportDependencyInfo]) -> str:
    graph = build_graph(exports)
    lines = [
        "digraph ExportDependencies {",
        "  rankdir=LR;",
        '  node [shape=box, fontname="Helvetica", fontsize=10];',
        '  edge [fontname="Helvetica", fontsize=8];',
        "",
    ]

    grouped = exports_by_module(graph)
    for index, (module, node_ids) in enumerate(grouped.items()):
        lines.append(f"  subgraph cluster_{index} {{")
        lines.append(f'    label="{_escape(module)}";')
        lines.append("    style=filled;")
        lines.append("    color=lightgrey;")
        lines.append("")
        for node_id in node_ids:
            data = graph.nodes[node_id]
            label = "[default]" if data["name"] == DEFAULT_EXPORT else data["name"]
            lines.append(f'    {_dot_id(node_id, graph)} [label="{_escape(label)}"];')
        lines.append("  }")
        lines.append("")

    standalone = consumer_modules(graph)
    for node_id in standalone:
        data = graph.nodes[node_id]
        lines.append(
            f'  {_dot_id(node_id, graph)} [label="{_escape(data["name"])}", '
            f'style=dashed, tooltip="{_escape(data["module"])}"];'
        )
    if standalone:
        lines.append("")

    for node_ids in grouped.values():
        for target in node_ids:
            for source, _, data in graph.in_edges(target, data=True):
                label = ""
                if data.get("via"):
                    label = f' [label="via {_escape(" -> ".join(data["via"]))}"]'
                lines.append(f"  {_dot_id(source, graph)} -> {_dot_id(target, graph)}{label};")

    lines.append("}")
    return "\n".join(lines)


OUTPUT_FORMATS: dict[str, Callable[[list[ExportDependencyInfo]], str]] = {
    ".json": format_as_json,
    ".dot": format_as_dot,
}


def formatter_for(path: str | Path) -> Callable[[list[ExportDependencyInfo]], str] | None:
    return OUTPUT_FORMATS.get(Path(path).suffix.lower())


def write_output(exports: list[ExportDependencyInfo], path: str | Path) -> Path:
    formatter = formatter_for(path)
    if formatter is None:
        raise ValueError(f"Unsupported output format: {path}")
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(formatter(exports), encoding="utf-8")
    return output_path


def _dot_id(node_id: str, graph) -> str:
    data = graph.nodes[node_id]
    if data.get("type") == NODE_EXPORT:
        return _sanitize(export_key(data["module"], data["name"]))
    return _sanitize(data["module"])


def _sanitize(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", value)


def _escape(value: str) -> str:
    return value.replace('"', '\\"').replace("\n", "\\n")
