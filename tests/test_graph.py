from __future__ import annotations

from whoimports.graph import (
    EDGE_CONSUMES,
    NODE_EXPORT,
    NODE_MODULE,
    build_graph,
    consumer_modules,
    export_node_id,
    exports_by_module,
    module_node_id,
)
from whoimports.models import Consumer, ExportDependencyInfo


EXPORTS = [
    ExportDependencyInfo(
        module="a.ts",
        name="X",
        consumer_count=2,
        consumers=(Consumer("a2.ts"), Consumer("b/c.ts", via=("barrel.ts",))),
    ),
    ExportDependencyInfo(module="a.ts", name="default", consumer_count=0),
    ExportDependencyInfo(module="a2.ts", name="Y", consumer_count=0),
]


def test_build_graph_creates_export_nodes():
    graph = build_graph(EXPORTS)

    node = graph.nodes[export_node_id("a.ts", "X")]
    assert node["type"] == NODE_EXPORT
    assert node["module"] == "a.ts"
    assert node["name"] == "X"
    assert node["consumer_count"] == 2

    assert exports_by_module(graph) == {
        "a.ts": [export_node_id("a.ts", "X"), export_node_id("a.ts", "default")],
        "a2.ts": [export_node_id("a2.ts", "Y")],
    }


def test_consumers_that_export_use_their_first_export_node():
    graph = build_graph(EXPORTS)

    edge = graph.edges[export_node_id("a2.ts", "Y"), export_node_id("a.ts", "X")]
    assert edge["type"] == EDGE_CONSUMES
    assert edge["consumer"] == "a2.ts"
    assert edge["via"] == []


def test_consumer_only_modules_get_module_nodes():
    graph = build_graph(EXPORTS)

    assert consumer_modules(graph) == [module_node_id("b/c.ts")]
    node = graph.nodes[module_node_id("b/c.ts")]
    assert node["type"] == NODE_MODULE
    assert node["name"] == "c.ts"

    edge = graph.edges[module_node_id("b/c.ts"), export_node_id("a.ts", "X")]
    assert edge["via"] == ["barrel.ts"]


def test_build_graph_empty():
    graph = build_graph([])

    assert graph.number_of_nodes() == 0
    assert graph.number_of_edges() == 0
