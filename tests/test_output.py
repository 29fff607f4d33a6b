from __future__ import annotations

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from whoimports.models import Consumer, ExportDependencyInfo
from whoimports.output import format_as_dot, format_as_json, formatter_for, write_output


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


EXPECTED_DOT = """digraph ExportDependencies {
  rankdir=LR;
  node [shape=box, fontname="Helvetica", fontsize=10];
  edge [fontname="Helvetica", fontsize=8];

  subgraph cluster_0 {
    label="a.ts";
    style=filled;
    color=lightgrey;

    a_ts__X [label="X"];
    a_ts__default [label="[default]"];
  }

  subgraph cluster_1 {
    label="a2.ts";
    style=filled;
    color=lightgrey;

    a2_ts__Y [label="Y"];
  }

  b_c_ts [label="c.ts", style=dashed, tooltip="b/c.ts"];

  a2_ts__Y -> a_ts__X;
  b_c_ts -> a_ts__X [label="via barrel.ts"];
}"""


def test_format_as_json():
    data = json.loads(format_as_json(EXPORTS))

    assert data["exports"][0] == {
        "module": "a.ts",
        "name": "X",
        "consumerCount": 2,
        "consumers": [
            {"module": "a2.ts"},
            {"module": "b/c.ts", "via": ["barrel.ts"]},
        ],
    }
    assert data["exports"][1]["consumers"] == []
    assert format_as_json(EXPORTS).startswith('{\n  "exports": [')


def test_format_as_dot():
    assert format_as_dot(EXPORTS) == EXPECTED_DOT


def test_format_as_dot_empty():
    dot = format_as_dot([])

    assert dot.startswith("digraph ExportDependencies {")
    assert dot.endswith("}")
    assert "subgraph" not in dot


def test_formatter_for_suffix():
    assert formatter_for("out/graph.json") is format_as_json
    assert formatter_for("graph.DOT") is format_as_dot
    assert formatter_for("graph.txt") is None


def test_write_output_creates_parent_dirs():
    with TemporaryDirectory() as tmpdir:
        target = Path(tmpdir) / "nested" / "deps.json"

        written = write_output(EXPORTS, target)

        assert written == target
        assert json.loads(target.read_text(encoding="utf-8"))["exports"][2]["name"] == "Y"


def test_write_output_rejects_unknown_format():
    with TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError):
            write_output(EXPORTS, Path(tmpdir) / "deps.yaml")
