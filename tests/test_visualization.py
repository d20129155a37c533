"""Tests for node-link and DOT graph export."""

import json

import pytest

from gosight import analyze
from gosight.visualization import build_graph, to_dot, write_graph

CALLS = """
package main

func main() {
    loop(3)
}

func loop(n int) {
    if n > 0 {
        loop(n - 1)
    }
}

func orphan() {}
"""


@pytest.fixture
def report(go_tree):
    return analyze(go_tree({"main.go": CALLS}))


class TestBuildGraph:
    def test_function_nodes(self, report):
        graph = build_graph(report)
        ids = {n["id"] for n in graph["nodes"]}
        assert {"function:main.main", "function:main.loop", "function:main.orphan"} <= ids
        assert graph["directed"] is True

    def test_call_edges(self, report):
        calls = {
            (e["source"], e["target"]) for e in build_graph(report)["edges"] if e["type"] == "calls"
        }
        assert calls == {
            ("function:main.main", "function:main.loop"),
            ("function:main.loop", "function:main.loop"),
        }

    def test_typed_entities(self, demo_root):
        graph = build_graph(analyze(demo_root))
        types = {e["type"] for e in graph["edges"]}
        assert types == {"methods", "references", "dependencies", "implements"}
        node_types = {n["type"] for n in graph["nodes"]}
        assert node_types == {"function", "struct", "interface", "global", "import"}

    def test_no_dangling_edges(self, demo_root):
        graph = build_graph(analyze(demo_root))
        ids = {n["id"] for n in graph["nodes"]}
        for edge in graph["edges"]:
            assert edge["source"] in ids
            assert edge["target"] in ids


class TestDot:
    def test_styles(self, report):
        dot = to_dot(report)
        assert dot.startswith("digraph gosight {")
        assert '"function:main.loop" [label="main.loop", color=red];' in dot
        assert '"function:main.orphan" [label="main.orphan", style="dashed"];' in dot
        assert '"function:main.main" -> "function:main.loop";' in dot


class TestWriteGraph:
    def test_json(self, report, tmp_path):
        path = write_graph(report, tmp_path / "graph.json")
        data = json.loads(path.read_text())
        assert len(data["nodes"]) == 3

    def test_dot(self, report, tmp_path):
        path = write_graph(report, tmp_path / "graph.dot", "dot")
        assert path.read_text().startswith("digraph")

    def test_unknown_format(self, report, tmp_path):
        with pytest.raises(ValueError):
            write_graph(report, tmp_path / "graph.svg", "svg")
