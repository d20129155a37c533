"""Graph export of a report: node-link JSON and Graphviz DOT.

Nodes are functions, structs, interfaces, globals and imports. Call edges
are only emitted between functions present in the report; unresolved
callees stay in each function's ``callees`` list.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..logging_config import get_logger
from ..models import AnalysisReport

logger = get_logger(__name__)

FORMATS = ("json", "dot")


def _node_id(kind: str, *parts: str) -> str:
    return f"{kind}:" + ".".join(p for p in parts if p)


def build_graph(report: AnalysisReport) -> dict[str, Any]:
    """Node-link dictionary with typed nodes and edges."""
    nodes: list[dict[str, Any]] = []
    edges: list[dict[str, Any]] = []
    seen: set[str] = set()

    def add_node(node_id: str, kind: str, label: str, **attrs: Any) -> None:
        if node_id in seen:
            return
        seen.add(node_id)
        nodes.append({"id": node_id, "type": kind, "label": label, **attrs})

    names = {fn.qualified_name for fn in report.functions}

    for fn in report.functions:
        add_node(
            _node_id("function", fn.qualified_name),
            "function",
            fn.qualified_name,
            file=fn.file,
            complexity=fn.metrics.cyclomatic_complexity,
            maintainability=round(fn.metrics.maintainability_index, 2),
            is_recursive=fn.is_recursive,
            is_duplicate=fn.is_duplicate,
            is_unused=fn.metrics.is_unused,
        )
    for s in report.structs:
        add_node(_node_id("struct", s.package, s.name), "struct", s.name, file=s.file)
    for i in report.interfaces:
        add_node(_node_id("interface", i.package, i.name), "interface", i.name, file=i.file)
    for g in report.globals:
        add_node(_node_id("global", g.package, g.name), "global", g.name, file=g.file)
    for imp in report.imports:
        add_node(_node_id("import", imp.path), "import", imp.path)

    for fn in report.functions:
        source = _node_id("function", fn.qualified_name)
        for callee in fn.callees:
            if callee in names:
                edges.append(
                    {"source": source, "target": _node_id("function", callee), "type": "calls"}
                )
        if fn.receiver:
            edges.append(
                {
                    "source": _node_id("struct", fn.package, fn.receiver),
                    "target": source,
                    "type": "methods",
                }
            )
        for name in fn.referenced_globals:
            target = _node_id("global", fn.package, name)
            edges.append({"source": source, "target": target, "type": "references"})
        for path in fn.dependencies:
            target = _node_id("import", path)
            edges.append({"source": source, "target": target, "type": "dependencies"})

    for rel in report.implements:
        for iface in report.interfaces:
            if iface.name != rel.interface:
                continue
            edges.append(
                {
                    "source": _node_id("struct", iface.package, rel.struct),
                    "target": _node_id("interface", iface.package, rel.interface),
                    "type": "implements",
                }
            )

    # drop edges whose endpoints were never declared (e.g. methods on aliases)
    edges = [e for e in edges if e["source"] in seen and e["target"] in seen]
    return {"directed": True, "nodes": nodes, "edges": edges}


def _dot_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_dot(report: AnalysisReport) -> str:
    """Call graph in Graphviz DOT.

    Recursive functions are drawn red, unused ones dashed, duplicates
    filled grey.
    """
    graph = build_graph(report)
    lines = ["digraph gosight {", "    rankdir=LR;", "    node [shape=box, fontsize=10];"]

    for node in graph["nodes"]:
        if node["type"] != "function":
            continue
        attrs = [f"label={_dot_quote(node['label'])}"]
        styles = []
        if node["is_recursive"]:
            attrs.append("color=red")
        if node["is_unused"]:
            styles.append("dashed")
        if node["is_duplicate"]:
            styles.append("filled")
            attrs.append("fillcolor=lightgrey")
        if styles:
            attrs.append(f"style={_dot_quote(','.join(styles))}")
        lines.append(f"    {_dot_quote(node['id'])} [{', '.join(attrs)}];")

    for edge in graph["edges"]:
        if edge["type"] == "calls":
            lines.append(f"    {_dot_quote(edge['source'])} -> {_dot_quote(edge['target'])};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def write_graph(report: AnalysisReport, path: Path | str, fmt: str = "json") -> Path:
    if fmt not in FORMATS:
        raise ValueError(f"Unknown graph format: {fmt} (expected one of {', '.join(FORMATS)})")
    path = Path(path)
    if fmt == "dot":
        path.write_text(to_dot(report), encoding="utf-8")
    else:
        path.write_text(json.dumps(build_graph(report), indent=2), encoding="utf-8")
    logger.info(f"Wrote {fmt} graph to {path}")
    return path
