"""Memoized rendering of Go type expressions to canonical strings.

One ``TypeStringCache`` is owned by an analysis run and shared by every
file worker. Entries are keyed by the expression's node type and source
text, so ``map[string][]int`` written in two files is rendered once.

Reads are lock-free dictionary lookups. A miss takes the lock, checks
again, renders and inserts, so two workers racing on the same expression
compute it only once.
"""

from __future__ import annotations

import threading
from typing import Optional

from ..logging_config import get_logger
from ..scanning.syntax import Node, NodeKind, classify, text

logger = get_logger(__name__)

DEFAULT_MAX_ENTRIES = 10000


class TypeStringCache:
    """Bounded, thread-safe memo of ``render(type_expr) -> str``.

    When full, the oldest entry is evicted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self._entries: dict[tuple[str, bytes], str] = {}
        # rendering is recursive and re-enters through render()
        self._lock = threading.RLock()
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.misses = 0

    def render(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        key = (node.type, node.text or b"")
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                return cached
            rendered = self._render(node)
            if len(self._entries) >= self.max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = rendered
            self.misses += 1
            return rendered

    def parameter_types(self, params: Optional[Node]) -> list[str]:
        """Render a parameter or result list, one entry per declared name.

        ``a, b int`` yields ``["int", "int"]``; unnamed parameters yield one
        entry each; a variadic parameter is prefixed with ``...``. A bare
        result type (``func f() error``) yields a single entry.
        """
        if params is None:
            return []
        if params.type != "parameter_list":
            return [self.render(params)]

        types: list[str] = []
        for decl in params.named_children:
            if decl.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                continue
            rendered = self.render(decl.child_by_field_name("type"))
            if decl.type == "variadic_parameter_declaration":
                rendered = "..." + rendered
            names = decl.children_by_field_name("name")
            types.extend([rendered] * max(len(names), 1))
        return types

    def _render(self, node: Node) -> str:
        kind = classify(node)

        if kind in (NodeKind.IDENTIFIER, NodeKind.LITERAL):
            return text(node)

        if kind is NodeKind.POINTER_TYPE:
            return "*" + self.render(node.named_children[-1])

        if kind in (NodeKind.SLICE_TYPE, NodeKind.ARRAY_TYPE):
            return "[]" + self.render(node.child_by_field_name("element"))

        if kind is NodeKind.MAP_TYPE:
            key = self.render(node.child_by_field_name("key"))
            value = self.render(node.child_by_field_name("value"))
            return f"map[{key}]{value}"

        if kind is NodeKind.CHANNEL_TYPE:
            return "chan " + self.render(node.child_by_field_name("value"))

        if kind is NodeKind.FUNCTION_TYPE:
            return self._signature(node)

        if kind is NodeKind.INTERFACE_TYPE:
            members = [self._interface_member(child) for child in node.named_children]
            return "interface{" + ";".join(m for m in members if m) + "}"

        if kind is NodeKind.STRUCT_TYPE:
            fields: list[str] = []
            for field_list in node.named_children:
                for decl in field_list.named_children:
                    if decl.type == "field_declaration":
                        fields.append(self._struct_field(decl))
            return "struct{" + ";".join(fields) + "}"

        if kind is NodeKind.SELECTOR:
            if node.type == "qualified_type":
                package = text(node.child_by_field_name("package"))
                return f"{package}.{text(node.child_by_field_name('name'))}"
            operand = self.render(node.child_by_field_name("operand"))
            return f"{operand}.{text(node.child_by_field_name('field'))}"

        if kind is NodeKind.GENERIC_TYPE:
            base = self.render(node.child_by_field_name("type"))
            arguments = node.child_by_field_name("type_arguments")
            args = [self.render(a) for a in arguments.named_children] if arguments else []
            return f"{base}[{', '.join(args)}]"

        if kind is NodeKind.TYPE_UNION:
            return " | ".join(self.render(child) for child in node.named_children)

        if kind is NodeKind.PARENTHESIZED and node.named_children:
            return self.render(node.named_children[0])

        return f"<{node.type}>"

    def _signature(self, node: Node) -> str:
        params = self.parameter_types(node.child_by_field_name("parameters"))
        rendered = "func(" + ", ".join(params) + ")"
        results = self.parameter_types(node.child_by_field_name("result"))
        if results:
            rendered += " (" + ", ".join(results) + ")"
        return rendered

    def _interface_member(self, node: Node) -> str:
        if node.type in ("method_elem", "method_spec"):
            return self._signature(node)
        if node.type == "comment":
            return ""
        return self.render(node)

    def _struct_field(self, decl: Node) -> str:
        rendered = self.render(decl.child_by_field_name("type"))
        embedded_pointer = not decl.children_by_field_name("name") and any(
            child.type == "*" for child in decl.children
        )
        return "*" + rendered if embedded_pointer else rendered
