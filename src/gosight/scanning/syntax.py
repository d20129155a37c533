"""Closed view of the Go syntax tree.

Analysis code never switches on raw tree-sitter node type strings; it asks
``classify(node)`` for a ``NodeKind`` and dispatches on that. Node types
outside the table below are ``NodeKind.UNSUPPORTED``: renderers emit a
placeholder for them and visitors still descend into their children.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, Optional

Node = Any  # tree_sitter.Node


class NodeKind(Enum):
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    UNARY = "unary"
    BINARY = "binary"
    CALL = "call"
    SELECTOR = "selector"
    PARENTHESIZED = "parenthesized"
    POINTER_TYPE = "pointer_type"
    SLICE_TYPE = "slice_type"
    ARRAY_TYPE = "array_type"
    MAP_TYPE = "map_type"
    CHANNEL_TYPE = "channel_type"
    FUNCTION_TYPE = "function_type"
    INTERFACE_TYPE = "interface_type"
    STRUCT_TYPE = "struct_type"
    GENERIC_TYPE = "generic_type"
    TYPE_UNION = "type_union"
    IF = "if"
    FOR = "for"
    SWITCH = "switch"
    SELECT = "select"
    CASE = "case"
    RETURN = "return"
    BLOCK = "block"
    COMMENT = "comment"
    FUNC_LITERAL = "func_literal"
    UNSUPPORTED = "unsupported"


_KINDS: dict[str, NodeKind] = {
    "identifier": NodeKind.IDENTIFIER,
    "type_identifier": NodeKind.IDENTIFIER,
    "field_identifier": NodeKind.IDENTIFIER,
    "package_identifier": NodeKind.IDENTIFIER,
    "blank_identifier": NodeKind.IDENTIFIER,
    "true": NodeKind.IDENTIFIER,
    "false": NodeKind.IDENTIFIER,
    "nil": NodeKind.IDENTIFIER,
    "iota": NodeKind.IDENTIFIER,
    "int_literal": NodeKind.LITERAL,
    "float_literal": NodeKind.LITERAL,
    "imaginary_literal": NodeKind.LITERAL,
    "rune_literal": NodeKind.LITERAL,
    "interpreted_string_literal": NodeKind.LITERAL,
    "raw_string_literal": NodeKind.LITERAL,
    "unary_expression": NodeKind.UNARY,
    "binary_expression": NodeKind.BINARY,
    "call_expression": NodeKind.CALL,
    "selector_expression": NodeKind.SELECTOR,
    "qualified_type": NodeKind.SELECTOR,
    "parenthesized_expression": NodeKind.PARENTHESIZED,
    "parenthesized_type": NodeKind.PARENTHESIZED,
    "pointer_type": NodeKind.POINTER_TYPE,
    "slice_type": NodeKind.SLICE_TYPE,
    "array_type": NodeKind.ARRAY_TYPE,
    "implicit_length_array_type": NodeKind.ARRAY_TYPE,
    "map_type": NodeKind.MAP_TYPE,
    "channel_type": NodeKind.CHANNEL_TYPE,
    "function_type": NodeKind.FUNCTION_TYPE,
    "interface_type": NodeKind.INTERFACE_TYPE,
    "struct_type": NodeKind.STRUCT_TYPE,
    "generic_type": NodeKind.GENERIC_TYPE,
    "type_elem": NodeKind.TYPE_UNION,
    "constraint_elem": NodeKind.TYPE_UNION,
    "if_statement": NodeKind.IF,
    "for_statement": NodeKind.FOR,
    "expression_switch_statement": NodeKind.SWITCH,
    "type_switch_statement": NodeKind.SWITCH,
    "select_statement": NodeKind.SELECT,
    "expression_case": NodeKind.CASE,
    "type_case": NodeKind.CASE,
    "default_case": NodeKind.CASE,
    "communication_case": NodeKind.CASE,
    "return_statement": NodeKind.RETURN,
    "block": NodeKind.BLOCK,
    "comment": NodeKind.COMMENT,
    "func_literal": NodeKind.FUNC_LITERAL,
}

LOGICAL_OPERATORS = frozenset({"&&", "||"})

# Statements counted by branch density
BRANCH_KINDS = frozenset({NodeKind.IF, NodeKind.FOR, NodeKind.SWITCH, NodeKind.SELECT})

# Kinds whose children are not analysed as separate tokens
LEAF_KINDS = frozenset({NodeKind.IDENTIFIER, NodeKind.LITERAL, NodeKind.COMMENT})


def classify(node: Node) -> NodeKind:
    return _KINDS.get(node.type, NodeKind.UNSUPPORTED)


def text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def operator(node: Node) -> str:
    """Operator symbol of a unary or binary expression."""
    op = node.child_by_field_name("operator")
    return op.type if op is not None else ""


def is_logical(node: Node) -> bool:
    return node.type == "binary_expression" and operator(node) in LOGICAL_OPERATORS


def line_span(node: Node) -> tuple[int, int]:
    """1-indexed (start, end) source lines of a node."""
    return node.start_point[0] + 1, node.end_point[0] + 1


def walk(node: Node) -> Iterator[Node]:
    """Depth-first pre-order iteration over named nodes.

    Identifiers, literals and comments are yielded but not descended into.
    Uses an explicit stack so deeply nested bodies cannot hit the
    recursion limit.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if classify(current) in LEAF_KINDS:
            continue
        stack.extend(reversed(current.named_children))


def find_all(node: Node, kind: NodeKind) -> Iterator[Node]:
    return (n for n in walk(node) if classify(n) is kind)
