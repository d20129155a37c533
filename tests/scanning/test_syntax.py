"""Tests for the closed node-kind view of the syntax tree."""

import textwrap

import pytest

from gosight.scanning.syntax import NodeKind, classify, find_all, line_span, text, walk

SOURCE = """
package p

func f(a int) int {
    if a > 0 && a < 10 {
        return -a
    }
    return g(a)
}
"""


@pytest.fixture
def root(go_parser):
    return go_parser.parse(textwrap.dedent(SOURCE).encode("utf-8")).root_node


class TestClassify:
    def test_known_kinds(self, root):
        kinds = {classify(n) for n in walk(root)}
        assert {NodeKind.IF, NodeKind.BINARY, NodeKind.UNARY, NodeKind.CALL} <= kinds
        assert {NodeKind.RETURN, NodeKind.BLOCK, NodeKind.IDENTIFIER, NodeKind.LITERAL} <= kinds

    def test_unknown_is_unsupported(self, root):
        assert classify(root) is NodeKind.UNSUPPORTED


class TestWalk:
    def test_pre_order(self, root):
        types = [n.type for n in walk(root)]
        assert types[0] == "source_file"
        assert types.index("function_declaration") < types.index("if_statement")
        assert types.index("if_statement") < types.index("call_expression")

    def test_does_not_descend_into_leaves(self, go_parser):
        tree = go_parser.parse(b'package p\n\nvar s = "a\\tb"\n')
        types = [n.type for n in walk(tree.root_node)]
        assert "interpreted_string_literal" in types
        assert "escape_sequence" not in types


class TestHelpers:
    def test_find_all_binary(self, root):
        ops = sorted(text(n) for n in find_all(root, NodeKind.BINARY))
        assert ops == ["a < 10", "a > 0", "a > 0 && a < 10"]

    def test_line_span_is_one_indexed(self, root):
        fn = next(find_all(root, NodeKind.IF))
        assert line_span(fn) == (5, 7)

    def test_text_of_none(self):
        assert text(None) == ""
