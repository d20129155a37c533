"""Tests for TypeStringCache rendering and memoization."""

import textwrap
from concurrent.futures import ThreadPoolExecutor

import pytest

from gosight.analysis.type_cache import TypeStringCache

TYPES = """
package p

type A map[string][]int
type B chan int
type C func(a, b int) (string, error)
type D *Node
type E []*Node
type F io.Reader
type G List[int, string]
type H [4]byte
type I interface{}
type J struct {
    name string
    *Base
}
type K int
type L string
type M bool
"""

FUNCS = """
package p

func printf(format string, args ...any) (n int, err error) {
    return 0, nil
}

func single() error {
    return nil
}

func none() {}
"""


@pytest.fixture
def type_nodes(go_parser):
    tree = go_parser.parse(textwrap.dedent(TYPES).encode("utf-8"))
    nodes = {}
    for decl in tree.root_node.named_children:
        if decl.type != "type_declaration":
            continue
        for spec in decl.named_children:
            if spec.type == "type_spec":
                nodes[spec.child_by_field_name("name").text.decode()] = (
                    spec.child_by_field_name("type")
                )
    return nodes


@pytest.fixture
def func_nodes(go_parser):
    tree = go_parser.parse(textwrap.dedent(FUNCS).encode("utf-8"))
    return {
        node.child_by_field_name("name").text.decode(): node
        for node in tree.root_node.named_children
        if node.type == "function_declaration"
    }


class TestRender:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("A", "map[string][]int"),
            ("B", "chan int"),
            ("C", "func(int, int) (string, error)"),
            ("D", "*Node"),
            ("E", "[]*Node"),
            ("F", "io.Reader"),
            ("G", "List[int, string]"),
            ("H", "[]byte"),
            ("I", "interface{}"),
            ("J", "struct{string;*Base}"),
        ],
    )
    def test_type_expressions(self, type_nodes, name, expected):
        assert TypeStringCache().render(type_nodes[name]) == expected

    def test_none_renders_empty(self):
        assert TypeStringCache().render(None) == ""


class TestParameterTypes:
    def test_one_entry_per_name_and_variadic(self, func_nodes):
        cache = TypeStringCache()
        fn = func_nodes["printf"]
        assert cache.parameter_types(fn.child_by_field_name("parameters")) == [
            "string",
            "...any",
        ]
        assert cache.parameter_types(fn.child_by_field_name("result")) == ["int", "error"]

    def test_bare_result_type(self, func_nodes):
        fn = func_nodes["single"]
        assert TypeStringCache().parameter_types(fn.child_by_field_name("result")) == ["error"]

    def test_no_parameters(self, func_nodes):
        cache = TypeStringCache()
        fn = func_nodes["none"]
        assert cache.parameter_types(fn.child_by_field_name("parameters")) == []
        assert cache.parameter_types(fn.child_by_field_name("result")) == []


class TestCaching:
    def test_second_render_is_a_hit(self, type_nodes):
        cache = TypeStringCache()
        cache.render(type_nodes["A"])
        size, misses = len(cache), cache.misses
        assert cache.render(type_nodes["A"]) == "map[string][]int"
        assert len(cache) == size
        assert cache.misses == misses

    def test_sub_expressions_are_cached(self, type_nodes):
        cache = TypeStringCache()
        cache.render(type_nodes["E"])
        # []*Node, *Node and Node
        assert len(cache) == 3

    def test_evicts_oldest_when_full(self, type_nodes):
        cache = TypeStringCache(max_entries=2)
        for name in ("K", "L", "M"):
            cache.render(type_nodes[name])
        assert len(cache) == 2
        assert cache.misses == 3

        cache.render(type_nodes["L"])
        assert cache.misses == 3
        cache.render(type_nodes["K"])
        assert cache.misses == 4

    def test_clear(self, type_nodes):
        cache = TypeStringCache()
        cache.render(type_nodes["A"])
        cache.clear()
        assert len(cache) == 0
        assert cache.misses == 0

    def test_concurrent_renders_agree(self, type_nodes):
        cache = TypeStringCache()
        nodes = [type_nodes[name] for name in "ABCDEFG"] * 20
        with ThreadPoolExecutor(max_workers=8) as executor:
            rendered = list(executor.map(cache.render, nodes))
        assert rendered == [TypeStringCache().render(n) for n in nodes]
