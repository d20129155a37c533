"""Tests for entity extraction from parsed Go files."""

import pytest

from gosight.analysis.extractor import EntityExtractor, extract_file
from gosight.analysis.metrics import MetricsEngine
from gosight.analysis.type_cache import TypeStringCache
from gosight.models import ImportRecord


class TestDeclarations:
    def test_package_and_counts(self, parse_go, demo_source):
        result = parse_go(demo_source, "demo.go")
        assert result.package == "demo"
        assert result.path == "demo.go"
        assert [s.name for s in result.structs] == ["Calculator"]
        assert [i.name for i in result.interfaces] == ["MathOps"]
        assert [f.name for f in result.functions] == ["Add", "Greet", "helper"]

    def test_method_record(self, parse_go, demo_source):
        add = parse_go(demo_source, "demo.go").functions[0]
        assert add.qualified_name == "demo.Calculator.Add"
        assert add.receiver == "Calculator"
        assert add.is_method
        assert add.params == ["int", "int"]
        assert add.returns == ["int"]
        assert add.referenced_globals == ["counter"]
        assert add.start_line < add.end_line

    def test_interface_methods(self, parse_go, demo_source):
        iface = parse_go(demo_source).interfaces[0]
        assert iface.methods == ["Add"]
        assert iface.embeds == []

    def test_globals(self, parse_go, demo_source):
        by_name = {g.name: g for g in parse_go(demo_source).globals}
        assert by_name["Pi"].kind == "const"
        assert by_name["Pi"].value == "3.14"
        assert by_name["counter"].kind == "var"
        assert by_name["counter"].type == "int"
        assert by_name["counter"].value is None

    def test_imports(self, parse_go, demo_source):
        imports = parse_go(demo_source).imports
        assert [i.path for i in imports] == ["fmt", "strings"]
        assert all(i.package == "demo" for i in imports)

    def test_non_literal_global_has_no_value(self, parse_go):
        result = parse_go(
            """
            package p

            var (
                limit = 10
                start = limit * 2
                _     = 5
            )
            """
        )
        by_name = {g.name: g for g in result.globals}
        assert set(by_name) == {"limit", "start"}
        assert by_name["limit"].value == "10"
        assert by_name["start"].value is None

    def test_embedded_interface(self, parse_go):
        result = parse_go(
            """
            package p

            type Reader interface {
                Read() int
            }

            type ReadCloser interface {
                Reader
                Close() error
            }
            """
        )
        rc = result.interfaces[1]
        assert rc.methods == ["Close"]
        assert rc.embeds == ["Reader"]

    def test_generic_pointer_receiver(self, parse_go):
        result = parse_go(
            """
            package p

            type Stack[T any] struct {
                items []T
            }

            func (s *Stack[T]) Push(v T) {
                s.items = append(s.items, v)
            }
            """
        )
        push = result.functions[0]
        assert push.receiver == "Stack"
        assert push.qualified_name == "p.Stack.Push"


class TestFunctionBodies:
    def test_callees(self, parse_go, demo_source):
        greet = parse_go(demo_source).functions[1]
        assert greet.callees == ["strings.ToUpper", "fmt.Sprintf"]

    def test_local_calls_are_package_qualified(self, parse_go):
        result = parse_go(
            """
            package main

            func main() {
                run()
                run()
                s.handle()
            }
            """
        )
        assert result.functions[0].callees == ["main.run", "s.handle"]

    def test_dependencies(self, parse_go, demo_source):
        greet = parse_go(demo_source).functions[1]
        assert greet.dependencies == ["strings", "fmt"]

    def test_dependency_through_type_and_alias(self, parse_go):
        result = parse_go(
            """
            package p

            import (
                b "bytes"
                "example.com/mod/v2"
            )

            func f() {
                var buf b.Buffer
                mod.Run(&buf)
            }
            """
        )
        assert result.functions[0].dependencies == ["bytes", "example.com/mod/v2"]

    def test_function_without_body(self, parse_go):
        result = parse_go(
            """
            package p

            func external(x int) int
            """
        )
        fn = result.functions[0]
        assert fn.callees == []
        assert fn.fingerprint is None
        assert fn.metrics.cyclomatic_complexity == 1

    def test_fingerprint_is_set(self, parse_go, demo_source):
        for fn in parse_go(demo_source).functions:
            assert fn.fingerprint is not None


class FailingMetrics(MetricsEngine):
    def compute(self, body, is_duplicate=False):
        raise ValueError("boom")


class TestMetricsFailure:
    def test_recorded_as_issue(self, go_parser, demo_source):
        tree = go_parser.parse(demo_source.encode("utf-8"))
        result = EntityExtractor(metrics=FailingMetrics()).extract(tree, "demo.go")
        assert len(result.functions) == 3
        assert [i.stage for i in result.issues] == ["metrics"] * 3
        assert result.issues[0].function == "demo.Calculator.Add"
        assert result.functions[0].metrics.cyclomatic_complexity == 1


class TestExtractFile:
    def test_shares_type_cache(self, go_parser, demo_source):
        cache = TypeStringCache()
        tree = go_parser.parse(demo_source.encode("utf-8"))
        extract_file(tree, "demo.go", cache)
        assert len(cache) > 0


class TestImportLocalName:
    @pytest.mark.parametrize(
        "path,alias,expected",
        [
            ("fmt", None, "fmt"),
            ("net/http", None, "http"),
            ("example.com/mod/v2", None, "mod"),
            ("bytes", "b", "b"),
            ("embed", "_", None),
            ("strings", ".", None),
        ],
    )
    def test_local_name(self, path, alias, expected):
        assert ImportRecord(path=path, file="a.go", package="p", alias=alias).local_name == expected
