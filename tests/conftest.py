"""Shared test fixtures for gosight tests."""

import textwrap
from pathlib import Path

import pytest

from gosight.analysis.extractor import EntityExtractor
from gosight.scanning.treesitter_parser import GoParser


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


DEMO_SOURCE = """
package demo

import (
    "fmt"
    "strings"
)

const Pi = 3.14

var counter int

type Calculator struct {
    total int
}

type MathOps interface {
    Add(a, b int) int
}

func (c *Calculator) Add(a, b int) int {
    counter++
    return a + b
}

func Greet(name string) string {
    return strings.ToUpper(fmt.Sprintf("hi %s", name))
}

func helper() int {
    return 1
}
"""


@pytest.fixture
def go_parser():
    return GoParser()


@pytest.fixture
def parse_go(go_parser):
    """Parse a Go snippet and return its FileAnalysis."""

    def _parse(source, path="main.go"):
        tree = go_parser.parse(textwrap.dedent(source).encode("utf-8"), path)
        return EntityExtractor().extract(tree, path)

    return _parse


@pytest.fixture
def go_body(go_parser):
    """Parse a Go snippet and return the body node of the named function."""

    def _body(source, name):
        tree = go_parser.parse(textwrap.dedent(source).encode("utf-8"))
        for node in tree.root_node.named_children:
            if node.type in ("function_declaration", "method_declaration"):
                if node.child_by_field_name("name").text.decode() == name:
                    return node.child_by_field_name("body")
        raise LookupError(name)

    return _body


@pytest.fixture
def go_tree(tmp_path):
    """Write ``{relative path: source}`` under tmp_path and return the root."""

    def _write(files):
        for rel, source in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source), encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def demo_source():
    return DEMO_SOURCE


@pytest.fixture
def demo_root(go_tree) -> Path:
    return go_tree({"demo.go": DEMO_SOURCE})
