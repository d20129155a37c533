"""Tree-sitter front-end for Go sources.

Usage:
    parser = GoParser()
    tree = parser.parse(source_bytes, path)
    tree.root_node
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_go

from ..exceptions import ParsingError

LANGUAGE_NAME = "go"

GO_LANGUAGE = tree_sitter.Language(tree_sitter_go.language())


class GoParser:
    """Thread-safe wrapper around a tree-sitter Go parser.

    tree-sitter parsers keep internal state between calls, so each thread
    gets its own instance.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _parser(self) -> tree_sitter.Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = tree_sitter.Parser(GO_LANGUAGE)
            self._local.parser = parser
        return parser

    def parse(self, source: bytes, path: Path | str = "<memory>") -> tree_sitter.Tree:
        """Parse Go source into a syntax tree.

        Raises:
            ParsingError: If the tree contains ERROR or MISSING nodes.
        """
        tree = self._parser().parse(source)
        root = tree.root_node
        if root.has_error:
            raise ParsingError(Path(path), LANGUAGE_NAME, _describe_error(root))
        return tree


def _describe_error(root: Any) -> str:
    """Point at the first broken node so the issue is actionable."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, col = node.start_point[0] + 1, node.start_point[1] + 1
            if node.is_missing:
                return f"missing {node.type} at line {row}, column {col}"
            return f"syntax error at line {row}, column {col}"
        if node.has_error:
            stack.extend(reversed(node.children))
    return "syntax error"
