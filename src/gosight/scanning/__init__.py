"""Go front-end and file scanning."""

from .scanner import ConcurrentScanner, discover_files
from .syntax import NodeKind, classify, walk
from .treesitter_parser import GoParser

__all__ = ["ConcurrentScanner", "GoParser", "NodeKind", "classify", "discover_files", "walk"]
