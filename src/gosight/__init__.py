"""
gosight - structural and complexity analysis for Go source trees.

Extracts functions, types, globals and imports with tree-sitter, builds a
name-keyed call graph and scores every function for complexity,
duplication, recursion and reachability.
"""

__version__ = "0.1.0"

from .api import analyze, summarize
from .models import AnalysisReport, FunctionRecord, Metrics
from .summary import CodeSummary

__all__ = [
    "analyze",
    "summarize",
    "AnalysisReport",
    "CodeSummary",
    "FunctionRecord",
    "Metrics",
]
