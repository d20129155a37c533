"""Graph export of analysis reports."""

from .export import build_graph, to_dot, write_graph

__all__ = ["build_graph", "to_dot", "write_graph"]
