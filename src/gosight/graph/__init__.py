"""Call-graph analysis."""

from .algorithms import cyclic_components, reachable, tarjan_scc
from .callgraph import CallGraphAnalyzer, DeadCodeInfo

__all__ = ["CallGraphAnalyzer", "DeadCodeInfo", "cyclic_components", "reachable", "tarjan_scc"]
