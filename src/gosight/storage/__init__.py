"""Graph store for analysis reports."""

from .database import GraphDB
from .writer import callees_of, callers_of, save_report, table_counts

__all__ = ["GraphDB", "save_report", "callees_of", "callers_of", "table_counts"]
