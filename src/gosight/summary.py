"""Aggregate view of an ``AnalysisReport``: totals, averages, hotspots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .config import DEFAULT_THRESHOLDS, ThresholdConfig
from .models import AnalysisReport, FunctionRecord

HIGH_COMPLEXITY = "High cyclomatic complexity"
DEEP_NESTING = "Deep nesting"
LOW_MAINTAINABILITY = "Low maintainability"
HIGH_COGNITIVE = "High cognitive complexity"


@dataclass
class ComplexityDistribution:
    low: int = 0
    medium: int = 0
    high: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"low": self.low, "medium": self.medium, "high": self.high}


@dataclass
class Hotspot:
    name: str
    file: str
    complexity: int
    maintainability: float
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "file": self.file,
            "complexity": self.complexity,
            "maintainability": self.maintainability,
            "issues": list(self.issues),
        }


@dataclass
class CodeSummary:
    total_functions: int = 0
    total_lines: int = 0
    unused_functions: int = 0
    recursive_functions: int = 0
    duplicate_functions: int = 0
    avg_complexity: float = 0.0
    avg_maintainability: float = 0.0
    avg_nesting_depth: float = 0.0
    distribution: ComplexityDistribution = field(default_factory=ComplexityDistribution)
    hotspots: list[Hotspot] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_functions": self.total_functions,
            "total_lines": self.total_lines,
            "unused_functions": self.unused_functions,
            "recursive_functions": self.recursive_functions,
            "duplicate_functions": self.duplicate_functions,
            "avg_complexity": self.avg_complexity,
            "avg_maintainability": self.avg_maintainability,
            "avg_nesting_depth": self.avg_nesting_depth,
            "complexity_distribution": self.distribution.to_dict(),
            "hotspots": [h.to_dict() for h in self.hotspots],
        }


def summarize(
    report: AnalysisReport, thresholds: Optional[ThresholdConfig] = None
) -> CodeSummary:
    """Reduce a report to counts, averages, buckets and ranked hotspots.

    Hotspots are sorted by cyclomatic complexity, highest first; ties keep
    qualified-name order.
    """
    t = thresholds or DEFAULT_THRESHOLDS
    summary = CodeSummary(total_functions=len(report.functions))
    if not report.functions:
        return summary

    complexity_sum = 0
    maintainability_sum = 0.0
    nesting_sum = 0

    for fn in report.functions:
        m = fn.metrics
        cc = m.cyclomatic_complexity
        summary.total_lines += m.lines_of_code
        summary.unused_functions += m.is_unused
        summary.recursive_functions += fn.is_recursive
        summary.duplicate_functions += fn.is_duplicate
        complexity_sum += cc
        maintainability_sum += m.maintainability_index
        nesting_sum += m.readability.nesting_depth

        if cc <= t.low_complexity:
            summary.distribution.low += 1
        elif cc <= t.medium_complexity:
            summary.distribution.medium += 1
        else:
            summary.distribution.high += 1

        hotspot = _hotspot(fn, t)
        if hotspot is not None:
            summary.hotspots.append(hotspot)

    n = len(report.functions)
    summary.avg_complexity = complexity_sum / n
    summary.avg_maintainability = maintainability_sum / n
    summary.avg_nesting_depth = nesting_sum / n
    summary.hotspots.sort(key=lambda h: h.complexity, reverse=True)
    return summary


def _hotspot(fn: FunctionRecord, t: ThresholdConfig) -> Optional[Hotspot]:
    m = fn.metrics
    issues = []
    if m.cyclomatic_complexity > t.hotspot_complexity:
        issues.append(HIGH_COMPLEXITY)
    if m.readability.nesting_depth > t.hotspot_nesting:
        issues.append(DEEP_NESTING)
    if m.maintainability_index < t.hotspot_maintainability:
        issues.append(LOW_MAINTAINABILITY)
    if not issues:
        return None
    if m.cognitive.score > t.cognitive_warning:
        issues.append(HIGH_COGNITIVE)
    return Hotspot(
        name=fn.qualified_name,
        file=fn.file,
        complexity=m.cyclomatic_complexity,
        maintainability=m.maintainability_index,
        issues=issues,
    )
