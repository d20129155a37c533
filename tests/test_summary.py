"""Tests for report summarization and hotspot ranking."""

import pytest

from gosight import summarize
from gosight.config import ThresholdConfig
from gosight.models import (
    AnalysisReport,
    CognitiveComplexity,
    FunctionRecord,
    Metrics,
    ReadabilityMetrics,
)
from gosight.summary import (
    DEEP_NESTING,
    HIGH_COGNITIVE,
    HIGH_COMPLEXITY,
    LOW_MAINTAINABILITY,
)


def _fn(name, cc=1, mi=90.0, nesting=0, cognitive=0, loc=10, **flags):
    metrics = Metrics(
        cyclomatic_complexity=cc,
        lines_of_code=loc,
        maintainability_index=mi,
        cognitive=CognitiveComplexity(score=cognitive),
        readability=ReadabilityMetrics(nesting_depth=nesting),
        is_unused=flags.pop("is_unused", False),
    )
    return FunctionRecord(name=name, package="p", file="p.go", metrics=metrics, **flags)


class TestSummarize:
    def test_empty_report(self):
        summary = summarize(AnalysisReport())
        assert summary.total_functions == 0
        assert summary.avg_complexity == 0.0
        assert summary.hotspots == []

    def test_totals_and_averages(self):
        report = AnalysisReport(
            functions=[
                _fn("a", cc=2, mi=80.0, nesting=1, loc=5, is_recursive=True),
                _fn("b", cc=4, mi=60.0, nesting=3, loc=15, is_duplicate=True, is_unused=True),
            ]
        )
        summary = summarize(report)
        assert summary.total_functions == 2
        assert summary.total_lines == 20
        assert summary.recursive_functions == 1
        assert summary.duplicate_functions == 1
        assert summary.unused_functions == 1
        assert summary.avg_complexity == pytest.approx(3.0)
        assert summary.avg_maintainability == pytest.approx(70.0)
        assert summary.avg_nesting_depth == pytest.approx(2.0)

    def test_distribution_buckets(self):
        report = AnalysisReport(
            functions=[_fn("a", cc=5), _fn("b", cc=6), _fn("c", cc=10), _fn("d", cc=11)]
        )
        dist = summarize(report).distribution
        assert (dist.low, dist.medium, dist.high) == (1, 2, 1)

    def test_hotspots_ranked_by_complexity(self):
        report = AnalysisReport(
            functions=[
                _fn("calm", cc=2),
                _fn("tangled", cc=12, mi=40.0, cognitive=20),
                _fn("nested", cc=3, nesting=5),
                _fn("huge", cc=30),
            ]
        )
        hotspots = summarize(report).hotspots
        assert [h.name for h in hotspots] == ["p.huge", "p.tangled", "p.nested"]
        assert hotspots[1].issues == [HIGH_COMPLEXITY, LOW_MAINTAINABILITY, HIGH_COGNITIVE]
        assert hotspots[2].issues == [DEEP_NESTING]

    def test_cognitive_alone_is_not_a_hotspot(self):
        report = AnalysisReport(functions=[_fn("busy", cc=3, cognitive=40)])
        assert summarize(report).hotspots == []

    def test_custom_thresholds(self):
        report = AnalysisReport(functions=[_fn("a", cc=4)])
        summary = summarize(report, ThresholdConfig(low_complexity=2, hotspot_complexity=3))
        assert summary.distribution.medium == 1
        assert [h.name for h in summary.hotspots] == ["p.a"]

    def test_to_dict(self):
        data = summarize(AnalysisReport(functions=[_fn("a")])).to_dict()
        assert data["complexity_distribution"] == {"low": 1, "medium": 0, "high": 0}
        assert data["total_functions"] == 1
