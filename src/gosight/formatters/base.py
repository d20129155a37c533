"""Base formatter interface for gosight output rendering."""

from abc import ABC, abstractmethod

from ..models import AnalysisReport
from ..summary import CodeSummary


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: AnalysisReport, summary: CodeSummary) -> None:
        """Render a report to stdout/stderr as appropriate."""

    @abstractmethod
    def format(self, report: AnalysisReport, summary: CodeSummary) -> str:
        """Return formatted string representation of a report."""
