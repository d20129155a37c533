"""JSON formatter for gosight."""

import json

from ..models import AnalysisReport
from ..summary import CodeSummary
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the report and its summary as one JSON document."""

    def render(self, report: AnalysisReport, summary: CodeSummary) -> None:
        print(self.format(report, summary))

    def format(self, report: AnalysisReport, summary: CodeSummary) -> str:
        data = report.to_dict()
        data["summary"] = summary.to_dict()
        return json.dumps(data, indent=2)
