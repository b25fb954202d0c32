"""JSON formatter for QualityHub."""

import json

from ..models import AnalysisResult
from .base import BaseFormatter, ReportContext


class JsonFormatter(BaseFormatter):
    """Render the analysis result as JSON."""

    def render(self, result: AnalysisResult, context: ReportContext) -> None:
        print(self.format(result, context))

    def format(self, result: AnalysisResult, context: ReportContext) -> str:
        data = result.to_dict()
        data["historyCount"] = context.history_count
        return json.dumps(data, indent=2, ensure_ascii=False)
