from __future__ import annotations

from gitgud_core.analysis.analyzers.base import AnalysisContext, Analyzer, Findings
from gitgud_core.models import ChangedFile, Metric


class GenericAnalyzer(Analyzer):
    """Fallback for files no language analyzer claims.

    Works from the diff statistics alone, so it never fetches content and
    cannot fail.
    """

    METRIC_NAMES = ("file_size", "churn")

    def analyze(self, file: ChangedFile, context: AnalysisContext) -> Findings:
        return self._inspect(file, "", context)

    def _inspect(self, file: ChangedFile, text: str, context: AnalysisContext) -> Findings:
        metrics = [
            Metric(name="file_size", value=float(file.changes), description="File size in changed lines"),
            Metric(name="churn", value=float(file.churn), description="Code churn (additions + deletions)"),
        ]
        return metrics, []
