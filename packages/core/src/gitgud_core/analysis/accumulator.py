"""Mutable aggregate of one pipeline run."""

from __future__ import annotations

import threading
from collections import Counter

from gitgud_core.models import ChangedFile, Issue, Metric, Severity


class AnalysisAccumulator:
    """Collects per-file metrics and a flat issue list across a pull request.

    Append-only. ``record`` holds a lock so one file's metrics and issues are
    never interleaved with another's, but ordering is the caller's concern:
    issues appear in the order ``record`` is called.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._issues: list[Issue] = []
        self._metrics: dict[str, list[Metric]] = {}

    def record(self, file: ChangedFile, metrics: list[Metric], issues: list[Issue]) -> None:
        with self._lock:
            self._issues.extend(issues)
            self._metrics[file.name] = list(metrics)

    @property
    def issues(self) -> list[Issue]:
        with self._lock:
            return list(self._issues)

    @property
    def metrics_by_file(self) -> dict[str, list[Metric]]:
        with self._lock:
            return {name: list(metrics) for name, metrics in self._metrics.items()}

    def metric_values(self, name: str) -> list[float]:
        """Values of one metric across every file that reports it."""
        with self._lock:
            return [m.value for metrics in self._metrics.values() for m in metrics if m.name == name]

    def severity_counts(self) -> Counter[Severity]:
        with self._lock:
            return Counter(issue.severity for issue in self._issues)

    def kind_counts(self) -> Counter[str]:
        with self._lock:
            return Counter(issue.kind for issue in self._issues)

    def __len__(self) -> int:
        return len(self._metrics)
