"""Reduce an accumulator to the three review scores.

Each reducer is a pure function of the accumulator: no I/O, no randomness,
and the result is always a finite float in [0, 100]. Scores start from a
ceiling and lose points for evidence of trouble, so adding an issue or more
complexity can only lower them.

An empty accumulator (nothing analyzed) scores 100 for quality and
performance and NEUTRAL_BEST_PRACTICES for best practices: with no coverage
evidence either way, best practices sits in the middle of its range.
"""

from __future__ import annotations

import math
from statistics import mean

from gitgud_core.analysis.accumulator import AnalysisAccumulator
from gitgud_core.errors import ReducerInputInvalid
from gitgud_core.models import Severity

MIN_SCORE = 0.0
MAX_SCORE = 100.0
NEUTRAL_BEST_PRACTICES = 75.0

SEVERITY_PENALTY = {Severity.INFO: 1.0, Severity.WARNING: 4.0, Severity.ERROR: 10.0}

# Issue kinds that speak to engineering practice rather than raw quality.
PRACTICE_PENALTY = {"style": 1.0, "documentation": 2.0, "bug-risk": 5.0}

# Average complexity / function length considered unremarkable.
COMPLEXITY_BASELINE = 5.0
FUNCTION_LENGTH_BASELINE = 25.0


def _clamp(score: float) -> float:
    return round(max(MIN_SCORE, min(MAX_SCORE, score)), 2)


def _mean_or_zero(values: list[float]) -> float:
    return mean(values) if values else 0.0


def validate(acc: AnalysisAccumulator) -> None:
    """Raise ReducerInputInvalid if the accumulator breaks its own invariants."""
    metrics_by_file = acc.metrics_by_file
    for issue in acc.issues:
        if issue.file not in metrics_by_file:
            raise ReducerInputInvalid(f"issue references unrecorded file {issue.file!r}")
    for name, metrics in metrics_by_file.items():
        for metric in metrics:
            if not math.isfinite(metric.value):
                raise ReducerInputInvalid(f"{name}: metric {metric.name} is {metric.value}")


def code_quality(acc: AnalysisAccumulator) -> float:
    complexity = _mean_or_zero(acc.metric_values("cyclomatic_complexity"))
    length = _mean_or_zero(acc.metric_values("function_length"))
    severity_counts = acc.severity_counts()

    penalty = max(0.0, complexity - COMPLEXITY_BASELINE) * 3.0
    penalty += max(0.0, length - FUNCTION_LENGTH_BASELINE) * 0.5
    penalty += sum(SEVERITY_PENALTY[severity] * count for severity, count in severity_counts.items())
    return _clamp(MAX_SCORE - penalty)


def performance(acc: AnalysisAccumulator) -> float:
    churn = sum(acc.metric_values("churn"))
    complexity = _mean_or_zero(acc.metric_values("cyclomatic_complexity"))

    # Logarithmic so a 10k-line diff is penalised, but not ten times a 1k-line one.
    penalty = 20.0 * math.log10(1.0 + churn / 100.0)
    penalty += max(0.0, complexity - COMPLEXITY_BASELINE) * 2.0
    return _clamp(MAX_SCORE - penalty)


def best_practices(acc: AnalysisAccumulator) -> float:
    coverage = acc.metric_values("test_coverage")
    baseline = 50.0 + mean(coverage) / 2.0 if coverage else NEUTRAL_BEST_PRACTICES
    kind_counts = acc.kind_counts()

    penalty = sum(PRACTICE_PENALTY.get(kind, 0.0) * count for kind, count in kind_counts.items())
    return _clamp(baseline - penalty)
