"""Analyzer selection by kind.

The orchestrator only ever talks to the registry, so adding a language means
adding a suffix to the classifier table and an entry here.
"""

from __future__ import annotations

from gitgud_core.analysis.analyzers.base import Analyzer, PendingAnalyzer
from gitgud_core.analysis.analyzers.generic import GenericAnalyzer
from gitgud_core.analysis.analyzers.languages import CAnalyzer, GoAnalyzer, JavaAnalyzer, RustAnalyzer
from gitgud_core.analysis.classifier import AnalyzerKind


class AnalyzerRegistry:
    def __init__(self, analyzers: dict[AnalyzerKind, Analyzer] | None = None, fallback: Analyzer | None = None):
        self._analyzers: dict[AnalyzerKind, Analyzer] = dict(analyzers or {})
        self._fallback = fallback or GenericAnalyzer()

    def register(self, kind: AnalyzerKind, analyzer: Analyzer) -> None:
        self._analyzers[kind] = analyzer

    def get(self, kind: AnalyzerKind) -> Analyzer:
        return self._analyzers.get(kind, self._fallback)

    def __contains__(self, kind: AnalyzerKind) -> bool:
        return kind in self._analyzers


def default_registry() -> AnalyzerRegistry:
    return AnalyzerRegistry(
        {
            AnalyzerKind.GO: GoAnalyzer(),
            AnalyzerKind.JAVA: JavaAnalyzer(),
            AnalyzerKind.RUST: RustAnalyzer(),
            AnalyzerKind.C: CAnalyzer(),
            # TODO: JavaScript needs masking for regex literals and template strings;
            # Python needs indentation-based function spans.
            AnalyzerKind.JAVASCRIPT: PendingAnalyzer("JavaScript"),
            AnalyzerKind.PYTHON: PendingAnalyzer("Python"),
            AnalyzerKind.GENERIC: GenericAnalyzer(),
        }
    )
