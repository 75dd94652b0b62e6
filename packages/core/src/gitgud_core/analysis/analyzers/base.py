"""Analyzer contract shared by every language variant.

All analyzers expose the same entry point:
    analyze(file, context) -> (metrics, issues)

Analyzers that read source follow one algorithm:
    analyze() -> context.load() -> _decode() -> _inspect()   <- only this differs per language

Analyzers that never read content (the generic fallback, languages whose
logic is not written yet) override analyze() directly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Protocol

from gitgud_core.cancel import CancelToken
from gitgud_core.errors import AnalysisCanceled, AnalyzerFetchFailure, AnalyzerParseFailure, HostingError
from gitgud_core.models import ChangedFile, FileStatus, Issue, Metric

logger = logging.getLogger(__name__)


class ContentFetcher(Protocol):
    """Reads the head-commit content of a changed file.

    Implementations raise a HostingError subclass on failure. They must not
    retry; retry policy belongs to the hosting client.
    """

    def fetch(self, file: ChangedFile) -> bytes: ...


@dataclass
class AnalysisContext:
    """Per-run collaborators handed to every analyzer call."""

    fetcher: ContentFetcher
    cancel_token: CancelToken = field(default_factory=CancelToken)
    # Every non-removed file in the pull request, keyed by name. Lets
    # analyzers relate a file to its siblings (e.g. a paired test file).
    files: dict[str, ChangedFile] = field(default_factory=dict)

    @classmethod
    def for_files(cls, fetcher: ContentFetcher, files, cancel_token: CancelToken | None = None) -> AnalysisContext:
        return cls(
            fetcher=fetcher,
            cancel_token=cancel_token or CancelToken(),
            files={f.name: f for f in files if f.status != FileStatus.REMOVED},
        )

    def load(self, file: ChangedFile) -> bytes:
        """Fetch a file's content, honouring cancellation."""
        self.cancel_token.raise_if_cancelled()
        try:
            content = self.fetcher.fetch(file)
        except AnalysisCanceled:
            raise
        except HostingError as e:
            raise AnalyzerFetchFailure(file.name, e) from e
        # A fetch that finished after cancellation is discarded, not analyzed.
        self.cancel_token.raise_if_cancelled()
        return content


Findings = tuple[list[Metric], list[Issue]]


class Analyzer(ABC):
    """Inspects one changed file and reports metrics and issues."""

    # Metric names this analyzer reports, in emission order. Stable per
    # analyzer so dashboards and the score reducer can rely on them.
    METRIC_NAMES: tuple[str, ...] = ()

    def analyze(self, file: ChangedFile, context: AnalysisContext) -> Findings:
        raw = context.load(file)
        text = self._decode(file, raw)
        return self._inspect(file, text, context)

    @abstractmethod
    def _inspect(self, file: ChangedFile, text: str, context: AnalysisContext) -> Findings:
        """Compute metrics and issues from decoded source text."""

    @staticmethod
    def _decode(file: ChangedFile, raw: bytes) -> str:
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise AnalyzerParseFailure(file.name, f"content is not valid UTF-8 ({e.reason})") from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class PendingAnalyzer(Analyzer):
    """Placeholder for a language whose analysis has not been written yet.

    Reports nothing and fetches nothing. The file still appears in the
    result with an empty metric list.
    """

    def __init__(self, language: str):
        self.language = language

    def analyze(self, file: ChangedFile, context: AnalysisContext) -> Findings:
        logger.debug("No %s analysis available yet; %s reported without metrics", self.language, file.name)
        return [], []

    def _inspect(self, file: ChangedFile, text: str, context: AnalysisContext) -> Findings:
        return [], []

    def __repr__(self) -> str:
        return f"PendingAnalyzer({self.language!r})"
