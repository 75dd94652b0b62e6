"""Analysis pipeline orchestration.

    run(pull_request)
      -> drop removed files
      -> classify + analyze each file   (on a thread pool of max_workers threads)
      -> record into a fresh accumulator, in pull-request file order
      -> validate + reduce three scores
      -> AnalysisResult

Error policy is fail-fast: the first file that cannot be analyzed aborts the
run and its AnalysisError names the file. No partial result is returned.
"First" means first in file-list order, so the reported file does not
depend on scheduling. The orchestrator never blocks on a fetch itself: it
polls the cancel token while workers run, so cancellation returns promptly
even when a single file is being fetched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from gitgud_core.analysis import scoring
from gitgud_core.analysis.accumulator import AnalysisAccumulator
from gitgud_core.analysis.analyzers.base import AnalysisContext, ContentFetcher, Findings
from gitgud_core.analysis.analyzers.registry import AnalyzerRegistry, default_registry
from gitgud_core.analysis.classifier import AnalyzerKind, classify
from gitgud_core.cancel import CancelToken
from gitgud_core.errors import AnalysisCanceled
from gitgud_core.models import AnalysisResult, ChangedFile, FileStatus, PullRequest

logger = logging.getLogger(__name__)

# How often a waiting orchestrator re-checks the cancel token.
_POLL_INTERVAL = 0.05


class AnalysisPipeline:
    def __init__(
        self,
        fetcher: ContentFetcher,
        registry: AnalyzerRegistry | None = None,
        max_workers: int = 1,
        classifier: Callable[[ChangedFile], AnalyzerKind] = classify,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.fetcher = fetcher
        self.registry = registry or default_registry()
        self.max_workers = max_workers
        self.classifier = classifier

    def run(self, pull_request: PullRequest, cancel_token: CancelToken | None = None) -> AnalysisResult:
        """Analyze every non-removed file of ``pull_request``.

        Raises AnalysisError for the first file that fails and
        AnalysisCanceled if ``cancel_token`` fires before the run completes.
        """
        token = cancel_token or CancelToken()
        token.raise_if_cancelled()

        files = self._analyzable_files(pull_request.files)
        # Workers share a child token so a failing file stops the others
        # without cancelling the caller's token.
        run_token = token.child()
        context = AnalysisContext.for_files(self.fetcher, files, run_token)

        try:
            findings = self._analyze_files(files, context, token)
        except AnalysisCanceled:
            logger.warning("Analysis of %s#%d cancelled", pull_request.full_name, pull_request.number)
            raise
        finally:
            run_token.cancel()

        accumulator = AnalysisAccumulator()
        for file, (metrics, issues) in zip(files, findings):
            accumulator.record(file, metrics, issues)

        scoring.validate(accumulator)
        result = AnalysisResult(
            code_quality=scoring.code_quality(accumulator),
            performance=scoring.performance(accumulator),
            best_practices=scoring.best_practices(accumulator),
            issues=tuple(accumulator.issues),
            metrics_by_file={name: tuple(metrics) for name, metrics in accumulator.metrics_by_file.items()},
        )
        logger.info(
            "Analyzed %d file(s) of %s#%d: %d issue(s), quality %.1f, performance %.1f, best practices %.1f",
            len(files),
            pull_request.full_name,
            pull_request.number,
            len(result.issues),
            result.code_quality,
            result.performance,
            result.best_practices,
        )
        return result

    @staticmethod
    def _analyzable_files(files: list[ChangedFile]) -> list[ChangedFile]:
        seen: set[str] = set()
        result = []
        for file in files:
            if file.status == FileStatus.REMOVED:
                continue
            if file.name in seen:
                logger.warning("Duplicate entry for %s in pull request file list; keeping the first", file.name)
                continue
            seen.add(file.name)
            result.append(file)
        return result

    def _analyze_one(self, file: ChangedFile, context: AnalysisContext) -> Findings:
        kind = self.classifier(file)
        analyzer = self.registry.get(kind)
        logger.debug("Analyzing %s as %s with %r", file.name, kind.value, analyzer)
        return analyzer.analyze(file, context)

    def _analyze_files(
        self,
        files: list[ChangedFile],
        context: AnalysisContext,
        token: CancelToken,
    ) -> list[Findings]:
        if not files:
            return []
        workers = min(self.max_workers, len(files))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gitgud-analyze")
        futures: list[Future] = []
        findings: list[Findings] = []

        def submit_more() -> None:
            # At most `workers` files in flight, and nothing new once a file has failed.
            if any(f.done() and f.exception() is not None for f in futures):
                return
            running = sum(1 for f in futures if not f.done())
            while len(futures) < len(files) and running < workers:
                futures.append(executor.submit(self._analyze_one, files[len(futures)], context))
                running += 1

        try:
            while len(findings) < len(files):
                submit_more()
                running = [f for f in futures[len(findings) :] if not f.done()]
                if running:
                    wait(running, timeout=_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                # Results are taken in file order, so the reported failure
                # does not depend on scheduling.
                while len(findings) < len(futures) and futures[len(findings)].done():
                    findings.append(futures[len(findings)].result())
                if len(findings) < len(files):
                    token.raise_if_cancelled()
        except BaseException:
            # Do not wait for in-flight fetches; their results are discarded.
            context.cancel_token.cancel()
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)
        return findings
