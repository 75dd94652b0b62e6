"""Cancellation signal threaded through a pipeline run."""

from __future__ import annotations

import threading
import time

from gitgud_core.errors import AnalysisCanceled


class CancelToken:
    """Explicit cancellation plus an optional monotonic deadline.

    Safe to share between the thread that owns a run and its workers: the
    flag is a threading.Event and the deadline is fixed at construction.
    """

    def __init__(self, deadline: float | None = None, parent: CancelToken | None = None):
        self._event = threading.Event()
        self._parent = parent
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float | None) -> CancelToken:
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    def child(self) -> CancelToken:
        """A token cancelled with this one, which can also be cancelled on its own."""
        return CancelToken(parent=self)

    def cancel(self) -> None:
        self._event.set()

    def _is_set(self) -> bool:
        return self._event.is_set() or (self._parent is not None and self._parent._is_set())

    @property
    def cancelled(self) -> bool:
        if self._is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        if self._is_set():
            raise AnalysisCanceled("analysis cancelled by caller")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise AnalysisCanceled("analysis deadline exceeded")
