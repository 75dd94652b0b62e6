"""Exception hierarchy for gitgud.

Every error raised on purpose by gitgud derives from GitGudError so the API
and CLI layers can map the whole family onto responses in one place.
"""

from __future__ import annotations


class GitGudError(Exception):
    """Base class for all gitgud errors."""


# --------------------------------------------------------------------------- #
# Hosting API                                                                  #
# --------------------------------------------------------------------------- #


class HostingError(GitGudError):
    """The hosting API could not serve a request."""


class PullRequestNotFound(HostingError):
    pass


class RateLimited(HostingError):
    pass


class TransportError(HostingError):
    pass


# --------------------------------------------------------------------------- #
# Analysis                                                                     #
# --------------------------------------------------------------------------- #


class AnalysisError(GitGudError):
    """A single file could not be analyzed.

    Carries the offending file name so callers can report it without parsing
    the message.
    """

    def __init__(self, file: str, cause: str | BaseException):
        self.file = file
        self.cause = cause
        super().__init__(f"failed to analyze file {file}: {cause}")


class AnalyzerFetchFailure(AnalysisError):
    """The file's content could not be retrieved."""


class AnalyzerParseFailure(AnalysisError):
    """The file's content is malformed for the language it claims to be."""


class AnalysisCanceled(GitGudError):
    """The caller cancelled the run, or its deadline passed."""


class ReducerInputInvalid(GitGudError):
    """The accumulator reached the score reducer in an inconsistent state."""


# --------------------------------------------------------------------------- #
# Review service                                                               #
# --------------------------------------------------------------------------- #


class ReviewNotFound(GitGudError):
    def __init__(self, review_id: str):
        self.review_id = review_id
        super().__init__(f"review {review_id} not found")
