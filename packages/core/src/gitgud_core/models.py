"""Data model shared by the GitHub client, the analysis pipeline and the review service.

Kept free of PyGithub types so the pipeline can be driven from fixtures in
tests and from any hosting API that can describe a pull request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"

    @classmethod
    def from_github(cls, status: str | None) -> FileStatus:
        """Map a GitHub file status onto the four statuses the pipeline knows.

        GitHub also reports ``copied``, ``changed`` and ``unchanged``; all of
        them leave content at the head commit, so they analyze as modified.
        """
        try:
            return cls(status)
        except ValueError:
            return cls.MODIFIED


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ChangedFile:
    """One file touched by a pull request."""

    name: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    contents_url: str = ""

    def __post_init__(self):
        if min(self.additions, self.deletions, self.changes) < 0:
            raise ValueError(f"{self.name}: diff statistics must be non-negative")
        if self.changes != self.additions + self.deletions:
            raise ValueError(
                f"{self.name}: changes ({self.changes}) must equal additions + deletions "
                f"({self.additions} + {self.deletions})"
            )

    @property
    def churn(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class Issue:
    """A finding tied to a file. ``line`` is 0 for file-scoped findings."""

    file: str
    line: int
    kind: str  # "style" | "complexity" | "bug-risk" | "documentation"
    severity: Severity
    description: str

    def __post_init__(self):
        if self.line < 0:
            raise ValueError(f"{self.file}: issue line must be positive or 0, got {self.line}")

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "type": self.kind,
            "severity": self.severity.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class Metric:
    name: str
    value: float
    description: str

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value, "description": self.description}


@dataclass
class PullRequest:
    owner: str
    repo: str
    number: int
    title: str = ""
    description: str = ""
    head_sha: str = ""
    files: list[ChangedFile] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one pipeline run. Created once and never mutated."""

    code_quality: float
    performance: float
    best_practices: float
    issues: tuple[Issue, ...] = ()
    metrics_by_file: dict[str, tuple[Metric, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "code_quality": self.code_quality,
            "performance": self.performance,
            "best_practices": self.best_practices,
            "issues": [i.to_dict() for i in self.issues],
            "metrics": {name: [m.to_dict() for m in metrics] for name, metrics in self.metrics_by_file.items()},
        }
