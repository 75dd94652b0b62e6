"""Map a changed file to the analyzer kind that should inspect it."""

from __future__ import annotations

from enum import Enum

from gitgud_core.models import ChangedFile


class AnalyzerKind(str, Enum):
    GO = "go"
    JAVA = "java"
    RUST = "rust"
    C = "c"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    GENERIC = "generic"


# Suffix table. Matching is case-sensitive and the longest matching suffix
# wins, so more specific entries (".pb.go") override broader ones (".go").
SUFFIX_KINDS: dict[str, AnalyzerKind] = {
    ".go": AnalyzerKind.GO,
    ".pb.go": AnalyzerKind.GENERIC,  # protoc output, not hand-written Go
    ".java": AnalyzerKind.JAVA,
    ".rs": AnalyzerKind.RUST,
    ".c": AnalyzerKind.C,
    ".h": AnalyzerKind.C,
    ".js": AnalyzerKind.JAVASCRIPT,
    ".jsx": AnalyzerKind.JAVASCRIPT,
    ".mjs": AnalyzerKind.JAVASCRIPT,
    ".py": AnalyzerKind.PYTHON,
}


def classify_name(file_name: str, table: dict[str, AnalyzerKind] | None = None) -> AnalyzerKind:
    table = SUFFIX_KINDS if table is None else table
    best: str | None = None
    for suffix in table:
        if file_name.endswith(suffix) and (best is None or len(suffix) > len(best)):
            best = suffix
    return table[best] if best is not None else AnalyzerKind.GENERIC


def classify(file: ChangedFile, table: dict[str, AnalyzerKind] | None = None) -> AnalyzerKind:
    """Return the analyzer kind for a changed file. Never fails."""
    return classify_name(file.name, table)
