"""Shared machinery for brace-delimited languages (Go, Java, Rust, C).

Source is parsed with tree-sitter. Function spans come from definition nodes
and complexity from branch nodes, so layout (GNU-style C, annotated Java
methods) does not matter. Pattern checks run over a *masked* copy of the
source: comment and literal nodes are overwritten with spaces, newlines kept,
so line numbers match the original text and nothing inside a string or
comment is flagged.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from statistics import mean

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from gitgud_core.analysis.analyzers.base import AnalysisContext, Analyzer, Findings
from gitgud_core.errors import AnalyzerParseFailure
from gitgud_core.models import ChangedFile, Issue, Metric, Severity
from gitgud_core.utils.testfiles import find_test_file, is_test_file

MAX_LINE_LENGTH = 120
COMPLEXITY_WARNING = 10
COMPLEXITY_ERROR = 20
FUNCTION_LENGTH_WARNING = 60

# Comment and literal node types across the Go, Java, Rust and C grammars.
MASKED_TYPES = frozenset(
    {
        "comment",
        "line_comment",
        "block_comment",
        "interpreted_string_literal",
        "raw_string_literal",
        "rune_literal",
        "string_literal",
        "character_literal",
        "char_literal",
    }
)
_BOOLEAN_OPERATORS = frozenset({"&&", "||"})


@dataclass(frozen=True)
class FunctionSpan:
    name: str
    start_line: int
    end_line: int
    complexity: int

    @property
    def length(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass(frozen=True)
class Pattern:
    """A regex that flags a risky construct in masked source."""

    regex: re.Pattern
    kind: str
    severity: Severity
    description: str


def walk(node: Node, prune: frozenset[str] = frozenset()) -> Iterator[Node]:
    """Yield ``node`` and its descendants in document order.

    Children of nodes whose type is in ``prune`` are not visited.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if current.type not in prune:
            stack.extend(reversed(current.children))


def _line_of(node: Node) -> int:
    return node.start_point[0] + 1


def _line_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def first_syntax_error(root: Node) -> Node | None:
    """The first ERROR or MISSING node in document order, or None."""
    if not root.has_error:
        return None
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def mask_source(source: bytes, root: Node) -> str:
    """Blank out comment and literal nodes, keeping newlines."""
    masked = bytearray(source)
    for node in walk(root, prune=MASKED_TYPES):
        if node.type in MASKED_TYPES:
            for i in range(node.start_byte, node.end_byte):
                if masked[i] != 0x0A:
                    masked[i] = 0x20
    # Masked ranges end on character boundaries, so this cannot fail.
    return masked.decode("utf-8")


def estimate_test_coverage(file: ChangedFile, context: AnalysisContext) -> float:
    """Estimate how well a change is covered by tests changed alongside it.

    Test files count as fully covered. A source file is credited with the
    lines its paired test file adds relative to the lines it adds itself,
    capped at 100. Without a paired test file in the pull request the
    estimate is 0.
    """
    if is_test_file(file.name):
        return 100.0
    test_path = find_test_file(file.name, context.files)
    if test_path is None:
        return 0.0
    if file.additions == 0:
        return 100.0
    test_file = context.files[test_path]
    return round(min(100.0, 100.0 * test_file.additions / file.additions), 2)


class SourceAnalyzer(Analyzer):
    """Template for languages with a tree-sitter grammar.

    Subclasses set GRAMMAR (tree-sitter language name), FUNCTION_TYPES
    (definition node types), DECISION_TYPES (branch node types) and PATTERNS;
    they may extend _function_issues for language conventions.
    """

    LANGUAGE: str = ""
    GRAMMAR: str = ""
    FUNCTION_TYPES: frozenset[str] = frozenset()
    DECISION_TYPES: frozenset[str] = frozenset()
    PATTERNS: tuple[Pattern, ...] = ()

    METRIC_NAMES = ("function_length", "cyclomatic_complexity", "test_coverage", "churn")

    def _inspect(self, file: ChangedFile, text: str, context: AnalysisContext) -> Findings:
        source = text.encode("utf-8")
        # Parsers are not thread-safe; analyzers are shared across workers.
        root = get_parser(self.GRAMMAR).parse(source).root_node
        error = first_syntax_error(root)
        if error is not None:
            detail = f"missing {error.type!r}" if error.is_missing else "unexpected syntax"
            raise AnalyzerParseFailure(
                file.name, f"malformed {self.LANGUAGE} source at line {_line_of(error)}: {detail}"
            )

        masked = mask_source(source, root)
        functions = self.find_functions(root, source)
        # split("\n") rather than splitlines(): line numbers must agree with
        # tree-sitter rows, which only advance on "\n".
        lines = text.split("\n")
        metrics = [
            Metric(
                name="function_length",
                value=round(mean(f.length for f in functions), 2) if functions else 0.0,
                description="Average function length in lines",
            ),
            Metric(
                name="cyclomatic_complexity",
                value=round(mean(f.complexity for f in functions), 2) if functions else 0.0,
                description="Average cyclomatic complexity per function",
            ),
            Metric(
                name="test_coverage",
                value=estimate_test_coverage(file, context),
                description="Estimated test coverage percentage",
            ),
            Metric(
                name="churn",
                value=float(file.churn),
                description="Code churn (additions + deletions)",
            ),
        ]

        issues: list[Issue] = []
        for func in functions:
            issues.extend(self._function_issues(file, func, lines))
        issues.extend(self._pattern_issues(file, masked))
        issues.extend(self._line_issues(file, lines))
        # Stable order regardless of which check found what.
        issues.sort(key=lambda issue: issue.line)
        return metrics, issues

    def find_functions(self, root: Node, source: bytes) -> list[FunctionSpan]:
        functions = []
        for node in walk(root, prune=MASKED_TYPES):
            if node.type not in self.FUNCTION_TYPES or node.child_by_field_name("body") is None:
                continue  # declarations and prototypes have no body
            name_node = self._name_node(node)
            start = name_node if name_node is not None else node
            functions.append(
                FunctionSpan(
                    name=source[name_node.start_byte : name_node.end_byte].decode() if name_node else "<anonymous>",
                    start_line=_line_of(start),
                    end_line=node.end_point[0] + 1,
                    complexity=1 + self._count_decisions(node, source),
                )
            )
        return functions

    @staticmethod
    def _name_node(node: Node) -> Node | None:
        name = node.child_by_field_name("name")
        if name is not None:
            return name
        # C: the name sits at the bottom of a declarator chain,
        # e.g. pointer_declarator -> function_declarator -> identifier.
        declarator = node.child_by_field_name("declarator")
        while declarator is not None and declarator.type not in ("identifier", "field_identifier"):
            declarator = declarator.child_by_field_name("declarator")
        return declarator

    def _count_decisions(self, function: Node, source: bytes) -> int:
        # Nested definitions are measured on their own.
        prune = self.FUNCTION_TYPES | MASKED_TYPES
        count = 0
        for child in function.children:
            for node in walk(child, prune=prune):
                if self._is_decision(node, source):
                    count += 1
        return count

    def _is_decision(self, node: Node, source: bytes) -> bool:
        if node.type == "binary_expression":
            operator = node.child_by_field_name("operator")
            return operator is not None and operator.type in _BOOLEAN_OPERATORS
        if node.type not in self.DECISION_TYPES:
            return False
        # `default:` labels share a node type with `case` labels in C and Java.
        return not source[node.start_byte : node.end_byte].lstrip().startswith(b"default")

    def _function_issues(self, file: ChangedFile, func: FunctionSpan, lines: list[str]) -> list[Issue]:
        issues = []
        if func.complexity > COMPLEXITY_WARNING:
            severity = Severity.ERROR if func.complexity > COMPLEXITY_ERROR else Severity.WARNING
            issues.append(
                Issue(
                    file=file.name,
                    line=func.start_line,
                    kind="complexity",
                    severity=severity,
                    description=(
                        f"Function {func.name} has cyclomatic complexity {func.complexity} "
                        f"(threshold {COMPLEXITY_WARNING})"
                    ),
                )
            )
        if func.length > FUNCTION_LENGTH_WARNING:
            issues.append(
                Issue(
                    file=file.name,
                    line=func.start_line,
                    kind="complexity",
                    severity=Severity.WARNING,
                    description=f"Function {func.name} is {func.length} lines long (threshold {FUNCTION_LENGTH_WARNING})",
                )
            )
        return issues

    def _pattern_issues(self, file: ChangedFile, masked: str) -> list[Issue]:
        issues = []
        for pattern in self.PATTERNS:
            for match in pattern.regex.finditer(masked):
                issues.append(
                    Issue(
                        file=file.name,
                        line=_line_at(masked, match.start()),
                        kind=pattern.kind,
                        severity=pattern.severity,
                        description=pattern.description,
                    )
                )
        return issues

    @staticmethod
    def _line_issues(file: ChangedFile, lines: list[str]) -> list[Issue]:
        return [
            Issue(
                file=file.name,
                line=number,
                kind="style",
                severity=Severity.INFO,
                description=f"Line is {len(line)} characters long (limit {MAX_LINE_LENGTH})",
            )
            for number, line in enumerate((line.rstrip("\r") for line in lines), 1)
            if len(line) > MAX_LINE_LENGTH
        ]
