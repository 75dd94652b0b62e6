"""Concrete analyzers for the brace-delimited languages."""

from __future__ import annotations

import re

from gitgud_core.analysis.analyzers.source import FunctionSpan, Pattern, SourceAnalyzer
from gitgud_core.models import ChangedFile, Issue, Severity
from gitgud_core.utils.testfiles import is_test_file


class GoAnalyzer(SourceAnalyzer):
    LANGUAGE = "Go"
    GRAMMAR = "go"
    FUNCTION_TYPES = frozenset({"function_declaration", "method_declaration"})
    DECISION_TYPES = frozenset({"if_statement", "for_statement", "expression_case", "type_case", "communication_case"})
    PATTERNS = (
        Pattern(
            re.compile(r"\bpanic\("),
            "bug-risk",
            Severity.WARNING,
            "panic() aborts the program; return an error instead",
        ),
        Pattern(
            re.compile(r"^[ \t]*_(?:[ \t]*,[ \t]*_)*[ \t]*=[ \t]*[\w.]+\(", re.MULTILINE),
            "bug-risk",
            Severity.WARNING,
            "Return value discarded with '_'; check the error",
        ),
    )

    def _function_issues(self, file: ChangedFile, func: FunctionSpan, lines: list[str]) -> list[Issue]:
        issues = super()._function_issues(file, func, lines)
        if func.name[:1].isupper() and not is_test_file(file.name) and not self._has_doc_comment(lines, func):
            issues.append(
                Issue(
                    file=file.name,
                    line=func.start_line,
                    kind="documentation",
                    severity=Severity.INFO,
                    description=f"Exported function {func.name} should have a doc comment",
                )
            )
        return issues

    @staticmethod
    def _has_doc_comment(lines: list[str], func: FunctionSpan) -> bool:
        index = func.start_line - 2  # line above the signature, 0-based
        return index >= 0 and lines[index].lstrip().startswith("//")


class JavaAnalyzer(SourceAnalyzer):
    LANGUAGE = "Java"
    GRAMMAR = "java"
    FUNCTION_TYPES = frozenset({"method_declaration", "constructor_declaration"})
    DECISION_TYPES = frozenset(
        {
            "if_statement",
            "for_statement",
            "enhanced_for_statement",
            "while_statement",
            "do_statement",
            "catch_clause",
            "ternary_expression",
            "switch_label",
        }
    )
    PATTERNS = (
        Pattern(
            re.compile(r"\bcatch\s*\([^)]*\)\s*\{\s*\}"),
            "bug-risk",
            Severity.ERROR,
            "Empty catch block swallows the exception",
        ),
        Pattern(
            re.compile(r"\.printStackTrace\(\s*\)"),
            "bug-risk",
            Severity.WARNING,
            "printStackTrace() bypasses logging; log the exception instead",
        ),
        Pattern(
            re.compile(r"\bSystem\.(?:out|err)\.print"),
            "style",
            Severity.INFO,
            "Use a logger instead of System.out / System.err",
        ),
    )


class RustAnalyzer(SourceAnalyzer):
    LANGUAGE = "Rust"
    GRAMMAR = "rust"
    # function_signature_item (trait declarations) has no body and is not listed.
    FUNCTION_TYPES = frozenset({"function_item"})
    DECISION_TYPES = frozenset(
        {
            "if_expression",
            "if_let_expression",
            "for_expression",
            "while_expression",
            "while_let_expression",
            "loop_expression",
            "match_arm",
        }
    )
    PATTERNS = (
        Pattern(
            re.compile(r"\.unwrap\(\)"),
            "bug-risk",
            Severity.WARNING,
            "unwrap() panics on None/Err; propagate the error with '?'",
        ),
        Pattern(
            re.compile(r"\bunsafe\s*\{"),
            "bug-risk",
            Severity.WARNING,
            "unsafe block; document the invariants it relies on",
        ),
        Pattern(
            re.compile(r"\b(?:panic|todo|unimplemented)!\("),
            "bug-risk",
            Severity.WARNING,
            "Macro panics at runtime",
        ),
    )


class CAnalyzer(SourceAnalyzer):
    LANGUAGE = "C"
    GRAMMAR = "c"
    FUNCTION_TYPES = frozenset({"function_definition"})
    DECISION_TYPES = frozenset(
        {"if_statement", "for_statement", "while_statement", "do_statement", "case_statement", "conditional_expression"}
    )
    PATTERNS = (
        Pattern(
            re.compile(r"\bgets\s*\("),
            "bug-risk",
            Severity.ERROR,
            "gets() cannot bound its input; use fgets()",
        ),
        Pattern(
            re.compile(r"\b(?:strcpy|strcat|sprintf)\s*\("),
            "bug-risk",
            Severity.WARNING,
            "Unbounded string function; use the length-checked variant",
        ),
    )
