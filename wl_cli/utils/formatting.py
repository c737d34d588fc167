"""Formatting helpers used by console output."""

from __future__ import annotations

from typing import Sequence

from rich.table import Table

from wl_cli.core.constants import CATEGORY_LABELS
from wl_cli.core.models import ClassificationResult, ValidationIssue

SEVERITY_STYLES = {"high": "bold red", "medium": "yellow", "low": "cyan"}


def format_confidence(confidence: float) -> str:
    """Format a 0-1 confidence as a whole percentage."""
    return f"{round(confidence * 100)}%"


def format_classification(result: ClassificationResult) -> str:
    label = CATEGORY_LABELS.get(result.category.value, result.category.value)
    return f"{label} ({result.category.value}) - {format_confidence(result.confidence)} confidence"


def issues_table(issues: Sequence[ValidationIssue]) -> Table:
    """Build a rich table listing issues in check order."""
    table = Table(title="Validation issues", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Message")
    table.add_column("Suggestions")

    for idx, issue in enumerate(issues, 1):
        severity = issue.severity.value
        table.add_row(
            str(idx),
            issue.type.value,
            f"[{SEVERITY_STYLES[severity]}]{severity}[/]",
            issue.message,
            "\n".join(issue.suggestions),
        )
    return table


def format_issue_line(issue: ValidationIssue) -> str:
    """One-line rendering for plain output."""
    return f"{issue.severity.value.upper()} {issue.type.value}: {issue.message}"
