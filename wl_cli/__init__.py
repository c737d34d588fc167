"""Workload classification and time-entry validation."""

__version__ = "0.1.0"

from wl_cli.core.classify import classify, classify_with_context  # noqa: E402
from wl_cli.core.models import (  # noqa: E402
    ClassificationResult,
    ValidationIssue,
    ValidationResult,
    WorkloadEntry,
)
from wl_cli.core.validate import validate_workload  # noqa: E402
from wl_cli.utils.parsing import InvalidTimeFormat  # noqa: E402

__all__ = [
    "ClassificationResult",
    "InvalidTimeFormat",
    "ValidationIssue",
    "ValidationResult",
    "WorkloadEntry",
    "classify",
    "classify_with_context",
    "validate_workload",
]
