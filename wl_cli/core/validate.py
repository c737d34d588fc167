"""Time-entry validation: overlap, impossible hours, suspicious patterns, anomalies."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from wl_cli.core.classify import Rules, classify
from wl_cli.core.constants import (
    CATEGORY_RULES,
    DEFAULT_VALIDATION_THRESHOLDS,
    SEVERITY_PENALTIES,
    SUGGESTION_CONFIDENCE_THRESHOLD,
)
from wl_cli.core.models import IssueType, Severity, ValidationIssue, ValidationResult, WorkloadEntry
from wl_cli.utils.parsing import parse_time

logger = logging.getLogger(__name__)

Issues = Tuple[ValidationIssue, ...]


@dataclass(frozen=True)
class ValidationThresholds:
    """Limits used by the validation checks."""

    max_session_hours: float = DEFAULT_VALIDATION_THRESHOLDS["max_session_hours"]
    min_session_hours: float = DEFAULT_VALIDATION_THRESHOLDS["min_session_hours"]
    max_daily_hours: float = DEFAULT_VALIDATION_THRESHOLDS["max_daily_hours"]
    anomaly_min_entries: int = DEFAULT_VALIDATION_THRESHOLDS["anomaly_min_entries"]
    iqr_multiplier: float = DEFAULT_VALIDATION_THRESHOLDS["iqr_multiplier"]
    suggestion_confidence: float = SUGGESTION_CONFIDENCE_THRESHOLD


DEFAULT_THRESHOLDS = ValidationThresholds()


def thresholds_from_config(config: Dict[str, Any]) -> ValidationThresholds:
    """Build thresholds from the [validation] table, falling back to defaults."""
    section = config.get("validation", {}) or {}
    suggestion = config.get("classification", {}).get(
        "suggestion_threshold", SUGGESTION_CONFIDENCE_THRESHOLD
    )
    return ValidationThresholds(
        max_session_hours=float(section.get("max_session_hours", DEFAULT_THRESHOLDS.max_session_hours)),
        min_session_hours=float(section.get("min_session_hours", DEFAULT_THRESHOLDS.min_session_hours)),
        max_daily_hours=float(section.get("max_daily_hours", DEFAULT_THRESHOLDS.max_daily_hours)),
        anomaly_min_entries=int(section.get("anomaly_min_entries", DEFAULT_THRESHOLDS.anomaly_min_entries)),
        iqr_multiplier=float(section.get("iqr_multiplier", DEFAULT_THRESHOLDS.iqr_multiplier)),
        suggestion_confidence=float(suggestion),
    )


def _is_same_entry(entry: WorkloadEntry, other: WorkloadEntry) -> bool:
    """Entries are the same only when both carry an equal, non-None id.

    Two entries without ids are treated as different and still compared.
    """
    return entry.id is not None and other.id == entry.id


def _other_same_day(entry: WorkloadEntry, existing_entries: Sequence[WorkloadEntry]) -> List[WorkloadEntry]:
    return [
        other
        for other in existing_entries
        if not _is_same_entry(entry, other) and other.date == entry.date
    ]


def _is_overlapping(start1: int, end1: int, start2: int, end2: int) -> bool:
    return start1 < end2 and start2 < end1


def check_overlaps(entry: WorkloadEntry, existing_entries: Sequence[WorkloadEntry]) -> Issues:
    """One high-severity issue per same-day entry whose time range intersects this one."""
    start = parse_time(entry.time_in)
    end = parse_time(entry.time_out)

    issues: List[ValidationIssue] = []
    for other in _other_same_day(entry, existing_entries):
        if _is_overlapping(start, end, parse_time(other.time_in), parse_time(other.time_out)):
            issues.append(
                ValidationIssue(
                    type=IssueType.OVERLAP,
                    severity=Severity.HIGH,
                    message=f"Time overlap detected with existing entry ({other.time_in}-{other.time_out})",
                    suggestions=(
                        "Adjust time to avoid overlap",
                        "Check if this is a continuation of previous work",
                        "Consider combining entries if same activity",
                    ),
                )
            )
    return tuple(issues)


def check_impossible_hours(
    entry: WorkloadEntry,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> Issues:
    """Flag reversed times, over-long sessions and very short sessions independently."""
    issues: List[ValidationIssue] = []

    if parse_time(entry.time_out) <= parse_time(entry.time_in):
        issues.append(
            ValidationIssue(
                type=IssueType.IMPOSSIBLE_HOURS,
                severity=Severity.HIGH,
                message="End time must be after start time",
                suggestions=("Correct the time-out to be after time-in",),
            )
        )

    if entry.total_hours > thresholds.max_session_hours:
        issues.append(
            ValidationIssue(
                type=IssueType.IMPOSSIBLE_HOURS,
                severity=Severity.MEDIUM,
                message=f"Work session exceeds {thresholds.max_session_hours:g} hours",
                suggestions=(
                    "Break into multiple shorter sessions",
                    "Verify if this includes breaks",
                    "Consider splitting across multiple days",
                ),
            )
        )

    if entry.total_hours < thresholds.min_session_hours:
        minutes = round(thresholds.min_session_hours * 60)
        issues.append(
            ValidationIssue(
                type=IssueType.IMPOSSIBLE_HOURS,
                severity=Severity.LOW,
                message=f"Work session is very short (less than {minutes} minutes)",
                suggestions=(
                    "Consider if this is worth logging",
                    "Check if time was rounded incorrectly",
                ),
            )
        )

    return tuple(issues)


def check_suspicious_patterns(
    entry: WorkloadEntry,
    existing_entries: Sequence[WorkloadEntry],
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> Issues:
    """Detect duplicate same-day entries and excessive daily totals."""
    issues: List[ValidationIssue] = []
    same_day = _other_same_day(entry, existing_entries)
    activity = entry.activity.lower()

    if any(
        other.activity.lower() == activity and other.total_hours == entry.total_hours
        for other in same_day
    ):
        issues.append(
            ValidationIssue(
                type=IssueType.SUSPICIOUS_PATTERN,
                severity=Severity.MEDIUM,
                message="Identical work entry already exists for this day",
                suggestions=(
                    "Verify if this is a duplicate entry",
                    "Consider if work was actually repeated",
                ),
            )
        )

    total_for_day = sum(other.total_hours for other in same_day) + entry.total_hours
    if total_for_day > thresholds.max_daily_hours:
        issues.append(
            ValidationIssue(
                type=IssueType.SUSPICIOUS_PATTERN,
                severity=Severity.HIGH,
                message=(
                    f"Total work hours for day exceed {thresholds.max_daily_hours:g} hours "
                    f"({total_for_day:.1f}h)"
                ),
                suggestions=(
                    "Review all entries for this day",
                    "Ensure breaks are accounted for",
                    "Check for data entry errors",
                ),
            )
        )

    return tuple(issues)


def nearest_rank_quartiles(values: Sequence[float]) -> Tuple[float, float]:
    """Return (q1, q3) by nearest-rank selection: sorted[floor(n * q)]."""
    ordered = sorted(values)
    if not ordered:
        raise ValueError("quartiles require at least one value")
    n = len(ordered)
    return ordered[math.floor(n * 0.25)], ordered[math.floor(n * 0.75)]


def detect_anomalies(
    entry: WorkloadEntry,
    existing_entries: Sequence[WorkloadEntry],
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> Issues:
    """Flag a duration outside the user's Tukey fences.

    The first guard counts all supplied entries; the second counts only the
    same user's history. Both must reach ``anomaly_min_entries``.
    """
    if len(existing_entries) < thresholds.anomaly_min_entries:
        return ()

    history = [
        other.total_hours
        for other in existing_entries
        if other.user_id == entry.user_id and not _is_same_entry(entry, other)
    ]
    if len(history) < thresholds.anomaly_min_entries:
        return ()

    q1, q3 = nearest_rank_quartiles(history)
    iqr = q3 - q1
    lower = q1 - thresholds.iqr_multiplier * iqr
    upper = q3 + thresholds.iqr_multiplier * iqr
    logger.debug("Duration fences for user %s: [%.2f, %.2f]", entry.user_id, lower, upper)

    if lower <= entry.total_hours <= upper:
        return ()
    return (
        ValidationIssue(
            type=IssueType.ANOMALY,
            severity=Severity.MEDIUM,
            message="Work duration is unusual compared to typical patterns",
            suggestions=(
                "Verify the accuracy of time logged",
                "Consider if this represents exceptional circumstances",
                "Check for data entry errors",
            ),
        ),
    )


def validate_workload(
    entry: WorkloadEntry,
    existing_entries: Optional[Sequence[WorkloadEntry]] = None,
    thresholds: Optional[ValidationThresholds] = None,
    rules: Rules = CATEGORY_RULES,
) -> ValidationResult:
    """Run all checks against a snapshot of existing entries and aggregate the verdict.

    Raises ``InvalidTimeFormat`` if any entry carries an unparseable time.
    """
    existing = list(existing_entries or [])
    limits = thresholds or DEFAULT_THRESHOLDS
    for item in [entry, *existing]:
        parse_time(item.time_in)
        parse_time(item.time_out)

    issues: Issues = (
        check_overlaps(entry, existing)
        + check_impossible_hours(entry, limits)
        + check_suspicious_patterns(entry, existing, limits)
        + detect_anomalies(entry, existing, limits)
    )

    suggestions: Tuple[str, ...] = ()
    classification = classify(entry.activity, rules)
    if classification.confidence > limits.suggestion_confidence:
        suggestions = (
            f"Activity appears to be: {classification.category.value} "
            f"({round(classification.confidence * 100)}% confidence)",
        )

    high = sum(1 for issue in issues if issue.severity is Severity.HIGH)
    medium = sum(1 for issue in issues if issue.severity is Severity.MEDIUM)
    penalty = high * SEVERITY_PENALTIES["high"] + medium * SEVERITY_PENALTIES["medium"]
    # Rounded so 1 - (0.5 + 0.3) reports 0.2, not 0.19999999999999996.
    confidence = round(max(0.0, 1 - penalty), 4)

    logger.debug("Validation issues: %s", [(issue.type.value, issue.severity.value) for issue in issues])
    logger.info(
        "Validated entry %s: %d issue(s), valid=%s, confidence=%.2f",
        entry.id,
        len(issues),
        high == 0,
        confidence,
    )
    return ValidationResult(
        is_valid=high == 0,
        issues=issues,
        confidence=confidence,
        suggestions=suggestions,
    )


def validation_notes(result: ValidationResult) -> Optional[str]:
    """Issue messages joined with '; ', or None when the entry is clean."""
    if not result.issues:
        return None
    return "; ".join(issue.message for issue in result.issues)


def needs_review(result: ValidationResult) -> bool:
    return not result.is_valid
