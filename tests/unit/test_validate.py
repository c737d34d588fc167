from __future__ import annotations

from datetime import date
from typing import List

import pytest

from wl_cli.core.models import IssueType, Severity, ValidationIssue, ValidationResult, WorkloadEntry
from wl_cli.core.validate import (
    ValidationThresholds,
    check_impossible_hours,
    check_overlaps,
    check_suspicious_patterns,
    detect_anomalies,
    nearest_rank_quartiles,
    needs_review,
    thresholds_from_config,
    validate_workload,
    validation_notes,
)
from wl_cli.utils.parsing import InvalidTimeFormat


def _history(make_entry, hours: List[float], user_id=7, start_id: int = 100) -> List[WorkloadEntry]:
    return [
        make_entry(
            id=start_id + idx,
            date=date(2023, 12, 1 + idx),
            time_in="08:00",
            time_out="09:00",
            total_hours=value,
            activity=f"Session {idx}",
            user_id=user_id,
        )
        for idx, value in enumerate(hours)
    ]


def test_overlap_example_is_high_and_invalid(make_entry) -> None:
    entry = make_entry(id=1, time_in="09:00", time_out="10:30")
    existing = make_entry(id=2, time_in="10:00", time_out="11:00", total_hours=1.0, activity="Office hours")

    result = validate_workload(entry, [existing])

    assert [(issue.type, issue.severity) for issue in result.issues] == [
        (IssueType.OVERLAP, Severity.HIGH)
    ]
    assert result.is_valid is False
    assert result.confidence == 0.5
    assert "(10:00-11:00)" in result.issues[0].message
    assert len(result.issues[0].suggestions) == 3


def test_overlap_detected_when_entries_have_no_ids(make_entry) -> None:
    entry = make_entry(id=None)
    existing = make_entry(id=None, time_in="10:00", time_out="11:00", activity="Other")
    assert len(check_overlaps(entry, [existing])) == 1


def test_overlap_skips_entry_with_same_id(make_entry) -> None:
    entry = make_entry(id=5)
    assert check_overlaps(entry, [make_entry(id=5)]) == ()


def test_adjacent_ranges_do_not_overlap(make_entry) -> None:
    entry = make_entry()
    existing = make_entry(id=2, time_in="10:30", time_out="11:30")
    assert check_overlaps(entry, [existing]) == ()


def test_overlap_ignores_other_days(make_entry) -> None:
    entry = make_entry()
    existing = make_entry(id=2, date=date(2024, 1, 16))
    assert check_overlaps(entry, [existing]) == ()


def test_each_conflict_produces_its_own_issue(make_entry) -> None:
    entry = make_entry(time_in="09:00", time_out="12:00", total_hours=3.0)
    existing = [
        make_entry(id=2, time_in="08:30", time_out="09:30"),
        make_entry(id=3, time_in="11:00", time_out="13:00"),
        make_entry(id=4, time_in="12:00", time_out="13:00"),
    ]
    issues = check_overlaps(entry, existing)
    assert len(issues) == 2
    assert "(08:30-09:30)" in issues[0].message
    assert "(11:00-13:00)" in issues[1].message


def test_reversed_times_give_one_high_issue(make_entry) -> None:
    entry = make_entry(time_in="10:00", time_out="09:00", total_hours=1.0)
    issues = check_impossible_hours(entry)
    assert len(issues) == 1
    assert issues[0].type is IssueType.IMPOSSIBLE_HOURS
    assert issues[0].severity is Severity.HIGH
    assert issues[0].message == "End time must be after start time"


def test_equal_times_are_impossible(make_entry) -> None:
    entry = make_entry(time_in="09:00", time_out="09:00", total_hours=1.0)
    assert [issue.severity for issue in check_impossible_hours(entry)] == [Severity.HIGH]


def test_thirteen_hours_is_medium_not_high(make_entry) -> None:
    entry = make_entry(time_in="07:00", time_out="20:00", total_hours=13)
    issues = check_impossible_hours(entry)
    assert len(issues) == 1
    assert issues[0].severity is Severity.MEDIUM
    assert "exceeds 12 hours" in issues[0].message


def test_very_short_session_is_low(make_entry) -> None:
    entry = make_entry(time_in="09:00", time_out="09:06", total_hours=0.1)
    issues = check_impossible_hours(entry)
    assert len(issues) == 1
    assert issues[0].severity is Severity.LOW
    assert "less than 15 minutes" in issues[0].message


def test_impossible_hours_conditions_are_independent(make_entry) -> None:
    entry = make_entry(time_in="10:00", time_out="09:00", total_hours=13)
    assert [issue.severity for issue in check_impossible_hours(entry)] == [
        Severity.HIGH,
        Severity.MEDIUM,
    ]


def test_daily_total_over_sixteen_hours_is_high(make_entry) -> None:
    existing = [
        make_entry(id=2, time_in="00:00", time_out="05:00", total_hours=5, activity="Research"),
        make_entry(id=3, time_in="05:00", time_out="10:00", total_hours=5, activity="Lab"),
        make_entry(id=4, time_in="10:00", time_out="15:00", total_hours=5, activity="Grading"),
    ]
    entry = make_entry(id=1, time_in="15:00", time_out="17:00", total_hours=2, activity="Meeting")

    result = validate_workload(entry, existing)

    assert len(result.issues) == 1
    issue = result.issues[0]
    assert issue.type is IssueType.SUSPICIOUS_PATTERN
    assert issue.severity is Severity.HIGH
    assert "17.0" in issue.message
    assert result.is_valid is False


def test_daily_total_of_exactly_sixteen_is_fine(make_entry) -> None:
    existing = [make_entry(id=2, total_hours=14, activity="Other")]
    entry = make_entry(total_hours=2)
    assert check_suspicious_patterns(entry, existing) == ()


def test_duplicate_same_day_entry_is_medium(make_entry) -> None:
    existing = [make_entry(id=2, time_in="13:00", time_out="14:30", activity="Lecture on Graphs")]
    entry = make_entry(activity="lecture on graphs")
    issues = check_suspicious_patterns(entry, existing)
    assert len(issues) == 1
    assert issues[0].severity is Severity.MEDIUM
    assert issues[0].message == "Identical work entry already exists for this day"


def test_same_activity_different_hours_is_not_duplicate(make_entry) -> None:
    existing = [make_entry(id=2, total_hours=2.0)]
    assert check_suspicious_patterns(make_entry(), existing) == ()


def test_duplicates_produce_a_single_issue(make_entry) -> None:
    existing = [make_entry(id=2), make_entry(id=3)]
    issues = check_suspicious_patterns(make_entry(), existing)
    assert [issue.severity for issue in issues] == [Severity.MEDIUM]


def test_anomaly_with_nearest_rank_quartiles(make_entry) -> None:
    history = _history(make_entry, [1, 1, 1, 1, 10])
    entry = make_entry(time_in="08:00", time_out="18:00", total_hours=10)

    result = validate_workload(entry, history)

    assert [(issue.type, issue.severity) for issue in result.issues] == [
        (IssueType.ANOMALY, Severity.MEDIUM)
    ]
    assert result.is_valid is True
    assert result.confidence == 0.7


def test_duration_inside_fences_is_not_anomalous(make_entry) -> None:
    history = _history(make_entry, [1, 1, 1, 1, 10])
    assert detect_anomalies(make_entry(total_hours=1), history) == ()


def test_anomaly_skipped_with_fewer_than_five_entries(make_entry) -> None:
    history = _history(make_entry, [1, 1, 1, 1])
    assert detect_anomalies(make_entry(total_hours=11.5), history) == ()


def test_anomaly_needs_five_entries_for_the_same_user(make_entry) -> None:
    history = _history(make_entry, [1, 1], user_id=7) + _history(
        make_entry, [1, 1, 1], user_id=8, start_id=200
    )
    assert detect_anomalies(make_entry(total_hours=11.5), history) == ()


def test_anomaly_uses_only_same_user_history(make_entry) -> None:
    history = _history(make_entry, [2, 2, 2, 2, 2], user_id=7) + _history(
        make_entry, [10, 10, 10, 10, 10], user_id=8, start_id=200
    )
    issues = detect_anomalies(make_entry(total_hours=10), history)
    assert [issue.type for issue in issues] == [IssueType.ANOMALY]


def test_anomaly_excludes_the_entry_itself(make_entry) -> None:
    history = _history(make_entry, [1, 1, 1, 1])
    entry = make_entry(id=999, total_hours=10)
    # The stored copy of the entry must not count toward the user's history.
    assert detect_anomalies(entry, history + [entry]) == ()


def test_nearest_rank_quartiles_do_not_interpolate() -> None:
    assert nearest_rank_quartiles([4, 1, 3, 2]) == (2, 4)
    assert nearest_rank_quartiles([1, 1, 1, 1, 10]) == (1, 1)


def test_nearest_rank_quartiles_empty_raises() -> None:
    with pytest.raises(ValueError):
        nearest_rank_quartiles([])


def test_high_plus_medium_confidence(make_entry) -> None:
    entry = make_entry(activity="Grading papers")
    existing = [make_entry(id=2, time_in="09:30", time_out="11:00", activity="grading papers")]

    result = validate_workload(entry, existing)

    assert [issue.type for issue in result.issues] == [
        IssueType.OVERLAP,
        IssueType.SUSPICIOUS_PATTERN,
    ]
    assert result.confidence == 0.2
    assert result.is_valid is False


def test_confidence_never_drops_below_zero(make_entry) -> None:
    entry = make_entry(time_in="09:00", time_out="12:00", total_hours=3.0, activity="Other")
    existing = [
        make_entry(id=2, time_in="09:00", time_out="10:00", total_hours=1.0),
        make_entry(id=3, time_in="10:00", time_out="11:00", total_hours=1.0),
        make_entry(id=4, time_in="11:00", time_out="12:00", total_hours=1.0),
    ]
    assert validate_workload(entry, existing).confidence == 0.0


def test_issues_follow_check_order(make_entry) -> None:
    entry = make_entry(time_in="09:00", time_out="22:00", total_hours=13, activity="Marathon")
    existing = [make_entry(id=2, time_in="20:00", time_out="23:00", total_hours=4, activity="Other")]
    issues = validate_workload(entry, existing).issues
    assert [issue.type for issue in issues] == [
        IssueType.OVERLAP,
        IssueType.IMPOSSIBLE_HOURS,
        IssueType.SUSPICIOUS_PATTERN,
    ]


def test_clean_entry_is_valid_with_full_confidence(make_entry) -> None:
    result = validate_workload(make_entry(), [])
    assert result.is_valid is True
    assert result.issues == ()
    assert result.confidence == 1.0


def test_confident_classification_adds_suggestion(make_entry) -> None:
    result = validate_workload(make_entry(activity="Lecture class lesson"), [])
    assert result.suggestions == ("Activity appears to be: lecture (100% confidence)",)


def test_unsure_classification_adds_no_suggestion(make_entry) -> None:
    result = validate_workload(make_entry(activity="Delivered lecture"), [])
    assert result.suggestions == ()


@pytest.mark.parametrize(
    ("severities", "expected_valid"),
    [
        ([], True),
        ([Severity.LOW, Severity.MEDIUM], True),
        ([Severity.HIGH], False),
        ([Severity.LOW, Severity.HIGH], False),
    ],
)
def test_validity_tracks_high_severity(make_entry, severities, expected_valid) -> None:
    # Build entries that trigger exactly the requested severities.
    entry_kwargs = {}
    existing: List[WorkloadEntry] = []
    for severity in severities:
        if severity is Severity.LOW:
            entry_kwargs.update(time_in="09:00", time_out="09:10", total_hours=0.1)
        elif severity is Severity.MEDIUM:
            existing.extend(_history(make_entry, [1, 1, 1, 1, 1], start_id=60))
        elif severity is Severity.HIGH:
            existing.append(make_entry(id=70, time_in="08:00", time_out="12:00", activity="Other"))
    result = validate_workload(make_entry(**entry_kwargs), existing)
    assert result.is_valid is expected_valid
    assert result.is_valid is not any(issue.severity is Severity.HIGH for issue in result.issues)


def test_invalid_time_format_fails_fast(make_entry) -> None:
    with pytest.raises(InvalidTimeFormat):
        validate_workload(make_entry(time_in="9am"), [])


def test_invalid_time_in_existing_entry_fails_fast(make_entry) -> None:
    bad = make_entry(id=2, date=date(2024, 3, 1), time_out="25:00")
    with pytest.raises(InvalidTimeFormat):
        validate_workload(make_entry(), [bad])


def test_custom_thresholds_change_limits(make_entry) -> None:
    thresholds = ValidationThresholds(max_session_hours=8)
    entry = make_entry(time_in="08:00", time_out="18:00", total_hours=10)
    issues = validate_workload(entry, [], thresholds=thresholds).issues
    assert [issue.severity for issue in issues] == [Severity.MEDIUM]
    assert "exceeds 8 hours" in issues[0].message


def test_thresholds_from_config() -> None:
    thresholds = thresholds_from_config(
        {"validation": {"max_daily_hours": 10}, "classification": {"suggestion_threshold": 0.5}}
    )
    assert thresholds.max_daily_hours == 10
    assert thresholds.max_session_hours == 12
    assert thresholds.suggestion_confidence == 0.5


def test_validation_notes_join_messages() -> None:
    result = ValidationResult(
        is_valid=False,
        issues=(
            ValidationIssue(IssueType.OVERLAP, Severity.HIGH, "First"),
            ValidationIssue(IssueType.ANOMALY, Severity.MEDIUM, "Second"),
        ),
        confidence=0.2,
    )
    assert validation_notes(result) == "First; Second"
    assert needs_review(result) is True


def test_validation_notes_empty_is_none() -> None:
    result = ValidationResult(is_valid=True)
    assert validation_notes(result) is None
    assert needs_review(result) is False


def test_result_to_dict_uses_interchange_names(make_entry) -> None:
    existing = make_entry(id=2, time_in="10:00", time_out="11:00", activity="Other")
    payload = validate_workload(make_entry(), [existing]).to_dict()
    assert set(payload) == {"isValid", "issues", "confidence", "suggestions"}
    assert payload["issues"][0]["type"] == "overlap"
    assert payload["issues"][0]["severity"] == "high"
