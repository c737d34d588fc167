"""Static constants and mappings for the workload engine."""

from __future__ import annotations

CATEGORIES = ("lecture", "lab", "evaluation", "admin_work", "research_work")
SEVERITIES = ("low", "medium", "high")
ISSUE_TYPES = ("overlap", "impossible_hours", "suspicious_pattern", "anomaly")

# Order is the tie-break priority.
CATEGORY_RULES = [
    (
        "lecture",
        [
            "lecture",
            "teach",
            "class",
            "lesson",
            "instruction",
            "seminar",
            "tutorial",
            "deliver",
            "present",
            "explain",
            "demonstrate",
            "conduct",
            "course",
            "subject",
        ],
    ),
    (
        "lab",
        [
            "lab",
            "laboratory",
            "practical",
            "experiment",
            "workshop",
            "hands-on",
            "demonstration",
            "session",
            "exercise",
            "project work",
            "technical",
        ],
    ),
    (
        "evaluation",
        [
            "exam",
            "test",
            "assessment",
            "evaluation",
            "grading",
            "marking",
            "checking",
            "correction",
            "paper",
            "quiz",
            "viva",
            "practical exam",
            "oral test",
        ],
    ),
    (
        "admin_work",
        [
            "meeting",
            "committee",
            "administrative",
            "coordination",
            "planning",
            "scheduling",
            "documentation",
            "report",
            "department work",
            "faculty meeting",
        ],
    ),
    (
        "research_work",
        [
            "research",
            "publication",
            "paper",
            "journal",
            "conference",
            "project",
            "innovation",
            "development",
            "study",
            "investigation",
            "analysis",
        ],
    ),
]

CATEGORY_LABELS = {
    "lecture": "Lecture",
    "lab": "Lab",
    "evaluation": "Evaluation",
    "admin_work": "Admin Work",
    "research_work": "Research Work",
}

DEFAULT_CATEGORY = "lecture"
MIN_CONFIDENCE = 0.3
KEYWORDS_FOR_FULL_CONFIDENCE = 3

DEFAULT_VALIDATION_THRESHOLDS = {
    "max_session_hours": 12.0,
    "min_session_hours": 0.25,
    "max_daily_hours": 16.0,
    "anomaly_min_entries": 5,
    "iqr_multiplier": 1.5,
}

SUGGESTION_CONFIDENCE_THRESHOLD = 0.7

SEVERITY_PENALTIES = {"high": 0.5, "medium": 0.3}
