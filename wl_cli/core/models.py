"""Lightweight data models shared by the classifier and validator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

EntryId = Union[int, str]


class Category(str, Enum):
    LECTURE = "lecture"
    LAB = "lab"
    EVALUATION = "evaluation"
    ADMIN_WORK = "admin_work"
    RESEARCH_WORK = "research_work"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IssueType(str, Enum):
    OVERLAP = "overlap"
    IMPOSSIBLE_HOURS = "impossible_hours"
    SUSPICIOUS_PATTERN = "suspicious_pattern"
    ANOMALY = "anomaly"


@dataclass(frozen=True)
class WorkloadEntry:
    """A single time entry as supplied by the caller."""

    date: date
    time_in: str
    time_out: str
    total_hours: float
    activity: str
    user_id: EntryId
    id: Optional[EntryId] = None
    subject: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "timeIn": self.time_in,
            "timeOut": self.time_out,
            "totalHours": self.total_hours,
            "activity": self.activity,
            "userId": self.user_id,
            "subject": self.subject,
            "category": self.category,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """Category inferred for an activity, with a confidence in [0, 1]."""

    category: Category
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category.value, "confidence": self.confidence}


@dataclass(frozen=True)
class ValidationIssue:
    type: IssueType
    severity: Severity
    message: str
    suggestions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class ValidationResult:
    """Aggregated outcome of all validation checks for one entry."""

    is_valid: bool
    issues: Tuple[ValidationIssue, ...] = ()
    confidence: float = 1.0
    suggestions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "issues": [issue.to_dict() for issue in self.issues],
            "confidence": self.confidence,
            "suggestions": list(self.suggestions),
        }
