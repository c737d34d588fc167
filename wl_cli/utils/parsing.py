"""Parsing helpers for time-entry records and input files."""

from __future__ import annotations

import json
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from wl_cli.core.constants import CATEGORIES
from wl_cli.core.models import WorkloadEntry

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class InvalidTimeFormat(ValueError):
    """Raised when a time-of-day is not parseable as H:MM or HH:MM."""


class EntryFormatError(ValueError):
    """Raised when an entry record is missing fields or has malformed values."""


def parse_time(value: str) -> int:
    """Parse 'HH:MM' into minutes since midnight."""
    match = _TIME_RE.match(str(value).strip()) if value is not None else None
    if not match:
        raise InvalidTimeFormat(f"Invalid time '{value}'. Expected format: HH:MM (e.g. 09:30)")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(f"Invalid time '{value}'. Hours must be 0-23 and minutes 0-59")
    return hours * 60 + minutes


def calculate_hours(time_in: str, time_out: str) -> float:
    """Hours between two times of day, rounded to two decimals (0 when reversed)."""
    minutes = parse_time(time_out) - parse_time(time_in)
    if minutes <= 0:
        return 0.0
    return round(minutes / 60, 2)


def parse_entry_date(value: Any) -> date:
    """Parse a date, datetime or ISO 'YYYY-MM-DD[...]' string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError as exc:
        raise EntryFormatError(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD (e.g. 2024-01-15)"
        ) from exc


def _pick(record: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _time_text(value: Any) -> str:
    # YAML 1.1 loads unquoted 10:30 as the base-60 integer 630.
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value // 60:02d}:{value % 60:02d}"
    return str(value).strip()


def entry_from_record(record: Dict[str, Any]) -> WorkloadEntry:
    """Build a WorkloadEntry from a camelCase or snake_case mapping.

    Missing ``totalHours`` is derived from the times. Times are validated
    here so malformed input fails before any check runs.
    """
    raw_date = _pick(record, "date", "workDate")
    time_in = _pick(record, "timeIn", "time_in")
    time_out = _pick(record, "timeOut", "time_out")
    activity = _pick(record, "activity")
    user_id = _pick(record, "userId", "user_id")

    missing = [
        name
        for name, value in (
            ("date", raw_date),
            ("timeIn", time_in),
            ("timeOut", time_out),
            ("activity", activity),
            ("userId", user_id),
        )
        if value is None
    ]
    if missing:
        raise EntryFormatError(f"Entry is missing required fields: {', '.join(missing)}")

    time_in = _time_text(time_in)
    time_out = _time_text(time_out)
    parse_time(time_in)
    parse_time(time_out)

    raw_hours = _pick(record, "totalHours", "total_hours", "hours")
    if raw_hours is None:
        total_hours = calculate_hours(time_in, time_out)
    else:
        try:
            total_hours = float(raw_hours)
        except (TypeError, ValueError) as exc:
            raise EntryFormatError(f"Invalid totalHours '{raw_hours}'") from exc
        if total_hours < 0:
            raise EntryFormatError(f"totalHours must be non-negative, got {total_hours}")

    category = _pick(record, "category")
    if category is not None and category not in CATEGORIES:
        raise EntryFormatError(
            f"Unknown category '{category}'. Expected one of: {', '.join(CATEGORIES)}"
        )

    subject = _pick(record, "subject")
    if isinstance(subject, dict):
        subject = subject.get("name") or subject.get("code")

    return WorkloadEntry(
        id=_pick(record, "id"),
        date=parse_entry_date(raw_date),
        time_in=time_in,
        time_out=time_out,
        total_hours=total_hours,
        activity=str(activity),
        user_id=user_id,
        subject=str(subject) if subject is not None else None,
        category=category,
    )


def load_entries_input(file_path: Optional[Path]) -> List[Dict[str, Any]]:
    """Load entry record(s) from a JSON or YAML file.

    Accepts a single object, a list of objects or ``{"entries": [...]}``.
    """
    if file_path is None:
        return []

    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise EntryFormatError(f"{file_path} is not valid UTF-8 text: {exc}") from exc
    if not text.strip():
        return []
    if file_path.suffix.lower() in {".yaml", ".yml"}:
        raw_data = yaml.safe_load(text)
    else:
        try:
            raw_data = json.loads(text)
        except json.JSONDecodeError:
            raw_data = yaml.safe_load(text)

    if isinstance(raw_data, dict) and isinstance(raw_data.get("entries"), list):
        raw_data = raw_data["entries"]
    if isinstance(raw_data, dict):
        return [raw_data]
    if isinstance(raw_data, list):
        return [item for item in raw_data if isinstance(item, dict)]
    return []


def load_entries(file_path: Optional[Path]) -> List[WorkloadEntry]:
    """Load and convert entry records from a file."""
    return [entry_from_record(record) for record in load_entries_input(file_path)]
