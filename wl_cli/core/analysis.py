"""Workload summary: hours by category and by ISO week."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from wl_cli.core.classify import Rules, classify
from wl_cli.core.constants import CATEGORIES, CATEGORY_LABELS, CATEGORY_RULES
from wl_cli.core.models import WorkloadEntry


def get_week_key(day: date) -> str:
    iso = day.isocalendar()
    return f"{iso[0]}-W{iso[1]:02d}"


def get_week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def entry_category(entry: WorkloadEntry, rules: Rules = CATEGORY_RULES) -> str:
    """Declared category when it is a known one, otherwise the classified one."""
    if entry.category in CATEGORIES:
        return str(entry.category)
    return classify(entry.activity, rules).category.value


def _empty_categories() -> Dict[str, float]:
    return {category: 0.0 for category in CATEGORIES}


def build_summary(
    entries: Iterable[WorkloadEntry],
    user_id: Optional[Any] = None,
    rules: Rules = CATEGORY_RULES,
) -> Dict[str, Any]:
    """Aggregate entries into a category/week report payload."""
    by_category = _empty_categories()
    sessions_by_category: Dict[str, int] = {category: 0 for category in CATEGORIES}
    weeks: Dict[str, Dict[str, Any]] = defaultdict(
        lambda: {
            "week": "",
            "start_date": "",
            "end_date": "",
            "total_hours": 0.0,
            "sessions": 0,
            "by_category": _empty_categories(),
        }
    )

    dates: List[date] = []
    for entry in entries:
        if user_id is not None and str(entry.user_id) != str(user_id):
            continue

        category = entry_category(entry, rules)
        by_category[category] += entry.total_hours
        sessions_by_category[category] += 1
        dates.append(entry.date)

        week_start = get_week_start(entry.date)
        bucket = weeks[get_week_key(entry.date)]
        bucket["week"] = get_week_key(entry.date)
        bucket["start_date"] = week_start.isoformat()
        bucket["end_date"] = (week_start + timedelta(days=6)).isoformat()
        bucket["total_hours"] += entry.total_hours
        bucket["sessions"] += 1
        bucket["by_category"][category] += entry.total_hours

    total_hours = sum(by_category.values())
    ordered = [weeks[key] for key in sorted(weeks.keys())]

    return {
        "date_range": {
            "start": min(dates).isoformat() if dates else None,
            "end": max(dates).isoformat() if dates else None,
        },
        "by_category": {
            category: {
                "hours": hours,
                "sessions": sessions_by_category[category],
                "pct": (hours / total_hours * 100) if total_hours else 0,
            }
            for category, hours in by_category.items()
        },
        "weeks": ordered,
        "summary": {
            "total_hours": total_hours,
            "total_sessions": len(dates),
            "total_weeks": len(ordered),
            "avg_weekly_hours": total_hours / len(ordered) if ordered else 0,
        },
    }


def summary_to_markdown(report: Dict[str, Any]) -> str:
    """Render a summary payload to markdown."""
    lines: List[str] = ["# Workload Summary", ""]
    summary = report.get("summary", {})
    date_range = report.get("date_range", {})

    if date_range.get("start"):
        lines.append(f"**Range:** {date_range['start']} to {date_range['end']}")
    lines.append(f"**Total hours:** {summary.get('total_hours', 0):.1f}")
    lines.append(f"**Sessions:** {summary.get('total_sessions', 0)}")
    lines.append(f"**Average weekly hours:** {summary.get('avg_weekly_hours', 0):.1f}")
    lines.append("")

    lines.append("## By Category")
    for category, metrics in report.get("by_category", {}).items():
        if not metrics["sessions"]:
            continue
        lines.append(
            f"- **{CATEGORY_LABELS.get(category, category)}:** {metrics['hours']:.1f}h "
            f"({metrics['pct']:.0f}%, {metrics['sessions']} sessions)"
        )
    lines.append("")

    for week in report.get("weeks", []):
        lines.append(f"## {week['week']} ({week['start_date']} to {week['end_date']})")
        lines.append(f"**Total:** {week['total_hours']:.1f}h | {week['sessions']} sessions")
        parts = [
            f"{CATEGORY_LABELS.get(category, category)}: {hours:.1f}h"
            for category, hours in week["by_category"].items()
            if hours
        ]
        if parts:
            lines.append(f"- Distribution: {' | '.join(parts)}")
        lines.append("")

    return "\n".join(lines).strip() + "\n"
